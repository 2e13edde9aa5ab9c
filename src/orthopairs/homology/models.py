"""Data models for PANTHER ortholog records and the aggregated homolog tables."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator


# Prefix marking PANTHER gene fields that hold display names rather than IDs
# (Gene, GeneID, Gene_Name, Gene_ORFName, Gene_OrderedLocusName)
GENE_NAME_PLACEHOLDER_PREFIX = "Gene"

LEAST_DIVERGED_TYPE_CODE = "LDO"


class OrthologType(str, Enum):
    """Accepted PANTHER ortholog relationship kinds."""

    LEAST_DIVERGED = "LDO"
    ORTHOLOG = "O"

    @classmethod
    def classify(cls, type_code: str) -> "OrthologType | None":
        """Map a PANTHER type column value to an accepted kind.

        Only codes containing "O" are orthologs; paralogs (P), xenologs (X)
        and least-diverged xenologs (LDX) return None.
        """
        if type_code == LEAST_DIVERGED_TYPE_CODE:
            return cls.LEAST_DIVERGED
        if "O" in type_code:
            return cls.ORTHOLOG
        return None


@dataclass(frozen=True)
class OrthologRecord:
    """One accepted line of a PANTHER ortholog dump.

    Identifier fields keep the raw PANTHER segment, e.g. ``UniProtKB=Q8CCP0``
    or ``MGI=MGI=1918305``.
    """

    source_species: str
    source_gene: str
    source_protein: str
    target_species: str
    target_gene: str
    target_protein: str
    ortholog_type: OrthologType

    @property
    def is_least_diverged(self) -> bool:
        return self.ortholog_type is OrthologType.LEAST_DIVERGED


class HomologTable:
    """Per-species multi-valued mapping with least-diverged precedence.

    Structure: {target_species: {key: {values}}}. Keys that have received a
    least-diverged value are tracked separately; once a key is marked, its
    value set holds only least-diverged values.
    """

    def __init__(self):
        self._entries: dict[str, dict[str, set[str]]] = {}
        self._least_diverged: dict[str, set[str]] = {}

    def add(self, species: str, key: str, value: str, ortholog_type: OrthologType) -> None:
        """Insert one (key, value) pair under the least-diverged precedence rule.

        - first value for a key starts a new set
        - ordinary orthologs accumulate until a least-diverged one arrives
        - the first least-diverged value replaces everything collected so far
        - further least-diverged values are kept alongside it
        - ordinary values for a least-diverged key are dropped
        """
        species_entries = self._entries.setdefault(species, {})
        marked = self._least_diverged.setdefault(species, set())
        values = species_entries.get(key)

        if ortholog_type is OrthologType.LEAST_DIVERGED:
            if values is None or key not in marked:
                species_entries[key] = {value}
                marked.add(key)
            else:
                values.add(value)
        elif key not in marked:
            if values is None:
                species_entries[key] = {value}
            else:
                values.add(value)

    def get(self, species: str) -> dict[str, set[str]]:
        """Mapping for one target species (empty if the species had no records)."""
        return self._entries.get(species, {})

    def is_least_diverged(self, species: str, key: str) -> bool:
        return key in self._least_diverged.get(species, ())

    def species(self) -> list[str]:
        return sorted(self._entries)

    def pair_count(self, species: str) -> int:
        return sum(len(values) for values in self.get(species).values())

    def __contains__(self, species: str) -> bool:
        return species in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
