"""Parse PANTHER ortholog dump lines into OrthologRecords.

Sample line (tab-separated)::

    HUMAN|HGNC=10663|UniProtKB=O60524  MOUSE|MGI=MGI=1918305|UniProtKB=Q8CCP0  LDO  Euarchontoglires  PTHR15239

Columns: source species/gene/protein, target species/gene/protein, ortholog
type, last common ancestor, PANTHER family. Only the first three are used.
"""

from pathlib import Path
from typing import Collection, Iterator

import structlog

from orthopairs.exceptions import OrthologFileFormatError
from orthopairs.homology.models import (
    GENE_NAME_PLACEHOLDER_PREFIX,
    OrthologRecord,
    OrthologType,
)

logger = structlog.get_logger()

MIN_FIELD_COUNT = 3


def _split_species_field(field: str) -> tuple[str, str, str]:
    parts = field.split("|")
    if len(parts) != 3 or not all(parts):
        raise ValueError(f"expected SPECIES|GENE|PROTEIN, got {field!r}")
    return parts[0], parts[1], parts[2]


def parse_ortholog_line(
    line: str,
    source_species: str,
    target_species: Collection[str],
) -> OrthologRecord | None:
    """Parse one dump line, returning None for lines outside the run's scope.

    Args:
        line: Raw line (trailing newline allowed)
        source_species: PANTHER name of the source species (e.g. HUMAN)
        target_species: PANTHER names of the species of interest

    Returns:
        OrthologRecord for accepted lines, None for rejected ones (other
        species, gene display names, paralogs and other non-ortholog kinds)

    Raises:
        ValueError: If the line is malformed
    """
    fields = line.rstrip("\r\n").split("\t")
    if len(fields) < MIN_FIELD_COUNT:
        raise ValueError(
            f"expected at least {MIN_FIELD_COUNT} tab-separated fields, got {len(fields)}"
        )

    source_tag, source_gene, source_protein = _split_species_field(fields[0])
    target_tag, target_gene, target_protein = _split_species_field(fields[1])
    type_code = fields[2].strip()
    if not type_code:
        raise ValueError("empty ortholog type field")

    if source_tag != source_species or target_tag not in target_species:
        return None

    if source_gene.startswith(GENE_NAME_PLACEHOLDER_PREFIX) or target_gene.startswith(
        GENE_NAME_PLACEHOLDER_PREFIX
    ):
        return None

    ortholog_type = OrthologType.classify(type_code)
    if ortholog_type is None:
        return None

    return OrthologRecord(
        source_species=source_tag,
        source_gene=source_gene,
        source_protein=source_protein,
        target_species=target_tag,
        target_gene=target_gene,
        target_protein=target_protein,
        ortholog_type=ortholog_type,
    )


def iter_ortholog_records(
    path: Path | str,
    source_species: str,
    target_species: Collection[str],
) -> Iterator[OrthologRecord]:
    """Stream accepted records from one PANTHER dump file.

    Raises:
        OrthologFileFormatError: On the first malformed line
    """
    path = Path(path)
    target_species = frozenset(target_species)

    line_count = 0
    accepted = 0
    with open(path, encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            line_count = line_number
            if not line.strip():
                continue

            try:
                record = parse_ortholog_line(line, source_species, target_species)
            except ValueError as e:
                raise OrthologFileFormatError(str(e), path=path, line_number=line_number) from e

            if record is not None:
                accepted += 1
                yield record

    logger.info(
        "ortholog_file_parsed",
        path=str(path),
        line_count=line_count,
        accepted_records=accepted,
    )
