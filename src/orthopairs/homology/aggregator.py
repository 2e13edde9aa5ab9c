"""Fold ortholog records into protein-homolog and gene-protein tables."""

from pathlib import Path
from typing import Collection, Iterable

import structlog

from orthopairs.exceptions import ConfigurationError
from orthopairs.homology.models import HomologTable, OrthologRecord
from orthopairs.homology.parser import iter_ortholog_records

logger = structlog.get_logger()


class HomologAggregator:
    """Accumulates the two homolog tables of a release run.

    Attributes:
        protein_homologs: {target species: {source protein: {target proteins}}}
        gene_proteins: {target species: {target gene: {target proteins}}}
        record_count: Number of records folded in so far
    """

    def __init__(self):
        self.protein_homologs = HomologTable()
        self.gene_proteins = HomologTable()
        self.record_count = 0

    def add(self, record: OrthologRecord) -> None:
        """Apply one record to both tables with the same precedence rule."""
        self.protein_homologs.add(
            record.target_species,
            record.source_protein,
            record.target_protein,
            record.ortholog_type,
        )
        self.gene_proteins.add(
            record.target_species,
            record.target_gene,
            record.target_protein,
            record.ortholog_type,
        )
        self.record_count += 1

    def add_all(self, records: Iterable[OrthologRecord]) -> "HomologAggregator":
        for record in records:
            self.add(record)
        return self


def aggregate_ortholog_files(
    paths: Iterable[Path | str],
    source_species: str,
    target_species: Collection[str],
) -> HomologAggregator:
    """Parse every dump file and aggregate the accepted records.

    The same homology can appear in several dumps (QfO and HCOP overlap);
    the set semantics of the tables absorb the duplicates.

    Args:
        paths: Plain-text PANTHER dump files
        source_species: PANTHER name of the source species
        target_species: PANTHER names of the target species

    Returns:
        HomologAggregator holding both tables

    Raises:
        ConfigurationError: If a dump file does not exist
        OrthologFileFormatError: If a dump file contains a malformed line
    """
    aggregator = HomologAggregator()
    target_species = frozenset(target_species)

    for path in paths:
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Ortholog file not found: {path}")

        logger.info("aggregate_file_start", path=str(path), source_species=source_species)
        aggregator.add_all(iter_ortholog_records(path, source_species, target_species))

    logger.info(
        "aggregate_complete",
        record_count=aggregator.record_count,
        species_count=len(aggregator.protein_homologs.species()),
    )
    return aggregator
