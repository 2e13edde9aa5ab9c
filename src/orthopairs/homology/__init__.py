"""Homology module.

Parses PANTHER ortholog dumps and aggregates them into per-species
protein-homolog and gene-protein tables with least-diverged precedence.
"""

from orthopairs.homology.models import (
    HomologTable,
    OrthologRecord,
    OrthologType,
)
from orthopairs.homology.parser import (
    iter_ortholog_records,
    parse_ortholog_line,
)
from orthopairs.homology.aggregator import (
    HomologAggregator,
    aggregate_ortholog_files,
)

__all__ = [
    "HomologTable",
    "OrthologRecord",
    "OrthologType",
    "iter_ortholog_records",
    "parse_ortholog_line",
    "HomologAggregator",
    "aggregate_ortholog_files",
]
