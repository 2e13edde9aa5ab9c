"""Gene-name enrichment module.

Extracts UniProt accessions from homolog mappings, batches them, and resolves
primary gene names through the UniProt ID mapping job API.
"""

from orthopairs.gene_names.batching import (
    extract_uniprot_accessions,
    partition_accessions,
)
from orthopairs.gene_names.client import (
    EnrichmentJobClient,
    parse_gene_name_lines,
)
from orthopairs.gene_names.models import (
    EnrichmentJob,
    EnrichmentReport,
    JobState,
    JobStatus,
)
from orthopairs.gene_names.retriever import GeneNameRetriever
from orthopairs.gene_names.service import UniProtIdMappingService

__all__ = [
    "extract_uniprot_accessions",
    "partition_accessions",
    "EnrichmentJobClient",
    "parse_gene_name_lines",
    "EnrichmentJob",
    "EnrichmentReport",
    "JobState",
    "JobStatus",
    "GeneNameRetriever",
    "UniProtIdMappingService",
]
