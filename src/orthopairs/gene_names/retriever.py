"""Gene-name enrichment for one target species.

Collects the UniProt accessions of a species' protein-homolog mapping,
splits them into batches that respect the ID mapping request limit, runs one
job per batch and merges the results into an accession -> gene name table.
"""

from typing import Iterable, Mapping

import structlog

from orthopairs.config.schema import APIConfig
from orthopairs.gene_names.batching import (
    DEFAULT_BATCH_SIZE,
    extract_uniprot_accessions,
    partition_accessions,
)
from orthopairs.gene_names.client import EnrichmentJobClient
from orthopairs.gene_names.models import EnrichmentReport
from orthopairs.gene_names.service import UniProtIdMappingService

logger = structlog.get_logger()


class GeneNameRetriever:
    """Sequences batching and job execution for a species.

    Batches run strictly one after another. If any batch fails, the
    EnrichmentFailedError propagates and no partial table is returned.
    """

    def __init__(self, client: EnrichmentJobClient, batch_size: int = DEFAULT_BATCH_SIZE):
        self.client = client
        self.batch_size = batch_size

    def retrieve_accessions(
        self,
        accessions: Iterable[str],
    ) -> tuple[dict[str, str], EnrichmentReport]:
        """Resolve gene names for a set of accessions.

        Returns:
            Tuple of (gene_names, report)
            - gene_names: accession -> primary gene name; accessions without
              a primary gene name are absent
            - report: Summary statistics for the species

        Raises:
            EnrichmentFailedError: If a batch exhausts its retry budget
        """
        accessions = set(accessions)
        batches = partition_accessions(accessions, self.batch_size)
        total_batches = len(batches)
        logger.info(
            "gene_name_retrieval_start",
            accession_count=len(accessions),
            batch_count=total_batches,
            batch_size=self.batch_size,
        )

        gene_names: dict[str, str] = {}
        for batch_num, batch in enumerate(batches, start=1):
            logger.info(
                "gene_name_batch_start",
                batch=batch_num,
                total_batches=total_batches,
                batch_size=len(batch),
            )
            job = self.client.run(batch)
            gene_names.update(job.results)
            logger.info(
                "gene_name_batch_complete",
                batch=batch_num,
                job_id=job.job_id,
                names_returned=len(job.results),
                polls=job.poll_count,
            )

        unmapped = sorted(accessions - gene_names.keys())
        report = EnrichmentReport(
            total_accessions=len(accessions),
            mapped=len(accessions) - len(unmapped),
            batch_count=total_batches,
            unmapped_ids=unmapped,
        )
        logger.info(
            "gene_name_retrieval_complete",
            mapped=report.mapped,
            total=report.total_accessions,
            success_rate=round(report.success_rate, 3),
        )
        return gene_names, report

    def retrieve(
        self,
        protein_homologs: Mapping[str, Iterable[str]],
    ) -> tuple[dict[str, str], EnrichmentReport]:
        """Resolve gene names for every UniProt accession in a homolog mapping."""
        accessions = extract_uniprot_accessions(protein_homologs)
        logger.info("uniprot_accessions_found", accession_count=len(accessions))
        return self.retrieve_accessions(accessions)

    @classmethod
    def from_config(
        cls,
        config: APIConfig,
        service: UniProtIdMappingService | None = None,
    ) -> "GeneNameRetriever":
        """Create a retriever, building the HTTP transport unless one is given."""
        if service is None:
            service = UniProtIdMappingService.from_config(config)
        client = EnrichmentJobClient.from_config(service, config)
        return cls(client, batch_size=config.batch_size)
