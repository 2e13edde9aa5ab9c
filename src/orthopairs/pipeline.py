"""Release run: PANTHER dumps in, per-species mapping files out.

For every target species (all configured species except the source) the run
writes, under <output_dir>/<release_number>/:

- {source}_{target}_mapping.tsv       source protein -> target protein
- {target}_gene_protein_mapping.tsv   target gene -> target protein
- {target}_gene_name_mapping.tsv      UniProt accession -> primary gene name
"""

from dataclasses import dataclass, field
from pathlib import Path

import structlog

from orthopairs.acquisition import resolve_ortholog_files
from orthopairs.config.schema import OrthopairsConfig
from orthopairs.config.species import SpeciesRegistry, load_species_registry
from orthopairs.gene_names import GeneNameRetriever, UniProtIdMappingService
from orthopairs.gene_names.models import EnrichmentReport
from orthopairs.homology import HomologAggregator, aggregate_ortholog_files
from orthopairs.output import write_gene_name_file, write_mapping_file
from orthopairs.persistence import ProvenanceTracker

logger = structlog.get_logger()


def protein_homology_filename(source_key: str, target_key: str) -> str:
    return f"{source_key}_{target_key}_mapping.tsv"


def gene_protein_filename(target_key: str) -> str:
    return f"{target_key}_gene_protein_mapping.tsv"


def gene_name_filename(target_key: str) -> str:
    return f"{target_key}_gene_name_mapping.tsv"


@dataclass
class SpeciesOutput:
    """Files and counts produced for one target species."""

    species_key: str
    display_name: str
    protein_homology_path: Path
    gene_protein_path: Path
    protein_homology_lines: int
    gene_protein_lines: int
    gene_name_path: Path | None = None
    gene_name_lines: int = 0
    enrichment: EnrichmentReport | None = None


@dataclass
class ReleaseSummary:
    """Outcome of a release run."""

    release_dir: Path
    record_count: int
    species: list[SpeciesOutput] = field(default_factory=list)


def write_species_files(
    aggregator: HomologAggregator,
    registry: SpeciesRegistry,
    source_key: str,
    target_key: str,
    release_dir: Path,
    retriever: GeneNameRetriever | None = None,
) -> SpeciesOutput:
    """Write the mapping files of one target species.

    The homology files are written first; the gene-name file is written only
    once every enrichment batch has succeeded.

    Raises:
        EnrichmentFailedError: If gene-name retrieval fails
    """
    panther_name = registry.panther_name(target_key)
    display_name = registry.display_name(target_key)
    logger.info("species_files_start", species=target_key, display_name=display_name)

    protein_homologs = aggregator.protein_homologs.get(panther_name)
    gene_proteins = aggregator.gene_proteins.get(panther_name)

    protein_path = release_dir / protein_homology_filename(source_key, target_key)
    gene_protein_path = release_dir / gene_protein_filename(target_key)
    output = SpeciesOutput(
        species_key=target_key,
        display_name=display_name,
        protein_homology_path=protein_path,
        gene_protein_path=gene_protein_path,
        protein_homology_lines=write_mapping_file(protein_homologs, protein_path),
        gene_protein_lines=write_mapping_file(gene_proteins, gene_protein_path),
    )

    if retriever is not None:
        logger.info("gene_names_start", species=target_key, display_name=display_name)
        gene_name_path = release_dir / gene_name_filename(target_key)
        # A file left over from an earlier attempt must not survive a failed run
        gene_name_path.unlink(missing_ok=True)
        gene_names, report = retriever.retrieve(protein_homologs)
        output.gene_name_path = gene_name_path
        output.gene_name_lines = write_gene_name_file(gene_names, gene_name_path)
        output.enrichment = report

    return output


def run_release(
    config: OrthopairsConfig,
    service: UniProtIdMappingService | None = None,
    provenance: ProvenanceTracker | None = None,
    registry: SpeciesRegistry | None = None,
    skip_gene_names: bool = False,
) -> ReleaseSummary:
    """Produce every mapping file of a release.

    Args:
        config: Pipeline configuration
        service: ID mapping transport (built from config.api if None)
        provenance: Tracker to record steps in (optional)
        registry: Species registry (loaded from config.species_config if None)
        skip_gene_names: Write only the homology files

    Raises:
        ConfigurationError: Unknown source species or missing input files
        OrthologFileFormatError: Corrupt PANTHER dump
        EnrichmentFailedError: Gene-name retrieval failed for a species
    """
    if registry is None:
        registry = load_species_registry(config.species_config)

    source_key = config.source_species
    source_panther_name = registry.panther_name(source_key)
    target_keys = registry.target_keys(source_key)

    release_dir = config.release_dir
    release_dir.mkdir(parents=True, exist_ok=True)
    logger.info(
        "release_run_start",
        release=config.release_number,
        source_species=source_key,
        target_species_count=len(target_keys),
    )

    ortholog_files = resolve_ortholog_files(
        config.panther_files, config.data_dir, base_url=config.panther_base_url
    )
    aggregator = aggregate_ortholog_files(
        ortholog_files,
        source_panther_name,
        registry.target_panther_names(source_key),
    )
    if provenance is not None:
        provenance.record_step("parse_ortholog_files", {
            "files": [str(p) for p in ortholog_files],
            "record_count": aggregator.record_count,
        })

    retriever = None
    owns_service = False
    if not skip_gene_names:
        if service is None:
            service = UniProtIdMappingService.from_config(config.api)
            owns_service = True
        retriever = GeneNameRetriever.from_config(config.api, service=service)

    summary = ReleaseSummary(release_dir=release_dir, record_count=aggregator.record_count)
    try:
        for target_key in target_keys:
            output = write_species_files(
                aggregator, registry, source_key, target_key, release_dir, retriever
            )
            summary.species.append(output)

            if provenance is not None:
                details = {
                    "protein_homology_lines": output.protein_homology_lines,
                    "gene_protein_lines": output.gene_protein_lines,
                }
                if output.enrichment is not None:
                    details["gene_name_lines"] = output.gene_name_lines
                    details["gene_name_success_rate"] = f"{output.enrichment.success_rate:.1%}"
                provenance.record_step(f"write_{target_key}", details)
    finally:
        if owns_service:
            service.close()

    logger.info("release_run_complete", release_dir=str(release_dir), species=len(summary.species))
    return summary
