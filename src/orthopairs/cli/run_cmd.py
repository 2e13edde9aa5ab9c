"""Run command: produce the orthopairs files of a release.

Orchestrates the full release flow:
1. Load config and species registry
2. Resolve (download/extract) the PANTHER dumps
3. Parse and aggregate homologs
4. Write protein homology and gene-protein files per species
5. Retrieve gene names from UniProt and write gene name files
6. Save provenance sidecar
"""

import logging
import sys

import click

from orthopairs.config.loader import load_config_with_overrides
from orthopairs.exceptions import EnrichmentFailedError, OrthopairsError
from orthopairs.persistence import ProvenanceTracker
from orthopairs.pipeline import run_release

logger = logging.getLogger(__name__)


@click.command('run')
@click.option(
    '--release',
    type=int,
    default=None,
    help='Override the release number from the config file'
)
@click.option(
    '--source-species',
    default=None,
    help='Species key to map from (default: config value, normally hsap)'
)
@click.option(
    '--skip-gene-names',
    is_flag=True,
    help='Only write homology files; do not query UniProt for gene names'
)
@click.pass_context
def run(ctx, release, source_species, skip_gene_names):
    """Generate protein homology, gene-protein and gene name files.

    Examples:

        # Full release run
        orthopairs --config config/default.yaml run

        # Map from mouse instead of human
        orthopairs run --source-species mmus
    """
    config_path = ctx.obj['config_path']
    click.echo(click.style("=== Orthopairs Release Run ===", bold=True))
    click.echo()

    overrides = {}
    if release is not None:
        overrides['release_number'] = release
    if source_species is not None:
        overrides['source_species'] = source_species

    try:
        click.echo("Loading configuration...")
        config = load_config_with_overrides(config_path, overrides)
        click.echo(click.style(f"  Config loaded: {config_path}", fg='green'))
        click.echo(f"  Release: {config.release_number}")
        click.echo(f"  Source Species: {config.source_species}")
        click.echo()

        provenance = ProvenanceTracker.from_config(config)

        click.echo("Generating orthopairs files...")
        summary = run_release(
            config,
            provenance=provenance,
            skip_gene_names=skip_gene_names,
        )

        for output in summary.species:
            line = (
                f"  {output.display_name} ({output.species_key}): "
                f"{output.protein_homology_lines} homolog pairs, "
                f"{output.gene_protein_lines} gene-protein pairs"
            )
            if output.enrichment is not None:
                line += (
                    f", {output.gene_name_lines} gene names "
                    f"({output.enrichment.success_rate:.1%})"
                )
            click.echo(line)
        click.echo()

        provenance_path = provenance.save_sidecar(summary.release_dir)
        click.echo(click.style(f"  Provenance saved: {provenance_path}", fg='green'))
        click.echo()

        click.echo(click.style("=== Run Summary ===", bold=True))
        click.echo(f"Ortholog Records: {summary.record_count}")
        click.echo(f"Species: {len(summary.species)}")
        click.echo(f"Output Directory: {summary.release_dir}")
        click.echo()
        click.echo(click.style("Orthopairs complete!", fg='green', bold=True))

    except EnrichmentFailedError as e:
        click.echo(click.style(f"Gene name retrieval failed: {e}", fg='red'), err=True)
        sys.exit(1)
    except OrthopairsError as e:
        click.echo(click.style(f"Run failed: {e}", fg='red'), err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(click.style(f"Run failed: {e}", fg='red'), err=True)
        logger.exception("Run command failed")
        sys.exit(1)
