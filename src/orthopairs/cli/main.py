"""Main CLI entry point for orthopairs.

Provides command group with global options and subcommands for release runs.
"""

import logging
from pathlib import Path

import click
import structlog

from orthopairs import __version__
from orthopairs.config.loader import load_config
from orthopairs.cli.run_cmd import run
from orthopairs.cli.verify_cmd import verify


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def configure_structlog(level: int) -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


@click.group()
@click.option(
    '--config',
    type=click.Path(exists=True, path_type=Path),
    default='config/default.yaml',
    help='Path to pipeline configuration YAML file'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Enable verbose logging (DEBUG level)'
)
@click.pass_context
def cli(ctx, config, verbose):
    """Orthopairs: PANTHER homology mapping files with UniProt gene names.

    Builds per-species protein homology and gene-protein mapping files from
    the PANTHER ortholog dumps, then adds gene names from UniProt.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        configure_structlog(logging.DEBUG)
        logging.debug("Verbose logging enabled")
    else:
        configure_structlog(logging.INFO)


@cli.command()
@click.pass_context
def info(ctx):
    """Display pipeline information and configuration summary."""
    config_path = ctx.obj['config_path']

    click.echo(f"Orthopairs v{__version__}")
    click.echo(f"Config: {config_path}")
    click.echo()

    try:
        config = load_config(config_path)

        config_hash = config.config_hash()
        click.echo(f"Config Hash: {config_hash[:16]}...")
        click.echo()

        click.echo(click.style("Release:", bold=True))
        click.echo(f"  Release Number: {config.release_number}")
        click.echo(f"  Source Species: {config.source_species}")
        click.echo(f"  Output Directory: {config.release_dir}")
        click.echo()

        click.echo(click.style("Inputs:", bold=True))
        click.echo(f"  Species Config: {config.species_config}")
        click.echo(f"  Data Directory: {config.data_dir}")
        for name in config.panther_files:
            click.echo(f"  PANTHER File: {name}")
        click.echo()

        click.echo(click.style("UniProt ID Mapping:", bold=True))
        click.echo(f"  Base URL: {config.api.base_url}")
        click.echo(f"  Batch Size: {config.api.batch_size}")
        click.echo(f"  Max Attempts: {config.api.max_attempts}")
        click.echo(f"  Poll Interval: {config.api.poll_interval_seconds}s")
        click.echo(f"  Timeout: {config.api.timeout_seconds}s")

    except Exception as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        ctx.exit(1)


cli.add_command(run)
cli.add_command(verify)


if __name__ == '__main__':
    cli()
