"""Verify command: compare this release's files with the previous release."""

import logging
import sys
from pathlib import Path

import click

from orthopairs.config.loader import load_config
from orthopairs.exceptions import OrthopairsError
from orthopairs.verification import compare_release_directories

logger = logging.getLogger(__name__)


@click.command('verify')
@click.option(
    '--previous',
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    required=True,
    help='Directory holding the previous release files (.tsv or .tsv.gz)'
)
@click.option(
    '--current',
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help='Directory holding the current release files (default: from config)'
)
@click.option(
    '--max-drop',
    type=float,
    default=0.05,
    help='Fractional drop in lines or bytes reported as an error (default: 0.05)'
)
@click.pass_context
def verify(ctx, previous, current, max_drop):
    """Check that no mapping file shrank significantly since the last release.

    Exits with status 1 if any file lost max-drop or more of its lines or bytes.
    """
    try:
        if current is None:
            config = load_config(ctx.obj['config_path'])
            current = config.release_dir

        result = compare_release_directories(current, previous, max_drop=max_drop)
    except OrthopairsError as e:
        click.echo(click.style(f"Verification failed: {e}", fg='red'), err=True)
        sys.exit(1)

    click.echo(click.style("=== Orthopairs Verification ===", bold=True))
    click.echo(f"Compared {len(result.compared_files)} files")
    for msg in result.info_messages:
        click.echo(f"  {msg}")

    if not result.passed:
        click.echo()
        for msg in result.error_messages:
            click.echo(click.style(f"  {msg}", fg='red'), err=True)
        sys.exit(1)

    click.echo(click.style("Verification passed", fg='green'))
