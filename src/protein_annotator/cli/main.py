"""Main CLI entry point for protein-annotator.

Provides command group with global options and subcommands for annotation,
inspection and removal of stored proteins.
"""

import logging
from pathlib import Path

import click

from protein_annotator import __version__
from protein_annotator.config.loader import load_config
from protein_annotator.motifs.models import MOTIF_CATALOG
from protein_annotator.cli.annotate_cmd import annotate
from protein_annotator.cli.proteins_cmd import delete, fragments, proteins
from protein_annotator.cli.structure_cmd import structure


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@click.group()
@click.option(
    '--config',
    type=click.Path(exists=True, path_type=Path),
    default='config/default.yaml',
    help='Path to annotator configuration YAML file'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Enable verbose logging (DEBUG level)'
)
@click.pass_context
def cli(ctx, config, verbose):
    """Protein-annotator: fragment, classify and motif-scan protein sequences.

    Annotations are stored in DuckDB as one atomic protein/fragment/motif
    aggregate per sequence.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.debug("Verbose logging enabled")


@cli.command()
@click.pass_context
def info(ctx):
    """Display annotator information and configuration summary."""
    config_path = ctx.obj['config_path']

    click.echo(f"Protein Annotator v{__version__}")
    click.echo(f"Config: {config_path}")
    click.echo()

    try:
        config = load_config(config_path)

        click.echo(click.style("Paths:", bold=True))
        click.echo(f"  DuckDB Path: {config.duckdb_path}")
        click.echo(f"  Base URL: {config.base_url}")
        click.echo()

        click.echo(click.style("Fragmentation:", bold=True))
        click.echo(f"  Window Size: {config.fragmentation.window_size}")
        click.echo(f"  Step Size:   {config.fragmentation.step_size}")
        click.echo()

        click.echo(click.style("Sequence Policy:", bold=True))
        click.echo(
            f"  Length: {config.policy.min_length}-{config.policy.max_length} residues"
        )
        click.echo()

        click.echo(click.style("Motif Catalog:", bold=True))
        for pattern in MOTIF_CATALOG:
            click.echo(f"  {pattern.name}: {pattern.notation}")

    except Exception as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        ctx.exit(1)


cli.add_command(annotate)
cli.add_command(proteins)
cli.add_command(fragments)
cli.add_command(delete)
cli.add_command(structure)


if __name__ == '__main__':
    cli()
