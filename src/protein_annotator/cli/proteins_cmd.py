"""Commands for inspecting and removing stored proteins."""

import json
import logging
import sys

import click

from protein_annotator.annotation import load_fragment_views
from protein_annotator.config.loader import load_config
from protein_annotator.errors import ProteinNotFoundError, StorageError
from protein_annotator.persistence import AnnotationStore

logger = logging.getLogger(__name__)


@click.command('proteins')
@click.pass_context
def proteins(ctx):
    """List stored proteins in creation order."""
    config = load_config(ctx.obj['config_path'])

    with AnnotationStore.from_config(config) as store:
        df = store.list_proteins()

    if df.is_empty():
        click.echo("No proteins stored.")
        return

    for row in df.iter_rows(named=True):
        click.echo(
            f"{row['id']}\t{row['name']}\t{row['sequence_length']} aa\t"
            f"{row['molecular_weight']:.2f} Da\t{row['sequence_url']}"
        )


@click.command('fragments')
@click.argument('protein_id', type=int)
@click.option(
    '--json', 'as_json',
    is_flag=True,
    help='Print fragment views as JSON'
)
@click.pass_context
def fragments(ctx, protein_id, as_json):
    """Show fragments of PROTEIN_ID with structure, confidence and motifs."""
    config = load_config(ctx.obj['config_path'])

    with AnnotationStore.from_config(config) as store:
        try:
            views = load_fragment_views(store, protein_id)
        except ProteinNotFoundError as e:
            click.echo(click.style(str(e), fg='red'), err=True)
            sys.exit(1)

    if as_json:
        click.echo(json.dumps([view.model_dump() for view in views], indent=2))
        return

    click.echo(click.style(f"=== Protein {protein_id}: {len(views)} fragments ===", bold=True))
    for view in views:
        mean = sum(view.confidence_scores) / len(view.confidence_scores)
        motifs = ", ".join(view.motifs) if view.motifs else "-"
        click.echo(
            f"[{view.start_position:>4}, {view.end_position:>4})  {view.sequence}  "
            f"{view.secondary_structure}  conf={mean:.3f}  motifs: {motifs}"
        )


@click.command('delete')
@click.argument('protein_id', type=int)
@click.pass_context
def delete(ctx, protein_id):
    """Delete PROTEIN_ID together with its fragments and motif matches."""
    config = load_config(ctx.obj['config_path'])

    with AnnotationStore.from_config(config) as store:
        try:
            counts = store.delete_protein(protein_id)
        except ProteinNotFoundError as e:
            click.echo(click.style(str(e), fg='red'), err=True)
            sys.exit(1)
        except StorageError as e:
            click.echo(click.style(f"Delete failed: {e}", fg='red'), err=True)
            logger.exception("Failed to delete protein")
            sys.exit(1)

    click.echo(click.style(f"Deleted protein {protein_id}", fg='green'))
    click.echo(f"  Fragments removed: {counts['fragments']}")
    click.echo(f"  Motif matches removed: {counts['motifs']}")
