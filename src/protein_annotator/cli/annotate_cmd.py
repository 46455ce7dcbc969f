"""Annotate command: fragment, classify and motif-scan a sequence, then persist it.

Orchestrates:
1. Load config, applying --window-size/--step-size overrides
2. Open AnnotationStore
3. Validate input and annotate the sequence
4. Persist protein, fragments and motifs in one transaction
5. Print the stored protein summary
"""

import json
import logging
import sys

import click
from pydantic import ValidationError

from protein_annotator.annotation import ProteinAnnotator
from protein_annotator.config.loader import load_config, load_config_with_overrides
from protein_annotator.errors import (
    AnnotationFailedError,
    InvalidSequenceError,
    RollbackFailedError,
    StorageError,
)
from protein_annotator.persistence import AnnotationStore

logger = logging.getLogger(__name__)


@click.command('annotate')
@click.argument('sequence')
@click.option(
    '--name',
    default=None,
    help='Protein name (default: generated from the sequence and current time)'
)
@click.option(
    '--description',
    default='',
    help='Protein description'
)
@click.option(
    '--window-size',
    type=int,
    default=None,
    help='Override fragmentation.window_size from the config'
)
@click.option(
    '--step-size',
    type=int,
    default=None,
    help='Override fragmentation.step_size from the config'
)
@click.option(
    '--json', 'as_json',
    is_flag=True,
    help='Print the result as JSON'
)
@click.pass_context
def annotate(ctx, sequence, name, description, window_size, step_size, as_json):
    """Annotate SEQUENCE and store the protein with its fragments and motifs."""
    config_path = ctx.obj['config_path']
    sequence = sequence.strip().upper()

    overrides = {}
    if window_size is not None:
        overrides['fragmentation.window_size'] = window_size
    if step_size is not None:
        overrides['fragmentation.step_size'] = step_size

    try:
        if overrides:
            config = load_config_with_overrides(config_path, overrides)
        else:
            config = load_config(config_path)
    except (FileNotFoundError, ValidationError) as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        sys.exit(1)

    try:
        store = AnnotationStore.from_config(config)
    except StorageError as e:
        click.echo(click.style(f"Error opening database: {e}", fg='red'), err=True)
        sys.exit(1)

    try:
        annotator = ProteinAnnotator.from_config(config, store=store)

        result = annotator.annotate(sequence, name=name, description=description)

    except InvalidSequenceError as e:
        click.echo(click.style(f"Invalid input: {e}", fg='red'), err=True)
        sys.exit(1)
    except RollbackFailedError as e:
        click.echo(click.style(f"CRITICAL: {e}", fg='red', bold=True), err=True)
        logger.critical(f"Rollback failed at stage {e.stage}")
        sys.exit(2)
    except AnnotationFailedError as e:
        click.echo(click.style(f"Annotation failed: {e}", fg='red'), err=True)
        logger.exception("Annotation transaction rolled back")
        sys.exit(1)
    finally:
        store.close()

    if as_json:
        click.echo(json.dumps(result.model_dump(), indent=2))
        return

    click.echo(click.style("=== Annotation Complete ===", bold=True))
    click.echo(f"Protein ID:       {result.protein_id}")
    click.echo(f"Name:             {result.name}")
    click.echo(f"Length:           {result.sequence_length}")
    click.echo(f"Molecular Weight: {result.molecular_weight:.2f} Da")
    click.echo(f"Fragments:        {result.fragment_count}")
    click.echo(f"Motif Matches:    {result.motif_count}")
    click.echo(f"Created At:       {result.created_at}")
    click.echo(f"Sequence URL:     {result.sequence_url}")
