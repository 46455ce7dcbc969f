"""Structure command: classify a sequence without storing it."""

import sys
from pathlib import Path

import click

from protein_annotator.errors import InvalidSequenceError
from protein_annotator.structure import (
    classify_structure,
    confidence_scores,
    render_structure_svg,
)


@click.command('structure')
@click.argument('sequence')
@click.option(
    '--svg',
    'svg_path',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Write an SVG rendering of the structure track to this path'
)
def structure(sequence, svg_path):
    """Print per-residue structure labels and confidence for SEQUENCE."""
    sequence = sequence.strip().upper()

    try:
        labels = classify_structure(sequence)
        scores = confidence_scores(sequence)
    except InvalidSequenceError as e:
        click.echo(click.style(f"Invalid input: {e}", fg='red'), err=True)
        sys.exit(1)

    click.echo(sequence)
    click.echo(labels)
    if scores:
        click.echo(f"Mean confidence: {sum(scores) / len(scores):.3f}")

    if svg_path is not None:
        svg_path.parent.mkdir(parents=True, exist_ok=True)
        svg_path.write_text(render_structure_svg(sequence, labels))
        click.echo(click.style(f"SVG written to {svg_path}", fg='green'))
