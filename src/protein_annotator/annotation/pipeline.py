"""Pure annotation of a sequence: fragment, classify and scan each window."""

import structlog

from protein_annotator.annotation.models import FragmentAnnotation
from protein_annotator.motifs.scanner import scan_motifs
from protein_annotator.sequence.fragmenter import (
    DEFAULT_STEP_SIZE,
    DEFAULT_WINDOW_SIZE,
    SequenceWindow,
    fragment_sequence,
)
from protein_annotator.structure.classifier import classify_structure

logger = structlog.get_logger()


def annotate_window(window: SequenceWindow) -> FragmentAnnotation:
    """Classify one window and scan it for motifs.

    Depends only on the window residues and its absolute offset, so
    windows can be processed independently.
    """
    return FragmentAnnotation(
        start_position=window.start,
        end_position=window.end,
        sequence=window.residues,
        secondary_structure=classify_structure(window.residues),
        motifs=scan_motifs(window.residues, window.start),
    )


def annotate_fragments(
    sequence: str,
    window_size: int = DEFAULT_WINDOW_SIZE,
    step_size: int = DEFAULT_STEP_SIZE,
) -> list[FragmentAnnotation]:
    """Fragment a sequence and annotate every window.

    A sequence shorter than window_size yields an empty list.

    Raises:
        InvalidSequenceError: If a window contains a non-standard residue
    """
    windows = fragment_sequence(sequence, window_size, step_size)
    fragments = [annotate_window(window) for window in windows]

    logger.info(
        "annotate_fragments_complete",
        sequence_length=len(sequence),
        fragment_count=len(fragments),
        motif_count=sum(len(f.motifs) for f in fragments),
    )

    return fragments
