"""Scan fragments against the motif catalog."""

import structlog

from protein_annotator.motifs.models import MOTIF_CATALOG, MotifMatch, MotifPattern
from protein_annotator.structure.confidence import mean_confidence

logger = structlog.get_logger()


def scan_motifs(
    residues: str,
    absolute_start: int,
    catalog: tuple[MotifPattern, ...] = MOTIF_CATALOG,
) -> list[MotifMatch]:
    """Find at most one match per catalog pattern in a fragment.

    Only the first (leftmost) occurrence of each pattern is reported.
    Positions are shifted by absolute_start so they refer to the parent
    sequence. Every match carries the mean confidence of the whole
    fragment, not of the matched span.

    Args:
        residues: Fragment residues
        absolute_start: Offset of the fragment in the parent sequence
        catalog: Patterns to scan for

    Returns:
        Matches in catalog order; empty if nothing matched

    Raises:
        InvalidSequenceError: If residues contain a non-standard symbol
    """
    if absolute_start < 0:
        raise ValueError(f"absolute_start must be >= 0, got {absolute_start}")

    fragment_confidence = mean_confidence(residues)
    matches: list[MotifMatch] = []

    for pattern in catalog:
        span = pattern.find_first(residues)
        if span is None:
            continue

        start, end = span
        matches.append(MotifMatch(
            name=pattern.name,
            category=pattern.category,
            matched=residues[start:end],
            start_position=absolute_start + start,
            end_position=absolute_start + end,
            confidence_score=fragment_confidence,
        ))

    logger.debug(
        "scan_motifs_complete",
        absolute_start=absolute_start,
        fragment_length=len(residues),
        match_count=len(matches),
    )

    return matches
