"""Confidence scores: margin between the two strongest structural propensities."""

from protein_annotator.sequence.properties import residue_properties


def residue_confidence(symbol: str) -> float:
    """Margin between the best and second-best propensity of a residue (>= 0)."""
    top1, top2, _ = sorted(residue_properties(symbol).propensities(), reverse=True)
    return top1 - top2


def confidence_scores(sequence: str) -> list[float]:
    """Per-residue confidence values for a sequence."""
    return [residue_confidence(aa) for aa in sequence]


def mean_confidence(sequence: str) -> float:
    """Arithmetic mean of per-residue confidence over the whole sequence.

    Returns 0.0 for an empty sequence.
    """
    scores = confidence_scores(sequence)
    if not scores:
        return 0.0
    return sum(scores) / len(scores)
