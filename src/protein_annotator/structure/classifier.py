"""Per-residue secondary structure classification from propensity lookup."""

from protein_annotator.sequence.properties import STRUCTURE_LABELS, residue_properties


def classify_residue(symbol: str) -> str:
    """Label a single residue as helix (H), strand (E) or coil (C).

    The label with the strictly greatest propensity wins; equal scores
    resolve in the order Helix, Strand, Coil.

    Raises:
        InvalidSequenceError: If symbol is not a standard residue
    """
    scores = residue_properties(symbol).propensities()
    # index() returns the first maximum, so ties follow label order
    return STRUCTURE_LABELS[scores.index(max(scores))]


def classify_structure(sequence: str) -> str:
    """Secondary structure string with one label per residue.

    Args:
        sequence: One-letter amino acid sequence

    Returns:
        String over {H, E, C} of the same length as sequence

    Raises:
        InvalidSequenceError: If sequence contains a non-standard residue
    """
    structure = "".join(classify_residue(aa) for aa in sequence)
    if len(structure) != len(sequence):
        raise RuntimeError(
            f"Structure length {len(structure)} does not match "
            f"sequence length {len(sequence)}"
        )
    return structure
