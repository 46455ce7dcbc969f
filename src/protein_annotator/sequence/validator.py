"""Input policy checks applied before an annotation transaction is opened."""

import logging
import time

from protein_annotator.config.schema import SequencePolicy
from protein_annotator.errors import InvalidSequenceError
from protein_annotator.sequence.properties import STANDARD_RESIDUES

logger = logging.getLogger(__name__)


def validate_sequence(sequence: str, policy: SequencePolicy | None = None) -> str:
    """Check a sequence against the residue alphabet and length bounds.

    Args:
        sequence: One-letter amino acid sequence
        policy: Length bounds (defaults to SequencePolicy())

    Returns:
        The sequence, unchanged

    Raises:
        InvalidSequenceError: If the sequence is empty, out of bounds, or
            contains symbols outside the 20 standard residues
    """
    policy = policy or SequencePolicy()

    if not isinstance(sequence, str) or not sequence:
        raise InvalidSequenceError("Sequence must be a non-empty string")

    length = len(sequence)
    if length < policy.min_length or length > policy.max_length:
        raise InvalidSequenceError(
            f"Sequence length {length} outside allowed range "
            f"[{policy.min_length}, {policy.max_length}]"
        )

    unknown = sorted(set(sequence) - STANDARD_RESIDUES)
    if unknown:
        raise InvalidSequenceError(
            f"Sequence contains non-standard residues: {''.join(unknown)}"
        )

    logger.debug(f"Sequence passed validation (length={length})")
    return sequence


def validate_metadata(
    name: str,
    description: str,
    policy: SequencePolicy | None = None,
) -> None:
    """Check protein name and description lengths.

    Raises:
        InvalidSequenceError: If either field exceeds its maximum length
    """
    policy = policy or SequencePolicy()

    if len(name) > policy.max_name_length:
        raise InvalidSequenceError(
            f"Name length {len(name)} exceeds maximum {policy.max_name_length}"
        )
    if len(description) > policy.max_description_length:
        raise InvalidSequenceError(
            f"Description length {len(description)} exceeds maximum "
            f"{policy.max_description_length}"
        )


def generate_protein_name(sequence: str, timestamp: int | None = None) -> str:
    """Default protein name: Protein_<first 8 residues>_<unix seconds>."""
    if timestamp is None:
        timestamp = int(time.time())
    return f"Protein_{sequence[:8]}_{timestamp}"
