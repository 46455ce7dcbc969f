"""Sliding-window fragmentation of protein sequences."""

from typing import NamedTuple

DEFAULT_WINDOW_SIZE = 15
DEFAULT_STEP_SIZE = 5


class SequenceWindow(NamedTuple):
    """One window over a parent sequence.

    start and end are absolute offsets in the parent, end-exclusive.
    """

    start: int
    residues: str

    @property
    def end(self) -> int:
        return self.start + len(self.residues)


def fragment_sequence(
    sequence: str,
    window_size: int = DEFAULT_WINDOW_SIZE,
    step_size: int = DEFAULT_STEP_SIZE,
) -> list[SequenceWindow]:
    """Split a sequence into overlapping fixed-size windows.

    Windows start at offset 0 and advance by step_size while
    start + window_size <= len(sequence). Adjacent windows overlap by
    window_size - step_size residues. A sequence shorter than window_size
    yields no windows.

    Args:
        sequence: Parent sequence
        window_size: Residues per window
        step_size: Offset between consecutive window starts

    Returns:
        Windows ordered by ascending start

    Raises:
        ValueError: If window_size or step_size is not positive
    """
    if window_size <= 0 or step_size <= 0:
        raise ValueError(
            f"window_size and step_size must be positive, got "
            f"window_size={window_size}, step_size={step_size}"
        )

    return [
        SequenceWindow(start, sequence[start:start + window_size])
        for start in range(0, len(sequence) - window_size + 1, step_size)
    ]


def expected_fragment_count(
    sequence_length: int,
    window_size: int = DEFAULT_WINDOW_SIZE,
    step_size: int = DEFAULT_STEP_SIZE,
) -> int:
    """Number of windows fragment_sequence produces for a given length."""
    if sequence_length < window_size:
        return 0
    return (sequence_length - window_size) // step_size + 1
