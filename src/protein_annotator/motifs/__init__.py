"""Motif layer: fixed catalog of short sequence signatures and the fragment scanner."""

from protein_annotator.motifs.models import (
    MOTIF_CATALOG,
    MotifMatch,
    MotifPattern,
    PatternElement,
    any_except,
    residue,
    wildcard,
)
from protein_annotator.motifs.scanner import scan_motifs

__all__ = [
    "MOTIF_CATALOG",
    "MotifMatch",
    "MotifPattern",
    "PatternElement",
    "any_except",
    "residue",
    "wildcard",
    "scan_motifs",
]
