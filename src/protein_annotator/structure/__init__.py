"""Structure layer: propensity-based classification, confidence and rendering."""

from protein_annotator.structure.classifier import (
    classify_residue,
    classify_structure,
)
from protein_annotator.structure.confidence import (
    confidence_scores,
    mean_confidence,
    residue_confidence,
)
from protein_annotator.structure.render import render_structure_svg

__all__ = [
    "classify_residue",
    "classify_structure",
    "confidence_scores",
    "mean_confidence",
    "residue_confidence",
    "render_structure_svg",
]
