"""Annotation layer: pure fragment pipeline, transactional orchestrator and read views."""

from protein_annotator.annotation.models import (
    AnnotationResult,
    AnnotationStage,
    FragmentAnnotation,
    FragmentView,
    format_instant,
)
from protein_annotator.annotation.pipeline import (
    annotate_fragments,
    annotate_window,
)
from protein_annotator.annotation.orchestrator import ProteinAnnotator
from protein_annotator.annotation.read import (
    build_fragment_view,
    load_fragment_views,
)

__all__ = [
    "AnnotationResult",
    "AnnotationStage",
    "FragmentAnnotation",
    "FragmentView",
    "format_instant",
    "annotate_fragments",
    "annotate_window",
    "ProteinAnnotator",
    "build_fragment_view",
    "load_fragment_views",
]
