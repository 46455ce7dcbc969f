"""Persistence layer for the protein annotation aggregate."""

from protein_annotator.persistence.duckdb_store import (
    FRAGMENT_TABLE_NAME,
    MOTIF_TABLE_NAME,
    PROTEIN_TABLE_NAME,
    AnnotationStore,
    AnnotationTransaction,
)

__all__ = [
    "FRAGMENT_TABLE_NAME",
    "MOTIF_TABLE_NAME",
    "PROTEIN_TABLE_NAME",
    "AnnotationStore",
    "AnnotationTransaction",
]
