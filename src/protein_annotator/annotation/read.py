"""Read paths: display views of persisted fragments.

Confidence scores and structure labels are recomputed from the stored
fragment residues. Motifs are never rescanned on read; stored matches
are authoritative.
"""

import structlog

from protein_annotator.annotation.models import FragmentView
from protein_annotator.errors import ProteinNotFoundError
from protein_annotator.persistence.duckdb_store import AnnotationStore
from protein_annotator.structure.classifier import classify_structure
from protein_annotator.structure.confidence import confidence_scores

logger = structlog.get_logger()


def build_fragment_view(row: dict, motif_types: list[str]) -> FragmentView:
    """Build a display view from a persisted fragment row.

    Args:
        row: Fragment row with id, protein_id, sequence, start_position,
             end_position and url
        motif_types: Stored motif types for the fragment
    """
    sequence = row["sequence"]
    return FragmentView(
        fragment_id=row["id"],
        protein_id=row["protein_id"],
        sequence=sequence,
        start_position=row["start_position"],
        end_position=row["end_position"],
        secondary_structure=classify_structure(sequence),
        confidence_scores=confidence_scores(sequence),
        motifs=motif_types,
        url=row.get("url"),
    )


def load_fragment_views(store: AnnotationStore, protein_id: int) -> list[FragmentView]:
    """Fragment views for one protein, ordered by start position.

    Raises:
        ProteinNotFoundError: If no protein has this id
    """
    if store.get_protein(protein_id) is None:
        raise ProteinNotFoundError(f"Protein with id {protein_id} does not exist")

    fragments = store.load_fragments(protein_id)
    views = [
        build_fragment_view(row, store.motif_types(row["id"]))
        for row in fragments.iter_rows(named=True)
    ]

    logger.info("load_fragment_views", protein_id=protein_id, fragment_count=len(views))
    return views
