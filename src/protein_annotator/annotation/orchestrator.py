"""Transactional annotation of a protein sequence.

Runs the fragment/classify/scan pipeline and persists the protein, its
fragments and their motif matches as one unit of work:

    started -> protein_inserted -> reference_backfilled
            -> fragments_persisted -> committed

Any failure rolls the whole transaction back, so either the complete
aggregate becomes visible or nothing does. Reference URLs depend on
generated identifiers, so each URL is written back right after the insert
that produced its identifier, inside the same transaction.
"""

import structlog

from protein_annotator.annotation.models import (
    AnnotationResult,
    AnnotationStage,
    FragmentAnnotation,
    format_instant,
)
from protein_annotator.annotation.pipeline import annotate_fragments
from protein_annotator.config.schema import (
    AnnotatorConfig,
    FragmentationConfig,
    SequencePolicy,
)
from protein_annotator.errors import (
    AnnotationFailedError,
    RollbackFailedError,
    StorageError,
)
from protein_annotator.persistence.duckdb_store import (
    AnnotationStore,
    AnnotationTransaction,
)
from protein_annotator.sequence.properties import molecular_weight
from protein_annotator.sequence.validator import (
    generate_protein_name,
    validate_metadata,
    validate_sequence,
)

logger = structlog.get_logger()

DEFAULT_BASE_URL = "http://localhost:3000/api"


class ProteinAnnotator:
    """
    Coordinates annotation and atomic persistence of proteins.

    Holds no per-run state, so one instance may annotate many proteins.
    Each call to annotate() uses its own transaction.
    """

    def __init__(
        self,
        store: AnnotationStore,
        base_url: str = DEFAULT_BASE_URL,
        fragmentation: FragmentationConfig | None = None,
        policy: SequencePolicy | None = None,
    ):
        """
        Args:
            store: Storage collaborator for the annotation tables
            base_url: Prefix for generated reference URLs
            fragmentation: Window and step sizes (defaults 15 and 5)
            policy: Input bounds (defaults: length 20-2000)
        """
        self.store = store
        self.base_url = base_url.rstrip("/")
        self.fragmentation = fragmentation or FragmentationConfig()
        self.policy = policy or SequencePolicy()

    @classmethod
    def from_config(
        cls,
        config: AnnotatorConfig,
        store: AnnotationStore | None = None,
    ) -> "ProteinAnnotator":
        """Create a ProteinAnnotator (and its store, if not given) from config."""
        if store is None:
            store = AnnotationStore.from_config(config)
        return cls(
            store,
            base_url=config.base_url,
            fragmentation=config.fragmentation,
            policy=config.policy,
        )

    def protein_url(self, protein_id: int) -> str:
        return f"{self.base_url}/proteins/{protein_id}/download"

    def fragment_url(self, fragment_id: int) -> str:
        return f"{self.base_url}/fragments/{fragment_id}"

    def annotate(
        self,
        sequence: str,
        name: str | None = None,
        description: str = "",
    ) -> AnnotationResult:
        """
        Annotate a sequence and persist the full aggregate atomically.

        Input is validated before any transaction is opened.

        Args:
            sequence: One-letter amino acid sequence
            name: Protein name (generated from the sequence if empty)
            description: Free-text description

        Returns:
            AnnotationResult with the protein id, timestamps and URLs

        Raises:
            InvalidSequenceError: If the input violates the policy
            AnnotationFailedError: If persistence failed and was rolled back
            RollbackFailedError: If the rollback itself failed
        """
        validate_sequence(sequence, self.policy)
        if not name:
            name = generate_protein_name(sequence)
        validate_metadata(name, description, self.policy)

        fragments = annotate_fragments(
            sequence,
            self.fragmentation.window_size,
            self.fragmentation.step_size,
        )
        weight = molecular_weight(sequence)

        logger.info(
            "annotate_start",
            name=name,
            sequence_length=len(sequence),
            fragment_count=len(fragments),
        )

        stage = AnnotationStage.STARTED
        try:
            txn = self.store.begin()
        except StorageError as e:
            raise AnnotationFailedError(
                f"Failed to annotate protein {name!r}: {e}", stage.value
            ) from e

        try:
            protein_id, created_at, updated_at = txn.insert_protein(
                name, description, weight, len(sequence)
            )
            stage = AnnotationStage.PROTEIN_INSERTED

            sequence_url = self.protein_url(protein_id)
            txn.set_protein_url(protein_id, sequence_url)
            stage = AnnotationStage.REFERENCE_BACKFILLED

            motif_count = 0
            for fragment in fragments:
                motif_count += self._persist_fragment(txn, protein_id, fragment)
            stage = AnnotationStage.FRAGMENTS_PERSISTED

            txn.commit()
            stage = AnnotationStage.COMMITTED
        except Exception as e:
            self._roll_back(txn, stage, e)
            raise AnnotationFailedError(
                f"Failed to annotate protein {name!r}: {e}", stage.value
            ) from e
        except BaseException as e:
            # Cancellation or interrupt: roll back, then let it propagate
            self._roll_back(txn, stage, e)
            raise
        finally:
            txn.close()

        result = AnnotationResult(
            protein_id=protein_id,
            name=name,
            description=description,
            molecular_weight=weight,
            sequence_length=len(sequence),
            created_at=format_instant(created_at),
            updated_at=format_instant(updated_at),
            sequence_url=sequence_url,
            fragment_count=len(fragments),
            motif_count=motif_count,
        )

        logger.info(
            "annotate_committed",
            protein_id=protein_id,
            fragment_count=result.fragment_count,
            motif_count=motif_count,
        )

        return result

    def _persist_fragment(
        self,
        txn: AnnotationTransaction,
        protein_id: int,
        fragment: FragmentAnnotation,
    ) -> int:
        """Insert a fragment, backfill its URL, then insert its motifs."""
        fragment_id = txn.insert_fragment(
            protein_id,
            fragment.sequence,
            fragment.start_position,
            fragment.end_position,
            fragment.secondary_structure,
        )
        txn.set_fragment_url(fragment_id, self.fragment_url(fragment_id))

        for motif in fragment.motifs:
            txn.insert_motif(
                fragment_id,
                motif.matched,
                motif.name,
                motif.start_position,
                motif.end_position,
                motif.confidence_score,
            )
        return len(fragment.motifs)

    def _roll_back(
        self,
        txn: AnnotationTransaction,
        stage: AnnotationStage,
        error: BaseException,
    ) -> None:
        """Roll back after a failure at the given stage.

        A failed commit has already ended the transaction, in which case
        there is nothing left to roll back.

        Raises:
            RollbackFailedError: If the rollback did not succeed
        """
        if not txn.active:
            logger.error(
                "annotate_rolled_back",
                stage=AnnotationStage.ROLLED_BACK.value,
                failed_at=stage.value,
                error=str(error),
            )
            return

        try:
            txn.rollback()
        except StorageError as rollback_error:
            logger.critical(
                "annotate_rollback_failed",
                stage=stage.value,
                error=str(error),
                rollback_error=str(rollback_error),
            )
            raise RollbackFailedError(
                f"Rollback failed after annotation error at stage "
                f"{stage.value!r}: {rollback_error}",
                stage.value,
                rollback_error,
            ) from error

        logger.error(
            "annotate_rolled_back",
            stage=AnnotationStage.ROLLED_BACK.value,
            failed_at=stage.value,
            error=str(error),
        )
