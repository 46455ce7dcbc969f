"""Tests for the annotation pipeline, transactional orchestrator and read views."""

import re

import pytest
from structlog.testing import capture_logs

from protein_annotator.annotation import (
    AnnotationStage,
    ProteinAnnotator,
    annotate_fragments,
    build_fragment_view,
    format_instant,
    load_fragment_views,
)
from protein_annotator.config.schema import FragmentationConfig
from protein_annotator.errors import (
    AnnotationFailedError,
    InvalidSequenceError,
    ProteinNotFoundError,
    RollbackFailedError,
    StorageError,
)
from protein_annotator.persistence import AnnotationStore, AnnotationTransaction
from protein_annotator.structure import confidence_scores

REFERENCE_SEQUENCE = "ACDEFGHIKLMNPQRSTVWY"
# Contains N-glycosylation, casein kinase II and tyrosine kinase sites
MOTIF_RICH_SEQUENCE = "MKTAYIAKQRNVSLDESTGNKSEDTRKDESTNVSAGGLLPWV"

ISO_INSTANT = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


class Cancelled(BaseException):
    """Stand-in for task cancellation."""


@pytest.fixture
def store(tmp_path):
    store = AnnotationStore(tmp_path / "test.duckdb")
    yield store
    store.close()


@pytest.fixture
def annotator(store):
    return ProteinAnnotator(store, base_url="http://localhost:3000/api")


def _fail_on_call(monkeypatch, method_name, call_number, exc):
    """Patch an AnnotationTransaction method to raise on its n-th call."""
    original = getattr(AnnotationTransaction, method_name)
    calls = {"count": 0}

    def wrapper(self, *args, **kwargs):
        calls["count"] += 1
        if calls["count"] == call_number:
            raise exc
        return original(self, *args, **kwargs)

    monkeypatch.setattr(AnnotationTransaction, method_name, wrapper)
    return calls


# ============================================================================
# Pure pipeline
# ============================================================================

def test_annotate_fragments_reference_sequence():
    fragments = annotate_fragments(REFERENCE_SEQUENCE)

    assert [f.start_position for f in fragments] == [0, 5]
    assert [f.end_position for f in fragments] == [15, 20]
    for f in fragments:
        assert len(f.secondary_structure) == len(f.sequence)
    assert fragments[0].secondary_structure == "HECHECCEHEHCCHH"
    assert all(f.motifs == [] for f in fragments)


def test_annotate_fragments_positions_motifs_absolutely():
    fragments = annotate_fragments(MOTIF_RICH_SEQUENCE)

    assert any(f.motifs for f in fragments)
    for f in fragments:
        names = [m.name for m in f.motifs]
        assert len(names) == len(set(names))
        for m in f.motifs:
            assert f.start_position <= m.start_position < m.end_position <= f.end_position
            assert MOTIF_RICH_SEQUENCE[m.start_position:m.end_position] == m.matched


def test_short_sequence_has_no_fragments():
    assert annotate_fragments("ACDEFGHIKL") == []


def test_format_instant():
    from datetime import datetime, timezone, timedelta

    assert format_instant(datetime(2024, 1, 2, 3, 4, 5, 678901)) == "2024-01-02T03:04:05.678Z"
    aware = datetime(2024, 1, 2, 5, 4, 5, tzinfo=timezone(timedelta(hours=2)))
    assert format_instant(aware) == "2024-01-02T03:04:05.000Z"


# ============================================================================
# Orchestrator: committed annotation
# ============================================================================

def test_annotate_reference_sequence(annotator, store):
    """Reference sequence commits with two fragments and backfilled URLs."""
    result = annotator.annotate(REFERENCE_SEQUENCE, name="Ref", description="test")

    assert result.protein_id is not None
    assert result.sequence_url == f"http://localhost:3000/api/proteins/{result.protein_id}/download"
    assert ISO_INSTANT.match(result.created_at)
    assert ISO_INSTANT.match(result.updated_at)
    assert result.fragment_count == 2
    assert result.sequence_length == 20
    assert result.molecular_weight == pytest.approx(2738.02)

    protein = store.get_protein(result.protein_id)
    assert protein["name"] == "Ref"
    assert protein["description"] == "test"
    assert protein["sequence_url"] == result.sequence_url

    fragments = store.load_fragments(result.protein_id)
    assert len(fragments) == 2
    assert fragments["start_position"].to_list() == [0, 5]
    assert fragments["end_position"].to_list() == [15, 20]
    for row in fragments.iter_rows(named=True):
        assert row["url"] == f"http://localhost:3000/api/fragments/{row['id']}"
        assert len(row["secondary_structure"]) == len(row["sequence"])


def test_annotate_persists_motifs(annotator, store):
    result = annotator.annotate(MOTIF_RICH_SEQUENCE, name="Motifs")
    expected = annotate_fragments(MOTIF_RICH_SEQUENCE)

    motifs = store.load_motifs(result.protein_id)
    assert result.motif_count == sum(len(f.motifs) for f in expected)
    assert len(motifs) == result.motif_count
    assert set(motifs["motif_type"].to_list()) == {
        "N-glycosylation site",
        "Casein kinase II phosphorylation site",
        "Tyrosine kinase phosphorylation site",
    }
    for row in motifs.iter_rows(named=True):
        assert MOTIF_RICH_SEQUENCE[row["start_position"]:row["end_position"]] == row["motif_pattern"]


def test_annotate_generates_name(annotator, store):
    result = annotator.annotate(REFERENCE_SEQUENCE)

    assert result.name.startswith("Protein_ACDEFGHI_")
    assert store.get_protein(result.protein_id)["name"] == result.name


def test_annotate_uses_configured_fragmentation(store):
    annotator = ProteinAnnotator(
        store, fragmentation=FragmentationConfig(window_size=10, step_size=2)
    )
    result = annotator.annotate(REFERENCE_SEQUENCE, name="Small windows")

    # floor((20 - 10) / 2) + 1
    assert result.fragment_count == 6
    assert len(store.load_fragments(result.protein_id)) == 6


def test_annotations_are_independent(annotator, store):
    first = annotator.annotate(REFERENCE_SEQUENCE, name="A")
    second = annotator.annotate(MOTIF_RICH_SEQUENCE, name="B")

    assert first.protein_id != second.protein_id
    assert len(store.list_proteins()) == 2
    assert len(store.load_fragments(first.protein_id)) == 2


def test_open_transaction_does_not_block_other_annotation(annotator, store):
    """A pending transaction for one protein neither blocks nor leaks into another."""
    pending = store.begin()
    pending_id = pending.insert_protein("pending", "", 1.0, 20)[0]

    result = annotator.annotate(REFERENCE_SEQUENCE, name="committed")

    assert store.get_protein(result.protein_id) is not None
    assert store.get_protein(pending_id) is None

    pending.rollback()
    pending.close()
    assert store.get_protein(pending_id) is None


# ============================================================================
# Orchestrator: validation and failure handling
# ============================================================================

@pytest.mark.parametrize("sequence", [
    "ACDEFGHIKL",
    "ACDEFGHIKLMNPQRSTVWX",
    "A" * 2001,
])
def test_invalid_input_rejected_before_transaction(annotator, store, monkeypatch, sequence):
    def no_begin(self):
        raise AssertionError("transaction must not be opened")

    monkeypatch.setattr(AnnotationStore, "begin", no_begin)

    with pytest.raises(InvalidSequenceError):
        annotator.annotate(sequence, name="bad")


def test_metadata_limits_enforced(annotator, store):
    with pytest.raises(InvalidSequenceError):
        annotator.annotate(REFERENCE_SEQUENCE, name="n" * 101)
    with pytest.raises(InvalidSequenceError):
        annotator.annotate(REFERENCE_SEQUENCE, name="ok", description="d" * 1001)
    assert store.count_rows("proteins") == 0


def test_second_fragment_failure_rolls_back(annotator, store, monkeypatch):
    """A storage failure on the second fragment insert leaves nothing behind."""
    calls = _fail_on_call(
        monkeypatch, "insert_fragment", 2, StorageError("disk full")
    )

    with pytest.raises(AnnotationFailedError) as exc_info:
        annotator.annotate(REFERENCE_SEQUENCE, name="Doomed")

    assert calls["count"] == 2
    assert exc_info.value.stage == AnnotationStage.REFERENCE_BACKFILLED.value
    assert isinstance(exc_info.value.__cause__, StorageError)
    assert store.count_rows("proteins") == 0
    assert store.count_rows("fragments") == 0
    assert store.count_rows("motifs") == 0


def test_rollback_logged_with_failed_stage(annotator, monkeypatch):
    _fail_on_call(monkeypatch, "insert_fragment", 2, StorageError("disk full"))

    with capture_logs() as logs:
        with pytest.raises(AnnotationFailedError):
            annotator.annotate(REFERENCE_SEQUENCE, name="Doomed")

    rolled_back = [e for e in logs if e["event"] == "annotate_rolled_back"]
    assert len(rolled_back) == 1
    assert rolled_back[0]["stage"] == AnnotationStage.ROLLED_BACK.value
    assert rolled_back[0]["failed_at"] == AnnotationStage.REFERENCE_BACKFILLED.value
    assert rolled_back[0]["log_level"] == "error"


def test_url_backfill_failure_rolls_back(annotator, store, monkeypatch):
    _fail_on_call(monkeypatch, "set_protein_url", 1, StorageError("update failed"))

    with pytest.raises(AnnotationFailedError) as exc_info:
        annotator.annotate(REFERENCE_SEQUENCE, name="Doomed")

    assert exc_info.value.stage == AnnotationStage.PROTEIN_INSERTED.value
    assert store.count_rows("proteins") == 0


def test_motif_insert_failure_rolls_back(annotator, store, monkeypatch):
    _fail_on_call(monkeypatch, "insert_motif", 1, StorageError("constraint"))

    with pytest.raises(AnnotationFailedError):
        annotator.annotate(MOTIF_RICH_SEQUENCE, name="Doomed")

    assert store.count_rows("proteins") == 0
    assert store.count_rows("fragments") == 0
    assert store.count_rows("motifs") == 0


def test_commit_failure_reported(annotator, store, monkeypatch):
    _fail_on_call(monkeypatch, "commit", 1, StorageError("commit failed"))

    with pytest.raises(AnnotationFailedError) as exc_info:
        annotator.annotate(REFERENCE_SEQUENCE, name="Doomed")

    assert exc_info.value.stage == AnnotationStage.FRAGMENTS_PERSISTED.value
    assert store.count_rows("proteins") == 0


def test_rollback_failure_is_distinct(annotator, monkeypatch):
    _fail_on_call(monkeypatch, "insert_fragment", 1, StorageError("insert failed"))

    def failing_rollback(self):
        self.conn.rollback()
        self.active = False
        raise StorageError("rollback lost")

    monkeypatch.setattr(AnnotationTransaction, "rollback", failing_rollback)

    with pytest.raises(RollbackFailedError) as exc_info:
        annotator.annotate(REFERENCE_SEQUENCE, name="Doomed")

    assert isinstance(exc_info.value, AnnotationFailedError)
    assert "rollback lost" in str(exc_info.value.rollback_error)
    assert isinstance(exc_info.value.__cause__, StorageError)


def test_cancellation_rolls_back(annotator, store, monkeypatch):
    """Abandoning the run before commit rolls back and re-raises."""
    _fail_on_call(monkeypatch, "insert_fragment", 2, Cancelled())

    with pytest.raises(Cancelled):
        annotator.annotate(REFERENCE_SEQUENCE, name="Abandoned")

    assert store.count_rows("proteins") == 0
    assert store.count_rows("fragments") == 0


def test_begin_failure_reported(annotator, monkeypatch):
    def failing_begin(self):
        raise StorageError("database locked")

    monkeypatch.setattr(AnnotationStore, "begin", failing_begin)

    with pytest.raises(AnnotationFailedError) as exc_info:
        annotator.annotate(REFERENCE_SEQUENCE, name="x")

    assert exc_info.value.stage == AnnotationStage.STARTED.value


# ============================================================================
# Read views and cascade
# ============================================================================

def test_fragment_views(annotator, store):
    result = annotator.annotate(MOTIF_RICH_SEQUENCE, name="Views")

    views = load_fragment_views(store, result.protein_id)

    assert len(views) == result.fragment_count
    assert [v.start_position for v in views] == sorted(v.start_position for v in views)
    for view in views:
        assert view.protein_id == result.protein_id
        assert view.confidence_scores == pytest.approx(confidence_scores(view.sequence))
        assert len(view.secondary_structure) == len(view.sequence)
        assert view.motifs == store.motif_types(view.fragment_id)
        assert view.url.endswith(f"/fragments/{view.fragment_id}")
    assert any(view.motifs for view in views)


def test_fragment_views_do_not_rescan(store):
    """Stored motifs are authoritative; nothing is rescanned on read."""
    with store.transaction() as txn:
        protein_id = txn.insert_protein("P", "", 1.0, 20)[0]
        fragment_id = txn.insert_fragment(protein_id, "NASAGGGGGGGGGGG", 0, 15, "C" * 15)

    views = load_fragment_views(store, protein_id)
    assert views[0].motifs == []
    assert views[0].secondary_structure == "CHCHCCCCCCCCCCC"


def test_build_fragment_view_from_row():
    row = {
        "id": 7, "protein_id": 3, "sequence": "AVG",
        "start_position": 10, "end_position": 13, "url": None,
    }
    view = build_fragment_view(row, ["Casein kinase II phosphorylation site"])

    assert view.fragment_id == 7
    assert view.secondary_structure == "HEC"
    assert view.confidence_scores == pytest.approx([0.59, 0.64, 0.81])


def test_fragment_views_unknown_protein(store):
    with pytest.raises(ProteinNotFoundError):
        load_fragment_views(store, 424242)


def test_delete_annotated_protein_cascades(annotator, store):
    result = annotator.annotate(MOTIF_RICH_SEQUENCE, name="Gone")
    assert store.count_rows("motifs") > 0

    store.delete_protein(result.protein_id)

    assert store.count_rows("proteins") == 0
    assert store.count_rows("fragments") == 0
    assert store.count_rows("motifs") == 0
