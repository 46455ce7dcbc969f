"""Data models for the annotation pipeline and its read views."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from protein_annotator.motifs.models import MotifMatch


class AnnotationStage(str, Enum):
    """States of one annotation transaction."""

    STARTED = "started"
    PROTEIN_INSERTED = "protein_inserted"
    REFERENCE_BACKFILLED = "reference_backfilled"
    FRAGMENTS_PERSISTED = "fragments_persisted"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class FragmentAnnotation(BaseModel):
    """A classified and scanned fragment, ready to persist.

    Attributes:
        start_position: Absolute start offset in the parent sequence
        end_position: Absolute end offset (exclusive)
        sequence: Fragment residues
        secondary_structure: One H/E/C label per residue
        motifs: Motif matches in parent sequence coordinates
    """

    start_position: int = Field(ge=0)
    end_position: int
    sequence: str
    secondary_structure: str
    motifs: list[MotifMatch] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_lengths(self) -> "FragmentAnnotation":
        if len(self.secondary_structure) != len(self.sequence):
            raise ValueError("secondary_structure length must equal sequence length")
        if self.end_position - self.start_position != len(self.sequence):
            raise ValueError("Fragment span does not equal residue count")
        for motif in self.motifs:
            if motif.start_position < self.start_position or motif.end_position > self.end_position:
                raise ValueError(
                    f"Motif {motif.name!r} at [{motif.start_position}, "
                    f"{motif.end_position}) lies outside its fragment"
                )
        return self


class AnnotationResult(BaseModel):
    """Outcome of a committed annotation.

    Timestamps are ISO-8601 UTC instants with millisecond precision.
    """

    protein_id: int
    name: str
    description: str
    molecular_weight: float
    sequence_length: int
    created_at: str
    updated_at: str
    sequence_url: str
    fragment_count: int
    motif_count: int


class FragmentView(BaseModel):
    """Display view of a persisted fragment.

    Attributes:
        confidence_scores: Per-residue confidence recomputed from the sequence
        motifs: Distinct stored motif types for the fragment
    """

    fragment_id: int
    protein_id: int
    sequence: str
    start_position: int
    end_position: int
    secondary_structure: str
    confidence_scores: list[float]
    motifs: list[str] = Field(default_factory=list)
    url: str | None = None


def format_instant(value: datetime) -> str:
    """Format a timestamp as 2024-01-01T00:00:00.000Z (naive values are UTC)."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.strftime("%Y-%m-%dT%H:%M:%S") + f".{value.microsecond // 1000:03d}Z"
