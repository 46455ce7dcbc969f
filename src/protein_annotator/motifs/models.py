"""Motif pattern catalog and match records."""

from dataclasses import dataclass

from pydantic import BaseModel, Field, model_validator


@dataclass(frozen=True)
class PatternElement:
    """One position class in a motif pattern, repeated min_count..max_count times.

    Attributes:
        allowed: Residues accepted at this position (None = any residue)
        excluded: Residues rejected at this position
        min_count: Minimum repetitions
        max_count: Maximum repetitions
    """
    allowed: frozenset[str] | None = None
    excluded: frozenset[str] = frozenset()
    min_count: int = 1
    max_count: int = 1

    def accepts(self, residue: str) -> bool:
        if residue in self.excluded:
            return False
        return self.allowed is None or residue in self.allowed

    def notation(self) -> str:
        """PROSITE-style notation, e.g. [ST], {P}, x(0,2)."""
        if self.allowed is not None:
            token = (
                next(iter(self.allowed)) if len(self.allowed) == 1
                else "[" + "".join(sorted(self.allowed)) + "]"
            )
        elif self.excluded:
            token = "{" + "".join(sorted(self.excluded)) + "}"
        else:
            token = "x"

        if (self.min_count, self.max_count) == (1, 1):
            return token
        if self.min_count == self.max_count:
            return f"{token}({self.min_count})"
        return f"{token}({self.min_count},{self.max_count})"


def residue(symbols: str) -> PatternElement:
    """Position matching any of the given residues."""
    return PatternElement(allowed=frozenset(symbols))


def any_except(symbols: str) -> PatternElement:
    """Position matching any residue except the given ones."""
    return PatternElement(excluded=frozenset(symbols))


def wildcard(min_count: int = 1, max_count: int | None = None) -> PatternElement:
    """Gap of min_count..max_count arbitrary residues."""
    if max_count is None:
        max_count = min_count
    return PatternElement(min_count=min_count, max_count=max_count)


@dataclass(frozen=True)
class MotifPattern:
    """Named motif signature.

    Attributes:
        name: Human-readable motif name (persisted as motif_type)
        category: Motif class, e.g. "N-glycosylation"
        elements: Ordered position classes
    """
    name: str
    category: str
    elements: tuple[PatternElement, ...]

    @property
    def notation(self) -> str:
        return "-".join(element.notation() for element in self.elements)

    def find_first(self, residues: str) -> tuple[int, int] | None:
        """Leftmost non-empty match as (start, end) offsets, end-exclusive.

        Variable-length gaps are greedy: at a given start the longest gap
        that still completes the pattern is taken.
        """
        for start in range(len(residues)):
            end = self._match_from(residues, start, 0)
            if end is not None and end > start:
                return start, end
        return None

    def _match_from(self, residues: str, pos: int, index: int) -> int | None:
        if index == len(self.elements):
            return pos

        element = self.elements[index]
        run = 0
        while (
            run < element.max_count
            and pos + run < len(residues)
            and element.accepts(residues[pos + run])
        ):
            run += 1

        for count in range(run, element.min_count - 1, -1):
            end = self._match_from(residues, pos + count, index + 1)
            if end is not None:
                return end
        return None


# Fixed catalog of scanned motifs (PROSITE PS00001, PS00006 and a
# short basic/acidic tyrosine kinase site signature)
MOTIF_CATALOG: tuple[MotifPattern, ...] = (
    MotifPattern(
        name="N-glycosylation site",
        category="N-glycosylation",
        elements=(residue("N"), any_except("P"), residue("ST"), any_except("P")),
    ),
    MotifPattern(
        name="Casein kinase II phosphorylation site",
        category="Casein kinase II",
        elements=(residue("ST"), wildcard(2), residue("DE")),
    ),
    MotifPattern(
        name="Tyrosine kinase phosphorylation site",
        category="Tyrosine kinase",
        elements=(residue("RK"), wildcard(0, 2), residue("DE")),
    ),
)


class MotifMatch(BaseModel):
    """A motif occurrence within one fragment, in parent sequence coordinates.

    Attributes:
        name: Catalog motif name
        category: Catalog motif class
        matched: Residues covered by the match
        start_position: Absolute start offset in the parent sequence
        end_position: Absolute end offset (exclusive)
        confidence_score: Mean confidence over the whole fragment
    """

    name: str
    category: str
    matched: str
    start_position: int = Field(ge=0)
    end_position: int
    confidence_score: float = Field(ge=0.0)

    @model_validator(mode="after")
    def check_span(self) -> "MotifMatch":
        if self.end_position <= self.start_position:
            raise ValueError(
                f"end_position ({self.end_position}) must exceed "
                f"start_position ({self.start_position})"
            )
        if self.end_position - self.start_position != len(self.matched):
            raise ValueError("Match span does not equal matched residue count")
        return self
