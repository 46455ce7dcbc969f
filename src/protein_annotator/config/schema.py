"""Pydantic models for annotator configuration."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator


class FragmentationConfig(BaseModel):
    """Sliding-window parameters for sequence fragmentation."""

    window_size: int = Field(
        default=15,
        ge=1,
        description="Residues per fragment window",
    )
    step_size: int = Field(
        default=5,
        ge=1,
        description="Offset between consecutive window starts",
    )

    @model_validator(mode="after")
    def check_step_within_window(self) -> "FragmentationConfig":
        """Reject steps that would skip residues between windows."""
        if self.step_size > self.window_size:
            raise ValueError(
                f"step_size ({self.step_size}) must not exceed "
                f"window_size ({self.window_size})"
            )
        return self


class SequencePolicy(BaseModel):
    """Input bounds enforced before annotation."""

    min_length: int = Field(
        default=20,
        ge=1,
        description="Minimum sequence length (inclusive)",
    )
    max_length: int = Field(
        default=2000,
        ge=1,
        description="Maximum sequence length (inclusive)",
    )
    max_name_length: int = Field(
        default=100,
        ge=1,
        description="Maximum protein name length",
    )
    max_description_length: int = Field(
        default=1000,
        ge=0,
        description="Maximum protein description length",
    )

    @model_validator(mode="after")
    def check_length_bounds(self) -> "SequencePolicy":
        if self.min_length > self.max_length:
            raise ValueError(
                f"min_length ({self.min_length}) must not exceed "
                f"max_length ({self.max_length})"
            )
        return self


class AnnotatorConfig(BaseModel):
    """Main annotator configuration."""

    duckdb_path: Path = Field(
        ...,
        description="Path to DuckDB database file",
    )
    base_url: str = Field(
        default="http://localhost:3000/api",
        description="Prefix for protein download and fragment reference URLs",
    )
    fragmentation: FragmentationConfig = Field(
        default_factory=FragmentationConfig,
        description="Sliding-window fragmentation parameters",
    )
    policy: SequencePolicy = Field(
        default_factory=SequencePolicy,
        description="Input sequence and metadata bounds",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")
