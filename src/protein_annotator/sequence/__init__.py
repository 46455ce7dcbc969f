"""Sequence layer: residue property table, input policy and fragmentation."""

from protein_annotator.sequence.properties import (
    COIL,
    HELIX,
    RESIDUE_TABLE,
    STANDARD_RESIDUES,
    STRAND,
    STRUCTURE_LABELS,
    ResidueProperties,
    molecular_weight,
    residue_properties,
)
from protein_annotator.sequence.validator import (
    generate_protein_name,
    validate_metadata,
    validate_sequence,
)
from protein_annotator.sequence.fragmenter import (
    DEFAULT_STEP_SIZE,
    DEFAULT_WINDOW_SIZE,
    SequenceWindow,
    expected_fragment_count,
    fragment_sequence,
)

__all__ = [
    "COIL",
    "HELIX",
    "RESIDUE_TABLE",
    "STANDARD_RESIDUES",
    "STRAND",
    "STRUCTURE_LABELS",
    "ResidueProperties",
    "molecular_weight",
    "residue_properties",
    "generate_protein_name",
    "validate_metadata",
    "validate_sequence",
    "DEFAULT_STEP_SIZE",
    "DEFAULT_WINDOW_SIZE",
    "SequenceWindow",
    "expected_fragment_count",
    "fragment_sequence",
]
