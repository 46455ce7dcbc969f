"""Residue property table: monomer masses and structural propensities."""

from pydantic import BaseModel, ConfigDict

from protein_annotator.errors import InvalidSequenceError

# Structure labels, listed in tie-break priority order
HELIX = "H"
STRAND = "E"
COIL = "C"
STRUCTURE_LABELS = (HELIX, STRAND, COIL)


class ResidueProperties(BaseModel):
    """Static properties of one standard amino acid.

    Attributes:
        symbol: One-letter residue code
        mass: Free amino acid mass in Daltons
        helix: Alpha-helix propensity
        strand: Beta-strand propensity
        coil: Random-coil propensity
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    mass: float
    helix: float
    strand: float
    coil: float

    def propensities(self) -> tuple[float, float, float]:
        """Propensity triple in (helix, strand, coil) order."""
        return (self.helix, self.strand, self.coil)


# (mass, helix, strand, coil) per residue; Chou-Fasman style propensities
_RESIDUE_DATA = {
    "A": (89.09, 1.42, 0.83, 0.80),
    "R": (174.20, 1.21, 0.84, 0.96),
    "N": (132.12, 0.67, 0.89, 1.34),
    "D": (133.10, 1.01, 0.54, 1.35),
    "C": (121.16, 0.70, 1.19, 1.06),
    "Q": (146.15, 1.11, 1.10, 0.84),
    "E": (147.13, 1.51, 0.37, 1.08),
    "G": (75.07, 0.57, 0.75, 1.56),
    "H": (155.16, 1.00, 0.87, 1.09),
    "I": (131.17, 1.08, 1.60, 0.47),
    "L": (131.17, 1.21, 1.30, 0.59),
    "K": (146.19, 1.16, 0.74, 1.07),
    "M": (149.21, 1.45, 1.05, 0.60),
    "F": (165.19, 1.13, 1.38, 0.59),
    "P": (115.13, 0.57, 0.55, 1.72),
    "S": (105.09, 0.77, 0.75, 1.39),
    "T": (119.12, 0.83, 1.19, 0.96),
    "W": (204.23, 1.08, 1.37, 0.64),
    "Y": (181.19, 0.69, 1.47, 0.87),
    "V": (117.15, 1.06, 1.70, 0.41),
}

RESIDUE_TABLE: dict[str, ResidueProperties] = {
    symbol: ResidueProperties(
        symbol=symbol, mass=mass, helix=helix, strand=strand, coil=coil
    )
    for symbol, (mass, helix, strand, coil) in _RESIDUE_DATA.items()
}

STANDARD_RESIDUES = frozenset(RESIDUE_TABLE)


def residue_properties(symbol: str) -> ResidueProperties:
    """Look up a residue, rejecting symbols outside the standard alphabet.

    Raises:
        InvalidSequenceError: If symbol is not one of the 20 standard residues
    """
    try:
        return RESIDUE_TABLE[symbol]
    except KeyError:
        raise InvalidSequenceError(f"Unknown residue symbol: {symbol!r}") from None


def molecular_weight(sequence: str) -> float:
    """Sum of free amino acid masses over the sequence (Daltons)."""
    return sum(residue_properties(aa).mass for aa in sequence)
