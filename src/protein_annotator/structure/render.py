"""SVG rendering of a secondary structure track."""

from protein_annotator.sequence.properties import HELIX, STRAND

CELL_WIDTH = 10
TRACK_HEIGHT = 30
SVG_HEIGHT = 50

STRUCTURE_COLORS = {
    HELIX: "red",
    STRAND: "yellow",
}
DEFAULT_COLOR = "gray"


def render_structure_svg(sequence: str, structure: str) -> str:
    """Render one colored cell per residue with a legend below the track.

    Helix cells are red, strand cells yellow and coil cells gray.

    Args:
        sequence: Amino acid sequence
        structure: Label string of the same length

    Returns:
        SVG document as a string

    Raises:
        ValueError: If sequence and structure lengths differ
    """
    if len(sequence) != len(structure):
        raise ValueError(
            f"Sequence length {len(sequence)} does not match "
            f"structure length {len(structure)}"
        )

    width = len(sequence) * CELL_WIDTH
    parts = [
        f'<svg width="{width}" height="{SVG_HEIGHT}" '
        f'xmlns="http://www.w3.org/2000/svg">'
    ]

    for i, label in enumerate(structure):
        color = STRUCTURE_COLORS.get(label, DEFAULT_COLOR)
        parts.append(
            f'<rect x="{i * CELL_WIDTH}" y="0" width="{CELL_WIDTH}" '
            f'height="{TRACK_HEIGHT}" fill="{color}" />'
        )

    # Legend
    parts.extend([
        '<rect x="10" y="35" width="10" height="10" fill="red" />',
        '<text x="25" y="45" font-size="10">alpha-helix</text>',
        '<rect x="70" y="35" width="10" height="10" fill="yellow" />',
        '<text x="85" y="45" font-size="10">beta-strand</text>',
        '<rect x="140" y="35" width="10" height="10" fill="gray" />',
        '<text x="155" y="45" font-size="10">coil</text>',
    ])
    parts.append("</svg>")
    return "\n".join(parts)
