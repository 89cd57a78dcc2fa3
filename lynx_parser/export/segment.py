from __future__ import annotations

from collections.abc import Sequence

from ..models.header import DataBlock, HeaderOccurrence

"""Block segmentation: header positions -> data blocks + analyte labels.

The export has no end-of-section marker. A block runs from the line after a
header occurrence up to the line before the next occurrence, or to the end
of the file for the last one. Lines without the delimiter inside that range
(page banners, "Printed <date>" footers, compound names) are not data and
are left out of the block.
"""

__all__ = [
    "analyte_label",
    "segment_blocks",
]


def analyte_label(lines: Sequence[str], header_position: int) -> str | None:
    """Trimmed text of the line above a header, or None at the top of the file."""
    if header_position <= 0 or header_position > len(lines):
        return None
    return lines[header_position - 1].strip()


def segment_blocks(
    lines: Sequence[str],
    occurrences: Sequence[HeaderOccurrence],
    delimiter: str = "\t",
) -> list[DataBlock]:
    """Split normalized lines into one DataBlock per header occurrence.

    Every occurrence gets exactly one block and one label slot, in
    occurrence order, so labels can never shift onto a neighbouring block.
    """
    positions = [occ.position for occ in occurrences]
    if any(b <= a for a, b in zip(positions, positions[1:])):
        raise ValueError(f"header positions must be strictly increasing: {positions}")

    blocks: list[DataBlock] = []
    for index, start in enumerate(positions):
        end = positions[index + 1] if index + 1 < len(positions) else len(lines)
        data = tuple(
            (pos, lines[pos]) for pos in range(start + 1, end) if delimiter in lines[pos]
        )
        blocks.append(
            DataBlock(
                index=index,
                header_position=start,
                end_position=end,
                analyte=analyte_label(lines, start),
                lines=data,
            )
        )
    return blocks
