from __future__ import annotations

from dataclasses import dataclass

"""Header and block models for TargetLynx export parsing.

HeaderCandidate is the canonical header schema of one file, HeaderOccurrence
a line position where that schema repeats, and DataBlock the tab-delimited
lines owned by one occurrence.
"""

__all__ = [
    "HeaderCandidate",
    "HeaderOccurrence",
    "DataBlock",
]


@dataclass(frozen=True)
class HeaderCandidate:
    """A line accepted as the column header of an export file.

    ``columns`` keeps the header order and any repeated names. Blank header
    cells (TargetLynx starts the header with an unnamed row-number column)
    are named ``Column<N>`` after their 1-based field index.
    """
    text: str  # Header line as it appears in the normalized lines
    position: int  # 0-based line position of the first qualifying occurrence
    columns: tuple[str, ...]

    @classmethod
    def from_line(cls, text: str, position: int, delimiter: str = "\t") -> HeaderCandidate:
        fields = text.split(delimiter)
        columns = tuple(
            name.strip() or f"Column{index}" for index, name in enumerate(fields, start=1)
        )
        return cls(text=text, position=position, columns=columns)

    @property
    def table_columns(self) -> list[str]:
        """Column labels for the materialized table.

        Repeated names get ``.1``, ``.2`` suffixes in order of appearance, the
        way pandas names duplicate CSV columns.
        """
        seen: dict[str, int] = {}
        labels: list[str] = []
        for name in self.columns:
            count = seen.get(name, 0)
            label = name if count == 0 else f"{name}.{count}"
            # A suffixed label may collide with a real column named e.g. "Area.1"
            while label in seen:
                count += 1
                label = f"{name}.{count}"
            seen[name] = count + 1
            seen.setdefault(label, 1)
            labels.append(label)
        return labels


@dataclass(frozen=True)
class HeaderOccurrence:
    """One line position where the canonical header recurs."""
    position: int
    text: str
    exact: bool  # False when recovered by fuzzy matching only


@dataclass(frozen=True)
class DataBlock:
    """Data lines owned by one header occurrence.

    The block spans the half-open range ``(header_position, end_position)``;
    ``lines`` keeps only the delimiter-containing lines of that range as
    ``(line_position, text)`` pairs.
    """
    index: int
    header_position: int
    end_position: int
    analyte: str | None
    lines: tuple[tuple[int, str], ...] = ()
