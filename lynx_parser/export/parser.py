from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import pandas as pd

from ..models.header import DataBlock, HeaderCandidate, HeaderOccurrence
from ..models.row_data import ParsedRow
from .fuzzy import DEFAULT_TOLERANCE
from .header import DEFAULT_KEYWORDS, detect_header, find_header_occurrences
from .rows import DEFAULT_NA_STRINGS, assemble_rows, rows_to_frame
from .segment import segment_blocks

"""Single-file parse pipeline over normalized lines.

normalized lines -> canonical header -> occurrences -> blocks -> rows -> DataFrame
"""

__all__ = [
    "ParsedExport",
    "parse_lines",
]


@dataclass(frozen=True)
class ParsedExport:
    """Every intermediate product of parsing one export file."""
    file_name: str
    lines: tuple[str, ...]
    header: HeaderCandidate
    occurrences: tuple[HeaderOccurrence, ...]
    blocks: tuple[DataBlock, ...]
    rows: tuple[ParsedRow, ...]
    table: pd.DataFrame

    @property
    def extra_field_rows(self) -> int:
        return sum(1 for row in self.rows if row.extra_fields)

    @property
    def analytes(self) -> tuple[str | None, ...]:
        return tuple(block.analyte for block in self.blocks)


def parse_lines(
    lines: Sequence[str],
    file_name: str,
    *,
    delimiter: str = "\t",
    header_keywords: Iterable[str] = DEFAULT_KEYWORDS,
    fuzzy_tolerance: float = DEFAULT_TOLERANCE,
    allow_single_section: bool = True,
    na_strings: Iterable[str] = DEFAULT_NA_STRINGS,
) -> ParsedExport:
    """Run header detection, segmentation and row assembly on one file.

    Raises:
        HeaderNotFoundError: no qualifying header line
        HeaderMatchError: canonical header not found by the fuzzy re-scan
    """
    header = detect_header(
        lines,
        keywords=header_keywords,
        delimiter=delimiter,
        allow_single_section=allow_single_section,
        source=file_name,
    )
    occurrences = find_header_occurrences(lines, header, tolerance=fuzzy_tolerance, source=file_name)
    blocks = segment_blocks(lines, occurrences, delimiter=delimiter)
    rows = assemble_rows(blocks, header, file_name, delimiter=delimiter, na_strings=na_strings)
    return ParsedExport(
        file_name=file_name,
        lines=tuple(lines),
        header=header,
        occurrences=tuple(occurrences),
        blocks=tuple(blocks),
        rows=tuple(rows),
        table=rows_to_frame(rows, header),
    )
