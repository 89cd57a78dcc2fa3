from __future__ import annotations

from dataclasses import dataclass

"""ParsedRow model for TargetLynx export parsing.

ParsedRow represents one tab-delimited data line mapped onto the canonical
header columns of its file, before column typing.
"""

__all__ = [
    "ParsedRow",
]


@dataclass(frozen=True)
class ParsedRow:
    """One data line mapped onto the canonical header columns.

    Field count mismatches are recorded rather than hidden: header columns
    with no field in the line hold None and are counted in ``missing_fields``;
    non-empty fields beyond the header are kept in ``extra_fields`` and do
    not reach the table.
    """
    line_number: int  # 0-based position in the normalized lines
    values: dict[str, str | None]  # table column -> raw text (None = missing)
    analyte: str | None  # label of the owning block
    file: str  # base name of the source file
    missing_fields: int = 0
    extra_fields: tuple[str, ...] = ()

    @property
    def field_count_matches(self) -> bool:
        return self.missing_fields == 0 and not self.extra_fields
