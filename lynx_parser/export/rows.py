from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

import pandas as pd

from ..models.header import DataBlock, HeaderCandidate
from ..models.row_data import ParsedRow

"""Row assembly: data block lines -> typed pandas DataFrame.

Data lines are split on the delimiter and mapped positionally onto the
canonical header columns. Non-empty fields beyond the header stay on the
ParsedRow and are reported in one WARN per file. Typing happens per column
after all rows are collected: a column whose present values all parse as
numbers becomes numeric, anything else stays text. Flag codes, vial ids and
empty cells never make a file fail.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ANALYTE_COLUMN",
    "FILE_COLUMN",
    "DEFAULT_NA_STRINGS",
    "split_fields",
    "assemble_rows",
    "coerce_column",
    "rows_to_frame",
]

ANALYTE_COLUMN = "Analyte"
FILE_COLUMN = "File"
DEFAULT_NA_STRINGS: tuple[str, ...] = ("NA",)
# Line numbers listed in the surplus-field warning
MAX_REPORTED_LINES = 10


def split_fields(
    line: str, delimiter: str = "\t", na_strings: Iterable[str] = DEFAULT_NA_STRINGS
) -> list[str | None]:
    """Split a data line; empty fields and NA markers become None."""
    na = set(na_strings)
    fields: list[str | None] = []
    for raw in line.split(delimiter):
        value = raw.strip()
        fields.append(None if value == "" or value in na else value)
    return fields


def assemble_rows(
    blocks: Sequence[DataBlock],
    header: HeaderCandidate,
    file_name: str,
    delimiter: str = "\t",
    na_strings: Iterable[str] = DEFAULT_NA_STRINGS,
) -> list[ParsedRow]:
    """Map every block line onto the header columns.

    Rows come out in block order and, inside a block, in line order. Each row
    carries the analyte label of the block it was read from.
    """
    columns = header.table_columns
    width = len(columns)
    na = tuple(na_strings)
    rows: list[ParsedRow] = []
    for block in blocks:
        for line_number, line in block.lines:
            fields = split_fields(line, delimiter, na)
            missing = max(0, width - len(fields))
            extra = tuple(f for f in fields[width:] if f is not None)
            padded = fields[:width] + [None] * missing
            if missing or extra:
                logger.debug(
                    f"rows: file={file_name} line={line_number} fields={len(fields)} "
                    f"columns={width}"
                )
            rows.append(
                ParsedRow(
                    line_number=line_number,
                    values=dict(zip(columns, padded)),
                    analyte=block.analyte,
                    file=file_name,
                    missing_fields=missing,
                    extra_fields=extra,
                )
            )
    surplus = [row.line_number for row in rows if row.extra_fields]
    if surplus:
        shown = ", ".join(str(n) for n in surplus[:MAX_REPORTED_LINES])
        more = "" if len(surplus) <= MAX_REPORTED_LINES else ", ..."
        logger.warning(
            f"file={file_name} reason={len(surplus)} row(s) with fields beyond the header "
            f"kept out of the table lines={shown}{more}"
        )
    return rows


def coerce_column(values: pd.Series) -> pd.Series:
    """Convert a text column to numbers when every present value is numeric.

    Missing values do not block the conversion and become NaN. A single
    non-numeric value keeps the whole column as text.
    """
    present = values.dropna()
    if present.empty:
        return values
    try:
        pd.to_numeric(present, errors="raise")
    except (ValueError, TypeError):
        return values
    return pd.to_numeric(values, errors="coerce")


def rows_to_frame(rows: Sequence[ParsedRow], header: HeaderCandidate) -> pd.DataFrame:
    """Materialize parsed rows into a DataFrame with Analyte and File columns last."""
    columns = header.table_columns
    records = [[row.values.get(c) for c in columns] for row in rows]
    df = pd.DataFrame(records, columns=columns, dtype=object)
    for col in columns:
        df[col] = coerce_column(df[col])

    clashing = [c for c in (ANALYTE_COLUMN, FILE_COLUMN) if c in df.columns]
    if clashing:
        logger.debug(f"rows: header columns {clashing} replaced by provenance columns")
        df = df.drop(columns=clashing)
    df[ANALYTE_COLUMN] = pd.Series([row.analyte for row in rows], index=df.index, dtype=object)
    df[FILE_COLUMN] = pd.Series([row.file for row in rows], index=df.index, dtype=object)
    return df
