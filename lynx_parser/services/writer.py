from __future__ import annotations

from pathlib import Path

import pandas as pd

"""Write the combined table to disk.

The output format follows the file suffix: .csv, .tsv, or .xlsx (openpyxl).
"""

__all__ = [
    "OutputError",
    "SUPPORTED_SUFFIXES",
    "write_table",
]

SUPPORTED_SUFFIXES = (".csv", ".tsv", ".xlsx")


class OutputError(Exception):
    """Raised when the combined table cannot be written."""


def write_table(df: pd.DataFrame, path: Path) -> Path:
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise OutputError(f"unsupported output format '{suffix}' (use {', '.join(SUPPORTED_SUFFIXES)})")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if suffix == ".xlsx":
            df.to_excel(path, index=False, engine="openpyxl", sheet_name="TargetLynx")
        else:
            df.to_csv(path, index=False, sep="\t" if suffix == ".tsv" else ",")
    except OSError as e:
        raise OutputError(f"cannot write {path}: {e}") from e
    return path
