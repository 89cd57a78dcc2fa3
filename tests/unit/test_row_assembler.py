from __future__ import annotations

import logging

import pandas as pd

from lynx_parser.export.rows import (
    ANALYTE_COLUMN,
    FILE_COLUMN,
    assemble_rows,
    coerce_column,
    rows_to_frame,
    split_fields,
)
from lynx_parser.models.header import DataBlock, HeaderCandidate


def _header(text: str = "H\tName\tB") -> HeaderCandidate:
    return HeaderCandidate.from_line(text, position=0)


def _block(lines: list[str], analyte: str | None = "Cortisol", start: int = 1) -> DataBlock:
    numbered = tuple((start + i, line) for i, line in enumerate(lines))
    return DataBlock(
        index=0,
        header_position=start - 1,
        end_position=start + len(lines),
        analyte=analyte,
        lines=numbered,
    )


def test_split_fields_blanks_and_na():
    assert split_fields("a\t\tNA\t b ") == ["a", None, None, "b"]


def test_split_fields_custom_na_strings():
    assert split_fields("n/a\tNA\t-", na_strings=["n/a", "-"]) == [None, "NA", None]


def test_positional_mapping():
    rows = assemble_rows([_block(["1\t2\t3"])], _header(), "run.txt")
    [row] = rows
    assert row.values == {"H": "1", "Name": "2", "B": "3"}
    assert row.analyte == "Cortisol"
    assert row.file == "run.txt"
    assert row.line_number == 1
    assert row.field_count_matches


def test_short_row_is_padded():
    [row] = assemble_rows([_block(["1\t2"])], _header(), "run.txt")
    assert row.values == {"H": "1", "Name": "2", "B": None}
    assert row.missing_fields == 1
    assert not row.field_count_matches


def test_long_row_keeps_extra_values_aside():
    [row] = assemble_rows([_block(["1\t2\t3\t4\t"])], _header(), "run.txt")
    assert row.values == {"H": "1", "Name": "2", "B": "3"}
    assert row.extra_fields == ("4",)


def test_trailing_empty_fields_are_not_extras():
    [row] = assemble_rows([_block(["1\t2\t3\t\t"])], _header(), "run.txt")
    assert row.extra_fields == ()
    assert row.field_count_matches


def test_rows_follow_block_then_line_order():
    blocks = [
        _block(["1\t2\t3", "4\t5\t6"], analyte="A", start=1),
        DataBlock(index=1, header_position=5, end_position=8, analyte="B",
                  lines=((6, "7\t8\t9"), (7, "10\t11\t12"))),
    ]
    rows = assemble_rows(blocks, _header(), "run.txt")
    assert [r.values["H"] for r in rows] == ["1", "4", "7", "10"]
    assert [r.analyte for r in rows] == ["A", "A", "B", "B"]


def test_coerce_numeric_column_with_missing():
    out = coerce_column(pd.Series(["1", None, "2.5"], dtype=object))
    assert pd.api.types.is_numeric_dtype(out)
    assert out.iloc[0] == 1
    assert pd.isna(out.iloc[1])
    assert out.iloc[2] == 2.5


def test_coerce_keeps_mixed_column_as_text():
    out = coerce_column(pd.Series(["1", "bb", "2"], dtype=object))
    assert not pd.api.types.is_numeric_dtype(out)
    assert list(out) == ["1", "bb", "2"]


def test_coerce_all_missing_column_unchanged():
    values = pd.Series([None, None], dtype=object)
    out = coerce_column(values)
    assert out.isna().all()


def test_frame_has_header_columns_then_provenance():
    header = _header("\t#\tName\tRT\tArea")
    rows = assemble_rows(
        [_block(["\t1\tCal_1\t2.41\t1520", "\t2\tQC_Low\t2.40\tNA"])], header, "run.txt"
    )
    df = rows_to_frame(rows, header)
    assert list(df.columns) == ["Column1", "#", "Name", "RT", "Area", ANALYTE_COLUMN, FILE_COLUMN]
    assert len(df) == 2
    assert df["RT"].tolist() == [2.41, 2.40]
    assert df["Name"].tolist() == ["Cal_1", "QC_Low"]
    assert df[FILE_COLUMN].tolist() == ["run.txt", "run.txt"]
    assert df[ANALYTE_COLUMN].tolist() == ["Cortisol", "Cortisol"]
    assert pd.isna(df["Area"].iloc[1])
    assert df["Column1"].isna().all()


def test_frame_with_duplicate_header_names():
    header = _header("Name\tArea\tArea")
    rows = assemble_rows([_block(["x\t1\t2"])], header, "run.txt")
    df = rows_to_frame(rows, header)
    assert list(df.columns) == ["Name", "Area", "Area.1", ANALYTE_COLUMN, FILE_COLUMN]
    assert df["Area.1"].iloc[0] == 2


def test_provenance_overrides_clashing_header_columns():
    header = _header("Name\tFile\tRT")
    rows = assemble_rows([_block(["x\tother.raw\t2.1"])], header, "run.txt")
    df = rows_to_frame(rows, header)
    assert list(df.columns) == ["Name", "RT", ANALYTE_COLUMN, FILE_COLUMN]
    assert df[FILE_COLUMN].iloc[0] == "run.txt"


def test_empty_rows_give_empty_frame_with_columns():
    header = _header()
    df = rows_to_frame([], header)
    assert df.empty
    assert list(df.columns) == ["H", "Name", "B", ANALYTE_COLUMN, FILE_COLUMN]


def test_missing_analyte_label_is_na():
    header = _header()
    rows = assemble_rows([_block(["1\t2\t3"], analyte=None)], header, "run.txt")
    df = rows_to_frame(rows, header)
    assert pd.isna(df[ANALYTE_COLUMN].iloc[0])


def test_surplus_fields_warn_once_per_file(caplog):
    lines = ["1\t2\t3\t4", "5\t6\t7", "8\t9\t10\t11\t12"]
    with caplog.at_level(logging.WARNING, logger="lynx_parser.export.rows"):
        rows = assemble_rows([_block(lines)], _header(), "run.txt")
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    message = warnings[0].getMessage()
    assert "file=run.txt" in message
    assert "2 row(s) with fields beyond the header" in message
    assert "lines=1, 3" in message
    assert [r.extra_fields for r in rows] == [("4",), (), ("11", "12")]


def test_no_warning_without_surplus_fields(caplog):
    with caplog.at_level(logging.WARNING, logger="lynx_parser.export.rows"):
        assemble_rows([_block(["1\t2\t3", "4\t5"])], _header(), "run.txt")
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


def test_surplus_warning_lists_limited_line_numbers(caplog):
    lines = ["1\t2\t3\tx"] * 12
    with caplog.at_level(logging.WARNING, logger="lynx_parser.export.rows"):
        assemble_rows([_block(lines)], _header(), "run.txt")
    [record] = caplog.records
    assert "12 row(s)" in record.getMessage()
    assert record.getMessage().endswith("lines=1, 2, 3, 4, 5, 6, 7, 8, 9, 10, ...")
