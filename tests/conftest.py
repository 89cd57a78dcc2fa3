# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
from typing import Callable, Sequence

import pytest

from lynx_parser.logging.init import reset_logging

HEADER_COLUMNS = [
    "", "#", "Name", "Type", "Std. Conc", "RT", "Area", "IS Area",
    "Response", "Conc.", "%Dev", "Vial",
]
HEADER = "\t".join(HEADER_COLUMNS)

SAMPLE_ROWS: list[list[object]] = [
    ["", 1, "Blank_01", "Blank", "", "", "", "", "", "", "", "1:A,1"],
    ["", 2, "Cal_1", "Standard", 1.0, 2.41, 1520, 25010, 0.0608, 0.98, -2.0, "1:A,2"],
    ["", 3, "QC_Low", "QC", "", 2.40, 4100, 24870, 0.1649, 2.61, "", "1:A,3"],
]


def render_export(sections: Sequence[tuple], banner: bool = True) -> str:
    """Render TargetLynx-style export text.

    Each section is ``(analyte, rows)`` or ``(analyte, rows, header_line)``.
    """
    lines: list[str] = []
    if banner:
        lines += ["Quantify Compound Summary Report", "Printed Tue Mar 12 10:15:02 2024", ""]
    for i, section in enumerate(sections, start=1):
        name, rows = section[0], section[1]
        header = section[2] if len(section) > 2 else HEADER
        lines.append(f"Compound {i}:  {name}")
        lines.append("")
        lines.append(header)
        lines.extend("\t".join(str(c) for c in row) for row in rows)
        lines.append("")
    return "\n".join(lines) + "\n"


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("LYNX_SOURCE_PATH", raising=False)
        monkeypatch.delenv("LYNX_OUTPUT_PATH", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_path: ./data
file_extension: .txt
delimiter: "\\t"
header_keywords: [RT, Area, Name]
fuzzy_tolerance: 0.1
na_strings: [NA]
error_log_dir: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "lynx.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def export_text() -> Callable[..., str]:
    return render_export


@pytest.fixture()
def sample_sections() -> list[tuple]:
    return [
        ("Cortisol", SAMPLE_ROWS),
        ("Cortisone", SAMPLE_ROWS),
        ("Testosterone", SAMPLE_ROWS),
    ]


@pytest.fixture()
def write_export(temp_workdir: Path) -> Callable[..., Path]:
    """Write export text (or bytes) into ./data and return the path."""
    def _write(name: str, content: str | bytes) -> Path:
        path = temp_workdir / "data" / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path
    return _write


@pytest.fixture()
def sample_export(write_export, sample_sections) -> Path:
    return write_export("run_001.txt", render_export(sample_sections))
