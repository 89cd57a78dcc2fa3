from __future__ import annotations

import re

from lynx_parser.cli import main as cli_main

from conftest import SAMPLE_ROWS, render_export

"""SUMMARY line contract: exactly one line, fixed key order."""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+files=([0-9]+)/(\1)\s+success=([0-9]+)\s+failed=([0-9]+)\s+"
    r"rows=([0-9]+)\s+analytes=([0-9]+)\s+elapsed_sec=([0-9]+\.?[0-9]*)\s+"
    r"throughput_rps=([0-9]+\.?[0-9]*)$"
)


def _summary_lines(out: str) -> list[str]:
    return [line for line in out.splitlines() if line.startswith("SUMMARY")]


def test_summary_line_matches_contract(write_config, write_export, sample_sections, capsys):
    write_export("a.txt", render_export(sample_sections))
    write_export("b.txt", "no header\n")
    cli_main([])
    lines = _summary_lines(capsys.readouterr().out)
    assert len(lines) == 1
    m = SUMMARY_PATTERN.match(lines[0])
    assert m, lines[0]
    files, _, success, failed, rows, analytes = m.groups()[:6]
    assert (files, success, failed) == ("2", "1", "1")
    assert rows == str(3 * len(SAMPLE_ROWS))
    assert analytes == "3"


def test_summary_is_last_line(write_config, write_export, sample_sections, capsys):
    write_export("a.txt", render_export(sample_sections))
    cli_main([])
    out_lines = capsys.readouterr().out.strip().splitlines()
    assert out_lines[-1].startswith("SUMMARY ")
