#!/usr/bin/env python3
"""Sample export generation script.

Generates synthetic TargetLynx summary exports for manual checks and
performance runs. Each file follows the report layout the parser expects:
- Banner lines (report title, "Printed <date>")
- Per compound: a "Compound N:  <name>" line, the tab-delimited header and
  one tab-delimited row per sample
- Optionally, some repeated headers lose their last column (--corrupt) the
  way truncated exports do
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

HEADER_COLUMNS = [
    "", "#", "Name", "Type", "Std. Conc", "RT", "Area", "IS Area",
    "Response", "Primary Flags", "Conc.", "%Dev", "S/N", "Vial", "Acq.Date",
]

COMPOUNDS = [
    "Cortisol", "Cortisone", "Testosterone", "Androstenedione", "Progesterone",
    "17-OH Progesterone", "DHEA", "Estradiol", "Aldosterone", "Corticosterone",
]


def generate_compound_block(
    rng: np.random.Generator, samples: int, acquired: pd.Timestamp
) -> pd.DataFrame:
    """Generate the rows of one compound section.

    Mixes the value kinds found in real exports: integers, decimals, flag
    codes, blanks and vial positions.
    """
    rt = float(np.round(rng.uniform(1.5, 6.5), 2))
    types = rng.choice(["Standard", "QC", "Analyte", "Blank"], samples, p=[0.2, 0.1, 0.65, 0.05])
    std_conc = np.where(types == "Standard", np.round(rng.uniform(0.5, 500, samples), 1), np.nan)
    area = np.round(rng.lognormal(8, 1.2, samples), 0)
    is_area = np.round(rng.normal(25000, 1500, samples), 0)
    response = np.round(area / is_area, 4)
    conc = np.round(response * rng.uniform(40, 60), 3)
    flags = rng.choice(["", "bb", "MM", "bbX"], samples, p=[0.7, 0.15, 0.1, 0.05])
    return pd.DataFrame(
        {
            "": [""] * samples,
            "#": np.arange(1, samples + 1),
            "Name": [f"S{acquired:%y%m%d}_{i:03d}" for i in range(1, samples + 1)],
            "Type": types,
            "Std. Conc": std_conc,
            "RT": np.round(rt + rng.normal(0, 0.01, samples), 2),
            "Area": area,
            "IS Area": is_area,
            "Response": response,
            "Primary Flags": flags,
            "Conc.": conc,
            "%Dev": np.where(types == "Standard", np.round(rng.normal(0, 4, samples), 1), np.nan),
            "S/N": np.round(rng.uniform(10, 4000, samples), 1),
            "Vial": [f"1:{chr(65 + (i // 12) % 8)},{i % 12 + 1}" for i in range(samples)],
            "Acq.Date": [f"{acquired:%d-%b-%y}"] * samples,
        }
    )


def _format_row(values: list[object]) -> str:
    cells = []
    for v in values:
        if isinstance(v, float) and np.isnan(v):
            cells.append("")
        else:
            cells.append(str(v))
    return "\t".join(cells)


def render_export(
    compounds: int,
    samples: int,
    seed: int = 42,
    corrupt_every: int = 0,
) -> str:
    """Render one export file as text.

    Args:
        compounds: Number of compound sections
        samples: Data rows per section
        seed: Random seed for reproducible data
        corrupt_every: Drop the last header column of every Nth section
            after the first (0 = never)
    """
    rng = np.random.default_rng(seed)
    acquired = pd.Timestamp("2024-03-14") + pd.Timedelta(days=int(rng.integers(0, 300)))
    header = "\t".join(HEADER_COLUMNS)
    truncated = "\t".join(HEADER_COLUMNS[:-1])
    lines = [
        "Quantify Compound Summary Report",
        "",
        f"Printed {acquired:%a %b %d %H:%M:%S %Y}",
        "",
    ]
    for index in range(compounds):
        name = COMPOUNDS[index % len(COMPOUNDS)]
        damaged = corrupt_every > 0 and index > 0 and index % corrupt_every == 0
        lines.append(f"Compound {index + 1}:  {name}")
        lines.append("")
        lines.append(truncated if damaged else header)
        block = generate_compound_block(rng, samples, acquired)
        for row in block.itertuples(index=False):
            lines.append(_format_row(list(row)))
        lines.append("")
    return "\n".join(lines) + "\n"


def main() -> int:
    """Main CLI interface for sample generation."""
    parser = argparse.ArgumentParser(
        description="Generate synthetic TargetLynx summary exports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Three exports with 10 compounds x 96 samples each
  %(prog)s out/ --files 3

  # One large export with damaged repeated headers
  %(prog)s out/ --files 1 --compounds 40 --samples 384 --corrupt 5
        """,
    )
    parser.add_argument("output_dir", type=Path, help="Directory for the generated .txt files")
    parser.add_argument("--files", type=int, default=1, help="Number of export files (default: 1)")
    parser.add_argument("--compounds", type=int, default=10, help="Compound sections per file (default: 10)")
    parser.add_argument("--samples", type=int, default=96, help="Rows per section (default: 96)")
    parser.add_argument("--corrupt", type=int, default=0, help="Truncate every Nth repeated header (default: 0)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.files <= 0 or args.compounds <= 0 or args.samples <= 0:
        print("Error: --files, --compounds and --samples must be positive", file=sys.stderr)
        return 1

    args.output_dir.mkdir(parents=True, exist_ok=True)
    for i in range(args.files):
        text = render_export(args.compounds, args.samples, seed=args.seed + i, corrupt_every=args.corrupt)
        path = args.output_dir / f"lynx_summary_{i + 1:03d}.txt"
        path.write_text(text, encoding="utf-8")
        print(f"Created export: {path} ({args.compounds} compounds x {args.samples} rows)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
