from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    ParserConfig,
    apply_env_overrides,
    load_config,
)
from ..export.errors import ExportFileError
from ..logging.init import log_summary, set_debug, setup_logging
from ..services.orchestrator import ProcessingError, parse_export, process_path, resolve_input_files
from ..services.summary import render_summary_line
from ..services.writer import OutputError, write_table

"""CLI entrypoint.

Flow:
- Load .env, then config/lynx.yml (or --config), then CLI overrides
- Resolve the input path (file or non-recursive directory)
- Parse every export, write the combined table when an output path is set
- Print the SUMMARY line and exit with the contract exit code
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

INSPECT_SAMPLE_ROWS = 3


def _load_env_file(path: Path) -> None:
    """Load .env via python-dotenv; existing environment variables win."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="lynx-parse",
        description="Parse TargetLynx summary exports into one table",
    )
    p.add_argument("path", nargs="?", help="Export .txt file or directory (default: source_path from config)")
    p.add_argument("--config", type=Path, help=f"YAML config file (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("-o", "--output", help="Write the combined table (.csv, .tsv or .xlsx)")
    p.add_argument("--workers", type=int, help="Parse files in N worker processes")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print detected headers, analytes & first rows then exit")
    return p.parse_args(argv)


def _apply_cli_overrides(cfg: ParserConfig, args: argparse.Namespace) -> ParserConfig:
    changes: dict[str, object] = {}
    if args.path:
        changes["source_path"] = args.path
    if args.output:
        changes["output_path"] = args.output
    if args.workers is not None:
        changes["max_workers"] = max(1, args.workers)
    return replace(cfg, **changes) if changes else cfg


def _inspect_data(cfg: ParserConfig) -> int:
    try:
        files = resolve_input_files(Path(cfg.source_path), cfg.file_extension)
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    failed = 0
    for f in files:
        print(f"FILE: {f.name}")
        try:
            parsed = parse_export(f, cfg)
        except (ExportFileError, OSError, UnicodeError) as e:
            print(f"  error={e}")
            failed += 1
            continue
        print(f"  header(line {parsed.header.position}): cols={list(parsed.header.columns)}")
        for occ, block in zip(parsed.occurrences, parsed.blocks):
            marker = "" if occ.exact else " (fuzzy)"
            print(f"  line {occ.position}{marker}: analyte={block.analyte!r} rows={len(block.lines)}")
        sample = parsed.table.head(INSPECT_SAMPLE_ROWS).to_dict(orient="records")
        print("    sample_rows=", sample)
    return EXIT_PARTIAL_FAILURE if failed else EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # Only read sys.argv when argv is None; cli_main([]) must not pick up pytest flags
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    logger = setup_logging()
    if args.debug:
        set_debug()
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"))
    try:
        cfg = load_config(args.config or DEFAULT_CONFIG_PATH, required=args.config is not None)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    cfg = _apply_cli_overrides(apply_env_overrides(cfg), args)

    if args.inspect_data:
        return _inspect_data(cfg)

    try:
        result = process_path(Path(cfg.source_path), cfg)
    except ProcessingError as e:
        logger.error(f"input: {e}")
        return EXIT_FATAL

    if result.table is not None and cfg.output_path:
        try:
            written = write_table(result.table, Path(cfg.output_path))
        except OutputError as e:
            logger.error(f"output: {e}")
            return EXIT_FATAL
        logger.info(f"wrote {len(result.table)} rows to {written}")

    summary_line = render_summary_line(result.total_files, result)
    # log_summary adds the "SUMMARY " prefix
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        # Partial failure, or nothing parsed at all
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL
