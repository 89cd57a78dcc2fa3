from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor
from datetime import UTC, datetime
from pathlib import Path

import pandas as pd

from ..config.loader import ParserConfig
from ..export.errors import ExportFileError
from ..export.parser import ParsedExport, parse_lines
from ..export.reader import read_export_lines
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.export_file import ExportFile, FileStatus
from ..models.processing_result import FileStat, ProcessingResult
from .progress import ProgressTracker

logger = logging.getLogger(__name__)

"""Batch orchestration for TargetLynx exports.

This module resolves the input path, runs the single-file pipeline for every
export and combines the per-file tables:

1. Resolve the path to a list of export files (fatal errors abort here)
2. Parse each file; per-file failures become FAILED ExportFile results
3. Log and record every failure, concatenate every success
4. Return a ProcessingResult with the combined table and metrics
"""

__all__ = [
    "ProcessingError",
    "PathNotFoundError",
    "NoMatchingFilesError",
    "resolve_input_files",
    "parse_export",
    "parse_one_file",
    "combine_tables",
    "process_files",
    "process_path",
    "read_lynx",
]


class ProcessingError(Exception):
    """Base exception for batch-fatal errors."""
    pass


class PathNotFoundError(ProcessingError):
    """Input path does not exist."""


class NoMatchingFilesError(ProcessingError):
    """No file with the export extension at the input path."""


def _has_extension(path: Path, extension: str) -> bool:
    return path.suffix.lower() == extension.lower()


def resolve_input_files(path: Path, extension: str = ".txt") -> list[Path]:
    """Resolve a file or directory path to the export files to parse.

    A directory is scanned non-recursively and the matches are returned in
    name order.

    Raises:
        PathNotFoundError: path does not exist
        NoMatchingFilesError: a file without the extension, or a directory
            without any matching file
    """
    path = Path(path)
    if not path.exists():
        raise PathNotFoundError(f"Path does not exist: {path}")

    if path.is_dir():
        try:
            files = sorted(
                (p for p in path.iterdir() if p.is_file() and _has_extension(p, extension)),
                key=lambda p: p.name,
            )
        except OSError as e:
            raise ProcessingError(f"Error reading directory {path}: {e}") from e
        if not files:
            raise NoMatchingFilesError(f"No {extension} files found at path: {path}")
        return files

    if _has_extension(path, extension):
        return [path]
    raise NoMatchingFilesError(
        f"Provided path is neither a {extension} file nor a valid directory: {path}"
    )


def parse_export(path: Path, config: ParserConfig) -> ParsedExport:
    """Read and parse one export file, raising on failure."""
    path = Path(path)
    lines = read_export_lines(path, encoding=config.encoding, replacement_char=config.replacement_char)
    return parse_lines(
        lines,
        path.name,
        delimiter=config.delimiter,
        header_keywords=config.header_keywords,
        fuzzy_tolerance=config.fuzzy_tolerance,
        allow_single_section=config.allow_single_section,
        na_strings=config.na_strings,
    )


def parse_one_file(path: Path, config: ParserConfig | None = None) -> ExportFile:
    """Parse a single export file without raising per-file errors.

    Returns:
        ExportFile with status SUCCESS and the parsed table, or status FAILED
        with ``error_type`` and ``error`` set
    """
    config = config or ParserConfig()
    path = Path(path)
    start_time = datetime.now(UTC)
    try:
        parsed = parse_export(path, config)
    except ExportFileError as e:
        error_type, message = e.error_type, str(e)
    except (OSError, UnicodeError) as e:
        error_type, message = "READ_ERROR", f"Cannot read {path}: {e}"
    else:
        return ExportFile(
            path=path,
            name=path.name,
            table=parsed.table,
            header_columns=parsed.header.columns,
            analytes=parsed.analytes,
            start_time=start_time,
            end_time=datetime.now(UTC),
            status=FileStatus.SUCCESS,
            total_rows=len(parsed.table),
            extra_field_rows=parsed.extra_field_rows,
        )
    return ExportFile(
        path=path,
        name=path.name,
        start_time=start_time,
        end_time=datetime.now(UTC),
        status=FileStatus.FAILED,
        error_type=error_type,
        error=message,
    )


def _parse_all(paths: list[Path], config: ParserConfig, progress: ProgressTracker):
    """Yield ExportFile results in submission order."""
    if config.max_workers > 1 and len(paths) > 1:
        workers = min(config.max_workers, len(paths))
        logger.debug(f"parsing {len(paths)} files with {workers} worker processes")
        with ProcessPoolExecutor(max_workers=workers) as pool:
            # Workers may not share the parent working directory
            futures = [pool.submit(parse_one_file, p.resolve(), config) for p in paths]
            for path, future in zip(paths, futures):
                progress.start_file(path)
                yield future.result()
        return
    for path in paths:
        progress.start_file(path)
        yield parse_one_file(path, config)


def combine_tables(tables: list[pd.DataFrame]) -> pd.DataFrame:
    """Row-wise concatenation with the union of all columns.

    Columns keep first-seen order. Tables without rows still contribute
    their columns but are left out of ``pd.concat``.
    """
    columns: list[str] = []
    for t in tables:
        columns.extend(c for c in t.columns if c not in columns)
    filled = [t for t in tables if not t.empty]
    if not filled:
        return tables[0].iloc[0:0].reindex(columns=columns)
    combined = pd.concat(filled, ignore_index=True, sort=False)
    return combined.reindex(columns=columns)


def process_files(paths: list[Path], config: ParserConfig | None = None) -> ProcessingResult:
    """Parse every export file and combine the successful tables.

    A failed file is logged at WARN level with its name and reason, recorded
    in ``ProcessingResult.failures`` and excluded from the table. It never
    aborts the batch.
    """
    config = config or ParserConfig()
    start_time = datetime.now(UTC)
    error_log = ErrorLogBuffer(Path(config.error_log_dir)) if config.error_log_dir else None

    tables: list[pd.DataFrame] = []
    file_stats: list[FileStat] = []
    failures: list[ErrorRecord] = []
    success_count = 0
    failed_count = 0
    total_rows = 0

    with ProgressTracker(len(paths)) as progress:
        for result in _parse_all(list(paths), config, progress):
            if result.ok:
                success_count += 1
                total_rows += result.total_rows
                tables.append(result.table)
                if result.total_rows == 0:
                    logger.warning(f"file={result.name} reason=no data rows below the header")
                else:
                    logger.debug(
                        f"file={result.name} rows={result.total_rows} analytes={len(result.analytes)}"
                    )
            else:
                failed_count += 1
                logger.warning(f"Error in file: {result.name} | {result.error}")
                record = ErrorRecord.create(
                    file=result.name,
                    error_type=result.error_type or "PARSE_ERROR",
                    message=result.error or "",
                )
                failures.append(record)
                if error_log is not None:
                    error_log.append(record)

            progress.set_postfix(success=success_count, failed=failed_count, rows=total_rows)
            progress.finish_file(success=result.ok)
            file_stats.append(
                FileStat(
                    file_name=result.name,
                    status=result.status.value,
                    rows=result.total_rows,
                    analytes=len(result.analytes),
                    elapsed_seconds=result.elapsed_seconds,
                    error_type=result.error_type,
                    extra_field_rows=result.extra_field_rows,
                )
            )

    if error_log is not None:
        try:
            log_path = error_log.flush()
        except OSError as e:
            logger.warning(f"failed to write error log: {e}")
        else:
            if log_path is not None:
                logger.info(f"error log written: {log_path}")

    table: pd.DataFrame | None = None
    if tables:
        table = combine_tables(tables)
    else:
        logger.warning("No files parsed successfully. Check formats or header issues.")

    end_time = datetime.now(UTC)
    elapsed_seconds = (end_time - start_time).total_seconds()
    throughput_rps = total_rows / elapsed_seconds if elapsed_seconds > 0 else 0.0

    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        total_rows=total_rows,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        throughput_rows_per_sec=throughput_rps,
        table=table,
        file_stats=file_stats,
        failures=failures,
    )


def process_path(path: Path | str, config: ParserConfig | None = None) -> ProcessingResult:
    """Parse a single export file or every export file in a directory.

    Raises:
        PathNotFoundError, NoMatchingFilesError: before any file is read
    """
    config = config or ParserConfig()
    files = resolve_input_files(Path(path), config.file_extension)
    logger.info(f"Parsing {len(files)} file(s) from: {path}")
    return process_files(files, config)


def read_lynx(path: Path | str, config: ParserConfig | None = None) -> pd.DataFrame | None:
    """Return the combined table for a path, or None when nothing parsed."""
    return process_path(path, config).table
