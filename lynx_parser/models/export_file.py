from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

"""ExportFile domain model and FileStatus enum.

ExportFile is the typed per-file outcome of the parse pipeline. A failed file
carries its error code and message instead of raising, so the orchestrator
can report exactly which files failed and why.
"""

__all__ = [
    "FileStatus",
    "ExportFile",
]


class FileStatus(Enum):
    """Status enum for ExportFile processing lifecycle.

    State transitions: pending → (success | failed)
    """
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class ExportFile:
    """Processing outcome for a single export file.

    ``table`` holds the parsed rows (pandas DataFrame) on success and is None
    on failure. ``error_type`` uses the UPPER_SNAKE codes of the error log.
    """
    path: Path                          # Full path to the export file
    name: str                           # Base name, used as the File column
    table: Any = None                   # pandas DataFrame of parsed rows
    header_columns: tuple[str, ...] = ()
    analytes: tuple[str | None, ...] = ()  # one label per header occurrence
    start_time: datetime | None = None  # Processing start (UTC)
    end_time: datetime | None = None    # Processing end (UTC)
    status: FileStatus = FileStatus.PENDING
    total_rows: int = 0
    extra_field_rows: int = 0          # rows whose surplus fields stayed out of the table
    error_type: str | None = None
    error: str | None = None            # Failure reason summary

    @property
    def ok(self) -> bool:
        return self.status == FileStatus.SUCCESS

    @property
    def elapsed_seconds(self) -> float:
        if self.start_time is None or self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()
