from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .error_record import ErrorRecord

"""Processing result models for a batch of TargetLynx exports.

ProcessingResult carries the combined table together with the counters used
for the SUMMARY line and the list of per-file failures.
"""

__all__ = [
    "FileStat",
    "ProcessingResult",
]


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    status: str  # success/failed
    rows: int
    analytes: int  # number of header occurrences
    elapsed_seconds: float
    error_type: str | None = None
    extra_field_rows: int = 0  # rows with fields beyond the header


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of one batch.

    ``table`` is the combined pandas DataFrame, or None when no file parsed.
    Check ``nothing_parsed`` to tell total failure apart from a successful
    parse that produced no rows.
    """
    success_files: int
    failed_files: int
    total_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float
    table: Any = None
    file_stats: list[FileStat] = field(default_factory=list)
    failures: list[ErrorRecord] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files

    @property
    def nothing_parsed(self) -> bool:
        return self.success_files == 0

    @property
    def failed_file_names(self) -> list[str]:
        return [f.file for f in self.failures]
