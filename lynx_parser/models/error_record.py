from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for per-file failure logging.

One ErrorRecord is written for every export file that could not be parsed.
Records serialize to JSON Lines with a fixed key set.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Base name of the export file
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human readable failure reason
    """
    timestamp: str  # ISO8601 UTC
    file: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord with current UTC timestamp."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize ErrorRecord to JSON Lines format."""
        return json.dumps(asdict(self), ensure_ascii=False)
