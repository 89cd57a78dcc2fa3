from __future__ import annotations

"""Per-file parse errors.

Every error raised while turning one export file into rows derives from
ExportFileError. The orchestrator catches them at the file boundary, records
the ``error_type`` code and moves on to the next file.
"""

__all__ = [
    "ExportFileError",
    "EmptyFileError",
    "HeaderNotFoundError",
    "HeaderMatchError",
]


class ExportFileError(Exception):
    """Base class for errors that disqualify a single export file."""

    error_type = "PARSE_ERROR"


class EmptyFileError(ExportFileError):
    """Raised when a file has no usable lines after normalization."""

    error_type = "EMPTY_FILE"


class HeaderNotFoundError(ExportFileError):
    """Raised when no line passes the duplicate + keyword header test."""

    error_type = "HEADER_NOT_FOUND"


class HeaderMatchError(ExportFileError):
    """Raised when the canonical header cannot be located by fuzzy matching."""

    error_type = "HEADER_MATCH_FAILED"
