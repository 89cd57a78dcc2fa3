"""Parsing of TargetLynx summary export text."""

from .errors import EmptyFileError, ExportFileError, HeaderMatchError, HeaderNotFoundError
from .parser import ParsedExport, parse_lines
from .reader import normalize_lines, read_export_lines

__all__ = [
    "ExportFileError",
    "EmptyFileError",
    "HeaderNotFoundError",
    "HeaderMatchError",
    "ParsedExport",
    "parse_lines",
    "normalize_lines",
    "read_export_lines",
]
