"""Domain models for the TargetLynx export parser.

This package contains the domain model classes shared by the parse pipeline,
the orchestrator and the CLI.
"""

from .error_record import ErrorRecord
from .export_file import ExportFile, FileStatus
from .header import DataBlock, HeaderCandidate, HeaderOccurrence
from .processing_result import FileStat, ProcessingResult
from .row_data import ParsedRow

__all__ = [
    # Parse models
    "HeaderCandidate",
    "HeaderOccurrence",
    "DataBlock",
    "ParsedRow",
    # Processing models
    "ExportFile",
    "FileStatus",
    "FileStat",
    "ProcessingResult",
    "ErrorRecord",
]
