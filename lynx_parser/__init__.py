"""Parser for TargetLynx summary exports (LC-MS quantitation reports).

Typical use::

    from lynx_parser import read_lynx
    df = read_lynx("exports/")          # every .txt file in the folder
    df = read_lynx("exports/run1.txt")  # single file
"""

from .services.orchestrator import parse_one_file, process_path, read_lynx

__version__ = "0.3.0"

__all__ = [
    "parse_one_file",
    "process_path",
    "read_lynx",
    "__version__",
]
