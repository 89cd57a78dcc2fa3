from __future__ import annotations

import re
from pathlib import Path

from .errors import EmptyFileError

"""Export file reader and line normalizer.

TargetLynx writes its summary report as plain text. Older installations emit
Latin-1 bytes inside an otherwise UTF-8 file, so decoding substitutes invalid
bytes instead of failing. Blank separator lines carry no information and are
dropped; line positions are renumbered over what remains.
"""

__all__ = [
    "read_export_lines",
    "normalize_lines",
    "decode_export",
]

# Surrounding whitespace stripped from every line. Tab is excluded because it
# is the field separator: a leading or trailing empty field must stay put.
_TRIM_CHARS = " \r\n\f\v\u00a0\ufeff"

# Only \r\n, \r and \n end a line. \v, \f, \x1c-\x1e, NEL and U+2028/U+2029 stay
# inside their field.
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def decode_export(raw: bytes, encoding: str = "utf-8", replacement_char: str = "?") -> str:
    """Decode raw export bytes, substituting undecodable bytes.

    Args:
        raw: File content as read from disk
        encoding: Source encoding (TargetLynx default is UTF-8)
        replacement_char: Text put in place of every invalid byte sequence

    Returns:
        Decoded text
    """
    text = raw.decode(encoding, errors="replace")
    if replacement_char != "\ufffd":
        text = text.replace("\ufffd", replacement_char)
    return text


def normalize_lines(text: str, source: str = "<text>") -> list[str]:
    """Split decoded text into trimmed, non-blank lines.

    Steps:
    1. Split on \\n, \\r\\n or \\r only
    2. Strip surrounding whitespace except tabs
    3. Drop lines that are empty or whitespace-only (tabs included)

    Raises:
        EmptyFileError: when no line survives filtering
    """
    lines: list[str] = []
    for raw_line in _LINE_BREAK.split(text):
        line = raw_line.strip(_TRIM_CHARS)
        if not line.strip():
            continue
        lines.append(line)
    if not lines:
        raise EmptyFileError(f"File is empty or unreadable: {source}")
    return lines


def read_export_lines(
    path: Path, encoding: str = "utf-8", replacement_char: str = "?"
) -> list[str]:
    """Read an export file and return its normalized lines.

    Parameters
    ----------
    path: export file path
    encoding: source encoding passed to bytes.decode
    replacement_char: substitute for invalid byte sequences
    """
    raw = Path(path).read_bytes()
    text = decode_export(raw, encoding=encoding, replacement_char=replacement_char)
    return normalize_lines(text, source=str(path))
