from __future__ import annotations

import logging
import re
from collections import Counter
from collections.abc import Iterable, Sequence

from ..models.header import HeaderCandidate, HeaderOccurrence
from .errors import HeaderMatchError, HeaderNotFoundError
from .fuzzy import DEFAULT_TOLERANCE, is_approximate_match

"""Header detection for TargetLynx summary exports.

The report repeats the same column header before every analyte section, so
the header is found in two stages:

1. Lines that occur more than once verbatim, narrowed to those that contain
   the delimiter and one of the header keywords as a whole word.
2. The first survivor becomes the canonical header. Every line is then
   re-scanned with approximate matching so that damaged repetitions
   (truncated last column, replaced bytes) are still found.

One canonical schema governs the whole file. Later occurrences that differ
from it are logged but their own column names are not used.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_KEYWORDS",
    "keyword_pattern",
    "find_duplicate_lines",
    "is_header_like",
    "find_header_candidates",
    "detect_header",
    "find_header_occurrences",
]

DEFAULT_KEYWORDS: tuple[str, ...] = ("RT", "Area", "Name")


def keyword_pattern(keywords: Iterable[str] = DEFAULT_KEYWORDS) -> re.Pattern[str]:
    """Compile a whole-word, case-sensitive alternation of the keywords."""
    words = [re.escape(k) for k in keywords if k]
    if not words:
        raise ValueError("at least one header keyword is required")
    return re.compile(r"\b(?:" + "|".join(words) + r")\b")


def find_duplicate_lines(lines: Sequence[str]) -> set[str]:
    """Return every line value that occurs more than once."""
    counts = Counter(lines)
    return {line for line, n in counts.items() if n > 1}


def is_header_like(line: str, pattern: re.Pattern[str], delimiter: str = "\t") -> bool:
    return delimiter in line and pattern.search(line) is not None


def find_header_candidates(
    lines: Sequence[str],
    keywords: Iterable[str] = DEFAULT_KEYWORDS,
    delimiter: str = "\t",
    allow_single_section: bool = True,
) -> list[tuple[int, str]]:
    """List ``(position, line)`` pairs that qualify as header candidates.

    Repeated lines are preferred. When no repeated line qualifies and
    ``allow_single_section`` is set, any qualifying line is accepted so an
    export with a single analyte section still parses.
    """
    pattern = keyword_pattern(keywords)
    duplicates = find_duplicate_lines(lines)
    candidates = [
        (pos, line)
        for pos, line in enumerate(lines)
        if line in duplicates and is_header_like(line, pattern, delimiter)
    ]
    if candidates or not allow_single_section:
        return candidates
    return [(pos, line) for pos, line in enumerate(lines) if is_header_like(line, pattern, delimiter)]


def detect_header(
    lines: Sequence[str],
    keywords: Iterable[str] = DEFAULT_KEYWORDS,
    delimiter: str = "\t",
    allow_single_section: bool = True,
    source: str = "<lines>",
) -> HeaderCandidate:
    """Pick the canonical header of a file.

    Raises:
        HeaderNotFoundError: no line passes the duplicate + keyword test
    """
    candidates = find_header_candidates(
        lines,
        keywords=keywords,
        delimiter=delimiter,
        allow_single_section=allow_single_section,
    )
    if not candidates:
        raise HeaderNotFoundError(f"No valid header found in file: {source}")
    position, text = candidates[0]
    header = HeaderCandidate.from_line(text, position, delimiter=delimiter)
    logger.debug(
        f"header: file={source} position={position} columns={len(header.columns)} "
        f"candidates={len(candidates)}"
    )
    return header


def find_header_occurrences(
    lines: Sequence[str],
    header: HeaderCandidate,
    tolerance: float = DEFAULT_TOLERANCE,
    source: str = "<lines>",
) -> list[HeaderOccurrence]:
    """Locate every line where the canonical header recurs.

    Returns:
        Occurrences sorted by ascending position

    Raises:
        HeaderMatchError: no line matches the header text, which only happens
            when the header line itself was filtered out upstream
    """
    occurrences: list[HeaderOccurrence] = []
    for pos, line in enumerate(lines):
        if line == header.text:
            occurrences.append(HeaderOccurrence(position=pos, text=line, exact=True))
        elif is_approximate_match(header.text, line, tolerance):
            logger.debug(f"header: file={source} fuzzy occurrence at line {pos}")
            occurrences.append(HeaderOccurrence(position=pos, text=line, exact=False))
    if not occurrences:
        raise HeaderMatchError(f"Could not find fuzzy match for header line in: {source}")
    return occurrences
