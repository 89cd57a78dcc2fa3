from __future__ import annotations

import math

"""Approximate string matching for header recovery.

A header occurrence may be damaged in the export: a truncated last column,
a replaced byte, a stray character. The canonical header is therefore looked
up with an approximate *substring* search: a line matches when some substring
of it is within ``max_edits`` Levenshtein edits (insertion, deletion,
substitution, each cost 1) of the header.

The edit budget is ``ceil(tolerance * len(pattern))`` so the threshold scales
with header length. With the default tolerance of 0.1 a 60 character header
tolerates 6 edits.
"""

__all__ = [
    "DEFAULT_TOLERANCE",
    "max_edits",
    "approximate_distance",
    "is_approximate_match",
]

DEFAULT_TOLERANCE = 0.1


def max_edits(pattern_length: int, tolerance: float = DEFAULT_TOLERANCE) -> int:
    """Return the edit budget for a pattern of the given length.

    The product is rounded before ``ceil`` so float noise such as
    ``0.1 * 30 == 3.0000000000000004`` does not grant an extra edit.
    """
    if not 0 <= tolerance < 1:
        raise ValueError(f"tolerance must be in [0, 1): {tolerance}")
    return math.ceil(round(tolerance * pattern_length, 9))


def approximate_distance(pattern: str, text: str, limit: int | None = None) -> int:
    """Smallest edit distance between ``pattern`` and any substring of ``text``.

    Sellers' dynamic programme: the first DP row is all zeros so a match may
    start anywhere in ``text``, and the answer is the minimum of the last row.

    Args:
        pattern: Text to look for
        text: Text to search in
        limit: Optional cut-off. Row minima never decrease, so once a whole
            row exceeds ``limit`` the search stops and ``limit + 1`` is returned.

    Returns:
        The distance, or ``limit + 1`` when it is known to exceed ``limit``
    """
    if not pattern:
        return 0
    n = len(text)
    prev = [0] * (n + 1)
    for i, pc in enumerate(pattern, start=1):
        cur = [i] * (n + 1)
        for j in range(1, n + 1):
            cost = prev[j - 1] if text[j - 1] == pc else prev[j - 1] + 1
            up = prev[j] + 1
            left = cur[j - 1] + 1
            cur[j] = min(cost, up, left)
        if limit is not None and min(cur) > limit:
            return limit + 1
        prev = cur
    return min(prev)


def is_approximate_match(pattern: str, text: str, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    """Return True when ``pattern`` occurs in ``text`` within the edit budget."""
    if pattern in text:
        return True
    budget = max_edits(len(pattern), tolerance)
    # Fewer than len(pattern) - budget characters can never be close enough.
    if len(text) < len(pattern) - budget:
        return False
    return approximate_distance(pattern, text, limit=budget) <= budget
