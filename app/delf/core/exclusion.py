"""User exclusion patterns.

Before deleting, the user may enter one comma-separated line of
patterns. Patterns with glob characters are matched against the base
name and then the full path; plain patterns are case-insensitive
substrings of the full path.
"""

import fnmatch
import os
from collections.abc import Iterable, Sequence

from delf.safety.models import SearchResult

_GLOB_CHARS = frozenset("*?[")


def parse_exclusions(line: str) -> tuple[str, ...]:
    """Split one input line into exclusion patterns.

    Args:
        line: Comma-separated patterns, e.g. ``"*.tmp, important.txt"``.

    Returns:
        Trimmed, non-empty patterns in input order.
    """
    return tuple(part.strip() for part in line.split(",") if part.strip())


def matches_exclusion(path: str, pattern: str) -> bool:
    """Check if a single pattern excludes a path."""
    if _GLOB_CHARS.intersection(pattern):
        return fnmatch.fnmatchcase(os.path.basename(path), pattern) or fnmatch.fnmatchcase(
            path, pattern
        )
    return pattern.lower() in path.lower()


def find_exclusion(path: str, patterns: Sequence[str]) -> str | None:
    """Return the first pattern that excludes a path, or None.

    Blank patterns are ignored.
    """
    for raw in patterns:
        pattern = raw.strip()
        if pattern and matches_exclusion(path, pattern):
            return pattern
    return None


def partition(
    results: Iterable[SearchResult],
    patterns: Sequence[str],
) -> tuple[list[SearchResult], list[SearchResult]]:
    """Split results into those kept and those excluded by the patterns.

    Every input result lands in exactly one of the two lists, and each
    list keeps the input order.

    Args:
        results: Candidate results.
        patterns: Exclusion patterns.

    Returns:
        Tuple of (kept, excluded).
    """
    kept: list[SearchResult] = []
    excluded: list[SearchResult] = []
    for result in results:
        if find_exclusion(result.path, patterns) is not None:
            excluded.append(result)
        else:
            kept.append(result)
    return kept, excluded
