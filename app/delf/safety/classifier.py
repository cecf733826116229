"""Safety classification of matched paths.

Assigns every matched path to a safety tier by plain string-prefix
matching against the critical and warning lists. Matching is not
path-segment aware: a critical entry ``/etc`` also flags ``/etcetera``.
That false positive errs on the side of caution and is kept on purpose.
"""

import fnmatch
import os
import sys
from collections import Counter
from collections.abc import Iterable

from delf.safety.models import Category, CategoryCounts, SearchResult
from delf.safety.paths import SafetyPathList

_GLOB_CHARS = frozenset("*?[")


def _default_case_insensitive() -> bool:
    return os.name == "nt" or sys.platform == "darwin"


class PathClassifier:
    """Classifies paths as critical, warning or safe.

    The prefix lists are normalized once at construction; the
    classifier holds no other state, so a path's category depends only
    on the lists and the path string.

    Args:
        paths: The safety path lists to match against.
        case_insensitive: Fold case before comparing. Defaults to the
            platform convention (Windows and macOS fold, Linux does not).
    """

    def __init__(self, paths: SafetyPathList, *, case_insensitive: bool | None = None) -> None:
        self._paths = paths
        self._fold = _default_case_insensitive() if case_insensitive is None else case_insensitive
        self._critical = tuple(self.normalize(p) for p in paths.critical)
        self._warning = tuple(self.normalize(p) for p in paths.warning)
        self._auto_exclude = tuple(p.lower() for p in paths.auto_exclude)

    @property
    def paths(self) -> SafetyPathList:
        """The safety path lists this classifier matches against."""
        return self._paths

    def normalize(self, path: str) -> str:
        """Return the absolute, cleaned and case-folded form of a path."""
        normalized = os.path.normpath(os.path.abspath(os.path.expanduser(path)))
        return normalized.lower() if self._fold else normalized

    def classify(self, path: str) -> Category:
        """Determine the safety tier of a path.

        Critical is checked before warning so that a path nested under
        both resolves to the stricter tier.

        Args:
            path: Filesystem path, absolute or relative to the cwd.

        Returns:
            Category of the path.
        """
        normalized = self.normalize(path)
        if any(normalized.startswith(prefix) for prefix in self._critical):
            return Category.CRITICAL
        if any(normalized.startswith(prefix) for prefix in self._warning):
            return Category.WARNING
        return Category.SAFE

    def critical_prefix(self, path: str) -> str | None:
        """Return the first critical list entry a path falls under, if any."""
        normalized = self.normalize(path)
        for raw, prefix in zip(self._paths.critical, self._critical, strict=True):
            if normalized.startswith(prefix):
                return raw
        return None

    def is_auto_excluded(self, path: str) -> bool:
        """Check if a path contains any auto-exclude fragment.

        Fragments without glob characters match by case-insensitive
        substring containment. Fragments with glob characters match
        anywhere in the path.

        Args:
            path: Filesystem path to check.

        Returns:
            True if the path should be skipped during search.
        """
        lowered = path.lower()
        for fragment in self._auto_exclude:
            if _GLOB_CHARS.intersection(fragment):
                if fnmatch.fnmatchcase(lowered, f"*{fragment}*"):
                    return True
            elif fragment in lowered:
                return True
        return False

    @staticmethod
    def count(results: Iterable[SearchResult]) -> CategoryCounts:
        """Count results per safety tier."""
        tally = Counter(r.category for r in results)
        return CategoryCounts(
            critical=tally[Category.CRITICAL],
            warning=tally[Category.WARNING],
            safe=tally[Category.SAFE],
        )

    def critical_breakdown(self, results: Iterable[SearchResult]) -> dict[str, int]:
        """Group critical results by the critical entry they fall under.

        Args:
            results: Results to inspect; non-critical ones are ignored.

        Returns:
            Mapping of critical list entry to number of results under it,
            in first-seen order.
        """
        breakdown: dict[str, int] = {}
        for result in results:
            if not result.is_critical:
                continue
            prefix = self.critical_prefix(result.path)
            if prefix is not None:
                breakdown[prefix] = breakdown.get(prefix, 0) + 1
        return breakdown


def filter_out_critical(results: Iterable[SearchResult]) -> list[SearchResult]:
    """Drop critical results, preserving order.

    Args:
        results: Results to filter.

    Returns:
        New list with every non-critical result.
    """
    return [r for r in results if not r.is_critical]
