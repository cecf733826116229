"""Search strategies for candidate paths.

This module provides the Searcher interface, its fd and walk
implementations, the match predicates, and the one-time strategy
selection used by the CLI.
"""

from delf.core.filters import AgeFilter, SizeFilter, match_name, parse_size
from delf.core.options import RunOptions
from delf.safety.classifier import PathClassifier
from delf.search.base import Searcher
from delf.search.fd import FD_COMMANDS, FdSearcher
from delf.search.walk import WalkSearcher


def select_searcher(
    options: RunOptions,
    classifier: PathClassifier,
    *,
    use_fd: bool = True,
) -> Searcher:
    """Pick the search strategy for this run.

    fd is used when installed, with the walk as its fallback. The walk
    is used directly when fd is missing, when use_fd is False, and
    always for empty-directory searches.

    Args:
        options: Run options.
        classifier: Classifier used to tag results.
        use_fd: Allow the delegated fd strategy.

    Returns:
        The searcher to run.
    """
    walk = WalkSearcher(options, classifier)
    if options.empty_dirs or not use_fd:
        return walk

    fd = FdSearcher(options, classifier, fallback=walk)
    return fd if fd.is_available() else walk


__all__ = [
    "FD_COMMANDS",
    "AgeFilter",
    "FdSearcher",
    "Searcher",
    "SizeFilter",
    "WalkSearcher",
    "match_name",
    "parse_size",
    "select_searcher",
]
