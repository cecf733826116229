"""Disk usage of matched paths."""

import logging
import os
from collections.abc import Iterable

from delf.safety.models import SearchResult

logger = logging.getLogger(__name__)


def path_size(path: str) -> int:
    """Get size in bytes for a path.

    For files, returns the file size. For directories, returns the sum
    of all files below it; symbolic links inside are counted by their
    own size and not followed. Unreadable entries count as zero.

    Args:
        path: Path to measure.

    Returns:
        Size in bytes.
    """
    try:
        if not os.path.isdir(path):
            return os.stat(path).st_size
    except OSError:
        return 0

    total = 0
    for dirpath, _dirnames, filenames in os.walk(path):
        for name in filenames:
            try:
                total += os.lstat(os.path.join(dirpath, name)).st_size
            except OSError:
                continue
    return total


def total_size(results: Iterable[SearchResult]) -> int:
    """Sum the sizes of all results' paths."""
    total = sum(path_size(r.path) for r in results)
    logger.debug("Total size of matches: %d bytes", total)
    return total
