"""In-process recursive directory walk.

Used whenever fd is not installed and always for empty-directory
searches. Entries are visited depth-first in name order, directories
before their contents. Symbolic links are reported but never followed.
"""

import logging
import os
from collections.abc import Iterator

from delf.core.filters import AgeFilter, SizeFilter, match_name
from delf.core.options import TypeFilter
from delf.safety.models import SearchResult
from delf.search.base import Searcher

logger = logging.getLogger(__name__)


def _list_dir(directory: str) -> list[os.DirEntry[str]] | None:
    """Return the entries of a directory sorted by name, or None if unreadable."""
    try:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.debug("Skipping unreadable directory %s: %s", directory, e)
        return None


class WalkSearcher(Searcher):
    """Walks the search root and applies every filter inline.

    Auto-excluded directories are pruned: neither they nor anything
    below them is visited. Unreadable directories are skipped.
    """

    @property
    def method(self) -> str:
        return "walk"

    def is_available(self) -> bool:
        """The walk only needs the standard library, so it is always available."""
        return True

    def search(self) -> Iterator[SearchResult]:
        entries = _list_dir(self.root) or []
        if self._options.empty_dirs:
            yield from self._walk_empty(entries)
        else:
            yield from self._walk(entries, self._options.age_filter(), self._options.size_filter)

    def _walk(
        self,
        entries: list[os.DirEntry[str]],
        age: AgeFilter | None,
        size: SizeFilter | None,
    ) -> Iterator[SearchResult]:
        for entry in entries:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                continue

            if self._options.auto_exclude and self._classifier.is_auto_excluded(entry.path):
                continue

            if self._matches(entry, is_dir, age, size):
                yield self._result(entry.path, is_dir=is_dir)

            if is_dir:
                yield from self._walk(_list_dir(entry.path) or [], age, size)

    def _matches(
        self,
        entry: os.DirEntry[str],
        is_dir: bool,
        age: AgeFilter | None,
        size: SizeFilter | None,
    ) -> bool:
        options = self._options

        if options.type_filter == TypeFilter.FILE and is_dir:
            return False
        if options.type_filter == TypeFilter.DIRECTORY and not is_dir:
            return False

        if options.pattern and not match_name(
            entry.name, options.pattern, ignore_case=options.ignore_case
        ):
            return False

        if age is None and size is None:
            return True

        try:
            info = entry.stat(follow_symlinks=False)
        except OSError:
            logger.debug("Cannot stat %s, skipping", entry.path)
            return False

        if age is not None and not age.matches(info.st_mtime):
            return False
        return size is None or size.matches(info.st_size, is_dir=is_dir)

    def _walk_empty(self, entries: list[os.DirEntry[str]]) -> Iterator[SearchResult]:
        # Pattern, age and size filters do not apply in this mode
        for entry in entries:
            try:
                if not entry.is_dir(follow_symlinks=False):
                    continue
            except OSError:
                continue

            if self._options.auto_exclude and self._classifier.is_auto_excluded(entry.path):
                continue

            children = _list_dir(entry.path)
            if children is None:
                continue
            if not children:
                yield self._result(entry.path, is_dir=True)
            else:
                yield from self._walk_empty(children)
