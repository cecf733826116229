"""Abstract base class for search strategies.

This module defines the Searcher interface implemented by the
delegated (fd) and in-process (walk) search strategies.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path

from delf.core.options import RunOptions
from delf.safety.classifier import PathClassifier
from delf.safety.models import SearchResult


class Searcher(ABC):
    """Abstract base class for all search strategies.

    Searchers turn a RunOptions into a lazy stream of classified
    results. Consuming the iterator drives the search; restarting it
    means calling search() again.

    Example:
        >>> searcher = WalkSearcher(options, classifier)
        >>> if searcher.is_available():
        ...     for result in searcher.search():
        ...         print(result.path, result.category.value)
    """

    def __init__(self, options: RunOptions, classifier: PathClassifier) -> None:
        self._options = options
        self._classifier = classifier

    @property
    @abstractmethod
    def method(self) -> str:
        """Short human-readable name of the search method."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this strategy can run on the current system."""

    @abstractmethod
    def search(self) -> Iterator[SearchResult]:
        """Search the tree and yield each match as it is found.

        Yields:
            SearchResult for every entry passing all filters.
        """

    @property
    def root(self) -> str:
        """Absolute search root."""
        return str(Path(self._options.root).expanduser().absolute())

    def _result(self, path: str, *, is_dir: bool) -> SearchResult:
        return SearchResult(path=path, category=self._classifier.classify(path), is_dir=is_dir)
