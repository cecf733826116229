"""Safety domain models for search results.

This module defines the core data structures for representing matched
filesystem entries and the safety tier each one falls into.
"""

from dataclasses import dataclass
from enum import Enum


class Category(str, Enum):
    """Safety tier of a matched filesystem path.

    Attributes:
        SAFE: Ordinary user data, deletable after normal confirmation.
        WARNING: Location requiring caution (user roots, temp dirs).
        CRITICAL: Operating-system location; blocked without elevation.
    """

    SAFE = "safe"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True, slots=True)
class SearchResult:
    """A path matched by a search, tagged with its safety tier.

    Attributes:
        path: Path as produced by the searcher.
        category: Safety tier assigned at match time.
        is_dir: Whether the path was a directory when matched.
    """

    path: str
    category: Category
    is_dir: bool

    def __post_init__(self) -> None:
        """Validate search result data after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)

    @property
    def is_critical(self) -> bool:
        """Check if the result is in the critical tier."""
        return self.category == Category.CRITICAL


@dataclass(frozen=True, slots=True)
class CategoryCounts:
    """Number of results per safety tier."""

    critical: int = 0
    warning: int = 0
    safe: int = 0

    @property
    def total(self) -> int:
        """Total number of counted results."""
        return self.critical + self.warning + self.safe
