"""Resolved configuration for a single delf run.

RunOptions is built once from command-line flags (or interactive
prompts) and passed explicitly to every pipeline component. It is
frozen; nothing in the pipeline mutates it.
"""

from enum import Enum
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from delf.core.filters import AgeFilter, SizeFilter, parse_size

DEFAULT_MAX_DISPLAY = 100


class TypeFilter(str, Enum):
    """Restrict matches to one kind of entry."""

    FILE = "f"
    DIRECTORY = "d"


class RunOptions(BaseModel):
    """Options for one search-and-delete run.

    Attributes:
        pattern: Glob matched against entry base names. Empty matches everything.
        root: Directory the search starts from.
        dry_run: Report what would be deleted without deleting.
        force: Skip exclusion and confirmation prompts.
        ignore_case: Match the pattern case-insensitively.
        type_filter: Only match files or only directories.
        include_all: Disable auto-exclusion of dependency/metadata dirs.
        show_size: Report total size of the matched entries.
        older_than_days: Only match entries modified at least N days ago (0 = off).
        larger_than: Only match files larger than this size string.
        empty_dirs: Match empty directories only, ignoring pattern/age/size.
        max_display: Maximum search results printed while streaming.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    pattern: Annotated[str, Field(description="Name glob")] = ""
    root: Annotated[Path, Field(description="Search root")] = Path(".")
    dry_run: bool = False
    force: bool = False
    ignore_case: bool = False
    type_filter: TypeFilter | None = None
    include_all: bool = False
    show_size: bool = False
    older_than_days: Annotated[int, Field(ge=0, description="Age threshold in days")] = 0
    larger_than: Annotated[str | None, Field(description="Size threshold, e.g. 100M")] = None
    empty_dirs: bool = False
    max_display: Annotated[int, Field(ge=1, description="Streaming display cap")] = (
        DEFAULT_MAX_DISPLAY
    )

    @field_validator("larger_than")
    @classmethod
    def validate_larger_than(cls, v: str | None) -> str | None:
        """Reject size strings that cannot be parsed."""
        if v is None or not v.strip():
            return None
        parse_size(v)
        return v.strip()

    @property
    def auto_exclude(self) -> bool:
        """Whether auto-exclude fragments are applied during search."""
        return not self.include_all

    @property
    def min_size_bytes(self) -> int | None:
        """Parsed size threshold in bytes, or None when not set."""
        if self.larger_than is None:
            return None
        return parse_size(self.larger_than)

    @property
    def size_filter(self) -> SizeFilter | None:
        """Size predicate for this run, or None when not set."""
        min_bytes = self.min_size_bytes
        return SizeFilter(min_bytes) if min_bytes is not None else None

    def age_filter(self, now: float | None = None) -> AgeFilter | None:
        """Age predicate for this run, or None when not set.

        Args:
            now: Reference timestamp. Defaults to the current time.
        """
        if not self.older_than_days:
            return None
        if now is None:
            return AgeFilter(self.older_than_days)
        return AgeFilter(self.older_than_days, now=now)

    @property
    def display_pattern(self) -> str:
        """Pattern as shown to the user."""
        return "(empty directories)" if self.empty_dirs else self.pattern
