"""Match predicates applied while walking the tree.

Size thresholds are written with an optional K/M/G/B suffix using
binary multiples (``10K`` is 10240 bytes). Age thresholds are whole
days counted back from the moment the filter is created.
"""

import fnmatch
import re
import time
from dataclasses import dataclass, field

_SIZE_MULTIPLIERS: dict[str, int] = {
    "B": 1,
    "K": 1024,
    "M": 1024 * 1024,
    "G": 1024 * 1024 * 1024,
}

_SIZE_RE = re.compile(r"^(?P<number>\d+)(?P<unit>[BKMG]?)$")

_SECONDS_PER_DAY = 86400


def parse_size(value: str) -> int:
    """Convert a human size string like ``100M`` to bytes.

    Args:
        value: Whole number, optionally followed by K, M, G or B
            (case-insensitive). A bare number is bytes.

    Returns:
        Size in bytes.

    Raises:
        ValueError: If the string is empty or malformed.
    """
    text = value.strip().upper()
    if not text:
        msg = "Size cannot be empty"
        raise ValueError(msg)

    match = _SIZE_RE.match(text)
    if match is None:
        msg = f"Invalid size '{value}': expected a number with optional K, M or G suffix"
        raise ValueError(msg)

    multiplier = _SIZE_MULTIPLIERS[match["unit"] or "B"]
    return int(match["number"]) * multiplier


@dataclass(frozen=True, slots=True)
class SizeFilter:
    """Keeps files strictly larger than a threshold.

    Directories are exempt and always pass.
    """

    min_bytes: int

    def matches(self, size: int, *, is_dir: bool) -> bool:
        """Check if an entry passes the size threshold."""
        return is_dir or size > self.min_bytes


@dataclass(frozen=True, slots=True)
class AgeFilter:
    """Keeps entries last modified at least ``days`` days ago."""

    days: int
    now: float = field(default_factory=time.time)

    @property
    def cutoff(self) -> float:
        """Newest modification timestamp that still passes."""
        return self.now - self.days * _SECONDS_PER_DAY

    def matches(self, mtime: float) -> bool:
        """Check if a modification time is old enough."""
        return mtime <= self.cutoff


def match_name(name: str, pattern: str, *, ignore_case: bool = False) -> bool:
    """Match a base name against a glob pattern.

    Args:
        name: Entry base name.
        pattern: Shell-style glob.
        ignore_case: Compare case-insensitively.

    Returns:
        True if the whole name matches the pattern.
    """
    if ignore_case:
        name = name.lower()
        pattern = pattern.lower()
    return fnmatch.fnmatchcase(name, pattern)
