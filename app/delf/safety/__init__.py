"""Safety classification module.

This module provides the safety tiers, system path lists, the path
classifier, and privilege detection used to guard deletions.
"""

from delf.safety.classifier import PathClassifier, filter_out_critical
from delf.safety.models import Category, CategoryCounts, SearchResult
from delf.safety.paths import AUTO_EXCLUDE_PATTERNS, SafetyPathList
from delf.safety.privilege import is_elevated, is_filesystem_root

__all__ = [
    "AUTO_EXCLUDE_PATTERNS",
    "Category",
    "CategoryCounts",
    "PathClassifier",
    "SafetyPathList",
    "SearchResult",
    "filter_out_critical",
    "is_elevated",
    "is_filesystem_root",
]
