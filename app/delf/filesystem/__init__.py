"""Filesystem deletion module.

This module provides per-path deletion with failure isolation and
disk usage measurement for matched paths.
"""

from delf.filesystem.operator import DeleteResult, DeletionTally, FilesystemOperator
from delf.filesystem.usage import path_size, total_size

__all__ = [
    "DeleteResult",
    "DeletionTally",
    "FilesystemOperator",
    "path_size",
    "total_size",
]
