"""Elevated-privilege detection.

Critical paths can only be deleted when the process runs as root on
POSIX systems or as Administrator on Windows.
"""

import logging
import os
import subprocess
from pathlib import Path

from delf.utils.shell import run_command

logger = logging.getLogger(__name__)


def is_elevated() -> bool:
    """Check if the current process runs with elevated privileges.

    On POSIX systems this compares the effective user id with 0. On
    Windows ``net session`` is run, which only succeeds for
    Administrators.

    Returns:
        True if running as root/Administrator, False otherwise.
    """
    geteuid = getattr(os, "geteuid", None)
    if geteuid is not None:
        return geteuid() == 0

    try:
        result = run_command(["net", "session"], timeout=10.0)
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.debug("Cannot check for Administrator rights: %s", exc)
        return False
    return result.success


def is_filesystem_root(path: Path) -> bool:
    """Check if a directory is the root of its filesystem (``/`` or ``C:\\``)."""
    resolved = path.resolve()
    return resolved == Path(resolved.anchor)
