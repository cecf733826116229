"""System path lists that decide how dangerous a deletion is.

This module defines the critical and warning path prefixes for each
platform, the auto-exclude fragments that protect dependency and
metadata directories during search, and the SafetyPathList value that
combines them with environment-derived and user-configured entries.
"""

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

# Critical POSIX paths: deleting here can break the system.
POSIX_CRITICAL_PATHS: tuple[str, ...] = (
    "/bin",
    "/sbin",
    "/usr/bin",
    "/usr/sbin",
    "/usr/lib",
    "/usr/lib64",
    "/lib",
    "/lib64",
    "/etc",
    "/boot",
    "/sys",
    "/proc",
    "/dev",
    "/root",
    "/var/lib/dpkg",
    "/var/lib/apt",
    "/usr/share",
)

# Warning-level POSIX paths: generally safe, but be careful.
POSIX_WARNING_PATHS: tuple[str, ...] = (
    "/opt",
    "/srv",
    "/var/log",
    "/var/www",
    "/var/cache",
)

WINDOWS_CRITICAL_PATHS: tuple[str, ...] = (
    "C:\\Windows",
    "C:\\Windows\\System32",
    "C:\\Windows\\SysWOW64",
    "C:\\Program Files",
    "C:\\Program Files (x86)",
    "C:\\ProgramData",
    "C:\\Users\\Default",
    "C:\\Users\\Public",
    "C:\\Recovery",
    "C:\\Boot",
)

WINDOWS_WARNING_PATHS: tuple[str, ...] = (
    "C:\\Users",
    "C:\\Temp",
)

# Environment variables naming extra system locations.
CRITICAL_ENV_VARS: tuple[str, ...] = ("SystemRoot", "windir")
WARNING_ENV_VARS: tuple[str, ...] = ("TEMP", "TMP", "TMPDIR")

# Fragments skipped during search unless auto-exclusion is disabled.
AUTO_EXCLUDE_PATTERNS: tuple[str, ...] = (
    "node_modules",
    ".git",
    ".npm",
    ".cache",
    ".vscode",
    ".idea",
)


@dataclass(frozen=True, slots=True)
class SafetyPathList:
    """Critical and warning path prefixes, in match order.

    Attributes:
        critical: Prefixes whose contents are OS-essential.
        warning: Prefixes whose contents need extra care.
        auto_exclude: Fragments pruned from searches by default.
    """

    critical: tuple[str, ...]
    warning: tuple[str, ...]
    auto_exclude: tuple[str, ...] = AUTO_EXCLUDE_PATTERNS

    @classmethod
    def for_platform(
        cls,
        *,
        windows: bool | None = None,
        env: Mapping[str, str] | None = None,
        extra_critical: Sequence[str] = (),
        extra_warning: Sequence[str] = (),
        extra_auto_exclude: Sequence[str] = (),
    ) -> "SafetyPathList":
        """Build the path lists for the running platform.

        Static defaults come first, followed by paths resolved from
        the environment, followed by user-configured extras. Empty
        environment values are ignored.

        Args:
            windows: Use the Windows defaults. Detected from os.name if None.
            env: Environment to read system paths from. Defaults to os.environ.
            extra_critical: Additional critical prefixes.
            extra_warning: Additional warning prefixes.
            extra_auto_exclude: Additional auto-exclude fragments.

        Returns:
            SafetyPathList for this process.
        """
        if windows is None:
            windows = os.name == "nt"
        if env is None:
            env = os.environ

        critical = list(WINDOWS_CRITICAL_PATHS if windows else POSIX_CRITICAL_PATHS)
        warning = list(WINDOWS_WARNING_PATHS if windows else POSIX_WARNING_PATHS)

        critical.extend(env[name] for name in CRITICAL_ENV_VARS if env.get(name))
        warning.extend(env[name] for name in WARNING_ENV_VARS if env.get(name))

        critical.extend(extra_critical)
        warning.extend(extra_warning)

        return cls(
            critical=tuple(critical),
            warning=tuple(warning),
            auto_exclude=(*AUTO_EXCLUDE_PATTERNS, *extra_auto_exclude),
        )
