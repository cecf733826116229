"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console

from delf.core.theme import get_theme

_KB = 1024
_MB = _KB * 1024
_GB = _MB * 1024


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system(), highlight=False)
err_console = Console(
    theme=get_theme(), stderr=True, color_system=_detect_color_system(), highlight=False
)


def format_size(size_bytes: int) -> str:
    """Format a byte count the way delf prints it (e.g. ``1.50M``).

    Args:
        size_bytes: Number of bytes.

    Returns:
        Human-readable size with a single-letter unit suffix.
    """
    if size_bytes >= _GB:
        return f"{size_bytes / _GB:.2f}G"
    if size_bytes >= _MB:
        return f"{size_bytes / _MB:.2f}M"
    if size_bytes >= _KB:
        return f"{size_bytes / _KB:.2f}K"
    return f"{size_bytes}B"


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
