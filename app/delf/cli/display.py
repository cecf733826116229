"""Rich display and prompts for the delf CLI.

Provides the streaming match display, the search header, and the
console implementation of the deletion gate's UI hooks.
"""

import os
from collections.abc import Iterable, Sequence

import typer
from rich.markup import escape
from rich.table import Table

from delf import __version__
from delf.core.gate import CRITICAL_CONFIRMATION_PHRASE, GateUI
from delf.core.options import RunOptions
from delf.filesystem.operator import DeleteResult, DeletionTally
from delf.safety.models import Category, CategoryCounts, SearchResult
from delf.utils.formatting import console, format_size, print_success, print_warning

_CATEGORY_MARKERS: dict[Category, tuple[str, str]] = {
    Category.CRITICAL: ("!!!", "critical"),
    Category.WARNING: ("!  ", "caution"),
    Category.SAFE: ("   ", "safe"),
}


def read_line(prompt: str = ">") -> str:
    """Read one line from the user.

    Returns "" on an empty answer and when input ends, so a closed stdin
    reads as "no" at every confirmation.
    """
    try:
        answer = typer.prompt(prompt, default="", show_default=False, prompt_suffix=" ")
    except typer.Abort:
        console.print()
        return ""
    return answer.strip()


def show_header() -> None:
    """Print the interactive-mode banner."""
    console.print(f"[bold_header]delf - Delete Folder/File[/] [muted]v{__version__}[/]")
    console.rule(style="rule")


def show_search_info(options: RunOptions, root: str, method: str) -> None:
    """Print the search parameters before matches start streaming."""
    console.print("\n[bold]Searching...[/]")
    console.print(f"[info]Path:[/] [path]{escape(root)}[/]")
    console.print(f"[info]Pattern:[/] [warning]{escape(options.display_pattern)}[/]")
    if method == "fd":
        console.print("[info]Method:[/] [success]fd (parallel search)[/]")
    else:
        console.print("[info]Method:[/] [warning]walk (install 'fd' for faster search)[/]")
    console.print("\n[bold]Matches:[/]")


def _shown(path: str) -> str:
    # Undecodable bytes in file names are shown as U+FFFD
    return escape(os.fsencode(path).decode(errors="replace"))


def _format_match(result: SearchResult, show_size: bool) -> str:
    icon, style = _CATEGORY_MARKERS[result.category]
    shown = _shown(result.path + os.sep if result.is_dir else result.path)
    line = f"[{style}]  {icon} {shown}[/]"
    if show_size and not result.is_dir:
        try:
            line += f" [muted]({format_size(os.lstat(result.path).st_size)})[/]"
        except OSError:
            pass
    return line


def stream_results(results: Iterable[SearchResult], options: RunOptions) -> list[SearchResult]:
    """Print matches as they arrive and collect all of them.

    At most ``options.max_display`` matches are printed; after that a
    single notice is shown and the rest are collected silently.

    Args:
        results: Lazy stream of search results.
        options: Run options (display cap, show-size).

    Returns:
        Every result from the stream, in order.
    """
    collected: list[SearchResult] = []
    for result in results:
        collected.append(result)
        count = len(collected)
        if count <= options.max_display:
            console.print(_format_match(result, options.show_size))
        elif count == options.max_display + 1:
            console.print("[warning]  ... (more results, display limit reached)[/]")
    return collected


class ConsoleGateUI(GateUI):
    """Deletion gate hooks that print with Rich and prompt on stdin."""

    def show_summary(self, counts: CategoryCounts) -> None:
        console.rule(style="rule")
        console.print(f"[bold]Found[/] [warning]{counts.total}[/] [bold]total matches[/]")
        if counts.critical:
            console.print(f"  [critical]!!! Critical system files:[/] {counts.critical}")
        if counts.warning:
            console.print(f"  [caution]!  Warning-level files:[/] {counts.warning}")
        if counts.safe:
            console.print(f"  [success]OK Safe files:[/] {counts.safe}")

    def show_no_matches(self, options: RunOptions) -> None:
        pattern = escape(options.display_pattern)
        console.print(f"\n[warning]No matches found[/] for pattern: [path]{pattern}[/]")
        if options.auto_exclude:
            console.print(
                "[warning]Note:[/] Auto-exclusions are enabled. Use [path]-a[/] flag to disable."
            )

    def show_privilege_blocked(self, blocked: int, remaining: int) -> None:
        console.rule(style="critical")
        console.print(f"[critical]!!! DANGER: {blocked} files are CRITICAL SYSTEM FILES![/]")
        console.print("[critical]X Cannot delete (insufficient permissions)[/]")
        console.print(
            "[warning]Run as root/Administrator if you really need to delete system files[/]"
        )
        console.rule(style="critical")
        if remaining:
            print_success(f"Proceeding with {remaining} safe/warning-level files only...")
        else:
            print_warning(
                "All matched files are system files. "
                "Nothing can be deleted without elevated privileges."
            )

    def show_total_size(self, size_bytes: int) -> None:
        console.print(f"[bold]Total size:[/] [warning]{format_size(size_bytes)}[/]")

    def ask_exclusions(self) -> str:
        console.rule(style="rule")
        console.print(
            "[info]Enter exclusion patterns[/] (comma-separated, or press Enter to skip):"
        )
        console.print("[warning]Examples:[/] */important/*, *.txt, backup")
        return read_line()

    def show_excluded(self, excluded: Sequence[SearchResult]) -> None:
        if not excluded:
            return
        console.print(f"\n[excluded]Excluded[/] ({len(excluded)} items):")
        for result in excluded:
            console.print(f"[excluded]  OK[/] {_shown(result.path)}")

    def show_all_excluded(self) -> None:
        print_success("\nAll files excluded. Nothing to delete.")

    def show_preview(self, candidates: Sequence[SearchResult], limit: int) -> None:
        table = Table(
            title=f"Will delete {len(candidates)} items",
            show_header=True,
            header_style="bold_header",
            border_style="border",
        )
        table.add_column("Type", width=4, justify="center")
        table.add_column("Path", no_wrap=True)
        table.add_column("Tier", width=8)

        for result in candidates[:limit]:
            kind = escape("[D]" if result.is_dir else "[F]")
            shown = _shown(result.path + os.sep if result.is_dir else result.path)
            _, style = _CATEGORY_MARKERS[result.category]
            table.add_row(kind, f"[{style}]{shown}[/]", result.category.value)

        console.print()
        console.print(table)
        remaining = len(candidates) - limit
        if remaining > 0:
            console.print(f"[warning]  ... and {remaining} more[/]")

    def show_dry_run(self) -> None:
        console.print("\n[warning]DRY-RUN MODE:[/] No files were deleted")
        console.print("Remove [path]-n[/] flag to actually delete these files")

    def ask_critical_confirmation(self, critical: int, breakdown: dict[str, int]) -> str:
        console.print("\n[critical]!!! CRITICAL DANGER WARNING !!![/]")
        console.rule(style="critical")
        console.print(f"[critical]You are about to delete {critical} SYSTEM FILES![/]\n")
        if breakdown:
            console.print("[warning]Critical system files detected in:[/]")
            for prefix, count in breakdown.items():
                console.print(f"[critical]  {escape(prefix)} ({count} files)[/]")
            console.print()
        console.print("[warning]CONSEQUENCES:[/]")
        console.print("[error]  - May break system boot[/]")
        console.print("[error]  - May break critical services (SSH, network, etc.)[/]")
        console.print("[error]  - May make the system unrecoverable[/]")
        console.print("[error]  - May require system reinstallation[/]\n")
        console.print(
            f"[critical]To proceed, type exactly:[/] [warning]{CRITICAL_CONFIRMATION_PHRASE}[/]"
        )
        return read_line()

    def ask_final_confirmation(self) -> str:
        console.rule(style="rule")
        return read_line("Proceed with deletion? (y/N)")

    def show_cancelled(self, *, critical: bool) -> None:
        if critical:
            print_success("\nOperation cancelled. System is safe.")
        else:
            console.print("\n[warning]Operation cancelled[/]")

    def show_deleting(self) -> None:
        console.print("\n[critical]Deleting...[/]\n")

    def show_deleted(self, result: DeleteResult) -> None:
        if result.success:
            console.print(f"[success]OK[/] Deleted: [safe]{_shown(result.path)}[/]")
        else:
            reason = escape(result.error or "unknown error")
            console.print(f"[error]X[/] Failed: {_shown(result.path)} [warning]({reason})[/]")

    def show_deletion(self, tally: DeletionTally) -> None:
        console.rule(style="rule")
        console.print(f"[success]OK Deleted:[/] {tally.deleted} items")
        if tally.failed:
            console.print(
                f"[critical]X Failed:[/] {tally.failed} items "
                "(try running with elevated privileges)"
            )
        console.rule(style="rule")
