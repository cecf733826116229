"""Main CLI application entry point.

Defines the Typer application: a single command that searches for a
pattern, classifies the matches, and walks them through the deletion
gate. Without a pattern it asks for the search root and pattern
interactively.
"""

import logging
import os
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.markup import escape

from delf import __version__
from delf.cli.display import (
    ConsoleGateUI,
    read_line,
    show_header,
    show_search_info,
    stream_results,
)
from delf.core.config import (
    SafetyConfig,
    SafetyConfigError,
    load_safety_config_or_default,
    save_safety_config,
)
from delf.core.gate import DeletionGate, ExitCode
from delf.core.options import DEFAULT_MAX_DISPLAY, RunOptions, TypeFilter
from delf.core.paths import get_safety_config_path
from delf.core.runlog import configure_logging
from delf.safety.classifier import PathClassifier
from delf.safety.privilege import is_elevated, is_filesystem_root
from delf.search import select_searcher
from delf.utils.formatting import console, print_error, print_info, print_warning

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="delf",
    help="Find and delete files and folders by pattern, with safety checks.",
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"delf version {__version__}")
        raise typer.Exit()


def _expand_path(raw: str) -> Path:
    """Expand ``~`` and environment variables in a user-typed path."""
    return Path(os.path.expandvars(os.path.expanduser(raw)))


def _require_directory(path: Path) -> None:
    """Exit with a validation error unless ``path`` is an existing directory."""
    if not path.is_dir():
        print_error(f"Directory '{path}' does not exist")
        raise typer.Exit(code=ExitCode.FAILURE)


def _ask_search_root() -> Path:
    """Interactively ask for the search root (empty answer = current directory)."""
    console.print("Enter path to search (default: current directory)")
    answer = read_line()
    if not answer:
        console.print(f"[info]Searching in:[/] [path]{escape(str(Path.cwd()))}[/]")
        return Path(".")

    root = _expand_path(answer)
    _require_directory(root)
    console.print(f"[info]Searching in:[/] [path]{escape(str(root))}[/]\n")
    return root


def _ask_pattern() -> str:
    """Interactively ask for a non-empty pattern."""
    console.print("Enter file/folder name or pattern to delete")
    pattern = read_line()
    if not pattern:
        print_error("Pattern cannot be empty")
        raise typer.Exit(code=ExitCode.FAILURE)
    return pattern


def _parse_type(value: str | None) -> TypeFilter | None:
    if value is None:
        return None
    try:
        return TypeFilter(value)
    except ValueError:
        print_error("Type must be 'f' (file) or 'd' (directory)")
        raise typer.Exit(code=ExitCode.FAILURE) from None


def _load_safety_config() -> SafetyConfig:
    try:
        return load_safety_config_or_default()
    except SafetyConfigError as e:
        print_warning(f"{e} (using built-in safety lists)")
        return SafetyConfig()


def _init_config() -> None:
    path = get_safety_config_path()
    if path.exists():
        print_info(f"Safety config already exists: {path}")
        return
    try:
        saved = save_safety_config(SafetyConfig(), path)
    except SafetyConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=ExitCode.FAILURE) from e
    print_info(f"Wrote default safety config to {saved}")


@app.command()
def main(
    pattern: Annotated[
        str | None,
        typer.Argument(help="Glob matched against file and folder names, e.g. '*.log'."),
    ] = None,
    path: Annotated[
        str,
        typer.Argument(help="Directory to search."),
    ] = ".",
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", "-n", help="Preview only, don't delete anything."),
    ] = False,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip all confirmations (dangerous!)."),
    ] = False,
    ignore_case: Annotated[
        bool,
        typer.Option("--ignore-case", "-i", help="Case-insensitive pattern matching."),
    ] = False,
    type_filter: Annotated[
        str | None,
        typer.Option(
            "--type",
            "-t",
            metavar="TYPE",
            help="Filter by type: 'f' for files, 'd' for directories.",
        ),
    ] = None,
    include_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Disable auto-exclusion of common directories."),
    ] = False,
    show_size: Annotated[
        bool,
        typer.Option("--show-size", help="Display total size of matched files."),
    ] = False,
    older_than: Annotated[
        int,
        typer.Option("--older-than", metavar="DAYS", help="Only match files older than N days."),
    ] = 0,
    larger_than: Annotated[
        str | None,
        typer.Option(
            "--larger-than",
            metavar="SIZE",
            help="Only match files larger than SIZE (K, M, G suffix).",
        ),
    ] = None,
    empty_dirs: Annotated[
        bool,
        typer.Option("--empty-dirs", help="Find and delete empty directories only."),
    ] = False,
    max_display: Annotated[
        int,
        typer.Option("--max-display", metavar="NUM", help="Maximum results to display."),
    ] = DEFAULT_MAX_DISPLAY,
    init_config: Annotated[
        bool,
        typer.Option("--init-config", help="Write the default safety config file and exit."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug output."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """delf - Delete Folder/File.

    Find files and folders matching PATTERN under PATH, review them,
    exclude what you want to keep, and delete the rest. Without a
    PATTERN, delf asks for the path and pattern interactively.

    Auto-excluded by default (use -a to disable): node_modules, .git,
    .npm, .cache, .vscode, .idea.
    """
    configure_logging(verbose)

    if init_config:
        _init_config()
        raise typer.Exit()

    parsed_type = _parse_type(type_filter)
    classifier = PathClassifier(_load_safety_config().build_path_list())

    if pattern or empty_dirs:
        root = _expand_path(path)
        _require_directory(root)
    else:
        show_header()
        root = _ask_search_root()
        pattern = _ask_pattern()

    try:
        options = RunOptions(
            pattern=pattern or "",
            root=root,
            dry_run=dry_run,
            force=force,
            ignore_case=ignore_case,
            type_filter=parsed_type,
            include_all=include_all,
            show_size=show_size,
            older_than_days=older_than,
            larger_than=larger_than,
            empty_dirs=empty_dirs,
            max_display=max_display,
        )
    except ValidationError as e:
        for error in e.errors():
            field = ".".join(str(loc) for loc in error["loc"])
            print_error(f"{field}: {error['msg']}")
        raise typer.Exit(code=ExitCode.FAILURE) from None

    elevated = is_elevated()
    if is_filesystem_root(root) and not elevated:
        print_error("Searching from the filesystem root requires root/Administrator privileges")
        raise typer.Exit(code=ExitCode.ELEVATION_REQUIRED)

    searcher = select_searcher(options, classifier)
    logger.info(
        "Run started: pattern=%r root=%s method=%s dry_run=%s force=%s elevated=%s",
        options.display_pattern,
        searcher.root,
        searcher.method,
        options.dry_run,
        options.force,
        elevated,
    )

    show_search_info(options, searcher.root, searcher.method)
    results = stream_results(searcher.search(), options)

    gate = DeletionGate(options, classifier, ConsoleGateUI(), elevated=elevated)
    report = gate.run(results)
    raise typer.Exit(code=int(report.exit_code))


if __name__ == "__main__":
    app()
