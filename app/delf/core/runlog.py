"""Logging setup and the persistent run log.

Every run appends a human-readable record of what it searched for and
deleted to ~/.local/state/delf/delf.log. The log is a diagnostic aid
only; delf never reads it back.
"""

import logging
from pathlib import Path

from rich.logging import RichHandler

from delf.core.paths import ensure_state_dir, get_log_path
from delf.utils.formatting import err_console

LOGGER_NAME = "delf"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marker attribute so reconfiguring replaces only our own handlers
_HANDLER_TAG = "_delf_handler"


def _tag(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG, True)
    return handler


def configure_logging(verbose: bool = False, log_path: Path | None = None) -> Path | None:
    """Configure the ``delf`` logger.

    Installs a Rich console handler on stderr (DEBUG when verbose,
    WARNING otherwise) and an append-only file handler on the run log.
    Calling this again replaces the handlers installed previously.

    Args:
        verbose: Show debug messages on the console.
        log_path: Run log location. Defaults to the XDG state directory.

    Returns:
        Path of the run log, or None if it could not be opened.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    for handler in [h for h in logger.handlers if getattr(h, _HANDLER_TAG, False)]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=err_console,
        show_time=False,
        show_path=False,
        markup=False,
    )
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.addHandler(_tag(console_handler))

    try:
        if log_path is None:
            ensure_state_dir()
            log_path = get_log_path()
        else:
            log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(
            log_path, mode="a", encoding="utf-8", errors="backslashreplace"
        )
    except (OSError, RuntimeError) as e:
        logger.warning("Run log disabled: %s", e)
        return None

    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(_tag(file_handler))
    return log_path
