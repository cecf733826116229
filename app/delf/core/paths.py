"""Locations of delf's configuration files and run log.

Follows the XDG Base Directory layout:

- Configuration: $XDG_CONFIG_HOME/delf/ (default ~/.config/delf/)
- Run log: $XDG_STATE_HOME/delf/ (default ~/.local/state/delf/)
"""

import os
from pathlib import Path

APP_NAME = "delf"


def _xdg_home(variable: str, fallback: str) -> Path:
    # Unset and empty values both mean "use the default"
    value = os.environ.get(variable)
    return Path(value) if value else Path.home() / fallback


def get_config_dir() -> Path:
    """Directory holding config.toml and theme.toml."""
    return _xdg_home("XDG_CONFIG_HOME", ".config") / APP_NAME


def get_state_dir() -> Path:
    """Directory holding the run log."""
    return _xdg_home("XDG_STATE_HOME", os.path.join(".local", "state")) / APP_NAME


def get_safety_config_path() -> Path:
    """User extensions to the safety lists."""
    return get_config_dir() / "config.toml"


def get_theme_path() -> Path:
    """User color overrides."""
    return get_config_dir() / "theme.toml"


def get_log_path() -> Path:
    """Append-only run log."""
    return get_state_dir() / "delf.log"


def ensure_state_dir() -> Path:
    """Create the state directory if it doesn't exist.

    Returns:
        The state directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    state_dir = get_state_dir()
    try:
        state_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        reason = "Permission denied" if isinstance(e, PermissionError) else str(e)
        msg = f"Cannot create state directory {state_dir}: {reason}"
        raise RuntimeError(msg) from e
    return state_dir
