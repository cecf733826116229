"""Console colors for delf.

The palette comes from the bundled ``delf/data/theme.toml``, overlaid
with any subset of keys from ``~/.config/delf/theme.toml``. A broken
user file is reported and ignored; the bundled colors always apply.
"""

import logging
import re
import tomllib
from functools import cache
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from rich.theme import Theme

from delf.core.paths import get_theme_path

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

# Styles rendered bold on top of their palette color
_BOLD_STYLES = ("error", "critical", "caution")


class Palette(BaseModel):
    """Hex colors for message kinds and safety tiers."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    critical: str = "#f53263"
    caution: str = "#f5b332"
    safe: str = "#e17055"
    excluded: str = "#03b971"
    path: str = "#0ec1c8"

    @field_validator("*", mode="before")
    @classmethod
    def check_hex(cls, value: object, info: ValidationInfo) -> str:
        """Accept only ``#RGB`` and ``#RRGGBB`` strings."""
        if not isinstance(value, str) or not _HEX_COLOR.match(value.strip()):
            msg = f"{info.field_name}: expected #RGB or #RRGGBB, got {value!r}"
            raise ValueError(msg)
        return value.strip()


def bundled_theme_path() -> Path:
    """Path of the theme file shipped inside the package."""
    return Path(str(resources.files("delf.data").joinpath("theme.toml")))


def read_colors(path: Path) -> dict[str, object]:
    """Read the ``[colors]`` table of a theme file.

    Args:
        path: Theme file to read.

    Returns:
        Raw color entries, or an empty mapping if the file does not exist.

    Raises:
        ValueError: If the file is not valid TOML or ``colors`` is not a table.
        OSError: If the file exists but cannot be read.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"{path}: {e}") from e

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        raise ValueError(f"{path}: 'colors' must be a table")
    return dict(colors)


def load_palette(user_path: Path | None = None) -> Palette:
    """Build the palette from the bundled theme and the user's overrides.

    Args:
        user_path: Override file. Defaults to the XDG config location.
    """
    bundled = read_colors(bundled_theme_path())
    user_path = user_path or get_theme_path()

    try:
        overrides = read_colors(user_path)
        return Palette(**{**bundled, **overrides})
    except (OSError, ValueError) as e:
        logger.warning("Ignoring theme overrides in %s: %s", user_path, e)
        return Palette(**bundled)


def to_rich_theme(palette: Palette) -> Theme:
    """Turn a palette into the named styles used in console markup."""
    styles = palette.model_dump()
    for name in _BOLD_STYLES:
        styles[name] = f"bold {styles[name]}"
    styles["bold_header"] = f"bold {palette.header}"
    styles["rule"] = f"bold {palette.border}"
    return Theme(styles)


@cache
def get_theme() -> Theme:
    """Rich theme for the shared consoles, loaded once per process."""
    return to_rich_theme(load_palette())
