"""User safety configuration.

This module provides the configuration model and I/O functions for the
user-extendable safety lists. Entries are appended to the built-in
critical/warning prefixes and auto-exclude fragments; the built-ins
cannot be removed.

Configuration is stored in ~/.config/delf/config.toml:

    extra_critical = ["/srv/production"]
    extra_warning = ["/mnt/backup"]
    extra_auto_exclude = [".venv", "target"]
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from delf.core.paths import get_safety_config_path
from delf.safety.paths import SafetyPathList

logger = logging.getLogger(__name__)


class SafetyConfig(BaseModel):
    """Additional safety list entries supplied by the user.

    Attributes:
        extra_critical: Prefixes treated as critical system paths.
        extra_warning: Prefixes treated as warning-level paths.
        extra_auto_exclude: Fragments skipped during search by default.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    extra_critical: Annotated[
        tuple[str, ...],
        Field(description="Additional critical path prefixes"),
    ] = ()
    extra_warning: Annotated[
        tuple[str, ...],
        Field(description="Additional warning path prefixes"),
    ] = ()
    extra_auto_exclude: Annotated[
        tuple[str, ...],
        Field(description="Additional auto-exclude fragments"),
    ] = ()

    @field_validator("extra_critical", "extra_warning", "extra_auto_exclude")
    @classmethod
    def drop_blank_entries(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Strip entries and drop the empty ones."""
        return tuple(entry.strip() for entry in v if entry.strip())

    def build_path_list(self) -> SafetyPathList:
        """Combine these extras with the platform and environment defaults."""
        return SafetyPathList.for_platform(
            extra_critical=self.extra_critical,
            extra_warning=self.extra_warning,
            extra_auto_exclude=self.extra_auto_exclude,
        )


class SafetyConfigError(Exception):
    """Base exception for safety configuration errors."""


class SafetyConfigNotFoundError(SafetyConfigError):
    """Raised when the safety config file is not found."""


class SafetyConfigParseError(SafetyConfigError):
    """Raised when the safety config file cannot be parsed."""


def load_safety_config(path: Path | None = None) -> SafetyConfig:
    """Load safety configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated SafetyConfig object.

    Raises:
        SafetyConfigNotFoundError: If the config file doesn't exist.
        SafetyConfigParseError: If the TOML syntax is invalid.
        SafetyConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_safety_config_path()

    if not config_path.exists():
        raise SafetyConfigNotFoundError(f"Safety config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SafetyConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise SafetyConfigError(f"Failed to read safety config: {e}") from e

    try:
        return SafetyConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise SafetyConfigError(f"Invalid safety config content: {e}") from e


def load_safety_config_or_default(path: Path | None = None) -> SafetyConfig:
    """Load the safety config, falling back to no extras if it is absent.

    A missing file is normal and silent. Other errors are propagated so
    the caller can tell the user their file is broken.

    Raises:
        SafetyConfigError: If the file exists but is invalid.
    """
    try:
        return load_safety_config(path)
    except SafetyConfigNotFoundError:
        logger.debug("No safety config file, using built-in lists only")
        return SafetyConfig()


def save_safety_config(config: SafetyConfig, path: Path | None = None) -> Path:
    """Save safety configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The SafetyConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        SafetyConfigError: If the file cannot be written.
    """
    config_path = path or get_safety_config_path()

    data = {
        "extra_critical": list(config.extra_critical),
        "extra_warning": list(config.extra_warning),
        "extra_auto_exclude": list(config.extra_auto_exclude),
    }

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SafetyConfigError(f"Failed to write safety config: {e}") from e

    return config_path
