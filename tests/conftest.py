"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest
from delf.core.options import RunOptions
from delf.safety.classifier import PathClassifier
from delf.safety.paths import SafetyPathList
from delf.utils.formatting import console, err_console


@pytest.fixture(autouse=True)
def isolated_env(
    tmp_path_factory: pytest.TempPathFactory,
    monkeypatch: pytest.MonkeyPatch,
) -> Path:
    """Point XDG dirs at a private location and drop temp-dir variables.

    Keeps the run log and safety config out of the real home directory,
    and keeps the test tree from being classified as a warning-level
    temp location.
    """
    base = tmp_path_factory.mktemp("xdg")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(base / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(base / "state"))
    for name in ("TEMP", "TMP", "TMPDIR", "SystemRoot", "windir"):
        monkeypatch.delenv(name, raising=False)
    return base


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep Rich from wrapping long temporary paths in captured output."""
    monkeypatch.setattr(console, "width", 200)
    monkeypatch.setattr(err_console, "width", 200)


@pytest.fixture
def posix_paths() -> SafetyPathList:
    """Built-in POSIX safety lists without environment-derived entries."""
    return SafetyPathList.for_platform(windows=False, env={})


@pytest.fixture
def classifier(posix_paths: SafetyPathList) -> PathClassifier:
    """Case-sensitive classifier over the POSIX lists."""
    return PathClassifier(posix_paths, case_insensitive=False)


@pytest.fixture
def make_options():
    """Factory for RunOptions with test-friendly defaults."""

    def _make(**kwargs: object) -> RunOptions:
        return RunOptions(**kwargs)  # type: ignore[arg-type]

    return _make


@pytest.fixture
def log_tree(tmp_path: Path) -> Path:
    """Small tree with .log files, one of them under node_modules.

    Layout::

        root/a.log
        root/b.txt
        root/sub/c.log
        root/node_modules/d.log
    """
    root = tmp_path / "root"
    (root / "sub").mkdir(parents=True)
    (root / "node_modules").mkdir()
    (root / "a.log").write_text("a")
    (root / "b.txt").write_text("b")
    (root / "sub" / "c.log").write_text("c")
    (root / "node_modules" / "d.log").write_text("d")
    return root

