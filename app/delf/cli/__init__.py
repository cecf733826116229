"""CLI package for delf.

This package contains the Typer application and its display layer.
"""

from delf.cli.main import app

__all__ = ["app"]
