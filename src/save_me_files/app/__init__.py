"""Application module for save-me-files."""

from __future__ import annotations

from save_me_files.app.cli import cli

__all__ = [
    "cli",
]
