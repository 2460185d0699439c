"""Entry point for ``python -m save_me_files``."""

from __future__ import annotations

from save_me_files.app.cli import cli

__all__ = ["main"]


def main() -> None:
    """Run the save-me-files command line interface."""
    cli(prog_name="save-me-files")


if __name__ == "__main__":
    main()
