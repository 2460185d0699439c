"""Error taxonomy for save-me-files.

Every error raised to the caller derives from ``SaveMeFilesError`` and is
fatal for the run. Per-entry problems (an unreadable directory, a file that
fails to copy) are logged and never raised.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from save_me_files.utils.formatting import format_size


class SaveMeFilesError(Exception):
    """Base exception for all fatal save-me-files errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:  # pyright: ignore[reportAny] # Flexible error context
        """Initialize SaveMeFilesError.

        Args:
            message: Error message
            context: Additional context information for debugging
        """
        super().__init__(message)
        self.context: dict[str, Any] = context or {}  # pyright: ignore[reportAny] # Flexible error context


class ConfigurationError(SaveMeFilesError):
    """Raised when run configuration is missing or invalid.

    Covers missing or non-directory source and destination paths, list files
    that are missing or not regular files, malformed YAML, and values that
    fail validation.
    """


class EnvironmentVariableError(SaveMeFilesError):
    """Raised when a ``${VAR}`` reference names an unset environment variable."""

    def __init__(self, message: str, env_var: str | None = None) -> None:
        """Initialize EnvironmentVariableError.

        Args:
            message: Error message
            env_var: Name of the missing environment variable
        """
        context: dict[str, Any] = {}  # pyright: ignore[reportAny]
        if env_var is not None:
            context["env_var"] = env_var
        super().__init__(message, context)
        self.env_var: str | None = env_var


class ListFileError(SaveMeFilesError):
    """Raised when a suffix or exclusion list file cannot be read at all.

    Individual malformed lines are not errors; they are logged and dropped.
    """

    def __init__(
        self,
        message: str,
        file_path: Path | None = None,
        context: dict[str, Any] | None = None,  # pyright: ignore[reportAny]
    ) -> None:
        """Initialize ListFileError.

        Args:
            message: Error message
            file_path: Path of the list file that failed to load
            context: Additional context information
        """
        full_context = context or {}
        if file_path is not None:
            full_context["file_path"] = str(file_path)

        super().__init__(message, full_context)
        self.file_path: Path | None = file_path


class SpaceCheckError(SaveMeFilesError):
    """Raised when free space at the destination cannot be determined."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        """Initialize SpaceCheckError.

        Args:
            message: Error message
            path: Destination path that was queried
        """
        context: dict[str, Any] = {}  # pyright: ignore[reportAny]
        if path is not None:
            context["path"] = str(path)
        super().__init__(message, context)
        self.path: Path | None = path


class InsufficientSpaceError(SaveMeFilesError):
    """Raised when the selected files do not fit on the destination filesystem."""

    def __init__(self, needed: int, available: int, destination: Path) -> None:
        """Initialize InsufficientSpaceError.

        Args:
            needed: Total size of the selected files in bytes
            available: Free bytes at the destination
            destination: Destination root that was checked
        """
        message = (
            "There's not enough space to copy all files! "
            f"Needed space {format_size(needed)}, available space {format_size(available)}"
        )
        super().__init__(
            message,
            {"needed": needed, "available": available, "destination": str(destination)},
        )
        self.needed: int = needed
        self.available: int = available
        self.destination: Path = destination
