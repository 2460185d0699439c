"""Data models for save-me-files.

This module defines immutable dataclasses used throughout the application
for type-safe data transfer between the selection, sizing, and copy stages.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(slots=True, frozen=True)
class CopyPlanEntry:
    """Resolved source/destination pair for a single file copy.

    The destination is the destination root joined with the source path
    relative to the source root, so the source directory structure is
    mirrored under the destination.
    """

    source: Path
    destination: Path


@dataclass(slots=True, frozen=True)
class CopyOutcome:
    """Result of copying a single plan entry.

    Exactly one of ``bytes_copied`` and ``error`` is set.
    """

    entry: CopyPlanEntry
    bytes_copied: int | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        """Whether the file was copied."""
        return self.error is None


@dataclass(slots=True, frozen=True)
class CopyReport:
    """Aggregate result of a copy batch."""

    outcomes: tuple[CopyOutcome, ...]
    elapsed_seconds: float

    @property
    def copied(self) -> int:
        """Number of files copied successfully."""
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def failed(self) -> int:
        """Number of files skipped because of an error."""
        return len(self.outcomes) - self.copied

    @property
    def bytes_copied(self) -> int:
        """Total bytes written to the destination."""
        return sum(outcome.bytes_copied or 0 for outcome in self.outcomes)


@dataclass(slots=True, frozen=True)
class RunSummary:
    """What a single run selected, measured, and copied.

    ``copy_report`` is None for dry runs.
    """

    selected: tuple[Path, ...]
    needed_bytes: int
    available_bytes: int
    dry_run: bool
    copy_report: CopyReport | None = field(default=None)
