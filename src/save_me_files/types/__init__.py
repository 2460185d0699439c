"""Type definitions for save-me-files.

This package provides:
- Data models (immutable dataclasses)
- Type aliases (PEP 695 syntax)
"""

from save_me_files.types.aliases import Exclusions, Suffixes
from save_me_files.types.models import (
    CopyOutcome,
    CopyPlanEntry,
    CopyReport,
    RunSummary,
)

__all__ = [
    # Type aliases
    "Exclusions",
    "Suffixes",
    # Data models
    "CopyOutcome",
    "CopyPlanEntry",
    "CopyReport",
    "RunSummary",
]
