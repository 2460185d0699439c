"""Shared utility modules.

This package provides:
- Data size, rate, and duration formatting (pure, stateless)
- Logging configuration with correlation ID tracking
"""

from save_me_files.utils.formatting import (
    format_duration,
    format_rate,
    format_size,
)

__all__ = [
    "format_duration",
    "format_rate",
    "format_size",
]
