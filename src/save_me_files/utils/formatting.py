"""Pure formatting utilities for human-readable output.

Stateless helpers used in log messages and error text. Sizes use binary
(1024-based) units with IEC suffixes, matching what ``df -h`` style tools
report.
"""

from typing import Final

_UNIT_STEP: Final[int] = 1024
_SIZE_UNITS: Final[tuple[str, ...]] = ("KiB", "MiB", "GiB", "TiB", "PiB")

_MINUTE: Final[int] = 60
_HOUR: Final[int] = _MINUTE * 60


def format_size(size_bytes: int, *, precision: int = 2) -> str:
    """Convert a byte count to the largest fitting binary unit.

    Args:
        size_bytes: Number of bytes to format (must be non-negative)
        precision: Decimal places for values of one KiB or more

    Returns:
        Human-readable size string

    Raises:
        ValueError: If size_bytes is negative

    Examples:
        >>> format_size(512)
        '512 B'
        >>> format_size(1536)
        '1.50 KiB'
        >>> format_size(5 * 1024**3)
        '5.00 GiB'
    """
    if size_bytes < 0:
        msg = "size_bytes must be non-negative"
        raise ValueError(msg)

    if size_bytes < _UNIT_STEP:
        return f"{size_bytes} B"

    value = float(size_bytes)
    unit = _SIZE_UNITS[0]
    for unit in _SIZE_UNITS:
        value /= _UNIT_STEP
        if value < _UNIT_STEP:
            break

    return f"{value:.{precision}f} {unit}"


def format_rate(bytes_per_second: float) -> str:
    """Convert a transfer rate to a human-readable string.

    Examples:
        >>> format_rate(512.0)
        '512 B/s'
        >>> format_rate(2 * 1024**2)
        '2.0 MiB/s'
    """
    if bytes_per_second < 0:
        msg = "bytes_per_second must be non-negative"
        raise ValueError(msg)

    if bytes_per_second < _UNIT_STEP:
        return f"{int(bytes_per_second)} B/s"

    return f"{format_size(int(bytes_per_second), precision=1)}/s"


def format_duration(seconds: float) -> str:
    """Convert seconds to a compact duration string.

    Sub-minute durations keep one decimal place since most copy batches
    finish in seconds.

    Examples:
        >>> format_duration(2.345)
        '2.3s'
        >>> format_duration(90)
        '1m 30s'
        >>> format_duration(3660)
        '1h 1m'
    """
    if seconds < 0:
        msg = "seconds must be non-negative"
        raise ValueError(msg)

    if seconds < _MINUTE:
        return f"{seconds:.1f}s"

    total_seconds = int(seconds)
    if total_seconds >= _HOUR:
        hours, remaining = divmod(total_seconds, _HOUR)
        minutes = remaining // _MINUTE
        return f"{hours}h {minutes}m" if minutes else f"{hours}h"

    minutes, remaining = divmod(total_seconds, _MINUTE)
    return f"{minutes}m {remaining}s" if remaining else f"{minutes}m"
