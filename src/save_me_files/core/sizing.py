"""Size accounting and the destination free-space pre-check.

The space check is advisory: it compares the total selected size with the
free space reported at one moment, it does not reserve anything, so other
writers can still fill the disk before the copy finishes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

import psutil

from save_me_files.core.exceptions import InsufficientSpaceError, SpaceCheckError
from save_me_files.utils.formatting import format_size

logger = logging.getLogger(__name__)


def total_size(paths: Iterable[Path]) -> int:
    """Sum the on-disk sizes of the given files.

    A file whose metadata cannot be read (removed since selection,
    permission denied) is logged and contributes zero.

    Args:
        paths: Files to measure

    Returns:
        Total size in bytes

    Examples:
        >>> total_size([])
        0
    """
    total_bytes = 0
    measured_files = 0
    skipped_files = 0

    for path in paths:
        try:
            total_bytes += path.stat().st_size
            measured_files += 1
        except OSError as exc:
            logger.warning(
                "Cannot read size of %s, counting it as zero: %s",
                path,
                exc,
                extra={"path": str(path), "error": str(exc)},
            )
            skipped_files += 1

    logger.debug(
        "Size calculation complete",
        extra={
            "total_bytes": total_bytes,
            "measured_files": measured_files,
            "skipped_files": skipped_files,
        },
    )
    return total_bytes


def available_space(path: Path) -> int:
    """Return the free bytes available to this user on the filesystem holding path.

    Raises:
        SpaceCheckError: If the filesystem cannot be queried
    """
    try:
        return int(psutil.disk_usage(str(path)).free)
    except OSError as exc:
        msg = f"Failed to read available space at {path}: {exc}"
        raise SpaceCheckError(msg, path=path) from exc


def check_available_space(
    needed: int,
    destination: Path,
    *,
    space_reader: Callable[[Path], int] = available_space,
) -> int:
    """Verify that needed bytes fit at destination.

    Args:
        needed: Total size of the selected files
        destination: Destination root
        space_reader: Returns free bytes for a path

    Returns:
        Free bytes at the destination

    Raises:
        InsufficientSpaceError: If needed exceeds the free space
        SpaceCheckError: If the free space cannot be read
    """
    available = space_reader(destination)
    logger.info(
        "Needed space %s, available space %s",
        format_size(needed),
        format_size(available),
        extra={"needed_bytes": needed, "available_bytes": available, "destination": str(destination)},
    )

    if needed > available:
        raise InsufficientSpaceError(needed, available, destination)

    return available
