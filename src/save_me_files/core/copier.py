"""Structure-preserving file copy.

Each selected file is copied to the destination root joined with its path
relative to the source root. Copies are independent: they run concurrently
on a bounded thread pool driven by an ``asyncio.TaskGroup``, and a failure
on one file is logged and recorded without affecting the others.

Ancestor directories are created one component at a time. Two workers may
race to create the same directory, so "already exists" counts as success.
"""

from __future__ import annotations

import asyncio
import contextvars
import logging
import os
import shutil
import time
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Final

from save_me_files.types.models import CopyOutcome, CopyPlanEntry, CopyReport
from save_me_files.utils.formatting import format_duration, format_rate, format_size
from save_me_files.utils.logging import log_with_context

logger = logging.getLogger(__name__)

# Same sizing rule as the standard library's default thread pool
DEFAULT_WORKERS: Final[int] = min(32, (os.cpu_count() or 1) + 4)


def build_copy_plan(
    source_root: Path,
    destination_root: Path,
    paths: Iterable[Path],
) -> list[CopyPlanEntry]:
    """Pair every source path with its destination path.

    Paths that are not under source_root cannot be mapped and are logged
    and left out of the plan.

    Examples:
        >>> build_copy_plan(Path("/src"), Path("/dst"), [Path("/src/a/b.txt")])
        [CopyPlanEntry(source=PosixPath('/src/a/b.txt'), destination=PosixPath('/dst/a/b.txt'))]
    """
    plan: list[CopyPlanEntry] = []
    for path in paths:
        try:
            relative = path.relative_to(source_root)
        except ValueError:
            logger.warning(
                "File %s is not under source directory %s, skipping",
                path,
                source_root,
                extra={"path": str(path), "source_root": str(source_root)},
            )
            continue
        plan.append(CopyPlanEntry(source=path, destination=destination_root / relative))
    return plan


def ensure_parent_directories(destination_root: Path, destination: Path) -> bool:
    """Create every missing directory between destination_root and destination.

    Args:
        destination_root: Existing destination root
        destination: File path whose parent chain must exist

    Returns:
        True if the parent directory exists afterwards, False if a directory
        could not be created (the failure is logged)
    """
    current = destination_root
    for part in destination.parent.relative_to(destination_root).parts:
        current = current / part
        if current.is_dir():
            continue
        try:
            current.mkdir()
        except FileExistsError:
            # Another worker created it first; only a non-directory is a problem
            if current.is_dir():
                continue
            logger.warning(
                "Failed to create parent directories for %s; %s exists and is not a directory",
                destination,
                current,
                extra={"path": str(destination), "blocking_path": str(current)},
            )
            return False
        except OSError as exc:
            logger.warning(
                "Failed to create parent directories for %s; %s",
                destination,
                exc,
                extra={"path": str(destination), "error": str(exc)},
            )
            return False
    return True


def copy_file(entry: CopyPlanEntry, destination_root: Path) -> CopyOutcome:
    """Copy one file's bytes, creating its destination directories first.

    Only file contents are copied; permissions and timestamps are left to
    the destination's defaults. An existing destination file is overwritten.

    Args:
        entry: Source and destination paths
        destination_root: Destination root the entry was planned against

    Returns:
        Outcome with the copied byte count, or the error that skipped the file
    """
    if not ensure_parent_directories(destination_root, entry.destination):
        return CopyOutcome(entry=entry, error=f"cannot create parent directory of {entry.destination}")

    try:
        _ = shutil.copyfile(entry.source, entry.destination)
        bytes_copied = entry.destination.stat().st_size
    except OSError as exc:
        logger.warning(
            "Failed to copy %s to %s: %s",
            entry.source,
            entry.destination,
            exc,
            extra={"source": str(entry.source), "destination": str(entry.destination), "error": str(exc)},
        )
        return CopyOutcome(entry=entry, error=str(exc))

    logger.info(
        "Copied %s from %s to %s",
        format_size(bytes_copied),
        entry.source,
        entry.destination,
        extra={"bytes_copied": bytes_copied},
    )
    return CopyOutcome(entry=entry, bytes_copied=bytes_copied)


async def copy_all_async(
    source_root: Path,
    destination_root: Path,
    paths: Iterable[Path],
    *,
    workers: int = DEFAULT_WORKERS,
) -> CopyReport:
    """Copy all paths concurrently, preserving their structure under destination_root.

    Copies are fanned out with ``asyncio.TaskGroup``; each one runs on a
    dedicated thread pool of ``workers`` threads with the caller's context
    (and therefore its correlation ID) copied in. There is no cancellation:
    the batch runs until every file is copied or skipped.

    Args:
        source_root: Root the paths were selected from
        destination_root: Existing directory to copy into
        paths: Selected files
        workers: Maximum number of concurrent copies

    Returns:
        Report with one outcome per planned file, in plan order

    Raises:
        ValueError: If workers is less than one
    """
    if workers < 1:
        msg = "workers must be at least 1"
        raise ValueError(msg)

    plan = build_copy_plan(source_root, destination_root, paths)
    outcomes: dict[int, CopyOutcome] = {}
    loop = asyncio.get_running_loop()
    start = time.perf_counter()

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="save-me-files-copy") as executor:

        async def _copy_single(index: int, entry: CopyPlanEntry) -> None:
            context = contextvars.copy_context()
            try:
                outcomes[index] = await loop.run_in_executor(
                    executor,
                    context.run,
                    copy_file,
                    entry,
                    destination_root,
                )
            except Exception as exc:
                logger.exception(
                    "Unexpected error copying %s, skipping",
                    entry.source,
                    extra={"source": str(entry.source), "error": str(exc)},
                )
                outcomes[index] = CopyOutcome(entry=entry, error=f"unexpected error: {exc}")

        async with asyncio.TaskGroup() as task_group:
            for index, entry in enumerate(plan):
                _ = task_group.create_task(_copy_single(index, entry))

    elapsed = time.perf_counter() - start
    report = CopyReport(
        outcomes=tuple(outcomes[index] for index in range(len(plan))),
        elapsed_seconds=elapsed,
    )

    rate = report.bytes_copied / elapsed if elapsed > 0 else 0.0
    log_with_context(
        logger,
        logging.INFO,
        "Copy finished: %d copied, %d skipped, %s in %s (%s)",
        report.copied,
        report.failed,
        format_size(report.bytes_copied),
        format_duration(elapsed),
        format_rate(rate),
        extra={
            "copied_files": report.copied,
            "failed_files": report.failed,
            "bytes_copied": report.bytes_copied,
            "workers": workers,
        },
    )
    return report


def copy_all(
    source_root: Path,
    destination_root: Path,
    paths: Iterable[Path],
    *,
    workers: int = DEFAULT_WORKERS,
) -> CopyReport:
    """Synchronous entry point for ``copy_all_async``.

    Must not be called from a running event loop; await
    ``copy_all_async`` there instead.
    """
    return asyncio.run(
        copy_all_async(source_root, destination_root, paths, workers=workers),
    )
