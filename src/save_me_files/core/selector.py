"""Selecting files to copy from a source directory tree.

The walk is an explicit depth-first stack so that pruning an excluded
directory is a single decision taken before the directory is listed.
Symbolic links are never followed: a link to a directory is not descended
into and a link to a file is not treated as a regular file.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from save_me_files.core.exclusions import is_excluded
from save_me_files.types.aliases import Exclusions

logger = logging.getLogger(__name__)


def matches_suffix(name: str, suffixes: Iterable[str]) -> bool:
    """Check whether a file name ends with any of the suffixes.

    Matching is a case-sensitive tail comparison on the whole name, not an
    extension lookup: ``"_backup.txt"`` matches ``"notes_backup.txt"`` and
    ``".txt"`` does not match ``"x.txt2"``.

    Examples:
        >>> matches_suffix("report.txt", [".txt"])
        True
        >>> matches_suffix("report.txt", ["txt2"])
        False
        >>> matches_suffix("anything", [""])
        True
    """
    return any(name.endswith(suffix) for suffix in suffixes)


def _with_resolved(exclusions: Exclusions) -> Exclusions:
    # The source root is stored resolved, so walked paths are canonical.
    return tuple(dict.fromkeys([*exclusions, *(exclusion.resolve() for exclusion in exclusions)]))


def iter_selected_files(
    source_root: Path,
    suffixes: Iterable[str],
    exclusions: Exclusions,
) -> Iterator[Path]:
    """Yield regular files under source_root that should be copied.

    The root is part of the traversal and is itself subject to the exclusion
    check, so an exclusion equal to or above the root selects nothing.
    Exclusions are matched both as written and with symbolic links resolved,
    so an exclusion spelled through a linked source root still prunes.
    Directories that cannot be listed and entries whose type cannot be read
    are logged and skipped; the walk continues with their siblings.

    Args:
        source_root: Directory to walk
        suffixes: Accepted filename suffixes
        exclusions: Directories to prune

    Yields:
        Paths of selected files, in no particular order
    """
    accepted = tuple(suffixes)
    pruned = _with_resolved(exclusions)
    stack: list[Path] = [source_root]

    while stack:
        directory = stack.pop()

        if is_excluded(directory, pruned):
            logger.debug("Pruning excluded directory: %s", directory, extra={"path": str(directory)})
            continue

        try:
            entries = list(directory.iterdir())
        except OSError as exc:
            logger.warning(
                "Cannot read directory %s, skipping: %s",
                directory,
                exc,
                extra={"path": str(directory), "error": str(exc)},
            )
            continue

        for entry in entries:
            try:
                if entry.is_symlink():
                    logger.debug("Skipping symbolic link: %s", entry, extra={"path": str(entry)})
                    continue
                if entry.is_dir():
                    stack.append(entry)
                elif entry.is_file() and matches_suffix(entry.name, accepted):
                    yield entry
            except OSError as exc:
                logger.warning(
                    "Cannot inspect %s, skipping: %s",
                    entry,
                    exc,
                    extra={"path": str(entry), "error": str(exc)},
                )


def select_files(
    source_root: Path,
    suffixes: Iterable[str],
    exclusions: Exclusions,
) -> list[Path]:
    """Collect the selection for source_root.

    Args:
        source_root: Directory to walk
        suffixes: Accepted filename suffixes
        exclusions: Directories to prune

    Returns:
        Selected file paths, in traversal order
    """
    selected = list(iter_selected_files(source_root, suffixes, exclusions))
    logger.info(
        "Selected %d files under %s",
        len(selected),
        source_root,
        extra={"source_root": str(source_root), "selected_files": len(selected)},
    )
    return selected
