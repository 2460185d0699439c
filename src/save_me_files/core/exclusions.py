"""Loading excluded directories and testing paths against them.

An exclusion prunes a directory and everything beneath it. Matching is done
on path components, never on raw string prefixes, so ``/data/foo`` does not
exclude ``/data/foobar``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from save_me_files.core.line_file import (
    DEFAULT_COMMENT_PREFIX,
    is_comment,
    read_config_lines,
)
from save_me_files.types.aliases import Exclusions

logger = logging.getLogger(__name__)


def load_exclusions(
    path: Path,
    *,
    comment_prefix: str = DEFAULT_COMMENT_PREFIX,
) -> tuple[Path, ...]:
    """Load excluded directories from a list file.

    Per trimmed line: blank lines and comments are skipped silently, relative
    paths and paths that are not existing directories are dropped with a
    warning, and everything else is kept as written.

    Args:
        path: Exclusion list file
        comment_prefix: Marker that starts a comment line

    Returns:
        Absolute directory paths in file order with duplicates removed

    Raises:
        ListFileError: If the file cannot be read

    Examples:
        >>> load_exclusions(Path("exclusions.txt"))  # doctest: +SKIP
        (PosixPath('/home/user/project/node_modules'),)
    """
    accepted: dict[Path, None] = {}

    for line in read_config_lines(path):
        if not line or is_comment(line, comment_prefix):
            continue

        candidate = Path(line)
        if not candidate.is_absolute():
            logger.warning(
                "Exclusion path is not absolute, ignoring: %s",
                line,
                extra={"exclusion": line, "list_file": str(path)},
            )
            continue

        if not candidate.is_dir():
            logger.warning(
                "Exclusion directory does not exist: %s",
                line,
                extra={"exclusion": line, "list_file": str(path)},
            )
            continue

        accepted[candidate] = None

    exclusions = tuple(accepted)
    logger.info(
        "Loaded %d exclusions from %s",
        len(exclusions),
        path,
        extra={"exclusion_count": len(exclusions), "list_file": str(path)},
    )
    return exclusions


def is_excluded(path: Path, exclusions: Exclusions) -> bool:
    """Check if a path is an excluded directory or lies beneath one.

    Args:
        path: The path to check
        exclusions: Excluded directory paths

    Returns:
        True if the path should be pruned, False otherwise

    Examples:
        >>> is_excluded(Path("/data/foo/bar"), [Path("/data/foo")])
        True
        >>> is_excluded(Path("/data/foobar"), [Path("/data/foo")])
        False
    """
    return any(path == exclusion or exclusion in path.parents for exclusion in exclusions)
