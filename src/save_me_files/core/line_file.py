"""Reading line-oriented list files.

Suffix and exclusion lists share one format: UTF-8 text, one entry per
line, surrounding whitespace ignored, and lines starting with a comment
prefix skipped without a warning.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

from save_me_files.core.exceptions import ListFileError

logger = logging.getLogger(__name__)

DEFAULT_COMMENT_PREFIX: Final[str] = "//"


def read_config_lines(path: Path) -> list[str]:
    """Read a list file and return its lines with whitespace trimmed.

    Blank lines are kept (as empty strings) so callers decide how to treat
    them.

    Args:
        path: List file to read

    Returns:
        Trimmed lines in file order

    Raises:
        ListFileError: If the file cannot be opened or is not valid UTF-8
    """
    try:
        with path.open("r", encoding="utf-8") as fh:
            lines = [line.strip() for line in fh]
    except UnicodeDecodeError as e:
        msg = f"List file is not valid UTF-8: {path} ({e.reason} at byte {e.start})"
        raise ListFileError(msg, file_path=path) from e
    except OSError as e:
        msg = f"Failed to read list file: {path}\nError: {e}"
        raise ListFileError(msg, file_path=path) from e

    logger.debug("Read %d lines from %s", len(lines), path, extra={"path": str(path)})
    return lines


def is_comment(line: str, comment_prefix: str = DEFAULT_COMMENT_PREFIX) -> bool:
    """Check whether a trimmed line is a comment.

    Examples:
        >>> is_comment("// images")
        True
        >>> is_comment("#x", "#")
        True
        >>> is_comment(".txt")
        False
    """
    return line.startswith(comment_prefix)
