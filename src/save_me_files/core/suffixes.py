"""Loading the list of accepted filename suffixes."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Final

from save_me_files.core.line_file import (
    DEFAULT_COMMENT_PREFIX,
    is_comment,
    read_config_lines,
)
from save_me_files.types.aliases import Suffixes

logger = logging.getLogger(__name__)

# Characters allowed in a suffix line once trimmed
VALID_SUFFIX_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9_.\-\s]+$")

# Used when no suffix file is given: the empty suffix matches every name
DEFAULT_SUFFIXES: Final[Suffixes] = ("",)


def is_valid_suffix(text: str) -> bool:
    """Check whether text is made only of characters allowed in a suffix.

    Examples:
        >>> is_valid_suffix(".drawio.png")
        True
        >>> is_valid_suffix("invalid:suffix")
        False
    """
    return VALID_SUFFIX_PATTERN.fullmatch(text) is not None


def load_suffixes(
    path: Path,
    *,
    comment_prefix: str = DEFAULT_COMMENT_PREFIX,
) -> Suffixes:
    """Load accepted filename suffixes from a list file.

    Each line is trimmed and kept when it passes ``is_valid_suffix``. Lines
    that fail validation are dropped; unless they are comments they are
    logged so the user can see what was ignored. Blank lines are dropped
    silently.

    Args:
        path: Suffix list file
        comment_prefix: Marker that starts a comment line

    Returns:
        Suffixes in file order with duplicates removed

    Raises:
        ListFileError: If the file cannot be read
    """
    accepted: dict[str, None] = {}

    for line in read_config_lines(path):
        if is_valid_suffix(line):
            accepted[line] = None
            continue

        if not line or is_comment(line, comment_prefix):
            continue

        logger.warning("Invalid suffix: %s", line, extra={"suffix": line, "list_file": str(path)})

    suffixes = tuple(accepted)
    logger.info(
        "Loaded %d suffixes from %s",
        len(suffixes),
        path,
        extra={"suffix_count": len(suffixes), "list_file": str(path)},
    )
    return suffixes
