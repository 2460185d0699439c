"""Type aliases using PEP 695 syntax."""

from collections.abc import Sequence
from pathlib import Path

# Accepted filename suffixes, in file order with duplicates removed
type Suffixes = tuple[str, ...]

# Absolute directory paths pruned from traversal
type Exclusions = Sequence[Path]
