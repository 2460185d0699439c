"""Save Me Files - copy selected files from a directory tree, keeping its layout.

Files are chosen by filename suffix, excluded directories are pruned from
the walk, and the destination's free space is checked before anything is
copied. Copies run concurrently on a bounded thread pool.
"""

from save_me_files.__main__ import main

__all__ = ["main"]
