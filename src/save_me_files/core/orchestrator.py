"""Run orchestrator for the select, size-check, and copy pipeline.

The orchestrator is a single linear pass:

- Load suffixes (or copy every file) and exclusions (or none)
- Select files under the source directory
- Sum their sizes and compare with free space at the destination
- Stop there for a dry run, otherwise copy the selection

Fatal problems surface as ``SaveMeFilesError`` subclasses; everything that
only affects a single file or list entry is logged and the run carries on.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from uuid import uuid4

from save_me_files.core.config import RunConfig
from save_me_files.core.copier import copy_all
from save_me_files.core.exclusions import load_exclusions
from save_me_files.core.selector import select_files
from save_me_files.core.sizing import available_space, check_available_space, total_size
from save_me_files.core.suffixes import DEFAULT_SUFFIXES, load_suffixes
from save_me_files.types import CopyReport, Exclusions, RunSummary, Suffixes
from save_me_files.utils.logging import reset_correlation_id, set_correlation_id

__all__ = ["Orchestrator", "run"]

type SpaceReader = Callable[[Path], int]
type CorrelationIDFactory = Callable[[], str]

logger = logging.getLogger(__name__)


class Orchestrator:
    """Drive one copy run from validated configuration."""

    def __init__(
        self,
        config: RunConfig,
        *,
        space_reader: SpaceReader = available_space,
        correlation_id_factory: CorrelationIDFactory | None = None,
    ) -> None:
        self._config: RunConfig = config
        self._space_reader: SpaceReader = space_reader
        self._correlation_id_factory: CorrelationIDFactory = correlation_id_factory or (lambda: uuid4().hex[:12])

    def run(self) -> RunSummary:
        """Execute the pipeline.

        Returns:
            Summary of what was selected and, unless this is a dry run, copied

        Raises:
            ListFileError: If a suffix or exclusion file cannot be read
            InsufficientSpaceError: If the selection does not fit at the destination
            SpaceCheckError: If free space at the destination cannot be read
        """
        token = set_correlation_id(self._correlation_id_factory())
        try:
            return self._run()
        finally:
            reset_correlation_id(token)

    def _run(self) -> RunSummary:
        config = self._config
        suffixes = self._load_suffixes()
        exclusions = self._load_exclusions()

        logger.info("Searching for files to copy starting at %s", config.src_directory)
        selected = sorted(select_files(config.src_directory, suffixes, exclusions))
        for path in selected:
            logger.info("Will copy: %s", path)

        needed = total_size(selected)
        available = check_available_space(
            needed,
            config.dst_directory,
            space_reader=self._space_reader,
        )

        report: CopyReport | None = None
        if config.no_copy:
            logger.info("Copying skipped")
        else:
            logger.info("Copying files", extra={"workers": config.workers})
            report = copy_all(
                config.src_directory,
                config.dst_directory,
                selected,
                workers=config.workers,
            )

        return RunSummary(
            selected=tuple(selected),
            needed_bytes=needed,
            available_bytes=available,
            dry_run=config.no_copy,
            copy_report=report,
        )

    def _load_suffixes(self) -> Suffixes:
        path = self._config.include_suffixes_file
        if path is None:
            logger.info("No suffix file given, copying every file")
            return DEFAULT_SUFFIXES
        logger.info("Reading suffixes from %s", path)
        return load_suffixes(path, comment_prefix=self._config.comment_prefix)

    def _load_exclusions(self) -> Exclusions:
        path = self._config.exclude_paths_file
        if path is None:
            return ()
        logger.info("Reading exclusions from %s", path)
        return load_exclusions(path, comment_prefix=self._config.comment_prefix)


def run(config: RunConfig) -> RunSummary:
    """Run the pipeline with default collaborators."""
    return Orchestrator(config).run()
