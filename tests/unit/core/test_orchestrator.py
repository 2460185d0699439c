"""Unit tests for the run orchestrator."""

import logging
from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from save_me_files.core.config import RunConfig
from save_me_files.core.exceptions import InsufficientSpaceError
from save_me_files.core.orchestrator import Orchestrator, run
from save_me_files.utils.logging import get_correlation_id

pytestmark = pytest.mark.unit

type ListFileFactory = Callable[[str, list[str]], Path]

PLENTY_OF_SPACE = 10 * 1024**3


def _plenty(_: Path) -> int:
    return PLENTY_OF_SPACE


class TestOrchestrator:
    """Test the select, check, copy pipeline."""

    def test_copies_everything_without_list_files(self, source_root: Path, destination_root: Path) -> None:
        """With no suffix file every file is copied."""
        config = RunConfig(src_directory=source_root, dst_directory=destination_root, workers=2)

        summary = Orchestrator(config, space_reader=_plenty).run()

        assert summary.dry_run is False
        assert summary.copy_report is not None
        assert summary.copy_report.copied == 3
        assert (destination_root / "sub" / "b.log").exists()
        assert summary.available_bytes == PLENTY_OF_SPACE

    def test_selection_is_sorted(self, source_root: Path, destination_root: Path) -> None:
        """The selected paths are reported in a stable order."""
        config = RunConfig(src_directory=source_root, dst_directory=destination_root, no_copy=True)

        summary = Orchestrator(config, space_reader=_plenty).run()

        assert list(summary.selected) == sorted(summary.selected)

    def test_applies_suffixes_and_exclusions(
        self,
        source_root: Path,
        destination_root: Path,
        write_list_file: ListFileFactory,
    ) -> None:
        """Suffix and exclusion files narrow the selection."""
        suffixes = write_list_file("suffixes.txt", [".txt", ".log"])
        exclusions = write_list_file("exclude.txt", [str(source_root / "sub")])
        config = RunConfig(
            src_directory=source_root,
            dst_directory=destination_root,
            include_suffixes_file=suffixes,
            exclude_paths_file=exclusions,
        )

        summary = Orchestrator(config, space_reader=_plenty).run()

        assert summary.selected == (source_root / "a.txt",)
        assert sorted(p.name for p in destination_root.rglob("*")) == ["a.txt"]

    def test_comment_prefix_used_for_list_files(
        self,
        source_root: Path,
        destination_root: Path,
        write_list_file: ListFileFactory,
    ) -> None:
        """The configured comment prefix applies to both list files."""
        suffixes = write_list_file("suffixes.txt", ["# logs only", ".log"])
        config = RunConfig(
            src_directory=source_root,
            dst_directory=destination_root,
            include_suffixes_file=suffixes,
            comment_prefix="#",
            no_copy=True,
        )

        summary = Orchestrator(config, space_reader=_plenty).run()

        assert summary.selected == (source_root / "sub" / "b.log",)

    def test_dry_run_copies_nothing(
        self,
        source_root: Path,
        destination_root: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """A dry run selects and sizes but never writes."""
        config = RunConfig(src_directory=source_root, dst_directory=destination_root, no_copy=True)

        with caplog.at_level(logging.INFO):
            summary = Orchestrator(config, space_reader=_plenty).run()

        assert summary.dry_run is True
        assert summary.copy_report is None
        assert summary.needed_bytes == sum(p.stat().st_size for p in summary.selected)
        assert list(destination_root.iterdir()) == []
        assert "Copying skipped" in caplog.text
        for path in summary.selected:
            assert f"Will copy: {path}" in caplog.text

    def test_insufficient_space_aborts_before_copy(self, source_root: Path, destination_root: Path) -> None:
        """Nothing is copied when the selection does not fit."""
        config = RunConfig(src_directory=source_root, dst_directory=destination_root)

        with patch("save_me_files.core.orchestrator.copy_all") as mock_copy:
            with pytest.raises(InsufficientSpaceError):
                _ = Orchestrator(config, space_reader=lambda _: 1).run()

        mock_copy.assert_not_called()
        assert list(destination_root.iterdir()) == []

    def test_insufficient_space_checked_even_for_dry_run(self, source_root: Path, destination_root: Path) -> None:
        """The space check runs before the dry-run decision."""
        config = RunConfig(src_directory=source_root, dst_directory=destination_root, no_copy=True)

        with pytest.raises(InsufficientSpaceError):
            _ = Orchestrator(config, space_reader=lambda _: 0).run()

    def test_workers_passed_to_copier(self, source_root: Path, destination_root: Path) -> None:
        """The configured worker count bounds the copy batch."""
        config = RunConfig(src_directory=source_root, dst_directory=destination_root, workers=3)

        with patch("save_me_files.core.orchestrator.copy_all", return_value=MagicMock()) as mock_copy:
            _ = Orchestrator(config, space_reader=_plenty).run()

        assert mock_copy.call_args.kwargs["workers"] == 3

    def test_correlation_id_set_during_run_and_reset(self, source_root: Path, destination_root: Path) -> None:
        """Every run gets its own correlation ID, cleared afterwards."""
        config = RunConfig(src_directory=source_root, dst_directory=destination_root, no_copy=True)
        seen: list[str | None] = []

        def recording_reader(_: Path) -> int:
            seen.append(get_correlation_id())
            return PLENTY_OF_SPACE

        _ = Orchestrator(config, space_reader=recording_reader, correlation_id_factory=lambda: "abc123").run()

        assert seen == ["abc123"]
        assert get_correlation_id() is None

    def test_default_correlation_ids_differ(self, source_root: Path, destination_root: Path) -> None:
        """Generated correlation IDs are unique per run."""
        config = RunConfig(src_directory=source_root, dst_directory=destination_root, no_copy=True)
        seen: list[str | None] = []

        def recording_reader(_: Path) -> int:
            seen.append(get_correlation_id())
            return PLENTY_OF_SPACE

        orchestrator = Orchestrator(config, space_reader=recording_reader)
        _ = orchestrator.run()
        _ = orchestrator.run()

        assert len(set(seen)) == 2
        assert None not in seen

    def test_module_level_run(self, source_root: Path, destination_root: Path) -> None:
        """run() queries the real filesystem for free space."""
        config = RunConfig(src_directory=source_root, dst_directory=destination_root, no_copy=True)

        summary = run(config)

        assert len(summary.selected) == 3
