"""Unit tests for logging configuration and correlation IDs."""

import logging
import sys
from pathlib import Path

import pytest

from save_me_files.utils.logging import (
    DEFAULT_LOG_FORMAT,
    CorrelationIDFilter,
    configure_logging,
    get_correlation_id,
    log_with_context,
    reset_correlation_id,
    set_correlation_id,
)

pytestmark = pytest.mark.unit


def _record(message: str = "message") -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, message, None, None)


class TestCorrelationIDFilter:
    """Test correlation ID injection into records."""

    def test_no_active_id(self) -> None:
        """Records outside a run get a placeholder."""
        record = _record()

        assert CorrelationIDFilter().filter(record) is True
        assert record.correlation_id == "N/A"  # pyright: ignore[reportAttributeAccessIssue]

    def test_active_id(self) -> None:
        """Records inside a run carry its ID."""
        record = _record()
        token = set_correlation_id("run-1")
        try:
            _ = CorrelationIDFilter().filter(record)
        finally:
            reset_correlation_id(token)

        assert record.correlation_id == "run-1"  # pyright: ignore[reportAttributeAccessIssue]


class TestCorrelationID:
    """Test setting and resetting the correlation ID."""

    def test_set_and_reset(self) -> None:
        """Resetting restores the previous value."""
        assert get_correlation_id() is None

        outer = set_correlation_id("outer")
        inner = set_correlation_id("inner")
        assert get_correlation_id() == "inner"

        reset_correlation_id(inner)
        assert get_correlation_id() == "outer"

        reset_correlation_id(outer)
        assert get_correlation_id() is None


class TestConfigureLogging:
    """Test root logger configuration."""

    def test_console_handler_on_stdout(self) -> None:
        """Log lines go to stdout with the correlation format."""
        configure_logging(log_level="DEBUG")

        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        handler = root_logger.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stdout  # pyright: ignore[reportUnknownMemberType]
        assert handler.formatter is not None
        assert handler.formatter._fmt == DEFAULT_LOG_FORMAT  # pyright: ignore[reportPrivateUsage]
        assert any(isinstance(f, CorrelationIDFilter) for f in handler.filters)

    def test_reconfiguring_replaces_handlers(self) -> None:
        """Calling twice does not duplicate output."""
        configure_logging()
        configure_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_unknown_level_falls_back_to_info(self) -> None:
        """An unrecognised level name means INFO."""
        configure_logging(log_level="chatty")

        assert logging.getLogger().level == logging.INFO

    def test_log_file_receives_records(self, tmp_path: Path) -> None:
        """An optional file handler writes the same records."""
        log_file = tmp_path / "run.log"
        configure_logging(log_level="INFO", enable_console=False, log_file=log_file)

        token = set_correlation_id("file-run")
        try:
            logging.getLogger("save_me_files.test").info("Copied %s", "a.txt")
        finally:
            reset_correlation_id(token)
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "[file-run]" in content
        assert "Copied a.txt" in content
        assert "INFO" in content

    def test_reconfiguring_closes_previous_file_handler(self, tmp_path: Path) -> None:
        """Replaced handlers are closed so their log files are released."""
        configure_logging(enable_console=False, log_file=tmp_path / "first.log")
        first_handler = logging.getLogger().handlers[0]
        assert isinstance(first_handler, logging.FileHandler)

        configure_logging(enable_console=False, log_file=tmp_path / "second.log")

        assert first_handler.stream is None
        assert first_handler not in logging.getLogger().handlers
        assert len(logging.getLogger().handlers) == 1

    def test_console_disabled(self) -> None:
        """Console output can be turned off."""
        configure_logging(enable_console=False)

        assert logging.getLogger().handlers == []


class TestLogWithContext:
    """Test structured context logging."""

    def test_extra_fields_and_correlation_id(self, caplog: pytest.LogCaptureFixture) -> None:
        """Extra fields and the active correlation ID land on the record."""
        logger = logging.getLogger("save_me_files.test")
        token = set_correlation_id("ctx-run")
        try:
            with caplog.at_level(logging.INFO, logger="save_me_files.test"):
                log_with_context(logger, logging.INFO, "Copied %d files", 3, extra={"copied_files": 3})
        finally:
            reset_correlation_id(token)

        record = caplog.records[0]
        assert record.getMessage() == "Copied 3 files"
        assert record.copied_files == 3  # pyright: ignore[reportAttributeAccessIssue]
        assert record.correlation_id == "ctx-run"  # pyright: ignore[reportAttributeAccessIssue]

    def test_without_correlation_id(self, caplog: pytest.LogCaptureFixture) -> None:
        """No correlation ID is added outside a run."""
        logger = logging.getLogger("save_me_files.test")

        with caplog.at_level(logging.INFO, logger="save_me_files.test"):
            log_with_context(logger, logging.INFO, "plain")

        assert not hasattr(caplog.records[0], "correlation_id")
