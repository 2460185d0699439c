"""Logging infrastructure with correlation ID tracking.

Every run of the copier gets a correlation ID stored in a ContextVar. The
ID is attached to each log record by ``CorrelationIDFilter`` and is
inherited by asyncio tasks and copied into the copy thread pool, so log
lines emitted by concurrent copies can be traced back to the run that
started them.
"""

import contextvars
import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Final, override

# Correlation ID context variable for tracing a run across copy workers
correlation_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id",
    default=None,
)

DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] - %(message)s"

VALID_LOG_LEVELS: Final[frozenset[str]] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class CorrelationIDFilter(logging.Filter):
    """Logging filter that adds the current correlation ID to log records.

    Records logged outside a run get ``"N/A"`` so the format string never
    fails on a missing attribute.
    """

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        """Add correlation ID to log record from ContextVar.

        Args:
            record: Log record to enhance with correlation ID

        Returns:
            True to allow the record to be logged
        """
        correlation_id = correlation_id_var.get()
        record.correlation_id = correlation_id if correlation_id is not None else "N/A"
        return True


def configure_logging(
    *,
    log_level: str = "INFO",
    enable_console: bool = True,
    log_file: Path | None = None,
) -> None:
    """Configure application logging.

    Installs handlers on the root logger, replacing any that exist, so the
    function can be called again (for example from tests) without
    duplicating output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_console: Write log records to stdout
        log_file: Optional file that receives the same records

    Example:
        >>> configure_logging(log_level="DEBUG")
        >>> logging.getLogger(__name__).debug("Walking source tree")
    """
    root_logger = logging.getLogger()

    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger.setLevel(level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    correlation_filter = CorrelationIDFilter()
    formatter = logging.Formatter(DEFAULT_LOG_FORMAT)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(correlation_filter)
        root_logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.addFilter(correlation_filter)
        root_logger.addHandler(file_handler)



def set_correlation_id(correlation_id: str) -> contextvars.Token[str | None]:
    """Set the correlation ID for the current context.

    Args:
        correlation_id: Unique identifier for the run

    Returns:
        Token that restores the previous value via ``reset_correlation_id``
    """
    return correlation_id_var.set(correlation_id)


def reset_correlation_id(token: contextvars.Token[str | None]) -> None:
    """Restore the correlation ID that was active before ``set_correlation_id``."""
    correlation_id_var.reset(token)


def get_correlation_id() -> str | None:
    """Get the current correlation ID from context.

    Returns:
        Current correlation ID or None if not set
    """
    return correlation_id_var.get()


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    *args: object,
    extra: Mapping[str, object] | None = None,
) -> None:
    """Log a message with additional structured context fields.

    The correlation ID is added to ``extra`` when one is active.

    Args:
        logger: Logger instance to use
        level: Logging level (e.g., logging.INFO)
        message: Log message, %-style placeholders allowed
        *args: Arguments for the message placeholders
        extra: Additional context fields to include in the record
    """
    context = dict(extra) if extra else {}

    correlation_id = get_correlation_id()
    if correlation_id:
        context["correlation_id"] = correlation_id

    logger.log(level, message, *args, extra=context)
