"""Command-line interface for save-me-files."""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import click

from save_me_files.core.config import build_run_config
from save_me_files.core.exceptions import SaveMeFilesError
from save_me_files.core.orchestrator import Orchestrator
from save_me_files.types import RunSummary
from save_me_files.utils.formatting import format_size
from save_me_files.utils.logging import VALID_LOG_LEVELS, configure_logging

logger = logging.getLogger(__name__)

try:
    __version__ = version("save-me-files")
except PackageNotFoundError:
    __version__ = "unknown"

# Conventional exit status for a run stopped by SIGINT
EXIT_INTERRUPTED = 130


def validate_log_level(
    ctx: click.Context,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    param: click.Parameter,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    value: str | None,
) -> str | None:
    """Validate and normalize log level.

    Args:
        ctx: Click context (required by Click callback signature)
        param: Click parameter (required by Click callback signature)
        value: Log level value to validate

    Returns:
        Normalized log level (uppercase), or None when not given

    Raises:
        click.BadParameter: If validation fails
    """
    if value is None:
        return value

    normalized_value = value.upper().strip()
    if normalized_value not in VALID_LOG_LEVELS:
        msg = f'Invalid log level "{value}". Valid options: {", ".join(sorted(VALID_LOG_LEVELS))}'
        raise click.BadParameter(msg)

    return normalized_value


def validate_config_path(
    ctx: click.Context,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    param: click.Parameter,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    value: Path | None,
) -> Path | None:
    """Validate the YAML configuration file path.

    Raises:
        click.BadParameter: If the path is a directory or not a YAML file
    """
    if value is None:
        return value

    if value.is_dir():
        msg = "Configuration path must be a file, not a directory"
        raise click.BadParameter(msg)

    if value.suffix.lower() not in {".yaml", ".yml"}:
        msg = "Invalid configuration file extension. Supported extensions: .yaml, .yml"
        raise click.BadParameter(msg)

    return value


def _log_summary(summary: RunSummary) -> None:
    if summary.copy_report is None:
        logger.info(
            "Dry run: %d files selected, %s needed",
            len(summary.selected),
            format_size(summary.needed_bytes),
            extra={"selected_files": len(summary.selected), "needed_bytes": summary.needed_bytes},
        )
        return

    report = summary.copy_report
    if report.failed:
        logger.warning(
            "%d of %d files could not be copied, see warnings above",
            report.failed,
            len(report.outcomes),
            extra={"failed_files": report.failed},
        )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--src-directory", "-s",
    type=click.Path(path_type=Path),
    default=None,
    help="Directory to copy files from (required unless set in --config)",
)
@click.option(
    "--dst-directory", "-d",
    type=click.Path(path_type=Path),
    default=None,
    help="Existing directory to copy files into (required unless set in --config)",
)
@click.option(
    "--include-suffixes-file", "-i",
    type=click.Path(path_type=Path),
    default=None,
    help="File listing filename suffixes to copy, one per line. Copies every file when omitted.",
)
@click.option(
    "--exclude-paths-file", "-e",
    type=click.Path(path_type=Path),
    default=None,
    help="File listing absolute directories to skip, one per line",
)
@click.option(
    "--no-copy",
    is_flag=True,
    help="Select files and check free space, but do not copy anything",
)
@click.option(
    "--workers", "-w",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of files copied at the same time",
)
@click.option(
    "--log-level", "-l",
    type=str,
    default=None,
    callback=validate_log_level,
    help="Logging verbosity level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write the log to this file",
)
@click.option(
    "--config", "-c",
    type=click.Path(path_type=Path),
    default=None,
    callback=validate_config_path,
    help="YAML file providing defaults for any of the options above",
)
@click.version_option(version=__version__, prog_name="save-me-files")
def cli(
    src_directory: Path | None,
    dst_directory: Path | None,
    include_suffixes_file: Path | None,
    exclude_paths_file: Path | None,
    no_copy: bool,
    workers: int | None,
    log_level: str | None,
    log_file: Path | None,
    config: Path | None,
) -> None:
    """Copy files from a source tree into a destination, keeping their layout.

    Files are selected by filename suffix, directories listed in the
    exclusion file are skipped entirely, and nothing is copied unless the
    destination has room for the whole selection.

    Examples:

        # Copy every file
        save-me-files -s ~/projects -d /mnt/backup

        # Copy only documents, skipping build output
        save-me-files -s ~/projects -d /mnt/backup -i suffixes.txt -e exclude.txt

        # See what would be copied
        save-me-files -s ~/projects -d /mnt/backup -i suffixes.txt --no-copy
    """
    overrides: dict[str, object] = {
        "src_directory": src_directory,
        "dst_directory": dst_directory,
        "include_suffixes_file": include_suffixes_file,
        "exclude_paths_file": exclude_paths_file,
        # An absent flag must not override a dry run set in --config
        "no_copy": no_copy or None,
        "workers": workers,
        "log_level": log_level,
        "log_file": log_file,
    }

    try:
        run_config = build_run_config(config_file=config, overrides=overrides)
    except SaveMeFilesError as e:
        raise click.ClickException(str(e)) from e

    try:
        configure_logging(log_level=run_config.log_level, log_file=run_config.log_file)
    except OSError as e:
        msg = f"Failed to open log file {run_config.log_file}: {e}"
        raise click.ClickException(msg) from e

    try:
        summary = Orchestrator(run_config).run()
    except SaveMeFilesError as e:
        raise click.ClickException(str(e)) from e
    except KeyboardInterrupt:
        click.echo("\nInterrupted, stopping", err=True)
        raise SystemExit(EXIT_INTERRUPTED) from None

    _log_summary(summary)
