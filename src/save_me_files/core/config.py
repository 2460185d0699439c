"""Run configuration for save-me-files.

This module implements the run configuration schema using Pydantic for
validation. Values come from, lowest precedence first: model defaults, an
optional YAML file (with ``${VAR}`` environment references resolved),
``SAVE_ME_FILES_*`` environment variables, and explicit command-line values.
Validation is fail-fast with actionable, field-by-field error messages.
"""

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Final

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from save_me_files.core.copier import DEFAULT_WORKERS
from save_me_files.core.exceptions import ConfigurationError, EnvironmentVariableError
from save_me_files.core.line_file import DEFAULT_COMMENT_PREFIX

# Matches ${VARIABLE_NAME} references in YAML string values
ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([A-Z0-9_]+)\}")

ENV_PREFIX: Final[str] = "SAVE_ME_FILES_"

# Settings that may be supplied through SAVE_ME_FILES_<NAME> variables
ENV_FIELDS: Final[tuple[str, ...]] = ("log_level", "log_file", "workers", "comment_prefix")


class RunConfig(BaseModel):
    """Validated settings for a single copy run.

    Directory and list-file fields are checked against the filesystem and
    stored as absolute, resolved paths.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    src_directory: Annotated[
        Path,
        Field(description="Directory to copy files from"),
    ]
    dst_directory: Annotated[
        Path,
        Field(description="Directory to copy files into"),
    ]
    include_suffixes_file: Annotated[
        Path | None,
        Field(description="File listing accepted filename suffixes; all files when omitted"),
    ] = None
    exclude_paths_file: Annotated[
        Path | None,
        Field(description="File listing absolute directories to skip"),
    ] = None
    no_copy: Annotated[
        bool,
        Field(description="Dry run: select and size files without copying"),
    ] = False
    workers: Annotated[
        int,
        Field(gt=0, description="Maximum number of concurrent copies"),
    ] = DEFAULT_WORKERS
    log_level: Annotated[
        str,
        Field(
            description="Logging level",
            pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        ),
    ] = "INFO"
    log_file: Annotated[
        Path | None,
        Field(description="Optional file receiving a copy of the log"),
    ] = None
    comment_prefix: Annotated[
        str,
        Field(min_length=1, description="Marker that starts a comment line in list files"),
    ] = DEFAULT_COMMENT_PREFIX

    @field_validator("src_directory", "dst_directory", mode="after")
    @classmethod
    def validate_directory_exists(cls, v: Path, info: ValidationInfo) -> Path:
        """Validate that a directory option points to an existing directory.

        Raises:
            ValueError: If the path is missing or not a directory
        """
        if not v.is_dir():
            msg = f"{info.field_name} '{v}' is not a directory"
            raise ValueError(msg)
        return v.resolve()

    @field_validator("include_suffixes_file", "exclude_paths_file", mode="after")
    @classmethod
    def validate_list_file_exists(cls, v: Path | None, info: ValidationInfo) -> Path | None:
        """Validate that a list file option points to an existing regular file.

        Raises:
            ValueError: If the path is missing or not a file
        """
        if v is None:
            return v
        if not v.is_file():
            msg = f"{info.field_name} '{v}' is not a file"
            raise ValueError(msg)
        return v.resolve()

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.strip().upper()
        return v


def resolve_env_var(value: str) -> str:
    """Resolve ``${VARIABLE_NAME}`` references in a string value.

    Raises:
        EnvironmentVariableError: If a referenced variable is not set

    Examples:
        >>> os.environ["BACKUP_ROOT"] = "/mnt/backup"
        >>> resolve_env_var("${BACKUP_ROOT}/photos")
        '/mnt/backup/photos'
    """

    def replace_match(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)

        if env_value is None:
            msg = f"Required environment variable '{var_name}' is not set."
            raise EnvironmentVariableError(msg, env_var=var_name)

        return env_value

    return ENV_VAR_PATTERN.sub(replace_match, value)


def load_config_file(config_path: Path) -> dict[str, object]:
    """Load run settings from a YAML file.

    The file must contain a mapping whose keys are ``RunConfig`` field
    names. String values have environment references resolved.

    Args:
        config_path: YAML file to read

    Returns:
        Raw settings, not yet validated

    Raises:
        ConfigurationError: If the file is missing, unreadable, not YAML,
            not a mapping, or references an unset environment variable
    """
    if not config_path.is_file():
        msg = f"Configuration file not found: {config_path}"
        raise ConfigurationError(msg, {"file_path": str(config_path)})

    try:
        with config_path.open("r", encoding="utf-8") as f:
            raw_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]  # YAML boundary
    except yaml.YAMLError as e:
        msg = (
            f"Failed to parse YAML configuration file: {config_path}\n"
            f"YAML parsing error: {e}\n"
            f"Please check the file for syntax errors."
        )
        raise ConfigurationError(msg, {"file_path": str(config_path)}) from e
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Failed to read configuration file: {config_path}\nError: {e}"
        raise ConfigurationError(msg, {"file_path": str(config_path)}) from e

    # An empty file is an empty configuration
    if raw_data is None:
        return {}

    if not isinstance(raw_data, dict):
        msg = (
            f"Invalid configuration file format: {config_path}\n"
            f"Expected YAML mapping at root level, got: {type(raw_data).__name__}"
        )
        raise ConfigurationError(msg, {"file_path": str(config_path)})

    resolved: dict[str, object] = {}
    try:
        for key, value in raw_data.items():  # pyright: ignore[reportUnknownVariableType]  # YAML boundary
            resolved[str(key)] = resolve_env_var(value) if isinstance(value, str) else value  # pyright: ignore[reportUnknownArgumentType]
    except EnvironmentVariableError as e:
        msg = f"Environment variable resolution failed in: {config_path}\n{e}"
        raise ConfigurationError(msg, {"file_path": str(config_path), **e.context}) from e

    return resolved


def load_env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, object]:
    """Collect ``SAVE_ME_FILES_*`` settings from the environment.

    Args:
        environ: Environment to read (defaults to ``os.environ``)

    Returns:
        Raw settings keyed by field name

    Examples:
        >>> load_env_overrides({"SAVE_ME_FILES_WORKERS": "8", "HOME": "/root"})
        {'workers': '8'}
    """
    source = os.environ if environ is None else environ
    overrides: dict[str, object] = {}
    for field_name in ENV_FIELDS:
        env_var = f"{ENV_PREFIX}{field_name.upper()}"
        if env_var in source:
            overrides[field_name] = source[env_var]
    return overrides


def _format_validation_error(error: ValidationError) -> str:
    error_lines = ["Configuration validation failed:", ""]
    for item in error.errors():
        field_path = " → ".join(str(loc) for loc in item["loc"]) or "(root)"
        error_lines.append(f"  Field: {field_path}")
        error_lines.append(f"  Error: {item['msg']}")
        error_lines.append("")
    error_lines.append("Please fix the above errors and try again.")
    return "\n".join(error_lines)


def build_run_config(
    *,
    config_file: Path | None = None,
    overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
) -> RunConfig:
    """Merge every configuration source and validate the result.

    Args:
        config_file: Optional YAML file with default settings
        overrides: Explicit values (typically from the command line); keys
            whose value is None are ignored
        environ: Environment to read (defaults to ``os.environ``)

    Returns:
        Validated RunConfig

    Raises:
        ConfigurationError: If any source is unreadable or the merged
            settings fail validation
    """
    data: dict[str, object] = {}
    if config_file is not None:
        data.update(load_config_file(config_file))
    data.update(load_env_overrides(environ))
    if overrides:
        data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return RunConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(_format_validation_error(e)) from e
