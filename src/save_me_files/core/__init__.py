"""Core copy pipeline: list files, selection, sizing, copying, orchestration."""

from __future__ import annotations

from save_me_files.core.config import RunConfig, build_run_config
from save_me_files.core.copier import copy_all, copy_all_async
from save_me_files.core.exceptions import (
    ConfigurationError,
    EnvironmentVariableError,
    InsufficientSpaceError,
    ListFileError,
    SaveMeFilesError,
    SpaceCheckError,
)
from save_me_files.core.exclusions import is_excluded, load_exclusions
from save_me_files.core.orchestrator import Orchestrator, run
from save_me_files.core.selector import iter_selected_files, select_files
from save_me_files.core.sizing import check_available_space, total_size
from save_me_files.core.suffixes import load_suffixes

__all__ = [
    # Configuration
    "RunConfig",
    "build_run_config",
    # Pipeline stages
    "load_suffixes",
    "load_exclusions",
    "is_excluded",
    "iter_selected_files",
    "select_files",
    "total_size",
    "check_available_space",
    "copy_all",
    "copy_all_async",
    # Orchestration
    "Orchestrator",
    "run",
    # Errors
    "SaveMeFilesError",
    "ConfigurationError",
    "EnvironmentVariableError",
    "ListFileError",
    "SpaceCheckError",
    "InsufficientSpaceError",
]
