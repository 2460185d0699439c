"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator, Mapping
from pathlib import Path

import pytest

type TreeFactory = Callable[[Path, Mapping[str, str]], list[Path]]
type ListFileFactory = Callable[[str, list[str]], Path]


@pytest.fixture(autouse=True)
def restore_root_logger() -> Generator[None, None, None]:
    """Undo handler and level changes made by ``configure_logging``."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    try:
        yield
    finally:
        for handler in root_logger.handlers:
            if handler not in handlers:
                handler.close()
        root_logger.handlers[:] = handlers
        root_logger.setLevel(level)


@pytest.fixture
def make_tree() -> TreeFactory:
    """Create files under a root from a mapping of relative path to content."""

    def _make_tree(root: Path, files: Mapping[str, str]) -> list[Path]:
        created: list[Path] = []
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            _ = path.write_text(content, encoding="utf-8")
            created.append(path)
        return created

    return _make_tree


@pytest.fixture
def source_root(tmp_path: Path, make_tree: TreeFactory) -> Path:
    """Source tree ``root/{a.txt, sub/b.log, sub/c.txt}``."""
    root = tmp_path / "root"
    root.mkdir()
    _ = make_tree(
        root,
        {
            "a.txt": "alpha",
            "sub/b.log": "bravo log",
            "sub/c.txt": "charlie",
        },
    )
    return root


@pytest.fixture
def destination_root(tmp_path: Path) -> Path:
    """Empty, existing destination directory."""
    destination = tmp_path / "dst"
    destination.mkdir()
    return destination


@pytest.fixture
def write_list_file(tmp_path: Path) -> ListFileFactory:
    """Write a list file with one entry per line."""

    def _write_list_file(name: str, lines: list[str]) -> Path:
        path = tmp_path / name
        _ = path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write_list_file
