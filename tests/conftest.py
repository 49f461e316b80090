# tests/conftest.py
"""
Root conftest - shared fixtures.

Test Tiers:
===========
- tier1: Pure logic, no filesystem (<5s)
         Run: pytest -m tier1
- tier2: Filesystem, thread pools, CLI
         Run: pytest -m "tier1 or tier2"

Files are tagged in pytest_collection_modifyitems below; everything not
listed as tier1 is tier2.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Dict, Union

import pytest

from mcdelta.core.paths import McDeltaPaths

TIER1_PATTERNS = [
    "test_versions",
    "test_barrier",
    "test_impact",
    "test_models",
]


def pytest_collection_modifyitems(items):
    """Tag tests with tier markers based on their file."""
    for item in items:
        path = str(item.fspath)
        if any(pattern in path for pattern in TIER1_PATTERNS):
            item.add_marker(pytest.mark.tier1)
        else:
            item.add_marker(pytest.mark.tier2)


TreeSpec = Dict[str, Union[str, bytes]]


def write_tree(root: Path, files: TreeSpec) -> Path:
    """Create files under root from {relative_path: content}."""
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


def touch_later(path: Path, seconds: float = 10.0) -> None:
    """Push a file's mtime forward so mtime-based checks see a change."""
    stat = path.stat()
    delta = int(seconds * 1_000_000_000)
    os.utime(path, ns=(stat.st_atime_ns + delta, stat.st_mtime_ns + delta))


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[str, TreeSpec], Path]:
    """Factory fixture: make_tree("old", {"a.txt": "x"}) -> tmp_path/old."""

    def _make(name: str, files: TreeSpec) -> Path:
        return write_tree(tmp_path / name, files)

    return _make


@pytest.fixture
def workspace(tmp_path: Path):
    """Isolated mcdelta workspace, reset after the test."""
    ws = tmp_path / "workspace"
    McDeltaPaths.set_workspace(ws)
    McDeltaPaths.ensure_all()
    yield ws
    McDeltaPaths.reset()
