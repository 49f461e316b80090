# mcdelta/comparison/scanner.py
"""
Tree scanner for version comparison.

Walks a version tree and lists its regular files by relative POSIX path.
No hashing happens here; the fingerprint cache does that lazily for the
paths that need it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Union

from mcdelta.exceptions import ComparisonError, ValidationError
from mcdelta.logging.logger import get_logger
from mcdelta.logging.tags import COMPARE

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScannedTree:
    """All regular files under a root, keyed by relative POSIX path."""

    root: Path
    files: Dict[str, Path]

    @property
    def paths(self) -> set[str]:
        return set(self.files)

    def __len__(self) -> int:
        return len(self.files)


def validate_root(root: Union[str, Path], label: str = "root") -> Path:
    """
    Resolve a tree root and check it is an existing directory.

    Raises:
        ValidationError: If the root is missing or not a directory
    """
    path = Path(root)
    if not path.exists():
        raise ValidationError(f"{label} directory not found: {path}")
    if not path.is_dir():
        raise ValidationError(f"{label} is not a directory: {path}")
    return path.resolve()


def _raise_walk_error(error: OSError) -> None:
    raise error


def scan_tree(root: Union[str, Path]) -> ScannedTree:
    """
    Walk a directory recursively and collect its regular files.

    Raises:
        ValidationError: If root is not an existing directory
        ComparisonError: If the walk itself fails (unreadable directory, ...)
    """
    root_path = validate_root(root)
    files: Dict[str, Path] = {}

    try:
        for dirpath, _dirnames, filenames in os.walk(root_path, onerror=_raise_walk_error):
            base = Path(dirpath)
            for name in filenames:
                path = base / name
                if not path.is_file():
                    continue
                rel = path.relative_to(root_path).as_posix()
                files[rel] = path
    except OSError as e:
        raise ComparisonError(f"Failed to walk {root_path}: {e}") from e

    logger.debug(f"{COMPARE} Scanned {root_path}: {len(files)} files")
    return ScannedTree(root=root_path, files=files)


__all__ = ["ScannedTree", "scan_tree", "validate_root"]
