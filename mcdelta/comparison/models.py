# mcdelta/comparison/models.py
"""
Result types for version comparison.

DiffEntry is a tagged union of three frozen dataclasses:
- TextModified: line-level diff of a text file
- BinaryModified: compressed chunk records of a small binary file
- ContentModifiedAtOffset: first differing byte of a large file
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Set, Union

ComparisonMode = Literal["full", "incremental"]


@dataclass(frozen=True)
class TextModified:
    """Unified diff with inline word-level highlighting."""

    diff_text: str
    lines_added: int = 0
    lines_removed: int = 0

    kind: str = field(default="text", init=False)


@dataclass(frozen=True)
class BinaryModified:
    """zlib-compressed stream of differing chunk records."""

    encoded_chunks: bytes

    kind: str = field(default="binary", init=False)


@dataclass(frozen=True)
class ContentModifiedAtOffset:
    """Large-file fast path: only the first mismatch is located."""

    offset: int

    kind: str = field(default="offset", init=False)


DiffEntry = Union[TextModified, BinaryModified, ContentModifiedAtOffset]


@dataclass(frozen=True)
class ChunkRecord:
    """One differing chunk pair of a binary diff payload."""

    offset: int
    old_bytes: bytes
    new_bytes: bytes

    @property
    def old_length(self) -> int:
        return len(self.old_bytes)

    @property
    def new_length(self) -> int:
        return len(self.new_bytes)


@dataclass
class ComparisonResult:
    """
    Outcome of comparing two version trees.

    Paths are relative POSIX paths. A path appears in at most one of
    added / removed / diffs. Files that failed to read are reported in
    errors (path -> message) and otherwise skipped.
    """

    added: Set[str] = field(default_factory=set)
    removed: Set[str] = field(default_factory=set)
    diffs: Dict[str, DiffEntry] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)
    mode: ComparisonMode = "full"

    @property
    def modified(self) -> Set[str]:
        return set(self.diffs)

    @property
    def total_changes(self) -> int:
        return len(self.added) + len(self.removed) + len(self.diffs)

    @property
    def is_empty(self) -> bool:
        return self.total_changes == 0

    @property
    def summary(self) -> str:
        return (
            f"added={len(self.added)}, removed={len(self.removed)}, "
            f"modified={len(self.diffs)}, errors={len(self.errors)}"
        )


__all__ = [
    "ComparisonMode",
    "TextModified",
    "BinaryModified",
    "ContentModifiedAtOffset",
    "DiffEntry",
    "ChunkRecord",
    "ComparisonResult",
]
