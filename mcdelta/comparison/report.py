# mcdelta/comparison/report.py
"""
Change statistics and the human-readable diff report.

Report layout ({reports_dir}/diff_report_{old}_to_{new}.txt):

    Comparison Report: <old> -> <new>
    Generated at: <iso timestamp>
    Mode: full|incremental

    === Statistics ===          counts, lines, size
    === By Extension ===        ".java: 12"
    === Added Files ===         "+ path"
    === Modified Files ===      "* path"
    === Deleted Files ===       "- path"
    === Skipped Files ===       "! path: reason"   (only when errors occurred)

    === Added Files Content ===     one block per file
    === Modified Files Content ===  text: old + new content, then the diff
    === Deleted Files Content ===

The listing sections are what the analysis pipeline reads back.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from mcdelta.comparison.differ import (
    DEFAULT_TEXT_EXTENSIONS,
    LARGE_FILE_THRESHOLD,
    decode_binary_chunks,
)
from mcdelta.comparison.models import (
    BinaryModified,
    ComparisonResult,
    ContentModifiedAtOffset,
    DiffEntry,
    TextModified,
)
from mcdelta.logging.logger import get_logger
from mcdelta.logging.tags import REPORT

logger = get_logger(__name__)

SECTION_ADDED = "=== Added Files ==="
SECTION_MODIFIED = "=== Modified Files ==="
SECTION_DELETED = "=== Deleted Files ==="
SECTION_SKIPPED = "=== Skipped Files ==="
SECTION_ADDED_CONTENT = "=== Added Files Content ==="

_RULE = "-" * 40
_END = "=" * 40
_NO_EXTENSION = "(none)"


def report_filename(old_version: str, new_version: str) -> str:
    return f"diff_report_{old_version}_to_{new_version}.txt"


def _extension(rel: str) -> str:
    return Path(rel).suffix.lower() or _NO_EXTENSION


def _file_size(path: Path) -> int:
    try:
        return path.stat().st_size
    except OSError as e:
        logger.debug(f"{REPORT} Cannot stat {path}: {e}")
        return 0


# =============================================================================
# Statistics
# =============================================================================


@dataclass
class ChangeStatistics:
    """Aggregate numbers for one comparison."""

    added: int = 0
    modified: int = 0
    deleted: int = 0
    errors: int = 0
    lines_added: int = 0
    lines_removed: int = 0
    total_size_bytes: int = 0
    by_extension: Dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return self.added + self.modified + self.deleted

    @classmethod
    def from_result(
        cls,
        result: ComparisonResult,
        old_dir: Optional[Union[str, Path]] = None,
        new_dir: Optional[Union[str, Path]] = None,
    ) -> "ChangeStatistics":
        """
        Compute statistics for a comparison result.

        Sizes count added and modified files in the new tree, so they are
        only available when new_dir is given.
        """
        stats = cls(
            added=len(result.added),
            modified=len(result.diffs),
            deleted=len(result.removed),
            errors=len(result.errors),
        )

        extensions: Counter = Counter()
        for rel in (*result.added, *result.diffs, *result.removed):
            extensions[_extension(rel)] += 1
        stats.by_extension = dict(sorted(extensions.items()))

        for entry in result.diffs.values():
            if isinstance(entry, TextModified):
                stats.lines_added += entry.lines_added
                stats.lines_removed += entry.lines_removed

        if new_dir is not None:
            root = Path(new_dir)
            stats.total_size_bytes = sum(
                _file_size(root / rel) for rel in (*result.added, *result.diffs)
            )

        return stats

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["total"] = self.total
        return data


# =============================================================================
# Report writing
# =============================================================================


def _describe_entry(entry: DiffEntry) -> List[str]:
    if isinstance(entry, TextModified):
        return [
            f"Lines added: {entry.lines_added}, lines removed: {entry.lines_removed}",
            entry.diff_text.rstrip("\n"),
        ]
    if isinstance(entry, BinaryModified):
        records = decode_binary_chunks(entry.encoded_chunks)
        lines = [f"Binary file changed: {len(records)} differing chunk(s)"]
        lines.extend(
            f"  offset {r.offset}: {r.old_length} -> {r.new_length} bytes" for r in records
        )
        return lines
    if isinstance(entry, ContentModifiedAtOffset):
        return [f"Large file changed, first difference at byte {entry.offset}"]
    raise TypeError(f"Unknown diff entry: {entry!r}")


class _ReportBuilder:
    def __init__(self, text_extensions: Iterable[str], inline_limit: int) -> None:
        self.lines: List[str] = []
        self.text_extensions = frozenset(e.lower() for e in text_extensions)
        self.inline_limit = inline_limit

    def add(self, *lines: str) -> None:
        self.lines.extend(lines)

    def add_content(self, path: Path) -> None:
        """Full content for text files, a notice for anything else."""
        size = _file_size(path)
        if path.suffix.lower() not in self.text_extensions:
            self.add(f"Binary file ({size} bytes), content omitted")
            return
        self.add_text(path, "Content:", size)

    def add_text(self, path: Path, title: str, size: Optional[int] = None) -> None:
        if size is None:
            size = _file_size(path)
        if size >= self.inline_limit:
            self.add(f"{title} large file ({size} bytes), content omitted")
            return
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            self.add(f"{title} content unavailable: {e}")
            return
        self.add(title, text.rstrip("\n"))

    def render(self) -> str:
        return "\n".join(self.lines) + "\n"


def write_diff_report(
    result: ComparisonResult,
    old_version: str,
    new_version: str,
    old_dir: Union[str, Path],
    new_dir: Union[str, Path],
    reports_dir: Union[str, Path],
    statistics: Optional[ChangeStatistics] = None,
    text_extensions: Iterable[str] = DEFAULT_TEXT_EXTENSIONS,
    inline_limit: int = LARGE_FILE_THRESHOLD,
) -> Path:
    """
    Write the diff report for a comparison and return its path.

    Raises:
        OSError: If the report can't be written
    """
    old_root, new_root = Path(old_dir), Path(new_dir)
    stats = statistics or ChangeStatistics.from_result(result, old_root, new_root)

    added = sorted(result.added)
    modified = sorted(result.diffs)
    removed = sorted(result.removed)

    b = _ReportBuilder(text_extensions, inline_limit)
    b.add(
        f"Comparison Report: {old_version} -> {new_version}",
        f"Generated at: {datetime.now(timezone.utc).isoformat()}",
        f"Mode: {result.mode}",
        "",
        "=== Statistics ===",
        f"Added files: {stats.added}",
        f"Modified files: {stats.modified}",
        f"Deleted files: {stats.deleted}",
        f"Total changes: {stats.total}",
        f"Lines added: {stats.lines_added}",
        f"Lines removed: {stats.lines_removed}",
        f"Total size (bytes): {stats.total_size_bytes}",
        f"Skipped files: {stats.errors}",
        "",
        "=== By Extension ===",
    )
    b.add(*(f"{ext}: {count}" for ext, count in stats.by_extension.items()))

    b.add("", SECTION_ADDED, *(f"+ {rel}" for rel in added))
    b.add("", SECTION_MODIFIED, *(f"* {rel}" for rel in modified))
    b.add("", SECTION_DELETED, *(f"- {rel}" for rel in removed))
    if result.errors:
        b.add("", SECTION_SKIPPED)
        b.add(*(f"! {rel}: {msg}" for rel, msg in sorted(result.errors.items())))

    b.add("", SECTION_ADDED_CONTENT)
    for rel in added:
        b.add("", f"File: {rel}", _RULE)
        b.add_content(new_root / rel)
        b.add(_END)

    b.add("", "=== Modified Files Content ===")
    for rel in modified:
        entry = result.diffs[rel]
        b.add("", f"File: {rel}", _RULE)
        if isinstance(entry, TextModified):
            b.add_text(old_root / rel, f"Old Version ({old_version}):")
            b.add("")
            b.add_text(new_root / rel, f"New Version ({new_version}):")
            b.add("", "Diff:")
        b.add(*_describe_entry(entry))
        b.add(_END)

    b.add("", "=== Deleted Files Content ===")
    for rel in removed:
        b.add("", f"File: {rel}", _RULE)
        b.add_content(old_root / rel)
        b.add(_END)

    out_dir = Path(reports_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / report_filename(old_version, new_version)
    path.write_text(b.render(), encoding="utf-8")

    logger.info(f"{REPORT} Wrote diff report {path}")
    return path


__all__ = [
    "ChangeStatistics",
    "write_diff_report",
    "report_filename",
    "SECTION_ADDED",
    "SECTION_MODIFIED",
    "SECTION_DELETED",
    "SECTION_SKIPPED",
    "SECTION_ADDED_CONTENT",
]
