# mcdelta/analysis/changes.py
"""
Reads the listing sections of a diff report back into VersionChanges.

Only the "=== Added/Modified/Deleted Files ===" sections are parsed; the
content blocks further down contain diff lines that look the same.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Set, Union

from mcdelta.analysis.models import VersionChanges
from mcdelta.comparison.report import (
    SECTION_ADDED,
    SECTION_ADDED_CONTENT,
    SECTION_DELETED,
    SECTION_MODIFIED,
)
from mcdelta.logging.logger import get_logger
from mcdelta.logging.tags import PIPELINE

logger = get_logger(__name__)

_CLASS_SUFFIXES = (".java", ".class")
_SECTIONS: Dict[str, str] = {
    SECTION_ADDED: "+ ",
    SECTION_MODIFIED: "* ",
    SECTION_DELETED: "- ",
}


def class_name_for(rel_path: str) -> Optional[str]:
    """
    Map a relative source/class path to a qualified class name.

    Inner classes collapse onto their outer class.

    Examples:
        >>> class_name_for("net/minecraft/world/Level.java")
        'net.minecraft.world.Level'
        >>> class_name_for("net/minecraft/world/Level$Inner.class")
        'net.minecraft.world.Level'
        >>> class_name_for("assets/lang/en_us.json") is None
        True
    """
    for suffix in _CLASS_SUFFIXES:
        if rel_path.endswith(suffix):
            stem = rel_path[: -len(suffix)]
            return stem.split("$", 1)[0].strip("/").replace("/", ".")
    return None


def parse_diff_report(path: Union[str, Path]) -> VersionChanges:
    """
    Parse a diff report written by write_diff_report.

    Raises:
        FileNotFoundError: If the report doesn't exist
        ValueError: If no listing section is present
    """
    report = Path(path)
    lines = report.read_text(encoding="utf-8", errors="replace").splitlines()

    listings: Dict[str, List[str]] = {header: [] for header in _SECTIONS}
    current: Optional[str] = None
    seen: Set[str] = set()

    for line in lines:
        stripped = line.strip()
        if stripped == SECTION_ADDED_CONTENT:
            break
        if stripped.startswith("===") and stripped.endswith("==="):
            if stripped in seen:
                # Listings appear once; a repeat is file content
                break
            current = stripped if stripped in _SECTIONS else None
            if current is not None:
                seen.add(current)
            continue
        if current is None:
            continue
        marker = _SECTIONS[current]
        if line.startswith(marker):
            listings[current].append(line[len(marker):].strip())

    if not seen:
        raise ValueError(f"No change listing found in {report}")

    changes = VersionChanges(
        report_path=report,
        added=listings[SECTION_ADDED],
        modified=listings[SECTION_MODIFIED],
        removed=listings[SECTION_DELETED],
    )

    for rel in (*changes.added, *changes.modified):
        name = class_name_for(rel)
        if name:
            changes.changed_classes.add(name)
    for rel in changes.removed:
        name = class_name_for(rel)
        if name:
            changes.removed_classes.add(name)

    # An inner class removed while the outer one stays is a change, not a removal
    changes.removed_classes -= changes.changed_classes

    logger.debug(
        f"{PIPELINE} Version changes from {report.name}: {changes.total} files, "
        f"{len(changes.changed_classes)} changed / {len(changes.removed_classes)} removed classes"
    )
    return changes


__all__ = ["class_name_for", "parse_diff_report"]
