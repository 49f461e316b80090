# mcdelta/analysis/impact.py
"""
Impact correlation between a mod and game version changes.

A mod class is impacted when one of its imports resolves to a changed or
removed game class. Wildcard imports match every changed class of their
package. Removed targets weigh double and are recorded as missing
dependencies in the run's context.
"""

from __future__ import annotations

from typing import List, Set

from mcdelta.analysis.models import (
    AnalysisContext,
    ImpactedComponent,
    ModAnalysis,
    VersionChanges,
)
from mcdelta.logging.logger import get_logger
from mcdelta.logging.tags import PIPELINE

logger = get_logger(__name__)

REMOVED_WEIGHT = 2.0
CHANGED_WEIGHT = 1.0


def _resolve(import_name: str, classes: Set[str]) -> Set[str]:
    """Game classes an import refers to."""
    if import_name.endswith(".*"):
        package = import_name[:-2]
        return {c for c in classes if c.rsplit(".", 1)[0] == package}
    # Static member or nested class imports: try the import itself, then its owner
    if import_name in classes:
        return {import_name}
    owner = import_name.rsplit(".", 1)[0]
    return {owner} if owner in classes else set()


def analyze_impacts(
    mod: ModAnalysis, changes: VersionChanges, context: AnalysisContext
) -> List[ImpactedComponent]:
    """
    Score every mod class against the version changes.

    Returns impacted components sorted by score (highest first), then name.
    Removed game classes the mod imports are added to
    context.missing_dependencies.
    """
    impacts: List[ImpactedComponent] = []

    for qualified, info in mod.structure.classes.items():
        changed_hits: Set[str] = set()
        removed_hits: Set[str] = set()

        for import_name in info.imports:
            changed_hits |= _resolve(import_name, changes.changed_classes)
            removed = _resolve(import_name, changes.removed_classes)
            if removed:
                removed_hits |= removed
                context.missing_dependencies |= removed

        if not changed_hits and not removed_hits:
            continue

        weight = CHANGED_WEIGHT * len(changed_hits) + REMOVED_WEIGHT * len(removed_hits)
        score = min(1.0, weight / max(1, len(info.imports)))

        impacts.append(
            ImpactedComponent(
                name=qualified,
                type=info.kind,
                impact_score=round(score, 3),
                affected_dependencies=frozenset(changed_hits | removed_hits),
            )
        )

    impacts.sort(key=lambda c: (-c.impact_score, c.name))
    logger.debug(
        f"{PIPELINE} {len(impacts)} impacted components, "
        f"{len(context.missing_dependencies)} missing dependencies"
    )
    return impacts


__all__ = ["analyze_impacts", "REMOVED_WEIGHT", "CHANGED_WEIGHT"]
