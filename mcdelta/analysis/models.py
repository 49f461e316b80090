# mcdelta/analysis/models.py
"""
Runtime models for mod impact analysis.

These never hit the disk as-is; the analysis report is plain text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Set


@dataclass(frozen=True)
class MethodSignature:
    name: str
    return_type: str
    parameters: tuple = ()
    visibility: str = "package"

    def __str__(self) -> str:
        return f"{self.visibility} {self.return_type} {self.name}({', '.join(self.parameters)})"


@dataclass
class ClassInfo:
    """One type declaration found in Java source."""

    name: str
    package: str = ""
    kind: str = "class"  # class / interface / enum / record
    superclass: Optional[str] = None
    interfaces: List[str] = field(default_factory=list)
    methods: List[MethodSignature] = field(default_factory=list)
    imports: Set[str] = field(default_factory=set)
    source: Optional[Path] = None

    @property
    def qualified_name(self) -> str:
        return f"{self.package}.{self.name}" if self.package else self.name


@dataclass
class CodeStructure:
    """All classes of a code base, keyed by qualified name."""

    classes: Dict[str, ClassInfo] = field(default_factory=dict)
    files_analyzed: int = 0
    files_failed: int = 0

    @property
    def packages(self) -> Set[str]:
        return {c.package for c in self.classes.values() if c.package}

    @property
    def imports(self) -> Set[str]:
        out: Set[str] = set()
        for info in self.classes.values():
            out |= info.imports
        return out

    @property
    def method_count(self) -> int:
        return sum(len(c.methods) for c in self.classes.values())


@dataclass
class ModAnalysis:
    """Stage 1 output: structure of the mod plus its external dependencies."""

    source: Path
    structure: CodeStructure
    dependencies: Set[str] = field(default_factory=set)


@dataclass
class VersionChanges:
    """
    Stage 2 output: what changed between two game versions.

    Paths are the relative paths of the diff report; class sets hold the
    qualified names derived from .java / .class paths.
    """

    report_path: Path
    added: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    changed_classes: Set[str] = field(default_factory=set)
    removed_classes: Set[str] = field(default_factory=set)

    @property
    def total(self) -> int:
        return len(self.added) + len(self.modified) + len(self.removed)


@dataclass(frozen=True)
class ImpactedComponent:
    """A mod class touched by game changes."""

    name: str
    type: str
    impact_score: float
    affected_dependencies: FrozenSet[str] = frozenset()


@dataclass
class AnalysisContext:
    """
    Mutable scratch state of one analysis attempt.

    A new context is created for every attempt, so concurrent or retried
    runs never share these sets.
    """

    run_id: str
    attempt: int = 1
    missing_dependencies: Set[str] = field(default_factory=set)


@dataclass
class AnalysisResult:
    mod: ModAnalysis
    changes: VersionChanges
    impacts: List[ImpactedComponent]
    context: AnalysisContext
    report_path: Optional[Path] = None

    @property
    def missing_dependencies(self) -> Set[str]:
        return self.context.missing_dependencies


__all__ = [
    "MethodSignature",
    "ClassInfo",
    "CodeStructure",
    "ModAnalysis",
    "VersionChanges",
    "ImpactedComponent",
    "AnalysisContext",
    "AnalysisResult",
]
