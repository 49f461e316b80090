# mcdelta/analysis/__init__.py
"""
Mod impact analysis.

Key exports:
- RetryingAnalysisPipeline: bounded-retry analysis, barrier consumer
- analyze_code / parse_diff_report / analyze_impacts: the stages
"""

from mcdelta.analysis.changes import class_name_for, parse_diff_report
from mcdelta.analysis.impact import analyze_impacts
from mcdelta.analysis.models import (
    AnalysisContext,
    AnalysisResult,
    ClassInfo,
    CodeStructure,
    ImpactedComponent,
    MethodSignature,
    ModAnalysis,
    VersionChanges,
)
from mcdelta.analysis.pipeline import RetryingAnalysisPipeline
from mcdelta.analysis.structure import analyze_code, analyze_java_source

__all__ = [
    "RetryingAnalysisPipeline",
    "analyze_code",
    "analyze_java_source",
    "parse_diff_report",
    "class_name_for",
    "analyze_impacts",
    "AnalysisContext",
    "AnalysisResult",
    "ClassInfo",
    "CodeStructure",
    "ImpactedComponent",
    "MethodSignature",
    "ModAnalysis",
    "VersionChanges",
]
