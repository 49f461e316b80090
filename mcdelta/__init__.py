# mcdelta/__init__.py
"""
mcdelta - version change detection and mod impact analysis.

Public API:
    from mcdelta import VersionComparisonService, load_config

    service = VersionComparisonService(load_config())
    outcome = service.compare_versions("1.20.1", "1.20.2")
    print(outcome.statistics.total, outcome.report_path)

Building blocks:
    ChangeSetComputer, ContentDiffer, FileFingerprintCache  (comparison)
    ComparisonStateStore                                     (state)
    CompletionBarrier, ReadySignal                           (coordination)
    RetryingAnalysisPipeline                                 (analysis)
    ChangeHistoryStore                                       (history)
"""

from mcdelta.analysis.pipeline import RetryingAnalysisPipeline
from mcdelta.comparison.computer import ChangeSetComputer
from mcdelta.comparison.differ import ContentDiffer
from mcdelta.comparison.hashing import FileFingerprintCache
from mcdelta.comparison.models import ComparisonResult
from mcdelta.config.loader import load_config
from mcdelta.config.schema import McDeltaConfig
from mcdelta.coordination.barrier import AnalysisReadyEvent, CompletionBarrier, ReadySignal
from mcdelta.core.paths import McDeltaPaths
from mcdelta.exceptions import McDeltaError
from mcdelta.history.store import ChangeHistoryStore
from mcdelta.service import ComparisonOutcome, VersionComparisonService
from mcdelta.state.store import ComparisonStateStore

__version__ = "0.1.0"

__all__ = [
    "VersionComparisonService",
    "ComparisonOutcome",
    "ChangeSetComputer",
    "ContentDiffer",
    "FileFingerprintCache",
    "ComparisonResult",
    "ComparisonStateStore",
    "CompletionBarrier",
    "ReadySignal",
    "AnalysisReadyEvent",
    "RetryingAnalysisPipeline",
    "ChangeHistoryStore",
    "McDeltaConfig",
    "McDeltaPaths",
    "McDeltaError",
    "load_config",
]
