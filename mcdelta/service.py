# mcdelta/service.py
"""
Version comparison service.

Ties the pieces together for one (old, new) pair:

    validate ids -> load state -> full/incremental compare -> save state
    -> write diff report -> record history -> mark target ready

A failed comparison is recorded as FAILED in the history and re-raised;
no report is written for it.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Type

from mcdelta.comparison.computer import ChangeSetComputer
from mcdelta.comparison.hashing import FileFingerprintCache
from mcdelta.comparison.models import ComparisonResult
from mcdelta.comparison.report import ChangeStatistics, write_diff_report
from mcdelta.config.schema import McDeltaConfig
from mcdelta.coordination.barrier import CompletionBarrier, ReadySignal
from mcdelta.core.paths import McDeltaPaths
from mcdelta.core.versions import validate_version
from mcdelta.exceptions import McDeltaError
from mcdelta.history.models import ChangeRecord
from mcdelta.history.store import ChangeHistoryStore
from mcdelta.logging.logger import get_logger
from mcdelta.logging.tags import COMPARE
from mcdelta.state.store import ComparisonStateStore

logger = get_logger(__name__)


@dataclass
class ComparisonOutcome:
    """Everything produced by one compare_versions call."""

    old_version: str
    new_version: str
    result: ComparisonResult
    statistics: ChangeStatistics
    report_path: Path
    state_path: Path
    record: ChangeRecord

    @property
    def mode(self) -> str:
        return self.result.mode


class VersionComparisonService:
    """
    Compares extracted version trees under {workspace}/versions.

    Usage:
        service = VersionComparisonService(load_config())
        outcome = service.compare_versions("1.20.1", "1.20.2")
        future = service.submit_comparison("1.20.2", "1.21")
        service.shutdown()
    """

    def __init__(
        self,
        config: Optional[McDeltaConfig] = None,
        paths: Type[McDeltaPaths] = McDeltaPaths,
        barrier: Optional[CompletionBarrier] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> None:
        self.config = config or McDeltaConfig()
        self.paths = paths
        self.barrier = barrier

        comparison = self.config.comparison
        self.cache = FileFingerprintCache()
        self.computer = ChangeSetComputer.from_config(comparison, cache=self.cache)
        self.state_store = ComparisonStateStore(
            paths.state_dir(), max_age_hours=comparison.state_max_age_hours
        )
        self.history = ChangeHistoryStore(paths.changes(), paths.changes_backup())

        self._executor = executor
        self._owns_executor = executor is None

    # =========================================================================
    # Public API
    # =========================================================================

    def compare_versions(
        self, old_version: str, new_version: str, force_full: bool = False
    ) -> ComparisonOutcome:
        """
        Compare two extracted versions and persist everything.

        Args:
            old_version: Version id of the old tree (versions/<id>)
            new_version: Version id of the new tree
            force_full: Ignore any persisted state

        Raises:
            ValidationError: Bad version ids or missing version directories
            ComparisonError: Traversal failed
        """
        old_version = validate_version(old_version)
        new_version = validate_version(new_version)
        old_dir = self.paths.version_dir(old_version)
        new_dir = self.paths.version_dir(new_version)

        record = ChangeRecord(source_version=old_version, target_version=new_version)
        logger.info(f"{COMPARE} Comparing {old_version} -> {new_version}")

        try:
            state = None if force_full else self.state_store.load(old_version, new_version)
            result = self.computer.compare(old_dir, new_dir, state=state)

            fresh_state = self.computer.build_state(
                old_version, new_version, new_dir, result, previous=state
            )
            state_path = self.state_store.save(old_version, new_version, fresh_state)

            stats = ChangeStatistics.from_result(result, old_dir, new_dir)
            report_path = write_diff_report(
                result,
                old_version,
                new_version,
                old_dir,
                new_dir,
                self.paths.reports(),
                statistics=stats,
                text_extensions=self.config.comparison.text_extensions,
                inline_limit=self.config.comparison.large_file_threshold,
            )
        except (McDeltaError, OSError) as e:
            record.mark_failed(str(e))
            self.history.save(record)
            logger.error(f"{COMPARE} Comparison {old_version} -> {new_version} failed: {e}")
            raise

        record.mode = result.mode
        record.added_files = sorted(result.added)
        record.modified_files = sorted(result.diffs)
        record.deleted_files = sorted(result.removed)
        record.statistics = stats.to_dict()
        record.diff_report_path = str(report_path)
        record.mark_complete()
        self.history.save(record)

        if self.barrier is not None:
            self.barrier.mark_target_ready(ReadySignal(new_version, report_path))

        return ComparisonOutcome(
            old_version=old_version,
            new_version=new_version,
            result=result,
            statistics=stats,
            report_path=report_path,
            state_path=state_path,
            record=record,
        )

    def submit_comparison(
        self, old_version: str, new_version: str, force_full: bool = False
    ) -> "Future[ComparisonOutcome]":
        """Run compare_versions in the worker pool."""
        return self._get_executor().submit(
            self.compare_versions, old_version, new_version, force_full
        )

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None and self._owns_executor:
            self._executor.shutdown(wait=wait)
            self._executor = None

    # =========================================================================
    # Internals
    # =========================================================================

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.config.comparison.workers,
                thread_name_prefix="mcdelta_compare",
            )
            self._owns_executor = True
        return self._executor


__all__ = ["VersionComparisonService", "ComparisonOutcome"]
