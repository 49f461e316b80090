# mcdelta/analysis/pipeline.py
"""
Retrying mod impact analysis pipeline.

Stages (one attempt):
    1. mod_structure   - Java structure of the mod sources
    2. version_changes - change listing of the version diff report
    3. impact          - correlate mod imports with changed classes
    4. report          - write analysis_report_{mod}_vs_{version}.txt

Any stage failure becomes a PipelineError. The whole attempt is retried up
to max_attempts with a fixed backoff; partial results of a failed attempt
are dropped.
"""

from __future__ import annotations

import re
import time
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional, TypeVar, Union

from mcdelta.analysis.changes import parse_diff_report
from mcdelta.analysis.impact import analyze_impacts
from mcdelta.analysis.models import AnalysisContext, AnalysisResult, ModAnalysis
from mcdelta.analysis.structure import analyze_code
from mcdelta.config.schema import AnalysisConfig
from mcdelta.coordination.barrier import AnalysisReadyEvent
from mcdelta.exceptions import PipelineError
from mcdelta.logging.logger import get_logger
from mcdelta.logging.tags import PIPELINE

logger = get_logger(__name__)

T = TypeVar("T")
PathLike = Union[str, Path]

_UNSAFE_LABEL = re.compile(r"[^\w.+-]")


def _label(value: str) -> str:
    return _UNSAFE_LABEL.sub("_", value) or "unknown"


class RetryingAnalysisPipeline:
    """
    Runs mod impact analysis with bounded retries.

    Usage:
        pipeline = RetryingAnalysisPipeline(reports_dir=McDeltaPaths.reports())
        result = pipeline.run(mod_sources, diff_report)

        # Or as the barrier consumer:
        barrier = CompletionBarrier(consumer=pipeline.on_analysis_ready)
    """

    def __init__(
        self,
        reports_dir: PathLike,
        max_attempts: int = 3,
        backoff_seconds: float = 1.0,
        workers: int = 1,
        executor: Optional[ThreadPoolExecutor] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.reports_dir = Path(reports_dir)
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self.workers = workers
        self._executor = executor
        self._owns_executor = executor is None
        self._sleep = sleep

    @classmethod
    def from_config(
        cls, config: AnalysisConfig, reports_dir: PathLike, **kwargs
    ) -> "RetryingAnalysisPipeline":
        return cls(
            reports_dir=reports_dir,
            max_attempts=config.max_attempts,
            backoff_seconds=config.backoff_seconds,
            workers=config.workers,
            **kwargs,
        )

    # =========================================================================
    # Public API
    # =========================================================================

    def run(
        self,
        mod_report_path: PathLike,
        version_report_path: PathLike,
        mod_label: Optional[str] = None,
        version_label: Optional[str] = None,
    ) -> AnalysisResult:
        """
        Run the analysis synchronously, retrying failed attempts.

        Raises:
            PipelineError: When every attempt failed
        """
        mod_path, version_path = Path(mod_report_path), Path(version_report_path)
        run_id = uuid.uuid4().hex[:12]
        last_error: Optional[PipelineError] = None

        for attempt in range(1, self.max_attempts + 1):
            context = AnalysisContext(run_id=run_id, attempt=attempt)
            try:
                result = self._attempt(mod_path, version_path, context, mod_label, version_label)
            except PipelineError as e:
                last_error = e
                logger.warning(
                    f"{PIPELINE} Run {run_id} attempt {attempt}/{self.max_attempts} failed: {e}"
                )
                if attempt < self.max_attempts and self.backoff_seconds > 0:
                    self._sleep(self.backoff_seconds)
                continue

            logger.info(
                f"{PIPELINE} Run {run_id} succeeded on attempt {attempt}: "
                f"{len(result.impacts)} impacted components"
            )
            return result

        raise PipelineError(
            f"Analysis failed after {self.max_attempts} attempts: {last_error}",
            stage="retry",
        ) from last_error

    def submit(
        self,
        mod_report_path: PathLike,
        version_report_path: PathLike,
        mod_label: Optional[str] = None,
        version_label: Optional[str] = None,
    ) -> "Future[AnalysisResult]":
        """Run the analysis in the worker pool."""
        return self._get_executor().submit(
            self.run, mod_report_path, version_report_path, mod_label, version_label
        )

    def on_analysis_ready(self, event: AnalysisReadyEvent) -> "Future[AnalysisResult]":
        """Barrier consumer: start an analysis for the event's report pair."""
        logger.info(
            f"{PIPELINE} Starting mod change analysis: "
            f"{event.source.version} vs {event.target.version}"
        )
        future = self.submit(
            event.source.report_path,
            event.target.report_path,
            mod_label=event.source.version,
            version_label=event.target.version,
        )
        future.add_done_callback(self._log_outcome)
        return future

    def shutdown(self, wait: bool = True) -> None:
        """Shut down the worker pool if this pipeline created it."""
        if self._executor is not None and self._owns_executor:
            self._executor.shutdown(wait=wait)
            self._executor = None

    # =========================================================================
    # Internals
    # =========================================================================

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.workers,
                thread_name_prefix="mcdelta_analysis",
            )
            self._owns_executor = True
        return self._executor

    @staticmethod
    def _log_outcome(future: Future) -> None:
        error = future.exception()
        if error is not None:
            logger.error(f"{PIPELINE} Analysis failed: {error}")
        else:
            logger.info(f"{PIPELINE} Analysis completed: {future.result().report_path}")

    @staticmethod
    def _stage(name: str, fn: Callable[..., T], *args) -> T:
        try:
            return fn(*args)
        except PipelineError:
            raise
        except Exception as e:
            raise PipelineError(f"{type(e).__name__}: {e}", stage=name) from e

    def _attempt(
        self,
        mod_path: Path,
        version_path: Path,
        context: AnalysisContext,
        mod_label: Optional[str],
        version_label: Optional[str],
    ) -> AnalysisResult:
        structure = self._stage("mod_structure", analyze_code, mod_path)
        mod = ModAnalysis(source=mod_path, structure=structure)
        mod.dependencies = {
            imp for imp in structure.imports
            if not any(imp.startswith(f"{pkg}.") for pkg in structure.packages)
        }

        changes = self._stage("version_changes", parse_diff_report, version_path)
        impacts = self._stage("impact", analyze_impacts, mod, changes, context)

        result = AnalysisResult(mod=mod, changes=changes, impacts=impacts, context=context)
        result.report_path = self._stage(
            "report",
            self._write_report,
            result,
            _label(mod_label or mod_path.stem),
            _label(version_label or version_path.stem),
        )
        return result

    def _write_report(self, result: AnalysisResult, mod_label: str, version_label: str) -> Path:
        structure = result.mod.structure
        changes = result.changes

        lines = [
            f"Mod Impact Analysis: {mod_label} vs {version_label}",
            f"Generated at: {datetime.now(timezone.utc).isoformat()}",
            f"Run: {result.context.run_id} (attempt {result.context.attempt})",
            "",
            "=== Mod Structure ===",
            f"Source: {result.mod.source}",
            f"Files analyzed: {structure.files_analyzed}",
            f"Files failed: {structure.files_failed}",
            f"Classes: {len(structure.classes)}",
            f"Methods: {structure.method_count}",
            f"External dependencies: {len(result.mod.dependencies)}",
            "",
            "=== Version Changes ===",
            f"Report: {changes.report_path}",
            f"Added files: {len(changes.added)}",
            f"Modified files: {len(changes.modified)}",
            f"Deleted files: {len(changes.removed)}",
            f"Changed classes: {len(changes.changed_classes)}",
            f"Removed classes: {len(changes.removed_classes)}",
            "",
            "=== Impacted Components ===",
        ]
        if not result.impacts:
            lines.append("None")
        for component in result.impacts:
            lines.append(f"{component.name} [{component.type}] score={component.impact_score:.3f}")
            lines.extend(f"  -> {dep}" for dep in sorted(component.affected_dependencies))

        lines += ["", "=== Missing Dependencies ==="]
        lines.extend(sorted(result.missing_dependencies) or ["None"])

        self.reports_dir.mkdir(parents=True, exist_ok=True)
        path = self.reports_dir / f"analysis_report_{mod_label}_vs_{version_label}.txt"
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        logger.debug(f"{PIPELINE} Wrote analysis report {path}")
        return path


__all__ = ["RetryingAnalysisPipeline"]
