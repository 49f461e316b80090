# mcdelta/coordination/barrier.py
"""
Two-party completion barrier.

A source producer (mod decompilation) and a target producer (version
comparison) each report readiness with a ReadySignal. When both slots are
filled the barrier fires one AnalysisReadyEvent and returns to empty.

State machine (guarded by one lock):

    EMPTY --source--> SOURCE_READY --target--> fire, EMPTY
    EMPTY --target--> TARGET_READY --source--> fire, EMPTY

A repeated mark from the same producer overwrites its pending payload;
pending marks are not queued. Fired events are.
"""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Deque, Optional

from mcdelta.logging.logger import get_logger
from mcdelta.logging.tags import BARRIER

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReadySignal:
    """Payload a producer attaches when it is done."""

    version: str
    report_path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "report_path", Path(self.report_path))


@dataclass(frozen=True)
class AnalysisReadyEvent:
    """Both producers are done; carries their payloads."""

    source: ReadySignal
    target: ReadySignal


class BarrierState(str, Enum):
    EMPTY = "empty"
    SOURCE_READY = "source_ready"
    TARGET_READY = "target_ready"


AnalysisConsumer = Callable[[AnalysisReadyEvent], object]


class CompletionBarrier:
    """
    Fires exactly once per "both producers ready" occurrence.

    Building the event and resetting both slots happen in one critical
    section, which also appends the event to a FIFO. The FIFO is drained
    outside the lock by whichever producer thread is not already draining,
    so the consumer sees events in firing order and a slow consumer never
    blocks producers.

    Usage:
        barrier = CompletionBarrier(consumer=pipeline.on_analysis_ready)
        barrier.mark_source_ready(ReadySignal("mymod-1.0", mod_report))
        barrier.mark_target_ready(ReadySignal("1.20.2", diff_report))  # fires
    """

    def __init__(self, consumer: Optional[AnalysisConsumer] = None) -> None:
        self._consumer = consumer
        self._lock = threading.Lock()
        self._source: Optional[ReadySignal] = None
        self._target: Optional[ReadySignal] = None
        self._fired_count = 0
        self._pending: Deque[AnalysisReadyEvent] = deque()
        self._dispatching = False

    def set_consumer(self, consumer: Optional[AnalysisConsumer]) -> None:
        """Register the single consumer (replaces any previous one)."""
        with self._lock:
            self._consumer = consumer

    @property
    def fired_count(self) -> int:
        with self._lock:
            return self._fired_count

    @property
    def state(self) -> BarrierState:
        with self._lock:
            if self._source is not None:
                return BarrierState.SOURCE_READY
            if self._target is not None:
                return BarrierState.TARGET_READY
            return BarrierState.EMPTY

    def mark_source_ready(self, signal: ReadySignal) -> Optional[AnalysisReadyEvent]:
        """Report the source producer done. Returns the event if this fired the barrier."""
        return self._mark(signal, is_source=True)

    def mark_target_ready(self, signal: ReadySignal) -> Optional[AnalysisReadyEvent]:
        """Report the target producer done. Returns the event if this fired the barrier."""
        return self._mark(signal, is_source=False)

    def _mark(self, signal: ReadySignal, is_source: bool) -> Optional[AnalysisReadyEvent]:
        side = "source" if is_source else "target"

        with self._lock:
            if is_source:
                if self._source is not None:
                    logger.debug(f"{BARRIER} Overwriting pending source {self._source.version}")
                self._source = signal
            else:
                if self._target is not None:
                    logger.debug(f"{BARRIER} Overwriting pending target {self._target.version}")
                self._target = signal

            if self._source is None or self._target is None:
                logger.info(f"{BARRIER} {side} ready ({signal.version}), waiting for the other side")
                return None

            event = AnalysisReadyEvent(source=self._source, target=self._target)
            self._source = None
            self._target = None
            self._fired_count += 1
            self._pending.append(event)

        logger.info(
            f"{BARRIER} Both sides ready: {event.source.version} vs {event.target.version}"
        )
        self._drain()
        return event

    def _drain(self) -> None:
        """Deliver pending events in order; a no-op if another thread is draining."""
        with self._lock:
            if self._dispatching:
                return
            self._dispatching = True

        try:
            while True:
                with self._lock:
                    if not self._pending:
                        self._dispatching = False
                        return
                    event = self._pending.popleft()
                    consumer = self._consumer

                if consumer is None:
                    continue
                try:
                    consumer(event)
                except Exception as e:
                    logger.error(f"{BARRIER} Analysis consumer failed: {e}", exc_info=True)
        except BaseException:
            with self._lock:
                self._dispatching = False
            raise


__all__ = [
    "ReadySignal",
    "AnalysisReadyEvent",
    "BarrierState",
    "CompletionBarrier",
]
