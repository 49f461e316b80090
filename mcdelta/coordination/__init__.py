# mcdelta/coordination/__init__.py
"""Producer coordination."""

from mcdelta.coordination.barrier import (
    AnalysisReadyEvent,
    BarrierState,
    CompletionBarrier,
    ReadySignal,
)

__all__ = ["AnalysisReadyEvent", "BarrierState", "CompletionBarrier", "ReadySignal"]
