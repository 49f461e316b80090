# tests/unit/test_barrier.py
"""
Tests for mcdelta.coordination.barrier.
"""

import threading
import time
from pathlib import Path

from mcdelta.coordination.barrier import (
    AnalysisReadyEvent,
    BarrierState,
    CompletionBarrier,
    ReadySignal,
)

SOURCE = ReadySignal("mymod-1.0", Path("mod/src"))
TARGET = ReadySignal("1.20.2", Path("reports/diff_report_1.20.1_to_1.20.2.txt"))


class TestCompletionBarrier:
    """Tests for CompletionBarrier."""

    def test_single_side_does_not_fire(self):
        events = []
        barrier = CompletionBarrier(consumer=events.append)

        assert barrier.mark_source_ready(SOURCE) is None
        assert barrier.state is BarrierState.SOURCE_READY
        assert events == []
        assert barrier.fired_count == 0

    def test_fires_once_when_both_ready(self):
        events = []
        barrier = CompletionBarrier(consumer=events.append)

        barrier.mark_source_ready(SOURCE)
        event = barrier.mark_target_ready(TARGET)

        assert event == AnalysisReadyEvent(source=SOURCE, target=TARGET)
        assert events == [event]
        assert barrier.fired_count == 1
        assert barrier.state is BarrierState.EMPTY

    def test_order_does_not_matter(self):
        barrier = CompletionBarrier()

        assert barrier.mark_target_ready(TARGET) is None
        assert barrier.state is BarrierState.TARGET_READY
        event = barrier.mark_source_ready(SOURCE)

        assert event.source == SOURCE
        assert event.target == TARGET

    def test_resets_after_firing(self):
        """After firing, a lone mark does not fire again."""
        events = []
        barrier = CompletionBarrier(consumer=events.append)
        barrier.mark_source_ready(SOURCE)
        barrier.mark_target_ready(TARGET)

        assert barrier.mark_source_ready(SOURCE) is None
        assert len(events) == 1

    def test_repeated_mark_overwrites(self):
        """Last write wins, nothing queues up."""
        events = []
        barrier = CompletionBarrier(consumer=events.append)
        newer = ReadySignal("mymod-1.1", Path("mod2/src"))

        barrier.mark_source_ready(SOURCE)
        barrier.mark_source_ready(newer)
        barrier.mark_target_ready(TARGET)

        assert [e.source for e in events] == [newer]
        assert barrier.fired_count == 1
        assert barrier.state is BarrierState.EMPTY

    def test_consumer_error_does_not_propagate(self):
        def boom(event):
            raise RuntimeError("consumer failed")

        barrier = CompletionBarrier(consumer=boom)
        barrier.mark_source_ready(SOURCE)

        event = barrier.mark_target_ready(TARGET)

        assert event is not None
        assert barrier.fired_count == 1

    def test_report_path_coerced_to_path(self):
        assert ReadySignal("1.0", "a/b.txt").report_path == Path("a/b.txt")

    def test_concurrent_pairs_fire_exactly_once_each(self):
        """N concurrent source/target pairs fire N times, never more."""
        events = []
        lock = threading.Lock()

        def consume(event):
            with lock:
                events.append(event)

        barrier = CompletionBarrier(consumer=consume)
        rounds = 200
        start = threading.Barrier(2)

        def producer(mark, signal):
            start.wait()
            for _ in range(rounds):
                mark(signal)

        threads = [
            threading.Thread(target=producer, args=(barrier.mark_source_ready, SOURCE)),
            threading.Thread(target=producer, args=(barrier.mark_target_ready, TARGET)),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert barrier.fired_count == len(events)
        assert 1 <= len(events) <= rounds
        assert all(e.source == SOURCE and e.target == TARGET for e in events)

    def test_events_reach_consumer_in_firing_order(self, monkeypatch):
        """A fire delayed after leaving the lock is still delivered before a later one."""
        from mcdelta.coordination import barrier as barrier_module

        seen = []
        barrier = CompletionBarrier(consumer=lambda e: seen.append(e.source.version))
        real_info = barrier_module.logger.info

        def slow_info(msg, *args, **kwargs):
            if "Both sides ready: s1" in msg:
                time.sleep(0.3)
            real_info(msg, *args, **kwargs)

        monkeypatch.setattr(barrier_module.logger, "info", slow_info)

        def first_pair():
            barrier.mark_source_ready(ReadySignal("s1", Path("s1")))
            barrier.mark_target_ready(ReadySignal("t1", Path("t1")))

        worker = threading.Thread(target=first_pair)
        worker.start()
        deadline = time.monotonic() + 5
        while barrier.fired_count < 1 and time.monotonic() < deadline:
            time.sleep(0.005)

        barrier.mark_source_ready(ReadySignal("s2", Path("s2")))
        barrier.mark_target_ready(ReadySignal("t2", Path("t2")))
        worker.join()

        assert barrier.fired_count == 2
        assert seen == ["s1", "s2"]

    def test_consumer_may_mark_again(self):
        """A consumer that re-arms the barrier gets the next event after returning."""
        seen = []
        after_rearm = []

        def consume(event):
            seen.append(event.source.version)
            if len(seen) == 1:
                barrier.mark_source_ready(ReadySignal("s2", Path("s2")))
                barrier.mark_target_ready(ReadySignal("t2", Path("t2")))
                after_rearm.extend(seen)

        barrier = CompletionBarrier(consumer=consume)
        barrier.mark_source_ready(ReadySignal("s1", Path("s1")))
        barrier.mark_target_ready(ReadySignal("t1", Path("t1")))

        assert seen == ["s1", "s2"]
        assert after_rearm == ["s1"]
