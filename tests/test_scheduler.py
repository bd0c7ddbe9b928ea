"""Tests for the cooperative Scheduler and the z-index counter."""

import pytest

from linkos.core.scheduler import ManualClock, Scheduler
from linkos.core.zorder import BASE_Z_INDEX, ZOrderCounter


class TestManualClock:
    """Tests for ManualClock."""

    def test_advance(self):
        """advance() moves time forward."""
        clock = ManualClock(10)
        clock.advance(5)
        assert clock() == 15

    def test_cannot_go_backwards(self):
        """Setting an earlier time raises ValueError."""
        clock = ManualClock(100)
        with pytest.raises(ValueError):
            clock.set(50)


class TestScheduler:
    """Tests for Scheduler."""

    def test_callback_runs_when_due(self, scheduler):
        """Callbacks run only once their delay has elapsed."""
        calls = []
        scheduler.call_later(300, lambda: calls.append("done"))

        assert scheduler.advance(299) == 0
        assert calls == []
        assert scheduler.advance(1) == 1
        assert calls == ["done"]

    def test_callbacks_run_in_due_order(self, scheduler):
        """Earlier due times run first; ties keep scheduling order."""
        calls = []
        scheduler.call_later(50, lambda: calls.append("b"))
        scheduler.call_later(10, lambda: calls.append("a"))
        scheduler.call_later(50, lambda: calls.append("c"))

        scheduler.advance(100)
        assert calls == ["a", "b", "c"]

    def test_clock_steps_to_each_due_time(self, scheduler, clock):
        """A callback observes the clock at its own due time."""
        seen = []
        scheduler.call_later(30, lambda: seen.append(clock()))
        scheduler.call_later(70, lambda: seen.append(clock()))

        scheduler.advance(100)
        assert seen == [30, 70]
        assert clock() == 100

    def test_cancelled_handle_never_runs(self, scheduler):
        """cancel() prevents the callback and reports if it was pending."""
        calls = []
        handle = scheduler.call_later(10, lambda: calls.append(1))

        assert handle.cancel()
        assert not handle.cancel()
        scheduler.advance(20)
        assert calls == []
        assert handle.cancelled and not handle.pending

    def test_chained_callbacks_in_same_advance(self, scheduler):
        """Callbacks scheduled by a callback run if due within the window."""
        calls = []

        def first():
            calls.append("first")
            scheduler.call_later(10, lambda: calls.append("second"))

        scheduler.call_later(10, first)
        scheduler.advance(25)
        assert calls == ["first", "second"]

    def test_errors_are_logged(self, scheduler, caplog):
        """An exception in a callback does not stop later callbacks."""
        calls = []

        def boom():
            raise RuntimeError("boom")

        scheduler.call_later(1, boom, "exploding")
        scheduler.call_later(2, lambda: calls.append(1))
        scheduler.advance(5)

        assert calls == [1]
        assert "exploding" in caplog.text

    def test_cancel_all(self, scheduler):
        """cancel_all() drops every pending callback."""
        scheduler.call_later(1, lambda: None)
        scheduler.call_later(2, lambda: None)

        assert scheduler.pending_count == 2
        assert scheduler.cancel_all() == 2
        assert scheduler.pending_count == 0

    def test_advance_requires_manual_clock(self):
        """advance() only works with a ManualClock."""
        with pytest.raises(TypeError):
            Scheduler(lambda: 0.0).advance(10)

    def test_run_pending_with_external_clock(self):
        """run_pending() works with any clock callable."""
        now = [0.0]
        scheduler = Scheduler(lambda: now[0])
        calls = []
        scheduler.call_later(100, lambda: calls.append(1))

        assert scheduler.run_pending() == 0
        now[0] = 150
        assert scheduler.run_pending() == 1


class TestZOrderCounter:
    """Tests for ZOrderCounter."""

    def test_first_value(self):
        """The first value handed out is BASE_Z_INDEX + 1."""
        counter = ZOrderCounter()
        assert counter() == BASE_Z_INDEX + 1

    def test_strictly_increasing(self):
        """Every call returns a larger value."""
        counter = ZOrderCounter()
        values = [counter.next() for _ in range(50)]
        assert values == sorted(set(values))
        assert counter.current == values[-1]
