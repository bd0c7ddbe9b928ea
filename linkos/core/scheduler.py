"""
linkos.core.scheduler - Cooperative timers for window transitions.

Window animations finish after a fixed delay (the animation duration).
Instead of fire-and-forget timers, every delayed step is queued here and
returns a TimerHandle that can be cancelled, so a window destroyed in the
middle of a transition never has a callback run against it afterwards.

Nothing runs on its own: the host calls ``run_pending()`` from its event
loop (or ``advance()`` with a ManualClock in tests and scripted sessions).
All callbacks run on the caller's thread, in due-time order.

Typical usage:
    clock = ManualClock()
    scheduler = Scheduler(clock)
    handle = scheduler.call_later(300, window.destroy, "close")
    scheduler.advance(300)        # runs the close
"""

from __future__ import annotations

import heapq
import itertools
import logging
import time
from collections.abc import Callable
from typing import Optional

log = logging.getLogger(__name__)


TimerCallback = Callable[[], None]
Clock = Callable[[], float]


def monotonic_ms() -> float:
    """Default clock: monotonic time in milliseconds."""
    return time.monotonic() * 1000.0


class ManualClock:
    """A clock that only moves when told to (milliseconds)."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start

    def __call__(self) -> float:
        return self._now

    def set(self, now: float) -> None:
        if now < self._now:
            raise ValueError(f"ManualClock cannot go backwards ({now} < {self._now})")
        self._now = now

    def advance(self, ms: float) -> None:
        self.set(self._now + ms)


# ============================================================================
# TimerHandle
# ============================================================================
class TimerHandle:
    """A scheduled callback.  Cancel it to make sure it never runs."""

    __slots__ = ("_due", "_callback", "_description", "_cancelled", "_done")

    def __init__(self, due: float, callback: TimerCallback, description: str) -> None:
        self._due = due
        self._callback: Optional[TimerCallback] = callback
        self._description = description
        self._cancelled = False
        self._done = False

    @property
    def due(self) -> float:
        return self._due

    @property
    def description(self) -> str:
        return self._description

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._done

    @property
    def pending(self) -> bool:
        return not (self._cancelled or self._done)

    def cancel(self) -> bool:
        """
        Cancel the callback.

        Returns:
            True if it was still pending.
        """
        if not self.pending:
            return False
        self._cancelled = True
        # Drop the reference so the target can be collected.
        self._callback = None
        return True

    def _run(self) -> None:
        callback = self._callback
        self._done = True
        self._callback = None
        if callback is not None:
            callback()

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "done" if self._done else "pending"
        return f"TimerHandle({self._description!r}, due={self._due:g}, {state})"


# ============================================================================
# Scheduler
# ============================================================================
class Scheduler:
    """Queue of delayed callbacks driven by an injectable clock."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock: Clock = clock if clock is not None else monotonic_ms
        self._queue: list[tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._clock()

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def pending_count(self) -> int:
        """Number of callbacks still waiting to run."""
        return sum(1 for _, _, h in self._queue if h.pending)

    def call_later(
        self,
        delay_ms: float,
        callback: TimerCallback,
        description: str = "",
    ) -> TimerHandle:
        """Schedule *callback* to run *delay_ms* from now."""
        due = self._clock() + max(0.0, delay_ms)
        handle = TimerHandle(due, callback, description)
        heapq.heappush(self._queue, (due, next(self._seq), handle))
        log.debug("Scheduled %r in %gms", description, delay_ms)
        return handle

    def run_pending(self) -> int:
        """
        Run every callback whose due time has passed.

        Callbacks scheduled by a running callback run in the same pass if
        they are already due.  Exceptions are logged, not propagated.

        Returns:
            Number of callbacks executed.
        """
        ran = 0
        while self._queue and self._queue[0][0] <= self._clock():
            _, _, handle = heapq.heappop(self._queue)
            if not handle.pending:
                continue
            try:
                handle._run()
            except Exception:
                log.exception("Error in scheduled callback %r", handle.description)
            ran += 1
        return ran

    def advance(self, ms: float) -> int:
        """
        Move a ManualClock forward, running callbacks at their due times.

        Raises:
            TypeError: If the scheduler is not driven by a ManualClock.
        """
        clock = self._clock
        if not isinstance(clock, ManualClock):
            raise TypeError("advance() requires a ManualClock")

        target = clock() + ms
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due = self._queue[0][0]
            if due > clock():
                clock.set(due)
            ran += self.run_pending()
        clock.set(target)
        ran += self.run_pending()
        return ran

    def cancel_all(self) -> int:
        """Cancel everything still queued.  Returns how many were pending."""
        count = 0
        for _, _, handle in self._queue:
            if handle.cancel():
                count += 1
        self._queue.clear()
        return count
