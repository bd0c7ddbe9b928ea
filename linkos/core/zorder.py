"""
linkos.core.zorder - Monotonic z-index counter.

One counter per WindowManager.  Windows never touch it directly; they
receive a bound ``next_z_index`` callable at construction, so every
z-index handed out goes through this single access point.
"""

from __future__ import annotations

# First value handed out is BASE_Z_INDEX + 1.
BASE_Z_INDEX = 1000


class ZOrderCounter:
    """Hands out strictly increasing z-index values."""

    __slots__ = ("_current",)

    def __init__(self, start: int = BASE_Z_INDEX) -> None:
        self._current = start

    @property
    def current(self) -> int:
        """The last value handed out (or the start value)."""
        return self._current

    def next(self) -> int:
        self._current += 1
        return self._current

    def __call__(self) -> int:
        return self.next()

    def __repr__(self) -> str:
        return f"ZOrderCounter(current={self._current})"
