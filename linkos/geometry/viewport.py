"""
linkos.geometry.viewport - Display surface geometry.

The Viewport is the runtime display area the desktop draws into (the
browser's inner window on the web desktop).  Windows read its size to
clamp drags and to maximize; the WindowManager subscribes to its resize
notifications to pull windows back on-screen.

A dock (or anything else with a ``rect`` attribute) can be handed to
windows as the minimize target; see ``DockAnchor``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Optional, Protocol

from linkos.geometry.rect import Point, Rect, Size

log = logging.getLogger(__name__)


# Viewports narrower than this are treated as phones/tablets.
MOBILE_BREAKPOINT = 768

# Distance from the bottom edge used as minimize target without a dock.
_FALLBACK_DOCK_OFFSET = 100


# Called with (viewport, old_size) after every effective resize.
ResizeCallback = Callable[["Viewport", Size], None]


class DockAnchor(Protocol):
    """Anything exposing the dock's on-screen rectangle (or None if hidden)."""

    @property
    def rect(self) -> Optional[Rect]: ...


# ============================================================================
# Viewport
# ============================================================================
class Viewport:
    """
    Mutable display area with resize notification.

    Attributes:
        width / height: current size in pixels.
        touch:          host hint that the device is touch-driven
                        (mobile user agent with touch support).
    """

    def __init__(self, width: float, height: float, touch: bool = False) -> None:
        self._width = width
        self._height = height
        self._touch = touch
        self._listeners: list[ResizeCallback] = []

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @property
    def size(self) -> Size:
        return Size(self._width, self._height)

    @property
    def rect(self) -> Rect:
        return Rect(0, 0, self._width, self._height)

    @property
    def touch(self) -> bool:
        return self._touch

    def is_mobile(self, breakpoint: int = MOBILE_BREAKPOINT) -> bool:
        """True for narrow viewports or touch devices."""
        return self._width <= breakpoint or self._touch

    def minimize_target(self, dock: Optional[DockAnchor] = None) -> Point:
        """
        Point windows shrink toward when minimized.

        The dock's horizontal centre on its top edge, or a fixed point
        near the bottom centre of the screen when there is no dock.
        """
        dock_rect = dock.rect if dock is not None else None
        if dock_rect is not None:
            return Point(dock_rect.left + dock_rect.w / 2, dock_rect.top)
        return Point(self._width / 2, self._height - _FALLBACK_DOCK_OFFSET)

    # ------------------------------------------------------------------
    # Resize
    # ------------------------------------------------------------------
    def on_resize(self, callback: ResizeCallback) -> None:
        self._listeners.append(callback)

    def off_resize(self, callback: ResizeCallback) -> None:
        try:
            self._listeners.remove(callback)
        except ValueError:
            pass

    def resize(self, width: float, height: float) -> bool:
        """
        Change the viewport size and notify listeners.

        Returns:
            False if the size did not change.
        """
        if width == self._width and height == self._height:
            return False

        old = self.size
        self._width = width
        self._height = height
        log.info("Viewport resized: %s -> %s", old, self.size)

        for cb in list(self._listeners):
            try:
                cb(self, old)
            except Exception:
                log.exception("Error in viewport resize callback")
        return True

    def __repr__(self) -> str:
        return f"Viewport({self._width:g}x{self._height:g}, touch={self._touch})"
