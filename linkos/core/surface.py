"""
linkos.core.surface - Visual state of a window.

The Surface is what a renderer draws: box geometry, stacking value,
opacity/transform of the current animation, whether it is displayed at
all, and the title/content shown in it.  Windows own one Surface each and
keep it in sync with their logical state; renderers only read it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from linkos.geometry.rect import Point, Rect, Size


@dataclass(frozen=True, slots=True)
class Transform:
    """scale(s) translate(dx, dy)"""

    scale: float = 1.0
    dx: float = 0.0
    dy: float = 0.0

    def __str__(self) -> str:
        return f"scale({self.scale:g}) translate({self.dx:g}px, {self.dy:g}px)"


IDENTITY = Transform()

# Where windows animate in from and out to (slightly shrunk, 20px lower).
ENTER_EXIT = Transform(scale=0.9, dx=0.0, dy=20.0)

MINIMIZED_SCALE = 0.1


@dataclass(slots=True)
class Surface:
    """Renderer-facing state of one window."""

    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0
    z_index: int = 0

    opacity: float = 0.0
    transform: Transform = ENTER_EXIT
    displayed: bool = True
    focused: bool = False
    cursor: str = ""

    title: str = ""
    content: Any = None
    attached: bool = True
    classes: set[str] = field(default_factory=set)

    @property
    def rect(self) -> Rect:
        return Rect(self.left, self.top, self.width, self.height)

    def move(self, position: Point) -> None:
        self.left = position.x
        self.top = position.y

    def resize(self, size: Size) -> None:
        self.width = size.width
        self.height = size.height

    def animate(self, transform: Transform, opacity: float) -> None:
        self.transform = transform
        self.opacity = opacity

    def set_focused(self, focused: bool) -> None:
        self.focused = focused
        if focused:
            self.classes.add("focused")
        else:
            self.classes.discard("focused")

    def detach(self) -> None:
        """Remove from the display; the surface is dead afterwards."""
        self.attached = False
        self.displayed = False
        self.content = None
        self.classes.clear()
