"""
linkos.geometry - Pixel geometry for the desktop.

This package contains:
    - rect     : Point, Size and Rect value types plus clamp()
    - viewport : Viewport display area and the dock anchor protocol
"""

from linkos.geometry.rect import Point, Rect, Size, clamp
from linkos.geometry.viewport import DockAnchor, Viewport, MOBILE_BREAKPOINT

__all__ = [
    "Point",
    "Rect",
    "Size",
    "clamp",
    "DockAnchor",
    "Viewport",
    "MOBILE_BREAKPOINT",
]
