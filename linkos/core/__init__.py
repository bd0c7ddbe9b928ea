"""
linkos.core - Window model and window management.

This package contains:
    - window       : The Window panel and its lifecycle events
    - manager      : WindowManager - windows, stacking and focus
    - scheduler    : Cooperative timers for animation follow-ups
    - zorder       : The z-index counter
    - surface      : Renderer-facing visual state of a window
    - keybinds     : Keyboard shortcut registry and dispatch
    - combo_parser : "meta+shift+w" style combo parsing
    - commands     : Named command registry
"""

from linkos.core.window import Window, WindowConfig, WindowEvent, WindowState
from linkos.core.manager import WindowManager, WMEvent
from linkos.core.keybinds import KeyEvent, ShortcutManager, Shortcut

__all__ = [
    "Window", "WindowConfig", "WindowEvent", "WindowState",
    "WindowManager", "WMEvent",
    "KeyEvent", "ShortcutManager", "Shortcut",
]
