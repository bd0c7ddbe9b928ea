"""
linkos.desktop - The desktop around the window manager.

This package contains:
    - launcher : Default window per app and single-instance launching
    - dock     : Pinned apps, running indicators, minimize target
    - session  : Wiring plus a line-based command interpreter
"""

from linkos.desktop.launcher import AppLauncher, AppSpec, APPS
from linkos.desktop.dock import Dock
from linkos.desktop.session import Session, SessionError

__all__ = ["AppLauncher", "AppSpec", "APPS", "Dock", "Session", "SessionError"]
