"""
LinkOS - Headless window system of the LinkOS desktop.

Subpackages:
    - geometry : Point/Size/Rect values and the Viewport
    - core     : Window, WindowManager, scheduler, shortcuts, commands
    - config   : Settings and default shortcut bindings
    - desktop  : Dock, app launcher and scripted sessions
"""

__version__ = "0.1.0"
