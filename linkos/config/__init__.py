"""
linkos.config - Configuration of the desktop.

This package contains:
    - settings : pydantic-settings classes and get_settings()
    - hotkeys  : Default global shortcut bindings
"""

from linkos.config.settings import (
    LinkOSSettings,
    get_settings,
    clear_settings,
    reload_settings,
)

__all__ = ["LinkOSSettings", "get_settings", "clear_settings", "reload_settings"]
