"""
linkos.desktop.dock - The dock.

The dock lists the pinned apps, shows which of them are running, keeps a
short list of recently launched apps and is the target windows shrink
toward when minimized (see ``Dock.rect``).

Running indicators follow the WindowManager: an app is marked running
when one of its windows is registered and cleared on APP_CLOSED.
"""

from __future__ import annotations

import logging
from typing import Literal, Optional

from linkos.config.settings import DockSettings
from linkos.core.manager import WindowManager, WMEvent
from linkos.core.window import Window
from linkos.desktop.launcher import AppLauncher
from linkos.geometry.rect import Rect

log = logging.getLogger(__name__)


DockPosition = Literal["bottom", "left", "right"]

ICON_SIZES: dict[str, int] = {
    "small": 48,
    "medium": 64,
    "large": 80,
}

# Space between icons and around the icon row.
ICON_GAP = 8
DOCK_PADDING = 8


class Dock:
    """
    Pinned apps, running indicators and recent apps.

    Attributes:
        position:  Screen edge the dock sits on.
        icon_size: Icon edge length in pixels.
        visible:   A hidden dock has no rect; windows then minimize
                   toward the fallback point.
    """

    def __init__(
        self,
        wm: WindowManager,
        launcher: AppLauncher,
        settings: Optional[DockSettings] = None,
    ) -> None:
        settings = settings if settings is not None else wm.settings.dock

        self._wm = wm
        self._launcher = launcher
        self._apps: list[str] = list(settings.apps)
        self._recent: list[str] = []
        self._running: set[str] = set()
        self._max_recent = settings.max_recent_apps
        self._margin = settings.margin

        self.position: DockPosition = settings.position
        self.icon_size: int = ICON_SIZES[settings.icon_size]
        self.visible: bool = True

        for app_id in self._apps:
            if not launcher.is_known(app_id):
                log.warning("Dock app %r has no launcher entry", app_id)

        wm.on(WMEvent.WINDOW_ADDED, self._on_window_added)
        wm.on(WMEvent.APP_CLOSED, self._on_app_closed)

    # ------------------------------------------------------------------
    # Apps
    # ------------------------------------------------------------------
    @property
    def apps(self) -> list[str]:
        return list(self._apps)

    @property
    def recent_apps(self) -> list[str]:
        """Most recently launched first."""
        return list(self._recent)

    @property
    def running_apps(self) -> set[str]:
        return set(self._running)

    def is_running(self, app_id: str) -> bool:
        return app_id in self._running

    def add_app(self, app_id: str) -> bool:
        if app_id in self._apps:
            return False
        self._apps.append(app_id)
        return True

    def remove_app(self, app_id: str) -> bool:
        try:
            self._apps.remove(app_id)
        except ValueError:
            return False
        return True

    # ------------------------------------------------------------------
    # Launch / quit
    # ------------------------------------------------------------------
    def launch(self, app_id: str) -> Optional[Window]:
        """Launch from a dock icon: mark running, remember, open."""
        if not self._launcher.is_known(app_id):
            log.warning("Dock launch: unknown app %s", app_id)
            return None

        self._running.add(app_id)
        self._add_recent(app_id)

        window = self._launcher.launch(app_id)
        if window is None and not self._wm.get_windows_by_app(app_id):
            self._running.discard(app_id)
        return window

    def force_quit(self, app_id: str) -> int:
        """Clear the indicator and destroy the app's windows immediately."""
        self._running.discard(app_id)
        return self._wm.force_quit(app_id)

    def _add_recent(self, app_id: str) -> None:
        if app_id in self._recent:
            self._recent.remove(app_id)
        self._recent.insert(0, app_id)
        del self._recent[self._max_recent:]

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def set_position(self, position: DockPosition) -> None:
        if position not in ("bottom", "left", "right"):
            log.warning("Invalid dock position: %r", position)
            return
        self.position = position
        log.info("Dock position changed to: %s", position)

    def set_icon_size(self, size: str) -> None:
        self.icon_size = ICON_SIZES.get(size, ICON_SIZES["medium"])
        log.info("Dock size changed to: %s (%dpx)", size, self.icon_size)

    @property
    def rect(self) -> Optional[Rect]:
        """On-screen rectangle of the dock, or None while hidden."""
        if not self.visible or not self._apps:
            return None

        viewport = self._wm.viewport
        count = len(self._apps)
        thickness = self.icon_size + 2 * DOCK_PADDING
        length = count * self.icon_size + (count - 1) * ICON_GAP + 2 * DOCK_PADDING

        if self.position == "bottom":
            return Rect(
                (viewport.width - length) / 2,
                viewport.height - self._margin - thickness,
                length,
                thickness,
            )

        y = (viewport.height - length) / 2
        if self.position == "left":
            return Rect(self._margin, y, thickness, length)
        return Rect(viewport.width - self._margin - thickness, y, thickness, length)

    # ------------------------------------------------------------------
    # WindowManager events
    # ------------------------------------------------------------------
    def _on_window_added(self, event: WMEvent, window: Optional[Window], wm: WindowManager) -> None:
        if window is not None:
            self._running.add(window.app_id)

    def _on_app_closed(self, event: WMEvent, window: Optional[Window], wm: WindowManager) -> None:
        if window is None:
            return
        self._running.discard(window.app_id)
        log.info("App closed on dock: %s", window.app_id)

    def dump_state(self) -> str:
        lines = [f"=== Dock ({self.position}, {self.icon_size}px) ==="]
        for app_id in self._apps:
            marker = " * " if app_id in self._running else "   "
            lines.append(f"{marker}{app_id}")
        if self._recent:
            lines.append(f"    recent: {', '.join(self._recent)}")
        return "\n".join(lines)
