"""
linkos.desktop.launcher - Opens application windows.

Each known app has a default window configuration (title, size,
position, minimum size).  Most apps are single-instance: launching one
that already has a window brings that window back instead of opening a
second one.  The browser and the file viewer open a new window every
time.

Typical usage:
    launcher = AppLauncher(wm)
    launcher.launch("terminal")
    launcher.launch("browser", url="https://example.com")
    launcher.open_file("cv.pdf", file_type="pdf")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from linkos.core.manager import WindowManager
from linkos.core.window import Window, WindowConfig
from linkos.geometry.rect import Point, Size

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AppSpec:
    """Default window for one application."""

    app_id: str
    name: str
    title: str
    size: Size
    position: Point
    min_size: Size
    single_instance: bool = True

    def window_config(self, content: Any = "") -> WindowConfig:
        return WindowConfig(
            title=self.title,
            content=content,
            app_id=self.app_id,
            position=self.position,
            size=self.size,
            min_size=self.min_size,
        )


APPS: dict[str, AppSpec] = {
    spec.app_id: spec
    for spec in (
        AppSpec("finder", "Finder", "Finder",
                Size(900, 600), Point(100, 80), Size(600, 400)),
        AppSpec("terminal", "Terminal", "Terminal",
                Size(800, 500), Point(150, 100), Size(400, 300)),
        AppSpec("portfolio", "Portfolio", "Portfolio - My Projects",
                Size(1200, 800), Point(100, 100), Size(800, 600)),
        AppSpec("about", "About", "About Me",
                Size(1000, 700), Point(200, 100), Size(800, 600)),
        AppSpec("contact", "Contact", "Contact Me",
                Size(1000, 700), Point(250, 100), Size(800, 600)),
        AppSpec("preferences", "System Preferences", "System Preferences",
                Size(800, 600), Point(150, 80), Size(600, 400)),
        AppSpec("browser", "Safari", "Safari",
                Size(1000, 700), Point(120, 60), Size(600, 400),
                single_instance=False),
    )
}

FILE_VIEWER_APP_ID = "file-viewer"

# (title prefix, size, position, min size) per viewer kind
_PDF_VIEWER = ("PDF - ", Size(900, 700), Point(120, 80), Size(480, 320))
_TEXT_VIEWER = ("", Size(700, 500), Point(150, 100), Size(400, 300))


class AppLauncher:
    """Creates, or brings back, the window of an application."""

    def __init__(self, wm: WindowManager, apps: Optional[dict[str, AppSpec]] = None) -> None:
        self._wm = wm
        self._apps = dict(apps) if apps is not None else dict(APPS)

    @property
    def app_ids(self) -> list[str]:
        return list(self._apps)

    def get_app(self, app_id: str) -> Optional[AppSpec]:
        return self._apps.get(app_id)

    def is_known(self, app_id: str) -> bool:
        return app_id in self._apps

    def launch(
        self,
        app_id: str,
        *,
        url: Optional[str] = None,
        initial_pane: Optional[str] = None,
    ) -> Optional[Window]:
        """
        Open *app_id*, or bring back its existing window.

        Args:
            app_id:       Known application id.
            url:          Page to open (browser only).
            initial_pane: Pane to open (preferences only).

        Returns:
            The launched or reused window; None for unknown apps or when
            the window manager is full.
        """
        spec = self._apps.get(app_id)
        if spec is None:
            log.warning("Unknown app: %s", app_id)
            return None

        if spec.single_instance:
            existing = self._wm.get_windows_by_app(app_id)
            if existing:
                return self._bring_back(existing[0])

        content: Any = ""
        if url is not None:
            content = url
        elif initial_pane is not None:
            content = initial_pane

        window = self._wm.create_window(spec.window_config(content))
        if window is None:
            return None

        window.show()
        log.info("App launched: %s (%s)", spec.name, window.id)
        return window

    def _bring_back(self, window: Window) -> Window:
        if window.is_minimized:
            window.restore()
        else:
            self._wm.focus_window(window.id)
        return window

    def open_file(
        self, name: str, content: Any = "", file_type: str = "text"
    ) -> Optional[Window]:
        """Open a file viewer window; PDFs get the larger viewer."""
        prefix, size, position, min_size = _PDF_VIEWER if file_type == "pdf" else _TEXT_VIEWER
        config = WindowConfig(
            title=f"{prefix}{name}",
            content=content or "Empty file",
            app_id=FILE_VIEWER_APP_ID,
            position=position,
            size=size,
            min_size=min_size,
        )
        window = self._wm.create_window(config)
        if window is None:
            return None

        window.show()
        log.info("File viewer opened: %s", name)
        return window
