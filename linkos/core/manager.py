"""
linkos.core.manager - WindowManager: the single source of truth for windows.

WindowManager:

  1. Builds windows for the host (create_window) with a staggered,
     viewport-clamped default position and a capacity guard.
  2. Subscribes to every registered window's lifecycle channel and keeps
     ``windows``, ``window_stack`` and the focus pointer consistent with
     what the windows report.
  3. Applies cross-window policy: one focused window at a time, focus
     transfer on minimize/hide/destroy, global shortcuts, and screen-resize
     correction.
  4. Exposes its own event channel (WMEvent) so higher-level modules
     (dock, session) can react without knowing about individual windows.

The focus pointer is stored as a window id and resolved through
``windows``, so a destroyed window can never be returned as focused.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any, Optional

from linkos.config.settings import LinkOSSettings, get_settings
from linkos.core.keybinds import KeyEvent, ShortcutManager
from linkos.core.scheduler import Scheduler
from linkos.core.window import (
    Window,
    WindowCallback,
    WindowConfig,
    WindowEvent,
    WindowOptions,
)
from linkos.core.zorder import ZOrderCounter
from linkos.geometry.rect import Point, Size, clamp
from linkos.geometry.viewport import DockAnchor, Viewport

log = logging.getLogger(__name__)


# ============================================================================
# Event types emitted by WindowManager
# ============================================================================
class WMEvent(enum.Enum):
    """Events that the WindowManager can emit to subscribers."""

    # A window was registered.
    WINDOW_ADDED = "window_added"

    # A window was destroyed and dropped from the collections.
    WINDOW_REMOVED = "window_removed"

    # The focused window changed (payload may be None after blur-all).
    FOCUS_CHANGED = "focus_changed"

    # The last window of an application went away.
    APP_CLOSED = "app_closed"


# Type alias for event callbacks.
# All callbacks receive (event, window, manager).  For APP_CLOSED the
# window is the last one destroyed for that app.
EventCallback = Callable[["WMEvent", Optional[Window], "WindowManager"], None]


def window_options_from_settings(settings: LinkOSSettings) -> WindowOptions:
    """WindowOptions carrying the configured animation and shortcut values."""
    ws = settings.window
    return WindowOptions(
        titlebar_height=ws.titlebar_height,
        animation_duration=ws.animation_duration,
        start_maximized_delay=ws.start_maximized_delay,
        minimize_combo=settings.shortcuts.minimize_window,
        close_combo=settings.shortcuts.close_window,
    )


# ============================================================================
# WindowManager
# ============================================================================
class WindowManager:
    """
    Owns every Window, their stacking order and the focus pointer.

    Usage:
        wm = WindowManager(Viewport(1920, 1080))
        wm.on(WMEvent.APP_CLOSED, my_callback)
        win = wm.create_window({"title": "Terminal", "app_id": "terminal"})
        win.show()
        wm.scheduler.run_pending()   # drive timed transitions
    """

    def __init__(
        self,
        viewport: Viewport,
        *,
        scheduler: Optional[Scheduler] = None,
        settings: Optional[LinkOSSettings] = None,
        dock: Optional[DockAnchor] = None,
    ) -> None:
        self._settings = settings if settings is not None else get_settings()
        self._viewport = viewport
        self._scheduler = scheduler if scheduler is not None else Scheduler()
        self._dock = dock

        # Window id -> Window, insertion ordered
        self._windows: dict[str, Window] = {}

        # Window ids, most-recently-focused last
        self._window_stack: list[str] = []

        # Id of the focused window (or None)
        self._focused_id: Optional[str] = None

        # Single access point for z-index values
        self._z_counter = ZOrderCounter()

        self._window_options = window_options_from_settings(self._settings)

        # Event subscribers: event -> list of callbacks
        self._subscribers: dict[WMEvent, list[EventCallback]] = {
            ev: [] for ev in WMEvent
        }
        # Relay of every window lifecycle event
        self._window_listeners: list[WindowCallback] = []

        self._shortcuts = ShortcutManager()
        self._shortcuts.enabled = self._settings.manager.keyboard_shortcuts

        self._viewport.on_resize(self._on_viewport_resize)

    # ------------------------------------------------------------------
    # Public: collaborators
    # ------------------------------------------------------------------
    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def settings(self) -> LinkOSSettings:
        return self._settings

    @property
    def shortcuts(self) -> ShortcutManager:
        """Manager-scoped (global) shortcuts."""
        return self._shortcuts

    @property
    def z_counter(self) -> ZOrderCounter:
        return self._z_counter

    @property
    def dock(self) -> Optional[DockAnchor]:
        return self._dock

    def set_dock(self, dock: Optional[DockAnchor]) -> None:
        """Attach the dock used as minimize target for windows created from now on."""
        self._dock = dock

    # ------------------------------------------------------------------
    # Public: window access
    # ------------------------------------------------------------------
    @property
    def windows(self) -> list[Window]:
        """All tracked windows, in registration order."""
        return list(self._windows.values())

    @property
    def window_stack(self) -> list[str]:
        """Copy of the stacking order, most-recently-focused last."""
        return list(self._window_stack)

    @property
    def focused_window(self) -> Optional[Window]:
        if self._focused_id is None:
            return None
        return self._windows.get(self._focused_id)

    @property
    def count(self) -> int:
        return len(self._windows)

    def get_window(self, window_id: str) -> Optional[Window]:
        """Get a window by id, or None."""
        return self._windows.get(window_id)

    def get_windows_by_app(self, app_id: str) -> list[Window]:
        return [w for w in self._windows.values() if w.app_id == app_id]

    def get_visible_windows(self) -> list[Window]:
        return [w for w in self._windows.values() if w.is_visible]

    def is_mobile(self) -> bool:
        return self._viewport.is_mobile(self._settings.manager.mobile_breakpoint)

    # ------------------------------------------------------------------
    # Public: event subscription
    # ------------------------------------------------------------------
    def on(self, event: WMEvent, callback: EventCallback) -> None:
        """Register a callback for a specific event."""
        self._subscribers[event].append(callback)

    def off(self, event: WMEvent, callback: EventCallback) -> None:
        """Unregister a callback."""
        try:
            self._subscribers[event].remove(callback)
        except ValueError:
            pass

    def on_all(self, callback: EventCallback) -> None:
        """Register a callback for ALL events."""
        for ev in WMEvent:
            self._subscribers[ev].append(callback)

    def on_window_event(self, callback: WindowCallback) -> None:
        """Receive every lifecycle event of every tracked window."""
        self._window_listeners.append(callback)

    def off_window_event(self, callback: WindowCallback) -> None:
        try:
            self._window_listeners.remove(callback)
        except ValueError:
            pass

    # ------------------------------------------------------------------
    # Internal: emit events
    # ------------------------------------------------------------------
    def _emit(self, event: WMEvent, window: Optional[Window] = None) -> None:
        for cb in list(self._subscribers[event]):
            try:
                cb(event, window, self)
            except Exception:
                log.exception(
                    "Error in event callback for %s on %s", event.value, window
                )

    # ------------------------------------------------------------------
    # Creation / registration
    # ------------------------------------------------------------------
    def create_window(
        self, config: WindowConfig | Mapping[str, Any] | None = None
    ) -> Optional[Window]:
        """
        Build, register and open a new window.

        Args:
            config: A WindowConfig or a plain mapping of the same fields.
                    When no position is given the window is placed at the
                    staggered default for its app.

        Returns:
            The new Window, or None if the capacity limit was reached or
            the requested id is already tracked.
        """
        max_windows = self._settings.manager.max_windows
        if len(self._windows) >= max_windows:
            log.warning("Maximum window limit reached (%d)", max_windows)
            return None

        config = self._resolve_config(config)
        if config.id is not None and config.id in self._windows:
            log.warning("Window %s is already registered", config.id)
            return None

        mobile = self.is_mobile()

        if config.position is None:
            config.position = Point(0, 0) if mobile else self.calculate_new_window_position(config.app_id)
        if mobile:
            config.start_maximized = True

        window = Window(
            config,
            viewport=self._viewport,
            scheduler=self._scheduler,
            next_z_index=self._z_counter.next,
            dock=self._dock,
        )
        self.register_window(window)
        window.open()
        return window

    def _resolve_config(
        self, config: WindowConfig | Mapping[str, Any] | None
    ) -> WindowConfig:
        """Fill a host config with configured defaults and window options."""
        if isinstance(config, WindowConfig):
            resolved = replace(config)
            if resolved.options is None:
                resolved.options = replace(self._window_options)
            return resolved

        ws = self._settings.window
        data: dict[str, Any] = {
            "title": ws.title,
            "size": (ws.width, ws.height),
            "min_size": (ws.min_width, ws.min_height),
        }
        data.update(config or {})

        resolved = WindowConfig.from_mapping(data)
        options = data.get("options", data.get("window_config"))
        if isinstance(options, WindowOptions):
            resolved.options = replace(options)
        elif isinstance(options, Mapping):
            resolved.options = replace(self._window_options, **options)
        else:
            resolved.options = replace(self._window_options)
        return resolved

    def register_window(self, window: Window) -> bool:
        """
        Start tracking *window* and subscribe to its lifecycle channel.

        Returns:
            False if a window with the same id is already tracked.
        """
        if window.id in self._windows:
            log.warning("Window %s is already registered", window.id)
            return False

        self._windows[window.id] = window
        self._window_stack.append(window.id)
        window.on_all(self._on_window_event)

        log.info("Window registered: %s (%s)", window.title, window.id)
        self._emit(WMEvent.WINDOW_ADDED, window)
        return True

    def calculate_new_window_position(self, app_id: str) -> Point:
        """
        Default position for the next window of *app_id*.

        Windows of one app are stacked diagonally by ``stack_spacing``;
        every position keeps a default-sized window inside the viewport
        with ``edge_padding`` around it and ``dock_reserve`` at the bottom.
        """
        ms = self._settings.manager
        pad = ms.edge_padding
        max_safe_x = max(pad, self._viewport.width - ms.default_window_width - pad)
        max_safe_y = max(pad, self._viewport.height - ms.default_window_height - ms.dock_reserve)

        base_x = clamp(ms.default_x, pad, max_safe_x)
        base_y = clamp(ms.default_y, pad, max_safe_y)

        existing = len(self.get_windows_by_app(app_id))
        if existing == 0:
            return Point(base_x, base_y)

        offset = existing * ms.stack_spacing
        return Point(min(base_x + offset, max_safe_x), min(base_y + offset, max_safe_y))

    # ------------------------------------------------------------------
    # Focus
    # ------------------------------------------------------------------
    def focus_window(self, window_id: str) -> bool:
        """Focus a window and move it to the top of the stack."""
        window = self._windows.get(window_id)
        if window is None:
            return False
        if window.is_closing or window.is_destroyed:
            return False

        previous = self.focused_window
        if previous is not None and previous is not window:
            previous.blur()

        if not window.focus():
            return False

        self._focused_id = window.id
        self._move_to_top(window.id)
        return True

    def blur_all_windows(self) -> None:
        changed = self._focused_id is not None
        for window in list(self._windows.values()):
            window.blur()
        self._focused_id = None
        if changed:
            self._emit(WMEvent.FOCUS_CHANGED, None)

    def pointer_down_desktop(self) -> None:
        """A press on the desktop background, outside every window."""
        self.blur_all_windows()

    def _move_to_top(self, window_id: str) -> None:
        try:
            self._window_stack.remove(window_id)
        except ValueError:
            return
        self._window_stack.append(window_id)

    def _top_visible_window(self) -> Optional[Window]:
        """The most recently stacked visible window."""
        for window_id in reversed(self._window_stack):
            window = self._windows.get(window_id)
            if window is not None and window.is_visible and not window.is_closing:
                return window
        return None

    def _focusable_windows(self) -> list[Window]:
        """Visible windows that are not on their way out, in creation order."""
        return [w for w in self.get_visible_windows() if not w.is_closing]

    def _transfer_focus(self) -> None:
        self._focused_id = None
        candidate = self._top_visible_window()
        if candidate is not None:
            self.focus_window(candidate.id)
        else:
            self._emit(WMEvent.FOCUS_CHANGED, None)

    # ------------------------------------------------------------------
    # Cycling
    # ------------------------------------------------------------------
    def cycle_windows(self) -> None:
        """Focus the visible window after the focused one, wrapping around."""
        visible = self._focusable_windows()
        if not visible:
            return

        next_index = 0
        focused = self.focused_window
        if focused is not None and focused in visible:
            next_index = (visible.index(focused) + 1) % len(visible)

        self.focus_window(visible[next_index].id)

    def cycle_app_windows(self) -> None:
        """Like cycle_windows, restricted to the focused window's app."""
        focused = self.focused_window
        if focused is None:
            return

        app_windows = [w for w in self._focusable_windows() if w.app_id == focused.app_id]
        if len(app_windows) <= 1:
            return

        current = app_windows.index(focused) if focused in app_windows else -1
        self.focus_window(app_windows[(current + 1) % len(app_windows)].id)

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------
    def close_all_windows(self) -> None:
        for window_id in list(self._windows):
            window = self._windows.get(window_id)
            if window is not None:
                window.close()

    def hide_all_windows(self) -> None:
        # Drop focus first so hiding does not hand it from window to window.
        focused = self.focused_window
        if focused is not None:
            focused.blur()
        self._focused_id = None

        for window in list(self._windows.values()):
            if window.is_visible:
                window.hide()

        if focused is not None:
            self._emit(WMEvent.FOCUS_CHANGED, None)

    def show_all_windows(self) -> None:
        for window in list(self._windows.values()):
            if not window.is_visible and not window.is_minimized:
                window.show()

    # ------------------------------------------------------------------
    # Application-level requests
    # ------------------------------------------------------------------
    def close_requested(self, window_id: str) -> bool:
        """Close a window on behalf of its content (e.g. a terminal 'exit')."""
        window = self._windows.get(window_id)
        if window is None:
            return False
        log.info("Close requested for %s", window_id)
        return window.close()

    def close_app(self, app_id: str) -> int:
        """Close (animated) every window of *app_id*; returns how many."""
        windows = self.get_windows_by_app(app_id)
        for window in windows:
            window.close()
        return len(windows)

    def force_quit(self, app_id: str) -> int:
        """Destroy every window of *app_id* immediately; returns how many."""
        windows = self.get_windows_by_app(app_id)
        log.info("Force quitting app: %s, closing %d window(s)", app_id, len(windows))
        for window in windows:
            window.destroy()
        return len(windows)

    # ------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------
    def handle_key(self, event: KeyEvent) -> bool:
        """
        Route a key-down: the focused window first, then global shortcuts.

        Returns:
            True if the key was consumed.
        """
        focused = self.focused_window
        if focused is not None and focused.handle_key(event):
            return True
        return self._shortcuts.dispatch(event)

    # ------------------------------------------------------------------
    # Viewport
    # ------------------------------------------------------------------
    def handle_screen_resize(self) -> None:
        """Pull windows back on-screen and refit maximized ones."""
        vw, vh = self._viewport.width, self._viewport.height

        for window in list(self._windows.values()):
            if window.is_destroyed:
                continue

            if window.is_maximized:
                window.set_size(vw, vh)
                continue

            max_x = vw - window.size.width
            max_y = vh - window.size.height
            x, y = window.position.x, window.position.y
            if x > max_x:
                x = max(0, max_x)
            if y > max_y:
                y = max(0, max_y)
            if (x, y) != window.position.as_tuple():
                log.debug("Screen resize: moving %s to (%g, %g)", window.id, x, y)
                window.set_position(x, y)

    def _on_viewport_resize(self, viewport: Viewport, old_size: Size) -> None:
        log.debug("Screen resize from %s", old_size)
        self.handle_screen_resize()

    # ------------------------------------------------------------------
    # Internal: window lifecycle bookkeeping
    # ------------------------------------------------------------------
    def _on_window_event(
        self, event: WindowEvent, window: Window, payload: dict[str, Any]
    ) -> None:
        if event is WindowEvent.FOCUSED:
            self._handle_focused(window)
        elif event is WindowEvent.BLURRED:
            if self._focused_id == window.id:
                self._focused_id = None
        elif event in (WindowEvent.MINIMIZED, WindowEvent.HIDDEN):
            self._handle_lost_visibility(window)
        elif event is WindowEvent.DESTROYED:
            self._handle_destroyed(window, payload)

        for cb in list(self._window_listeners):
            try:
                cb(event, window, payload)
            except Exception:
                log.exception("Error in window event listener for %s on %s", event.value, window)

    def _handle_focused(self, window: Window) -> None:
        if window.id not in self._windows:
            return

        previous = self.focused_window
        if previous is not None and previous is not window and previous.is_focused:
            previous.blur()

        self._focused_id = window.id
        self._move_to_top(window.id)
        if previous is not window:
            self._emit(WMEvent.FOCUS_CHANGED, window)

    def _handle_lost_visibility(self, window: Window) -> None:
        if self._focused_id != window.id:
            return
        window.blur()
        self._transfer_focus()

    def _handle_destroyed(self, window: Window, payload: dict[str, Any]) -> None:
        if self._windows.pop(window.id, None) is None:
            return
        try:
            self._window_stack.remove(window.id)
        except ValueError:
            pass
        window.off_all(self._on_window_event)

        log.info("Window destroyed: %s", window.id)
        self._emit(WMEvent.WINDOW_REMOVED, window)

        app_id = payload.get("app_id") or window.app_id
        if not self.get_windows_by_app(app_id):
            log.info("App closed: %s", app_id)
            self._emit(WMEvent.APP_CLOSED, window)

        if self._focused_id == window.id:
            self._transfer_focus()

    # ------------------------------------------------------------------
    # Shutdown / debug
    # ------------------------------------------------------------------
    def stats(self) -> dict[str, Any]:
        return {
            "total_windows": len(self._windows),
            "visible_windows": len(self.get_visible_windows()),
            "focused_window": self._focused_id,
            "window_stack": list(self._window_stack),
        }

    def shutdown(self) -> None:
        """Destroy every window and drop all subscriptions."""
        for window in list(self._windows.values()):
            window.destroy()

        self._shortcuts.unregister_all()
        self._viewport.off_resize(self._on_viewport_resize)

        self._windows.clear()
        self._window_stack.clear()
        self._focused_id = None
        for callbacks in self._subscribers.values():
            callbacks.clear()
        self._window_listeners.clear()

        log.info("WindowManager shut down")

    def dump_state(self) -> str:
        """Return a formatted string of all tracked windows, top of stack first."""
        lines = [
            f"=== WindowManager: {len(self._windows)} windows ===",
            f"    Focused: {self.focused_window}",
            "",
        ]
        for window_id in reversed(self._window_stack):
            w = self._windows[window_id]
            marker = " >> " if w.id == self._focused_id else "    "
            lines.append(f"{marker}{w}")
        return "\n".join(lines)
