"""
linkos.core.window - The Window model.

A Window is one floating panel on the LinkOS desktop: title bar with
traffic lights, a content slot, eight resize handles.  It owns its
geometry and visibility flags, runs its own drag/resize protocols and
timed transitions, and reports every state change on its lifecycle
channel so the WindowManager can keep its bookkeeping in sync.

Animations end after ``animation_duration`` milliseconds.  The follow-up
step (hiding the surface, destroying the window) is queued on the shared
Scheduler and the handle is kept, so destroying a window cancels whatever
it still had pending.

Redundant calls (maximize twice, hide a hidden window, anything after
destroy) are silent no-ops; none of the public methods raise.
"""

from __future__ import annotations

import enum
import logging
import random
import string
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional

from linkos.core.combo_parser import ComboParseError, parse_combo
from linkos.core.keybinds import KeyEvent
from linkos.core.scheduler import Scheduler, TimerHandle
from linkos.core.surface import ENTER_EXIT, IDENTITY, MINIMIZED_SCALE, Surface, Transform
from linkos.core.zorder import ZOrderCounter
from linkos.geometry.rect import Point, Rect, Size, clamp
from linkos.geometry.viewport import DockAnchor, Viewport

log = logging.getLogger(__name__)


# ============================================================================
# Enums
# ============================================================================
class WindowEvent(enum.Enum):
    """Lifecycle events a Window emits on its channel."""

    CREATED = "created"
    SHOWN = "shown"
    HIDDEN = "hidden"
    FOCUSED = "focused"
    BLURRED = "blurred"
    CLOSING = "closing"
    DESTROYED = "destroyed"
    MINIMIZED = "minimized"
    RESTORED = "restored"
    MAXIMIZED = "maximized"
    UNMAXIMIZED = "unmaximized"


class WindowState(enum.Enum):
    """Observable state of a window."""

    CREATED = "created"       # Opened but never shown
    NORMAL = "normal"
    HIDDEN = "hidden"
    MINIMIZED = "minimized"
    MAXIMIZED = "maximized"
    CLOSING = "closing"       # Exit animation running, destroy pending
    DESTROYED = "destroyed"


class Transition(enum.Enum):
    """Timed follow-up step a window is waiting on."""

    NONE = "none"
    HIDING = "hiding"                     # display off after exit animation
    MINIMIZING = "minimizing"             # display off after dock animation
    CLOSING = "closing"                   # destroy after exit animation
    MAXIMIZING_ON_OPEN = "maximizing_on_open"


class ResizeDirection(enum.Enum):
    """Compass point of the resize handle being dragged."""

    N = "n"
    NE = "ne"
    E = "e"
    SE = "se"
    S = "s"
    SW = "sw"
    W = "w"
    NW = "nw"

    @property
    def moves_north(self) -> bool:
        return "n" in self.value

    @property
    def moves_south(self) -> bool:
        return "s" in self.value

    @property
    def moves_east(self) -> bool:
        return "e" in self.value

    @property
    def moves_west(self) -> bool:
        return "w" in self.value


class TrafficLight(enum.Enum):
    """The three title bar buttons."""

    CLOSE = "close"
    MINIMIZE = "minimize"
    MAXIMIZE = "maximize"


# ============================================================================
# Configuration
# ============================================================================
@dataclass(slots=True)
class WindowOptions:
    """Per-window presentation and behaviour knobs."""

    titlebar_height: int = 28
    animation_duration: int = 300        # ms
    start_maximized_delay: int = 50      # ms
    minimize_combo: str = "meta+m"
    close_combo: str = "meta+w"


DEFAULT_POSITION = Point(100, 100)
DEFAULT_SIZE = Size(800, 600)
DEFAULT_MIN_SIZE = Size(300, 200)


@dataclass(slots=True)
class WindowConfig:
    """
    Everything a host can specify when asking for a window.

    Omitted geometry gets the defaults above; ``max_size`` defaults to the
    viewport size when the window is built.
    """

    id: Optional[str] = None
    title: str = "Untitled"
    content: Any = ""
    app_id: str = "unknown"
    position: Optional[Point] = None
    size: Size = DEFAULT_SIZE
    min_size: Size = DEFAULT_MIN_SIZE
    max_size: Optional[Size] = None
    start_maximized: bool = False
    options: Optional[WindowOptions] = None

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> WindowConfig:
        """
        Build a config from a plain dict.

        Accepts snake_case or camelCase keys and geometry given either as
        dicts ({"x": .., "y": ..} / {"width": .., "height": ..}) or as
        2-tuples.  Unknown keys are ignored.
        """
        def _get(*names: str) -> Any:
            for name in names:
                if name in data and data[name] is not None:
                    return data[name]
            return None

        def _point(value: Any) -> Optional[Point]:
            if value is None or isinstance(value, Point):
                return value
            if isinstance(value, dict):
                return Point(value["x"], value["y"])
            x, y = value
            return Point(x, y)

        def _size(value: Any) -> Optional[Size]:
            if value is None or isinstance(value, Size):
                return value
            if isinstance(value, dict):
                return Size(value["width"], value["height"])
            w, h = value
            return Size(w, h)

        config = cls()
        if (v := _get("id")) is not None:
            config.id = str(v)
        if (v := _get("title")) is not None:
            config.title = str(v)
        if (v := _get("content")) is not None:
            config.content = v
        if (v := _get("app_id", "appId")) is not None:
            config.app_id = str(v)
        config.position = _point(_get("position"))
        config.size = _size(_get("size")) or DEFAULT_SIZE
        config.min_size = _size(_get("min_size", "minSize")) or DEFAULT_MIN_SIZE
        config.max_size = _size(_get("max_size", "maxSize"))
        config.start_maximized = bool(_get("start_maximized", "startMaximized"))
        return config


def generate_window_id() -> str:
    """'window_' followed by 9 random base-36 characters."""
    alphabet = string.ascii_lowercase + string.digits
    return "window_" + "".join(random.choices(alphabet, k=9))


# ============================================================================
# Drag / resize state
# ============================================================================
@dataclass(frozen=True, slots=True)
class DragState:
    origin_client: Point
    origin_position: Point


@dataclass(frozen=True, slots=True)
class ResizeState:
    direction: ResizeDirection
    origin_client: Point
    origin_position: Point
    origin_size: Size


# Type alias for lifecycle callbacks.
# All callbacks receive (event, window, payload); payload always carries
# "window_id" and "app_id" plus event-specific fields such as "z_index".
WindowCallback = Callable[[WindowEvent, "Window", dict[str, Any]], None]


# ============================================================================
# Window
# ============================================================================
class Window:
    """
    A single floating, draggable, resizable panel.

    Windows are normally built and registered by the WindowManager.  They
    can live on their own (tests, previews) given a viewport; scheduler
    and z-index source then default to private instances.

    Equality and hashing are based solely on the id.
    """

    def __init__(
        self,
        config: Optional[WindowConfig] = None,
        *,
        viewport: Viewport,
        scheduler: Optional[Scheduler] = None,
        next_z_index: Optional[Callable[[], int]] = None,
        dock: Optional[DockAnchor] = None,
    ) -> None:
        config = config if config is not None else WindowConfig()

        self._id: str = config.id or generate_window_id()
        self._app_id: str = config.app_id
        self._title: str = config.title
        self._content: Any = config.content
        self._options = config.options if config.options is not None else WindowOptions()

        self._viewport = viewport
        self._scheduler = scheduler if scheduler is not None else Scheduler()
        self._next_z_index = next_z_index if next_z_index is not None else ZOrderCounter()
        self._dock = dock

        # Geometry
        self._position: Point = config.position or DEFAULT_POSITION
        self._size: Size = config.size
        self._min_size: Size = config.min_size
        self._max_size: Size = config.max_size or viewport.size
        self._original_position: Optional[Point] = None
        self._original_size: Optional[Size] = None

        # State flags
        self._visible = False
        self._minimized = False
        self._maximized = False
        self._focused = False
        self._opened = False
        self._shown_once = False
        self._closing = False
        self._destroyed = False
        self._start_maximized = config.start_maximized
        self._z_index: int = self._next_z_index()

        # Interaction state
        self._drag: Optional[DragState] = None
        self._resize: Optional[ResizeState] = None

        # Pending timed steps
        self._pending: Optional[tuple[Transition, TimerHandle]] = None
        self._open_timer: Optional[TimerHandle] = None

        # Lifecycle subscribers: event -> list of callbacks
        self._subscribers: dict[WindowEvent, list[WindowCallback]] = {
            ev: [] for ev in WindowEvent
        }

        self._shortcuts: dict[tuple[int, str], Callable[[], bool]] = {}
        self._bind_shortcut(self._options.minimize_combo, self.minimize)
        self._bind_shortcut(self._options.close_combo, self.close)

        self._surface = Surface(
            left=self._position.x,
            top=self._position.y,
            width=self._size.width,
            height=self._size.height,
            z_index=self._z_index,
            title=self._title,
            content=self._content,
        )

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    @property
    def id(self) -> str:
        return self._id

    @property
    def app_id(self) -> str:
        return self._app_id

    @property
    def title(self) -> str:
        return self._title

    @property
    def content(self) -> Any:
        return self._content

    @property
    def options(self) -> WindowOptions:
        return self._options

    @property
    def surface(self) -> Surface:
        return self._surface

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    @property
    def position(self) -> Point:
        return self._position

    @property
    def size(self) -> Size:
        return self._size

    @property
    def rect(self) -> Rect:
        return Rect.from_point_size(self._position, self._size)

    @property
    def titlebar_rect(self) -> Rect:
        """The strip along the top edge that starts a drag."""
        return Rect(
            self._position.x, self._position.y, self._size.width, self._options.titlebar_height
        )

    @property
    def min_size(self) -> Size:
        return self._min_size

    @property
    def max_size(self) -> Size:
        return self._max_size

    @property
    def original_position(self) -> Optional[Point]:
        """Pre-maximize position; None unless maximized."""
        return self._original_position

    @property
    def original_size(self) -> Optional[Size]:
        """Pre-maximize size; None unless maximized."""
        return self._original_size

    # ------------------------------------------------------------------
    # State flags
    # ------------------------------------------------------------------
    @property
    def is_visible(self) -> bool:
        return self._visible

    @property
    def is_minimized(self) -> bool:
        return self._minimized

    @property
    def is_maximized(self) -> bool:
        return self._maximized

    @property
    def is_focused(self) -> bool:
        return self._focused

    @property
    def is_dragging(self) -> bool:
        return self._drag is not None

    @property
    def is_resizing(self) -> bool:
        return self._resize is not None

    @property
    def is_closing(self) -> bool:
        return self._closing

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    @property
    def start_maximized(self) -> bool:
        return self._start_maximized

    @property
    def z_index(self) -> int:
        return self._z_index

    @property
    def state(self) -> WindowState:
        if self._destroyed:
            return WindowState.DESTROYED
        if self._closing:
            return WindowState.CLOSING
        if self._minimized:
            return WindowState.MINIMIZED
        if not self._visible:
            return WindowState.HIDDEN if self._shown_once else WindowState.CREATED
        if self._maximized:
            return WindowState.MAXIMIZED
        return WindowState.NORMAL

    @property
    def transition(self) -> Transition:
        if self._pending is not None and self._pending[1].pending:
            return self._pending[0]
        if self._open_timer is not None and self._open_timer.pending:
            return Transition.MAXIMIZING_ON_OPEN
        return Transition.NONE

    @property
    def _alive(self) -> bool:
        """Accepts state changes: not destroyed and not on its way out."""
        return not (self._destroyed or self._closing)

    # ------------------------------------------------------------------
    # Lifecycle subscription
    # ------------------------------------------------------------------
    def on(self, event: WindowEvent, callback: WindowCallback) -> None:
        """Register a callback for a specific event."""
        self._subscribers[event].append(callback)

    def off(self, event: WindowEvent, callback: WindowCallback) -> None:
        """Unregister a callback."""
        try:
            self._subscribers[event].remove(callback)
        except ValueError:
            pass

    def on_all(self, callback: WindowCallback) -> None:
        """Register a callback for ALL events."""
        for ev in WindowEvent:
            self._subscribers[ev].append(callback)

    def off_all(self, callback: WindowCallback) -> None:
        """Unregister a callback from every event it was registered for."""
        for ev in WindowEvent:
            self.off(ev, callback)

    def _emit(self, event: WindowEvent, **extra: Any) -> None:
        payload: dict[str, Any] = {"window_id": self._id, "app_id": self._app_id}
        payload.update(extra)
        for cb in list(self._subscribers[event]):
            try:
                cb(event, self, payload)
            except Exception:
                log.exception("Error in %s callback for %s", event.value, self)

    # ------------------------------------------------------------------
    # Timed steps
    # ------------------------------------------------------------------
    def _schedule(self, kind: Transition, callback: Callable[[], None]) -> None:
        """Queue *callback* after the animation, replacing any pending step."""
        self._cancel_pending()
        handle = self._scheduler.call_later(
            self._options.animation_duration,
            callback,
            f"{kind.value} {self._id}",
        )
        self._pending = (kind, handle)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending[1].cancel()
            self._pending = None

    def _display_off(self) -> None:
        self._pending = None
        self._surface.displayed = False

    # ------------------------------------------------------------------
    # Open / show / hide
    # ------------------------------------------------------------------
    def open(self) -> bool:
        """
        Announce the window (CREATED) and arm start-maximized.

        Called once by the manager right after registration, so the
        manager's subscription sees the CREATED event.
        """
        if self._opened or not self._alive:
            return False
        self._opened = True

        if self._start_maximized:
            self._open_timer = self._scheduler.call_later(
                self._options.start_maximized_delay,
                self._maximize_on_open,
                f"start maximized {self._id}",
            )

        self._emit(WindowEvent.CREATED)
        log.info("Window created: %s (%s)", self._title, self._id)
        return True

    def _maximize_on_open(self) -> None:
        self._open_timer = None
        self.maximize()

    def show(self) -> bool:
        """
        Make the window visible with the enter animation, then focus it.

        A minimized window is restored instead.
        """
        if not self._alive:
            return False
        if self._minimized:
            return self.restore()
        if self._visible:
            return False

        self._visible = True
        self._shown_once = True
        self._cancel_pending()
        self._surface.displayed = True
        self._surface.animate(IDENTITY, 1.0)

        self.focus()
        self._emit(WindowEvent.SHOWN)
        return True

    def hide(self) -> bool:
        """Hide with the exit animation; the surface goes away afterwards."""
        if not self._alive or not self._visible:
            return False

        self._visible = False
        self._stop_interaction()
        self._surface.animate(ENTER_EXIT, 0.0)
        self._schedule(Transition.HIDING, self._display_off)

        self._emit(WindowEvent.HIDDEN)
        return True

    # ------------------------------------------------------------------
    # Focus
    # ------------------------------------------------------------------
    def focus(self) -> bool:
        """Take focus and move to the top of the stacking order."""
        if not self._alive:
            return False

        self._focused = True
        self._z_index = self._next_z_index()
        self._surface.z_index = self._z_index
        self._surface.set_focused(True)

        log.debug("FOCUS %s z=%d", self._id, self._z_index)
        self._emit(WindowEvent.FOCUSED, z_index=self._z_index)
        return True

    def blur(self) -> bool:
        if self._destroyed or not self._focused:
            return False

        self._focused = False
        self._surface.set_focused(False)
        self._emit(WindowEvent.BLURRED)
        return True

    # ------------------------------------------------------------------
    # Close / destroy
    # ------------------------------------------------------------------
    def close(self) -> bool:
        """Play the exit animation, then destroy."""
        if not self._alive:
            return False

        self._stop_interaction()
        self._cancel_open_timer()
        self._emit(WindowEvent.CLOSING)

        # A CLOSING subscriber may already have destroyed us.
        if self._destroyed:
            return True

        self._closing = True
        self._surface.animate(ENTER_EXIT, 0.0)
        self._schedule(Transition.CLOSING, self.destroy)
        return True

    def destroy(self) -> bool:
        """Tear down immediately (also the end of close())."""
        if self._destroyed:
            return False

        self._cancel_pending()
        self._cancel_open_timer()
        self._stop_interaction()

        self._destroyed = True
        self._closing = False
        self._visible = False
        self._focused = False

        self._emit(WindowEvent.DESTROYED)

        self._surface.detach()
        self._content = None
        for callbacks in self._subscribers.values():
            callbacks.clear()
        self._shortcuts.clear()

        log.info("Window destroyed: %s (%s)", self._title, self._id)
        return True

    def _cancel_open_timer(self) -> None:
        if self._open_timer is not None:
            self._open_timer.cancel()
            self._open_timer = None

    # ------------------------------------------------------------------
    # Minimize / restore
    # ------------------------------------------------------------------
    def minimize(self) -> bool:
        """Shrink toward the dock and hide."""
        if not self._alive or self._minimized:
            return False

        self._stop_interaction()
        self._minimized = True
        self._visible = False

        target = self._viewport.minimize_target(self._dock)
        dx, dy = self._position.delta_to(target)
        self._surface.animate(Transform(MINIMIZED_SCALE, dx, dy), 0.0)
        self._schedule(Transition.MINIMIZING, self._display_off)

        self._emit(WindowEvent.MINIMIZED)
        return True

    def restore(self) -> bool:
        """Bring a minimized window back; shows and focuses it."""
        if not self._alive or not self._minimized:
            return False

        self._minimized = False
        self._cancel_pending()
        self._surface.displayed = True
        self._surface.animate(IDENTITY, 1.0)

        self.show()
        self._emit(WindowEvent.RESTORED)
        return True

    # ------------------------------------------------------------------
    # Maximize
    # ------------------------------------------------------------------
    def toggle_maximize(self) -> bool:
        if self._maximized:
            return self.unmaximize()
        return self.maximize()

    def maximize(self) -> bool:
        """Fill the viewport, remembering the current geometry."""
        if not self._alive or self._maximized:
            return False

        self._stop_interaction()
        self._original_position = self._position
        self._original_size = self._size
        self._maximized = True

        self.set_position(0, 0)
        self.set_size(self._viewport.width, self._viewport.height)

        self._emit(WindowEvent.MAXIMIZED)
        return True

    def unmaximize(self) -> bool:
        """Return to the geometry saved by maximize()."""
        if not self._alive or not self._maximized:
            return False

        self._maximized = False
        position = self._original_position or self._position
        size = self._original_size or self._size
        self._original_position = None
        self._original_size = None

        self.set_position(position.x, position.y)
        self.set_size(size.width, size.height)

        self._emit(WindowEvent.UNMAXIMIZED)
        return True

    # ------------------------------------------------------------------
    # Geometry mutators (no clamping: callers clamp)
    # ------------------------------------------------------------------
    def set_position(self, x: float, y: float) -> bool:
        if self._destroyed:
            return False
        self._position = Point(x, y)
        self._surface.move(self._position)
        return True

    def set_size(self, width: float, height: float) -> bool:
        if self._destroyed:
            return False
        self._size = Size(width, height)
        self._surface.resize(self._size)
        return True

    def set_title(self, title: str) -> bool:
        if self._destroyed:
            return False
        self._title = title
        self._surface.title = title
        return True

    def set_content(self, content: Any) -> bool:
        if self._destroyed:
            return False
        self._content = content
        self._surface.content = content
        return True

    # ------------------------------------------------------------------
    # Drag protocol
    # ------------------------------------------------------------------
    def start_drag(self, origin: Point) -> bool:
        """Begin moving from pointer position *origin*.  Refused while maximized."""
        if not self._alive or self._maximized or self._resize is not None:
            return False

        self._drag = DragState(origin_client=origin, origin_position=self._position)
        self._surface.cursor = "move"
        return True

    def drag_to(self, pointer: Point) -> bool:
        """Follow the pointer, keeping the whole window on-screen."""
        if self._drag is None or self._destroyed:
            return False

        dx, dy = self._drag.origin_client.delta_to(pointer)
        wanted = self._drag.origin_position.offset(dx, dy)
        target = self._viewport.rect.clamp_point(wanted, self._size)
        return self.set_position(target.x, target.y)

    def stop_drag(self) -> bool:
        if self._drag is None:
            return False
        self._drag = None
        self._surface.cursor = ""
        return True

    # ------------------------------------------------------------------
    # Resize protocol
    # ------------------------------------------------------------------
    def start_resize(self, origin: Point, direction: ResizeDirection | str) -> bool:
        """Begin resizing from the handle at *direction*.  Refused while maximized."""
        if not self._alive or self._maximized or self._drag is not None:
            return False

        try:
            direction = ResizeDirection(direction)
        except ValueError:
            log.warning("Unknown resize direction %r for %s", direction, self._id)
            return False

        self._resize = ResizeState(
            direction=direction,
            origin_client=origin,
            origin_position=self._position,
            origin_size=self._size,
        )
        return True

    def resize_to(self, pointer: Point) -> bool:
        """
        Follow the pointer with the active handle.

        Width/height stay within [min_size, max_size].  For west/north
        handles the x/y moves by the actual size change so the opposite
        edge stays put.
        """
        state = self._resize
        if state is None or self._destroyed:
            return False

        dx, dy = state.origin_client.delta_to(pointer)
        d = state.direction
        start_w, start_h = state.origin_size.width, state.origin_size.height
        start_x, start_y = state.origin_position.x, state.origin_position.y

        width, height = start_w, start_h
        x, y = self._position.x, self._position.y

        if d.moves_east:
            width = clamp(start_w + dx, self._min_size.width, self._max_size.width)
        if d.moves_west:
            width = clamp(start_w - dx, self._min_size.width, self._max_size.width)
            x = start_x + (start_w - width)
        if d.moves_south:
            height = clamp(start_h + dy, self._min_size.height, self._max_size.height)
        if d.moves_north:
            height = clamp(start_h - dy, self._min_size.height, self._max_size.height)
            y = start_y + (start_h - height)

        self.set_size(width, height)
        self.set_position(x, y)
        return True

    def stop_resize(self) -> bool:
        if self._resize is None:
            return False
        self._resize = None
        return True

    def _stop_interaction(self) -> None:
        self.stop_drag()
        self.stop_resize()

    # ------------------------------------------------------------------
    # Pointer / title bar input
    # ------------------------------------------------------------------
    def pointer_down(self) -> bool:
        """Any press inside the window focuses it."""
        return self.focus()

    def pointer_move(self, pointer: Point) -> bool:
        if self._drag is not None:
            return self.drag_to(pointer)
        if self._resize is not None:
            return self.resize_to(pointer)
        return False

    def pointer_up(self) -> None:
        self._stop_interaction()

    def double_click_titlebar(self) -> bool:
        return self.toggle_maximize()

    def press_traffic_light(self, button: TrafficLight | str) -> bool:
        try:
            button = TrafficLight(button)
        except ValueError:
            log.warning("Unknown traffic light %r", button)
            return False

        if button is TrafficLight.CLOSE:
            return self.close()
        if button is TrafficLight.MINIMIZE:
            return self.minimize()
        return self.toggle_maximize()

    # ------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------
    def _bind_shortcut(self, combo: str, action: Callable[[], bool]) -> None:
        try:
            self._shortcuts[parse_combo(combo)] = action
        except ComboParseError:
            log.error("Invalid window shortcut %r for %s", combo, self._id)

    def handle_key(self, event: KeyEvent) -> bool:
        """
        Window-scoped shortcuts (minimize, close); only while focused.

        Returns:
            True if the key was consumed.
        """
        if not self._focused or not self._alive:
            return False

        modifiers, key = event.combo
        action = self._shortcuts.get((modifiers, key)) if key is not None else None
        if action is None:
            return False

        action()
        return True

    # ------------------------------------------------------------------
    # Snapshot (for logging / debugging)
    # ------------------------------------------------------------------
    def snapshot(self) -> dict[str, Any]:
        """Return a dict of all current properties."""
        return {
            "id": self._id,
            "app_id": self._app_id,
            "title": self._title,
            "position": self._position.as_tuple(),
            "size": self._size.as_tuple(),
            "state": self.state.value,
            "transition": self.transition.value,
            "is_visible": self._visible,
            "is_minimized": self._minimized,
            "is_maximized": self._maximized,
            "is_focused": self._focused,
            "z_index": self._z_index,
        }

    # ------------------------------------------------------------------
    # Dunder methods
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if isinstance(other, Window):
            return self._id == other._id
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"Window(id={self._id!r}, title={self._title!r})"

    def __str__(self) -> str:
        return (
            f"[{self._id}] {self._title!r} | app:{self._app_id} | "
            f"{self.state.value} | "
            f"{self._size}+{self._position.x:g}+{self._position.y:g} | z={self._z_index}"
        )
