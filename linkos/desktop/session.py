"""
linkos.desktop.session - A headless LinkOS desktop driven by text commands.

A Session wires a Viewport, a Scheduler on a manual clock, the
WindowManager, the command dispatcher with its global shortcuts, the app
launcher and the dock.  Hosts (and ``python -m linkos``) feed it one
command per line:

    launch terminal          open an app (through the dock when pinned)
    open <title> [app_id]    create and show a plain window
    file <name> [pdf|text]   open a file viewer
    key meta+tab             press a key combo
    click <win>              pointer-down inside a window
    desktop                  pointer-down on the desktop background
    drag <win> dx dy         drag the title bar by (dx, dy)
    resize <win> <dir> dx dy drag a resize handle (n, ne, e, ... nw)
    button <win> close|minimize|maximize
    dblclick <win>           double-click the title bar
    tick <ms>                advance the clock and run due transitions
    viewport <w> <h>         resize the display
    quit <app>               force quit an app
    run <command> [args...]  execute a dispatcher command
    state | stats | commands | dock

``<win>`` is a window id, an app id (its first window) or ``focused``.
Blank lines and lines starting with '#' are ignored.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable, Iterable
from typing import Any, Optional

from linkos.config.hotkeys import register_default_shortcuts
from linkos.config.settings import LinkOSSettings, get_settings
from linkos.core.combo_parser import ComboParseError
from linkos.core.commands import CommandDispatcher, build_default_commands
from linkos.core.keybinds import KeyEvent
from linkos.core.manager import WindowManager
from linkos.core.scheduler import ManualClock, Scheduler
from linkos.core.window import Window, WindowEvent
from linkos.desktop.dock import Dock
from linkos.desktop.launcher import AppLauncher
from linkos.geometry.rect import Point
from linkos.geometry.viewport import Viewport

log = logging.getLogger(__name__)


class SessionError(ValueError):
    """A script line could not be executed."""


# Horizontal offset of the grab point inside the title bar.
_TITLEBAR_GRAB_X = 40


class Session:
    """Everything a running desktop needs, plus the line interpreter."""

    def __init__(
        self,
        settings: Optional[LinkOSSettings] = None,
        *,
        viewport: Optional[Viewport] = None,
    ) -> None:
        self.settings = settings if settings is not None else get_settings()
        self.viewport = viewport or Viewport(
            self.settings.viewport_width, self.settings.viewport_height
        )
        self.clock = ManualClock()
        self.scheduler = Scheduler(self.clock)

        self.wm = WindowManager(
            self.viewport, scheduler=self.scheduler, settings=self.settings
        )
        self.dispatcher = CommandDispatcher()
        build_default_commands(self.dispatcher, self.wm)
        self.shortcut_count = register_default_shortcuts(
            self.wm.shortcuts, self.dispatcher, self.settings.shortcuts
        )

        self.launcher = AppLauncher(self.wm)
        self.dock = Dock(self.wm, self.launcher, self.settings.dock)
        self.wm.set_dock(self.dock)

        self._register_app_commands()

        self._handlers: dict[str, Callable[[list[str]], Any]] = {
            "launch": self._cmd_launch,
            "open": self._cmd_open,
            "file": self._cmd_file,
            "key": self._cmd_key,
            "click": self._cmd_click,
            "desktop": self._cmd_desktop,
            "drag": self._cmd_drag,
            "resize": self._cmd_resize,
            "button": self._cmd_button,
            "dblclick": self._cmd_dblclick,
            "tick": self._cmd_tick,
            "viewport": self._cmd_viewport,
            "quit": self._cmd_quit,
            "run": self._cmd_run,
            "state": self._cmd_state,
            "stats": self._cmd_stats,
            "commands": self._cmd_commands,
            "dock": self._cmd_dock,
        }

    def _register_app_commands(self) -> None:
        self.dispatcher.register("launch_app", self.launch, "Launch an app", "app")
        self.dispatcher.register("open_file", self.launcher.open_file, "Open a file viewer", "app")

    # ------------------------------------------------------------------
    # Convenience
    # ------------------------------------------------------------------
    def launch(self, app_id: str) -> Optional[Window]:
        """Launch through the dock when the app is pinned there."""
        if app_id in self.dock.apps:
            return self.dock.launch(app_id)
        return self.launcher.launch(app_id)

    def resolve(self, ref: str) -> Window:
        """Find a window by id, app id or 'focused'."""
        if ref == "focused":
            window = self.wm.focused_window
        else:
            window = self.wm.get_window(ref)
            if window is None:
                by_app = self.wm.get_windows_by_app(ref)
                window = by_app[0] if by_app else None
        if window is None:
            raise SessionError(f"No window matches {ref!r}")
        return window

    def log_window_events(self) -> None:
        """Log every window lifecycle event at INFO level."""
        def _log_event(event: WindowEvent, window: Window, payload: dict[str, Any]) -> None:
            extra = {k: v for k, v in payload.items() if k not in ("window_id", "app_id")}
            log.info(
                "EVENT %-12s %s (%s)%s",
                event.value,
                window.id,
                window.app_id,
                f" {extra}" if extra else "",
            )

        self.wm.on_window_event(_log_event)

    # ------------------------------------------------------------------
    # Interpreter
    # ------------------------------------------------------------------
    def execute(self, line: str) -> bool:
        """
        Run one script line.

        Returns:
            False for blank lines and comments, True otherwise.

        Raises:
            SessionError: Unknown command or bad arguments.
        """
        line = line.strip()
        if not line or line.startswith("#"):
            return False

        try:
            parts = shlex.split(line)
        except ValueError as exc:
            raise SessionError(f"Cannot parse {line!r}: {exc}") from exc

        name, args = parts[0].lower(), parts[1:]
        handler = self._handlers.get(name)
        if handler is None:
            raise SessionError(f"Unknown command {name!r}")

        log.debug("> %s", line)
        handler(args)
        return True

    def run_script(self, lines: Iterable[str]) -> int:
        """
        Run every line, logging failures and carrying on.

        Returns:
            Number of lines that failed.
        """
        failures = 0
        for lineno, line in enumerate(lines, start=1):
            try:
                self.execute(line)
            except SessionError as exc:
                failures += 1
                log.error("line %d: %s", lineno, exc)
        return failures

    @staticmethod
    def _expect(args: list[str], count: int, usage: str) -> None:
        if len(args) < count:
            raise SessionError(f"usage: {usage}")

    @staticmethod
    def _number(value: str) -> float:
        try:
            return float(value)
        except ValueError as exc:
            raise SessionError(f"Not a number: {value!r}") from exc

    # ------------------------------------------------------------------
    # Command handlers
    # ------------------------------------------------------------------
    def _cmd_launch(self, args: list[str]) -> None:
        self._expect(args, 1, "launch <app> [url]")
        app_id = args[0]
        if app_id == "browser" and len(args) > 1:
            self.launcher.launch(app_id, url=args[1])
        elif app_id == "preferences" and len(args) > 1:
            self.launcher.launch(app_id, initial_pane=args[1])
        elif self.launch(app_id) is None and not self.launcher.is_known(app_id):
            raise SessionError(f"Unknown app {app_id!r}")

    def _cmd_open(self, args: list[str]) -> None:
        self._expect(args, 1, "open <title> [app_id]")
        config = {"title": args[0]}
        if len(args) > 1:
            config["app_id"] = args[1]
        window = self.wm.create_window(config)
        if window is not None:
            window.show()

    def _cmd_file(self, args: list[str]) -> None:
        self._expect(args, 1, "file <name> [pdf|text]")
        file_type = args[1] if len(args) > 1 else "text"
        self.launcher.open_file(args[0], file_type=file_type)

    def _cmd_key(self, args: list[str]) -> None:
        self._expect(args, 1, "key <combo>")
        try:
            event = KeyEvent.from_combo(args[0])
        except ComboParseError as exc:
            raise SessionError(str(exc)) from exc
        consumed = self.wm.handle_key(event)
        log.debug("key %s consumed=%s", args[0], consumed)

    def _cmd_click(self, args: list[str]) -> None:
        self._expect(args, 1, "click <win>")
        self.resolve(args[0]).pointer_down()

    def _cmd_desktop(self, args: list[str]) -> None:
        self.wm.pointer_down_desktop()

    def _cmd_drag(self, args: list[str]) -> None:
        self._expect(args, 3, "drag <win> dx dy")
        window = self.resolve(args[0])
        dx, dy = self._number(args[1]), self._number(args[2])

        bar = window.titlebar_rect
        start = Point(bar.x + _TITLEBAR_GRAB_X, bar.y + bar.h / 2)
        window.pointer_down()
        if window.start_drag(start):
            window.pointer_move(start.offset(dx, dy))
        window.pointer_up()

    def _cmd_resize(self, args: list[str]) -> None:
        self._expect(args, 4, "resize <win> <dir> dx dy")
        window = self.resolve(args[0])
        dx, dy = self._number(args[2]), self._number(args[3])

        start = Point(0, 0)
        if window.start_resize(start, args[1]):
            window.pointer_move(start.offset(dx, dy))
        window.pointer_up()

    def _cmd_button(self, args: list[str]) -> None:
        self._expect(args, 2, "button <win> close|minimize|maximize")
        self.resolve(args[0]).press_traffic_light(args[1])

    def _cmd_dblclick(self, args: list[str]) -> None:
        self._expect(args, 1, "dblclick <win>")
        self.resolve(args[0]).double_click_titlebar()

    def _cmd_tick(self, args: list[str]) -> None:
        self._expect(args, 1, "tick <ms>")
        ms = self._number(args[0])
        if ms < 0:
            raise SessionError(f"Cannot tick backwards: {args[0]!r}")
        ran = self.scheduler.advance(ms)
        log.debug("tick %s ran %d callback(s)", args[0], ran)

    def _cmd_viewport(self, args: list[str]) -> None:
        self._expect(args, 2, "viewport <w> <h>")
        self.viewport.resize(self._number(args[0]), self._number(args[1]))

    def _cmd_quit(self, args: list[str]) -> None:
        self._expect(args, 1, "quit <app>")
        self.dock.force_quit(args[0])

    def _cmd_run(self, args: list[str]) -> None:
        self._expect(args, 1, "run <command> [args...]")
        command = self.dispatcher.get(args[0])
        if command is None:
            raise SessionError(f"Unknown dispatcher command {args[0]!r}")
        if not self.dispatcher.execute(command.name, *args[1:]):
            raise SessionError(f"Command failed: run {command.usage}")

    def _cmd_state(self, args: list[str]) -> None:
        log.info("\n%s", self.wm.dump_state())

    def _cmd_stats(self, args: list[str]) -> None:
        log.info("stats: %s", self.wm.stats())

    def _cmd_commands(self, args: list[str]) -> None:
        log.info("\n%s\n\n%s", self.dispatcher.dump_state(), self.wm.shortcuts.dump_state())

    def _cmd_dock(self, args: list[str]) -> None:
        log.info("\n%s", self.dock.dump_state())

    def close(self) -> None:
        self.wm.shutdown()
        self.scheduler.cancel_all()
