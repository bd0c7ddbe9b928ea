"""
linkos.core.commands - Named command registry.

Shortcut settings and session scripts refer to desktop actions by name
("cycle_windows", "close_app terminal").  The CommandDispatcher resolves
those names to callables and checks the number of string arguments a
script line supplies against the callable's signature before running it.

    dispatcher = CommandDispatcher()
    dispatcher.register("close_app", wm.close_app, "Close an app", "app")
    dispatcher.execute("close_app", "terminal")

Commands defined inline can use the decorator form:

    @dispatcher.command("restore_window", group="window")
    def restore_window():
        ...
"""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from linkos.core.manager import WindowManager

log = logging.getLogger(__name__)


CommandFn = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class Command:
    """A named action plus the argument names scripts must / may supply."""

    name: str
    action: CommandFn
    help: str = ""
    group: str = "general"
    required: tuple[str, ...] = ()
    optional: tuple[str, ...] = ()
    variadic: bool = False

    @property
    def usage(self) -> str:
        parts = [self.name]
        parts += [f"<{p}>" for p in self.required]
        parts += [f"[{p}]" for p in self.optional]
        if self.variadic:
            parts.append("...")
        return " ".join(parts)

    def accepts(self, count: int) -> bool:
        if count < len(self.required):
            return False
        return self.variadic or count <= len(self.required) + len(self.optional)


def _positional_params(fn: CommandFn) -> tuple[tuple[str, ...], tuple[str, ...], bool]:
    """(required, optional, has *args) of the positional parameters of *fn*."""
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return (), (), True

    required: list[str] = []
    optional: list[str] = []
    variadic = False
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            variadic = True
        elif param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            if param.default is inspect.Parameter.empty:
                required.append(param.name)
            else:
                optional.append(param.name)
    return tuple(required), tuple(optional), variadic


class CommandDispatcher:
    """Name -> Command registry used by shortcuts and scripts."""

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}

    @property
    def count(self) -> int:
        return len(self._commands)

    @property
    def names(self) -> list[str]:
        return sorted(self._commands)

    def register(
        self,
        name: str,
        action: CommandFn,
        help: str = "",
        group: str = "general",
    ) -> Command:
        """
        Add (or replace) the command *name*.

        Args:
            name:   Name used by settings and scripts.
            action: Callable run by execute(); its positional parameters
                    define the arguments a script line must supply.
            help:   One-line description shown by dump_state().
            group:  "window", "manager" or "app".

        Returns:
            The registered Command.
        """
        required, optional, variadic = _positional_params(action)
        command = Command(name, action, help, group, required, optional, variadic)

        if name in self._commands:
            log.info("Command %s redefined", name)
        self._commands[name] = command
        log.debug("Command added: %s", command.usage)
        return command

    def command(
        self, name: str, help: str = "", group: str = "general"
    ) -> Callable[[CommandFn], CommandFn]:
        """Decorator form of register()."""

        def wrap(fn: CommandFn) -> CommandFn:
            self.register(name, fn, help, group)
            return fn

        return wrap

    def unregister(self, name: str) -> bool:
        return self._commands.pop(name, None) is not None

    def get(self, name: str) -> Command | None:
        return self._commands.get(name)

    def has(self, name: str) -> bool:
        return name in self._commands

    def execute(self, name: str, *args: str) -> bool:
        """
        Run command *name* with positional string arguments.

        Returns:
            False when the command is unknown, gets the wrong number of
            arguments or raises; True otherwise.
        """
        command = self._commands.get(name)
        if command is None:
            log.warning("Unknown command: %s", name)
            return False
        if not command.accepts(len(args)):
            log.warning("Bad arguments for %s %s (usage: %s)", name, list(args), command.usage)
            return False

        log.debug("Run %s %s", name, " ".join(args))
        try:
            command.action(*args)
        except Exception:
            log.exception("Command %s failed", name)
            return False
        return True

    def list_commands(self, group: str | None = None) -> list[Command]:
        return [
            self._commands[n]
            for n in self.names
            if group is None or self._commands[n].group == group
        ]

    def dump_state(self) -> str:
        """Commands grouped by group, with usage and help."""
        grouped: dict[str, list[Command]] = defaultdict(list)
        for command in self.list_commands():
            grouped[command.group].append(command)

        lines = [f"=== CommandDispatcher: {len(self._commands)} commands ==="]
        for group in sorted(grouped):
            lines.append(f"  [{group}]")
            for command in grouped[group]:
                lines.append(f"    {command.usage:<28s} {command.help}")
        return "\n".join(lines)


# ============================================================================
# Built-in commands
# ============================================================================
def build_default_commands(dispatcher: CommandDispatcher, wm: WindowManager) -> None:
    """
    Register the window, manager and app commands of the desktop.

    Window commands act on the focused window (or, for ``focus`` and
    ``close``, on the window whose id is given).
    """

    def on_focused(action: Callable[[Any], Any]) -> CommandFn:
        def run() -> None:
            window = wm.focused_window
            if window is not None:
                action(window)
        return run

    dispatcher.register("close_window", on_focused(lambda w: w.close()),
                        "Close the focused window", "window")
    dispatcher.register("minimize_window", on_focused(lambda w: w.minimize()),
                        "Minimize the focused window", "window")
    dispatcher.register("maximize_window", on_focused(lambda w: w.toggle_maximize()),
                        "Toggle maximize on the focused window", "window")

    @dispatcher.command("restore_window", "Restore the last minimized window", "window")
    def restore_window() -> None:
        for window_id in reversed(wm.window_stack):
            window = wm.get_window(window_id)
            if window is not None and window.is_minimized:
                window.restore()
                return

    @dispatcher.command("focus", "Focus a window by id", "window")
    def focus(window_id: str) -> None:
        wm.focus_window(window_id)

    @dispatcher.command("close", "Close a window by id", "window")
    def close(window_id: str) -> None:
        wm.close_requested(window_id)

    dispatcher.register("cycle_windows", wm.cycle_windows, "Focus the next visible window", "manager")
    dispatcher.register("cycle_app_windows", wm.cycle_app_windows,
                        "Focus the next window of the focused app", "manager")
    dispatcher.register("close_all", wm.close_all_windows, "Close every window", "manager")
    dispatcher.register("hide_all", wm.hide_all_windows, "Hide every window", "manager")
    dispatcher.register("show_all", wm.show_all_windows, "Show hidden windows", "manager")
    dispatcher.register("blur_all", wm.blur_all_windows, "Drop focus", "manager")

    dispatcher.register("close_app", wm.close_app, "Close the windows of an app", "app")
    dispatcher.register("force_quit", wm.force_quit, "Destroy the windows of an app now", "app")

    log.info("Built-in commands registered: %d", dispatcher.count)
