"""
linkos.config.hotkeys - Global keyboard shortcuts of the desktop.

Binds the manager-scoped combos from ShortcutSettings to dispatcher
commands.  Defaults:

    Meta + Tab          -> Cycle through visible windows
    Meta + `            -> Cycle through windows of the focused app
    Meta + Shift + W    -> Close all windows
    Meta + Alt + H      -> Hide all windows

Window-scoped combos (Meta + M minimize, Meta + W close) are not bound
here; each Window handles them itself while focused.
"""

from __future__ import annotations

import logging

from linkos.config.settings import ShortcutSettings
from linkos.core.combo_parser import ComboParseError
from linkos.core.commands import CommandDispatcher
from linkos.core.keybinds import ShortcutManager

log = logging.getLogger(__name__)


_DESCRIPTIONS: dict[str, str] = {
    "cycle_windows": "Cycle windows",
    "cycle_app_windows": "Cycle app windows",
    "close_all": "Close all windows",
    "hide_all": "Hide all windows",
}


def register_default_shortcuts(
    shortcuts: ShortcutManager,
    dispatcher: CommandDispatcher,
    settings: ShortcutSettings,
) -> int:
    """
    Register every global shortcut, linking each combo to a dispatcher command.

    Args:
        shortcuts:  The shortcut registry to fill (usually ``wm.shortcuts``).
        dispatcher: Dispatcher with the default commands already registered.
        settings:   Combo per command.

    Returns:
        Number of shortcuts registered successfully.
    """
    registered = 0

    def _bind(combo: str, command: str) -> None:
        nonlocal registered
        cmd = dispatcher.get(command)
        if cmd is None:
            log.warning("Shortcut bind: command %r not found, skipping", command)
            return
        try:
            result = shortcuts.register_combo(
                combo,
                callback=cmd.action,
                description=_DESCRIPTIONS.get(command, cmd.help),
            )
        except ComboParseError as exc:
            log.error("Shortcut bind: invalid combo for %s: %s", command, exc)
            return
        if result is not None:
            registered += 1

    for command, combo in settings.global_bindings().items():
        _bind(combo, command)

    log.info("Shortcuts registered: %d", registered)

    return registered
