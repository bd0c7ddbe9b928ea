"""
linkos.core.keybinds - Keyboard shortcut registry.

The host forwards every key-down as a KeyEvent; ShortcutManager looks up
the binding for its (modifiers, key) pair and runs the callback.

The ShortcutManager:
    1. Registers key combos with callbacks (and an optional guard).
    2. Refuses a second binding for a combo already in use.
    3. Reports whether a key event was consumed, so the host can
       suppress its default action.

Typical usage:
    sk = ShortcutManager()
    sk.register_combo("meta+tab", wm.cycle_windows, "Cycle windows")
    sk.dispatch(KeyEvent("Tab", meta=True))
    sk.unregister_all()
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from linkos.core.combo_parser import (
    MOD_ALT,
    MOD_CTRL,
    MOD_META,
    MOD_SHIFT,
    combo_to_str,
    normalize_key,
    parse_combo,
)

log = logging.getLogger(__name__)


# Type for shortcut callbacks: called with no arguments
ShortcutCallback = Callable[[], None]

# Guard evaluated at dispatch time; the binding is skipped when False
ShortcutGuard = Callable[[], bool]


@dataclass(frozen=True, slots=True)
class KeyEvent:
    """A key-down as reported by the host (DOM-style key name + modifiers)."""

    key: str
    meta: bool = False
    ctrl: bool = False
    alt: bool = False
    shift: bool = False

    @property
    def modifiers(self) -> int:
        mods = 0
        if self.meta:
            mods |= MOD_META
        if self.ctrl:
            mods |= MOD_CTRL
        if self.alt:
            mods |= MOD_ALT
        if self.shift:
            mods |= MOD_SHIFT
        return mods

    @property
    def normalized_key(self) -> str | None:
        return normalize_key(self.key)

    @property
    def combo(self) -> tuple[int, str | None]:
        return (self.modifiers, self.normalized_key)

    @classmethod
    def from_combo(cls, combo: str) -> KeyEvent:
        """Build the event a user pressing *combo* would produce."""
        modifiers, key = parse_combo(combo)
        return cls(
            key=key,
            meta=bool(modifiers & MOD_META),
            ctrl=bool(modifiers & MOD_CTRL),
            alt=bool(modifiers & MOD_ALT),
            shift=bool(modifiers & MOD_SHIFT),
        )


@dataclass(frozen=True, slots=True)
class Shortcut:
    """Represents a registered shortcut binding."""

    id: int
    modifiers: int
    key: str
    callback: ShortcutCallback
    description: str
    when: Optional[ShortcutGuard] = None

    @property
    def combo_str(self) -> str:
        return combo_to_str(self.modifiers, self.key)


class ShortcutManager:
    """
    Registry of keyboard shortcuts.

    Each shortcut gets a unique ID.  When the host reports a key-down,
    dispatch() finds the matching binding and runs its callback.
    """

    def __init__(self) -> None:
        # shortcut_id -> Shortcut
        self._shortcuts: dict[int, Shortcut] = {}
        # Auto-incrementing ID counter (starting at 1)
        self._next_id: int = 1
        self.enabled: bool = True

    @property
    def count(self) -> int:
        """Number of registered shortcuts."""
        return len(self._shortcuts)

    @property
    def shortcuts(self) -> list[Shortcut]:
        """List of all registered shortcuts."""
        return list(self._shortcuts.values())

    def register(
        self,
        modifiers: int,
        key: str,
        callback: ShortcutCallback,
        description: str = "",
        when: Optional[ShortcutGuard] = None,
    ) -> int | None:
        """
        Register a shortcut.

        Args:
            modifiers:   Combination of MOD_META, MOD_CTRL, MOD_ALT, MOD_SHIFT.
            key:         Canonical key name (see combo_parser).
            callback:    Function to call when the shortcut is pressed.
            description: Human-readable description for logging/debug.
            when:        Optional guard; the shortcut only fires while it
                         returns True.

        Returns:
            The shortcut ID if registered, None if the combo is taken.
        """
        existing = self.find_by_combo(modifiers, key)
        if existing is not None:
            log.error(
                "Failed to register shortcut %s (%s): already bound to %r",
                combo_to_str(modifiers, key),
                description,
                existing.description,
            )
            return None

        shortcut_id = self._next_id
        self._shortcuts[shortcut_id] = Shortcut(
            id=shortcut_id,
            modifiers=modifiers,
            key=key,
            callback=callback,
            description=description,
            when=when,
        )
        self._next_id += 1

        log.info(
            "Shortcut registered: id=%d %s  %s",
            shortcut_id,
            combo_to_str(modifiers, key),
            description,
        )
        return shortcut_id

    def register_combo(
        self,
        combo: str,
        callback: ShortcutCallback,
        description: str = "",
        when: Optional[ShortcutGuard] = None,
    ) -> int | None:
        """
        Register a shortcut from a combo string such as "meta+shift+w".

        Raises:
            ComboParseError: If *combo* is not a valid combo.
        """
        modifiers, key = parse_combo(combo)
        return self.register(modifiers, key, callback, description, when)

    def replace(
        self,
        shortcut_id: int,
        combo: str,
        callback: ShortcutCallback,
        description: str = "",
    ) -> int | None:
        """
        Rebind an existing shortcut (used when settings change).

        Returns:
            The new shortcut ID, or None if the old one was not found or
            the new combo could not be registered.
        """
        old = self._shortcuts.pop(shortcut_id, None)
        if old is None:
            log.warning("replace: shortcut id=%d not found", shortcut_id)
            return None

        new_id = self.register_combo(combo, callback, description, old.when)
        if new_id is None:
            log.error(
                "Shortcut replace failed: old_id=%d was removed but %r "
                "could not be registered (%s)",
                shortcut_id,
                combo,
                description,
            )
        return new_id

    def find_by_combo(self, modifiers: int, key: str) -> Shortcut | None:
        """Find a registered shortcut by its modifier+key combination."""
        for sc in self._shortcuts.values():
            if sc.modifiers == modifiers and sc.key == key:
                return sc
        return None

    def unregister(self, shortcut_id: int) -> bool:
        """Unregister a shortcut by its ID."""
        shortcut = self._shortcuts.pop(shortcut_id, None)
        if shortcut is None:
            return False
        log.info("Shortcut unregistered: id=%d %s", shortcut_id, shortcut.description)
        return True

    def unregister_all(self) -> None:
        """Unregister all shortcuts. Call this on shutdown."""
        count = len(self._shortcuts)
        self._shortcuts.clear()
        log.info("All shortcuts unregistered (%d total)", count)

    def dispatch(self, event: KeyEvent) -> bool:
        """
        Dispatch a key event to the matching shortcut.

        Returns:
            True if a callback was found and executed (the host should
            prevent the key's default action).
        """
        if not self.enabled:
            return False

        modifiers, key = event.combo
        if key is None:
            return False

        shortcut = self.find_by_combo(modifiers, key)
        if shortcut is None:
            return False
        if shortcut.when is not None and not shortcut.when():
            return False

        log.debug("Shortcut dispatched: %s", shortcut.description)
        try:
            shortcut.callback()
        except Exception:
            log.exception("Error in shortcut callback: %s", shortcut.description)

        return True

    def dump_state(self) -> str:
        """Return a formatted string of all registered shortcuts."""
        lines = [
            f"=== ShortcutManager: {len(self._shortcuts)} shortcuts ===",
            "",
        ]
        for sc in self._shortcuts.values():
            lines.append(f"  id={sc.id:3d}  {sc.combo_str:<18s}  {sc.description}")
        return "\n".join(lines)
