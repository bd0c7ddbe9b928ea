"""
linkos.core.combo_parser - Keyboard combo parser.

Converts readable strings such as "meta+shift+w" into the
(modifiers, key) pair used by ShortcutManager, and normalizes the key
names reported by the host (DOM-style ``KeyboardEvent.key`` values like
"Tab", "`", "W", "ArrowLeft") to the same vocabulary.

Features:
    - Aliases: meta = cmd = command = super = win, ctrl = control,
      alt = option.
    - Case-insensitive: "Meta+Shift+W" == "meta+shift+w".
    - Validation: clear error if the combo is invalid.
"""

from __future__ import annotations

import logging

log = logging.getLogger(__name__)


# ============================================================================
# Modifier flags
# ============================================================================
MOD_META = 0x1
MOD_CTRL = 0x2
MOD_ALT = 0x4
MOD_SHIFT = 0x8

_MODIFIER_MAP: dict[str, int] = {
    "meta": MOD_META,
    "cmd": MOD_META,
    "command": MOD_META,
    "super": MOD_META,
    "win": MOD_META,
    "ctrl": MOD_CTRL,
    "control": MOD_CTRL,
    "alt": MOD_ALT,
    "option": MOD_ALT,
    "opt": MOD_ALT,
    "shift": MOD_SHIFT,
}

_MODIFIER_NAMES: list[tuple[int, str]] = [
    (MOD_META, "Meta"),
    (MOD_CTRL, "Ctrl"),
    (MOD_ALT, "Alt"),
    (MOD_SHIFT, "Shift"),
]


# ============================================================================
# Key names
# ============================================================================
# Canonical key names.  Letters and digits are themselves.
_KEY_NAMES: set[str] = set()

# alias -> canonical name (includes DOM KeyboardEvent.key spellings)
_KEY_ALIASES: dict[str, str] = {}


def _build_key_map() -> None:
    """Populate the key name tables on first use."""
    if _KEY_NAMES:
        return

    for i in range(26):
        _KEY_NAMES.add(chr(ord("a") + i))
    for i in range(10):
        _KEY_NAMES.add(str(i))
    for i in range(1, 25):
        _KEY_NAMES.add(f"f{i}")

    _KEY_NAMES.update(
        {
            "tab", "enter", "escape", "space", "backspace", "delete",
            "insert", "home", "end", "pageup", "pagedown",
            "left", "up", "right", "down",
            "backquote", "minus", "equals", "comma", "period", "slash",
            "semicolon", "quote", "backslash", "bracketleft", "bracketright",
        }
    )

    _KEY_ALIASES.update(
        {
            "return": "enter",
            "esc": "escape",
            "del": "delete",
            "ins": "insert",
            "pgup": "pageup",
            "pgdn": "pagedown",
            "arrowleft": "left",
            "arrowup": "up",
            "arrowright": "right",
            "arrowdown": "down",
            "grave": "backquote",
            "tilde": "backquote",
            "`": "backquote",
            "~": "backquote",
            " ": "space",
            "spacebar": "space",
            "-": "minus",
            "_": "minus",
            "=": "equals",
            "+": "equals",
            ",": "comma",
            ".": "period",
            "/": "slash",
            ";": "semicolon",
            "'": "quote",
            "\\": "backslash",
            "[": "bracketleft",
            "]": "bracketright",
        }
    )


# ============================================================================
# Public API
# ============================================================================

class ComboParseError(ValueError):
    """Raised when a combo string cannot be parsed."""
    pass


def normalize_key(key: str) -> str | None:
    """
    Map a host key name to its canonical form.

    Single characters are matched before lower-casing so punctuation
    aliases ("`", " ") survive; names are case-insensitive ("Tab", "W").

    Returns:
        The canonical key name, or None if unknown.
    """
    _build_key_map()

    if not key:
        return None
    if key in _KEY_ALIASES:
        return _KEY_ALIASES[key]

    lowered = key.strip().lower()
    if lowered in _KEY_NAMES:
        return lowered
    return _KEY_ALIASES.get(lowered)


def parse_combo(combo: str) -> tuple[int, str]:
    """
    Parse a keyboard combo string into (modifiers, key).

    Args:
        combo: Human-readable combo like "meta+tab", "meta+shift+w",
               "cmd+backquote". Case-insensitive. Parts separated by '+'.

    Returns:
        Tuple of (modifier_flags, canonical_key_name).

    Raises:
        ComboParseError: If the combo is empty, has no key part, contains
                         unknown tokens, or has duplicate modifiers.
    """
    _build_key_map()

    if not combo or not combo.strip():
        raise ComboParseError("Empty combo string")

    parts = [p.strip().lower() for p in combo.split("+")]
    parts = [p for p in parts if p]

    if not parts:
        raise ComboParseError(f"No valid parts in combo: {combo!r}")

    modifiers = 0
    key: str | None = None

    for part in parts:
        if part in _MODIFIER_MAP:
            flag = _MODIFIER_MAP[part]
            if modifiers & flag:
                raise ComboParseError(
                    f"Duplicate modifier {part!r} in combo: {combo!r}"
                )
            modifiers |= flag
            continue

        canonical = normalize_key(part)
        if canonical is None:
            raise ComboParseError(
                f"Unknown key or modifier: {part!r} in combo: {combo!r}"
            )
        if key is not None:
            raise ComboParseError(
                f"Multiple key parts in combo: {combo!r}. "
                f"Only one non-modifier key is allowed."
            )
        key = canonical

    if key is None:
        raise ComboParseError(
            f"No key found in combo: {combo!r}. "
            f"A combo must have exactly one non-modifier key."
        )

    return modifiers, key


def combo_to_str(modifiers: int, key: str) -> str:
    """
    Convert (modifiers, key) back to a human-readable string.

    Useful for logging and error messages.
    """
    parts = [name for flag, name in _MODIFIER_NAMES if modifiers & flag]
    parts.append(key.upper() if len(key) == 1 else key.capitalize())
    return "+".join(parts)


def is_valid_combo(combo: str) -> bool:
    """Check if a combo string is valid without raising."""
    try:
        parse_combo(combo)
        return True
    except ComboParseError:
        return False
