"""
Symbolic key events and the configurable keymap.

Keys are written the way Textual names them: single characters (``"q"``),
named keys (``"enter"``, ``"escape"``, ``"up"``, ``"f1"``) and modifier chords
joined with ``+`` (``"ctrl+h"``).
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, FrozenSet, Mapping, Optional

MODIFIERS = ("ctrl", "alt", "shift")

# Named keys the controller understands.
ENTER = "enter"
ESCAPE = "escape"
BACKSPACE = "backspace"
DELETE = "delete"
UP = "up"
DOWN = "down"
LEFT = "left"
RIGHT = "right"
HOME = "home"
END = "end"
SPACE = "space"

# Textual reports some keys under aliases.
_ALIASES = {
    "return": ENTER,
    "esc": ESCAPE,
    "ctrl+i": "tab",
    "ctrl+m": ENTER,
}


@dataclass(frozen=True)
class KeyEvent:
    """One discrete key press: a key code plus the modifiers held with it."""

    code: str
    modifiers: FrozenSet[str] = field(default_factory=frozenset)

    def __str__(self) -> str:
        mods = [m for m in MODIFIERS if m in self.modifiers]
        return "+".join([*mods, self.code])

    @classmethod
    def parse(cls, spec: str) -> "KeyEvent":
        """Build an event from a key spec such as ``"q"``, ``"enter"`` or ``"ctrl+h"``."""
        raw = str(spec)
        if raw in ("+", " "):
            return cls(code=raw)
        raw = _ALIASES.get(raw.lower(), raw)
        parts = raw.split("+")
        mods = set()
        while len(parts) > 1 and parts[0].lower() in MODIFIERS:
            mods.add(parts.pop(0).lower())
        code = "+".join(parts)
        if len(code) > 1:
            code = code.lower()
        if code == SPACE and not mods:
            code = " "
        return cls(code=code, modifiers=frozenset(mods))

    @property
    def ctrl(self) -> bool:
        return "ctrl" in self.modifiers

    @property
    def alt(self) -> bool:
        return "alt" in self.modifiers

    @property
    def character(self) -> Optional[str]:
        """The printable character this key types, or ``None`` for named keys and chords."""
        if len(self.code) != 1 or self.ctrl or self.alt:
            return None
        if not self.code.isprintable():
            return None
        return self.code

    def matches(self, binding: str) -> bool:
        return self == KeyEvent.parse(binding)


@dataclass
class Keymap:
    """Key bound to each symbolic action. Overridable from the ``keys`` config section."""

    quit: str = "q"
    folder: str = "f"
    search: str = "s"
    model: str = "m"
    match: str = "c"
    help: str = "h"
    help_chord: str = "f1"
    tenant: str = "t"
    reload: str = "r"
    tab: str = "tab"

    def action_for(self, event: KeyEvent) -> Optional[str]:
        """Name of the action bound to ``event`` (first match in field order)."""
        for f in fields(self):
            if event.matches(getattr(self, f.name)):
                return f.name
        return None

    def display(self, action: str) -> str:
        """Key label for help and hint text, e.g. ``<q>`` or ``<F1>``."""
        key = str(getattr(self, action))
        if len(key) > 1:
            key = "+".join(p.capitalize() if len(p) > 1 else p for p in key.split("+"))
        return f"<{key}>"

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "Keymap":
        """
        Build a keymap from a config mapping, ignoring nothing silently.

        Raises:
            ValueError: On unknown action names or empty key specs
        """
        km = cls()
        known = {f.name for f in fields(cls)}
        for name, value in (data or {}).items():
            if name not in known:
                raise ValueError(f"Unknown key action '{name}' (expected one of: {', '.join(sorted(known))})")
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"Key for '{name}' must be a non-empty string")
            setattr(km, name, value.strip())
        return km

    def to_dict(self) -> Dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


__all__ = [
    "KeyEvent",
    "Keymap",
    "MODIFIERS",
    "ENTER",
    "ESCAPE",
    "BACKSPACE",
    "DELETE",
    "UP",
    "DOWN",
    "LEFT",
    "RIGHT",
    "HOME",
    "END",
]
