"""
X11 Protocol Value Types

Small value types and decoders shared by the window manager components:
modifier and event masks, screen areas, and the atom-list property decoder.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import IntFlag
from typing import Any, Optional, Tuple
import struct

from Xlib import X


class Modifiers(IntFlag):
    """Keyboard modifier state bits (as reported in key events)."""

    NONE = 0
    SHIFT = X.ShiftMask
    LOCK = X.LockMask
    CTRL = X.ControlMask
    MOD1 = X.Mod1Mask  # Alt
    MOD2 = X.Mod2Mask  # Num Lock on most layouts
    MOD3 = X.Mod3Mask
    MOD4 = X.Mod4Mask  # Super/Logo
    MOD5 = X.Mod5Mask


class EventMask(IntFlag):
    """Event selection bits used by the window manager."""

    NONE = X.NoEventMask
    KEY_PRESS = X.KeyPressMask
    KEY_RELEASE = X.KeyReleaseMask
    BUTTON_PRESS = X.ButtonPressMask
    BUTTON_RELEASE = X.ButtonReleaseMask
    ENTER_WINDOW = X.EnterWindowMask
    STRUCTURE_NOTIFY = X.StructureNotifyMask
    SUBSTRUCTURE_REDIRECT = X.SubstructureRedirectMask


# Root window selection that claims the window manager role
MANAGER_EVENT_MASK = (
    EventMask.KEY_PRESS
    | EventMask.KEY_RELEASE
    | EventMask.BUTTON_PRESS
    | EventMask.BUTTON_RELEASE
    | EventMask.STRUCTURE_NOTIFY
    | EventMask.SUBSTRUCTURE_REDIRECT
)

# Selection placed on every managed client window
CLIENT_EVENT_MASK = EventMask.STRUCTURE_NOTIFY | EventMask.ENTER_WINDOW


@dataclass(frozen=True)
class Area:
    """Screen rectangle with position and dimensions."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0


def decode_atoms(prop: Optional[Any]) -> Tuple[int, ...]:
    """
    Decode an ATOM[] property reply into a tuple of atom ids.

    Accepts a python-xlib GetProperty reply (or anything with ``format`` and
    ``value`` attributes). The value may be the array python-xlib builds for
    32-bit properties, or raw bytes holding little-endian CARD32 values.
    Missing properties and properties of another format decode to ``()``.
    """
    if prop is None or getattr(prop, "format", 0) != 32:
        return ()

    value = prop.value
    if isinstance(value, (bytes, bytearray)):
        count = len(value) // 4
        return struct.unpack(f"<{count}I", bytes(value[: count * 4]))
    return tuple(int(atom) for atom in value)
