"""
Binding Manager

Handles keyboard bindings for window manager actions.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from .connection import XRequestError
from .keysyms import XK
from .layouts import Direction
from .protocol import Modifiers

if TYPE_CHECKING:
    from .connection import XConnection

logger = logging.getLogger(__name__)


@dataclass
class KeyBinding:
    """Represents a keyboard binding."""

    keysym: int
    modifiers: Modifiers
    event_topic: str  # Event topic to publish (e.g., 'cmd.close_window')
    event_data: dict = field(default_factory=dict)  # Additional event parameters
    exact: bool = True  # False: extra modifiers in the state are tolerated

    def matches(self, state: int) -> bool:
        """Check a key event's raw modifier state against this binding."""
        if self.exact:
            return state == self.modifiers
        return (state & self.modifiers) == self.modifiers


class Keymap:
    """The server's keycode to keysym table, loaded once at startup."""

    def __init__(self, rows: Dict[int, List[int]]):
        self.rows = rows

    @classmethod
    def load(cls, conn: "XConnection") -> "Keymap":
        return cls(conn.keyboard_mapping())

    def primary(self, keycode: int) -> Optional[int]:
        """Unshifted keysym of KEYCODE, None if the keycode is unknown."""
        row = self.rows.get(keycode)
        if not row:
            return None
        return row[0]

    def keycodes_for(self, keysym: int) -> List[int]:
        """Every keycode whose keysym row contains KEYSYM."""
        return [code for code, row in sorted(self.rows.items()) if keysym in row]


class BindingManager:
    """Manages keyboard bindings.

    Bindings are grabbed on the root window. A key press is dispatched on the
    primary keysym of its keycode and the raw modifier state, and publishes
    the bound command event.
    """

    def __init__(self, conn: "XConnection", keymap: Keymap):
        """Initialize binding manager.

        Args:
            conn: X connection used to grab keys
            keymap: Keycode table resolving bindings to physical keys
        """
        self.conn = conn
        self.keymap = keymap
        self.key_bindings: List[KeyBinding] = []
        self.grabs: Dict[Tuple[int, int], List[int]] = {}  # (keysym, mods) -> codes

    def bind_key(
        self,
        keysym: int,
        modifiers: Modifiers,
        event_topic: str,
        exact: bool = True,
        **event_data,
    ) -> KeyBinding:
        """Register a key binding that publishes a command event.

        Args:
            keysym: The key symbol
            modifiers: Modifier keys (Ctrl, Alt, etc.)
            event_topic: The command event topic to publish (e.g., 'cmd.close_window')
            exact: Whether the event state must equal MODIFIERS
            **event_data: Optional data to pass with the event (e.g., direction=Direction.UP)
        """
        binding = KeyBinding(keysym, modifiers, event_topic, event_data, exact)
        self.key_bindings.append(binding)
        return binding

    def setup_default_bindings(self):
        """Register the fixed key binding table."""
        from . import topics

        alt = Modifiers.MOD1
        ctrl = Modifiers.CTRL
        shift = Modifiers.SHIFT

        # Window manager
        self.bind_key(XK.BackSpace, ctrl | alt, topics.CMD_QUIT, exact=False)
        self.bind_key(XK.e, alt, topics.CMD_SPAWN_TERMINAL, exact=False)

        # Window lifecycle
        self.bind_key(XK.q, alt, topics.CMD_CLOSE_WINDOW)
        self.bind_key(XK.q, alt | shift, topics.CMD_DESTROY_WINDOW)

        # Window movement
        self.bind_key(XK.h, alt, topics.CMD_MOVE_WINDOW, direction=Direction.LEFT)
        self.bind_key(XK.j, alt, topics.CMD_MOVE_WINDOW, direction=Direction.DOWN)
        self.bind_key(XK.k, alt, topics.CMD_MOVE_WINDOW, direction=Direction.UP)
        self.bind_key(XK.l, alt, topics.CMD_MOVE_WINDOW, direction=Direction.RIGHT)

        # Resizing
        self.bind_key(XK.Up, ctrl | alt, topics.CMD_RESIZE_WINDOW, direction=Direction.UP)
        self.bind_key(
            XK.Down, ctrl | alt, topics.CMD_RESIZE_WINDOW, direction=Direction.DOWN
        )
        self.bind_key(
            XK.Left, ctrl | alt, topics.CMD_RESIZE_COLUMN, direction=Direction.LEFT
        )
        self.bind_key(
            XK.Right, ctrl | alt, topics.CMD_RESIZE_COLUMN, direction=Direction.RIGHT
        )

        # Columns
        self.bind_key(XK.n, ctrl | shift, topics.CMD_NEW_COLUMN)
        self.bind_key(XK.d, ctrl | shift, topics.CMD_DELETE_EMPTY_COLUMNS)

    def grab_keys(self):
        """Grab every bound key on the root window.

        A failed grab only loses that binding.
        """
        for binding in self.key_bindings:
            codes = self.keymap.keycodes_for(binding.keysym)
            if not codes:
                logger.warning(
                    "No keycode produces keysym %#x, binding for %s is unavailable",
                    binding.keysym,
                    binding.event_topic,
                )
            grabbed = []
            for code in codes:
                try:
                    self.conn.grab_key(code, binding.modifiers)
                except XRequestError as e:
                    logger.warning("Grabbing keycode %d: %s", code, e)
                    continue
                grabbed.append(code)
            self.grabs[(binding.keysym, int(binding.modifiers))] = grabbed

    def find_binding(self, keycode: int, state: int) -> Optional[KeyBinding]:
        """Binding for a key press, dispatched on the keycode's primary keysym."""
        keysym = self.keymap.primary(keycode)
        if keysym is None:
            return None
        for binding in self.key_bindings:
            if binding.keysym == keysym and binding.matches(state):
                return binding
        return None

    def handle_key_press(self, keycode: int, state: int) -> Optional[KeyBinding]:
        """Publish the command bound to a key press.

        Args:
            keycode: Physical key from the event
            state: Raw modifier state from the event
        """
        from pubsub import pub

        binding = self.find_binding(keycode, state)
        if binding is None:
            logger.debug("Unbound key press: keycode %d state %#x", keycode, state)
            return None

        pub.sendMessage(binding.event_topic, **binding.event_data)
        return binding
