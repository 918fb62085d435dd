"""
ICCCM Client Protocols

WM_PROTOCOLS handling: polite closing through WM_DELETE_WINDOW and focus
hand-over through WM_TAKE_FOCUS, with forced fallbacks for clients that
don't take part.
"""

from __future__ import annotations
import logging
from typing import Tuple, TYPE_CHECKING

from Xlib import X

from .connection import XRequestError
from .protocol import decode_atoms

if TYPE_CHECKING:
    from .atoms import AtomRegistry
    from .connection import XConnection

logger = logging.getLogger(__name__)


class ClientProtocols:
    """Talks to client windows the way the ICCCM expects."""

    def __init__(self, conn: "XConnection", atoms: "AtomRegistry"):
        self.conn = conn
        self.atoms = atoms

    def supported(self, window: int) -> Tuple[int, ...]:
        """Atoms listed in WINDOW's WM_PROTOCOLS property."""
        return decode_atoms(self.conn.get_property(window, self.atoms.WM_PROTOCOLS))

    def send_message(self, window: int, protocol: int, time: int):
        """Send a WM_PROTOCOLS client message naming PROTOCOL."""
        self.conn.send_client_message(
            window, self.atoms.WM_PROTOCOLS, [protocol, time, 0, 0, 0]
        )

    def close(self, window: int) -> bool:
        """Ask WINDOW to close itself, destroying it if it can't be asked.

        Returns:
            True if a WM_DELETE_WINDOW message was sent, False if the window
            was destroyed
        """
        if self.atoms.WM_DELETE_WINDOW in self.supported(window):
            self.send_message(window, self.atoms.WM_DELETE_WINDOW, X.CurrentTime)
            return True
        logger.info("Window %#x does not support WM_DELETE_WINDOW, destroying", window)
        self.destroy(window)
        return False

    def destroy(self, window: int):
        self.conn.destroy_window(window)

    def focus(self, window: int, time: int) -> bool:
        """Give WINDOW the input focus.

        Windows that take part in WM_TAKE_FOCUS are asked to take it
        themselves; TIME must be the timestamp of the triggering event.
        Everything else gets an explicit SetInputFocus.

        Returns:
            True if focus was handed over through WM_TAKE_FOCUS
        """
        try:
            protocols = self.supported(window)
        except XRequestError as e:
            logger.debug("No WM_PROTOCOLS for %#x: %s", window, e)
            protocols = ()

        if self.atoms.WM_TAKE_FOCUS in protocols:
            self.send_message(window, self.atoms.WM_TAKE_FOCUS, time)
            return True

        self.conn.set_input_focus(window, X.RevertToNone, time)
        return False

    def focus_root(self):
        """Park the input focus on the root window."""
        self.conn.set_input_focus(self.conn.root, X.RevertToPointerRoot, X.CurrentTime)
