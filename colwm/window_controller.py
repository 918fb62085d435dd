"""
Window Controller

Handles window lifecycle commands (close, destroy, quit).
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING

from .connection import XRequestError

if TYPE_CHECKING:
    from .icccm import ClientProtocols

logger = logging.getLogger(__name__)


class WindowController:
    """Handles window lifecycle commands.

    This component subscribes to command events and executes window operations.
    It tracks the active window via the event bus to know which window to operate on.

    Responsibilities:
    - CMD_CLOSE_WINDOW: Close the active window (WM_DELETE_WINDOW if supported)
    - CMD_DESTROY_WINDOW: Destroy the active window
    - CMD_QUIT: Quit window manager
    """

    def __init__(self, bus, protocols: "ClientProtocols", window_manager):
        """Initialize window controller.

        Args:
            bus: Event bus instance (Pypubsub)
            protocols: ICCCM helper used to close windows
            window_manager: Object with a stop() method ending the event loop
        """
        self.bus = bus
        self.protocols = protocols
        self.window_manager = window_manager

        # Track active window via bus subscriptions
        self.active_window = None

        self._setup_subscriptions()

    def _setup_subscriptions(self):
        """Subscribe to focus state and window command events."""
        from pubsub import pub
        from . import topics

        # Subscribe to focus state changes
        pub.subscribe(self._on_focus_changed, topics.FOCUS_CHANGED)

        # Subscribe to window command events
        pub.subscribe(self._on_close_window, topics.CMD_CLOSE_WINDOW)
        pub.subscribe(self._on_destroy_window, topics.CMD_DESTROY_WINDOW)
        pub.subscribe(self._on_quit, topics.CMD_QUIT)

    def _on_focus_changed(self, window):
        """Track active window from FocusManager."""
        self.active_window = window

    def _on_close_window(self):
        """Handle CMD_CLOSE_WINDOW command."""
        if self.active_window is None:
            return
        try:
            self.protocols.close(self.active_window)
        except XRequestError as e:
            logger.warning("Could not close window %#x: %s", self.active_window, e)
        # The destroy notification will clear the active window

    def _on_destroy_window(self):
        """Handle CMD_DESTROY_WINDOW command."""
        if self.active_window is None:
            return
        try:
            self.protocols.destroy(self.active_window)
        except XRequestError as e:
            logger.warning("Could not destroy window %#x: %s", self.active_window, e)

    def _on_quit(self):
        """Handle CMD_QUIT command."""
        logger.info("Quit requested")
        self.window_manager.stop()
