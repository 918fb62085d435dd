"""
Focus Manager

Tracks the active window and hands input focus to it.
"""

from __future__ import annotations
import logging
from typing import Optional, TYPE_CHECKING

from .connection import XRequestError

if TYPE_CHECKING:
    from .icccm import ClientProtocols

logger = logging.getLogger(__name__)


class FocusManager:
    """Manages focus for windows.

    This component subscribes to pointer and window lifecycle events. It
    publishes FOCUS_CHANGED for other components to track the active window.

    Focus follows the pointer: entering a window makes it active. There is no
    retry; a failed hand-over is logged and the next enter event tries again.

    Responsibilities:
    - POINTER_ENTER: Activate the window and give it focus
    - WINDOW_CLOSED: Drop the active window and park focus on the root
    """

    def __init__(self, bus, protocols: "ClientProtocols"):
        """Initialize focus manager.

        Args:
            bus: Event bus instance (Pypubsub)
            protocols: ICCCM helper used to transfer focus
        """
        self.bus = bus
        self.protocols = protocols

        self.active_window: Optional[int] = None

        self._setup_subscriptions()

    def _setup_subscriptions(self):
        """Subscribe to events FocusManager cares about."""
        from pubsub import pub
        from . import topics

        pub.subscribe(self._on_pointer_enter, topics.POINTER_ENTER)
        pub.subscribe(self._on_window_closed, topics.WINDOW_CLOSED)

    def set_active_window(self, window: Optional[int]):
        """Set the active window.

        Args:
            window: The window to activate, or None to clear it
        """
        from pubsub import pub
        from . import topics

        self.active_window = window

        # Publish focus change event
        pub.sendMessage(topics.FOCUS_CHANGED, window=window)

    def _on_pointer_enter(self, window, time):
        """Handle POINTER_ENTER event.

        Args:
            window: The window the pointer entered
            time: Timestamp of the enter event
        """
        self.set_active_window(window)
        try:
            self.protocols.focus(window, time)
        except XRequestError as e:
            logger.warning("Could not focus window %#x: %s", window, e)

    def _on_window_closed(self, window):
        """Handle WINDOW_CLOSED event.

        Args:
            window: The destroyed window
        """
        if self.active_window != window:
            return

        self.set_active_window(None)
        try:
            self.protocols.focus_root()
        except XRequestError as e:
            logger.warning("Could not move focus to the root window: %s", e)

    def get_active_window(self) -> Optional[int]:
        """Get the currently active window."""
        return self.active_window
