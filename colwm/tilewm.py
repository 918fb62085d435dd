"""
colwm - Column Tiling Window Manager

A tiling X11 window manager: every screen is split into side-by-side
columns, each column into stacked windows. Focus follows the pointer and
everything else is driven from the keyboard.
"""

from __future__ import annotations
import logging
import os
import sys
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from pubsub import pub
from Xlib import X

from . import topics
from .application_launcher import ApplicationLauncher
from .atoms import AtomRegistry
from .binding_manager import BindingManager, Keymap
from .connection import XConnection, XConnectionError, XRequestError
from .focus_manager import FocusManager
from .icccm import ClientProtocols
from .layouts import TilingError, WorkspaceManager
from .window_controller import WindowController

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


@dataclass
class TileConfig:
    """Window manager configuration."""

    # X display to connect to (None: $DISPLAY)
    display: Optional[str] = None

    # Programs
    terminal: str = "xterm"

    # Layout settings
    border_width: int = 2
    resize_step: int = 10

    # Where the pointer is warped inside the active window after a retile
    pointer_offset: Tuple[int, int] = (10, 10)

    # Log every event published on the bus
    debug_events: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate numeric settings."""
        if self.border_width < 0:
            raise ValueError(f"border_width must be >= 0, got {self.border_width}")
        if self.resize_step < 0:
            raise ValueError(f"resize_step must be >= 0, got {self.resize_step}")
        self.log_level = self.log_level.upper()

    @classmethod
    def from_env(cls) -> "TileConfig":
        """Build a configuration from COLWM_* environment variables."""
        return cls(
            display=os.getenv("COLWM_DISPLAY") or None,
            terminal=os.getenv("COLWM_TERMINAL") or "xterm",
            border_width=_env_int("COLWM_BORDER_WIDTH", 2),
            resize_step=_env_int("COLWM_RESIZE_STEP", 10),
            debug_events=bool(os.getenv("COLWM_DEBUG")),
            log_level=os.getenv("COLWM_LOG_LEVEL") or "INFO",
        )


def setup_logging(level: str = "INFO"):
    """Send colwm's log records to stderr."""
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    root = logging.getLogger("colwm")
    root.handlers[:] = [handler]
    root.setLevel(level)


class ListenerExceptionLogger:
    """Keep a failing listener from aborting delivery to the others."""

    def __call__(self, listenerID: str, topicObj):
        logger.exception(
            "Listener %s failed handling %s", listenerID, topicObj.getName()
        )


class TileWM:
    """
    Column Tiling Window Manager

    Owns the connection and every component, and turns X events into bus
    messages.
    """

    def __init__(
        self,
        config: Optional[TileConfig] = None,
        connection: Optional[XConnection] = None,
    ):
        """Initialize the window manager.

        Architecture:
        1. Connect to the X server
        2. setup(): claim the manager role, create components - they
           self-subscribe to events
        3. loop(): bridge X events into the bus

        Args:
            config: Configuration, TileConfig() if None
            connection: Already opened connection, opened from config if None
        """
        self.config = config or TileConfig()
        self.conn = connection
        self.running = False

        self.atoms: Optional[AtomRegistry] = None
        self.protocols: Optional[ClientProtocols] = None
        self.keymap: Optional[Keymap] = None
        self.binding_manager: Optional[BindingManager] = None
        self.workspace_manager: Optional[WorkspaceManager] = None
        self.focus_manager: Optional[FocusManager] = None
        self.window_controller: Optional[WindowController] = None
        self.application_launcher: Optional[ApplicationLauncher] = None

        self._handlers: Dict[int, Callable] = {
            X.KeyPress: self._on_key_press,
            X.DestroyNotify: self._on_destroy_notify,
            X.ConfigureRequest: self._on_configure_request,
            X.MapRequest: self._on_map_request,
            X.EnterNotify: self._on_enter_notify,
        }

    def setup(self):
        """Become the window manager of the display.

        Raises:
            XConnectionError: the display can't be used
            ManagerRoleTaken: another window manager is running
            XRequestError: a startup request failed
        """
        if self.conn is None:
            self.conn = XConnection(self.config.display)

        pub.setListenerExcHandler(ListenerExceptionLogger())
        if self.config.debug_events:
            pub.subscribe(self.debug_event_logger, pub.ALL_TOPICS)

        screens = self.conn.query_screens()
        for i, screen in enumerate(screens):
            logger.info(
                "Screen %d: %dx%d+%d+%d", i, screen.width, screen.height, screen.x, screen.y
            )

        self.atoms = AtomRegistry(self.conn)
        self.conn.claim_manager_role()
        logger.info("Claimed the window manager role on root %#x", self.conn.root)

        self.keymap = Keymap.load(self.conn)
        self.binding_manager = BindingManager(self.conn, self.keymap)
        self.binding_manager.setup_default_bindings()
        self.binding_manager.grab_keys()

        self.protocols = ClientProtocols(self.conn, self.atoms)

        # Components (self-subscribe to events)
        self.workspace_manager = WorkspaceManager(
            bus=pub,
            conn=self.conn,
            screens=screens,
            border_width=self.config.border_width,
            resize_step=self.config.resize_step,
            pointer_offset=self.config.pointer_offset,
        )
        self.focus_manager = FocusManager(bus=pub, protocols=self.protocols)
        self.window_controller = WindowController(
            bus=pub, protocols=self.protocols, window_manager=self
        )
        self.application_launcher = ApplicationLauncher(bus=pub, config=self.config)

        self._adopt_existing_windows()

    def _adopt_existing_windows(self):
        """Manage the windows that were mapped before we started."""
        default = self.workspace_manager.default
        for window in self.conn.query_tree():
            try:
                attrs = self.conn.get_window_attributes(window)
            except XRequestError as e:
                logger.warning("Skipping window %#x: %s", window, e)
                continue
            if attrs.override_redirect or attrs.map_state != X.IsViewable:
                continue
            try:
                self.workspace_manager.manage(window, default)
            except XRequestError as e:
                logger.warning("Could not manage window %#x: %s", window, e)

        try:
            self.workspace_manager.retile(default)
        except (TilingError, XRequestError) as e:
            logger.info("Initial tiling: %s", e)

    def debug_event_logger(self, topic=pub.AUTO_TOPIC, **kwargs):
        """Log all events published on the event bus."""
        data_str = ", ".join(f"{k}={v}" for k, v in kwargs.items())
        logger.debug("EVENT: %s | %s", topic.getName(), data_str)

    # X event bridge

    def handle_event(self, event):
        """Dispatch one X event; errors are logged, never raised."""
        handler = self._handlers.get(event.type)
        if handler is None:
            logger.debug("Ignoring event %s", type(event).__name__)
            return
        try:
            handler(event)
        except Exception:
            logger.exception("Error handling %s", type(event).__name__)

    def _on_key_press(self, event):
        self.binding_manager.handle_key_press(event.detail, event.state)

    def _on_destroy_notify(self, event):
        pub.sendMessage(topics.WINDOW_CLOSED, window=event.window.id)

    def _on_configure_request(self, event):
        """Acknowledge the request without honouring it.

        The layout decides geometry; the client is told its request was
        applied so it doesn't wait for an answer.
        """
        self.conn.send_configure_notify(
            event.window.id, event.x, event.y, event.width, event.height
        )

    def _on_map_request(self, event):
        window = event.window.id
        try:
            attrs = self.conn.get_window_attributes(window)
        except XRequestError as e:
            logger.debug("No attributes for %#x, mapping anyway: %s", window, e)
            attrs = None
        if attrs is not None and attrs.override_redirect:
            return

        self.conn.map_window(window)
        pub.sendMessage(topics.WINDOW_CREATED, window=window)

    def _on_enter_notify(self, event):
        pub.sendMessage(topics.POINTER_ENTER, window=event.window.id, time=event.time)

    # Main loop

    def loop(self):
        """Process events until stop() is called."""
        self.running = True
        while self.running:
            event = self.conn.next_event()
            self.handle_event(event)

    def stop(self):
        """Return from the event loop after the current event."""
        self.running = False

    def run(self) -> int:
        """Run the window manager.

        Returns:
            Process exit status
        """
        try:
            self.setup()
            logger.info("colwm started, terminal: %s", self.config.terminal)
            self.loop()
        except (XConnectionError, XRequestError) as e:
            logger.critical("%s", e)
            return 1
        except KeyboardInterrupt:
            pass
        finally:
            if self.workspace_manager is not None:
                self.workspace_manager.shutdown()
            if self.conn is not None:
                self.conn.close()

        logger.info("colwm stopped")
        return 0


def main():
    """Main entry point."""
    try:
        config = TileConfig.from_env()
    except ValueError as e:
        print(f"colwm: {e}", file=sys.stderr)
        return 1
    setup_logging(config.log_level)
    wm = TileWM(config)
    return wm.run()


if __name__ == "__main__":
    sys.exit(main())
