"""
X Connection Module

Thin adapter over python-xlib. Everything else in colwm talks to the X server
through an XConnection using plain integer window ids, which keeps the rest
of the code testable without a display.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Sequence

# Threaded mode must be enabled before any display is opened; background
# workspace tasks issue requests while the event loop blocks in next_event().
import Xlib.threaded  # noqa: F401
from Xlib import X, error
from Xlib.display import Display
import Xlib.protocol.event

from .protocol import Area, MANAGER_EVENT_MASK

logger = logging.getLogger(__name__)


class XConnectionError(Exception):
    """The display could not be opened or its setup is unusable."""


class XRequestError(Exception):
    """An X request was rejected by the server."""

    def __init__(self, request: str, error: Any = None):
        self.request = request
        self.error = error
        super().__init__(f"{request} failed: {error}")


class ManagerRoleTaken(XRequestError):
    """Another client already holds substructure redirection on the root."""


class XConnection:
    """Connection to an X server.

    Requests that can fail per window come in checked form: they are flushed
    and synced, and a server error is raised as XRequestError.
    """

    def __init__(self, display_name: Optional[str] = None):
        try:
            self.display = Display(display_name)
        except (error.DisplayError, error.ConnectionClosedError) as e:
            raise XConnectionError(f"Cannot open display: {e}") from e

        if self.display.screen_count() != 1:
            raise XConnectionError(
                f"Inappropriate number of roots ({self.display.screen_count()}). "
                "Did Xinerama initialize correctly?"
            )

        self.screen = self.display.screen()
        self._root = self.screen.root
        self.display.set_error_handler(self._on_async_error)

    @property
    def root(self) -> int:
        """Id of the root window."""
        return self._root.id

    @property
    def min_keycode(self) -> int:
        return self.display.display.info.min_keycode

    @property
    def max_keycode(self) -> int:
        return self.display.display.info.max_keycode

    def _window(self, window: int):
        return self.display.create_resource_object("window", window)

    def _on_async_error(self, err, request):
        """Log errors of unchecked requests."""
        logger.warning("X error %s for request %s", err, request)

    def _checked(self, name: str, request, *args, **kwargs):
        """Issue REQUEST and wait for the server to accept or reject it."""
        catcher = error.CatchError()
        request(*args, onerror=catcher, **kwargs)
        self.display.sync()
        err = catcher.get_error()
        if err:
            raise XRequestError(name, err)

    # Setup

    def query_screens(self) -> List[Area]:
        """Screen rectangles, falling back to the root window size."""
        screens: List[Area] = []
        if self.display.has_extension("XINERAMA"):
            try:
                if self.display.xinerama_is_active():
                    reply = self.display.xinerama_query_screens()
                    screens = [
                        Area(s.x, s.y, s.width, s.height) for s in reply.screens
                    ]
            except error.XError as e:
                raise XConnectionError(f"Xinerama query failed: {e}") from e

        if not screens:
            screens = [
                Area(0, 0, self.screen.width_in_pixels, self.screen.height_in_pixels)
            ]
        return screens

    def claim_manager_role(self):
        """Select substructure redirection on the root window.

        Raises:
            ManagerRoleTaken: another window manager is running
            XRequestError: any other failure
        """
        catcher = error.CatchError()
        self._root.change_attributes(
            event_mask=int(MANAGER_EVENT_MASK), onerror=catcher
        )
        self.display.sync()
        err = catcher.get_error()
        if isinstance(err, error.BadAccess):
            raise ManagerRoleTaken("ChangeWindowAttributes", err)
        if err:
            raise XRequestError("ChangeWindowAttributes", err)

    def keyboard_mapping(self) -> Dict[int, List[int]]:
        """Keycode to keysym rows for the server's keycode range."""
        first = self.min_keycode
        count = self.max_keycode - first + 1
        try:
            rows = self.display.get_keyboard_mapping(first, count)
        except error.XError as e:
            raise XRequestError("GetKeyboardMapping", e) from e
        return {first + i: list(row) for i, row in enumerate(rows)}

    def grab_key(self, keycode: int, modifiers: int):
        """Passive grab of KEYCODE with MODIFIERS on the root window."""
        self._checked(
            "GrabKey",
            self._root.grab_key,
            keycode,
            int(modifiers),
            False,
            X.GrabModeAsync,
            X.GrabModeAsync,
        )

    def intern_atom(self, name: str) -> int:
        try:
            return self.display.intern_atom(name)
        except error.XError as e:
            raise XRequestError(f"InternAtom({name})", e) from e

    # Window requests

    def query_tree(self) -> List[int]:
        """Ids of the root window's children."""
        try:
            return [child.id for child in self._root.query_tree().children]
        except error.XError as e:
            raise XRequestError("QueryTree", e) from e

    def get_window_attributes(self, window: int):
        try:
            return self._window(window).get_attributes()
        except error.XError as e:
            raise XRequestError("GetWindowAttributes", e) from e

    def change_window_attributes(self, window: int, **values):
        self._checked(
            "ChangeWindowAttributes", self._window(window).change_attributes, **values
        )

    def configure_window(self, window: int, **values):
        self._checked("ConfigureWindow", self._window(window).configure, **values)

    def map_window(self, window: int):
        self._window(window).map()
        self.display.flush()

    def destroy_window(self, window: int):
        self._checked("DestroyWindow", self._window(window).destroy)

    def get_property(self, window: int, atom: int, length: int = 64):
        """Read a property of any type; None when it is not set."""
        try:
            return self._window(window).get_property(
                atom, X.AnyPropertyType, 0, length
            )
        except error.XError as e:
            raise XRequestError("GetProperty", e) from e

    def send_client_message(self, window: int, client_type: int, data: Sequence[int]):
        """Send a format 32 ClientMessage to WINDOW itself."""
        values = (list(data) + [0] * 5)[:5]
        target = self._window(window)
        ev = Xlib.protocol.event.ClientMessage(
            window=target, client_type=client_type, data=(32, values)
        )
        self._checked(
            "SendEvent", target.send_event, ev, event_mask=X.NoEventMask
        )

    def send_configure_notify(
        self, window: int, x: int, y: int, width: int, height: int
    ):
        """Tell WINDOW its geometry is exactly what it asked for."""
        target = self._window(window)
        ev = Xlib.protocol.event.ConfigureNotify(
            event=target,
            window=target,
            above_sibling=X.NONE,
            x=x,
            y=y,
            width=width,
            height=height,
            border_width=0,
            override=False,
        )
        target.send_event(ev, event_mask=X.StructureNotifyMask)
        self.display.flush()

    def set_input_focus(self, window: int, revert_to: int, time: int):
        self._checked(
            "SetInputFocus", self.display.set_input_focus, window, revert_to, time
        )

    def warp_pointer(self, window: int, x: int, y: int):
        """Move the pointer to X, Y relative to WINDOW."""
        self._window(window).warp_pointer(x, y)
        self.display.flush()

    # Events

    def next_event(self):
        """Block until the next event arrives."""
        try:
            return self.display.next_event()
        except error.ConnectionClosedError as e:
            raise XConnectionError(f"Connection to X server lost: {e}") from e

    def flush(self):
        self.display.flush()

    def close(self):
        self.display.close()
