"""
Shared pytest fixtures for colwm tests.
"""

from types import SimpleNamespace

import pytest
from pubsub import pub
from Xlib import X

from colwm.connection import XRequestError
from colwm.protocol import Area

ROOT = 0x100

# Atom ids handed out by FakeConnection.intern_atom
ATOMS = {"WM_PROTOCOLS": 301, "WM_DELETE_WINDOW": 302, "WM_TAKE_FOCUS": 303}


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without an X server")


class FakeConnection:
    """In-memory stand-in for XConnection that records every request.

    Requests listed in ``failures`` raise XRequestError: a name maps to the
    set of window ids that fail, or to None for every call.
    """

    def __init__(self, screens=None, children=None, keymap=None):
        self.root = ROOT
        self.min_keycode = 8
        self.max_keycode = 255
        self.screens = list(screens) if screens is not None else [Area(0, 0, 1000, 800)]
        self.children = list(children or [])
        self.keymap = dict(keymap or {})
        self.attributes = {}
        self.properties = {}
        self.failures = {}
        self.events = []
        self.calls = []
        self.closed = False
        self.atoms = dict(ATOMS)

    # Test helpers

    def fail(self, request, window=None):
        if window is None:
            self.failures[request] = None
        else:
            self.failures.setdefault(request, set()).add(window)

    def _record(self, request, *args, window=None, **values):
        if request in self.failures:
            windows = self.failures[request]
            if windows is None or window in windows:
                raise XRequestError(request, "BadWindow")
        self.calls.append((request,) + args + ((values,) if values else ()))

    def calls_to(self, request):
        return [call for call in self.calls if call[0] == request]

    def set_protocols(self, window, *names):
        self.properties[window] = SimpleNamespace(
            format=32, value=[self.atoms[name] for name in names]
        )

    def set_attributes(self, window, override_redirect=False, map_state=X.IsViewable):
        self.attributes[window] = SimpleNamespace(
            override_redirect=override_redirect, map_state=map_state
        )

    # XConnection interface

    def query_screens(self):
        return list(self.screens)

    def claim_manager_role(self):
        self._record("ChangeWindowAttributes", self.root, window=self.root)

    def keyboard_mapping(self):
        return dict(self.keymap)

    def grab_key(self, keycode, modifiers):
        self._record("GrabKey", keycode, int(modifiers), window=keycode)

    def intern_atom(self, name):
        return self.atoms.setdefault(name, 400 + len(self.atoms))

    def query_tree(self):
        return list(self.children)

    def get_window_attributes(self, window):
        self._record("GetWindowAttributes", window, window=window)
        if window not in self.attributes:
            self.set_attributes(window)
        return self.attributes[window]

    def change_window_attributes(self, window, **values):
        self._record("ChangeWindowAttributes", window, window=window, **values)

    def configure_window(self, window, **values):
        self._record("ConfigureWindow", window, window=window, **values)

    def map_window(self, window):
        self._record("MapWindow", window, window=window)

    def destroy_window(self, window):
        self._record("DestroyWindow", window, window=window)

    def get_property(self, window, atom, length=64):
        self._record("GetProperty", window, atom, window=window)
        return self.properties.get(window)

    def send_client_message(self, window, client_type, data):
        self._record("SendEvent", window, client_type, list(data), window=window)

    def send_configure_notify(self, window, x, y, width, height):
        self._record("ConfigureNotify", window, x, y, width, height, window=window)

    def set_input_focus(self, window, revert_to, time):
        self._record("SetInputFocus", window, revert_to, time, window=window)

    def warp_pointer(self, window, x, y):
        self._record("WarpPointer", window, x, y, window=window)

    def next_event(self):
        return self.events.pop(0)

    def flush(self):
        pass

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def reset_bus():
    """Give every test a fresh pubsub topic tree."""
    yield
    pub.unsubAll()
    pub.setListenerExcHandler(None)


@pytest.fixture
def fake_conn():
    """FakeConnection with one 1000x800 screen."""
    return FakeConnection()


@pytest.fixture
def standard_area():
    """Standard 1920x1080 area for layout tests."""
    return Area(0, 0, 1920, 1080)


@pytest.fixture
def screen_area():
    """1000x800 area used by the tiling scenarios."""
    return Area(0, 0, 1000, 800)


@pytest.fixture
def wait_all():
    """Wait for broadcast futures and hand back their exceptions."""

    def wait(futures):
        return [future.exception(timeout=5) for future in futures]

    return wait


@pytest.fixture
def atom_ids():
    """Atom ids the fake server hands out."""
    return dict(ATOMS)


@pytest.fixture
def make_conn():
    """Factory for FakeConnection with custom screens, children or keymap."""
    return FakeConnection
