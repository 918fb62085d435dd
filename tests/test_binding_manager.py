"""
Unit tests for the keymap and key bindings.
"""

import logging

import pytest
from pubsub import pub

from colwm import topics
from colwm.binding_manager import BindingManager, KeyBinding, Keymap
from colwm.keysyms import XK
from colwm.layouts import Direction
from colwm.protocol import Modifiers

ALT = int(Modifiers.MOD1)
CTRL = int(Modifiers.CTRL)
SHIFT = int(Modifiers.SHIFT)
NUMLOCK = int(Modifiers.MOD2)

# A small US-like layout: keycode -> keysym row
KEYMAP = {
    22: [XK.BackSpace, XK.BackSpace],
    24: [XK.q, 0x51],
    26: [XK.e, 0x45],
    40: [XK.d, 0x44],
    43: [XK.h, 0x48],
    44: [XK.j, 0x4A],
    45: [XK.k, 0x4B],
    46: [XK.l, 0x4C],
    57: [XK.n, 0x4E],
    111: [XK.Up],
    113: [XK.Left],
    114: [XK.Right],
    116: [XK.Down],
    # Produces q only as its second symbol
    200: [0x1008FF00, XK.q],
    201: [],
}


@pytest.fixture
def keymap():
    return Keymap(KEYMAP)


@pytest.fixture
def bindings(make_conn, keymap):
    manager = BindingManager(make_conn(keymap=KEYMAP), keymap)
    manager.setup_default_bindings()
    return manager


@pytest.mark.unit
class TestKeymap:
    """Test keycode table lookups."""

    def test_load_from_connection(self, make_conn):
        keymap = Keymap.load(make_conn(keymap=KEYMAP))

        assert keymap.primary(26) == XK.e

    def test_primary_is_first_column(self, keymap):
        assert keymap.primary(24) == XK.q
        assert keymap.primary(200) == 0x1008FF00

    def test_unknown_or_empty_keycode(self, keymap):
        assert keymap.primary(9) is None
        assert keymap.primary(201) is None

    def test_keycodes_for_searches_whole_row(self, keymap):
        assert keymap.keycodes_for(XK.q) == [24, 200]
        assert keymap.keycodes_for(XK.Up) == [111]
        assert keymap.keycodes_for(XK.z) == []


@pytest.mark.unit
class TestKeyBinding:
    """Test modifier matching."""

    def test_exact_match(self):
        binding = KeyBinding(XK.q, Modifiers.MOD1, topics.CMD_CLOSE_WINDOW)

        assert binding.matches(ALT)
        assert not binding.matches(ALT | SHIFT)
        assert not binding.matches(ALT | NUMLOCK)

    def test_contained_match(self):
        binding = KeyBinding(
            XK.BackSpace, Modifiers.CTRL | Modifiers.MOD1, topics.CMD_QUIT, exact=False
        )

        assert binding.matches(CTRL | ALT)
        assert binding.matches(CTRL | ALT | NUMLOCK)
        assert not binding.matches(CTRL)


@pytest.mark.unit
class TestDefaultBindings:
    """Test the fixed binding table."""

    @pytest.mark.parametrize(
        "keycode,state,topic,data",
        [
            (22, CTRL | ALT, topics.CMD_QUIT, {}),
            (26, ALT, topics.CMD_SPAWN_TERMINAL, {}),
            (24, ALT, topics.CMD_CLOSE_WINDOW, {}),
            (24, ALT | SHIFT, topics.CMD_DESTROY_WINDOW, {}),
            (43, ALT, topics.CMD_MOVE_WINDOW, {"direction": Direction.LEFT}),
            (44, ALT, topics.CMD_MOVE_WINDOW, {"direction": Direction.DOWN}),
            (45, ALT, topics.CMD_MOVE_WINDOW, {"direction": Direction.UP}),
            (46, ALT, topics.CMD_MOVE_WINDOW, {"direction": Direction.RIGHT}),
            (111, CTRL | ALT, topics.CMD_RESIZE_WINDOW, {"direction": Direction.UP}),
            (116, CTRL | ALT, topics.CMD_RESIZE_WINDOW, {"direction": Direction.DOWN}),
            (113, CTRL | ALT, topics.CMD_RESIZE_COLUMN, {"direction": Direction.LEFT}),
            (114, CTRL | ALT, topics.CMD_RESIZE_COLUMN, {"direction": Direction.RIGHT}),
            (57, CTRL | SHIFT, topics.CMD_NEW_COLUMN, {}),
            (40, CTRL | SHIFT, topics.CMD_DELETE_EMPTY_COLUMNS, {}),
        ],
    )
    def test_key_press_resolves_binding(self, bindings, keycode, state, topic, data):
        binding = bindings.find_binding(keycode, state)

        assert binding is not None
        assert binding.event_topic == topic
        assert binding.event_data == data

    def test_quit_tolerates_extra_modifiers(self, bindings):
        binding = bindings.find_binding(22, CTRL | ALT | NUMLOCK)

        assert binding.event_topic == topics.CMD_QUIT

    def test_spawn_tolerates_extra_modifiers(self, bindings):
        binding = bindings.find_binding(26, ALT | SHIFT)

        assert binding.event_topic == topics.CMD_SPAWN_TERMINAL

    def test_other_bindings_need_exact_state(self, bindings):
        assert bindings.find_binding(43, ALT | NUMLOCK) is None
        assert bindings.find_binding(24, ALT | CTRL) is None

    def test_dispatch_uses_primary_keysym(self, bindings):
        """A keycode producing q only when shifted doesn't close windows."""
        assert bindings.find_binding(200, ALT) is None

    def test_unknown_keycode(self, bindings):
        assert bindings.find_binding(9, ALT) is None


@pytest.mark.unit
class TestGrabs:
    """Test passive key grabs."""

    def test_grab_every_keycode_of_every_binding(self, bindings):
        bindings.grab_keys()

        grabbed = {(call[1], call[2]) for call in bindings.conn.calls_to("GrabKey")}
        assert (22, CTRL | ALT) in grabbed
        assert (24, ALT) in grabbed
        assert (200, ALT) in grabbed
        assert (24, ALT | SHIFT) in grabbed
        assert (111, CTRL | ALT) in grabbed
        assert (57, CTRL | SHIFT) in grabbed
        assert len(grabbed) == 16

    def test_grab_table(self, bindings):
        bindings.grab_keys()

        assert bindings.grabs[(XK.q, ALT)] == [24, 200]
        assert bindings.grabs[(XK.e, ALT)] == [26]

    def test_failed_grab_is_not_fatal(self, bindings, caplog):
        bindings.conn.fail("GrabKey", 24)

        with caplog.at_level(logging.WARNING, logger="colwm"):
            bindings.grab_keys()

        assert bindings.grabs[(XK.q, ALT)] == [200]
        assert bindings.grabs[(XK.e, ALT)] == [26]
        assert any("keycode 24" in r.getMessage() for r in caplog.records)

    def test_missing_keysym_loses_binding(self, make_conn):
        keymap = Keymap({26: [XK.e]})
        manager = BindingManager(make_conn(), keymap)
        manager.setup_default_bindings()

        manager.grab_keys()

        assert manager.grabs[(XK.e, ALT)] == [26]
        assert manager.grabs[(XK.q, ALT)] == []


@pytest.mark.unit
class TestHandleKeyPress:
    """Test publishing bound commands."""

    def test_publishes_command(self, bindings):
        received = []

        def on_move(direction):
            received.append(direction)

        pub.subscribe(on_move, topics.CMD_MOVE_WINDOW)

        binding = bindings.handle_key_press(46, ALT)

        assert binding.event_topic == topics.CMD_MOVE_WINDOW
        assert received == [Direction.RIGHT]

    def test_publishes_command_without_data(self, bindings):
        received = []

        def on_new_column():
            received.append(True)

        pub.subscribe(on_new_column, topics.CMD_NEW_COLUMN)

        bindings.handle_key_press(57, CTRL | SHIFT)

        assert received == [True]

    def test_unbound_key_publishes_nothing(self, bindings):
        received = []

        def on_close():
            received.append(True)

        pub.subscribe(on_close, topics.CMD_CLOSE_WINDOW)

        assert bindings.handle_key_press(24, 0) is None
        assert received == []
