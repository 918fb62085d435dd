"""
Unit tests for ICCCM close and focus handling.
"""

import pytest
from Xlib import X

from colwm.atoms import AtomRegistry
from colwm.connection import XRequestError
from colwm.icccm import ClientProtocols

W = 0xE01


@pytest.fixture
def protocols(fake_conn):
    return ClientProtocols(fake_conn, AtomRegistry(fake_conn))


@pytest.mark.unit
class TestSupportedProtocols:
    """Test reading WM_PROTOCOLS."""

    def test_listed_protocols(self, protocols, fake_conn, atom_ids):
        fake_conn.set_protocols(W, "WM_DELETE_WINDOW", "WM_TAKE_FOCUS")

        assert protocols.supported(W) == (
            atom_ids["WM_DELETE_WINDOW"],
            atom_ids["WM_TAKE_FOCUS"],
        )

    def test_no_property(self, protocols):
        assert protocols.supported(W) == ()


@pytest.mark.unit
class TestClose:
    """Test closing windows."""

    def test_delete_window_message(self, protocols, fake_conn, atom_ids):
        """A window that lists WM_DELETE_WINDOW is asked, not destroyed."""
        fake_conn.set_protocols(W, "WM_DELETE_WINDOW")

        assert protocols.close(W) is True

        assert fake_conn.calls_to("SendEvent") == [
            (
                "SendEvent",
                W,
                atom_ids["WM_PROTOCOLS"],
                [atom_ids["WM_DELETE_WINDOW"], X.CurrentTime, 0, 0, 0],
            )
        ]
        assert fake_conn.calls_to("DestroyWindow") == []

    def test_forced_destroy_without_property(self, protocols, fake_conn):
        assert protocols.close(W) is False

        assert fake_conn.calls_to("DestroyWindow") == [("DestroyWindow", W)]
        assert fake_conn.calls_to("SendEvent") == []

    def test_forced_destroy_without_delete_protocol(self, protocols, fake_conn):
        fake_conn.set_protocols(W, "WM_TAKE_FOCUS")

        assert protocols.close(W) is False
        assert fake_conn.calls_to("DestroyWindow") == [("DestroyWindow", W)]

    def test_property_error_propagates(self, protocols, fake_conn):
        fake_conn.fail("GetProperty", W)

        with pytest.raises(XRequestError):
            protocols.close(W)

        assert fake_conn.calls_to("DestroyWindow") == []

    def test_destroy(self, protocols, fake_conn):
        protocols.destroy(W)

        assert fake_conn.calls == [("DestroyWindow", W)]


@pytest.mark.unit
class TestFocus:
    """Test focus hand-over."""

    def test_take_focus_uses_event_time(self, protocols, fake_conn, atom_ids):
        fake_conn.set_protocols(W, "WM_TAKE_FOCUS")

        assert protocols.focus(W, 4242) is True

        assert fake_conn.calls_to("SendEvent") == [
            (
                "SendEvent",
                W,
                atom_ids["WM_PROTOCOLS"],
                [atom_ids["WM_TAKE_FOCUS"], 4242, 0, 0, 0],
            )
        ]
        assert fake_conn.calls_to("SetInputFocus") == []

    def test_set_input_focus_fallback(self, protocols, fake_conn):
        assert protocols.focus(W, 4242) is False

        assert fake_conn.calls_to("SetInputFocus") == [
            ("SetInputFocus", W, X.RevertToNone, 4242)
        ]

    def test_unreadable_protocols_fall_back(self, protocols, fake_conn):
        fake_conn.fail("GetProperty", W)

        assert protocols.focus(W, 7) is False
        assert fake_conn.calls_to("SetInputFocus") == [
            ("SetInputFocus", W, X.RevertToNone, 7)
        ]

    def test_focus_root(self, protocols, fake_conn):
        protocols.focus_root()

        assert fake_conn.calls == [
            ("SetInputFocus", fake_conn.root, X.RevertToPointerRoot, X.CurrentTime)
        ]
