"""
Keysym Table

Symbolic names for the X keysyms used by the key bindings.
"""


# X keysym values (from X11/keysymdef.h)
class XK:
    """Common X keysym constants."""

    # Letters
    a, b, c, d, e, f, g, h, i, j = (
        0x61,
        0x62,
        0x63,
        0x64,
        0x65,
        0x66,
        0x67,
        0x68,
        0x69,
        0x6A,
    )
    k, l, m, n, o, p, q, r, s, t = (
        0x6B,
        0x6C,
        0x6D,
        0x6E,
        0x6F,
        0x70,
        0x71,
        0x72,
        0x73,
        0x74,
    )
    u, v, w, x, y, z = 0x75, 0x76, 0x77, 0x78, 0x79, 0x7A

    # Special keys
    Return = 0xFF0D
    Escape = 0xFF1B
    Tab = 0xFF09
    BackSpace = 0xFF08
    space = 0x20

    # Navigation
    Left = 0xFF51
    Up = 0xFF52
    Right = 0xFF53
    Down = 0xFF54
