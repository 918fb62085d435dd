"""
Column Window Manager (colwm)

A Python-based column tiling window manager for X11.

This package provides:
- A thin python-xlib connection adapter
- ICCCM close and focus protocol handling
- The column/window layout model and its tiling algorithm
- Keyboard bindings driving window and column commands
- A complete window manager implementation

Example usage:
    from colwm import TileWM, TileConfig

    config = TileConfig(
        terminal='urxvt',
        border_width=1,
    )
    wm = TileWM(config)
    wm.run()

Or run directly:
    python -m colwm
"""

__version__ = "0.1.0"

from .protocol import (
    Modifiers,
    EventMask,
    Area,
    decode_atoms,
)

from .connection import (
    XConnection,
    XConnectionError,
    XRequestError,
    ManagerRoleTaken,
)

from .atoms import AtomRegistry
from .icccm import ClientProtocols

from .layouts import (
    Layout,
    LayoutGeometry,
    Direction,
    ManagedWindow,
    Column,
    ColumnLayout,
    Workspace,
    WorkspaceManager,
    TilingError,
    WindowNotManaged,
)

from .binding_manager import KeyBinding, Keymap, BindingManager
from .keysyms import XK

from .tilewm import (
    TileWM,
    TileConfig,
)

from . import topics

__all__ = [
    # Version
    "__version__",
    # Protocol types
    "Modifiers",
    "EventMask",
    "Area",
    "decode_atoms",
    # Connection
    "XConnection",
    "XConnectionError",
    "XRequestError",
    "ManagerRoleTaken",
    # ICCCM
    "AtomRegistry",
    "ClientProtocols",
    # Layouts
    "Layout",
    "LayoutGeometry",
    "Direction",
    "ManagedWindow",
    "Column",
    "ColumnLayout",
    "Workspace",
    "WorkspaceManager",
    "TilingError",
    "WindowNotManaged",
    # Bindings
    "KeyBinding",
    "Keymap",
    "BindingManager",
    "XK",
    # Window Manager
    "TileWM",
    "TileConfig",
    # Event topics
    "topics",
]
