"""
Layout System

Provides the column tiling model and workspace management.
"""

from .layout_base import (
    Layout,
    LayoutGeometry,
    Direction,
    ManagedWindow,
    Column,
    Workspace,
    TilingError,
    WindowNotManaged,
    AlreadyAtTop,
    AlreadyAtBottom,
    AlreadyInFirstColumn,
    AlreadyAtEnd,
    NotAttachedToScreen,
    NoColumns,
)
from .layout_columns import ColumnLayout, partition
from .workspace_manager import WorkspaceManager

__all__ = [
    # Base classes
    "Layout",
    "LayoutGeometry",
    "Direction",
    # Model
    "ManagedWindow",
    "Column",
    "Workspace",
    "WorkspaceManager",
    # Errors
    "TilingError",
    "WindowNotManaged",
    "AlreadyAtTop",
    "AlreadyAtBottom",
    "AlreadyInFirstColumn",
    "AlreadyAtEnd",
    "NotAttachedToScreen",
    "NoColumns",
    # Layout implementations
    "ColumnLayout",
    "partition",
]
