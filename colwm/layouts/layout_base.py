"""
Window Layout Base Classes

Provides the column/window data model, the Layout interface and the
Workspace that ties them to a screen.
"""

from __future__ import annotations
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

from ..connection import XRequestError
from ..protocol import Area, CLIENT_EVENT_MASK

if TYPE_CHECKING:
    from ..connection import XConnection

logger = logging.getLogger(__name__)


class TilingError(Exception):
    """Base class for logical failures of workspace operations."""


class WindowNotManaged(TilingError):
    def __init__(self, window: int):
        self.window = window
        super().__init__(f"window {window:#x} is not managed")


class AlreadyAtTop(TilingError):
    pass


class AlreadyAtBottom(TilingError):
    pass


class AlreadyInFirstColumn(TilingError):
    pass


class AlreadyAtEnd(TilingError):
    pass


class NotAttachedToScreen(TilingError):
    pass


class NoColumns(TilingError):
    pass


class Direction(Enum):
    """Direction of a move or resize command."""

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


@dataclass
class LayoutGeometry:
    """Calculated geometry for a window in a layout."""

    x: int
    y: int
    width: int
    height: int


@dataclass(eq=False)
class ManagedWindow:
    """A client window under management."""

    window: int
    size_delta: int = 0

    def resize(self, delta: int):
        """Grow (or shrink, for negative DELTA) relative to the equal share."""
        self.size_delta += delta


@dataclass(eq=False)
class Column:
    """A vertical stack of windows."""

    windows: List[ManagedWindow] = field(default_factory=list)
    size_delta: int = 0

    def resize(self, delta: int):
        self.size_delta += delta

    def index_of(self, window: int) -> Optional[int]:
        for i, managed in enumerate(self.windows):
            if managed.window == window:
                return i
        return None


class Layout(ABC):
    """Abstract base class for window layouts."""

    @abstractmethod
    def calculate(
        self, columns: List[Column], area: Area
    ) -> Dict[int, LayoutGeometry]:
        """
        Calculate window positions and sizes.

        Args:
            columns: Columns to lay out, left to right
            area: Screen area available to the layout

        Returns:
            Dictionary mapping window ids to their calculated geometry
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Layout name for display."""
        pass


def _default_layout() -> Layout:
    from .layout_columns import ColumnLayout

    return ColumnLayout()


@dataclass(eq=False)
class Workspace:
    """A screen's worth of side-by-side columns.

    All structural mutation happens under ``lock``. Requests to the X server
    are issued after the lock has been released.
    """

    name: str
    conn: "XConnection"
    screen: Optional[Area] = None
    columns: List[Column] = field(default_factory=list)
    layout: Layout = field(default_factory=_default_layout)
    border_width: int = 2
    pointer_offset: Tuple[int, int] = (10, 10)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def is_active(self) -> bool:
        """Whether the workspace is bound to a screen."""
        return self.screen is not None

    def _locate(self, window: int) -> Tuple[int, int]:
        """Column and row of WINDOW. Caller must hold the lock."""
        for c, column in enumerate(self.columns):
            i = column.index_of(window)
            if i is not None:
                return c, i
        raise WindowNotManaged(window)

    def contains(self, window: int) -> bool:
        with self.lock:
            try:
                self._locate(window)
            except WindowNotManaged:
                return False
            return True

    def windows(self) -> List[int]:
        """Managed window ids, column by column."""
        with self.lock:
            return [m.window for column in self.columns for m in column.windows]

    def add_window(self, window: int):
        """Start managing WINDOW.

        Sets its border and selects structure and enter events on it. If
        either request fails the window stays unmanaged and the error is
        raised.
        """
        self.conn.configure_window(window, border_width=self.border_width)
        self.conn.change_window_attributes(window, event_mask=int(CLIENT_EVENT_MASK))

        with self.lock:
            managed = ManagedWindow(window)
            if not self.columns:
                self.columns.append(Column([managed]))
                return
            if len(self.columns) == 1 and self.columns[0].windows:
                # A lone occupied column gets a neighbour
                self.columns.append(Column([managed]))
                return
            for column in self.columns:
                if not column.windows:
                    column.windows.append(managed)
                    return
            self.columns[-1].windows.append(managed)

    def remove_window(self, window: int):
        with self.lock:
            c, i = self._locate(window)
            del self.columns[c].windows[i]

    def move_up(self, window: int):
        with self.lock:
            c, i = self._locate(window)
            if i == 0:
                raise AlreadyAtTop(f"window {window:#x} is already at the top")
            windows = self.columns[c].windows
            windows[i - 1], windows[i] = windows[i], windows[i - 1]

    def move_down(self, window: int):
        with self.lock:
            c, i = self._locate(window)
            windows = self.columns[c].windows
            if i == len(windows) - 1:
                raise AlreadyAtBottom(f"window {window:#x} is already at the bottom")
            windows[i + 1], windows[i] = windows[i], windows[i + 1]

    def move_left(self, window: int):
        with self.lock:
            c, i = self._locate(window)
            if c == 0:
                raise AlreadyInFirstColumn(
                    f"window {window:#x} is already in the first column"
                )
            managed = self.columns[c].windows.pop(i)
            self.columns[c - 1].windows.append(managed)

    def move_right(self, window: int):
        with self.lock:
            c, i = self._locate(window)
            if c == len(self.columns) - 1:
                raise AlreadyAtEnd(f"window {window:#x} is already at the end")
            managed = self.columns[c].windows.pop(i)
            self.columns[c + 1].windows.append(managed)

    def move(self, window: int, direction: Direction):
        {
            Direction.UP: self.move_up,
            Direction.DOWN: self.move_down,
            Direction.LEFT: self.move_left,
            Direction.RIGHT: self.move_right,
        }[direction](window)

    def nudge_window(self, window: int, step: int):
        """Move WINDOW's top edge up by STEP pixels.

        The top window of a column has no top edge to move, so its bottom
        edge moves instead and the window shrinks.
        """
        with self.lock:
            c, i = self._locate(window)
            managed = self.columns[c].windows[i]
            managed.resize(-step if i == 0 else step)

    def nudge_column(self, window: int, step: int):
        """Move the left edge of WINDOW's column left by STEP pixels.

        The first column moves its right edge instead.
        """
        with self.lock:
            c, _ = self._locate(window)
            self.columns[c].resize(-step if c == 0 else step)

    def add_column(self):
        with self.lock:
            self.columns.append(Column())

    def delete_empty_columns(self) -> bool:
        """Drop every column without windows. Returns True if any went away."""
        with self.lock:
            kept = [column for column in self.columns if column.windows]
            if len(kept) == len(self.columns):
                return False
            self.columns = kept
            return True

    def tile_windows(self, active_window: Optional[int] = None):
        """Place every managed window according to the layout.

        Each window is configured independently; a failure is logged and the
        remaining windows are still placed. The first failure is raised once
        all placements have been attempted.

        Args:
            active_window: Window holding focus; the pointer is moved back
                inside it if this workspace placed it
        """
        with self.lock:
            if self.screen is None:
                raise NotAttachedToScreen(f"workspace {self.name} is not attached to a screen")
            if not self.columns:
                raise NoColumns(f"workspace {self.name} has no columns")
            geometries = self.layout.calculate(self.columns, self.screen)

        first_error: Optional[XRequestError] = None
        for window, geom in geometries.items():
            try:
                self.conn.configure_window(
                    window,
                    x=geom.x,
                    y=geom.y,
                    width=max(1, geom.width - 2 * self.border_width),
                    height=max(1, geom.height - 2 * self.border_width),
                )
            except XRequestError as e:
                logger.warning("Could not place window %#x: %s", window, e)
                if first_error is None:
                    first_error = e

        if active_window is not None and active_window in geometries:
            dx, dy = self.pointer_offset
            self.conn.warp_pointer(active_window, dx, dy)

        if first_error is not None:
            raise first_error
