"""
Workspace Manager

Owns one workspace per screen and applies window commands to them.
"""

from __future__ import annotations
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, TYPE_CHECKING

from .layout_base import Direction, TilingError, WindowNotManaged, Workspace
from ..connection import XRequestError

if TYPE_CHECKING:
    from ..connection import XConnection
    from ..protocol import Area

logger = logging.getLogger(__name__)


class WorkspaceManager:
    """
    Manages the workspaces of all screens.

    This component subscribes to window lifecycle events and layout command
    events.

    A window's workspace is not indexed, so operations on an existing window
    are broadcast: one task per workspace runs on a thread pool, and every
    workspace that doesn't hold the window just reports WindowNotManaged.
    The broadcast returns the futures; nothing waits on them.

    Responsibilities:
    - WINDOW_CREATED: Manage a window on the default workspace
    - WINDOW_CLOSED: Forget a destroyed window
    - CMD_MOVE_WINDOW: Move the active window
    - CMD_RESIZE_WINDOW / CMD_RESIZE_COLUMN: Move the active cell's edges
    - CMD_NEW_COLUMN / CMD_DELETE_EMPTY_COLUMNS: Column management
    """

    def __init__(
        self,
        bus,
        conn: "XConnection",
        screens: Sequence["Area"],
        border_width: int = 2,
        resize_step: int = 10,
        pointer_offset=(10, 10),
    ):
        """Initialize workspace manager.

        Args:
            bus: Event bus instance (Pypubsub)
            conn: X connection shared by all workspaces
            screens: One workspace is created per screen, the first is the default
            border_width: Border width given to managed windows
            resize_step: Pixels moved by one resize command
            pointer_offset: Where the pointer lands inside the active window
        """
        self.bus = bus
        self.conn = conn
        self.resize_step = resize_step
        self.workspaces: List[Workspace] = [
            Workspace(
                name=str(i),
                conn=conn,
                screen=screen,
                border_width=border_width,
                pointer_offset=pointer_offset,
            )
            for i, screen in enumerate(screens)
        ]
        if not self.workspaces:
            self.workspaces.append(
                Workspace(name="0", conn=conn, border_width=border_width)
            )

        self.active_window: Optional[int] = None
        self._executor = ThreadPoolExecutor(
            max_workers=max(2, len(self.workspaces)),
            thread_name_prefix="workspace",
        )

        self._setup_subscriptions()

    @property
    def default(self) -> Workspace:
        """Workspace that receives newly mapped windows."""
        return self.workspaces[0]

    def _setup_subscriptions(self):
        """Subscribe to events WorkspaceManager cares about."""
        from pubsub import pub
        from .. import topics

        # Notification events
        pub.subscribe(self._on_window_created, topics.WINDOW_CREATED)
        pub.subscribe(self._on_window_closed, topics.WINDOW_CLOSED)
        pub.subscribe(self._on_focus_changed, topics.FOCUS_CHANGED)

        # Layout command events
        pub.subscribe(self._on_move_window, topics.CMD_MOVE_WINDOW)
        pub.subscribe(self._on_resize_window, topics.CMD_RESIZE_WINDOW)
        pub.subscribe(self._on_resize_column, topics.CMD_RESIZE_COLUMN)
        pub.subscribe(self._on_new_column, topics.CMD_NEW_COLUMN)
        pub.subscribe(self._on_delete_empty_columns, topics.CMD_DELETE_EMPTY_COLUMNS)

    def find_workspace(self, window: int) -> Optional[Workspace]:
        for workspace in self.workspaces:
            if workspace.contains(window):
                return workspace
        return None

    def manage(self, window: int, workspace: Optional[Workspace] = None) -> bool:
        """Add WINDOW to WORKSPACE (the default one if None).

        Returns False if some workspace already manages the window.
        """
        if self.find_workspace(window) is not None:
            return False
        (workspace or self.default).add_window(window)
        return True

    def retile(self, workspace: Workspace):
        workspace.tile_windows(self.active_window)

    def _try_retile(self, workspace: Workspace):
        """Retile, logging instead of raising."""
        try:
            self.retile(workspace)
        except (TilingError, XRequestError) as e:
            logger.warning("Retiling workspace %s: %s", workspace.name, e)

    def broadcast(
        self, operation: Callable[[Workspace], None], description: str
    ) -> List[Future]:
        """Run OPERATION against every workspace in the background.

        Each task retiles its workspace after OPERATION succeeds.
        """
        futures = []
        for workspace in self.workspaces:
            future = self._executor.submit(self._apply, workspace, operation)
            future.add_done_callback(
                lambda f, ws=workspace: self._report(f, ws, description)
            )
            futures.append(future)
        return futures

    def _apply(self, workspace: Workspace, operation: Callable[[Workspace], None]):
        operation(workspace)
        self.retile(workspace)

    def _report(self, future: Future, workspace: Workspace, description: str):
        """Log the outcome of one broadcast task."""
        if future.cancelled():
            return
        exc = future.exception()
        if exc is None:
            logger.debug("%s on workspace %s done", description, workspace.name)
        elif isinstance(exc, WindowNotManaged):
            logger.debug("%s: not on workspace %s", description, workspace.name)
        elif isinstance(exc, TilingError):
            logger.info("%s on workspace %s: %s", description, workspace.name, exc)
        elif isinstance(exc, XRequestError):
            logger.warning("%s on workspace %s: %s", description, workspace.name, exc)
        else:
            logger.error(
                "%s on workspace %s failed",
                description,
                workspace.name,
                exc_info=(type(exc), exc, exc.__traceback__),
            )

    def remove_window(self, window: int) -> List[Future]:
        return self.broadcast(
            lambda ws: ws.remove_window(window), f"remove {window:#x}"
        )

    def move_window(self, window: int, direction: Direction) -> List[Future]:
        return self.broadcast(
            lambda ws: ws.move(window, direction),
            f"move {window:#x} {direction.value}",
        )

    def resize_window(self, window: int, direction: Direction) -> List[Future]:
        """Move WINDOW's top edge up (Direction.UP) or down (Direction.DOWN)."""
        step = self.resize_step if direction == Direction.UP else -self.resize_step
        return self.broadcast(
            lambda ws: ws.nudge_window(window, step),
            f"resize {window:#x} {direction.value}",
        )

    def resize_column(self, window: int, direction: Direction) -> List[Future]:
        """Move the left edge of WINDOW's column left or right."""
        step = self.resize_step if direction == Direction.LEFT else -self.resize_step
        return self.broadcast(
            lambda ws: ws.nudge_column(window, step),
            f"resize column of {window:#x} {direction.value}",
        )

    def new_column(self):
        """Append an empty column to every screen-bound workspace."""
        for workspace in self.workspaces:
            if workspace.is_active:
                workspace.add_column()
                self._try_retile(workspace)

    def delete_empty_columns(self):
        """Purge empty columns on every screen-bound workspace."""
        for workspace in self.workspaces:
            if workspace.is_active and workspace.delete_empty_columns():
                self._try_retile(workspace)

    def shutdown(self):
        """Stop the worker threads, abandoning queued tasks."""
        self._executor.shutdown(wait=False, cancel_futures=True)

    # Event handlers

    def _on_focus_changed(self, window):
        """Track the active window from FocusManager."""
        self.active_window = window

    def _on_window_created(self, window):
        """Handle WINDOW_CREATED event."""
        try:
            if not self.manage(window):
                logger.debug("Window %#x is already managed", window)
        except XRequestError as e:
            logger.warning("Could not manage window %#x: %s", window, e)
            return
        self._try_retile(self.default)

    def _on_window_closed(self, window):
        """Handle WINDOW_CLOSED event."""
        if self.active_window == window:
            self.active_window = None
        self.remove_window(window)

    # Command event handlers

    def _on_move_window(self, direction):
        """Handle CMD_MOVE_WINDOW command."""
        if self.active_window is not None:
            self.move_window(self.active_window, direction)

    def _on_resize_window(self, direction):
        """Handle CMD_RESIZE_WINDOW command."""
        if self.active_window is not None:
            self.resize_window(self.active_window, direction)

    def _on_resize_column(self, direction):
        """Handle CMD_RESIZE_COLUMN command."""
        if self.active_window is not None:
            self.resize_column(self.active_window, direction)

    def _on_new_column(self):
        """Handle CMD_NEW_COLUMN command."""
        self.new_column()

    def _on_delete_empty_columns(self):
        """Handle CMD_DELETE_EMPTY_COLUMNS command."""
        self.delete_empty_columns()
