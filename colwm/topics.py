"""
Event Topics for colwm Window Manager

All pub/sub topics are defined here for easy discovery and documentation.
Topic naming convention: <category>.<action>

Every topic is always published with the same keyword arguments, since the
bus infers each topic's message signature from its first use.
"""

# Window lifecycle events
WINDOW_CREATED = "window.created"
"""Published when a mapped window should be managed. Params: window (id)"""

WINDOW_CLOSED = "window.closed"
"""Published when the server reports a window destroyed. Params: window (id)"""

# Pointer events
POINTER_ENTER = "pointer.enter"
"""Published when the pointer enters a managed window. Params: window, time"""

# Focus state notifications
FOCUS_CHANGED = "focus.changed"
"""Published when the active window changes. Params: window (id or None)"""

# Command events (imperative - tell components to do something)
# These are triggered by the key bindings

CMD_QUIT = "cmd.quit"
"""Command: Quit the window manager."""

CMD_SPAWN_TERMINAL = "cmd.spawn_terminal"
"""Command: Spawn a terminal."""

CMD_CLOSE_WINDOW = "cmd.close_window"
"""Command: Ask the active window to close, destroying it if it can't."""

CMD_DESTROY_WINDOW = "cmd.destroy_window"
"""Command: Destroy the active window."""

CMD_MOVE_WINDOW = "cmd.move_window"
"""Command: Move the active window. Params: direction"""

CMD_RESIZE_WINDOW = "cmd.resize_window"
"""Command: Move the active window's edge up or down. Params: direction"""

CMD_RESIZE_COLUMN = "cmd.resize_column"
"""Command: Move the active column's edge left or right. Params: direction"""

CMD_NEW_COLUMN = "cmd.new_column"
"""Command: Append an empty column to every screen-bound workspace."""

CMD_DELETE_EMPTY_COLUMNS = "cmd.delete_empty_columns"
"""Command: Remove columns without windows from every screen-bound workspace."""
