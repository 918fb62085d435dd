"""
Application Launcher

Spawns applications in response to command events.
"""

import logging
import shlex
import subprocess
import threading

logger = logging.getLogger(__name__)


class ApplicationLauncher:
    """Spawns applications in response to command events.

    This component subscribes to CMD_SPAWN_* events and launches
    the configured applications.

    Responsibilities:
    - CMD_SPAWN_TERMINAL: Spawn terminal application
    """

    def __init__(self, bus, config):
        """Initialize application launcher.

        Args:
            bus: Event bus instance (Pypubsub)
            config: Configuration object with the terminal command
        """
        self.bus = bus
        self.config = config
        self._setup_subscriptions()

    def _setup_subscriptions(self):
        """Subscribe to spawn command events."""
        from pubsub import pub
        from . import topics

        pub.subscribe(self._on_spawn_terminal, topics.CMD_SPAWN_TERMINAL)

    def _on_spawn_terminal(self):
        """Handle CMD_SPAWN_TERMINAL command."""
        self.spawn(self.config.terminal)

    def spawn(self, command: str) -> subprocess.Popen:
        """Spawn a program without waiting for it.

        The child is reaped by a daemon thread once it exits.

        Args:
            command: Command line to execute

        Raises:
            OSError: the program could not be started
        """
        proc = subprocess.Popen(
            shlex.split(command),
            start_new_session=True,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        logger.info("Spawned %r (pid %d)", command, proc.pid)
        threading.Thread(
            target=self._reap, args=(proc, command), name=f"reap-{proc.pid}", daemon=True
        ).start()
        return proc

    @staticmethod
    def _reap(proc: subprocess.Popen, command: str):
        status = proc.wait()
        logger.debug("%r (pid %d) exited with %d", command, proc.pid, status)
