"""
Server lifecycle handle shared by the app and the process that hosts it
"""

import logging
import threading
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class ServerState(str, Enum):
    STARTING = "starting"
    LISTENING = "listening"
    STOPPING = "stopping"
    STOPPED = "stopped"


class ServerHandle:
    """
    Tracks where the server is in listen -> serve -> shutdown.

    The hosting process installs a stop hook (for uvicorn, setting
    `should_exit`); request_stop() only fires it once.
    """

    def __init__(self, stop_hook: Optional[Callable[[], None]] = None):
        self._lock = threading.Lock()
        self._state = ServerState.STARTING
        self.stop_hook = stop_hook

    @property
    def state(self) -> ServerState:
        return self._state

    def mark_listening(self) -> None:
        with self._lock:
            if self._state == ServerState.STARTING:
                self._state = ServerState.LISTENING

    def request_stop(self) -> bool:
        """Move Listening -> Stopping; False if a stop is already under way"""
        with self._lock:
            if self._state != ServerState.LISTENING:
                return False
            self._state = ServerState.STOPPING
        return True

    def stop(self) -> None:
        """Run the stop hook; call after request_stop() succeeded"""
        if self.stop_hook is not None:
            self.stop_hook()
        else:
            logger.warning("No stop hook installed; server keeps running")

    def mark_stopped(self) -> None:
        with self._lock:
            self._state = ServerState.STOPPED
