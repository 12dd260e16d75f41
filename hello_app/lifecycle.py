"""Process lifecycle phases used for readiness reporting."""

import logging
import threading
from enum import Enum

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    STARTING = "starting"
    SERVING = "serving"
    STOPPED = "stopped"


class ServiceState:
    """Tracks the service phase: STARTING -> SERVING -> STOPPED.

    STOPPED is terminal. The server writes the phase; request handlers only
    read it.
    """

    def __init__(self):
        self._phase = Phase.STARTING
        self._lock = threading.Lock()

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def is_ready(self) -> bool:
        return self._phase is Phase.SERVING

    def mark_serving(self) -> bool:
        """Move to SERVING. Returns False if the service already stopped."""
        with self._lock:
            if self._phase is not Phase.STARTING:
                return self._phase is Phase.SERVING
            self._phase = Phase.SERVING
        logger.debug("Phase -> serving")
        return True

    def mark_stopped(self) -> bool:
        """Move to STOPPED. Returns False if it was already stopped."""
        with self._lock:
            if self._phase is Phase.STOPPED:
                return False
            self._phase = Phase.STOPPED
        logger.debug("Phase -> stopped")
        return True
