"""
fsnotify-reloader Worker Base.

Long-running components run their loop on a dedicated daemon thread.
Requires Python 3.11+.
"""

import threading

from utils.logger import LoggerMixin


class Worker(LoggerMixin):
    """
    Base class for components that run a blocking loop in a thread.

    Subclasses implement ``run()``; it may also be called directly
    (tests do this to drive a loop synchronously).
    """

    name = "worker"

    def __init__(self) -> None:
        self._thread: threading.Thread | None = None

    def run(self) -> None:
        raise NotImplementedError

    def start(self) -> None:
        """Start the worker thread."""
        if self._thread is not None:
            return

        self._thread = threading.Thread(target=self.run, name=self.name, daemon=True)
        self._thread.start()
        self.log.debug("worker_started", worker=self.name)

    def join(self, timeout: float | None = None) -> bool:
        """
        Wait for the worker loop to return.

        Returns:
            True if the worker is no longer running
        """
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    @property
    def is_running(self) -> bool:
        """Check if the worker thread is alive."""
        return self._thread is not None and self._thread.is_alive()
