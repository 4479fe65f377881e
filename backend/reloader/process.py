"""
fsnotify-reloader Monitored Process.

Requires Python 3.11+.
"""

import os
import signal
from dataclasses import dataclass

from utils.errors import ProcessNotFoundError


@dataclass(frozen=True)
class ProcessHandle:
    """
    The process that receives reload signals.

    It is probed once at startup and never re-validated; a later
    delivery failure is left to the caller to report.
    """

    pid: int

    def exists(self) -> bool:
        """Probe the process with the null signal."""
        if self.pid <= 0:
            return False
        try:
            os.kill(self.pid, 0)
        except OSError:
            return False
        return True

    def probe(self) -> "ProcessHandle":
        """
        Raises:
            ProcessNotFoundError: the process does not exist or cannot be signalled
        """
        if not self.exists():
            raise ProcessNotFoundError(self.pid)
        return self

    def send(self, sig: signal.Signals) -> None:
        """Deliver a signal. Raises OSError on failure."""
        os.kill(self.pid, sig)
