"""
Shared test doubles and helpers.

Requires Python 3.11+.
"""

import signal
import threading
import time
from collections.abc import Callable
from pathlib import Path

from utils.errors import RegistrationError
from watcher.backend import BackendItem, OpKind, RawEvent
from watcher.channel import Channel


class FakeBackend:
    """In-memory watch backend; tests push events with emit()."""

    def __init__(
        self,
        fail_on: str | None = None,
        close_error: Exception | None = None,
    ) -> None:
        self.events: Channel[BackendItem] = Channel()
        self.registered: list[Path] = []
        self.started = False
        self.closed = False
        self._fail_on = fail_on
        self._close_error = close_error

    def start(self) -> None:
        self.started = True

    def register(self, directory: Path) -> None:
        if self._fail_on is not None and directory.name == self._fail_on:
            raise RegistrationError(directory, OSError("no space left for watches"))
        self.registered.append(directory)

    def emit(self, path: Path | str, kind: OpKind = OpKind.WRITE) -> None:
        self.events.put(RawEvent(str(path), kind))

    def close(self) -> None:
        self.closed = True
        self.events.close()
        if self._close_error is not None:
            raise self._close_error


class RecordingTarget:
    """Monitored process stand-in that records delivered signals."""

    def __init__(self, pid: int = 4242, error: OSError | None = None) -> None:
        self.pid = pid
        self.sent: list[signal.Signals] = []
        self.signalled = threading.Event()
        self._error = error

    def send(self, sig: signal.Signals) -> None:
        self.sent.append(sig)
        self.signalled.set()
        if self._error is not None:
            raise self._error


def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
    """Poll until predicate() is true or the timeout elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()
