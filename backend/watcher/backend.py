"""
fsnotify-reloader Watch Backend.

Cross-platform file system monitoring using watchdog, exposed as a single
stream of raw events and errors.
Requires Python 3.11+.
"""

import os
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from utils.errors import BackendInitError, RegistrationError
from utils.logger import LoggerMixin
from watcher.channel import Channel


class OpKind(str, Enum):
    """Kind of filesystem operation reported by the backend."""

    WRITE = "write"
    CREATE = "create"
    REMOVE = "remove"
    RENAME = "rename"
    CHMOD = "chmod"
    OTHER = "other"


@dataclass(frozen=True)
class RawEvent:
    """A single filesystem change notification."""

    path: str
    kind: OpKind


@dataclass(frozen=True)
class WatchError:
    """A delivery error reported by the backend."""

    error: Exception


BackendItem = RawEvent | WatchError

_KINDS = {
    EVENT_TYPE_MODIFIED: OpKind.WRITE,
    EVENT_TYPE_CREATED: OpKind.CREATE,
    EVENT_TYPE_DELETED: OpKind.REMOVE,
    EVENT_TYPE_MOVED: OpKind.RENAME,
}


class WatchBackend(Protocol):
    """Contract consumed by the indexer, the event watcher and the coordinator."""

    events: Channel[BackendItem]

    def start(self) -> None: ...

    def register(self, directory: Path) -> None: ...

    def close(self) -> None: ...


class RawEventHandler(FileSystemEventHandler, LoggerMixin):
    """
    Translates watchdog events into RawEvents on the backend stream.

    Runs on the observer's dispatch thread; it only ever appends to an
    unbounded channel, so it never blocks the observer.
    """

    def __init__(self, events: Channel[BackendItem]) -> None:
        super().__init__()
        self._events = events

    def dispatch(self, event: FileSystemEvent) -> None:
        try:
            super().dispatch(event)
        except Exception as e:
            self._events.offer(WatchError(e))

    def on_any_event(self, event: FileSystemEvent) -> None:
        """Forward every file event with its operation kind."""
        # Watched directories report modified when an entry inside changes
        if event.is_directory:
            return

        kind = _KINDS.get(event.event_type, OpKind.OTHER)
        self._events.offer(RawEvent(os.fsdecode(event.src_path), kind))

        # The destination of a move shows up as a new file
        if event.event_type == EVENT_TYPE_MOVED and event.dest_path:
            self._events.offer(RawEvent(os.fsdecode(event.dest_path), OpKind.CREATE))


class WatchdogBackend(LoggerMixin):
    """
    Watches an explicit list of directories, each non-recursively.

    The watch set is fixed by the caller; directories created later are
    not picked up.
    """

    def __init__(self, observer_factory: Callable[[], BaseObserver] = Observer) -> None:
        self.events: Channel[BackendItem] = Channel()
        self._handler = RawEventHandler(self.events)
        self._observer = observer_factory()
        self._watched: list[Path] = []
        self._started = False

    def start(self) -> None:
        """Start the observer threads."""
        if self._started:
            return

        try:
            self._observer.start()
        except Exception as e:
            raise BackendInitError(f"cannot start file system observer: {e}") from e
        self._started = True

    def register(self, directory: Path) -> None:
        """
        Watch a single directory (not its subdirectories).

        Raises:
            RegistrationError: the directory cannot be watched
        """
        try:
            self._observer.schedule(self._handler, str(directory), recursive=False)
        except OSError as e:
            raise RegistrationError(directory, e) from e
        self._watched.append(directory)

    def report_error(self, error: Exception) -> None:
        """Push a backend error onto the event stream."""
        self.events.offer(WatchError(error))

    def close(self) -> None:
        """
        Stop all delivery and close the event stream.

        Once this returns no more items will be added to ``events``.
        """
        try:
            if self._started:
                self._observer.stop()
                self._observer.join()
        finally:
            self._started = False
            self.events.close()
            self.log.debug("watch_backend_closed", directories=len(self._watched))

    @property
    def watched(self) -> list[Path]:
        """Directories registered so far."""
        return list(self._watched)

    def __enter__(self) -> "WatchdogBackend":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()
