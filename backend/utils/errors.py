"""
fsnotify-reloader Errors.

Startup errors are fatal: they abort the process before any worker runs.
Requires Python 3.11+.
"""

from pathlib import Path


class ReloaderError(Exception):
    """Base class for all reloader errors."""


class StartupError(ReloaderError):
    """A fatal error raised while the reloader is starting."""


class InvalidWatchPathError(StartupError):
    """The watch root is missing or not a directory."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{reason}: {path}")


class ProcessNotFoundError(StartupError):
    """The monitored process does not exist or cannot be signalled."""

    def __init__(self, pid: int) -> None:
        self.pid = pid
        super().__init__(f"process id {pid} does not exist")


class IndexingError(StartupError):
    """Traversing the watch root failed."""


class RegistrationError(StartupError):
    """A directory could not be registered with the watch backend."""

    def __init__(self, path: Path, error: Exception) -> None:
        self.path = path
        super().__init__(f"cannot watch {path}: {error}")


class BackendInitError(StartupError):
    """The filesystem event backend could not be started."""
