"""
fsnotify-reloader Application.

Wires the indexer, the workers and the lifecycle coordinator together.
Requires Python 3.11+.
"""

from collections.abc import Callable
from pathlib import Path

from reloader.lifecycle import (
    LifecycleCoordinator,
    LifecycleState,
    install_signal_handlers,
    restore_signal_handlers,
)
from reloader.process import ProcessHandle
from utils.config import Settings
from utils.logger import LoggerMixin
from watcher.backend import WatchBackend, WatchdogBackend
from watcher.channel import Channel
from watcher.debouncer import ReloadDebouncer, SignalTarget
from watcher.event_watcher import EventWatcher
from watcher.indexer import DirectoryTreeIndexer, WatchSet
from watcher.ticker import Ticker


class Reloader(LoggerMixin):
    """
    Watches a source tree and signals a process to reload on changes.

    Lifecycle: STARTING -> RUNNING -> SHUTTING_DOWN -> STOPPED.
    Every fatal error is raised from start(), before any worker runs.

    Usage:
        reloader = Reloader(settings)
        reloader.run()  # blocks until SIGINT/SIGTERM
    """

    def __init__(
        self,
        settings: Settings,
        backend_factory: Callable[[], WatchBackend] = WatchdogBackend,
        target: SignalTarget | None = None,
    ) -> None:
        """
        Initialize the reloader.

        Args:
            settings: Effective settings; ``watcher.path`` must be absolute
            backend_factory: Creates the filesystem event backend
            target: Monitored process; defaults to ``reload.pid``
        """
        self._settings = settings
        self._backend_factory = backend_factory
        self._target = target
        self._state = LifecycleState.STARTING
        self._coordinator: LifecycleCoordinator | None = None
        self._watch_set: WatchSet | None = None

    @property
    def state(self) -> LifecycleState:
        if self._coordinator is not None:
            return self._coordinator.state
        return self._state

    @property
    def watch_set(self) -> WatchSet | None:
        return self._watch_set

    @property
    def coordinator(self) -> LifecycleCoordinator | None:
        return self._coordinator

    def _resolve_target(self) -> SignalTarget | None:
        if not self._settings.reload.enabled:
            return None
        if self._target is not None:
            return self._target
        return ProcessHandle(self._settings.reload.pid).probe()

    def start(self) -> None:
        """
        Index the tree, register watches and start all workers.

        Raises:
            StartupError: any fatal condition; nothing is left running
        """
        if self._state is not LifecycleState.STARTING or self._coordinator is not None:
            raise RuntimeError("reloader already started")

        watcher_settings = self._settings.watcher
        reload_settings = self._settings.reload
        root = Path(watcher_settings.path)

        target = self._resolve_target()

        indexer = DirectoryTreeIndexer(
            excluded_names=watcher_settings.excluded_dirs,
            skip_hidden=watcher_settings.skip_hidden,
        )
        backend = self._backend_factory()
        backend.start()
        try:
            watch_set = indexer.index(root, backend)
        except BaseException:
            backend.close()
            raise
        self._watch_set = watch_set

        requests: Channel[bool] = Channel(maxsize=1)
        ticker = Ticker(reload_settings.tick_seconds)
        event_watcher = EventWatcher(backend.events, requests, watcher_settings.extensions)
        debouncer = ReloadDebouncer(requests, ticker, target, reload_settings.signal_number)
        coordinator = LifecycleCoordinator(backend, event_watcher, debouncer, requests, ticker)

        event_watcher.start()
        debouncer.start()
        coordinator.start()
        self._coordinator = coordinator
        self._state = LifecycleState.RUNNING

        self.log.info(
            "reloader_started",
            path=str(root),
            directories=len(watch_set),
            pid=target.pid if target is not None else None,
            tick=reload_settings.tick_seconds,
        )

    def stop(self, reason: str = "requested") -> bool:
        """Request shutdown; returns False if one is already underway."""
        if self._coordinator is None:
            return False
        return self._coordinator.request_shutdown(reason)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the reloader has stopped."""
        if self._coordinator is None:
            return True
        return self._coordinator.wait(timeout)

    def run(self) -> int:
        """
        Start, then block until a termination signal has been handled.

        Must be called from the main thread.

        Returns:
            Process exit status
        """
        self.start()
        assert self._coordinator is not None
        previous = install_signal_handlers(self._coordinator)
        try:
            self.wait()
        finally:
            restore_signal_handlers(previous)
        return 0
