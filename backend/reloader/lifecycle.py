"""
fsnotify-reloader Lifecycle.

Process state machine, termination handling and ordered shutdown.
Requires Python 3.11+.
"""

import queue
import signal
from collections.abc import Iterable
from enum import Enum
from types import FrameType
from typing import Any

from utils.worker import Worker
from watcher.backend import WatchBackend
from watcher.channel import Channel, ChannelClosed
from watcher.ticker import Ticker

TERMINATION_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class LifecycleState(str, Enum):
    """Process-level lifecycle states."""

    STARTING = "starting"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


class LifecycleCoordinator(Worker):
    """
    Waits for a termination request, then tears the reloader down.

    Shutdown order:
        1. stop the ticker, so no signal goes out after the request
        2. close the watch backend, ending the raw event stream
        3. wait for the event watcher to drain the stream and return
        4. close the reload request channel
        5. wait for the debouncer to return
        6. close the completion channel, unblocking the main thread

    The event watcher is gone before the request channel is closed, so a
    request is never sent on a closed channel. Until then the debouncer
    keeps consuming, so a watcher blocked on a full channel always gets
    through.
    """

    name = "lifecycle-coordinator"

    def __init__(
        self,
        backend: WatchBackend,
        event_watcher: Worker,
        debouncer: Worker,
        requests: Channel[bool],
        ticker: Ticker,
    ) -> None:
        super().__init__()
        self._backend = backend
        self._event_watcher = event_watcher
        self._debouncer = debouncer
        self._requests = requests
        self._ticker = ticker
        self._quit: queue.SimpleQueue[str] = queue.SimpleQueue()
        self._shutdown_requested = False
        self._done: Channel[None] = Channel()
        self._state = LifecycleState.RUNNING

    @property
    def state(self) -> LifecycleState:
        return self._state

    def request_shutdown(self, reason: str = "requested") -> bool:
        """
        Ask for shutdown without blocking.

        Safe to call from a signal handler, including one that interrupts
        another: only the first call queues a request.

        Returns:
            False if a request is already pending or shutdown has begun
        """
        if self._shutdown_requested:
            return False
        self._shutdown_requested = True
        self._quit.put(reason)
        return True

    def run(self) -> None:
        reason = self._quit.get()
        self.shutdown(reason)

    def shutdown(self, reason: str) -> None:
        """Run the ordered shutdown sequence."""
        self._state = LifecycleState.SHUTTING_DOWN
        self.log.info("shutting_down", reason=reason)

        self._ticker.stop()

        try:
            self._backend.close()
        except Exception as e:
            self.log.error("watch_backend_close_failed", error=str(e))

        self._event_watcher.join()
        self._requests.close()
        self._debouncer.join()

        self._state = LifecycleState.STOPPED
        self.log.info("stopped")
        self._done.close()

    def wait(self, timeout: float | None = None) -> bool:
        """
        Block until shutdown has completed.

        Returns:
            True once stopped, False if the timeout elapsed first
        """
        try:
            self._done.get(timeout=timeout)
        except ChannelClosed:
            return True
        except queue.Empty:
            return False
        return True


def install_signal_handlers(
    coordinator: LifecycleCoordinator,
    signals: Iterable[signal.Signals] = TERMINATION_SIGNALS,
) -> dict[signal.Signals, Any]:
    """
    Route termination signals to the coordinator.

    Must be called from the main thread. The handler only puts onto the
    coordinator's termination queue; all logging happens on the
    coordinator thread.

    Returns:
        The previous handlers, for restore_signal_handlers()
    """

    def _handle(signum: int, frame: FrameType | None) -> None:
        coordinator.request_shutdown(signal.Signals(signum).name)

    previous = {}
    for sig in signals:
        previous[sig] = signal.signal(sig, _handle)
    return previous


def restore_signal_handlers(previous: dict[signal.Signals, Any]) -> None:
    """Reinstate handlers returned by install_signal_handlers()."""
    for sig, handler in previous.items():
        signal.signal(sig, handler)
