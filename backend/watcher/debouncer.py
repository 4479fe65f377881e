"""
fsnotify-reloader Reload Debouncer.

Collapses reload requests into at most one signal per tick.
Requires Python 3.11+.
"""

import queue
import signal
from typing import Protocol

from utils.worker import Worker
from watcher.channel import Channel, ChannelClosed
from watcher.ticker import Ticker


class SignalTarget(Protocol):
    """Something that can receive a reload signal."""

    pid: int

    def send(self, sig: signal.Signals) -> None: ...


class ReloadDebouncer(Worker):
    """
    Counts reload requests and signals the monitored process on each tick.

    On a tick with no pending requests nothing happens. On a tick with any
    number of pending requests exactly one signal is sent and the counter
    is reset, whether or not delivery succeeded.

    Without a target (log-only mode) the tick only logs the change.
    """

    name = "reload-debouncer"

    def __init__(
        self,
        requests: Channel[bool],
        ticker: Ticker,
        target: SignalTarget | None = None,
        reload_signal: signal.Signals = signal.SIGUSR1,
    ) -> None:
        """
        Initialize the debouncer.

        Args:
            requests: Single-slot reload request channel
            ticker: Tick source; the sole trigger for sending
            target: Monitored process, or None to only log
            reload_signal: Signal to deliver on reload
        """
        super().__init__()
        self._requests = requests
        self._ticker = ticker
        self._target = target
        self._signal = reload_signal
        self._pending = 0
        self._signals_sent = 0

    def run(self) -> None:
        """Consume requests and ticks until the request channel is closed."""
        while True:
            try:
                self._requests.get(timeout=self._ticker.remaining())
            except queue.Empty:
                pass
            except ChannelClosed:
                break
            else:
                self._pending += 1

            if self._ticker.consume():
                self.on_tick()

        self.log.debug("reload_debouncer_stopped", pending=self._pending)

    def on_tick(self) -> None:
        """Send one reload signal if anything is pending."""
        if self._pending < 1:
            return

        self.log.debug("reload_requested", times=self._pending)
        try:
            self._dispatch()
        finally:
            self._pending = 0

    def _dispatch(self) -> None:
        if self._target is None:
            self.log.info("change_detected", times=self._pending)
            return

        try:
            self._target.send(self._signal)
        except OSError as e:
            self.log.error(
                "reload_signal_failed",
                pid=self._target.pid,
                signal=self._signal.name,
                error=str(e),
            )
            return

        self._signals_sent += 1
        self.log.info("reload_signal_sent", pid=self._target.pid, signal=self._signal.name)

    @property
    def pending(self) -> int:
        """Requests received since the last tick that acted."""
        return self._pending

    @property
    def signals_sent(self) -> int:
        """Number of signals delivered successfully."""
        return self._signals_sent
