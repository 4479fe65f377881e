"""
fsnotify-reloader Ticker.

Periodic tick source polled by the reload debouncer.
Requires Python 3.11+.
"""

import threading
import time
from collections.abc import Callable


class Ticker:
    """
    Fires every ``interval`` seconds, on a fixed schedule from creation.

    Ticks are independent of when they are observed. If the consumer falls
    behind, missed ticks collapse into one. A stopped ticker never fires.
    """

    def __init__(self, interval: float, clock: Callable[[], float] = time.monotonic) -> None:
        if interval <= 0:
            raise ValueError(f"tick interval must be positive, got {interval}")
        self._interval = interval
        self._clock = clock
        self._next = clock() + interval
        self._stopped = threading.Event()

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def remaining(self) -> float | None:
        """
        Seconds until the next tick, or None when stopped.

        Zero means a tick is due.
        """
        if self.stopped:
            return None
        return max(0.0, self._next - self._clock())

    def consume(self) -> bool:
        """Return True exactly once per due tick and schedule the next one."""
        if self.stopped:
            return False

        now = self._clock()
        if now < self._next:
            return False

        missed = int((now - self._next) // self._interval)
        self._next += (missed + 1) * self._interval
        return True

    def stop(self) -> None:
        self._stopped.set()
