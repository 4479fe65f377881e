"""
fsnotify-reloader Channel.

Closable blocking queue used for all communication between workers.
Requires Python 3.11+.
"""

import queue
import threading
import time
from collections import deque
from collections.abc import Iterator
from typing import Generic, TypeVar

T = TypeVar("T")


class ChannelClosed(Exception):
    """Raised by put() on a closed channel and by get() once closed and drained."""


class Channel(Generic[T]):
    """
    A FIFO queue that can be closed to signal "no more values will arrive".

    Closing wakes every blocked producer (which then raises ChannelClosed)
    and every blocked consumer. Items buffered before close are still
    delivered to consumers.

    maxsize=0 means unbounded; maxsize=1 gives a single-slot channel whose
    producer blocks until the previous item has been consumed.
    """

    def __init__(self, maxsize: int = 0) -> None:
        self._maxsize = maxsize
        self._items: deque[T] = deque()
        self._closed = False
        self._mutex = threading.Lock()
        self._not_empty = threading.Condition(self._mutex)
        self._not_full = threading.Condition(self._mutex)

    def put(self, item: T, timeout: float | None = None) -> None:
        """
        Put an item, blocking while the channel is full.

        Raises:
            ChannelClosed: the channel is closed, or was closed while waiting
            queue.Full: timeout elapsed while the channel stayed full
        """
        with self._not_full:
            if self._maxsize > 0:
                deadline = None if timeout is None else time.monotonic() + timeout
                while not self._closed and len(self._items) >= self._maxsize:
                    if deadline is None:
                        self._not_full.wait()
                        continue
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        raise queue.Full
                    self._not_full.wait(remaining)
            if self._closed:
                raise ChannelClosed
            self._items.append(item)
            self._not_empty.notify()

    def offer(self, item: T) -> bool:
        """Put an item only if there is room. Never blocks."""
        with self._mutex:
            if self._closed:
                return False
            if self._maxsize > 0 and len(self._items) >= self._maxsize:
                return False
            self._items.append(item)
            self._not_empty.notify()
            return True

    def get(self, timeout: float | None = None) -> T:
        """
        Remove and return the next item, blocking while the channel is empty.

        A timeout of 0 polls without blocking.

        Raises:
            ChannelClosed: the channel is closed and drained
            queue.Empty: timeout elapsed with nothing to receive
        """
        with self._not_empty:
            deadline = None if timeout is None else time.monotonic() + timeout
            while not self._items:
                if self._closed:
                    raise ChannelClosed
                if deadline is None:
                    self._not_empty.wait()
                    continue
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise queue.Empty
                self._not_empty.wait(remaining)
            item = self._items.popleft()
            self._not_full.notify()
            return item

    def close(self) -> None:
        """Close the channel. Safe to call more than once."""
        with self._mutex:
            self._closed = True
            self._not_empty.notify_all()
            self._not_full.notify_all()

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        with self._mutex:
            return len(self._items)

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.get()
            except ChannelClosed:
                return
