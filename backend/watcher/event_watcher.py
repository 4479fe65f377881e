"""
fsnotify-reloader Event Watcher.

Filters raw filesystem events down to reload requests.
Requires Python 3.11+.
"""

from collections.abc import Iterable

from utils.worker import Worker
from watcher.backend import BackendItem, OpKind, RawEvent, WatchError
from watcher.channel import Channel, ChannelClosed

# A reload request carries no payload
RELOAD = True

DEFAULT_EXTENSIONS = (".php", ".twig", ".yaml", ".yml")


class EventWatcher(Worker):
    """
    Reads the backend stream and emits one reload request per relevant write.

    The request channel holds a single unit: while the debouncer has not
    taken the previous request, emitting blocks this worker. Requests are
    therefore throttled to the debouncer's pace without ever growing a
    backlog.
    """

    name = "event-watcher"

    def __init__(
        self,
        events: Channel[BackendItem],
        requests: Channel[bool],
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    ) -> None:
        """
        Initialize the event watcher.

        Args:
            events: Backend stream of raw events and errors
            requests: Single-slot reload request channel
            extensions: Suffixes (case-sensitive) that qualify a write
        """
        super().__init__()
        self._events = events
        self._requests = requests
        self._extensions = tuple(extensions)

    def is_relevant(self, event: RawEvent) -> bool:
        """Check if an event should request a reload."""
        return event.kind is OpKind.WRITE and event.path.endswith(self._extensions)

    def run(self) -> None:
        """Process events until the backend stream is closed."""
        for item in self._events:
            if isinstance(item, WatchError):
                self.log.error("watch_error", error=str(item.error))
                continue
            if not self.handle(item):
                break

        self.log.debug("event_watcher_stopped")

    def handle(self, event: RawEvent) -> bool:
        """
        Handle a single raw event.

        Returns:
            False once the request channel has been closed
        """
        self.log.debug("event", path=event.path, kind=event.kind.value)
        if event.kind is not OpKind.WRITE:
            return True

        self.log.info("modified_file", path=event.path)
        if not self.is_relevant(event):
            return True

        try:
            self._requests.put(RELOAD)
        except ChannelClosed:
            self.log.debug("reload_channel_closed", path=event.path)
            return False
        return True
