"""
fsnotify-reloader Watcher Package.

Directory indexing, event filtering and reload debouncing.
Requires Python 3.11+.
"""

from watcher.backend import OpKind, RawEvent, WatchError, WatchdogBackend
from watcher.channel import Channel, ChannelClosed
from watcher.debouncer import ReloadDebouncer
from watcher.event_watcher import EventWatcher
from watcher.indexer import DirectoryTreeIndexer, WatchSet
from watcher.ticker import Ticker

__all__ = [
    "OpKind",
    "RawEvent",
    "WatchError",
    "WatchdogBackend",
    "Channel",
    "ChannelClosed",
    "ReloadDebouncer",
    "EventWatcher",
    "DirectoryTreeIndexer",
    "WatchSet",
    "Ticker",
]
