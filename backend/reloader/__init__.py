"""
fsnotify-reloader Package.

Hot-reload driver: watches a source tree and signals a process to reload.
Requires Python 3.11+.
"""

from reloader.app import Reloader
from reloader.lifecycle import LifecycleCoordinator, LifecycleState
from reloader.process import ProcessHandle

__all__ = [
    "Reloader",
    "LifecycleCoordinator",
    "LifecycleState",
    "ProcessHandle",
]
