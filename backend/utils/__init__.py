"""
fsnotify-reloader Utilities Package.

Common utilities shared across all modules.
Requires Python 3.11+.
"""

from utils.config import Settings, get_settings
from utils.errors import ReloaderError, StartupError
from utils.logger import configure_logging, get_logger, LoggerMixin
from utils.worker import Worker

__all__ = [
    "Settings",
    "get_settings",
    "ReloaderError",
    "StartupError",
    "configure_logging",
    "get_logger",
    "LoggerMixin",
    "Worker",
]
