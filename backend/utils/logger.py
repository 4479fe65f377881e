"""
fsnotify-reloader Structured Logging Module.

All output goes to stderr. Each entry carries the emitting component and
the thread it ran on, since the reloader's workers log concurrently.
Requires Python 3.11+.
"""

import logging
import sys
import threading
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from utils.config import Settings, get_settings

# Libraries whose own logging is only useful when something goes wrong
QUIET_LOGGERS = ("watchdog",)


def _add_app_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag entries with the application name and version."""
    settings = get_settings()
    event_dict["app"] = settings.app_name
    event_dict["version"] = settings.app_version
    return event_dict


def _add_thread_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("thread", threading.current_thread().name)
    return event_dict


def _renderer(fmt: str) -> Processor:
    if fmt == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(settings: Settings | None = None) -> None:
    """
    Configure structured logging for the process.

    The CLI calls this with its effective settings, so ``--verbose``
    lowers the threshold to DEBUG. Calling it again replaces the previous
    configuration.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.logging.effective_level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _add_app_context,
        _add_thread_name,
        structlog.dev.set_exc_info,
    ]
    if settings.logging.format == "json":
        processors.append(structlog.processors.dict_tracebacks)
    processors.append(_renderer(settings.logging.format))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None, **context: Any) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger, optionally bound to extra context.

    Args:
        name: Component name shown on every entry
        **context: Key/value pairs added to every entry
    """
    log = structlog.get_logger(name)
    if name is not None:
        context.setdefault("component", name)
    return log.bind(**context) if context else log


class LoggerMixin:
    """
    Mixin giving a class a ``log`` bound to its component name.

    Usage:
        class Indexer(LoggerMixin):
            def index(self):
                self.log.info("watch_set_ready", directories=12)
    """

    @property
    def log(self) -> structlog.stdlib.BoundLogger:
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger
