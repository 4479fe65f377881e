"""
fsnotify-reloader Command Line Interface.

Usage:
    fsnotify-reloader --path /srv/app --pid 4242 --tick 5 --verbose
    fsnotify-reloader --path /srv/app --log-only
Requires Python 3.11+.
"""

import argparse
import os
from pathlib import Path

from reloader.app import Reloader
from utils.config import Settings, get_settings, normalize_signal_name
from utils.errors import InvalidWatchPathError, StartupError
from utils.logger import configure_logging, get_logger


logger = get_logger("cli")


def resolve_watch_path(path: str | Path) -> Path:
    """
    Make a watch path absolute.

    An empty path means the current directory. Symlinks are kept as given.
    """
    raw = str(path) if str(path) else "."
    return Path(os.path.abspath(raw))


def validate_watch_path(path: Path) -> Path:
    """
    Raises:
        InvalidWatchPathError: the path is missing or not a directory
    """
    if not path.exists():
        raise InvalidWatchPathError(path, "folder does not exist")
    if not path.is_dir():
        raise InvalidWatchPathError(path, "is not a directory")
    return path


def build_parser(defaults: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fsnotify-reloader",
        description="Signal a process to reload when source files change.",
    )
    parser.add_argument(
        "--path",
        default=str(defaults.watcher.path),
        help="Filesystem path to watch for file changes (default: %(default)s)",
    )
    parser.add_argument(
        "--pid",
        type=int,
        default=defaults.reload.pid,
        help="Process id to monitor and send the reload signal to",
    )
    parser.add_argument(
        "--tick",
        type=float,
        default=defaults.reload.tick_seconds,
        metavar="SECONDS",
        help="Minimum duration between reloads in seconds (default: %(default)s)",
    )
    parser.add_argument(
        "--signal",
        default=defaults.reload.signal,
        help="Signal sent to request a reload (default: %(default)s)",
    )
    parser.add_argument(
        "--log-only",
        action="store_true",
        help="Only log relevant changes; do not signal any process",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        metavar="NAME",
        help="Directory name to skip with its subtree (repeatable; replaces defaults)",
    )
    parser.add_argument(
        "--extension",
        action="append",
        metavar="EXT",
        help="File suffix that triggers a reload (repeatable; replaces defaults)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=defaults.logging.verbose,
        help="Log verbose output",
    )
    return parser


def settings_from_args(args: argparse.Namespace, defaults: Settings) -> Settings:
    """Apply command-line overrides to a copy of the settings."""
    if args.tick <= 0:
        raise StartupError(f"tick must be positive, got {args.tick}")

    settings = defaults.model_copy(deep=True)
    settings.watcher.path = resolve_watch_path(args.path)
    settings.reload.pid = args.pid
    settings.reload.tick_seconds = args.tick
    settings.reload.signal = normalize_signal_name(args.signal)
    settings.logging.verbose = args.verbose
    if args.log_only:
        settings.reload.enabled = False
    if args.exclude:
        settings.watcher.excluded_dirs = args.exclude
    if args.extension:
        settings.watcher.extensions = args.extension
    return settings


def main(argv: list[str] | None = None) -> int:
    """Entry point. Returns the process exit status."""
    defaults = get_settings()
    args = build_parser(defaults).parse_args(argv)

    try:
        settings = settings_from_args(args, defaults)
    except (StartupError, ValueError) as e:
        configure_logging(defaults)
        logger.error("invalid_arguments", error=str(e))
        return 1

    configure_logging(settings)
    if settings.logging.verbose:
        logger.info(
            "configuration",
            path=str(settings.watcher.path),
            pid=settings.reload.pid,
            tick=settings.reload.tick_seconds,
            signal=settings.reload.signal,
            excluded_dirs=settings.watcher.excluded_dirs,
            extensions=settings.watcher.extensions,
            log_only=not settings.reload.enabled,
        )

    try:
        validate_watch_path(settings.watcher.path)
        return Reloader(settings).run()
    except StartupError as e:
        logger.error("startup_failed", error=str(e))
        return 1
