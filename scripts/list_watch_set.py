#!/usr/bin/env python3
"""
fsnotify-reloader Watch Set Listing Script.

Prints the directories the reloader would watch, without watching them.
Requires Python 3.11+.

Usage:
    python scripts/list_watch_set.py /path/to/project
    python scripts/list_watch_set.py /path/to/project --exclude var --exclude cache
"""

import argparse
import sys
import time
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from reloader.cli import resolve_watch_path, validate_watch_path
from utils.config import get_settings
from utils.errors import StartupError
from utils.logger import configure_logging, get_logger
from watcher.indexer import DirectoryTreeIndexer


configure_logging()
logger = get_logger("list_watch_set")


def main() -> int:
    """Main entry point."""
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="List the directories fsnotify-reloader would watch"
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Root directory (default: current directory)",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        metavar="NAME",
        help="Directory name to skip with its subtree (replaces defaults)",
    )
    parser.add_argument(
        "--include-hidden",
        action="store_true",
        help="Descend into directories starting with '.'",
    )

    args = parser.parse_args()

    indexer = DirectoryTreeIndexer(
        excluded_names=args.exclude or settings.watcher.excluded_dirs,
        skip_hidden=not args.include_hidden,
    )

    start_time = time.perf_counter()
    try:
        root = validate_watch_path(resolve_watch_path(args.path))
        watch_set = indexer.scan(root)
    except StartupError as e:
        logger.error("scan_failed", error=str(e))
        return 1

    for directory in watch_set:
        print(directory)

    logger.info(
        "scan_completed",
        directories=len(watch_set),
        time_seconds=round(time.perf_counter() - start_time, 3),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
