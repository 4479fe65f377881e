"""
fsnotify-reloader Directory Tree Indexer.

Builds the fixed set of directories to watch.
Requires Python 3.11+.
"""

import os
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from utils.errors import IndexingError
from utils.logger import LoggerMixin
from watcher.backend import WatchBackend


class Visit(Enum):
    """Traversal control returned by the directory visitor."""

    DESCEND = "descend"
    SKIP_SUBTREE = "skip_subtree"


@dataclass(frozen=True)
class WatchSet:
    """Ordered, immutable collection of directories to watch."""

    directories: tuple[Path, ...]

    def __iter__(self) -> Iterator[Path]:
        return iter(self.directories)

    def __len__(self) -> int:
        return len(self.directories)

    def __contains__(self, path: object) -> bool:
        return path in self.directories


def walk_directories(root: Path, visit: Callable[[Path], Visit]) -> Iterator[Path]:
    """
    Depth-first, pre-order walk over the directories below ``root``.

    Siblings are visited in name order. ``visit`` decides for every
    directory below the root whether it is yielded and descended into.
    Symlinked directories are not followed. I/O errors propagate. Depth is
    limited only by the filesystem.
    """
    stack = [root]
    while stack:
        current = stack.pop()
        yield current
        with os.scandir(current) as it:
            subdirs = sorted(
                (Path(e.path) for e in it if e.is_dir(follow_symlinks=False)),
                key=lambda p: p.name,
            )
        # Reversed so the first sibling is popped first
        stack.extend(reversed([p for p in subdirs if visit(p) is Visit.DESCEND]))


class DirectoryTreeIndexer(LoggerMixin):
    """
    Walks a root directory once and registers every relevant directory.

    A directory named like one of ``excluded_names``, or starting with a
    dot when ``skip_hidden`` is set, is skipped together with everything
    below it. The root itself is always watched.
    """

    def __init__(
        self,
        excluded_names: Iterable[str] = ("var", "vendor"),
        skip_hidden: bool = True,
    ) -> None:
        """
        Initialize the indexer.

        Args:
            excluded_names: Exact directory names to exclude
            skip_hidden: Exclude directories whose name starts with "."
        """
        self._excluded = frozenset(excluded_names)
        self._skip_hidden = skip_hidden

    def is_excluded(self, name: str) -> bool:
        """Check if a directory name excludes its subtree."""
        return name in self._excluded or (self._skip_hidden and name.startswith("."))

    def _visit(self, path: Path) -> Visit:
        if self.is_excluded(path.name):
            self.log.debug("skipped_dir", path=str(path))
            return Visit.SKIP_SUBTREE
        return Visit.DESCEND

    def scan(self, root: Path) -> WatchSet:
        """
        Build the watch set without registering anything.

        Raises:
            IndexingError: any I/O error during traversal
        """
        try:
            directories = tuple(walk_directories(root, self._visit))
        except OSError as e:
            raise IndexingError(f"cannot index {root}: {e}") from e
        return WatchSet(directories)

    def index(self, root: Path, backend: WatchBackend) -> WatchSet:
        """
        Build the watch set and register each directory with the backend.

        The whole tree is walked before anything is registered, so a
        traversal error never leaves a partial watch set behind.

        Raises:
            IndexingError: any I/O error during traversal
            RegistrationError: the backend refused a directory
        """
        watch_set = self.scan(root)
        for directory in watch_set:
            backend.register(directory)
            self.log.debug("watching_dir", path=str(directory))

        self.log.info("watch_set_ready", root=str(root), directories=len(watch_set))
        return watch_set
