"""
Tests for Directory Tree Indexer.

Requires Python 3.11+.
"""

import os
import sys
from pathlib import Path

import pytest

from helpers import FakeBackend
from utils.errors import IndexingError, RegistrationError
from watcher.indexer import DirectoryTreeIndexer, Visit, walk_directories


class TestDirectoryTreeIndexer:
    """Test cases for DirectoryTreeIndexer."""

    @pytest.fixture
    def indexer(self) -> DirectoryTreeIndexer:
        """Create an indexer with the default exclusions."""
        return DirectoryTreeIndexer()

    def test_scan_order_and_exclusions(self, indexer: DirectoryTreeIndexer, project_tree: Path):
        """Test depth-first order with excluded subtrees pruned."""
        watch_set = indexer.scan(project_tree)

        assert list(watch_set) == [
            project_tree,
            project_tree / "config",
            project_tree / "src",
            project_tree / "src" / "Controller",
            project_tree / "templates",
        ]

    def test_no_path_inside_excluded_subtree(self, indexer: DirectoryTreeIndexer, project_tree: Path):
        """Test nothing below var, vendor or a dot directory is watched."""
        (project_tree / "src" / "Controller" / "vendor" / "deep" / "deeper").mkdir(parents=True)
        (project_tree / "templates" / ".idea" / "inner").mkdir(parents=True)

        watch_set = indexer.scan(project_tree)

        for directory in watch_set:
            parts = directory.relative_to(project_tree).parts
            assert "var" not in parts
            assert "vendor" not in parts
            assert not any(part.startswith(".") for part in parts)

    def test_files_are_not_watched(self, indexer: DirectoryTreeIndexer, project_tree: Path):
        """Test only directories end up in the watch set."""
        watch_set = indexer.scan(project_tree)

        assert all(directory.is_dir() for directory in watch_set)
        assert project_tree / "a.php" not in watch_set

    def test_root_always_included(self, indexer: DirectoryTreeIndexer, tmp_path: Path):
        """Test the root is watched even when its own name is excluded."""
        root = tmp_path / "vendor"
        (root / "lib").mkdir(parents=True)

        assert list(indexer.scan(root)) == [root, root / "lib"]

    def test_name_match_is_exact(self, indexer: DirectoryTreeIndexer, tmp_path: Path):
        """Test names that only contain an excluded name are kept."""
        for name in ("vendors", "var2", "my.vendor"):
            (tmp_path / name).mkdir()

        watch_set = indexer.scan(tmp_path)

        assert len(watch_set) == 4

    def test_custom_exclusions(self, tmp_path: Path):
        """Test configurable excluded names and hidden handling."""
        for name in ("node_modules", "vendor", ".github"):
            (tmp_path / name).mkdir()

        indexer = DirectoryTreeIndexer(excluded_names=["node_modules"], skip_hidden=False)
        watch_set = indexer.scan(tmp_path)

        assert list(watch_set) == [tmp_path, tmp_path / ".github", tmp_path / "vendor"]

    def test_symlinked_directories_not_followed(self, indexer: DirectoryTreeIndexer, tmp_path: Path):
        """Test a symlink to a directory is not traversed."""
        real = tmp_path / "real"
        real.mkdir()
        os.symlink(real, tmp_path / "link", target_is_directory=True)

        assert list(indexer.scan(tmp_path)) == [tmp_path, real]

    def test_traversal_error_is_fatal(self, indexer: DirectoryTreeIndexer, tmp_path: Path):
        """Test an unreadable root aborts with no registration."""
        backend = FakeBackend()

        with pytest.raises(IndexingError):
            indexer.index(tmp_path / "missing", backend)
        assert backend.registered == []

    def test_index_registers_every_directory(self, indexer: DirectoryTreeIndexer, project_tree: Path):
        """Test each watched directory is registered in order."""
        backend = FakeBackend()

        watch_set = indexer.index(project_tree, backend)

        assert backend.registered == list(watch_set)
        assert project_tree / "vendor" not in backend.registered

    def test_registration_failure_is_fatal(self, indexer: DirectoryTreeIndexer, project_tree: Path):
        """Test a refused registration stops indexing."""
        backend = FakeBackend(fail_on="src")

        with pytest.raises(RegistrationError):
            indexer.index(project_tree, backend)
        assert backend.registered == [project_tree, project_tree / "config"]


class TestWalkDirectories:
    """Test cases for the traversal primitive."""

    def test_skip_subtree_prunes_descendants(self, tmp_path: Path):
        """Test SKIP_SUBTREE drops the directory and everything below it."""
        (tmp_path / "a" / "b" / "c").mkdir(parents=True)
        (tmp_path / "d").mkdir()
        visited: list[str] = []

        def visit(path: Path) -> Visit:
            visited.append(path.name)
            return Visit.SKIP_SUBTREE if path.name == "a" else Visit.DESCEND

        result = list(walk_directories(tmp_path, visit))

        assert result == [tmp_path, tmp_path / "d"]
        assert "b" not in visited
        assert "c" not in visited

    def test_tree_deeper_than_recursion_limit(self, tmp_path: Path):
        """Test very deep trees are walked without exhausting the stack."""
        depth = sys.getrecursionlimit() + 200
        path = tmp_path
        for _ in range(depth):
            path = path / "d"
            path.mkdir()

        try:
            result = list(walk_directories(tmp_path, lambda p: Visit.DESCEND))
        finally:
            while path != tmp_path:
                path.rmdir()
                path = path.parent

        assert len(result) == depth + 1
        assert result[-1] == tmp_path.joinpath(*["d"] * depth)

    def test_siblings_in_name_order_depth_first(self, tmp_path: Path):
        for rel in ("b/y", "a/z", "a/x", "c"):
            (tmp_path / rel).mkdir(parents=True)

        result = list(walk_directories(tmp_path, lambda p: Visit.DESCEND))

        assert [p.relative_to(tmp_path).as_posix() for p in result[1:]] == ["a", "a/x", "a/z", "b", "b/y", "c"]
