"""
fsnotify-reloader Test Configuration.

Pytest fixtures and configuration.
Requires Python 3.11+.
"""

import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from helpers import FakeBackend, RecordingTarget
from utils.config import Settings


@pytest.fixture
def fake_backend() -> FakeBackend:
    """Create an in-memory backend."""
    return FakeBackend()


@pytest.fixture
def target() -> RecordingTarget:
    """Create a recording monitored process."""
    return RecordingTarget()


@pytest.fixture
def dead_pid() -> int:
    """A pid that belonged to a process that has already exited."""
    proc = subprocess.Popen([sys.executable, "-c", "pass"])
    proc.wait()
    return proc.pid


@pytest.fixture
def project_tree(tmp_path: Path) -> Path:
    """
    Create a PHP-style project tree.

    proj/
        a.php
        config/services.yaml
        src/Controller/Home.php
        src/.cache/deep/x.php
        templates/base.html.twig
        var/cache/dev/c.php
        vendor/acme/b.php
        .git/objects/
    """
    root = tmp_path / "proj"
    for directory in (
        "config",
        "src/Controller",
        "src/.cache/deep",
        "templates",
        "var/cache/dev",
        "vendor/acme",
        ".git/objects",
    ):
        (root / directory).mkdir(parents=True)

    (root / "a.php").write_text("<?php\n")
    (root / "config/services.yaml").write_text("services: {}\n")
    (root / "src/Controller/Home.php").write_text("<?php\n")
    (root / "src/.cache/deep/x.php").write_text("<?php\n")
    (root / "templates/base.html.twig").write_text("{{ body }}\n")
    (root / "var/cache/dev/c.php").write_text("<?php\n")
    (root / "vendor/acme/b.php").write_text("<?php\n")
    return root


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Build settings for a watch root with a short tick."""

    def _make(root: Path, tick: float = 0.2, enabled: bool = True, pid: int = -1) -> Settings:
        settings = Settings()
        settings.watcher.path = root
        settings.watcher.excluded_dirs = ["var", "vendor"]
        settings.watcher.skip_hidden = True
        settings.watcher.extensions = [".php", ".twig", ".yaml", ".yml"]
        settings.reload.tick_seconds = tick
        settings.reload.enabled = enabled
        settings.reload.pid = pid
        settings.reload.signal = "SIGUSR1"
        return settings

    return _make
