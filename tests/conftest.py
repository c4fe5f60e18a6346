# tests/conftest.py
"""
Shared fixtures.

Fake browsers are small shell scripts, so tests that execute them are
skipped on Windows.
"""

import os
import stat
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

from browser_launcher.config.settings import get_settings
from browser_launcher.core.browser_constants import PlatformTag
from browser_launcher.core.logger import setup_logging
from browser_launcher.core.platforms import PlatformStrategy
from browser_launcher.models.browser import BrowserIdentity

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="fake browsers are shell scripts")


def write_script(path: Path, body: str) -> Path:
    """Write an executable ``/bin/sh`` script."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


class FakePlatform(PlatformStrategy):
    """
    Platform strategy answering from dictionaries keyed by browser slug.

    Every call is recorded in ``calls`` as ``(step, slug)``.
    """

    tag = PlatformTag.UNKNOWN

    def __init__(
            self,
            install: Optional[Dict[str, List[str]]] = None,
            on_path: Optional[Dict[str, str]] = None,
            deep: Optional[Dict[str, str]] = None,
            environ: Optional[Dict[str, str]] = None
    ):
        super().__init__(environ or {})
        self.install = install or {}
        self.on_path = on_path or {}
        self.deep = deep or {}
        self.calls: List[tuple] = []

    def _platform_install_paths(self, identity: BrowserIdentity) -> List[str]:
        self.calls.append(("install", identity.slug()))
        return list(self.install.get(identity.slug(), []))

    def lookup_executable(self, identity: BrowserIdentity) -> Optional[str]:
        self.calls.append(("path", identity.slug()))
        return self.on_path.get(identity.slug())

    def deep_scan(self, identity: BrowserIdentity) -> Optional[str]:
        self.calls.append(("deep", identity.slug()))
        return self.deep.get(identity.slug())


@pytest.fixture
def make_script(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing executable scripts under tmp_path/bin."""
    def factory(name: str, body: str = "exit 0") -> Path:
        return write_script(tmp_path / "bin" / name, body)
    return factory


@pytest.fixture
def fake_executable(tmp_path: Path) -> Path:
    """An existing (not necessarily runnable) browser file."""
    path = tmp_path / "browsers" / "chrome"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def isolated_settings():
    """Drop cached settings around each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clean_environ() -> Dict[str, str]:
    """Process environment without browser overrides or HEADLESS."""
    blocked = {"CHROME_PATH", "LIGHTHOUSE_CHROMIUM_PATH", "BROWSER_PATH", "HEADLESS"}
    return {key: value for key, value in os.environ.items() if key not in blocked}


@pytest.fixture(autouse=True)
def reset_logging():
    """Rebind log handlers to the live stderr after each test."""
    yield
    setup_logging(log_level="WARNING", force=True)

