# tests/unit/test_probe.py
"""
Unit tests for executable probing primitives.
"""

import subprocess
import sys

import pytest

from browser_launcher.core import probe
from tests.conftest import posix_only, write_script


class TestExistenceAndPathLookup:
    """exists() and PATH lookups."""

    def test_exists(self, fake_executable, tmp_path):
        assert probe.exists(str(fake_executable))
        assert not probe.exists(str(tmp_path / "missing"))
        assert not probe.exists("")

    @posix_only
    def test_lookup_on_path_finds_executable(self, tmp_path):
        script = write_script(tmp_path / "bin" / "chromium", "exit 0")

        found = probe.lookup_on_path("chromium", str(tmp_path / "bin"))

        assert found == str(script)

    def test_lookup_on_path_missing(self, tmp_path):
        assert probe.lookup_on_path("no-such-browser", str(tmp_path)) is None
        assert probe.lookup_on_path("", str(tmp_path)) is None


class TestDesktopEntries:
    """Freedesktop desktop-entry scanning."""

    def test_matches_exec_with_arguments(self, tmp_path, fake_executable):
        target = fake_executable.with_name("google-chrome-stable")
        target.write_text("", encoding="utf-8")
        apps = tmp_path / "applications"
        apps.mkdir()
        (apps / "google-chrome.desktop").write_text(
            "[Desktop Entry]\nName=Google Chrome\n"
            f"Exec={target} --new-window %U\n",
            encoding="utf-8"
        )

        found = probe.scan_desktop_entries([str(apps)], ["google-chrome-stable", "chrome"])

        assert found == str(target)

    def test_ignores_entries_for_other_programs(self, tmp_path, fake_executable):
        apps = tmp_path / "applications"
        apps.mkdir()
        (apps / "editor.desktop").write_text(f"Exec={fake_executable.with_name('gedit')} %F\n", encoding="utf-8")

        assert probe.scan_desktop_entries([str(apps)], ["chrome"]) is None

    def test_missing_target_is_skipped(self, tmp_path):
        apps = tmp_path / "applications"
        apps.mkdir()
        (apps / "chromium.desktop").write_text(f"Exec={tmp_path}/gone/chromium %U\n", encoding="utf-8")

        assert probe.scan_desktop_entries([str(apps)], ["chromium"]) is None

    @posix_only
    def test_bare_exec_name_is_resolved_on_path(self, tmp_path):
        script = write_script(tmp_path / "bin" / "vivaldi-stable", "exit 0")
        apps = tmp_path / "applications"
        apps.mkdir()
        (apps / "vivaldi.desktop").write_text("Exec=vivaldi-stable %U\n", encoding="utf-8")

        found = probe.scan_desktop_entries([str(apps)], ["vivaldi-stable"], str(tmp_path / "bin"))

        assert found == str(script)

    def test_directories_are_scanned_in_order(self, tmp_path):
        first = tmp_path / "system" / "chromium"
        second = tmp_path / "user" / "chromium"
        for index, target in enumerate((first, second)):
            target.parent.mkdir(parents=True)
            target.write_text("", encoding="utf-8")
            apps = tmp_path / f"apps{index}"
            apps.mkdir()
            (apps / "chromium.desktop").write_text(f"Exec={target}\n", encoding="utf-8")

        found = probe.scan_desktop_entries(
            [str(tmp_path / "apps0"), str(tmp_path / "apps1")], ["chromium"]
        )

        assert found == str(first)

    def test_missing_directories_are_ignored(self, tmp_path):
        assert probe.scan_desktop_entries([str(tmp_path / "nope")], ["chromium"]) is None


class TestLaunchServicesScan:
    """lsregister dump parsing."""

    def _fake_dump(self, monkeypatch, output: bytes):
        def fake_run(args, **kwargs):
            return subprocess.CompletedProcess(args, 0, stdout=output)
        monkeypatch.setattr(probe.subprocess, "run", fake_run)

    def test_finds_bundle_executable(self, tmp_path, monkeypatch, fake_executable):
        bundle = tmp_path / "Apps" / "Microsoft Edge.app"
        executable = bundle / "Contents" / "MacOS" / "Microsoft Edge"
        executable.parent.mkdir(parents=True)
        executable.write_text("", encoding="utf-8")
        self._fake_dump(monkeypatch, (
            "bundle id:    1234\n"
            f"path:         {tmp_path}/Apps/Other.app (0x1)\n"
            f"path:         {bundle} (0x2a3b)\n"
        ).encode("utf-8"))

        found = probe.scan_lsregister(
            "microsoft edge", "Contents/MacOS/Microsoft Edge", lsregister=str(fake_executable)
        )

        assert found == str(executable)

    def test_non_utf8_output_is_tolerated(self, monkeypatch, fake_executable):
        self._fake_dump(monkeypatch, b"\xff\xfe Chromium.app garbage\n")

        assert probe.scan_lsregister(
            "Chromium", "Contents/MacOS/Chromium", lsregister=str(fake_executable)
        ) is None

    def test_missing_lsregister(self, tmp_path):
        assert probe.scan_lsregister(
            "Chromium", "Contents/MacOS/Chromium", lsregister=str(tmp_path / "lsregister")
        ) is None

    def test_spawn_failure_is_not_found(self, monkeypatch, fake_executable):
        def failing_run(args, **kwargs):
            raise PermissionError("denied")
        monkeypatch.setattr(probe.subprocess, "run", failing_run)

        assert probe.scan_lsregister(
            "Chromium", "Contents/MacOS/Chromium", lsregister=str(fake_executable)
        ) is None


class TestRegistry:
    """Windows registry lookups."""

    @pytest.mark.skipif(sys.platform == "win32", reason="winreg is available on Windows")
    def test_returns_none_off_windows(self):
        assert probe.query_registry([r"SOFTWARE\Microsoft\Windows\CurrentVersion\App Paths\chrome.exe"]) is None


class TestVersionQuery:
    """Browser --version parsing."""

    @pytest.mark.parametrize("output,expected", [
        ("Chromium 120.0.6099.109 built on Debian\n", "120.0.6099.109"),
        ("Microsoft Edge 121.0.2277.83\nsecond line", "Edge"),
        ("Chromium\n", None),
        ("", None),
    ])
    def test_parse_version_output(self, output, expected):
        assert probe.parse_version_output(output) == expected

    @posix_only
    def test_query_version_runs_executable(self, tmp_path):
        script = write_script(tmp_path / "chromium", 'echo "Chromium 120.0.6099.109"')

        assert probe.query_version(str(script)) == "120.0.6099.109"

    @posix_only
    def test_query_version_without_output(self, tmp_path):
        script = write_script(tmp_path / "silent", "exit 0")

        assert probe.query_version(str(script)) is None

    def test_query_version_spawn_failure(self, tmp_path):
        assert probe.query_version(str(tmp_path / "missing-browser")) is None
