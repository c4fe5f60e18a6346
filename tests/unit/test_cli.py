# tests/unit/test_cli.py
"""
Tests for the command line front-end.
"""

import os
from unittest.mock import patch

import pytest

from browser_launcher import __version__, cli
from browser_launcher.core.browser_constants import BrowserType
from browser_launcher.core.exceptions import BrowserConfigurationException
from browser_launcher.core.launcher import BrowserLauncher
from browser_launcher.models.browser import BrowserIdentity, ResolvedBrowser
from tests.conftest import posix_only

QUIET = ["--log-level", "critical"]


def parse(*argv):
    return cli.create_parser().parse_args(list(argv))


class TestArgumentMapping:
    """Mapping parsed arguments onto a LaunchConfiguration."""

    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        config = cli.build_configuration(parse())

        assert config.starting_url == "about:blank"
        assert config.browser.browser_type is BrowserType.CHROME
        assert config.window_size is None
        assert config.env_vars is None

    def test_all_options(self):
        config = cli.build_configuration(parse(
            "--starting-url", "https://example.com",
            "--flags", "--foo,--bar=1",
            "--port", "9222",
            "--browser", "edge",
            "--headless", "--incognito", "--disable-gpu", "--no-sandbox",
            "--disable-web-security", "--allow-insecure-content", "--ignore-ssl-errors",
            "--disable-extensions", "--disable-plugins", "--disable-images",
            "--disable-javascript", "--ignore-default-flags",
            "--user-agent", "TestAgent/1.0",
            "--proxy-server", "socks5://127.0.0.1:1080",
            "--host-resolver-rules", "MAP * 127.0.0.1",
            "--user-data-dir", "profile",
            "--additional-args", "--lang=en,--mute-audio",
            "--window-size", "1920x1080",
            "--env", "DISPLAY=:99",
            "--env", "LANG=C",
        ))

        assert config.starting_url == "https://example.com"
        assert config.flags == ["--foo", "--bar=1"]
        assert config.port == 9222
        assert config.browser == BrowserIdentity.of(BrowserType.EDGE)
        assert config.headless and config.incognito and config.disable_gpu
        assert config.no_sandbox and config.disable_web_security and config.allow_insecure_content
        assert config.ignore_ssl_errors and config.disable_extensions and config.disable_plugins
        assert config.disable_images and config.disable_javascript and config.ignore_default_flags
        assert config.user_agent == "TestAgent/1.0"
        assert config.proxy_server == "socks5://127.0.0.1:1080"
        assert config.host_resolver_rules == "MAP * 127.0.0.1"
        assert config.user_data_dir.name == "profile"
        assert config.additional_args == ["--lang=en", "--mute-audio"]
        assert config.window_size == (1920, 1080)
        assert config.env_vars == {"DISPLAY": ":99", "LANG": "C"}

    def test_default_browser_from_settings(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with patch.dict(os.environ, {"BROWSER_LAUNCHER_DEFAULT_BROWSER": "brave"}):
            config = cli.build_configuration(parse())

        assert config.browser.browser_type is BrowserType.BRAVE

    def test_browser_choice_is_enforced(self):
        with pytest.raises(SystemExit):
            parse("--browser", "firefox")

    def test_env_assignments(self):
        assert cli.parse_env_assignments([]) is None
        assert cli.parse_env_assignments(["A=1", "B=x=y", "C="]) == {"A": "1", "B": "x=y", "C": ""}

        with pytest.raises(BrowserConfigurationException):
            cli.parse_env_assignments(["NOVALUE"])


class TestMain:
    """Exit codes and diagnostics."""

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    @pytest.mark.parametrize("size", ["invalid", "1920", "ax1080", "1920x²"])
    def test_invalid_window_size_exits_1(self, size, capsys, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        assert cli.main(["--window-size", size, *QUIET]) == 1
        assert "Invalid window size" in capsys.readouterr().err

    def test_invalid_port_exits_1(self, capsys, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        assert cli.main(["--port", "70000", *QUIET]) == 1
        assert "Invalid launch configuration" in capsys.readouterr().err

    def test_invalid_env_assignment_exits_1(self, capsys, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        assert cli.main(["--env", "BROKEN", *QUIET]) == 1
        assert "KEY=VALUE" in capsys.readouterr().err

    def test_missing_pinned_path_exits_1(self, capsys, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        profile = tmp_path / "profile"

        code = cli.main(["--browser-path", str(tmp_path / "nope"), "--user-data-dir", str(profile), *QUIET])

        assert code == 1
        assert "Specified browser path does not exist" in capsys.readouterr().err
        assert not profile.exists()

    def test_list_browsers(self, capsys, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        browsers = [
            ResolvedBrowser(BrowserIdentity.of(BrowserType.EDGE), "/usr/bin/msedge", version="121.0"),
            ResolvedBrowser(BrowserIdentity.of(BrowserType.CHROMIUM), "/usr/bin/chromium",
                            version_query=lambda path: None),
        ]

        class StubFinder:
            def resolve_all(self):
                return browsers

        monkeypatch.setattr(cli, "BrowserFinder", StubFinder)

        assert cli.main(["--list", *QUIET]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out == [
            "Microsoft Edge\t121.0\t/usr/bin/msedge",
            "Chromium\tunknown\t/usr/bin/chromium",
        ]

    def test_list_without_browsers_exits_1(self, capsys, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        class EmptyFinder:
            def resolve_all(self):
                return []

        monkeypatch.setattr(cli, "BrowserFinder", EmptyFinder)

        assert cli.main(["--list", *QUIET]) == 1
        assert "No supported browsers found" in capsys.readouterr().err

    @posix_only
    def test_launch_and_wait(self, capsys, tmp_path, monkeypatch, make_script):
        monkeypatch.chdir(tmp_path)
        script = make_script("fake-chrome", 'echo "$@"')
        profile = tmp_path / "profile"

        code = cli.main([
            "--browser-path", str(script), "--user-data-dir", str(profile), "--headless", *QUIET
        ])

        out = capsys.readouterr().out
        assert code == 0
        assert "Launched Google Chrome with PID:" in out
        assert "Browser process has exited." in out
        assert not profile.exists()

    @posix_only
    def test_ctrl_c_stops_browser(self, capsys, tmp_path, monkeypatch, make_script):
        monkeypatch.chdir(tmp_path)
        script = make_script("slow-chrome", "exec sleep 30")
        profile = tmp_path / "profile"
        launchers = []
        original_launch = BrowserLauncher.launch

        def recording_launch(self):
            launchers.append(self)
            return original_launch(self)

        def interrupted_wait(self, timeout=None):
            raise KeyboardInterrupt

        monkeypatch.setattr(BrowserLauncher, "launch", recording_launch)
        monkeypatch.setattr(BrowserLauncher, "wait", interrupted_wait)

        code = cli.main(["--browser-path", str(script), "--user-data-dir", str(profile), *QUIET])

        assert code == 0
        assert "Interrupted" in capsys.readouterr().err
        assert not launchers[0].is_running()
        assert not profile.exists()
