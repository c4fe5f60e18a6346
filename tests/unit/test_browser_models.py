# tests/unit/test_browser_models.py
"""
Unit tests for browser identities and resolved browsers.
"""

import pytest
from pydantic import ValidationError

from browser_launcher.core.browser_constants import BrowserType
from browser_launcher.models.browser import DEFAULT_IDENTITY, BrowserIdentity, ResolvedBrowser


class TestBrowserIdentity:
    """Catalog lookups on browser identities."""

    @pytest.mark.parametrize("browser_type", BrowserType.builtin())
    def test_builtin_identities_have_names_and_executables(self, browser_type):
        identity = BrowserIdentity.of(browser_type)

        assert identity.name()
        assert identity.executables()
        assert identity.is_resolvable

    def test_display_names(self):
        assert BrowserIdentity.of(BrowserType.CHROME).name() == "Google Chrome"
        assert BrowserIdentity.of(BrowserType.EDGE).name() == "Microsoft Edge"
        assert BrowserIdentity.of(BrowserType.BRAVE).name() == "Brave"

    def test_chrome_executables_in_lookup_order(self):
        assert BrowserIdentity.of(BrowserType.CHROME).executables() == [
            "google-chrome-stable", "google-chrome", "chrome"
        ]

    def test_custom_identity_is_its_own_name_and_executable(self):
        identity = BrowserIdentity.custom("/usr/bin/custom-browser")

        assert identity.name() == "/usr/bin/custom-browser"
        assert identity.executables() == ["/usr/bin/custom-browser"]
        assert identity.literal_path == "/usr/bin/custom-browser"
        assert str(identity) == "/usr/bin/custom-browser"

    def test_custom_bare_name_is_not_a_literal_path(self):
        identity = BrowserIdentity.custom("thorium")

        assert identity.literal_path is None
        assert identity.executables() == ["thorium"]

    def test_empty_custom_identity_is_unresolvable(self):
        identity = BrowserIdentity.custom("")

        assert identity.executables() == []
        assert not identity.is_resolvable

    def test_custom_requires_executable(self):
        with pytest.raises(ValidationError):
            BrowserIdentity(browser_type=BrowserType.CUSTOM)

    def test_builtin_rejects_custom_executable(self):
        with pytest.raises(ValidationError):
            BrowserIdentity(browser_type=BrowserType.EDGE, custom_executable="msedge")

    def test_identities_are_immutable(self):
        with pytest.raises(ValidationError):
            DEFAULT_IDENTITY.browser_type = BrowserType.EDGE

    @pytest.mark.parametrize("value,expected", [
        ("edge", BrowserType.EDGE),
        ("Chrome", BrowserType.CHROME),
        ("chrome_canary", BrowserType.CHROME_CANARY),
        (BrowserType.VIVALDI, BrowserType.VIVALDI),
    ])
    def test_parse_known_browsers(self, value, expected):
        assert BrowserIdentity.parse(value).browser_type is expected

    def test_parse_unknown_name_becomes_custom(self):
        identity = BrowserIdentity.parse("/opt/thorium/thorium")

        assert identity.is_custom
        assert identity.custom_executable == "/opt/thorium/thorium"

    def test_parse_bare_custom_is_rejected(self):
        with pytest.raises(ValueError):
            BrowserIdentity.parse("custom")

    def test_macos_app_paths_include_user_applications(self):
        paths = BrowserIdentity.of(BrowserType.BRAVE).macos_app_paths("/Users/dev")

        assert paths == [
            "/Applications/Brave Browser.app/Contents/MacOS/Brave Browser",
            "/Users/dev/Applications/Brave Browser.app/Contents/MacOS/Brave Browser",
        ]

    def test_macos_app_paths_without_home(self):
        paths = BrowserIdentity.of(BrowserType.EDGE).macos_app_paths(None)

        assert paths == ["/Applications/Microsoft Edge.app/Contents/MacOS/Microsoft Edge"]

    def test_custom_has_no_platform_locations(self):
        identity = BrowserIdentity.custom("thorium")

        assert identity.macos_app_paths("/Users/dev") == []
        assert identity.windows_install_suffixes() == []
        assert identity.windows_registry_keys() == []
        assert identity.lsregister_pattern() is None


class TestResolvedBrowser:
    """Lazy version lookup on resolved browsers."""

    def test_version_is_memoized_after_success(self):
        calls = []

        def version_query(path):
            calls.append(path)
            return "120.0.6099.109"

        browser = ResolvedBrowser(DEFAULT_IDENTITY, "/usr/bin/chromium", version_query=version_query)

        assert browser.get_version() == "120.0.6099.109"
        assert browser.get_version() == "120.0.6099.109"
        assert calls == ["/usr/bin/chromium"]

    def test_failed_version_query_is_retried(self):
        answers = [None, "121.0.1"]

        browser = ResolvedBrowser(
            DEFAULT_IDENTITY,
            "/usr/bin/chromium",
            version_query=lambda path: answers.pop(0)
        )

        assert browser.get_version() is None
        assert browser.get_version() == "121.0.1"
        assert browser.version == "121.0.1"

    def test_exists_and_to_dict(self, fake_executable):
        browser = ResolvedBrowser(DEFAULT_IDENTITY, str(fake_executable), version="1.2")

        assert browser.exists()
        assert browser.to_dict() == {
            "browser": "chrome",
            "name": "Google Chrome",
            "executable_path": str(fake_executable),
            "version": "1.2",
        }
