# tests/unit/test_exceptions.py
"""
Unit tests for the launcher exception hierarchy.
"""

from browser_launcher.core.exceptions import (
    BrowserConfigurationException,
    BrowserLaunchException,
    BrowserNotFoundException,
    CleanupException,
    DebuggerNotReadyException,
    ErrorCategory,
    ErrorSeverity,
    LauncherException,
)


class TestLauncherException:
    """Base exception behaviour."""

    def test_defaults_from_category(self):
        error = LauncherException("boom", category=ErrorCategory.TIMEOUT)

        assert error.severity is ErrorSeverity.MEDIUM
        assert error.error_code == "LAUNCHER_TIMEOUT"
        assert str(error) == "boom"
        assert {"timeout", "debugger"} <= error.error_context.tags

    def test_context_chaining(self):
        error = LauncherException("boom").add_context("pid", 42).add_tag("retry")

        assert error.context == {"pid": 42}
        assert "retry" in error.error_context.tags

    def test_recovery_suggestions_are_deduplicated(self):
        error = LauncherException("boom", recovery_suggestions=["Retry", "Retry"])
        error.add_recovery_suggestion("Retry").add_recovery_suggestion("Reboot")

        assert error.recovery_suggestions == ["Retry", "Reboot"]

    def test_original_exception_recorded(self):
        cause = FileNotFoundError("no such file")

        error = LauncherException("spawn failed", original_exception=cause)

        assert error.context["original_type"] == "FileNotFoundError"
        assert error.to_dict()["original_exception"]["message"] == "no such file"

    def test_to_dict(self):
        error = BrowserNotFoundException("Google Chrome browser not found", browser_name="Google Chrome")

        data = error.to_dict()

        assert data["error_type"] == "BrowserNotFoundException"
        assert data["category"] == "not_found"
        assert data["severity"] == "critical"

    def test_format_report(self):
        error = BrowserNotFoundException("Edge not found", browser_name="Microsoft Edge")

        report = error.format_report()

        assert report.startswith("BrowserNotFoundException: Edge not found")
        assert "browser_name=Microsoft Edge" in report
        assert "1. Install a Chromium-based browser" in report


class TestBrowserExceptions:
    """Concrete exception classes."""

    def test_not_found(self):
        error = BrowserNotFoundException(
            "Brave browser not found on this system",
            browser_name="Brave",
            searched=["brave-browser-stable", "brave"]
        )

        assert error.category is ErrorCategory.NOT_FOUND
        assert error.context["searched"] == ["brave-browser-stable", "brave"]
        assert "browser_brave" in error.error_context.tags

    def test_configuration(self):
        error = BrowserConfigurationException("bad size", option="window_size", value="wide")

        assert error.category is ErrorCategory.CONFIGURATION
        assert error.severity is ErrorSeverity.HIGH
        assert error.context == {"option": "window_size", "value": "wide"}

    def test_launch_message_prefix(self):
        error = BrowserLaunchException(
            "Permission denied",
            browser_name="Chromium",
            executable_path="/usr/bin/chromium",
            launch_args=["--headless", "about:blank"]
        )

        assert str(error) == "Failed to launch browser: Permission denied"
        assert error.category is ErrorCategory.SPAWN
        assert error.severity is ErrorSeverity.CRITICAL
        assert error.context["launch_args_count"] == 2

    def test_cleanup_is_low_severity(self):
        error = CleanupException("could not remove", directory="/tmp/profile")

        assert error.severity is ErrorSeverity.LOW
        assert error.context["directory"] == "/tmp/profile"

    def test_debugger_not_ready(self):
        error = DebuggerNotReadyException("not ready", port=9222, attempts=50)

        assert error.category is ErrorCategory.TIMEOUT
        assert error.context["port"] == 9222
        assert error.context["attempts"] == 50
        assert isinstance(error, LauncherException)
