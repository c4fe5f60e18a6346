# src/browser_launcher/core/exceptions/browser.py
"""
Browser-Related Exception Classes

Exceptions raised by the process supervisor: a browser that cannot be
found, an invalid launch configuration, a spawn the OS refused, a
scratch directory that could not be removed, and a debugging endpoint
that never came up.
"""

from typing import List, Optional

from .base import LauncherException
from .enums import ErrorCategory, ErrorSeverity


class BrowserException(LauncherException):
    """
    Base class for all browser-related exceptions.
    """

    def __init__(
            self,
            message: str,
            browser_name: Optional[str] = None,
            **kwargs
    ):
        """
        Initialize browser exception with browser-specific context.

        Args:
            message: Error description
            browser_name: Display name of the browser involved
            **kwargs: Additional arguments for LauncherException
        """
        super().__init__(message=message, **kwargs)

        self.browser_name = browser_name
        if browser_name:
            self.add_context("browser_name", browser_name)
            self.add_tag(f"browser_{browser_name.lower().replace(' ', '_')}")


class BrowserNotFoundException(BrowserException):
    """
    Raised when no executable can be resolved for the requested browser.
    """

    def __init__(
            self,
            message: str,
            browser_name: Optional[str] = None,
            searched: Optional[List[str]] = None,
            **kwargs
    ):
        kwargs.setdefault('category', ErrorCategory.NOT_FOUND)
        super().__init__(message=message, browser_name=browser_name, **kwargs)

        if searched:
            self.add_context("searched", searched)

        self.add_recovery_suggestion("Install a Chromium-based browser")
        self.add_recovery_suggestion("Set CHROME_PATH or BROWSER_PATH to the browser executable")
        self.add_recovery_suggestion("Pass an explicit browser path")


class BrowserConfigurationException(BrowserException):
    """
    Raised for invalid launch configuration: a pinned browser path that
    does not exist, a malformed window size, or a launcher that was
    already terminated.
    """

    def __init__(
            self,
            message: str,
            option: Optional[str] = None,
            value: Optional[str] = None,
            **kwargs
    ):
        kwargs.setdefault('category', ErrorCategory.CONFIGURATION)
        super().__init__(message=message, **kwargs)

        self.option = option
        self.value = value
        if option:
            self.add_context("option", option)
        if value is not None:
            self.add_context("value", value)


class BrowserLaunchException(BrowserException):
    """
    Exception for browser launch failures.

    Raised when the log files cannot be created or the OS refuses to
    start the executable.
    """

    def __init__(
            self,
            message: str,
            browser_name: Optional[str] = None,
            executable_path: Optional[str] = None,
            launch_args: Optional[List[str]] = None,
            **kwargs
    ):
        """
        Initialize browser launch exception.

        Args:
            message: Error description
            browser_name: Browser that failed to launch
            executable_path: Path to browser executable
            launch_args: Arguments used for launch
            **kwargs: Additional exception arguments
        """
        kwargs.setdefault('category', ErrorCategory.SPAWN)
        super().__init__(
            message=f"Failed to launch browser: {message}",
            browser_name=browser_name,
            **kwargs
        )

        self.executable_path = executable_path
        self.launch_args = launch_args

        if executable_path:
            self.add_context("executable_path", executable_path)

        if launch_args:
            self.add_context("launch_args_count", len(launch_args))

        self.add_recovery_suggestion("Verify the browser executable exists and is executable")
        self.add_recovery_suggestion("Check that the user data directory is writable")
        self.add_recovery_suggestion("Try launching the browser manually to test")


class CleanupException(LauncherException):
    """
    Raised internally when the scratch directory cannot be removed.

    kill() never lets this escape; it is logged as a warning instead.
    """

    def __init__(self, message: str, directory: Optional[str] = None, **kwargs):
        kwargs.setdefault('category', ErrorCategory.IO)
        super().__init__(message=message, **kwargs)

        self.directory = directory
        if directory:
            self.add_context("directory", directory)


class DebuggerNotReadyException(BrowserException):
    """
    Raised when the remote debugging endpoint does not become reachable.
    """

    def __init__(
            self,
            message: str,
            port: Optional[int] = None,
            attempts: Optional[int] = None,
            **kwargs
    ):
        kwargs.setdefault('category', ErrorCategory.TIMEOUT)
        kwargs.setdefault('severity', ErrorSeverity.MEDIUM)
        super().__init__(message=message, **kwargs)

        self.port = port
        self.attempts = attempts
        if port is not None:
            self.add_context("port", port)
        if attempts is not None:
            self.add_context("attempts", attempts)

        self.add_recovery_suggestion("Increase max_connection_retries or connection_poll_interval")
        self.add_recovery_suggestion("Inspect the browser error log in the user data directory")
