"""Launcher exception hierarchy."""

from .base import ErrorContext, LauncherException
from .browser import (
    BrowserConfigurationException,
    BrowserException,
    BrowserLaunchException,
    BrowserNotFoundException,
    CleanupException,
    DebuggerNotReadyException,
)
from .enums import ErrorCategory, ErrorSeverity

__all__ = [
    "BrowserConfigurationException",
    "BrowserException",
    "BrowserLaunchException",
    "BrowserNotFoundException",
    "CleanupException",
    "DebuggerNotReadyException",
    "ErrorCategory",
    "ErrorContext",
    "ErrorSeverity",
    "LauncherException",
]
