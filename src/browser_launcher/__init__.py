# src/browser_launcher/__init__.py
"""
Browser Launcher

Finds installed Chromium-family browsers and launches them with a
reproducible command line, supervising the process until it is killed.

Example:
    >>> from browser_launcher import BrowserLauncher, LaunchConfiguration
    >>> with BrowserLauncher(LaunchConfiguration(headless=True)) as launcher:
    ...     launcher.launch()
    ...     launcher.wait_until_ready()
"""

__version__ = "0.1.0"

from browser_launcher.config.settings import LaunchConfiguration, parse_window_size
from browser_launcher.core.browser_constants import BrowserType
from browser_launcher.core.browser_finder import BrowserFinder, find_browser
from browser_launcher.core.exceptions import (
    BrowserConfigurationException,
    BrowserLaunchException,
    BrowserNotFoundException,
    DebuggerNotReadyException,
    LauncherException,
)
from browser_launcher.core.flags import build_flags
from browser_launcher.core.launcher import BrowserLauncher, LauncherState, launch
from browser_launcher.models.browser import BrowserIdentity, LaunchedBrowser, ResolvedBrowser

__all__ = [
    "__version__",
    "BrowserConfigurationException",
    "BrowserFinder",
    "BrowserIdentity",
    "BrowserLaunchException",
    "BrowserLauncher",
    "BrowserNotFoundException",
    "BrowserType",
    "DebuggerNotReadyException",
    "LaunchConfiguration",
    "LaunchedBrowser",
    "LauncherException",
    "LauncherState",
    "ResolvedBrowser",
    "build_flags",
    "find_browser",
    "launch",
    "parse_window_size",
]
