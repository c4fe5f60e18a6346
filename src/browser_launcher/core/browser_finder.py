# src/browser_launcher/core/browser_finder.py
"""
Browser Resolution Engine

Turns "which browser do you want" into a verified executable path.

Per identity, the first strategy that succeeds wins:
1. Global environment override (CHROME_PATH, then the deprecated
   LIGHTHOUSE_CHROMIUM_PATH, then BROWSER_PATH)
2. Well-known install locations for the platform
3. PATH lookup of the identity's executable names
4. Platform deep scan (desktop entries, LaunchServices, registry)

Resolution never raises; a browser that cannot be found is None and the
caller decides whether that is fatal.
"""

import os
import warnings
from typing import Iterable, List, Mapping, Optional, Sequence, Union

from browser_launcher.core import probe
from browser_launcher.core.browser_constants import (
    BrowserDefaults,
    BrowserType,
    EnvironmentVariables,
    PlatformTag,
)
from browser_launcher.core.logger import get_logger
from browser_launcher.core.platforms import PlatformStrategy, get_platform_strategy
from browser_launcher.models.browser import BrowserIdentity, ResolvedBrowser

BrowserSpec = Union[BrowserIdentity, BrowserType, str]


def _default_preferences() -> List[BrowserIdentity]:
    return [BrowserIdentity.of(browser_type) for browser_type in BrowserDefaults.PREFERENCE_ORDER]


class BrowserFinder:
    """
    Locates installed Chromium-family browsers.

    Example:
        >>> finder = BrowserFinder([BrowserType.EDGE, BrowserType.CHROME])
        >>> browser = finder.resolve_first()
        >>> if browser:
        ...     print(browser.name(), browser.executable_path, browser.get_version())
    """

    def __init__(
            self,
            preferred_browsers: Optional[Iterable[BrowserSpec]] = None,
            environ: Optional[Mapping[str, str]] = None,
            platform_tag: Union[PlatformTag, str, None] = None,
            strategy: Optional[PlatformStrategy] = None
    ):
        """
        Initialize the finder.

        Args:
            preferred_browsers: Search priority (Chrome, Chromium, Edge, Brave,
                Opera, Vivaldi if None)
            environ: Environment snapshot (copy of the process environment if None)
            platform_tag: Platform family to resolve for (current host if None)
            strategy: Explicit platform strategy, overriding platform_tag
        """
        self.environ: Mapping[str, str] = dict(os.environ) if environ is None else environ
        self.strategy = strategy or get_platform_strategy(platform_tag, self.environ)
        self.logger = get_logger("browser_finder")

        if preferred_browsers is None:
            self.preferred_browsers = _default_preferences()
        else:
            self.preferred_browsers = [BrowserIdentity.parse(b) for b in preferred_browsers]

    def find_env_override(self) -> Optional[str]:
        """
        Path from the first override variable that is set and exists.

        Using the deprecated variable emits a FutureWarning.
        """
        for variable in EnvironmentVariables.PATH_OVERRIDES:
            value = self.environ.get(variable)
            if not value or not probe.exists(value):
                continue
            if variable in EnvironmentVariables.DEPRECATED:
                warnings.warn(
                    f"{variable} is deprecated, "
                    f"{EnvironmentVariables.DEPRECATED[variable]}.",
                    FutureWarning,
                    stacklevel=3
                )
            self.logger.debug("Browser path override", variable=variable, path=value)
            return value
        return None

    def _locate(self, identity: BrowserIdentity) -> Optional[str]:
        override = self.find_env_override()
        if override:
            return override

        for candidate in self.strategy.install_paths(identity):
            if probe.exists(candidate):
                self.logger.debug("Found at install location", browser=identity.name(), path=candidate)
                return candidate

        found = self.strategy.lookup_executable(identity)
        if found:
            self.logger.debug("Found on PATH", browser=identity.name(), path=found)
            return found

        found = self.strategy.deep_scan(identity)
        if found:
            self.logger.debug("Found by platform scan", browser=identity.name(), path=found)
        return found

    def resolve(self, browser: BrowserSpec) -> Optional[ResolvedBrowser]:
        """Resolve a single browser identity, or None."""
        try:
            identity = BrowserIdentity.parse(browser)
        except ValueError:
            self.logger.debug("Browser spec cannot be resolved", browser=str(browser))
            return None
        if not identity.is_resolvable:
            return None

        path = self._locate(identity)
        if path is None:
            self.logger.debug("Browser not found", browser=identity.name())
            return None
        return ResolvedBrowser(identity=identity, executable_path=path)

    def resolve_first(
            self,
            preferences: Optional[Sequence[BrowserSpec]] = None
    ) -> Optional[ResolvedBrowser]:
        """First browser of the preference list that resolves."""
        for spec in self._preferences(preferences):
            browser = self.resolve(spec)
            if browser:
                return browser
        return None

    def resolve_all(
            self,
            preferences: Optional[Sequence[BrowserSpec]] = None
    ) -> List[ResolvedBrowser]:
        """Every resolvable browser, in preference order."""
        browsers = []
        for spec in self._preferences(preferences):
            browser = self.resolve(spec)
            if browser:
                browsers.append(browser)
        return browsers

    def _preferences(self, preferences: Optional[Sequence[BrowserSpec]]) -> List[BrowserSpec]:
        if preferences is None:
            return list(self.preferred_browsers)
        return list(preferences)


def find_browser(
        browser: Optional[BrowserSpec] = None,
        environ: Optional[Mapping[str, str]] = None
) -> Optional[str]:
    """
    Executable path of ``browser``, or of the first default preference.

    Example:
        >>> path = find_browser("edge")
    """
    finder = BrowserFinder(environ=environ)
    resolved = finder.resolve(browser) if browser is not None else finder.resolve_first()
    return resolved.executable_path if resolved else None
