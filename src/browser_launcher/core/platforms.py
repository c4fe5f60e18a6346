# src/browser_launcher/core/platforms.py
"""
Platform Resolution Strategies

One strategy per platform family, selected at runtime from a platform
tag. Each answers three questions for a browser identity:
- which well-known install locations to check, in order
- where a PATH lookup of its executable names leads
- what a platform-specific deep scan finds (desktop entries on Linux,
  the LaunchServices database on macOS, the registry on Windows)

The resolution engine only talks to this interface, so its logic can be
exercised on any host with a fake strategy.
"""

import os
import platform
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Type, Union

from browser_launcher.core import probe
from browser_launcher.core.browser_constants import (
    LinuxInstallations,
    PlatformTag,
    WindowsInstallations,
)
from browser_launcher.models.browser import BrowserIdentity


class PlatformStrategy(ABC):
    """Abstract resolution capabilities of a platform family."""

    tag: PlatformTag = PlatformTag.UNKNOWN

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """
        Args:
            environ: Environment snapshot (copy of the process environment if None)
        """
        self.environ: Mapping[str, str] = dict(os.environ) if environ is None else environ

    def home_dir(self) -> Optional[str]:
        return self.environ.get("HOME") or self.environ.get("USERPROFILE") or None

    def install_paths(self, identity: BrowserIdentity) -> List[str]:
        """Well-known locations for ``identity``, in catalog order."""
        paths: List[str] = []
        if identity.literal_path:
            paths.append(identity.literal_path)
        paths.extend(self._platform_install_paths(identity))
        return paths

    @abstractmethod
    def _platform_install_paths(self, identity: BrowserIdentity) -> List[str]:
        ...

    def lookup_executable(self, identity: BrowserIdentity) -> Optional[str]:
        """PATH lookup over the identity's executable names, in declared order."""
        search_path = self.environ.get("PATH", "")
        for name in identity.executables():
            found = probe.lookup_on_path(name, search_path)
            if found:
                return found
        return None

    @abstractmethod
    def deep_scan(self, identity: BrowserIdentity) -> Optional[str]:
        ...


class LinuxPlatform(PlatformStrategy):
    """Binary directories, PATH, then freedesktop desktop entries."""

    tag = PlatformTag.LINUX

    def _platform_install_paths(self, identity: BrowserIdentity) -> List[str]:
        paths = []
        for base_dir in LinuxInstallations.BINARY_DIRS:
            for executable in identity.executables():
                if "/" in executable:
                    continue
                paths.append(f"{base_dir}/{executable}")
        return paths

    def desktop_entry_dirs(self) -> List[str]:
        dirs = list(LinuxInstallations.DESKTOP_ENTRY_DIRS)
        home = self.home_dir()
        if home:
            dirs.append(str(Path(home) / LinuxInstallations.USER_DESKTOP_ENTRY_DIR))
        return dirs

    def deep_scan(self, identity: BrowserIdentity) -> Optional[str]:
        return probe.scan_desktop_entries(
            self.desktop_entry_dirs(),
            identity.executables(),
            search_path=self.environ.get("PATH", "")
        )


class MacOSPlatform(PlatformStrategy):
    """Application bundles, PATH, then the LaunchServices database."""

    tag = PlatformTag.DARWIN

    def _platform_install_paths(self, identity: BrowserIdentity) -> List[str]:
        return identity.macos_app_paths(self.home_dir())

    def deep_scan(self, identity: BrowserIdentity) -> Optional[str]:
        pattern = identity.lsregister_pattern()
        bundle_executable = identity.macos_bundle_executable()
        if not pattern or not bundle_executable:
            return None
        return probe.scan_lsregister(pattern, bundle_executable)


class WindowsPlatform(PlatformStrategy):
    """Program Files / LocalAppData installs, PATH, then App Paths registry keys."""

    tag = PlatformTag.WINDOWS

    def install_roots(self) -> List[str]:
        roots = []
        for variable, fallback in WindowsInstallations.INSTALL_ROOTS:
            root = self.environ.get(variable, fallback)
            if root:
                roots.append(root.rstrip("\\/"))
        return roots

    def _platform_install_paths(self, identity: BrowserIdentity) -> List[str]:
        return [
            f"{root}\\{suffix}"
            for root in self.install_roots()
            for suffix in identity.windows_install_suffixes()
        ]

    def deep_scan(self, identity: BrowserIdentity) -> Optional[str]:
        return probe.query_registry(identity.windows_registry_keys())


class UnsupportedPlatform(PlatformStrategy):
    """Fallback for platforms without known install locations."""

    def _platform_install_paths(self, identity: BrowserIdentity) -> List[str]:
        return []

    def deep_scan(self, identity: BrowserIdentity) -> Optional[str]:
        return None


_STRATEGIES: Dict[PlatformTag, Type[PlatformStrategy]] = {
    PlatformTag.LINUX: LinuxPlatform,
    PlatformTag.DARWIN: MacOSPlatform,
    PlatformTag.WINDOWS: WindowsPlatform,
    PlatformTag.UNKNOWN: UnsupportedPlatform,
}


def current_platform_tag() -> PlatformTag:
    return PlatformTag.from_system(platform.system())


def get_platform_strategy(
        tag: Union[PlatformTag, str, None] = None,
        environ: Optional[Mapping[str, str]] = None
) -> PlatformStrategy:
    """
    Select the strategy for a platform tag.

    Args:
        tag: Platform tag or ``platform.system()``-style name (current host if None)
        environ: Environment snapshot handed to the strategy
    """
    if tag is None:
        tag = current_platform_tag()
    elif not isinstance(tag, PlatformTag):
        tag = PlatformTag.from_system(tag)
    return _STRATEGIES[tag](environ)
