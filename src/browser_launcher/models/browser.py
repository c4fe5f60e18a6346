# src/browser_launcher/models/browser.py
"""
Browser Models

- BrowserIdentity: which browser is wanted (a known brand or a custom
  executable), with pure catalog lookups
- ResolvedBrowser: an identity bound to an executable that existed at
  resolution time, with a lazily queried version
- LaunchedBrowser: the handle returned by a successful launch
"""

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from browser_launcher.core.browser_constants import (
    BrowserExecutables,
    BrowserNames,
    BrowserType,
    MacOSBundles,
    WindowsInstallations,
)
from browser_launcher.core.probe import query_version


class BrowserIdentity(BaseModel):
    """
    A supported browser brand, or an arbitrary custom executable.

    A custom identity carries its own executable name, which doubles as
    its display name and is its sole executable candidate.

    Example:
        >>> BrowserIdentity.of(BrowserType.EDGE).name()
        'Microsoft Edge'
        >>> BrowserIdentity.custom("/usr/bin/custom-browser").executables()
        ['/usr/bin/custom-browser']
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    browser_type: BrowserType = Field(
        default=BrowserType.CHROME,
        description="Browser brand"
    )

    custom_executable: Optional[str] = Field(
        default=None,
        description="Executable name or path for custom browsers"
    )

    @model_validator(mode="after")
    def validate_custom_executable(self) -> "BrowserIdentity":
        """Only custom identities carry an executable name, and they must."""
        if self.browser_type is BrowserType.CUSTOM and self.custom_executable is None:
            raise ValueError("custom browsers require an executable name")
        if self.browser_type is not BrowserType.CUSTOM and self.custom_executable is not None:
            raise ValueError(f"{self.browser_type.value} does not take a custom executable")
        return self

    @classmethod
    def of(cls, browser_type: BrowserType) -> "BrowserIdentity":
        return cls(browser_type=browser_type)

    @classmethod
    def custom(cls, executable: str) -> "BrowserIdentity":
        return cls(browser_type=BrowserType.CUSTOM, custom_executable=executable)

    @classmethod
    def parse(cls, value: Union["BrowserIdentity", BrowserType, str]) -> "BrowserIdentity":
        """
        Build an identity from a brand name, a BrowserType or an identity.

        Unknown strings become custom executables.
        """
        if isinstance(value, BrowserIdentity):
            return value
        if isinstance(value, BrowserType):
            return cls.of(value)
        normalized = value.strip().lower().replace("_", "-")
        try:
            browser_type = BrowserType(normalized)
        except ValueError:
            return cls.custom(value)
        if browser_type is BrowserType.CUSTOM:
            raise ValueError("use BrowserIdentity.custom() for custom executables")
        return cls.of(browser_type)

    @property
    def is_custom(self) -> bool:
        return self.browser_type is BrowserType.CUSTOM

    @property
    def is_resolvable(self) -> bool:
        """A custom identity with an empty name can never be resolved."""
        return bool(self.executables())

    @property
    def literal_path(self) -> Optional[str]:
        """The custom executable when it is given as a path rather than a bare name."""
        if not self.is_custom or not self.custom_executable:
            return None
        executable = self.custom_executable
        if "/" in executable or "\\" in executable:
            return executable
        return None

    def name(self) -> str:
        """Display name."""
        if self.is_custom:
            return self.custom_executable or ""
        return BrowserNames.DISPLAY_NAMES[self.browser_type]

    def slug(self) -> str:
        """Short file-system friendly name, used for log file names."""
        return self.browser_type.value

    def executables(self) -> List[str]:
        """Candidate executable basenames, in lookup order."""
        if self.is_custom:
            return [self.custom_executable] if self.custom_executable else []
        return BrowserExecutables.get_executables(self.browser_type)

    def macos_bundle_names(self) -> List[str]:
        return list(MacOSBundles.BUNDLE_NAMES.get(self.browser_type, []))

    def macos_app_paths(self, home: Optional[str] = None) -> List[str]:
        """Executable paths inside the known application bundles."""
        paths: List[str] = []
        for applications_dir in MacOSBundles.APPLICATIONS_DIRS:
            if applications_dir.startswith("~"):
                if not home:
                    continue
                applications_dir = str(Path(home) / applications_dir[2:])
            for bundle in self.macos_bundle_names():
                paths.append(
                    f"{applications_dir}/{bundle}.app/{MacOSBundles.bundle_executable(bundle)}"
                )
        return paths

    def lsregister_pattern(self) -> Optional[str]:
        """Display-name substring searched in the LaunchServices database."""
        return MacOSBundles.LSREGISTER_PATTERNS.get(self.browser_type)

    def macos_bundle_executable(self) -> Optional[str]:
        """Relative executable path appended to bundles found via lsregister."""
        pattern = self.lsregister_pattern()
        return MacOSBundles.bundle_executable(pattern) if pattern else None

    def windows_install_suffixes(self) -> List[str]:
        return list(WindowsInstallations.INSTALL_SUFFIXES.get(self.browser_type, []))

    def windows_registry_keys(self) -> List[str]:
        return list(WindowsInstallations.REGISTRY_KEYS.get(self.browser_type, []))

    def __str__(self) -> str:
        return self.name()


DEFAULT_IDENTITY = BrowserIdentity.of(BrowserType.CHROME)


@dataclass
class ResolvedBrowser:
    """
    A browser whose executable existed on disk when it was resolved.

    The version is queried on first use and memoized; a failed query is
    not cached and is retried on the next call.
    """

    identity: BrowserIdentity
    executable_path: str
    version: Optional[str] = None
    version_query: Callable[[str], Optional[str]] = field(
        default=query_version, repr=False, compare=False
    )

    def name(self) -> str:
        return self.identity.name()

    def exists(self) -> bool:
        return Path(self.executable_path).exists()

    def get_version(self) -> Optional[str]:
        """Return the cached version, querying the executable if needed."""
        if self.version is not None:
            return self.version
        version = self.version_query(self.executable_path)
        if version is not None:
            self.version = version
        return version

    def to_dict(self) -> dict:
        return {
            "browser": self.identity.slug(),
            "name": self.name(),
            "executable_path": self.executable_path,
            "version": self.version,
        }


@dataclass
class LaunchedBrowser:
    """
    Handle for a launched browser process.

    The launcher that produced it keeps authority over the process
    lifecycle; use its wait() and kill() rather than the raw process.
    """

    pid: int
    port: int
    process: "subprocess.Popen[Any]" = field(repr=False)
    executable_path: str = ""
    args: List[str] = field(default_factory=list, repr=False)
