# src/browser_launcher/core/exceptions/enums.py
"""
Exception Classification Enums

Enums used to categorize and prioritize launcher exceptions. They keep
error classification consistent between the resolution engine, the
process supervisor and the command line front-end.
"""

from enum import Enum
from typing import Dict, Set


class ErrorSeverity(str, Enum):
    """
    Error severity levels for exception prioritization.

    Usage:
        >>> error = BrowserLaunchException("spawn refused")
        >>> if error.severity == ErrorSeverity.CRITICAL:
        ...     sys.exit(1)
    """

    LOW = "low"
    """Recoverable noise, e.g. a scratch directory that could not be removed."""

    MEDIUM = "medium"
    """Transient failures such as a debugging port that is not open yet."""

    HIGH = "high"
    """Invalid configuration supplied by the caller."""

    CRITICAL = "critical"
    """No browser could be found or the OS refused to start it."""


class ErrorCategory(str, Enum):
    """
    Error categories organizing exceptions by the launcher stage that failed.

    Usage:
        >>> if error.category == ErrorCategory.NOT_FOUND:
        ...     print("install a Chromium-based browser or set CHROME_PATH")
    """

    NOT_FOUND = "not_found"
    """No browser or executable path could be resolved."""

    CONFIGURATION = "configuration"
    """Pinned path missing, malformed window size, invalid lifecycle use."""

    SPAWN = "spawn"
    """The OS rejected process creation or the log files could not be created."""

    IO = "io"
    """Filesystem cleanup failures; downgraded to warnings."""

    TIMEOUT = "timeout"
    """The debugging endpoint did not become reachable in time."""

    def get_default_severity(self) -> ErrorSeverity:
        """Get the default severity for exceptions in this category."""
        severity_mapping: Dict[ErrorCategory, ErrorSeverity] = {
            ErrorCategory.NOT_FOUND: ErrorSeverity.CRITICAL,
            ErrorCategory.CONFIGURATION: ErrorSeverity.HIGH,
            ErrorCategory.SPAWN: ErrorSeverity.CRITICAL,
            ErrorCategory.IO: ErrorSeverity.LOW,
            ErrorCategory.TIMEOUT: ErrorSeverity.MEDIUM,
        }
        return severity_mapping[self]

    def get_monitoring_tags(self) -> Set[str]:
        """Get tags attached to every exception of this category."""
        tag_mapping: Dict[ErrorCategory, Set[str]] = {
            ErrorCategory.NOT_FOUND: {"resolution", "browser"},
            ErrorCategory.CONFIGURATION: {"configuration"},
            ErrorCategory.SPAWN: {"process", "browser"},
            ErrorCategory.IO: {"filesystem", "cleanup"},
            ErrorCategory.TIMEOUT: {"timeout", "debugger"},
        }
        return tag_mapping[self]
