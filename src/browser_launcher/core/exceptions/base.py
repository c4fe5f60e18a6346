# src/browser_launcher/core/exceptions/base.py
"""
Base Exception Class for the Browser Launcher

All launcher exceptions inherit from LauncherException. It carries a
category and severity for classification, structured context for
debugging, and recovery suggestions that the command line front-end
prints next to the error message.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set

from .enums import ErrorCategory, ErrorSeverity


@dataclass
class ErrorContext:
    """
    Structured context information attached to an exception.
    """

    data: Dict[str, Any] = field(default_factory=dict)
    tags: Set[str] = field(default_factory=set)

    def add(self, key: str, value: Any) -> 'ErrorContext':
        """Add context data."""
        self.data[key] = value
        return self

    def add_tag(self, tag: str) -> 'ErrorContext':
        """Add a tag for categorization."""
        self.tags.add(tag)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "data": self.data.copy(),
            "tags": sorted(self.tags),
        }


class LauncherException(Exception):
    """
    Base exception class for all browser launcher exceptions.

    Attributes:
        message: Human-readable error description
        error_code: Identifier built from the exception type
        category: Error category for classification
        severity: Error severity level
        error_context: Additional context information
        recovery_suggestions: List of potential recovery actions
        timestamp: When the error occurred
        original_exception: Original exception that caused this error

    Example:
        >>> try:
        ...     subprocess.Popen(args)
        ... except OSError as e:
        ...     raise LauncherException(
        ...         message="Spawn failed",
        ...         category=ErrorCategory.SPAWN,
        ...         original_exception=e
        ...     ).add_context("executable_path", args[0])
    """

    def __init__(
            self,
            message: str,
            error_code: Optional[str] = None,
            category: ErrorCategory = ErrorCategory.SPAWN,
            severity: Optional[ErrorSeverity] = None,
            context: Optional[Dict[str, Any]] = None,
            recovery_suggestions: Optional[List[str]] = None,
            original_exception: Optional[BaseException] = None
    ):
        """
        Initialize launcher exception with error details.

        Args:
            message: Clear, actionable error description
            error_code: Identifier for this error type (derived from the class if None)
            category: Error category for classification
            severity: Severity level (category default if None)
            context: Additional debugging context
            recovery_suggestions: List of recovery actions
            original_exception: Original exception that caused this error
        """
        super().__init__(message)

        self.message = message
        self.category = category
        self.severity = severity or category.get_default_severity()
        self.error_code = error_code or self._generate_error_code()
        self.timestamp = datetime.now(timezone.utc)

        self.error_context = ErrorContext()
        if context:
            for key, value in context.items():
                self.error_context.add(key, value)

        for tag in category.get_monitoring_tags():
            self.error_context.add_tag(tag)

        self.recovery_suggestions: List[str] = []
        for suggestion in recovery_suggestions or []:
            self.add_recovery_suggestion(suggestion)

        self.original_exception = original_exception
        if original_exception is not None:
            self.error_context.add("original_type", type(original_exception).__name__)
            self.error_context.add("original_message", str(original_exception))

    def _generate_error_code(self) -> str:
        """Generate an error code based on the exception type and category."""
        class_name = self.__class__.__name__.replace("Exception", "").upper()
        return f"{class_name}_{self.category.value.upper()}"

    def add_context(self, key: str, value: Any) -> 'LauncherException':
        """
        Add contextual information to the exception.

        Args:
            key: Context key (e.g., "executable_path", "browser")
            value: Context value

        Returns:
            LauncherException: Self for method chaining
        """
        self.error_context.add(key, value)
        return self

    def add_tag(self, tag: str) -> 'LauncherException':
        """Add a tag for categorization."""
        self.error_context.add_tag(tag)
        return self

    def add_recovery_suggestion(self, suggestion: str) -> 'LauncherException':
        """Add a recovery suggestion, ignoring duplicates."""
        if suggestion and suggestion not in self.recovery_suggestions:
            self.recovery_suggestions.append(suggestion)
        return self

    @property
    def context(self) -> Dict[str, Any]:
        """Context data as a plain dictionary."""
        return self.error_context.data

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for structured logging.

        Returns:
            Dict: Complete exception data
        """
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "context": self.error_context.to_dict(),
            "recovery_suggestions": list(self.recovery_suggestions),
            "timestamp": self.timestamp.isoformat(),
            "original_exception": {
                "type": type(self.original_exception).__name__,
                "message": str(self.original_exception)
            } if self.original_exception else None,
        }

    def format_report(self) -> str:
        """
        Multi-line, human-readable report for the diagnostic stream.

        Returns:
            str: Message followed by context and recovery suggestions
        """
        lines = [f"{self.__class__.__name__}: {self.message}"]

        if self.error_context.data:
            context_str = ', '.join(f"{k}={v}" for k, v in list(self.error_context.data.items())[:5])
            lines.append(f"  Context: {context_str}")

        if self.recovery_suggestions:
            lines.append("  Suggestions:")
            for i, suggestion in enumerate(self.recovery_suggestions[:3], 1):
                lines.append(f"    {i}. {suggestion}")

        return "\n".join(lines)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        """Return a concise representation suitable for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message[:50]}', "
            f"category={self.category.value}, "
            f"severity={self.severity.value}, "
            f"error_code='{self.error_code}'"
            f")"
        )
