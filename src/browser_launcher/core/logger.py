# src/browser_launcher/core/logger.py
"""
Structured Logging for the Browser Launcher

This module configures structlog on top of the standard library logging
package:
- Console output on stderr (stdout belongs to the caller)
- Optional rotating log file
- JSON or human-readable console rendering
- A launch session id carried through a context variable

Example:
    >>> setup_logging(log_level="DEBUG", enable_json_format=False)
    >>> logger = get_logger("browser_finder")
    >>> logger.debug("Resolved browser", path="/usr/bin/chromium")
"""

import logging
import logging.handlers
import sys
import time
from contextvars import ContextVar
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

import structlog

from browser_launcher import __version__

# Context variable for launch session tracking
session_id_var: ContextVar[str] = ContextVar('session_id', default='')


class PerformanceTimer:
    """
    Context manager for measuring operation duration.

    Example:
        >>> with PerformanceTimer("resolve_browser") as timer:
        ...     browser = finder.resolve(identity)
        ...     timer.add_metric("found", browser is not None)
    """

    def __init__(self, operation_name: str, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.metrics: Dict[str, Any] = {}

    def __enter__(self) -> "PerformanceTimer":
        """Start timing the operation."""
        self.start_time = time.perf_counter()
        self.logger.debug(
            "Operation started",
            operation=self.operation_name,
            event_type="performance_start"
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """End timing and log the duration."""
        self.end_time = time.perf_counter()
        duration = self.end_time - self.start_time if self.start_time else 0

        log_data = {
            "operation": self.operation_name,
            "duration_seconds": round(duration, 3),
            "event_type": "performance_end",
            **self.metrics
        }

        if exc_type is None:
            self.logger.debug("Operation completed", **log_data)
        else:
            log_data["exception_type"] = exc_type.__name__
            log_data["exception_message"] = str(exc_val) if exc_val else None
            self.logger.debug("Operation failed", **log_data)

    def add_metric(self, key: str, value: Any) -> None:
        """Add a custom metric to be logged with the timing data."""
        self.metrics[key] = value


class LoggingManager:
    """
    Central logging configuration.

    Configures structlog once per process; later calls to
    configure_logging() are ignored unless reset() was called first.
    """

    def __init__(self):
        self._configured = False
        self._loggers: Dict[str, structlog.stdlib.BoundLogger] = {}
        self._log_file_handlers: List[logging.Handler] = []

    def configure_logging(
            self,
            log_level: str = "WARNING",
            enable_console: bool = True,
            enable_file: bool = False,
            log_file_path: Optional[Path] = None,
            enable_json_format: bool = False,
            max_file_size_mb: int = 10,
            backup_count: int = 3
    ) -> None:
        """
        Configure the logging system.

        Args:
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            enable_console: Enable output on stderr
            enable_file: Enable file output
            log_file_path: Path to log file (default: logs/browser-launcher.log)
            enable_json_format: Render JSON instead of the console format
            max_file_size_mb: Maximum log file size in MB
            backup_count: Number of backup log files to keep
        """
        if self._configured:
            return

        level = getattr(logging, log_level.upper())

        processors = [
            self._add_session_context,
            self._add_timestamp,
            self._add_framework_context,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
        ]

        if enable_json_format:
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer(colors=False))

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        package_logger = logging.getLogger("browser_launcher")
        package_logger.handlers.clear()
        package_logger.setLevel(level)
        package_logger.propagate = False

        if enable_console:
            self._setup_console_handler(package_logger)

        if enable_file:
            log_path = log_file_path or Path("logs/browser-launcher.log")
            self._setup_file_handler(package_logger, log_path, max_file_size_mb, backup_count)

        self._configured = True

        self.get_logger("logging_manager").debug(
            "Logging system configured",
            log_level=log_level,
            console_enabled=enable_console,
            file_enabled=enable_file,
            json_format=enable_json_format
        )

    def _setup_console_handler(self, package_logger: logging.Logger) -> None:
        """Set up the stderr logging handler."""
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(console_handler)

    def _setup_file_handler(
            self,
            package_logger: logging.Logger,
            log_path: Path,
            max_size_mb: int,
            backup_count: int
    ) -> None:
        """Set up rotating file logging handler."""
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(logging.Formatter("%(message)s"))

        package_logger.addHandler(file_handler)
        self._log_file_handlers.append(file_handler)

    def _add_session_context(self, logger, method_name, event_dict):
        """Add the launch session id to log entries."""
        session_id = session_id_var.get()
        if session_id:
            event_dict['session_id'] = session_id
        return event_dict

    def _add_timestamp(self, logger, method_name, event_dict):
        event_dict['timestamp'] = datetime.now().isoformat()
        return event_dict

    def _add_framework_context(self, logger, method_name, event_dict):
        event_dict['component'] = 'browser-launcher'
        event_dict['version'] = __version__
        return event_dict

    def get_logger(self, name: str = "launcher") -> structlog.stdlib.BoundLogger:
        """
        Get a configured logger instance.

        Args:
            name: Logger name, placed under the browser_launcher namespace

        Returns:
            structlog.stdlib.BoundLogger: Configured logger instance
        """
        if not self._configured:
            self.configure_logging()

        if name not in self._loggers:
            self._loggers[name] = structlog.get_logger(f"browser_launcher.{name}")

        return self._loggers[name]

    def reset(self) -> None:
        """Drop the current configuration so the next call reconfigures."""
        for handler in self._log_file_handlers:
            handler.close()
        self._log_file_handlers.clear()
        self._loggers.clear()
        structlog.reset_defaults()
        self._configured = False


_logging_manager = LoggingManager()


def setup_logging(
        log_level: str = "WARNING",
        enable_console: bool = True,
        enable_file: bool = False,
        log_file_path: Optional[Path] = None,
        enable_json_format: bool = False,
        max_file_size_mb: int = 10,
        backup_count: int = 3,
        force: bool = False
) -> None:
    """
    Set up logging for the launcher.

    Should be called once at application startup. Library use without
    this call falls back to WARNING-level console output.

    Example:
        >>> setup_logging(
        ...     log_level="DEBUG",
        ...     enable_file=True,
        ...     log_file_path=Path("logs/launch.log")
        ... )
    """
    if force:
        _logging_manager.reset()

    _logging_manager.configure_logging(
        log_level=log_level,
        enable_console=enable_console,
        enable_file=enable_file,
        log_file_path=log_file_path,
        enable_json_format=enable_json_format,
        max_file_size_mb=max_file_size_mb,
        backup_count=backup_count
    )


def get_logger(name: str = "launcher") -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance.

    Example:
        >>> logger = get_logger("launcher")
        >>> logger.info("Browser launched", pid=4242)
    """
    return _logging_manager.get_logger(name)


def set_session_id(session_id: Optional[str] = None) -> str:
    """
    Set the launch session id for subsequent log entries.

    Args:
        session_id: Explicit session id, or None to generate a new one

    Returns:
        str: The session id that was set
    """
    if session_id is None:
        session_id = uuid4().hex[:12]
    session_id_var.set(session_id)
    return session_id


def get_performance_timer(operation_name: str) -> PerformanceTimer:
    """
    Create a performance timer for measuring operation duration.

    Example:
        >>> with get_performance_timer("launch") as timer:
        ...     launcher.launch()
    """
    return PerformanceTimer(operation_name)


class LoggingContext:
    """
    Context manager binding a launch session id to log entries.

    Example:
        >>> with LoggingContext(session_id="a1b2c3"):
        ...     get_logger().info("Launching")  # includes session_id
    """

    def __init__(self, session_id: Optional[str] = None):
        self.session_id = session_id
        self._previous_session_id = ''

    def __enter__(self) -> "LoggingContext":
        self._previous_session_id = session_id_var.get()
        self.session_id = set_session_id(self.session_id)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        session_id_var.set(self._previous_session_id)
