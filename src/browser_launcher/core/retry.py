# src/browser_launcher/core/retry.py
"""
Retry System for Browser Readiness Checks

Polling a freshly spawned browser for its debugging endpoint is a retry
loop: the check fails with a connection error until the browser is up,
and some failures (the process already exited) must stop the loop
immediately.

This module provides:
- A fixed-interval retry configuration
- Exception-aware retry decisions based on type, severity and category
- The retry loop itself, with an injectable sleep
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Set, Type
from uuid import uuid4

from browser_launcher.core.exceptions import ErrorCategory, ErrorSeverity, LauncherException
from browser_launcher.core.logger import get_logger


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_attempts: int = 3
    """Maximum number of attempts (including the initial attempt)."""

    delay: float = 1.0
    """Delay in seconds before every attempt after the first."""

    retryable_exceptions: Set[Type[Exception]] = field(
        default_factory=lambda: {
            LauncherException,
            ConnectionError,
            TimeoutError,
        }
    )

    non_retryable_exceptions: Set[Type[BaseException]] = field(
        default_factory=lambda: {
            KeyboardInterrupt,
            SystemExit,
            MemoryError,
        }
    )

    retry_on_severity: Set[ErrorSeverity] = field(
        default_factory=lambda: {
            ErrorSeverity.LOW,
            ErrorSeverity.MEDIUM
        }
    )
    """LauncherException severities that allow retry."""

    retry_on_categories: Set[ErrorCategory] = field(
        default_factory=lambda: {
            ErrorCategory.TIMEOUT,
            ErrorCategory.IO,
        }
    )
    """LauncherException categories that allow retry."""


def should_retry(exception: Exception, attempt: int, config: RetryConfig) -> bool:
    """
    Determine if an exception should trigger another attempt.

    Args:
        exception: Exception that occurred
        attempt: Current attempt number
        config: Retry configuration
    """
    if attempt >= config.max_attempts:
        return False

    for exc_type in config.non_retryable_exceptions:
        if isinstance(exception, exc_type):
            return False

    if isinstance(exception, LauncherException):
        if exception.severity not in config.retry_on_severity:
            return False
        if exception.category not in config.retry_on_categories:
            return False

    for exc_type in config.retryable_exceptions:
        if isinstance(exception, exc_type):
            return True

    return False


def call_with_retry(
        func: Callable[[], Any],
        config: RetryConfig,
        operation_name: Optional[str] = None,
        sleep: Callable[[float], None] = time.sleep
) -> Any:
    """
    Call ``func`` until it succeeds or the retry policy gives up.

    The last exception is re-raised when every attempt fails.

    Example:
        >>> call_with_retry(check_port, RetryConfig(max_attempts=5, delay=0.5), "wait_until_ready")
    """
    op_name = operation_name or getattr(func, "__name__", type(func).__name__)
    operation_id = uuid4().hex[:8]
    logger = get_logger("retry")

    logger.debug(
        "Starting operation with retry",
        operation_name=op_name,
        operation_id=operation_id,
        max_attempts=config.max_attempts,
        delay=config.delay
    )

    last_exception: Optional[Exception] = None
    for attempt in range(1, config.max_attempts + 1):
        if attempt > 1 and config.delay > 0:
            sleep(config.delay)

        try:
            result = func()
        except Exception as e:
            last_exception = e
            if should_retry(e, attempt, config):
                logger.debug(
                    f"Attempt {attempt} failed, will retry",
                    attempt=attempt,
                    exception_type=type(e).__name__,
                    operation_id=operation_id
                )
                continue
            logger.debug(
                f"Attempt {attempt} failed, no more retries",
                attempt=attempt,
                exception_type=type(e).__name__,
                exception_message=str(e),
                operation_id=operation_id
            )
            break

        logger.debug(
            f"Operation succeeded on attempt {attempt}",
            attempt=attempt,
            operation_id=operation_id
        )
        return result

    raise last_exception


def create_readiness_retry_config(poll_interval_ms: int, max_retries: int) -> RetryConfig:
    """
    Retry configuration for polling a browser's debugging endpoint.

    Args:
        poll_interval_ms: Fixed delay between checks in milliseconds
        max_retries: Number of checks; at least one check is always made
    """
    return RetryConfig(
        max_attempts=max(1, max_retries),
        delay=poll_interval_ms / 1000.0,
        retryable_exceptions={ConnectionError, TimeoutError},
    )
