# src/browser_launcher/config/settings.py
"""
Launcher Configuration with Pydantic v2

Two kinds of configuration live here:
- LaunchConfiguration: the immutable, per-launch option set handed to the
  process supervisor
- LauncherSettings: process-level settings (logging, default browser)
  loaded from BROWSER_LAUNCHER_* environment variables and a .env file
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from browser_launcher.core.browser_constants import BrowserDefaults
from browser_launcher.core.exceptions import BrowserConfigurationException
from browser_launcher.models.browser import DEFAULT_IDENTITY, BrowserIdentity

WindowSize = Tuple[int, int]


def _is_ascii_number(value: str) -> bool:
    return value.isascii() and value.isdigit()


def parse_window_size(value: str) -> WindowSize:
    """
    Parse a ``WIDTHxHEIGHT`` string.

    The string is split once on ``x`` and both halves must be
    non-negative ASCII decimal integers.

    Example:
        >>> parse_window_size("1920x1080")
        (1920, 1080)

    Raises:
        BrowserConfigurationException: For any other shape
    """
    width, separator, height = value.partition("x")
    if not separator or not _is_ascii_number(width) or not _is_ascii_number(height):
        raise BrowserConfigurationException(
            f"Invalid window size '{value}', expected WIDTHxHEIGHT",
            option="window_size",
            value=value
        )
    return int(width), int(height)


class LaunchConfiguration(BaseModel):
    """
    Declarative options for one browser launch.

    Immutable once created; use ``model_copy(update=...)`` to derive a
    variant.

    Example:
        >>> config = LaunchConfiguration(
        ...     starting_url="https://example.com",
        ...     browser="edge",
        ...     headless=True,
        ...     window_size="1280x720",
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    starting_url: str = Field(
        default=BrowserDefaults.STARTING_URL,
        description="URL opened by the browser, always the last argument"
    )

    flags: List[str] = Field(
        default_factory=list,
        description="Raw browser flags appended verbatim"
    )

    additional_args: List[str] = Field(
        default_factory=list,
        description="Extra arguments appended verbatim after the flags"
    )

    port: int = Field(
        default=BrowserDefaults.PORT,
        ge=0,
        le=65535,
        description="Remote debugging port (0 lets the browser pick one)"
    )

    user_data_dir: Optional[Path] = Field(
        default=None,
        description="Profile and log directory (fresh temp directory if None)"
    )

    browser: BrowserIdentity = Field(
        default=DEFAULT_IDENTITY,
        description="Browser to resolve when no browser_path is pinned"
    )

    browser_path: Optional[str] = Field(
        default=None,
        description="Pinned executable path, bypassing resolution"
    )

    # Browser switches
    headless: bool = False
    incognito: bool = False
    disable_gpu: bool = False
    no_sandbox: bool = False
    disable_web_security: bool = False
    allow_insecure_content: bool = False
    ignore_ssl_errors: bool = False
    disable_extensions: bool = False
    disable_plugins: bool = False
    disable_images: bool = False
    disable_javascript: bool = False

    window_size: Optional[WindowSize] = Field(
        default=None,
        description="Window size as (width, height)"
    )

    user_agent: Optional[str] = None
    proxy_server: Optional[str] = None
    host_resolver_rules: Optional[str] = None

    env_vars: Optional[Dict[str, str]] = Field(
        default=None,
        description="Environment overrides for the browser process (inherit only if None)"
    )

    ignore_default_flags: bool = Field(
        default=False,
        description="Skip the baseline flag set"
    )

    # Readiness polling
    connection_poll_interval: int = Field(
        default=BrowserDefaults.CONNECTION_POLL_INTERVAL_MS,
        gt=0,
        description="Delay between readiness checks in milliseconds"
    )

    max_connection_retries: int = Field(
        default=BrowserDefaults.MAX_CONNECTION_RETRIES,
        ge=0,
        description="Readiness checks attempted before giving up"
    )

    @field_validator("browser", mode="before")
    @classmethod
    def parse_browser(cls, v: Any) -> BrowserIdentity:
        """Accept identities, BrowserType members and names like 'edge'."""
        if v is None:
            return DEFAULT_IDENTITY
        if isinstance(v, dict):
            return BrowserIdentity.model_validate(v)
        return BrowserIdentity.parse(v)

    @field_validator("flags", "additional_args", mode="before")
    @classmethod
    def parse_arg_list(cls, v: Any) -> List[str]:
        """Parse arguments from a comma-separated string or a list."""
        if v is None:
            return []
        if isinstance(v, str):
            return v.split(",")
        return list(v)

    @field_validator("window_size", mode="before")
    @classmethod
    def parse_window_size_field(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                return parse_window_size(v)
            except BrowserConfigurationException as e:
                raise ValueError(e.message)
        return v

    @field_validator("window_size")
    @classmethod
    def validate_window_size(cls, v: Optional[WindowSize]) -> Optional[WindowSize]:
        if v is not None and (v[0] < 0 or v[1] < 0):
            raise ValueError(f"Window size must be non-negative, got {v[0]}x{v[1]}")
        return v

    @property
    def effective_browser_name(self) -> str:
        return self.browser.name()


class LoggingSettings(BaseModel):
    """Logging configuration."""
    model_config = ConfigDict(extra="forbid")

    level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    format_type: str = Field(
        default="console",
        description="Log format (console, json)"
    )

    console_enabled: bool = Field(default=True)
    file_enabled: bool = Field(default=False)
    file_path: Path = Field(default=Path("logs/browser-launcher.log"))

    max_file_size_mb: int = Field(default=10, ge=1, le=1000)
    backup_count: int = Field(default=3, ge=1, le=30)

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v_upper

    @field_validator("format_type")
    @classmethod
    def validate_format_type(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = {"console", "json"}
        if v not in valid_formats:
            raise ValueError(f"Invalid format: {v}")
        return v

    def to_setup_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``setup_logging``."""
        return {
            "log_level": self.level,
            "enable_console": self.console_enabled,
            "enable_file": self.file_enabled,
            "log_file_path": self.file_path,
            "enable_json_format": self.format_type == "json",
            "max_file_size_mb": self.max_file_size_mb,
            "backup_count": self.backup_count,
        }


class LauncherSettings(BaseSettings):
    """
    Process-level settings.

    Loaded in priority order from environment variables, a .env file and
    the defaults below. Variables use the BROWSER_LAUNCHER_ prefix and
    ``__`` for nesting, e.g. ``BROWSER_LAUNCHER_LOGGING__LEVEL=DEBUG``.
    """

    model_config = SettingsConfigDict(
        env_prefix="BROWSER_LAUNCHER_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    default_browser: str = Field(
        default="chrome",
        description="Browser launched when none is requested"
    )

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration"
    )

    @field_validator("default_browser")
    @classmethod
    def validate_default_browser(cls, v: str) -> str:
        """Reject names that do not map to a browser identity."""
        try:
            BrowserIdentity.parse(v)
        except ValueError as e:
            raise ValueError(f"Invalid default_browser: {e}")
        return v

    def default_identity(self) -> BrowserIdentity:
        return BrowserIdentity.parse(self.default_browser)


@lru_cache(maxsize=1)
def get_settings() -> LauncherSettings:
    """
    Get cached launcher settings.

    The cache can be cleared with ``get_settings.cache_clear()``.
    """
    return LauncherSettings()


def reload_settings() -> LauncherSettings:
    """Force reload settings by clearing cache."""
    get_settings.cache_clear()
    return get_settings()
