"""Launch configuration and process-level settings."""

from .settings import (
    LaunchConfiguration,
    LauncherSettings,
    LoggingSettings,
    get_settings,
    parse_window_size,
    reload_settings,
)

__all__ = [
    "LaunchConfiguration",
    "LauncherSettings",
    "LoggingSettings",
    "get_settings",
    "parse_window_size",
    "reload_settings",
]
