# src/browser_launcher/core/flags.py
"""
Browser Flag Builder

Maps a LaunchConfiguration to the ordered argument vector passed to the
browser executable. The order is fixed so that identical configurations
always produce identical command lines. No value is escaped or validated;
the vector is handed to the OS directly, never to a shell.
"""

import os
from pathlib import Path
from typing import TYPE_CHECKING, List, Mapping, Optional, Union

from browser_launcher.core.browser_constants import (
    ChromiumArgs,
    EnvironmentVariables,
    PlatformTag,
)
from browser_launcher.core.platforms import current_platform_tag

if TYPE_CHECKING:
    from browser_launcher.config.settings import LaunchConfiguration


def _flag(name: str, value: object) -> str:
    return f"{name}={value}"


def headless_requested(
        config: "LaunchConfiguration",
        environ: Optional[Mapping[str, str]] = None
) -> bool:
    """Headless if configured, or if HEADLESS is set to anything (even empty)."""
    if environ is None:
        environ = os.environ
    return config.headless or EnvironmentVariables.HEADLESS in environ


def build_flags(
        config: "LaunchConfiguration",
        user_data_dir: Union[str, Path, None] = None,
        platform_tag: Union[PlatformTag, str, None] = None,
        environ: Optional[Mapping[str, str]] = None
) -> List[str]:
    """
    Build the browser argument vector.

    Args:
        config: Launch configuration
        user_data_dir: Profile directory (config.user_data_dir if None)
        platform_tag: Platform family (current host if None)
        environ: Environment snapshot consulted for HEADLESS (process
            environment if None)

    Returns:
        Arguments in launch order; the starting URL is always last

    Example:
        >>> config = LaunchConfiguration(headless=True, window_size=(1920, 1080))
        >>> build_flags(config, "/tmp/profile", PlatformTag.DARWIN)[-4:]
        ['--headless', '--disable-gpu', '--window-size=1920,1080', 'about:blank']
    """
    if platform_tag is None:
        platform_tag = current_platform_tag()
    elif not isinstance(platform_tag, PlatformTag):
        platform_tag = PlatformTag.from_system(platform_tag)

    if user_data_dir is None:
        user_data_dir = config.user_data_dir
    use_defaults = not config.ignore_default_flags
    headless = headless_requested(config, environ)

    flags = ChromiumArgs.get_default_args() if use_defaults else []

    flags.append(_flag(ChromiumArgs.REMOTE_DEBUGGING_PORT, config.port))

    if use_defaults and platform_tag is PlatformTag.LINUX:
        flags.append(ChromiumArgs.DISABLE_SETUID_SANDBOX)

    flags.append(_flag(ChromiumArgs.USER_DATA_DIR, user_data_dir if user_data_dir is not None else ""))

    if headless:
        flags.append(ChromiumArgs.HEADLESS)
        flags.append(ChromiumArgs.DISABLE_GPU)

    if config.window_size is not None:
        width, height = config.window_size
        flags.append(_flag(ChromiumArgs.WINDOW_SIZE, f"{width},{height}"))

    if config.incognito:
        flags.append(ChromiumArgs.INCOGNITO)

    # Guarded on the configured switch only, so HEADLESS from the
    # environment plus disable_gpu emits the flag twice.
    if config.disable_gpu and not config.headless:
        flags.append(ChromiumArgs.DISABLE_GPU)

    if config.no_sandbox:
        flags.append(ChromiumArgs.NO_SANDBOX)

    if config.disable_web_security:
        flags.append(ChromiumArgs.DISABLE_WEB_SECURITY)

    if config.allow_insecure_content:
        flags.append(ChromiumArgs.ALLOW_INSECURE_CONTENT)

    if config.ignore_ssl_errors:
        flags.extend(ChromiumArgs.IGNORE_SSL_ERRORS)

    if config.disable_extensions and use_defaults:
        flags.append(ChromiumArgs.DISABLE_EXTENSIONS)

    if config.disable_plugins:
        flags.append(ChromiumArgs.DISABLE_PLUGINS)

    if config.disable_images:
        flags.append(ChromiumArgs.DISABLE_IMAGES)

    if config.disable_javascript:
        flags.append(ChromiumArgs.DISABLE_JAVASCRIPT)

    if config.user_agent is not None:
        flags.append(_flag(ChromiumArgs.USER_AGENT, config.user_agent))

    if config.proxy_server is not None:
        flags.append(_flag(ChromiumArgs.PROXY_SERVER, config.proxy_server))

    if config.host_resolver_rules is not None:
        flags.append(_flag(ChromiumArgs.HOST_RESOLVER_RULES, config.host_resolver_rules))

    flags.extend(config.flags)
    flags.extend(config.additional_args)
    flags.append(config.starting_url)
    return flags
