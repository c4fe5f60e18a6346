# src/browser_launcher/cli.py
"""
Command line front-end.

Launches a browser, waits for it to exit and removes its user data
directory. Exit status is 0 after the browser exits normally and 1 when
the configuration is invalid, no browser can be found or the spawn fails.
"""

import argparse
import sys
from typing import Dict, List, Optional, Sequence

from pydantic import ValidationError

from browser_launcher import __version__
from browser_launcher.config.settings import (
    LaunchConfiguration,
    get_settings,
    parse_window_size,
)
from browser_launcher.core.browser_constants import BrowserType
from browser_launcher.core.browser_finder import BrowserFinder
from browser_launcher.core.exceptions import BrowserConfigurationException, LauncherException
from browser_launcher.core.launcher import BrowserLauncher
from browser_launcher.core.logger import get_logger, setup_logging

BOOLEAN_SWITCHES = [
    ("headless", "Run without a visible window"),
    ("incognito", "Open an incognito window"),
    ("disable-gpu", "Disable GPU hardware acceleration"),
    ("no-sandbox", "Disable the browser sandbox"),
    ("disable-web-security", "Disable same-origin policy"),
    ("allow-insecure-content", "Allow mixed content on HTTPS pages"),
    ("ignore-ssl-errors", "Ignore certificate errors"),
    ("disable-extensions", "Disable extensions"),
    ("disable-plugins", "Disable plugins"),
    ("disable-images", "Do not load images"),
    ("disable-javascript", "Disable JavaScript"),
    ("ignore-default-flags", "Do not add the baseline flag set"),
]


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser"""
    parser = argparse.ArgumentParser(
        prog="browser-launcher",
        description="Find and launch a Chromium-based browser",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Launch Chrome on a blank page
  browser-launcher

  # Headless Edge with a fixed window size and debugging port
  browser-launcher --browser edge --headless --window-size 1280x720 --port 9222

  # List installed browsers
  browser-launcher --list
        """
    )

    parser.add_argument(
        "--starting-url",
        help="URL to open (default: about:blank)"
    )

    parser.add_argument(
        "--flags",
        help="Extra browser flags (comma-separated)"
    )

    parser.add_argument(
        "--port",
        type=int,
        help="Remote debugging port (default: 0, the browser picks one)"
    )

    parser.add_argument(
        "--browser",
        choices=[browser_type.value for browser_type in BrowserType.builtin()],
        help="Browser to launch (default: chrome)"
    )

    parser.add_argument(
        "--browser-path",
        help="Launch this executable instead of searching for one"
    )

    for switch, help_text in BOOLEAN_SWITCHES:
        parser.add_argument(f"--{switch}", action="store_true", help=help_text)

    parser.add_argument("--user-agent", help="User agent string")
    parser.add_argument("--proxy-server", help="Proxy server, e.g. http://127.0.0.1:8080")
    parser.add_argument("--host-resolver-rules", help="Host resolver rules")
    parser.add_argument(
        "--user-data-dir",
        help="Profile directory, removed when the browser exits (default: fresh temp directory)"
    )
    parser.add_argument(
        "--additional-args",
        help="Additional arguments (comma-separated)"
    )
    parser.add_argument(
        "--window-size",
        metavar="WIDTHxHEIGHT",
        help="Window size, e.g. 1920x1080"
    )
    parser.add_argument(
        "--env",
        action="append",
        metavar="KEY=VALUE",
        default=[],
        help="Environment variable for the browser process (repeatable)"
    )

    parser.add_argument(
        "--list",
        action="store_true",
        help="List installed browsers and exit"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Diagnostic log level (default: from BROWSER_LAUNCHER_LOGGING__LEVEL)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show version information and exit"
    )

    return parser


def parse_env_assignments(assignments: Sequence[str]) -> Optional[Dict[str, str]]:
    """Parse ``KEY=VALUE`` strings; None when there are none."""
    if not assignments:
        return None
    env_vars = {}
    for assignment in assignments:
        key, separator, value = assignment.partition("=")
        if not separator or not key:
            raise BrowserConfigurationException(
                f"Invalid environment assignment '{assignment}', expected KEY=VALUE",
                option="env",
                value=assignment
            )
        env_vars[key] = value
    return env_vars


def build_configuration(args: argparse.Namespace) -> LaunchConfiguration:
    """
    Map parsed arguments onto a LaunchConfiguration.

    Raises:
        BrowserConfigurationException: Malformed window size or environment assignment
        ValidationError: Values rejected by the configuration model
    """
    options = {
        "starting_url": args.starting_url,
        "flags": args.flags,
        "port": args.port,
        "browser": args.browser or get_settings().default_identity(),
        "browser_path": args.browser_path,
        "user_agent": args.user_agent,
        "proxy_server": args.proxy_server,
        "host_resolver_rules": args.host_resolver_rules,
        "user_data_dir": args.user_data_dir,
        "additional_args": args.additional_args,
        "env_vars": parse_env_assignments(args.env),
    }
    if args.window_size is not None:
        options["window_size"] = parse_window_size(args.window_size)

    for switch, _ in BOOLEAN_SWITCHES:
        field_name = switch.replace("-", "_")
        options[field_name] = getattr(args, field_name)

    return LaunchConfiguration(**{key: value for key, value in options.items() if value is not None})


def list_browsers() -> int:
    """Print every installed browser with its path and version."""
    browsers = BrowserFinder().resolve_all()
    if not browsers:
        print("No supported browsers found", file=sys.stderr)
        return 1
    for browser in browsers:
        version = browser.get_version() or "unknown"
        print(f"{browser.name()}\t{version}\t{browser.executable_path}")
    return 0


def run(config: LaunchConfiguration) -> int:
    """Launch, wait for exit and clean up. Ctrl-C stops the browser."""
    logger = get_logger("cli")
    launcher = BrowserLauncher(config)
    try:
        launched = launcher.launch()
    except LauncherException as e:
        logger.debug("Launch failed", **e.to_dict())
        print(e.format_report(), file=sys.stderr)
        launcher.kill()
        return 1

    print(f"Launched {config.effective_browser_name} with PID: {launched.pid}")
    try:
        exit_code = launcher.wait()
    except KeyboardInterrupt:
        print("Interrupted, stopping browser", file=sys.stderr)
        exit_code = None
    finally:
        launcher.kill()

    print("Browser process has exited.")
    logger.debug("Browser exited", exit_code=exit_code)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Invalid launcher settings:\n{e}", file=sys.stderr)
        return 1

    logging_options = settings.logging.to_setup_kwargs()
    if args.log_level:
        logging_options["log_level"] = args.log_level
    setup_logging(**logging_options, force=True)

    if args.list:
        return list_browsers()

    try:
        config = build_configuration(args)
    except BrowserConfigurationException as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"Invalid launch configuration:\n{e}", file=sys.stderr)
        return 1

    return run(config)


if __name__ == "__main__":
    sys.exit(main())
