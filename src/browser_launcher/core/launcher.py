# src/browser_launcher/core/launcher.py
"""
Browser Process Supervisor

Owns one browser process from spawn to cleanup:
- Resolves the executable (a pinned path wins over resolution)
- Builds the argument vector and the child environment
- Spawns the browser with stdout/stderr redirected to log files inside
  the user data directory
- Waits for, polls and terminates the process
- Removes the user data directory on kill

Lifecycle: created -> launched -> terminated. A terminated launcher
cannot launch again; create a new one instead.
"""

import os
import shutil
import socket
import subprocess
import tempfile
from contextlib import ExitStack
from enum import Enum
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union
from uuid import uuid4

from browser_launcher.config.settings import LaunchConfiguration
from browser_launcher.core import probe
from browser_launcher.core.browser_constants import BrowserDefaults, PlatformTag
from browser_launcher.core.browser_finder import BrowserFinder
from browser_launcher.core.exceptions import (
    BrowserConfigurationException,
    BrowserLaunchException,
    BrowserNotFoundException,
    CleanupException,
    DebuggerNotReadyException,
    ErrorSeverity,
)
from browser_launcher.core.flags import build_flags
from browser_launcher.core.logger import LoggingContext, get_logger, get_performance_timer
from browser_launcher.core.platforms import current_platform_tag
from browser_launcher.core.retry import call_with_retry, create_readiness_retry_config
from browser_launcher.models.browser import LaunchedBrowser


class LauncherState(str, Enum):
    """Supervisor lifecycle states."""

    CREATED = "created"
    LAUNCHED = "launched"
    TERMINATED = "terminated"


class BrowserLauncher:
    """
    Launches and supervises a single browser process.

    Example:
        >>> config = LaunchConfiguration(starting_url="https://example.com", headless=True)
        >>> with BrowserLauncher(config) as launcher:
        ...     browser = launcher.launch()
        ...     port = launcher.wait_until_ready()
        ...     print(browser.pid, port)
    """

    def __init__(
            self,
            config: Optional[LaunchConfiguration] = None,
            environ: Optional[Mapping[str, str]] = None,
            platform_tag: Union[PlatformTag, str, None] = None,
            finder: Optional[BrowserFinder] = None
    ):
        """
        Initialize the launcher.

        A fresh temporary user data directory is created here when the
        configuration does not name one.

        Args:
            config: Launch configuration (defaults if None)
            environ: Environment snapshot used for resolution, the
                HEADLESS switch and as the child's base environment
                (copy of the process environment if None)
            platform_tag: Platform family (current host if None)
            finder: Resolution engine (one preferring config.browser if None)
        """
        self.config = config or LaunchConfiguration()
        self.environ: Dict[str, str] = dict(os.environ if environ is None else environ)
        if platform_tag is None:
            self.platform_tag = current_platform_tag()
        elif isinstance(platform_tag, PlatformTag):
            self.platform_tag = platform_tag
        else:
            self.platform_tag = PlatformTag.from_system(platform_tag)
        self.finder = finder or BrowserFinder(
            [self.config.browser],
            environ=self.environ,
            platform_tag=self.platform_tag
        )
        self.session_id = uuid4().hex[:12]
        self.logger = get_logger("launcher")

        if self.config.user_data_dir is None:
            self.user_data_dir = Path(tempfile.mkdtemp(prefix=BrowserDefaults.USER_DATA_DIR_PREFIX))
        else:
            self.user_data_dir = Path(self.config.user_data_dir)

        slug = self.config.browser.slug()
        self.out_file = self.user_data_dir / f"{slug}-out.log"
        self.err_file = self.user_data_dir / f"{slug}-err.log"

        self.executable_path: Optional[str] = None
        self._process: Optional[subprocess.Popen] = None
        self._launched: Optional[LaunchedBrowser] = None
        self._state = LauncherState.CREATED

    @property
    def state(self) -> LauncherState:
        return self._state

    @property
    def pid(self) -> Optional[int]:
        return self._process.pid if self._process is not None else None

    @property
    def launched(self) -> Optional[LaunchedBrowser]:
        """Handle of the most recent launch."""
        return self._launched

    def resolve_executable(self) -> str:
        """
        Executable to launch.

        Raises:
            BrowserConfigurationException: The pinned browser_path does not exist
            BrowserNotFoundException: No executable resolves for config.browser
        """
        pinned = self.config.browser_path
        if pinned is not None:
            if not probe.exists(pinned):
                raise BrowserConfigurationException(
                    f"Specified browser path does not exist: {pinned}",
                    option="browser_path",
                    value=pinned,
                    severity=ErrorSeverity.CRITICAL
                )
            return pinned

        browser = self.config.browser
        resolved = self.finder.resolve(browser)
        if resolved is None:
            raise BrowserNotFoundException(
                f"{browser.name()} browser not found on this system",
                browser_name=browser.name(),
                searched=browser.executables()
            )
        return resolved.executable_path

    def get_flags(self) -> List[str]:
        """Argument vector for this launcher's configuration."""
        return build_flags(
            self.config,
            user_data_dir=self.user_data_dir,
            platform_tag=self.platform_tag,
            environ=self.environ
        )

    def build_environment(self) -> Dict[str, str]:
        """Child environment: the snapshot plus configured overrides."""
        env = dict(self.environ)
        if self.config.env_vars:
            env.update(self.config.env_vars)
        return env

    def launch(self) -> LaunchedBrowser:
        """
        Spawn the browser.

        Returns:
            LaunchedBrowser: pid, configured port and process of the new browser

        Raises:
            BrowserConfigurationException: Pinned path missing, or launcher terminated
            BrowserNotFoundException: No browser of the requested kind resolves
            BrowserLaunchException: Log files cannot be created or the spawn fails
        """
        if self._state is LauncherState.TERMINATED:
            raise BrowserConfigurationException(
                "Launcher was terminated; create a new launcher to launch again",
                option="state",
                value=self._state.value
            )

        with LoggingContext(self.session_id), get_performance_timer("launch_browser") as timer:
            if self.is_running():
                self.logger.warning(
                    "Browser already running, only the new process will be tracked",
                    previous_pid=self.pid
                )

            executable_path = self.resolve_executable()
            args = self.get_flags()
            browser_name = self.config.effective_browser_name

            with ExitStack() as stack:
                try:
                    self.user_data_dir.mkdir(parents=True, exist_ok=True)
                    stdout = stack.enter_context(open(self.out_file, "wb"))
                    stderr = stack.enter_context(open(self.err_file, "wb"))
                except OSError as e:
                    raise BrowserLaunchException(
                        f"could not create log files in {self.user_data_dir}: {e}",
                        browser_name=browser_name,
                        executable_path=executable_path,
                        original_exception=e
                    ) from e

                try:
                    process = subprocess.Popen(
                        [executable_path, *args],
                        stdin=subprocess.DEVNULL,
                        stdout=stdout,
                        stderr=stderr,
                        env=self.build_environment(),
                    )
                except OSError as e:
                    raise BrowserLaunchException(
                        str(e),
                        browser_name=browser_name,
                        executable_path=executable_path,
                        launch_args=args,
                        original_exception=e
                    ) from e

            self.executable_path = executable_path
            self._process = process
            self._launched = LaunchedBrowser(
                pid=process.pid,
                port=self.config.port,
                process=process,
                executable_path=executable_path,
                args=args
            )
            self._state = LauncherState.LAUNCHED
            timer.add_metric("pid", process.pid)

            self.logger.info(
                f"{browser_name} launched",
                pid=process.pid,
                executable_path=executable_path,
                port=self.config.port,
                user_data_dir=str(self.user_data_dir)
            )
            return self._launched

    def poll(self) -> Optional[int]:
        """Exit code of the browser, or None while it runs (or was never launched)."""
        if self._process is None:
            return None
        return self._process.poll()

    def is_running(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        """
        Block until the browser exits.

        Returns:
            The exit code, or None if nothing was launched

        Raises:
            subprocess.TimeoutExpired: The browser outlived ``timeout`` seconds
        """
        if self._process is None:
            return None
        return self._process.wait(timeout=timeout)

    def _read_devtools_port(self) -> int:
        port_file = self.user_data_dir / BrowserDefaults.DEVTOOLS_ACTIVE_PORT_FILE
        try:
            first_line = port_file.read_text(encoding="utf-8").splitlines()[0]
            return int(first_line.strip())
        except (OSError, IndexError, ValueError) as e:
            raise ConnectionError(f"{port_file.name} not written yet") from e

    def _check_debugger(self) -> int:
        exit_code = self.poll()
        if exit_code is not None:
            raise BrowserLaunchException(
                f"browser exited with code {exit_code} before its debugging port opened",
                browser_name=self.config.effective_browser_name,
                executable_path=self.executable_path,
                severity=ErrorSeverity.CRITICAL
            ).add_context("exit_code", exit_code).add_context("stderr_log", str(self.err_file))

        port = self.config.port or self._read_devtools_port()
        timeout = self.config.connection_poll_interval / 1000.0
        try:
            with socket.create_connection(("127.0.0.1", port), timeout=timeout):
                pass
        except OSError as e:
            raise ConnectionError(f"debugging port {port} not accepting connections: {e}") from e
        return port

    def wait_until_ready(self) -> int:
        """
        Poll until the remote debugging port accepts connections.

        Uses connection_poll_interval and max_connection_retries from the
        configuration. With port 0 the real port is read from the
        DevToolsActivePort file the browser writes into its profile.

        Returns:
            The debugging port; the launch handle is updated with it

        Raises:
            BrowserConfigurationException: Nothing was launched
            BrowserLaunchException: The browser exited while waiting
            DebuggerNotReadyException: Retries were exhausted
        """
        if self._launched is None:
            raise BrowserConfigurationException(
                "Browser must be launched before waiting for it",
                option="state",
                value=self._state.value
            )

        retry_config = create_readiness_retry_config(
            self.config.connection_poll_interval,
            self.config.max_connection_retries
        )
        with LoggingContext(self.session_id):
            try:
                port = call_with_retry(self._check_debugger, retry_config, "wait_until_ready")
            except (ConnectionError, TimeoutError) as e:
                raise DebuggerNotReadyException(
                    f"Debugging endpoint not ready after {retry_config.max_attempts} attempts: {e}",
                    browser_name=self.config.effective_browser_name,
                    port=self.config.port,
                    attempts=retry_config.max_attempts,
                    original_exception=e
                ) from e

            self._launched.port = port
            self.logger.info("Debugging endpoint ready", port=port, pid=self.pid)
            return port

    def _terminate(self, process: subprocess.Popen) -> None:
        if process.poll() is not None:
            return
        try:
            process.terminate()
            try:
                process.wait(timeout=BrowserDefaults.KILL_GRACE_SECONDS)
            except subprocess.TimeoutExpired:
                self.logger.warning("Browser ignored terminate, killing", pid=process.pid)
                process.kill()
                process.wait(timeout=BrowserDefaults.KILL_GRACE_SECONDS)
        except (OSError, subprocess.TimeoutExpired) as e:
            self.logger.debug("Could not stop browser process", pid=process.pid, error=str(e))

    def cleanup(self) -> bool:
        """
        Remove the user data directory.

        Returns:
            True if the directory is gone, False if removal failed
        """
        if not self.user_data_dir.exists():
            return True
        try:
            shutil.rmtree(self.user_data_dir)
        except OSError as e:
            error = CleanupException(
                f"Could not remove user data directory: {e}",
                directory=str(self.user_data_dir),
                original_exception=e
            )
            self.logger.warning(error.message, **error.context)
            return False
        return True

    def kill(self) -> None:
        """
        Stop the browser and remove the user data directory.

        Never raises: a process that already exited and a directory that
        cannot be removed are both tolerated. Safe to call repeatedly and
        without a prior launch().
        """
        with LoggingContext(self.session_id):
            if self._process is not None:
                self._terminate(self._process)
                self.logger.info("Browser stopped", pid=self._process.pid, exit_code=self._process.poll())
            self.cleanup()
            self._state = LauncherState.TERMINATED

    def __enter__(self) -> "BrowserLauncher":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.kill()


def launch(config: Optional[LaunchConfiguration] = None, **options) -> BrowserLauncher:
    """
    Create a launcher and spawn the browser in one call.

    Keyword options are LaunchConfiguration fields and are only allowed
    when ``config`` is None.

    Example:
        >>> launcher = launch(starting_url="https://example.com", headless=True)
        >>> launcher.wait()
    """
    if config is not None and options:
        raise BrowserConfigurationException(
            "Pass either a LaunchConfiguration or keyword options, not both",
            option="options",
            value=", ".join(sorted(options))
        )
    launcher = BrowserLauncher(config or LaunchConfiguration(**options))
    try:
        launcher.launch()
    except Exception:
        launcher.kill()
        raise
    return launcher
