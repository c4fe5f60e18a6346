# src/browser_launcher/core/browser_constants.py
"""
Browser Catalog Constants

Static knowledge about every supported Chromium-family browser: display
names, executable names, per-OS install locations, registry keys and the
baseline command line flags. Everything here is a pure lookup table; the
resolution engine decides how to use it.
"""

from enum import Enum
from typing import Dict, List, Tuple


class BrowserType(str, Enum):
    """Supported browser brands."""

    CHROME = "chrome"
    CHROME_CANARY = "chrome-canary"
    CHROMIUM = "chromium"
    EDGE = "edge"
    BRAVE = "brave"
    OPERA = "opera"
    VIVALDI = "vivaldi"
    CUSTOM = "custom"

    @classmethod
    def builtin(cls) -> List["BrowserType"]:
        """Every brand except CUSTOM, in declaration order."""
        return [member for member in cls if member is not cls.CUSTOM]


class PlatformTag(str, Enum):
    """Platform families with their own resolution strategy."""

    LINUX = "linux"
    DARWIN = "darwin"
    WINDOWS = "windows"
    UNKNOWN = "unknown"

    @classmethod
    def from_system(cls, system: str) -> "PlatformTag":
        """Map a ``platform.system()`` value to a platform tag."""
        try:
            return cls(system.lower())
        except ValueError:
            return cls.UNKNOWN


class BrowserNames:
    """Display names by browser type."""

    DISPLAY_NAMES: Dict[BrowserType, str] = {
        BrowserType.CHROME: "Google Chrome",
        BrowserType.CHROME_CANARY: "Google Chrome Canary",
        BrowserType.CHROMIUM: "Chromium",
        BrowserType.EDGE: "Microsoft Edge",
        BrowserType.BRAVE: "Brave",
        BrowserType.OPERA: "Opera",
        BrowserType.VIVALDI: "Vivaldi",
    }


class BrowserExecutables:
    """Executable basenames by browser type, in lookup order."""

    EXECUTABLES: Dict[BrowserType, List[str]] = {
        BrowserType.CHROME: ["google-chrome-stable", "google-chrome", "chrome"],
        BrowserType.CHROME_CANARY: ["google-chrome-canary"],
        BrowserType.CHROMIUM: ["chromium-browser", "chromium"],
        BrowserType.EDGE: ["microsoft-edge-stable", "microsoft-edge", "msedge"],
        BrowserType.BRAVE: ["brave-browser-stable", "brave-browser", "brave"],
        BrowserType.OPERA: ["opera-stable", "opera"],
        BrowserType.VIVALDI: ["vivaldi-stable", "vivaldi"],
    }

    @classmethod
    def get_executables(cls, browser_type: BrowserType) -> List[str]:
        return list(cls.EXECUTABLES.get(browser_type, []))


class MacOSBundles:
    """
    macOS application bundles.

    BUNDLE_NAMES maps a browser type to the bundle (and inner executable)
    names checked under /Applications and ~/Applications.
    """

    APPLICATIONS_DIRS: List[str] = ["/Applications", "~/Applications"]

    BUNDLE_NAMES: Dict[BrowserType, List[str]] = {
        BrowserType.CHROME: ["Google Chrome", "Google Chrome Canary"],
        BrowserType.CHROME_CANARY: ["Google Chrome Canary"],
        BrowserType.CHROMIUM: ["Chromium"],
        BrowserType.EDGE: ["Microsoft Edge"],
        BrowserType.BRAVE: ["Brave Browser"],
        BrowserType.OPERA: ["Opera"],
        BrowserType.VIVALDI: ["Vivaldi"],
    }

    # Display-name substring searched in the lsregister dump
    LSREGISTER_PATTERNS: Dict[BrowserType, str] = {
        BrowserType.CHROME: "Google Chrome",
        BrowserType.CHROME_CANARY: "Google Chrome Canary",
        BrowserType.CHROMIUM: "Chromium",
        BrowserType.EDGE: "Microsoft Edge",
        BrowserType.BRAVE: "Brave Browser",
        BrowserType.OPERA: "Opera",
        BrowserType.VIVALDI: "Vivaldi",
    }

    LSREGISTER_PATH = (
        "/System/Library/Frameworks/CoreServices.framework/Versions/A/Frameworks/"
        "LaunchServices.framework/Versions/A/Support/lsregister"
    )

    @staticmethod
    def bundle_executable(bundle_name: str) -> str:
        """Relative path of the executable inside ``<bundle_name>.app``."""
        return f"Contents/MacOS/{bundle_name}"


class WindowsInstallations:
    """Windows install roots, per-browser suffixes and registry keys."""

    # (environment variable, fallback when unset)
    INSTALL_ROOTS: List[Tuple[str, str]] = [
        ("PROGRAMFILES", "C:\\Program Files"),
        ("PROGRAMFILES(X86)", "C:\\Program Files (x86)"),
        ("LOCALAPPDATA", ""),
    ]

    INSTALL_SUFFIXES: Dict[BrowserType, List[str]] = {
        BrowserType.CHROME: [
            "Google\\Chrome\\Application\\chrome.exe",
            "Google\\Chrome SxS\\Application\\chrome.exe",
        ],
        BrowserType.CHROME_CANARY: [
            "Google\\Chrome SxS\\Application\\chrome.exe",
        ],
        BrowserType.CHROMIUM: [
            "Chromium\\Application\\chrome.exe",
        ],
        BrowserType.EDGE: [
            "Microsoft\\Edge\\Application\\msedge.exe",
        ],
        BrowserType.BRAVE: [
            "BraveSoftware\\Brave-Browser\\Application\\brave.exe",
        ],
        BrowserType.OPERA: [
            "Opera\\launcher.exe",
        ],
        BrowserType.VIVALDI: [
            "Vivaldi\\Application\\vivaldi.exe",
        ],
    }

    REGISTRY_KEYS: Dict[BrowserType, List[str]] = {
        BrowserType.CHROME: [
            r"SOFTWARE\Microsoft\Windows\CurrentVersion\App Paths\chrome.exe",
            r"SOFTWARE\Google\Chrome\BLBeacon",
        ],
        BrowserType.EDGE: [
            r"SOFTWARE\Microsoft\Windows\CurrentVersion\App Paths\msedge.exe",
            r"SOFTWARE\Microsoft\EdgeUpdate\Clients",
        ],
        BrowserType.BRAVE: [
            r"SOFTWARE\BraveSoftware\Brave-Browser",
        ],
        BrowserType.OPERA: [
            r"SOFTWARE\Opera Software\Opera Stable",
        ],
        BrowserType.VIVALDI: [
            r"SOFTWARE\Vivaldi",
        ],
    }


class LinuxInstallations:
    """Linux binary directories and desktop-entry directories."""

    BINARY_DIRS: List[str] = [
        "/usr/bin",
        "/usr/local/bin",
        "/opt/google/chrome",
        "/opt/microsoft/msedge",
        "/opt/brave.com/brave",
        "/opt/opera",
        "/opt/vivaldi",
    ]

    # System-wide locations first, then the user's own
    DESKTOP_ENTRY_DIRS: List[str] = [
        "/usr/share/applications",
        "/usr/local/share/applications",
    ]
    USER_DESKTOP_ENTRY_DIR = ".local/share/applications"


class EnvironmentVariables:
    """Environment variables consumed by the launcher."""

    CHROME_PATH = "CHROME_PATH"
    LIGHTHOUSE_CHROMIUM_PATH = "LIGHTHOUSE_CHROMIUM_PATH"
    BROWSER_PATH = "BROWSER_PATH"
    HEADLESS = "HEADLESS"

    # Priority order for the global executable override
    PATH_OVERRIDES: List[str] = [CHROME_PATH, LIGHTHOUSE_CHROMIUM_PATH, BROWSER_PATH]
    DEPRECATED: Dict[str, str] = {
        LIGHTHOUSE_CHROMIUM_PATH: "use CHROME_PATH or BROWSER_PATH instead",
    }


class BrowserDefaults:
    """Default values for launch configuration."""

    STARTING_URL = "about:blank"
    PORT = 0
    CONNECTION_POLL_INTERVAL_MS = 500
    MAX_CONNECTION_RETRIES = 50

    PREFERENCE_ORDER: List[BrowserType] = [
        BrowserType.CHROME,
        BrowserType.CHROMIUM,
        BrowserType.EDGE,
        BrowserType.BRAVE,
        BrowserType.OPERA,
        BrowserType.VIVALDI,
    ]

    USER_DATA_DIR_PREFIX = "browser-launcher-"
    DEVTOOLS_ACTIVE_PORT_FILE = "DevToolsActivePort"
    KILL_GRACE_SECONDS = 5.0
    VERSION_FLAG = "--version"


class ChromiumArgs:
    """Chromium command line arguments."""

    # Stability, privacy and automation baseline
    DEFAULT_ARGS: List[str] = [
        "--disable-features=Translate",
        "--disable-extensions",
        "--disable-component-extensions-with-background-pages",
        "--disable-background-networking",
        "--disable-component-update",
        "--disable-client-side-phishing-detection",
        "--disable-sync",
        "--metrics-recording-only",
        "--disable-default-apps",
        "--mute-audio",
        "--no-default-browser-check",
        "--no-first-run",
        "--disable-backgrounding-occluded-windows",
        "--disable-renderer-backgrounding",
        "--disable-background-timer-throttling",
        "--disable-ipc-flooding-protection",
        # Avoid Gnome Keyring / KDE wallet prompts
        "--password-store=basic",
        "--use-mock-keychain",
        # Avoid 'Tracing already started'
        "--force-fieldtrials=*BackgroundTracing/default/",
    ]

    REMOTE_DEBUGGING_PORT = "--remote-debugging-port"
    USER_DATA_DIR = "--user-data-dir"
    WINDOW_SIZE = "--window-size"
    USER_AGENT = "--user-agent"
    PROXY_SERVER = "--proxy-server"
    HOST_RESOLVER_RULES = "--host-resolver-rules"

    DISABLE_SETUID_SANDBOX = "--disable-setuid-sandbox"
    HEADLESS = "--headless"
    DISABLE_GPU = "--disable-gpu"
    INCOGNITO = "--incognito"
    NO_SANDBOX = "--no-sandbox"
    DISABLE_WEB_SECURITY = "--disable-web-security"
    ALLOW_INSECURE_CONTENT = "--allow-running-insecure-content"
    IGNORE_SSL_ERRORS = ["--ignore-ssl-errors", "--ignore-certificate-errors"]
    DISABLE_EXTENSIONS = "--disable-extensions"
    DISABLE_PLUGINS = "--disable-plugins"
    DISABLE_IMAGES = "--disable-images"
    DISABLE_JAVASCRIPT = "--disable-javascript"

    @classmethod
    def get_default_args(cls) -> List[str]:
        """Get a copy of the baseline arguments."""
        return cls.DEFAULT_ARGS.copy()
