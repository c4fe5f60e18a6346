# src/browser_launcher/core/probe.py
"""
Executable Probe

Platform primitives used by the resolution engine. Every function here
answers "found" or "not found": missing files, missing helper commands,
undecodable output and helper spawn failures all come back as None or
False instead of raising.
"""

import re
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Iterable, List, Optional

from browser_launcher.core.browser_constants import BrowserDefaults, MacOSBundles
from browser_launcher.core.logger import get_logger

logger = get_logger("probe")

_APP_BUNDLE_RE = re.compile(r"(/[^\t\n]*?\.app)\b")


def exists(path: str) -> bool:
    """Filesystem existence check; no permission or executability check."""
    if not path:
        return False
    try:
        return Path(path).exists()
    except (OSError, ValueError):
        return False


def lookup_on_path(name: str, search_path: Optional[str] = None) -> Optional[str]:
    """
    Platform "which" lookup.

    Args:
        name: Executable name
        search_path: PATH-style string to search (process PATH if None)

    Returns:
        The located path, only if it also exists on disk
    """
    if not name:
        return None
    found = shutil.which(name, path=search_path)
    if found and exists(found):
        return str(Path(found).absolute())
    return None


def _candidate_stems(candidate_names: Iterable[str]) -> List[str]:
    return [Path(name).stem for name in candidate_names if name]


def _desktop_exec_target(line: str) -> Optional[str]:
    """First token of an ``Exec=`` value, without its arguments."""
    value = line[len("Exec="):].strip()
    if not value:
        return None
    try:
        tokens = shlex.split(value)
    except ValueError:
        tokens = value.split()
    return tokens[0] if tokens else None


def scan_desktop_entries(
        dirs: Iterable[str],
        candidate_names: Iterable[str],
        search_path: Optional[str] = None
) -> Optional[str]:
    """
    Find a browser through freedesktop ``*.desktop`` entries.

    Reads every descriptor in each directory (in the given order), takes
    the executable of its ``Exec=`` line, and returns the first one whose
    base name matches a candidate and whose target exists.
    """
    stems = _candidate_stems(candidate_names)
    if not stems:
        return None

    for directory in dirs:
        try:
            entries = sorted(Path(directory).glob("*.desktop"))
        except OSError:
            continue

        for entry in entries:
            try:
                content = entry.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                continue

            for line in content.splitlines():
                if not line.startswith("Exec="):
                    continue
                target = _desktop_exec_target(line)
                if not target or Path(target).stem not in stems:
                    continue
                if Path(target).is_absolute():
                    if exists(target):
                        logger.debug("Desktop entry match", entry=str(entry), path=target)
                        return target
                else:
                    located = lookup_on_path(target, search_path)
                    if located:
                        logger.debug("Desktop entry match", entry=str(entry), path=located)
                        return located
    return None


def scan_lsregister(
        pattern: str,
        bundle_executable: str,
        lsregister: str = MacOSBundles.LSREGISTER_PATH
) -> Optional[str]:
    """
    Find a browser through the macOS LaunchServices registration database.

    Dumps the database, keeps lines mentioning ``pattern``
    (case-insensitive) and an ``.app`` bundle, and returns the first
    ``<bundle>.app/<bundle_executable>`` that exists.
    """
    if not pattern or not exists(lsregister):
        return None

    try:
        result = subprocess.run(
            [lsregister, "-dump"],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError as e:
        logger.debug("lsregister could not be run", error=str(e))
        return None

    output = result.stdout.decode("utf-8", errors="replace")
    needle = pattern.lower()
    for line in output.splitlines():
        if needle not in line.lower() or ".app" not in line:
            continue
        match = _APP_BUNDLE_RE.search(line)
        if not match:
            continue
        candidate = f"{match.group(1).strip()}/{bundle_executable}"
        if exists(candidate):
            return candidate
    return None


def query_registry(keys: Iterable[str]) -> Optional[str]:
    """
    Read executable paths from Windows ``App Paths``-style registry keys.

    The default value of each key is checked under HKEY_LOCAL_MACHINE and
    then HKEY_CURRENT_USER; the first existing ``.exe`` wins. Keys without
    a usable default value are skipped. Returns None off Windows.
    """
    try:
        import winreg
    except ImportError:
        return None

    for key_path in keys:
        for hive in (winreg.HKEY_LOCAL_MACHINE, winreg.HKEY_CURRENT_USER):
            try:
                with winreg.OpenKey(hive, key_path) as key:
                    value, _ = winreg.QueryValueEx(key, "")
            except OSError:
                continue
            if not isinstance(value, str):
                continue
            candidate = value.strip().strip('"')
            if candidate.lower().endswith(".exe") and exists(candidate):
                return candidate
    return None


def parse_version_output(output: str) -> Optional[str]:
    """
    Second whitespace-delimited token of the first output line.

    Example:
        >>> parse_version_output("Chromium 120.0.6099.109 built on Debian")
        '120.0.6099.109'
    """
    lines = output.splitlines()
    if not lines:
        return None
    parts = lines[0].split()
    if len(parts) < 2:
        return None
    return parts[1]


def query_version(executable_path: str) -> Optional[str]:
    """Run ``<executable> --version`` and parse its first output line."""
    try:
        result = subprocess.run(
            [executable_path, BrowserDefaults.VERSION_FLAG],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError as e:
        logger.debug("Version query failed", path=executable_path, error=str(e))
        return None

    try:
        output = result.stdout.decode("utf-8")
    except UnicodeDecodeError:
        return None
    return parse_version_output(output)
