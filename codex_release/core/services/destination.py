"""
Destination resolver — where the installed binary goes.

Never fails: an explicit override wins, otherwise a per-OS default is
chosen. On macOS the Homebrew prefix is preferred when ``brew`` can be
queried.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Callable

from codex_release.core.models.platform import OsFamily, PlatformTarget

logger = logging.getLogger(__name__)

# Generic fallback directory (also used for unknown OS families)
FALLBACK_BIN = Path("/usr/local/bin")

# Well-known Homebrew prefix on Apple silicon
MAC_WELL_KNOWN_BIN = Path("/opt/homebrew/bin")

# OS family → default bin directory (mac is resolved dynamically)
DEFAULT_BIN_DIRS: dict[OsFamily, Callable[[], Path]] = {
    "linux": lambda: FALLBACK_BIN,
    "windows": lambda: Path.home() / ".local" / "bin",
    "other": lambda: FALLBACK_BIN,
}

# OS family → executable suffix
EXE_SUFFIXES: dict[OsFamily, str] = {"windows": ".exe"}


def brew_prefix() -> str | None:
    """Return ``brew --prefix``, or None when brew is absent or fails."""
    if not shutil.which("brew"):
        return None
    try:
        r = subprocess.run(
            ["brew", "--prefix"],
            capture_output=True,
            text=True,
            timeout=15,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("brew --prefix failed: %s", e)
        return None
    prefix = r.stdout.strip() if r.returncode == 0 else ""
    return prefix or None


def _mac_bin_dir(
    package_prefix: Callable[[], str | None],
    well_known_bin: Path,
) -> Path:
    prefix = package_prefix()
    if prefix:
        return Path(prefix) / "bin"
    if well_known_bin.is_dir():
        return well_known_bin
    return FALLBACK_BIN


def resolve_destination(
    target: PlatformTarget,
    binary_name: str = "codex",
    override: Path | str | None = None,
    *,
    package_prefix: Callable[[], str | None] = brew_prefix,
    well_known_bin: Path = MAC_WELL_KNOWN_BIN,
) -> Path:
    """Resolve the install path for ``binary_name`` on ``target``.

    Args:
        target: Resolved platform target (only its OS family is used).
        binary_name: File name of the installed binary, without suffix.
        override: Explicit destination path; wins unconditionally.
        package_prefix: Returns the package-manager prefix, or None.
        well_known_bin: macOS fallback used when no prefix is available.
    """
    if override:
        return Path(override).expanduser()

    family = target.os_family
    if family == "mac":
        bin_dir = _mac_bin_dir(package_prefix, well_known_bin)
    else:
        bin_dir = DEFAULT_BIN_DIRS.get(family, DEFAULT_BIN_DIRS["other"])()

    return bin_dir / f"{binary_name}{EXE_SUFFIXES.get(family, '')}"
