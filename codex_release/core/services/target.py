"""
Target resolver — host OS/arch → canonical target triple.

The mapping is a fixed table; a combination outside it is a terminal
error. An explicit override skips detection and is trusted as given.
"""

from __future__ import annotations

import logging
import platform

from codex_release.core.errors import UnsupportedTargetError
from codex_release.core.models.platform import OsFamily, PlatformTarget

logger = logging.getLogger(__name__)

# (os family, lower-cased machine) → target triple
TARGET_TABLE: dict[tuple[OsFamily, str], str] = {
    ("mac", "arm64"): "aarch64-apple-darwin",
    ("mac", "x86_64"): "x86_64-apple-darwin",
    ("linux", "x86_64"): "x86_64-unknown-linux-gnu",
    ("linux", "aarch64"): "aarch64-unknown-linux-gnu",
    ("windows", "x86_64"): "x86_64-pc-windows-msvc",
    ("windows", "amd64"): "x86_64-pc-windows-msvc",      # native Windows Python
    ("windows", "aarch64"): "aarch64-pc-windows-msvc",
    ("windows", "arm64"): "aarch64-pc-windows-msvc",
}

# Display names for error messages
_FAMILY_LABELS: dict[OsFamily, str] = {
    "mac": "macOS",
    "linux": "Linux",
    "windows": "Windows",
    "other": "OS",
}


def os_family(system: str) -> OsFamily | None:
    """Classify a ``uname -s`` / ``platform.system()`` value."""
    if system == "Darwin":
        return "mac"
    if system == "Linux":
        return "linux"
    if system == "Windows" or system.startswith(("MINGW", "MSYS", "CYGWIN")):
        return "windows"
    return None


def detect_host() -> tuple[str, str]:
    """Return ``(system, machine)`` for the running interpreter."""
    return platform.system(), platform.machine()


def resolve_target(
    system: str | None = None,
    machine: str | None = None,
    *,
    override: str | None = None,
) -> PlatformTarget:
    """Resolve the target triple for this invocation.

    Args:
        system: Host OS identifier (default: detected).
        machine: Host architecture identifier (default: detected).
        override: Explicit triple; bypasses detection and the table.

    Raises:
        UnsupportedTargetError: Host combination not in TARGET_TABLE.
    """
    if override:
        logger.debug("Using target override %s", override)
        return PlatformTarget.from_triple(override)

    if system is None or machine is None:
        host_system, host_machine = detect_host()
        system = system or host_system
        machine = machine or host_machine

    family = os_family(system)
    if family is None:
        raise UnsupportedTargetError(f"unsupported OS: {system}")

    arch = machine.lower()
    triple = TARGET_TABLE.get((family, arch))
    if triple is None:
        raise UnsupportedTargetError(f"unsupported {_FAMILY_LABELS[family]} arch: {machine}")

    return PlatformTarget(triple=triple, os_family=family, arch=arch)
