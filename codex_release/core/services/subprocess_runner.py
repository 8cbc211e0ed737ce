"""
Subprocess runner for privileged placement commands.

The single place where the installer shells out to ``install`` through
``sudo``. Never raises on a non-zero exit; the caller decides whether
the failure is terminal.
"""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Any

logger = logging.getLogger(__name__)


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def run_subprocess(cmd: list[str], *, needs_sudo: bool = False) -> dict[str, Any]:
    """Run a command, optionally elevated through ``sudo``.

    ``sudo`` reads any password prompt from the controlling terminal,
    so output is captured without blocking the prompt.

    Args:
        cmd: Command list for ``subprocess.run()``.
        needs_sudo: Prefix the command with ``sudo`` unless already root.

    Returns:
        ``{"ok": True}`` on success,
        ``{"ok": False, "error": "...", "stderr": "..."}`` on failure.
    """
    # ── Sudo handling ──
    if needs_sudo and not _is_root():
        cmd = ["sudo", *cmd]

    # ── Execute ──
    logger.debug("run: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        return {"ok": False, "error": str(e)}

    if result.returncode == 0:
        return {"ok": True}

    return {
        "ok": False,
        "error": f"Command failed (exit {result.returncode})",
        "stderr": result.stderr[-2000:] if result.stderr else "",
    }
