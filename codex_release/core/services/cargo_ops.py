"""
Build toolchain operations — cargo test / build / clean.

Output is streamed to the terminal; these steps can take minutes and
the operator needs to see progress. Each call returns the exit code.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from codex_release.core.errors import MissingToolError

logger = logging.getLogger(__name__)

RELEASE_DIR = Path("target") / "release"


def run_cargo(*args: str, cwd: Path) -> int:
    """Run a cargo command with inherited stdio and return its exit code."""
    logger.debug("cargo %s (in %s)", " ".join(args), cwd)
    try:
        return subprocess.run(["cargo", *args], cwd=str(cwd)).returncode
    except FileNotFoundError as e:
        raise MissingToolError("cargo", "test and build release binaries") from e


def run_smoke_tests(workspace: Path, packages: list[str]) -> int:
    """Run the lean test subset: ``cargo test -p <pkg>... --quiet``."""
    args: list[str] = ["test"]
    for pkg in packages:
        args += ["-p", pkg]
    args.append("--quiet")
    return run_cargo(*args, cwd=workspace)


def build_release(workspace: Path) -> int:
    """Build every workspace target in release mode."""
    return run_cargo("build", "--workspace", "--release", cwd=workspace)


def clean(workspace: Path) -> int:
    """Remove build artifacts."""
    return run_cargo("clean", cwd=workspace)


def locate_binary(workspace: Path, binary_name: str) -> Path | None:
    """Find the built executable, trying the ``.exe`` variant second."""
    base = workspace / RELEASE_DIR / binary_name
    for candidate in (base, base.with_name(f"{binary_name}.exe")):
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return candidate
    return None


def probe_binary(binary: Path, help_lines: int = 20) -> tuple[str, str]:
    """Return ``(version output, first help lines)``. Failures are logged."""
    version = ""
    excerpt = ""
    try:
        r = subprocess.run([str(binary), "--version"], capture_output=True, text=True)
        if r.returncode == 0:
            version = r.stdout.strip()
        else:
            logger.warning("%s --version exited %d", binary, r.returncode)

        r = subprocess.run([str(binary), "--help"], capture_output=True, text=True)
        if r.returncode == 0:
            excerpt = "\n".join(r.stdout.splitlines()[:help_lines])
        else:
            logger.warning("%s --help exited %d", binary, r.returncode)
    except OSError as e:
        logger.warning("cannot run %s: %s", binary, e)
    return version, excerpt
