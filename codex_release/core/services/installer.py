"""
Artifact installer — resolve, download, unpack, place, smoke-check.

One canonical pipeline:

    1. scoped temporary directory (removed on every exit path)
    2. release + asset selection, download (or dry-run instruction)
    3. unpack, verify the binary exists
    4. place it at the destination with mode 0755, via sudo only when
       the destination directory is not writable
    5. ``<binary> --version`` smoke check (advisory)
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from codex_release.core.errors import BinaryNotFoundError, InstallError
from codex_release.core.models.install import InstallOptions, InstallResult
from codex_release.core.services import archive, gh_ops
from codex_release.core.services.destination import resolve_destination
from codex_release.core.services.release_select import select_asset, select_release
from codex_release.core.services.subprocess_runner import run_subprocess
from codex_release.core.services.target import resolve_target
from codex_release.core.services.tool_requirements import ensure_tools

logger = logging.getLogger(__name__)

WORKDIR_PREFIX = "codex-install-"
INSTALL_MODE = 0o755


# ═══════════════════════════════════════════════════════════════════
#  Scoped resources
# ═══════════════════════════════════════════════════════════════════


@contextmanager
def scoped_workdir(prefix: str = WORKDIR_PREFIX) -> Iterator[Path]:
    """A temporary directory owned by one invocation, always removed."""
    path = Path(tempfile.mkdtemp(prefix=prefix))
    logger.debug("Created work dir %s", path)
    try:
        yield path
    finally:
        try:
            shutil.rmtree(path)
        except OSError as e:
            logger.warning("could not remove %s: %s", path, e)


# ═══════════════════════════════════════════════════════════════════
#  Placement
# ═══════════════════════════════════════════════════════════════════


def needs_elevation(dest: Path, use_sudo: bool) -> bool:
    """Elevate only when allowed and the destination dir is not writable."""
    return use_sudo and not os.access(dest.parent, os.W_OK)


def place_binary(src: Path, dest: Path, *, use_sudo: bool = True) -> bool:
    """Install ``src`` at ``dest`` with mode 0755, overwriting any file there.

    Returns:
        True if the placement ran through sudo.

    Raises:
        InstallError: The copy failed. An elevated failure is final;
            there is no unelevated retry.
    """
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        # Surfaced by the copy below if it matters
        logger.debug("Cannot create %s: %s", dest.parent, e)

    if needs_elevation(dest, use_sudo):
        ensure_tools(["sudo"])
        logger.info("==> %s is not writable, using sudo", dest.parent)
        result = run_subprocess(
            ["install", "-m", f"{INSTALL_MODE:04o}", str(src), str(dest)],
            needs_sudo=True,
        )
        if not result["ok"]:
            detail = result.get("stderr", "").strip() or result["error"]
            raise InstallError(f"sudo install to {dest} failed: {detail}")
        return True

    try:
        if dest.exists() or dest.is_symlink():
            dest.unlink()
        shutil.copyfile(src, dest)
        os.chmod(dest, INSTALL_MODE)
    except OSError as e:
        raise InstallError(f"cannot install to {dest}: {e}") from e
    return False


def smoke_check(binary: Path) -> tuple[bool, str]:
    """Run ``<binary> --version``. Failures are logged, never raised."""
    try:
        r = subprocess.run(
            [str(binary), "--version"],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        logger.warning("%s --version could not run: %s", binary, e)
        return False, ""

    output = r.stdout.strip()
    if r.returncode != 0:
        logger.warning(
            "%s --version exited %d: %s",
            binary, r.returncode, r.stderr.strip() or output,
        )
        return False, output
    return True, output


# ═══════════════════════════════════════════════════════════════════
#  Pipeline
# ═══════════════════════════════════════════════════════════════════


def install_release(options: InstallOptions) -> InstallResult:
    """Install the newest (or the requested) release binary for this host.

    Raises:
        ReleaseToolError: Any terminal failure; the work dir is gone
            by the time it propagates.
    """
    ensure_tools(["gh"])

    target = resolve_target(override=options.target)
    destination = resolve_destination(
        target, options.binary_name, override=options.destination,
    )
    logger.info("==> repo=%s target=%s dest=%s", options.repo, target.triple, destination)

    with scoped_workdir() as workdir:
        tag = select_release(
            options.repo,
            target,
            tag=options.tag,
            binary_name=options.binary_name,
            page_size=options.release_page_size,
        )
        logger.info("==> selected tag: %s", tag)

        release = gh_ops.get_release(options.repo, tag)
        asset = select_asset(release, target, options.binary_name)
        logger.info("==> downloading %s", asset)

        if options.dry_run:
            command = gh_ops.download_command(options.repo, tag, asset, workdir)
            return InstallResult(
                repo=options.repo,
                target=target,
                tag=tag,
                asset=asset,
                destination=destination,
                dry_run=True,
                fetch_command=shlex.join(command),
            )

        downloaded = gh_ops.download_asset(options.repo, tag, asset, workdir)
        binary = archive.unpack(downloaded, workdir)
        if not binary.is_file():
            raise BinaryNotFoundError(f"binary not found after unpack: {binary}")

        elevated = place_binary(binary, destination, use_sudo=options.use_sudo)

    logger.info("==> installed to %s", destination)
    smoke_ok, version = smoke_check(destination)

    return InstallResult(
        repo=options.repo,
        target=target,
        tag=tag,
        asset=asset,
        destination=destination,
        elevated=elevated,
        version_output=version,
        smoke_ok=smoke_ok,
    )
