"""
Git operations for the local release build.

Tag listing, branch isolation and restoration. The runner never raises
on a non-zero exit; callers decide whether a failure is terminal
(isolation) or best-effort (fetch, restore, delete).
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from codex_release.core.errors import MissingToolError, ResolutionError

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Low-level runner
# ═══════════════════════════════════════════════════════════════════


def run_git(*args: str, cwd: Path) -> subprocess.CompletedProcess[str]:
    """Run a git command and return the result."""
    logger.debug("git %s", " ".join(args))
    try:
        return subprocess.run(
            ["git", *args],
            cwd=str(cwd),
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise MissingToolError("git", "check out build tags") from e


# ═══════════════════════════════════════════════════════════════════
#  Queries
# ═══════════════════════════════════════════════════════════════════


def repo_root(cwd: Path) -> Path:
    """Top-level directory of the working copy containing ``cwd``."""
    r = run_git("rev-parse", "--show-toplevel", cwd=cwd)
    if r.returncode != 0:
        raise ResolutionError(f"not a git repository: {cwd}")
    return Path(r.stdout.strip())


def list_tags(root: Path, pattern: str) -> list[str]:
    """Tags matching a glob ``pattern`` (e.g. ``rust-v*``)."""
    r = run_git("tag", "--list", pattern, cwd=root)
    if r.returncode != 0:
        logger.warning("git tag --list failed: %s", r.stderr.strip())
        return []
    return [line.strip() for line in r.stdout.splitlines() if line.strip()]


def current_ref(root: Path) -> tuple[str, bool]:
    """The checked-out branch, or the commit id when HEAD is detached.

    Returns:
        ``(ref, detached)``.
    """
    r = run_git("rev-parse", "--abbrev-ref", "HEAD", cwd=root)
    if r.returncode != 0:
        raise ResolutionError(f"cannot determine current branch: {r.stderr.strip()}")
    branch = r.stdout.strip()
    if branch != "HEAD":
        return branch, False

    r_sha = run_git("rev-parse", "HEAD", cwd=root)
    if r_sha.returncode != 0:
        raise ResolutionError(f"cannot determine current commit: {r_sha.stderr.strip()}")
    return r_sha.stdout.strip(), True


# ═══════════════════════════════════════════════════════════════════
#  Mutations
# ═══════════════════════════════════════════════════════════════════


def fetch_tags(root: Path, remote: str = "origin") -> bool:
    """Refresh tags from ``remote``. Best-effort: returns False on failure."""
    r = run_git("fetch", remote, "--tags", "--prune", cwd=root)
    if r.returncode != 0:
        logger.warning("git fetch %s --tags failed: %s", remote, r.stderr.strip())
        return False
    return True


def create_branch_at_tag(root: Path, branch: str, tag: str) -> subprocess.CompletedProcess[str]:
    """Create ``branch`` at ``tags/<tag>`` and check it out."""
    return run_git("switch", "-c", branch, f"tags/{tag}", cwd=root)


def switch_to(root: Path, ref: str, *, detached: bool = False) -> subprocess.CompletedProcess[str]:
    """Check out ``ref`` (a branch, or a commit when ``detached``)."""
    if detached:
        return run_git("switch", "--detach", ref, cwd=root)
    return run_git("switch", ref, cwd=root)


def delete_branch(root: Path, branch: str) -> subprocess.CompletedProcess[str]:
    """Force-delete a local branch."""
    return run_git("branch", "-D", branch, cwd=root)
