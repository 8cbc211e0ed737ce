"""
GitHub release operations through the ``gh`` CLI.

Lists releases, fetches one release by tag, and downloads a named
asset. JSON is parsed here; callers only see ReleaseDescriptor values.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path

from codex_release.core.errors import FetchError, MissingToolError, NoReleaseError
from codex_release.core.models.release import ReleaseDescriptor

logger = logging.getLogger(__name__)

_ACCEPT = "Accept: application/vnd.github+json"


def run_gh(*args: str) -> subprocess.CompletedProcess[str]:
    """Run a gh CLI command and return the result."""
    logger.debug("gh %s", " ".join(args))
    try:
        return subprocess.run(
            ["gh", *args],
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise MissingToolError("gh", "query and download GitHub releases") from e


def _api_json(path: str) -> subprocess.CompletedProcess[str]:
    return run_gh("api", "-H", _ACCEPT, path)


def _parse(stdout: str, what: str) -> object:
    try:
        return json.loads(stdout)
    except (json.JSONDecodeError, ValueError) as e:
        raise FetchError(f"unreadable response for {what}: {e}") from e


def list_releases(repo: str, *, per_page: int = 100) -> list[ReleaseDescriptor]:
    """List up to ``per_page`` most recent releases of ``repo``."""
    r = _api_json(f"/repos/{repo}/releases?per_page={per_page}")
    if r.returncode != 0:
        raise FetchError(f"failed to list releases for {repo}: {r.stderr.strip()}")

    payload = _parse(r.stdout, f"{repo} releases")
    if not isinstance(payload, list):
        raise FetchError(f"unexpected release list for {repo}")
    return [ReleaseDescriptor.from_api(item) for item in payload]


def get_release(repo: str, tag: str) -> ReleaseDescriptor:
    """Fetch one release by tag."""
    r = _api_json(f"/repos/{repo}/releases/tags/{tag}")
    if r.returncode != 0:
        stderr = r.stderr.strip()
        if "404" in stderr or "Not Found" in stderr:
            raise NoReleaseError(f"no release tagged {tag} in {repo}")
        raise FetchError(f"failed to fetch release {tag} of {repo}: {stderr}")

    payload = _parse(r.stdout, f"{repo}@{tag}")
    if not isinstance(payload, dict):
        raise FetchError(f"unexpected release payload for {repo}@{tag}")
    return ReleaseDescriptor.from_api(payload)


def download_command(repo: str, tag: str, asset: str, dest_dir: Path) -> list[str]:
    """The ``gh`` invocation that downloads ``asset`` into ``dest_dir``."""
    return ["gh", "release", "download", "-R", repo, tag, "-p", asset, "-D", str(dest_dir)]


def download_asset(repo: str, tag: str, asset: str, dest_dir: Path) -> Path:
    """Download one named asset; returns the local file path."""
    cmd = download_command(repo, tag, asset, dest_dir)
    r = run_gh(*cmd[1:])
    if r.returncode != 0:
        raise FetchError(f"download of {asset} from {tag} failed: {r.stderr.strip()}")

    path = dest_dir / asset
    if not path.is_file():
        raise FetchError(f"download of {asset} from {tag} produced no file")
    return path
