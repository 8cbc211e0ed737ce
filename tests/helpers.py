"""
Builders shared by several test modules.
"""

from __future__ import annotations

import io
import subprocess
import tarfile
from datetime import UTC, datetime
from pathlib import Path

from codex_release.core.models.release import ReleaseDescriptor

LINUX_TRIPLE = "x86_64-unknown-linux-gnu"
WINDOWS_TRIPLE = "x86_64-pc-windows-msvc"


def make_release(
    tag: str,
    created_at: str,
    assets: list[str],
    draft: bool = False,
) -> ReleaseDescriptor:
    return ReleaseDescriptor(
        tag=tag,
        is_draft=draft,
        created_at=datetime.fromisoformat(created_at).replace(tzinfo=UTC),
        asset_names=frozenset(assets),
    )


def make_tar_gz(path: Path, member: str, content: bytes, mode: int = 0o755) -> Path:
    """Write a .tar.gz at ``path`` holding one file ``member``."""
    with tarfile.open(path, "w:gz") as tar:
        info = tarfile.TarInfo(name=member)
        info.size = len(content)
        info.mode = mode
        tar.addfile(info, io.BytesIO(content))
    return path


def init_test_repo(path: Path) -> Path:
    """Create a minimal git repo with one commit (needed for HEAD)."""
    path.mkdir(parents=True, exist_ok=True)
    subprocess.run(["git", "init", str(path)], capture_output=True, check=True)
    for key, value in (
        ("user.name", "Test User"),
        ("user.email", "test@test.com"),
        ("commit.gpgsign", "false"),
    ):
        subprocess.run(
            ["git", "-C", str(path), "config", key, value],
            capture_output=True, check=True,
        )
    workspace = path / "codex-rs"
    workspace.mkdir()
    (workspace / "Cargo.toml").write_text("[workspace]\n")
    subprocess.run(["git", "-C", str(path), "add", "."], capture_output=True, check=True)
    subprocess.run(
        ["git", "-C", str(path), "commit", "-m", "initial"],
        capture_output=True, check=True,
    )
    return path


def git_out(path: Path, *args: str) -> str:
    r = subprocess.run(["git", "-C", str(path), *args], capture_output=True, text=True, check=True)
    return r.stdout.strip()
