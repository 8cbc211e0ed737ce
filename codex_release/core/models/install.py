"""
Install request and outcome models.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

from codex_release.core.models.platform import PlatformTarget


class InstallOptions(BaseModel):
    """Everything the operator can choose for one install invocation.

    ``None`` for tag, target and destination means "resolve it".
    """

    repo: str = "cbusillo/codex"
    binary_name: str = "codex"
    tag: str | None = None
    target: str | None = None
    destination: Path | None = None
    use_sudo: bool = True
    dry_run: bool = False
    release_page_size: int = 100


class InstallResult(BaseModel):
    """Outcome of a finished install (or dry run)."""

    repo: str
    target: PlatformTarget
    tag: str
    asset: str
    destination: Path
    dry_run: bool = False
    fetch_command: str = ""
    elevated: bool = False
    version_output: str = ""
    smoke_ok: bool = False

    def to_dict(self) -> dict:
        return {
            "repo": self.repo,
            "target": self.target.triple,
            "tag": self.tag,
            "asset": self.asset,
            "destination": str(self.destination),
            "dry_run": self.dry_run,
            "fetch_command": self.fetch_command,
            "elevated": self.elevated,
            "version": self.version_output,
            "smoke_ok": self.smoke_ok,
        }
