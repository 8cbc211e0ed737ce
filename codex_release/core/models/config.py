"""
ReleaseConfig — optional ``codex-release.yml`` settings.

Every field has a default, so a missing file means "use defaults".
Command-line flags override whatever is configured here.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class InstallSettings(BaseModel):
    """Defaults for the installer."""

    use_sudo: bool = True
    destination: Path | None = None


class BuildSettings(BaseModel):
    """Defaults for the local release build."""

    tag_prefix: str = "rust-v"
    workspace_dir: str = "codex-rs"
    smoke_test_packages: list[str] = Field(
        default_factory=lambda: ["codex-core", "codex-common", "codex-protocol"]
    )
    remote: str = "origin"
    help_lines: int = Field(default=20, ge=0)


class ReleaseConfig(BaseModel):
    """Root configuration document."""

    version: int = 1

    repo: str = "cbusillo/codex"
    binary_name: str = "codex"
    release_page_size: int = Field(default=100, ge=1, le=100)

    install: InstallSettings = Field(default_factory=InstallSettings)
    build: BuildSettings = Field(default_factory=BuildSettings)
