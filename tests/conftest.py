"""
Shared test fixtures and configuration.
"""

import logging
import subprocess
import tempfile
from pathlib import Path

import pytest

from tests.helpers import init_test_repo


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test from an empty directory so no stray config is found."""
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    monkeypatch.chdir(cwd)


@pytest.fixture
def scratch_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect ``tempfile`` to a directory the test can inspect."""
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(scratch))
    return scratch


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """A throwaway git repo with a ``codex-rs`` workspace and two tags."""
    repo = init_test_repo(tmp_path / "repo")
    for tag in ("rust-v0.1.0", "rust-v0.2.0"):
        subprocess.run(["git", "-C", str(repo), "tag", tag], capture_output=True, check=True)
    return repo


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo ``setup_logging`` calls made by CLI invocations."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
