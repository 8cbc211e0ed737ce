"""
Tests for the local build orchestrator.

Runs against a real git repo in tmp_path; cargo is replaced by a
recorder so no toolchain is needed.
"""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from codex_release.core.errors import BuildError, InvalidTagError, NoTagError
from codex_release.core.models.build import BuildState
from codex_release.core.models.config import BuildSettings
from codex_release.core.services import git_ops
from codex_release.core.services.build_ops import resolve_build_tag, run_local_build
from tests.helpers import git_out, init_test_repo

FAKE_BINARY = "#!/bin/sh\nif [ \"$1\" = --version ]; then echo 'codex-cli 0.2.0'; " \
              "else printf 'Usage: codex\\nline2\\nline3\\n'; fi\n"


class FakeCargo:
    """Records cargo invocations; ``fail`` maps a subcommand to an exit code."""

    def __init__(self, fail: dict[str, int] | None = None, produce_binary: bool = False):
        self.calls: list[tuple[str, ...]] = []
        self.fail = fail or {}
        self.produce_binary = produce_binary

    def __call__(self, *args: str, cwd: Path) -> int:
        self.calls.append(args)
        rc = self.fail.get(args[0], 0)
        if args[0] == "build" and rc == 0 and self.produce_binary:
            release = cwd / "target" / "release"
            release.mkdir(parents=True, exist_ok=True)
            binary = release / "codex"
            binary.write_text(FAKE_BINARY)
            binary.chmod(0o755)
        return rc

    def subcommands(self) -> list[str]:
        return [c[0] for c in self.calls]


def _build(repo: Path, cargo: FakeCargo, **kwargs):
    with patch("codex_release.core.services.build_ops.ensure_tools"), \
         patch("codex_release.core.services.cargo_ops.run_cargo", side_effect=cargo):
        return run_local_build(repo, BuildSettings(help_lines=2), **kwargs)


def _branches(repo: Path) -> list[str]:
    return git_out(repo, "branch", "--format=%(refname:short)").splitlines()


# ── Tag resolution ───────────────────────────────────────────────────


class TestResolveBuildTag:
    def test_latest(self, git_repo):
        assert resolve_build_tag(git_repo, "rust-v").name == "rust-v0.2.0"

    def test_prerelease_below_release(self, git_repo):
        git_out(git_repo, "tag", "rust-v0.2.0-alpha.1")
        git_out(git_repo, "tag", "rust-v0.10.0-beta")
        assert resolve_build_tag(git_repo, "rust-v").name == "rust-v0.10.0-beta"

    def test_override(self, git_repo):
        assert resolve_build_tag(git_repo, "rust-v", "rust-v0.1.0").name == "rust-v0.1.0"

    def test_override_without_prefix(self, git_repo):
        with pytest.raises(InvalidTagError) as exc:
            resolve_build_tag(git_repo, "rust-v", "v1.0.0")
        assert str(exc.value) == "TAG must start with 'rust-v' (got 'v1.0.0')"

    def test_no_tags(self, tmp_path):
        repo = init_test_repo(tmp_path / "bare")
        with pytest.raises(NoTagError, match=r"no rust-v\* tags found"):
            resolve_build_tag(repo, "rust-v")


# ── Orchestration ────────────────────────────────────────────────────


class TestRunLocalBuild:
    def test_default_run_cleans_up(self, git_repo):
        base = git_out(git_repo, "branch", "--show-current")
        cargo = FakeCargo()

        run = _build(git_repo, cargo)

        assert run.tag.name == "rust-v0.2.0"
        assert run.branch.startswith("build-rust-v0.2.0-")
        assert cargo.subcommands() == ["test", "build", "clean"]
        assert cargo.calls[0] == (
            "test", "-p", "codex-core", "-p", "codex-common", "-p", "codex-protocol", "--quiet",
        )
        assert cargo.calls[1] == ("build", "--workspace", "--release")
        assert run.state == BuildState.CLEANED_UP
        assert git_out(git_repo, "branch", "--show-current") == base
        assert _branches(git_repo) == [base]

    def test_skip_tests(self, git_repo):
        cargo = FakeCargo()
        run = _build(git_repo, cargo, skip_tests=True)

        assert run.tests_skipped
        assert "test" not in cargo.subcommands()
        assert BuildState.TESTED not in run.states

    def test_keep_retains_branch(self, git_repo):
        cargo = FakeCargo()
        run = _build(git_repo, cargo, keep=True)

        assert run.retained
        assert run.state == BuildState.RETAINED
        assert "clean" not in cargo.subcommands()
        assert git_out(git_repo, "branch", "--show-current") == run.branch

    def test_verifies_built_binary(self, git_repo):
        cargo = FakeCargo(produce_binary=True)
        run = _build(git_repo, cargo, tag="rust-v0.1.0")

        assert run.tag.name == "rust-v0.1.0"
        assert run.binary_path == git_repo / "codex-rs" / "target" / "release" / "codex"
        assert run.version_output == "codex-cli 0.2.0"
        assert run.help_excerpt == "Usage: codex\nline2"

    def test_missing_binary_only_warns(self, git_repo, caplog):
        run = _build(git_repo, FakeCargo())

        assert run.binary_path is None
        assert run.state == BuildState.CLEANED_UP
        assert "binary not found" in caplog.text

    def test_test_failure_stops_before_build(self, git_repo):
        base = git_out(git_repo, "branch", "--show-current")
        cargo = FakeCargo(fail={"test": 101})

        with pytest.raises(BuildError) as exc:
            _build(git_repo, cargo)

        assert exc.value.step == "test"
        assert "build" not in cargo.subcommands()
        assert git_out(git_repo, "branch", "--show-current") == base
        assert _branches(git_repo) == [base]

    def test_build_failure_cleans_up(self, git_repo):
        base = git_out(git_repo, "branch", "--show-current")
        cargo = FakeCargo(fail={"build": 1})

        with pytest.raises(BuildError) as exc:
            _build(git_repo, cargo, skip_tests=True)

        assert exc.value.step == "build"
        assert cargo.subcommands() == ["build", "clean"]
        assert _branches(git_repo) == [base]

    def test_keep_after_failure_warns_with_branch(self, git_repo, caplog):
        cargo = FakeCargo(fail={"test": 101})

        with caplog.at_level(logging.WARNING):
            with pytest.raises(BuildError):
                _build(git_repo, cargo, keep=True)

        branch = git_out(git_repo, "branch", "--show-current")
        assert branch.startswith("build-rust-v0.2.0-")
        kept = [r for r in caplog.records if branch in r.getMessage()]
        assert kept and kept[0].levelno == logging.WARNING
        assert "clean" not in cargo.subcommands()

    def test_invalid_tag_touches_nothing(self, git_repo):
        base = git_out(git_repo, "branch", "--show-current")
        cargo = FakeCargo()

        with pytest.raises(InvalidTagError):
            _build(git_repo, cargo, tag="v9")

        assert cargo.calls == []
        assert _branches(git_repo) == [base]

    def test_detached_head_restored(self, git_repo):
        sha = git_out(git_repo, "rev-parse", "HEAD")
        git_out(git_repo, "switch", "--detach", sha)

        run = _build(git_repo, FakeCargo(), skip_tests=True)

        assert run.base_ref == sha
        assert git_out(git_repo, "rev-parse", "--abbrev-ref", "HEAD") == "HEAD"
        assert git_out(git_repo, "rev-parse", "HEAD") == sha


class TestGitOps:
    def test_current_ref_branch(self, git_repo):
        ref, detached = git_ops.current_ref(git_repo)
        assert not detached
        assert ref == git_out(git_repo, "branch", "--show-current")

    def test_list_tags_pattern(self, git_repo):
        git_out(git_repo, "tag", "other-1")
        assert sorted(git_ops.list_tags(git_repo, "rust-v*")) == ["rust-v0.1.0", "rust-v0.2.0"]

    def test_fetch_without_remote_is_soft(self, git_repo):
        assert git_ops.fetch_tags(git_repo, "origin") is False

    def test_repo_root(self, git_repo):
        sub = git_repo / "codex-rs"
        assert git_ops.repo_root(sub).resolve() == git_repo.resolve()
