"""
Build orchestrator — reproduce a tagged release build locally.

    idle → tag_resolved → isolated → tested (optional) → built
         → verified → cleaned_up | retained

The tag is checked out on a disposable branch so the operator's branch
is never touched. Unless retention is requested, artifacts are cleaned,
the original branch restored and the disposable branch deleted on
every exit path. Cleanup problems are logged, never raised.
"""

from __future__ import annotations

import logging
from pathlib import Path

from codex_release.core.errors import BuildError, InvalidTagError, NoTagError
from codex_release.core.models.build import BuildRun, BuildState, BuildTag, latest_tag
from codex_release.core.models.config import BuildSettings
from codex_release.core.services import cargo_ops, git_ops
from codex_release.core.services.tool_requirements import ensure_tools

logger = logging.getLogger(__name__)


def resolve_build_tag(root: Path, prefix: str, override: str | None = None) -> BuildTag:
    """Validate ``override`` or pick the highest tag carrying ``prefix``.

    Raises:
        InvalidTagError: ``override`` lacks the prefix.
        NoTagError: No tag carries the prefix.
    """
    if override:
        tag = BuildTag(name=override, prefix=prefix)
        if not tag.has_prefix:
            raise InvalidTagError(f"TAG must start with '{prefix}' (got '{override}')")
        return tag

    tag = latest_tag(git_ops.list_tags(root, f"{prefix}*"), prefix)
    if tag is None:
        raise NoTagError(f"no {prefix}* tags found")
    return tag


def _verify(run: BuildRun, workspace: Path, binary_name: str, help_lines: int) -> None:
    """Advisory check of the built binary; never fails the build."""
    binary = cargo_ops.locate_binary(workspace, binary_name)
    if binary is None:
        logger.warning(
            "%s binary not found at %s; check build output",
            binary_name, workspace / cargo_ops.RELEASE_DIR / binary_name,
        )
        return

    run.binary_path = binary
    run.version_output, run.help_excerpt = cargo_ops.probe_binary(binary, help_lines)


def _cleanup(run: BuildRun, root: Path, workspace: Path, detached: bool) -> None:
    """Purge artifacts, restore the original ref, delete the disposable branch."""
    logger.info("==> Cleaning artifacts and removing temp branch")

    if workspace.is_dir():
        rc = cargo_ops.clean(workspace)
        if rc != 0:
            run.cleanup_warnings.append(f"cargo clean exited {rc}")

    r = git_ops.switch_to(root, run.base_ref, detached=detached)
    if r.returncode != 0:
        run.cleanup_warnings.append(f"could not restore {run.base_ref}: {r.stderr.strip()}")

    r = git_ops.delete_branch(root, run.branch)
    if r.returncode != 0:
        run.cleanup_warnings.append(f"could not delete {run.branch}: {r.stderr.strip()}")

    for warning in run.cleanup_warnings:
        logger.warning(warning)


def run_local_build(
    root: Path,
    settings: BuildSettings | None = None,
    *,
    binary_name: str = "codex",
    tag: str | None = None,
    skip_tests: bool = False,
    keep: bool = False,
) -> BuildRun:
    """Build the release binaries for a tag on a disposable branch.

    Args:
        root: Repository root (working copy).
        settings: Tag prefix, workspace dir, smoke test packages, remote.
        binary_name: Binary to verify after the build.
        tag: Explicit tag; default is the latest prefixed tag.
        skip_tests: Skip the smoke test subset.
        keep: Keep artifacts and the disposable branch.

    Raises:
        ReleaseToolError: Tag resolution, isolation, test or build failure.
    """
    settings = settings or BuildSettings()
    ensure_tools(["git", "cargo"])

    run = BuildRun()

    git_ops.fetch_tags(root, settings.remote)
    run.tag = resolve_build_tag(root, settings.tag_prefix, tag)
    run.advance(BuildState.TAG_RESOLVED)

    run.base_ref, detached = git_ops.current_ref(root)
    run.branch = run.tag.branch_name()

    logger.info("==> Checking out %s on %s", run.tag, run.branch)
    r = git_ops.create_branch_at_tag(root, run.branch, run.tag.name)
    if r.returncode != 0:
        raise BuildError("isolate", f"cannot check out {run.tag} on {run.branch}: {r.stderr.strip()}")
    run.advance(BuildState.ISOLATED)

    workspace = root / settings.workspace_dir
    try:
        if not workspace.is_dir():
            raise BuildError("isolate", f"workspace {settings.workspace_dir} not found at {run.tag}")

        if skip_tests:
            run.tests_skipped = True
        else:
            packages = settings.smoke_test_packages
            logger.info("==> Running smoke tests (%s)", ", ".join(packages))
            rc = cargo_ops.run_smoke_tests(workspace, packages)
            if rc != 0:
                raise BuildError("test", f"smoke tests failed (exit {rc})")
            run.advance(BuildState.TESTED)

        logger.info("==> Building release binaries (workspace)")
        rc = cargo_ops.build_release(workspace)
        if rc != 0:
            raise BuildError("build", f"release build failed (exit {rc})")
        run.advance(BuildState.BUILT)

        _verify(run, workspace, binary_name, settings.help_lines)
        run.advance(BuildState.VERIFIED)
    finally:
        if keep:
            run.retained = True
            if run.state == BuildState.VERIFIED:
                logger.info("==> Kept artifacts and branch %s", run.branch)
                run.advance(BuildState.RETAINED)
            else:
                logger.warning(
                    "build stopped; kept branch %s (previous ref: %s)",
                    run.branch, run.base_ref,
                )
        else:
            _cleanup(run, root, workspace, detached)
            if run.state == BuildState.VERIFIED:
                run.advance(BuildState.CLEANED_UP)

    return run
