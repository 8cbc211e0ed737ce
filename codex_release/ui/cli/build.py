"""
CLI command for building a tagged release locally.

Thin wrapper over ``codex_release.core.services.build_ops``.
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from codex_release.ui.cli.common import CONTEXT_SETTINGS, fail, load_cli_config


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option("--tag", default=None, help="Build this tag instead of the latest.")
@click.option("--skip-tests", is_flag=True, help="Skip the smoke test subset.")
@click.option("--no-clean", is_flag=True, help="Keep build artifacts and the temporary branch.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def build(
    ctx: click.Context,
    tag: str | None,
    skip_tests: bool,
    no_clean: bool,
    as_json: bool,
) -> None:
    """Build the exact release binaries for a tag on a temporary branch.

    \b
    Steps:
      1) fetch tags
      2) check out the tag on a temporary branch
      3) run a lean test set (unless --skip-tests)
      4) build the release binaries
      5) print the binary's version and a --help excerpt
      6) clean artifacts and delete the branch (unless --no-clean)
    """
    from codex_release.core.config.loader import ConfigError
    from codex_release.core.errors import ReleaseToolError
    from codex_release.core.services.build_ops import run_local_build
    from codex_release.core.services.git_ops import repo_root

    try:
        config = load_cli_config(ctx)
        root = repo_root(Path.cwd())
        run = run_local_build(
            root,
            config.build,
            binary_name=config.binary_name,
            tag=tag,
            skip_tests=skip_tests,
            keep=no_clean,
        )
    except (ConfigError, ReleaseToolError) as e:
        fail(str(e))

    if as_json:
        click.echo(json.dumps(run.to_dict(), indent=2))
        return

    if run.binary_path:
        click.secho("==> Version check", fg="cyan")
        click.echo(run.version_output)
        click.secho(f"==> Help (first {config.build.help_lines} lines)", fg="cyan")
        click.echo(run.help_excerpt)
        click.echo(f"==> Binary path: {run.binary_path}")

    if run.retained:
        click.echo(f"(kept artifacts and branch {run.branch})")

    click.secho("Done.", fg="green")
