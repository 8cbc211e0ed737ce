"""
CLI command for installing a release binary.

Thin wrapper over ``codex_release.core.services.installer``.
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from codex_release.ui.cli.common import CONTEXT_SETTINGS, fail, load_cli_config


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option("--repo", metavar="OWNER/REPO", default=None, help="Repository to install from.")
@click.option("--tag", default=None, help="Install this release tag (skips release search).")
@click.option("--target", metavar="TRIPLE", default=None, help="Target triple (default: detect host).")
@click.option(
    "--dest",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Install path (default: per-OS location).",
)
@click.option("--no-sudo", is_flag=True, help="Never elevate with sudo.")
@click.option("--dry-run", is_flag=True, help="Print the download command and stop.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(
    ctx: click.Context,
    repo: str | None,
    tag: str | None,
    target: str | None,
    dest: Path | None,
    no_sudo: bool,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Install the newest release binary that matches this host."""
    from codex_release.core.config.loader import ConfigError
    from codex_release.core.errors import ReleaseToolError
    from codex_release.core.models.install import InstallOptions
    from codex_release.core.services.installer import install_release

    try:
        config = load_cli_config(ctx)
        options = InstallOptions(
            repo=repo or config.repo,
            binary_name=config.binary_name,
            tag=tag,
            target=target,
            destination=dest or config.install.destination,
            use_sudo=config.install.use_sudo and not no_sudo,
            dry_run=dry_run,
            release_page_size=config.release_page_size,
        )
        result = install_release(options)
    except (ConfigError, ReleaseToolError) as e:
        fail(str(e))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if result.dry_run:
        click.echo(result.fetch_command)
        return

    if result.version_output:
        click.echo(result.version_output)
    click.secho(f"✅ Installed {result.asset} ({result.tag})", fg="green", bold=True)
