"""
Codex release tools — CLI entrypoint.

Usage:
    python -m codex_release.main --help
    python -m codex_release.main install --dry-run
    python -m codex_release.main build --tag rust-v0.32.0

The two commands are also installed as standalone scripts,
``codex-install`` and ``codex-local-build``.
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from codex_release import __version__
from codex_release.core.observability.logging_config import setup_logging
from codex_release.ui.cli.build import build
from codex_release.ui.cli.common import CONTEXT_SETTINGS
from codex_release.ui.cli.install import install


def _configure_logging(level: str | None = None, debug: bool = False) -> None:
    setup_logging(
        level=level or os.environ.get("CODEX_RELEASE_LOG_LEVEL", "INFO"),
        log_file=os.environ.get("CODEX_RELEASE_LOG_FILE"),
        log_file_level=os.environ.get("CODEX_RELEASE_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__, prog_name="codex-release")
@click.option("--verbose", "-v", is_flag=True, help="Show progress even if the env level is higher.")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to codex-release.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Codex release tools — install release binaries, build tags locally."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "WARNING"
    else:
        level = None

    _configure_logging(level, debug=debug)


cli.add_command(install)
cli.add_command(build)


def install_main() -> None:
    """Entry point for ``codex-install``."""
    _configure_logging()
    install(prog_name="codex-install")


def build_main() -> None:
    """Entry point for ``codex-local-build``."""
    _configure_logging()
    build(prog_name="codex-local-build")


if __name__ == "__main__":
    cli()
