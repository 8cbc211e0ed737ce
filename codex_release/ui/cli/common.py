"""
Shared helpers for the CLI commands.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn

import click

from codex_release.core.models.config import ReleaseConfig

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def load_cli_config(ctx: click.Context) -> ReleaseConfig:
    """Load configuration from ``--config`` (group option) or by search."""
    from codex_release.core.config.loader import load_config

    obj = ctx.find_root().obj or {}
    config_path: Path | None = obj.get("config_path")
    return load_config(config_path)


def fail(message: str) -> NoReturn:
    """Print a terminal error and exit 1."""
    click.secho(f"❌ {message}", fg="red", err=True)
    sys.exit(1)
