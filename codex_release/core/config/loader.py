"""
Configuration loader — reads codex-release.yml into a ReleaseConfig.

The file is optional: when none is found the built-in defaults apply.
An explicitly named file must exist and validate.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from codex_release.core.models.config import ReleaseConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "codex-release.yml"


class ConfigError(Exception):
    """Raised when configuration is invalid or an explicit file is missing."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for codex-release.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to the config file, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None) -> ReleaseConfig:
    """Load and validate configuration.

    Args:
        path: Explicit path to the config file. If None, searches upward
            and falls back to defaults when nothing is found.

    Returns:
        Validated ReleaseConfig.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            logger.debug("No %s found, using defaults", CONFIG_FILE)
            return ReleaseConfig()
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return ReleaseConfig()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "release" key or be flat
    section = data["release"] if isinstance(data.get("release"), dict) else data

    try:
        config = ReleaseConfig.model_validate(section)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.debug("Loaded config for repo '%s'", config.repo)
    return config
