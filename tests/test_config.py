"""
Tests for configuration loading — codex-release.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest

from codex_release.core.config.loader import ConfigError, find_config_file, load_config


@pytest.fixture
def valid_config_yml(tmp_path: Path) -> Path:
    """Create a valid codex-release.yml in a temp directory."""
    content = textwrap.dedent("""\
        version: 1
        repo: someone/codex
        binary_name: codex
        release_page_size: 50

        install:
          use_sudo: false
          destination: /opt/tools/codex

        build:
          tag_prefix: v
          workspace_dir: rs
          smoke_test_packages:
            - core
          help_lines: 5
    """)
    path = tmp_path / "codex-release.yml"
    path.write_text(content)
    return path


class TestLoadConfig:
    def test_valid_file(self, valid_config_yml: Path):
        config = load_config(valid_config_yml)
        assert config.repo == "someone/codex"
        assert config.release_page_size == 50
        assert config.install.use_sudo is False
        assert config.install.destination == Path("/opt/tools/codex")
        assert config.build.tag_prefix == "v"
        assert config.build.workspace_dir == "rs"
        assert config.build.smoke_test_packages == ["core"]
        assert config.build.help_lines == 5

    def test_wrapped_under_release_key(self, tmp_path: Path):
        path = tmp_path / "codex-release.yml"
        path.write_text("release:\n  repo: other/codex\n")
        assert load_config(path).repo == "other/codex"

    def test_defaults_when_absent(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        isolated = tmp_path / "empty"
        isolated.mkdir()
        monkeypatch.chdir(isolated)
        config = load_config()
        assert config.repo == "cbusillo/codex"
        assert config.binary_name == "codex"
        assert config.release_page_size == 100
        assert config.install.use_sudo is True
        assert config.build.tag_prefix == "rust-v"
        assert config.build.smoke_test_packages == [
            "codex-core", "codex-common", "codex-protocol",
        ]

    def test_empty_file_means_defaults(self, tmp_path: Path):
        path = tmp_path / "codex-release.yml"
        path.write_text("")
        assert load_config(path).repo == "cbusillo/codex"

    def test_explicit_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "codex-release.yml"
        path.write_text("repo: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "codex-release.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_page_size_out_of_range(self, tmp_path: Path):
        path = tmp_path / "codex-release.yml"
        path.write_text("release_page_size: 500\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(path)


class TestFindConfigFile:
    def test_walks_upward(self, tmp_path: Path):
        (tmp_path / "codex-release.yml").write_text("repo: a/b\n")
        nested = tmp_path / "x" / "y"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == (tmp_path / "codex-release.yml").resolve()

    def test_auto_search_returns_none(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        isolated = tmp_path / "isolated"
        isolated.mkdir()
        monkeypatch.chdir(isolated)
        assert find_config_file() is None
