"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from mbox2maildir.config import ConfigError, Settings, load_settings


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run from an empty directory so no .env file is picked up."""
    monkeypatch.chdir(tmp_path)


class TestDefaults:
    """Built-in defaults."""

    def test_defaults(self) -> None:
        """Settings without any source use the built-in defaults."""
        settings = load_settings()
        assert settings.extract_attachments is True
        assert settings.compress_attachments is True
        assert settings.compress_messages is False
        assert settings.attachments_dir is True
        assert settings.tool_tag == "mbox2maildir"
        assert settings.threads is None
        assert settings.compression_level == 1


class TestSources:
    """Environment, YAML and override precedence."""

    def test_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Prefixed environment variables are read."""
        monkeypatch.setenv("MBOX2MAILDIR_THREADS", "4")
        monkeypatch.setenv("MBOX2MAILDIR_COMPRESS_ATTACHMENTS", "false")
        settings = load_settings()
        assert settings.threads == 4
        assert settings.compress_attachments is False

    def test_yaml_file(self, tmp_path: Path) -> None:
        """Values come from a YAML config file."""
        path = tmp_path / "settings.yaml"
        path.write_text(yaml.dump({"threads": 6, "tool_tag": "archive"}))
        settings = load_settings(path)
        assert settings.threads == 6
        assert settings.tool_tag == "archive"

    def test_yaml_overrides_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The config file wins over the environment."""
        monkeypatch.setenv("MBOX2MAILDIR_THREADS", "4")
        path = tmp_path / "settings.yaml"
        path.write_text("threads: 8\n")
        assert load_settings(path).threads == 8

    def test_overrides_win(self, tmp_path: Path) -> None:
        """Explicit overrides beat the config file."""
        path = tmp_path / "settings.yaml"
        path.write_text("threads: 8\neml_suffix: false\n")
        settings = load_settings(path, threads=2, eml_suffix=None)
        assert settings.threads == 2
        assert settings.eml_suffix is False

    def test_dotenv(self, tmp_path: Path) -> None:
        """A .env file in the working directory is read."""
        (tmp_path / ".env").write_text("MBOX2MAILDIR_TOOL_TAG=fromdotenv\n")
        assert Settings().tool_tag == "fromdotenv"


class TestErrors:
    """Invalid configuration."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """A config path that does not exist is an error."""
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        """An empty config file is an error."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        with pytest.raises(ConfigError, match="Empty"):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        """A YAML document that is not a mapping is an error."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(path)

    def test_unknown_key(self, tmp_path: Path) -> None:
        """Unknown keys are reported by name."""
        path = tmp_path / "typo.yaml"
        path.write_text("thread: 4\n")
        with pytest.raises(ConfigError, match="thread"):
            load_settings(path)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"threads": 0},
            {"compression_level": 10},
            {"tool_tag": "has:colon"},
            {"chunk_pattern": "no-group"},
            {"chunk_pattern": "(unclosed"},
        ],
    )
    def test_invalid_values(self, overrides: dict) -> None:
        """Out-of-range values are rejected."""
        with pytest.raises(ConfigError):
            load_settings(**overrides)
