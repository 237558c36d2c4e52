"""Configuration loading and validation."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings

DEFAULT_CHUNK_PATTERN = r"^.*?(\d+)(?:\.mbox)?$"


class ConfigError(Exception):
    """Configuration error."""

    pass


class Settings(BaseSettings):
    """Conversion settings loaded from environment variables and an optional YAML file."""

    extract_attachments: bool = True
    compress_attachments: bool = True
    compress_messages: bool = False
    attachments_dir: bool = True  # False puts attachments in cur/ beside the messages
    eml_suffix: bool = True
    tool_tag: str = "mbox2maildir"
    threads: int | None = None  # Defaults to hardware parallelism, minimum 2
    chunk_pattern: str = DEFAULT_CHUNK_PATTERN
    compression_level: int = 1

    model_config = {
        "env_prefix": "MBOX2MAILDIR_",
        "env_file": ".env",
        "extra": "ignore",
    }

    @field_validator("threads")
    @classmethod
    def _positive_threads(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("threads must be at least 1")
        return value

    @field_validator("chunk_pattern")
    @classmethod
    def _numbered_pattern(cls, value: str) -> str:
        try:
            compiled = re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid chunk_pattern: {e}") from e
        if compiled.groups < 1:
            raise ValueError("chunk_pattern needs a capture group for the chunk number")
        return value

    @field_validator("compression_level")
    @classmethod
    def _valid_level(cls, value: int) -> int:
        if not 0 <= value <= 9:
            raise ValueError("compression_level must be between 0 and 9")
        return value

    @field_validator("tool_tag")
    @classmethod
    def _safe_tag(cls, value: str) -> str:
        # The tag becomes part of every message filename
        if not value or any(c in value for c in "/:\\ \t\r\n"):
            raise ValueError("tool_tag must be non-empty without separators or whitespace")
        return value


def load_settings(path: Path | None = None, **overrides: Any) -> Settings:
    """Build settings from the environment, a YAML file, then explicit overrides.

    Overrides whose value is None are ignored so unset CLI flags fall through.
    """
    data: dict[str, Any] = {}
    if path is not None:
        data.update(_read_yaml(path))
    data.update({k: v for k, v in overrides.items() if v is not None})

    unknown = sorted(set(data) - set(Settings.model_fields))
    if unknown:
        raise ConfigError(f"Unknown setting(s): {', '.join(unknown)}")

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigError(str(e)) from e


def _read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML settings mapping."""
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not data:
        raise ConfigError("Empty configuration file")
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")

    return data
