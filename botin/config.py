"""Configuration management with Pydantic Settings + optional YAML."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from botin.utils.platform import get_config_dir, get_data_dir, get_resources_dir


class ServerConfig(BaseModel):
    bind: str = "0.0.0.0"
    port: int = 3978
    path: str = "/api/messages"


class FetchConfig(BaseModel):
    # None waits forever, matching a single best-effort download.
    timeout: float | None = None


class ConnectorConfig(BaseModel):
    timeout: float = 30.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BOTIN_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    bot_name: str = "BotinEjemplo"
    server: ServerConfig = Field(default_factory=ServerConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    connector: ConnectorConfig = Field(default_factory=ConnectorConfig)
    data_dir: str = ""
    storage_dir: str = ""
    resources_dir: str = ""
    log_level: str = "INFO"
    log_json: bool = False

    def get_data_dir(self) -> Path:
        if self.data_dir:
            return Path(self.data_dir)
        return get_data_dir()

    def get_storage_dir(self) -> Path:
        """Where downloaded attachments are written."""
        if self.storage_dir:
            return Path(self.storage_dir)
        return self.get_data_dir() / "attachments"

    def get_resources_dir(self) -> Path:
        if self.resources_dir:
            return Path(self.resources_dir)
        return get_resources_dir()


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from env vars, optionally overlaying a YAML config.

    ``overrides`` (typically CLI options) win over the YAML file.
    """
    yaml_data: dict[str, Any] = {}

    if config_path is None:
        config_path = os.environ.get("BOTIN_CONFIG")
    if config_path is None:
        default = get_config_dir() / "config.yaml"
        if default.exists():
            config_path = default

    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                yaml_data = yaml.safe_load(f) or {}

    if overrides:
        yaml_data = _deep_merge(yaml_data, overrides)

    return Settings(**yaml_data)
