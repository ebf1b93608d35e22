"""Configuration loading."""

from __future__ import annotations

import json
import os
from pathlib import Path

from loguru import logger

from streamhost.config.schema import Config

# Environment variables that override secrets from the config file.
_ENV_OVERRIDES = {
    "STREAMHOST_SERVER_URL": ("gateway", "server_url"),
    "STREAMHOST_API_KEY": ("gateway", "api_key"),
    "STREAMHOST_LLM_API_KEY": ("provider", "api_key"),
}


def get_config_path() -> Path:
    return Path.home() / ".streamhost" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from a JSON file, falling back to defaults.

    A missing file yields the default config; an unreadable or invalid file
    is logged and also yields the default config.
    """
    path = config_path or get_config_path()
    config = Config()

    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            config = Config.model_validate(data)
        except Exception as exc:
            logger.warning("Failed to load config from {}: {}", path, exc)
            logger.warning("Using default configuration.")

    _apply_env_overrides(config)
    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(by_alias=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def _apply_env_overrides(config: Config) -> None:
    for env_name, (section, field) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name, "").strip()
        if value:
            setattr(getattr(config, section), field, value)
