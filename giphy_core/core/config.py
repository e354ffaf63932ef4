from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from giphy_core.clients.router import BASE_URL


class GiphyConfig(BaseModel):
    api_key: str | None = Field(default=None)
    base_url: str = Field(default=BASE_URL, min_length=8)
    timeout_seconds: float = Field(default=10.0, gt=0)


def _config_path() -> Path:
    override = os.getenv("GIPHY_CONFIG_FILE")
    if override:
        return Path(override)
    return Path.cwd() / "config" / "giphy.yml"


def _env_path() -> Path:
    return Path.cwd() / ".env"


def _load_yaml_config() -> dict[str, Any]:
    path = _config_path()
    if not path.exists():
        return {}

    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        # Accept both a bare mapping and one nested under "giphy:".
        nested = raw.get("giphy")
        return nested if isinstance(nested, dict) else raw
    return {}


def get_client_config() -> GiphyConfig:
    load_dotenv(_env_path(), override=False)

    config = GiphyConfig(**_load_yaml_config())

    env_api_key = os.getenv("GIPHY_API_KEY")
    env_base_url = os.getenv("GIPHY_BASE_URL")
    env_timeout_seconds = os.getenv("GIPHY_TIMEOUT_SECONDS")

    if env_api_key:
        config.api_key = env_api_key
    if env_base_url:
        config.base_url = env_base_url
    if env_timeout_seconds is not None:
        config.timeout_seconds = float(env_timeout_seconds)

    return config
