"""Client settings (pydantic BaseModel) and loaders."""

from __future__ import annotations

import os
from datetime import timedelta
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigError, ConfigErrorCodes

PRODUCTION = "https://api.paddle.com"
SANDBOX = "https://sandbox-api.paddle.com"


class PaddleConfig(BaseModel):
    """Paddle client settings."""

    api_key: str = ""
    environment: Literal["production", "sandbox"] = "sandbox"
    base_url: str | None = None
    timeout_seconds: float = Field(default=10.0, gt=0)
    webhook_secret: str | None = None
    # None disables the webhook timestamp check
    max_variance_seconds: int | None = Field(default=5, ge=0)

    def base_url_for(self) -> str:
        """Return the API root, honouring an explicit ``base_url`` override."""
        if self.base_url:
            return self.base_url.rstrip("/")
        return PRODUCTION if self.environment == "production" else SANDBOX

    def max_variance(self) -> timedelta | None:
        if self.max_variance_seconds is None:
            return None
        return timedelta(seconds=self.max_variance_seconds)

    @classmethod
    def from_env(cls) -> PaddleConfig:
        """Build settings from ``PADDLE_*`` environment variables."""
        data: dict[str, Any] = {}
        mapping = {
            "PADDLE_API_KEY": "api_key",
            "PADDLE_ENVIRONMENT": "environment",
            "PADDLE_BASE_URL": "base_url",
            "PADDLE_WEBHOOK_SECRET": "webhook_secret",
        }
        for env_name, key in mapping.items():
            value = os.environ.get(env_name)
            if value:
                data[key] = value
        return _validate(data, "environment")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(
            code=ConfigErrorCodes.READ_FILE,
            message=f"Failed to read config file: {path}",
            cause=e,
        ) from e
    try:
        data: dict[str, Any] = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(
            code=ConfigErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    return data


def _validate(data: dict[str, Any], source: str) -> PaddleConfig:
    try:
        return PaddleConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            code=ConfigErrorCodes.VALIDATION,
            message=f"Config validation failed ({source}): {e}",
            cause=e,
        ) from e


def load_config(path: Path) -> PaddleConfig:
    """Load settings from a YAML file.

    The file may hold the settings at the top level or under a ``paddle`` key.
    """
    data = _read_yaml(path)
    section = data.get("paddle", data) if isinstance(data, dict) else data
    if not isinstance(section, dict):
        raise ConfigError(
            code=ConfigErrorCodes.VALIDATION,
            message=f"Config must be a mapping: {path}",
        )
    return _validate(section, str(path))
