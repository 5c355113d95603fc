"""Application configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ENV_FILE_CANDIDATES = (Path(".env"), Path(".env.local"))

PriceStrategy = Literal["last", "avg", "median"]


class Settings(BaseModel):
    """Global application settings loaded from environment variables or .env files."""

    database_path: Path = Field(
        default=Path("./data/fitcart.db"),
        description="SQLite database location.",
    )
    api_token: Optional[str] = Field(
        default=None,
        description="Bearer token required for authenticated endpoints.",
    )
    log_level: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(
        default="plain",
        description="Logging format (plain/json).",
    )
    log_requests: bool = Field(
        default=True,
        description="Emit request access logs when true.",
    )
    push_base_url: str = Field(
        default="https://onesignal.com/api/v1",
        description="Push gateway base URL (OneSignal-compatible REST API).",
    )
    push_app_id: Optional[str] = Field(
        default=None,
        description="Push gateway application id; alerts are skipped when unset.",
    )
    push_api_key: Optional[str] = Field(
        default=None,
        description="Push gateway REST API key.",
    )
    push_timeout: float = Field(
        default=10.0,
        description="Seconds to wait for the push gateway before giving up.",
    )
    default_strategy: PriceStrategy = Field(
        default="median",
        description="Price estimation strategy used when a caller does not pick one.",
    )
    default_warn_pct: float = Field(
        default=0.8,
        ge=0,
        description="Budget fraction that triggers a warning on new lists.",
    )
    default_error_pct: float = Field(
        default=1.0,
        ge=0,
        description="Budget fraction that marks new lists as over budget.",
    )

    model_config = ConfigDict(frozen=True)


def _coerce_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_env_file(path: Path) -> dict[str, str]:
    payload: dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, raw_value = line.split("=", 1)
                payload[key.strip()] = raw_value.strip()
    except FileNotFoundError:
        return {}
    return payload


def _load_env_file_values() -> dict[str, str]:
    values: dict[str, str] = {}
    for candidate in ENV_FILE_CANDIDATES:
        values.update(_parse_env_file(candidate))
    return values


def _load_from_env() -> dict[str, object]:
    """Load optional overrides from env vars (with .env fallbacks)."""

    file_values = _load_env_file_values()

    def _env(key: str) -> Optional[str]:
        return os.environ.get(key) or file_values.get(key)

    payload: dict[str, object] = {}
    if (db_path := _env("FITCART_DATABASE_PATH")):
        payload["database_path"] = Path(db_path)
    if (api_token := _env("FITCART_API_TOKEN")):
        payload["api_token"] = api_token
    if (log_level := _env("FITCART_LOG_LEVEL")):
        payload["log_level"] = log_level
    if (log_format := _env("FITCART_LOG_FORMAT")):
        payload["log_format"] = log_format
    if (log_requests := _env("FITCART_LOG_REQUESTS")):
        payload["log_requests"] = _coerce_bool(log_requests)
    if (push_base_url := _env("FITCART_PUSH_BASE_URL")):
        payload["push_base_url"] = push_base_url.rstrip("/")
    if (push_app_id := _env("FITCART_PUSH_APP_ID")):
        payload["push_app_id"] = push_app_id
    if (push_api_key := _env("FITCART_PUSH_API_KEY")):
        payload["push_api_key"] = push_api_key
    if (push_timeout := _env("FITCART_PUSH_TIMEOUT")):
        try:
            payload["push_timeout"] = float(push_timeout)
        except ValueError:
            pass
    if (strategy := _env("FITCART_DEFAULT_STRATEGY")):
        if strategy.strip().lower() in {"last", "avg", "median"}:
            payload["default_strategy"] = strategy.strip().lower()
    if (warn_pct := _env("FITCART_DEFAULT_WARN_PCT")):
        try:
            payload["default_warn_pct"] = float(warn_pct)
        except ValueError:
            pass
    if (error_pct := _env("FITCART_DEFAULT_ERROR_PCT")):
        try:
            payload["default_error_pct"] = float(error_pct)
        except ValueError:
            pass
    return payload


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings(**_load_from_env())
