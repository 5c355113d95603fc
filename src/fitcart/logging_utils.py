"""Logging configuration helpers with secret redaction support."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Iterable, List, Sequence

REDACTED = "[redacted]"

_BEARER_PATTERN = re.compile(r"(Bearer\s+)([A-Za-z0-9\-._~+/=]+)", re.IGNORECASE)
_BASIC_PATTERN = re.compile(r"(Basic\s+)([A-Za-z0-9\-._~+/=]+)", re.IGNORECASE)
_API_TOKEN_PATTERN = re.compile(r"(api_token=)([^&\s]+)", re.IGNORECASE)
_X_API_KEY_PATTERN = re.compile(r"(X-API-Key=)([^&\s]+)", re.IGNORECASE)


def _mask_known_patterns(value: str) -> str:
    """Mask standard auth token patterns."""

    for pattern in (_BEARER_PATTERN, _BASIC_PATTERN, _API_TOKEN_PATTERN, _X_API_KEY_PATTERN):
        value = pattern.sub(r"\1" + REDACTED, value)
    return value


def _sanitize(message: str, secrets: Sequence[str]) -> str:
    sanitized = _mask_known_patterns(message)
    for secret in secrets:
        if not secret:
            continue
        sanitized = sanitized.replace(secret, REDACTED)
    return sanitized


class SensitiveDataFilter(logging.Filter):
    """Filter that redacts the API token and push gateway key from log records."""

    def __init__(self, secrets: Iterable[str]):
        super().__init__()
        self._secrets: List[str] = [secret.strip() for secret in secrets if secret and secret.strip()]

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401 - standard interface
        message = record.getMessage()
        sanitized = _sanitize(message, self._secrets)
        if sanitized != message:
            record.msg = sanitized
            record.args = ()

        if not self._secrets:
            return True

        for key, value in list(vars(record).items()):
            if isinstance(value, str):
                setattr(record, key, _sanitize(value, self._secrets))

        return True


class JsonFormatter(logging.Formatter):
    """Minimal JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - override
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in ("request_id", "user_id", "list_id"):
            if (value := getattr(record, field, None)) is not None:
                payload[field] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging(level_name: str, fmt: str, secrets: Iterable[str]) -> None:
    """Configure root logging with optional JSON output and secret redaction."""

    numeric_level = getattr(logging, level_name.upper(), logging.INFO)
    format_normalized = (fmt or "plain").lower()

    handler = logging.StreamHandler()
    if format_normalized == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    handler.setFormatter(formatter)

    filter_ = SensitiveDataFilter(secrets)
    handler.addFilter(filter_)

    root = logging.getLogger()
    root.handlers = []
    root.addHandler(handler)
    root.setLevel(numeric_level)

    logging.captureWarnings(True)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "httpx"):
        logger = logging.getLogger(name)
        logger.handlers = []
        logger.setLevel(numeric_level)
        logger.propagate = True
        logger.addFilter(filter_)
