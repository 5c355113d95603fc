"""Push notification gateway client (OneSignal-compatible REST API)."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from fitcart.config import get_settings


class PushNotConfiguredError(RuntimeError):
    """Raised when the push gateway credentials are missing."""


class PushClient:
    """Minimal client wrapper around the push gateway HTTP API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        app_id: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        settings = get_settings()
        self._base_url = (base_url or settings.push_base_url).rstrip("/")
        self._app_id = app_id or settings.push_app_id
        self._api_key = api_key or settings.push_api_key
        self._timeout = timeout if timeout is not None else settings.push_timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._app_id and self._api_key)

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Basic {self._api_key}",
        }

    def send_to_user(
        self,
        user_id: str,
        *,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Send a push notification to every device registered for ``user_id``."""
        if not self.configured:
            raise PushNotConfiguredError("Push gateway app id / API key are not configured.")

        payload: Dict[str, Any] = {
            "app_id": self._app_id,
            "include_external_user_ids": [user_id],
            "headings": {"en": title, "pt": title},
            "contents": {"en": message, "pt": message},
            "data": data or {},
        }

        with httpx.Client(transport=self._transport, timeout=self._timeout) as client:
            response = client.post(
                f"{self._base_url}/notifications",
                headers=self._headers(),
                json=payload,
            )
            response.raise_for_status()
            return response.json()
