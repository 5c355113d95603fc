"""Shared helpers for integration tests."""

from __future__ import annotations

from fitcart.config import get_settings


def auth_headers(user_id: str = "user-1") -> dict[str, str]:
    headers = {"X-User-ID": user_id}
    token = get_settings().api_token
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers
