"""Shared pytest fixtures for the fitcart test suite."""

from __future__ import annotations

from typing import Callable, Dict, Generator, Iterable

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from fitcart.config import get_settings
from fitcart.db.repository import reset_repository_state
from fitcart.db.shopping_lists import create_shopping_list
from fitcart.models.shopping import ShoppingList
from fitcart.server.app import create_app

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Ensure each test uses an isolated SQLite database location."""

    db_path = tmp_path / "test_fitcart.db"
    monkeypatch.setenv("FITCART_DATABASE_PATH", str(db_path))
    monkeypatch.delenv("FITCART_API_TOKEN", raising=False)
    monkeypatch.delenv("FITCART_PUSH_APP_ID", raising=False)
    monkeypatch.delenv("FITCART_PUSH_API_KEY", raising=False)
    get_settings.cache_clear()
    reset_repository_state()
    yield
    reset_repository_state()
    monkeypatch.delenv("FITCART_DATABASE_PATH", raising=False)
    get_settings.cache_clear()


@pytest.fixture()
def app() -> Generator[FastAPI, None, None]:
    """Create a new FastAPI app instance for each test and reset overrides."""

    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> TestClient:
    """Return a test client bound to the FastAPI app."""

    return TestClient(app)


@pytest.fixture()
def user_headers() -> Dict[str, str]:
    return {"X-User-ID": USER_ID}


@pytest.fixture()
def seed_purchases() -> Callable[..., ShoppingList]:
    """Persist a list whose items are already purchased, to act as price history."""

    def _seed(items: Iterable[Dict[str, object]], user_id: str = USER_ID, **list_fields) -> ShoppingList:
        payloads = []
        for item in items:
            payload = {"purchased": True, "qty": 1}
            payload.update(item)
            payloads.append(payload)
        return create_shopping_list(user_id, items=payloads, **list_fields)

    return _seed


@pytest.fixture()
def rice_history(seed_purchases) -> ShoppingList:
    """Rice bought as 1 kg for 3.00 and 500 g for 1.60."""

    return seed_purchases(
        [
            {"name": "Rice", "qty": 1, "unit": "kg", "purchased_price": 3.00, "category": "graos"},
            {"name": "rice", "qty": 500, "unit": "g", "purchased_price": 1.60, "category": "graos"},
        ],
        name="History",
    )
