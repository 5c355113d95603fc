"""Integration tests for price-history search."""

from __future__ import annotations

from fastapi import status

from fitcart.db.shopping_lists import create_shopping_list, update_shopping_item
from tests.integration.utils import auth_headers


def _purchase(user_id: str, name: str, store: str, price: float) -> None:
    created = create_shopping_list(user_id, items=[{"name": name, "store": store}])
    update_shopping_item(created.id, user_id, created.items[0].id, purchased=True, purchased_price=price)


def test_price_search_returns_newest_first(client):
    _purchase("user-1", "Leite meio gordo", "Lidl", 0.89)
    _purchase("user-1", "leite magro", "Continente", 0.95)
    _purchase("user-2", "leite", "Lidl", 0.5)

    response = client.get(
        "/shopping-lists/prices/search",
        params={"name": "leite"},
        headers=auth_headers(),
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["name"] == "leite"
    assert body["count"] == 2
    assert [entry["price"] for entry in body["history"]] == [0.95, 0.89]
    assert set(body["history"][0]) == {"itemName", "store", "date", "price"}


def test_price_search_filters_by_store(client):
    _purchase("user-1", "Leite", "Lidl", 0.89)
    _purchase("user-1", "Leite", "Continente", 0.95)

    response = client.get(
        "/shopping-lists/prices/search",
        params={"name": "leite", "store": "LIDL"},
        headers=auth_headers(),
    )

    body = response.json()
    assert body["count"] == 1
    assert body["history"][0]["store"] == "Lidl"


def test_price_search_requires_name(client):
    response = client.get("/shopping-lists/prices/search", headers=auth_headers())
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_price_search_rejects_blank_name(client):
    _purchase("user-1", "Leite", "Lidl", 0.89)

    response = client.get(
        "/shopping-lists/prices/search",
        params={"name": "   "},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
