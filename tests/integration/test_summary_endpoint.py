"""Integration tests for the budget summary endpoint."""

from __future__ import annotations

from fastapi import status

from fitcart.db.shopping_lists import create_shopping_list
from fitcart.server import deps
from tests.integration.utils import auth_headers


def _list(spent: float, **fields):
    return create_shopping_list(
        "user-1",
        name="June",
        items=[
            {"name": "rice", "planned_price": 20.0, "purchased_price": spent, "purchased": True},
            {"name": "milk", "planned_price": 5.0},
        ],
        **fields,
    )


def test_summary_reports_totals(client):
    target = _list(50.0, budget=100)

    response = client.get(f"/shopping-lists/{target.id}/summary", headers=auth_headers())

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["listId"] == target.id
    assert (body["planned"], body["spent"], body["budget"], body["remaining"]) == (25.0, 50.0, 100.0, 50.0)
    assert body["status"] == "ok"
    assert {entry["category"] for entry in body["byCategory"]} == {"graos", "laticinios"}


def test_summary_dispatches_alert_when_over_budget(app, client):
    sent = []
    app.dependency_overrides[deps.get_budget_notifier] = lambda: (
        lambda user_id, **payload: sent.append((user_id, payload))
    )
    target = _list(100.0, budget=100)

    response = client.get(f"/shopping-lists/{target.id}/summary", headers=auth_headers())

    assert response.json()["status"] == "over"
    assert sent and sent[0][0] == "user-1"
    assert sent[0][1]["data"]["listId"] == str(target.id)


def test_summary_warns_without_alert_when_notifications_off(app, client):
    sent = []
    app.dependency_overrides[deps.get_budget_notifier] = lambda: (
        lambda user_id, **payload: sent.append(user_id)
    )
    target = _list(85.0, budget=100, alerts={"notify": False})

    response = client.get(f"/shopping-lists/{target.id}/summary", headers=auth_headers())

    assert response.json()["status"] == "warn"
    assert sent == []


def test_summary_succeeds_when_alert_delivery_fails(app, client):
    def failing_notifier(user_id, **payload):
        raise RuntimeError("gateway unreachable")

    app.dependency_overrides[deps.get_budget_notifier] = lambda: failing_notifier
    target = _list(120.0, budget=100)

    response = client.get(f"/shopping-lists/{target.id}/summary", headers=auth_headers())

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "over"
    assert response.json()["remaining"] == 0.0


def test_summary_of_other_users_list_is_404(client):
    target = _list(10.0, budget=100)

    response = client.get(f"/shopping-lists/{target.id}/summary", headers=auth_headers("user-2"))
    assert response.status_code == status.HTTP_404_NOT_FOUND
