"""Shopping list repository tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from fitcart.db.shopping_lists import (
    ShoppingItemNotFoundError,
    ShoppingListNotFoundError,
    add_shopping_item,
    create_shopping_list,
    get_shopping_list,
    list_user_shopping_lists,
    save_item_estimates,
    search_price_history,
    update_shopping_item,
)


def test_create_normalizes_units_and_classifies_items():
    created = create_shopping_list(
        "user-1",
        name="June",
        year=2025,
        month=6,
        budget=120,
        items=[
            {"name": " Arroz ", "qty": 2, "unit": "Quilos"},
            {"name": "Sabonete", "unit": ""},
            {"name": "Gadget", "qty": 1, "unit": "box", "category": "misc"},
        ],
    )

    assert created.name == "June"
    assert created.budget == 120
    assert created.alerts.warn_pct == 0.8
    assert created.alerts.error_pct == 1.0
    assert [item.name for item in created.items] == ["Arroz", "Sabonete", "Gadget"]
    assert [item.unit for item in created.items] == ["kg", "un", "box"]
    assert [item.category for item in created.items] == ["graos", "higiene", "misc"]
    assert created.items[1].qty == 1.0


def test_create_uses_default_name_for_period():
    created = create_shopping_list("user-1", year=2025, month=3)
    assert created.name == "Lista 03/2025"

    now = datetime.now(timezone.utc)
    current = create_shopping_list("user-1")
    assert (current.year, current.month) == (now.year, now.month)


def test_lists_are_scoped_to_their_owner():
    mine = create_shopping_list("user-1", items=[{"name": "rice"}])
    create_shopping_list("user-2", items=[{"name": "beans"}])

    assert get_shopping_list(mine.id, "user-1").id == mine.id
    with pytest.raises(ShoppingListNotFoundError):
        get_shopping_list(mine.id, "user-2")
    assert [entry.id for entry in list_user_shopping_lists("user-1")] == [mine.id]


def test_add_item_appends_in_position_order():
    created = create_shopping_list("user-1", items=[{"name": "rice"}])

    updated = add_shopping_item(created.id, "user-1", name="milk", qty=2, unit="litros")

    assert [item.name for item in updated.items] == ["rice", "milk"]
    assert updated.items[1].unit == "l"
    assert updated.items[1].category == "laticinios"


def test_marking_purchased_records_price_history():
    created = create_shopping_list("user-1", items=[{"name": "rice", "store": "Lidl"}])
    item_id = created.items[0].id

    updated = update_shopping_item(created.id, "user-1", item_id, purchased=True, purchased_price=3.2)
    item = updated.items[0]

    assert item.purchased is True
    assert [(point.store, point.price) for point in item.price_history] == [("Lidl", 3.2)]

    # unrelated edits do not add entries; a new price does
    updated = update_shopping_item(created.id, "user-1", item_id, notes="brown")
    assert len(updated.items[0].price_history) == 1
    updated = update_shopping_item(created.id, "user-1", item_id, purchased_price=3.5)
    assert [point.price for point in updated.items[0].price_history] == [3.2, 3.5]


def test_renaming_reclassifies_unless_category_given():
    created = create_shopping_list("user-1", items=[{"name": "thing"}])
    item_id = created.items[0].id

    renamed = update_shopping_item(created.id, "user-1", item_id, name="Detergente")
    assert renamed.items[0].category == "limpeza"

    explicit = update_shopping_item(created.id, "user-1", item_id, name="Chicken", category="pets")
    assert explicit.items[0].category == "pets"


def test_update_unknown_item_raises():
    created = create_shopping_list("user-1", items=[{"name": "rice"}])

    with pytest.raises(ShoppingItemNotFoundError):
        update_shopping_item(created.id, "user-1", 424242, purchased=True)


def test_save_item_estimates_only_touches_listed_items():
    created = create_shopping_list(
        "user-1",
        items=[{"name": "rice", "category": "graos"}, {"name": "gizmo", "planned_price": 2.0}],
    )
    rice, gizmo = created.items

    updated = save_item_estimates(
        created.id,
        "user-1",
        {rice.id: {"planned_price": 6.2, "category": "breakfast"}},
    )

    assert updated.items[0].planned_price == 6.2
    assert updated.items[0].category == "breakfast"
    assert updated.items[1].planned_price == 2.0
    assert updated.items[1].category == gizmo.category


def test_search_price_history_matches_substring_and_store():
    created = create_shopping_list(
        "user-1",
        items=[
            {"name": "Arroz agulha", "store": "Lidl"},
            {"name": "arroz basmati", "store": "Continente"},
            {"name": "feijao", "store": "Lidl"},
        ],
    )
    for item, price in zip(created.items, (1.2, 2.5, 0.9)):
        update_shopping_item(created.id, "user-1", item.id, purchased=True, purchased_price=price)

    result = search_price_history("user-1", "ARROZ")
    assert result.count == 2
    assert {entry.item_name for entry in result.history} == {"Arroz agulha", "arroz basmati"}

    lidl = search_price_history("user-1", "arroz", store="lidl")
    assert [(entry.item_name, entry.price) for entry in lidl.history] == [("Arroz agulha", 1.2)]
    assert lidl.store == "lidl"

    assert search_price_history("user-2", "arroz").count == 0


def test_resending_same_price_does_not_duplicate_history():
    created = create_shopping_list("user-1", items=[{"name": "rice"}])
    item_id = created.items[0].id

    update_shopping_item(created.id, "user-1", item_id, purchased=True, purchased_price=3.2)
    updated = update_shopping_item(created.id, "user-1", item_id, purchased=True, purchased_price=3.2)

    assert [point.price for point in updated.items[0].price_history] == [3.2]


def test_search_price_history_rejects_blank_name():
    with pytest.raises(ValueError):
        search_price_history("user-1", "   ")
