"""Shopping list persistence helpers."""
# mypy: ignore-errors

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from fitcart.config import get_settings
from fitcart.models.shopping import (
    PriceSearchEntry,
    PriceSearchResult,
    ShoppingList,
    ShoppingListItem,
)
from fitcart.pricing.categories import classify_item
from fitcart.pricing.units import canonical_unit

from .models import ShoppingListItemORM, ShoppingListORM
from .repository import session_scope

logger = logging.getLogger(__name__)

_UNSET = object()


class ShoppingListNotFoundError(LookupError):
    """Raised when a list does not exist or belongs to another user."""


class ShoppingItemNotFoundError(LookupError):
    """Raised when an item is not part of the addressed list."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _item_to_model(row: ShoppingListItemORM) -> ShoppingListItem:
    return ShoppingListItem.model_validate(
        {
            "id": row.id,
            "name": row.name,
            "qty": row.qty,
            "unit": row.unit,
            "category": row.category,
            "planned_price": row.planned_price,
            "purchased_price": row.purchased_price,
            "purchased": row.purchased,
            "store": row.store,
            "notes": row.notes,
            "price_history": list(row.price_history or []),
            "created_at": row.created_at,
            "updated_at": row.updated_at,
        }
    )


def _to_model(row: ShoppingListORM) -> ShoppingList:
    return ShoppingList.model_validate(
        {
            "id": row.id,
            "user_id": row.user_id,
            "name": row.name,
            "year": row.year,
            "month": row.month,
            "budget": row.budget,
            "alerts": {
                "warn_pct": row.warn_pct,
                "error_pct": row.error_pct,
                "notify": row.notify,
            },
            "items": [_item_to_model(item) for item in row.items],
            "created_at": row.created_at,
            "updated_at": row.updated_at,
        }
    )


def _load_owned(session: Session, list_id: int, user_id: str) -> ShoppingListORM:
    row = session.execute(
        select(ShoppingListORM)
        .options(selectinload(ShoppingListORM.items))
        .where(ShoppingListORM.id == list_id, ShoppingListORM.user_id == user_id)
    ).scalar_one_or_none()
    if row is None:
        raise ShoppingListNotFoundError(f"Shopping list {list_id} not found")
    return row


def _find_item(row: ShoppingListORM, item_id: int) -> ShoppingListItemORM:
    for item in row.items:
        if item.id == item_id:
            return item
    raise ShoppingItemNotFoundError(f"Shopping list item {item_id} not found")


def _build_item(payload: Mapping[str, Any], position: int) -> ShoppingListItemORM:
    name = str(payload["name"]).strip()
    qty = payload.get("qty")
    return ShoppingListItemORM(
        position=position,
        name=name,
        qty=float(qty) if qty is not None else 1.0,
        unit=canonical_unit(payload.get("unit")),
        category=payload.get("category") or classify_item(name),
        planned_price=float(payload.get("planned_price") or 0.0),
        purchased_price=float(payload.get("purchased_price") or 0.0),
        purchased=bool(payload.get("purchased", False)),
        store=(payload.get("store") or "").strip(),
        notes=payload.get("notes") or "",
        price_history=list(payload.get("price_history") or []),
    )


def default_list_name(prefix: str, year: int, month: int) -> str:
    return f"{prefix} {month:02d}/{year}"


def create_shopping_list(
    user_id: str,
    *,
    name: Optional[str] = None,
    year: Optional[int] = None,
    month: Optional[int] = None,
    budget: Optional[float] = None,
    alerts: Optional[Mapping[str, Any]] = None,
    items: Iterable[Mapping[str, Any]] = (),
    name_prefix: str = "Lista",
) -> ShoppingList:
    """Persist a new list (and its items) in a single transaction."""

    settings = get_settings()
    now = _utcnow()
    year = year or now.year
    month = month or now.month
    alerts = dict(alerts or {})

    with session_scope() as session:
        db_list = ShoppingListORM(
            user_id=user_id,
            name=name or default_list_name(name_prefix, year, month),
            year=year,
            month=month,
            budget=float(budget or 0.0),
            warn_pct=float(alerts.get("warn_pct", settings.default_warn_pct)),
            error_pct=float(alerts.get("error_pct", settings.default_error_pct)),
            notify=bool(alerts.get("notify", True)),
        )
        db_list.items = [_build_item(payload, position) for position, payload in enumerate(items)]
        session.add(db_list)
        session.flush()
        session.refresh(db_list)
        logger.debug(
            "Created shopping list %s for user %s with %s item(s)",
            db_list.id,
            user_id,
            len(db_list.items),
        )
        return _to_model(db_list)


def get_shopping_list(list_id: int, user_id: str) -> ShoppingList:
    with session_scope() as session:
        return _to_model(_load_owned(session, list_id, user_id))


def list_user_shopping_lists(user_id: str) -> List[ShoppingList]:
    """Return every list owned by ``user_id`` (oldest first, items in order)."""

    with session_scope() as session:
        rows = (
            session.execute(
                select(ShoppingListORM)
                .options(selectinload(ShoppingListORM.items))
                .where(ShoppingListORM.user_id == user_id)
                .order_by(ShoppingListORM.id.asc())
            )
            .scalars()
            .all()
        )
        return [_to_model(row) for row in rows]


def add_shopping_item(list_id: int, user_id: str, **fields: Any) -> ShoppingList:
    """Append an item; the unit is normalized and the category auto-classified."""

    with session_scope() as session:
        db_list = _load_owned(session, list_id, user_id)
        position = max((item.position for item in db_list.items), default=-1) + 1
        db_list.items.append(_build_item(fields, position))
        session.flush()
        session.refresh(db_list)
        return _to_model(db_list)


def update_shopping_item(
    list_id: int,
    user_id: str,
    item_id: int,
    *,
    name: str | object = _UNSET,
    qty: float | object = _UNSET,
    unit: str | object = _UNSET,
    category: str | None | object = _UNSET,
    planned_price: float | object = _UNSET,
    purchased_price: float | object = _UNSET,
    purchased: bool | object = _UNSET,
    store: str | object = _UNSET,
    notes: str | object = _UNSET,
) -> ShoppingList:
    """Patch one item. Marking an item purchased records a price-history entry."""

    with session_scope() as session:
        db_list = _load_owned(session, list_id, user_id)
        db_item = _find_item(db_list, item_id)
        was_purchased = db_item.purchased
        previous_price = db_item.purchased_price

        if name is not _UNSET:
            db_item.name = str(name).strip()
            if category is _UNSET:
                db_item.category = classify_item(db_item.name)
        if qty is not _UNSET:
            db_item.qty = float(qty)
        if unit is not _UNSET:
            db_item.unit = canonical_unit(unit)
        if category is not _UNSET:
            db_item.category = category or classify_item(db_item.name)
        if planned_price is not _UNSET:
            db_item.planned_price = float(planned_price)
        if purchased_price is not _UNSET:
            db_item.purchased_price = float(purchased_price)
        if purchased is not _UNSET:
            db_item.purchased = bool(purchased)
        if store is not _UNSET:
            db_item.store = (store or "").strip()
        if notes is not _UNSET:
            db_item.notes = notes or ""

        price_changed = db_item.purchased_price != previous_price
        if db_item.purchased and db_item.purchased_price > 0 and (not was_purchased or price_changed):
            db_item.price_history = [
                *(db_item.price_history or []),
                {
                    "date": _utcnow().isoformat(),
                    "store": db_item.store,
                    "price": db_item.purchased_price,
                },
            ]

        session.flush()
        session.refresh(db_list)
        return _to_model(db_list)


def save_item_estimates(
    list_id: int,
    user_id: str,
    updates: Mapping[int, Mapping[str, Any]],
) -> ShoppingList:
    """Write planned prices (and categories) for several items in one transaction."""

    with session_scope() as session:
        db_list = _load_owned(session, list_id, user_id)
        for item in db_list.items:
            update = updates.get(item.id)
            if not update:
                continue
            if "planned_price" in update:
                item.planned_price = float(update["planned_price"])
            if update.get("category"):
                item.category = update["category"]
        session.flush()
        session.refresh(db_list)
        return _to_model(db_list)


def search_price_history(
    user_id: str,
    name: str,
    store: Optional[str] = None,
) -> PriceSearchResult:
    """Return price-history entries for items whose name contains ``name``.

    Raises :class:`ValueError` for a blank ``name``, which would match everything.
    """

    needle = name.strip().lower()
    if not needle:
        raise ValueError("Search name must not be blank")
    store_filter = store.strip().lower() if store else None
    entries: list[PriceSearchEntry] = []

    for shopping_list in list_user_shopping_lists(user_id):
        for item in shopping_list.items:
            if needle not in item.name.lower():
                continue
            for point in item.price_history:
                if store_filter and (not point.store or point.store.lower() != store_filter):
                    continue
                entries.append(
                    PriceSearchEntry(
                        item_name=item.name,
                        store=point.store or "",
                        date=point.date,
                        price=point.price,
                    )
                )

    entries.sort(key=lambda entry: _sort_key(entry.date), reverse=True)
    return PriceSearchResult(name=name, store=store or None, count=len(entries), history=entries)


def _sort_key(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


__all__ = [
    "ShoppingItemNotFoundError",
    "ShoppingListNotFoundError",
    "add_shopping_item",
    "create_shopping_list",
    "default_list_name",
    "get_shopping_list",
    "list_user_shopping_lists",
    "save_item_estimates",
    "search_price_history",
    "update_shopping_item",
]
