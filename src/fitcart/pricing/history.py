"""Aggregation of a user's purchase history into per-item price groups."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, Optional

from fitcart.db.shopping_lists import list_user_shopping_lists
from fitcart.models.shopping import ShoppingList, ShoppingListItem
from fitcart.pricing.units import group_key, normalize_unit, to_base_quantity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryRecord:
    """One purchased item expressed in its group's base unit."""

    name: str
    unit: str
    qty: float
    base_qty: float
    price: float
    unit_price_base: float
    store: Optional[str]
    date: datetime
    category: Optional[str]


@dataclass
class HistoryGroup:
    """Purchases sharing a normalized name and conversion group, newest first."""

    records: List[HistoryRecord] = field(default_factory=list)
    category_mode: Optional[str] = None
    category_counts: Dict[str, int] = field(default_factory=dict)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _effective_date(item: ShoppingListItem, shopping_list: ShoppingList, now: datetime) -> datetime:
    value = item.updated_at or item.created_at or shopping_list.updated_at
    return _as_utc(value) if value is not None else now


def _most_frequent(counts: Dict[str, int]) -> Optional[str]:
    best: Optional[str] = None
    best_count = 0
    # dicts keep insertion order, so ties go to the first category seen
    for category, count in counts.items():
        if count > best_count:
            best, best_count = category, count
    return best


def aggregate_history(
    lists: Iterable[ShoppingList],
    *,
    store: Optional[str] = None,
    since_days: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Dict[str, HistoryGroup]:
    """Group purchased items by ``group_key`` with per-base-unit prices.

    Only items marked purchased with a positive price and quantity count as
    evidence. ``store`` keeps items bought at that store (case-insensitive);
    ``since_days`` drops items whose last update is older than the window.
    """

    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    since = now - timedelta(days=since_days) if since_days else None
    store_filter = store.strip().lower() if store else None
    groups: Dict[str, HistoryGroup] = {}

    for shopping_list in lists:
        for item in shopping_list.items:
            if not item.purchased:
                continue

            name = item.name.strip()
            qty = float(item.qty or 0)
            price = float(item.purchased_price or 0)
            if not name or price <= 0 or qty <= 0:
                continue

            item_store = (item.store or "").strip()
            if store_filter and item_store.lower() != store_filter:
                continue

            purchased_at = _effective_date(item, shopping_list, now)
            if since is not None and purchased_at < since:
                continue

            base_qty = to_base_quantity(qty, item.unit)
            if base_qty <= 0:
                continue

            group = groups.setdefault(group_key(name, item.unit), HistoryGroup())
            group.records.append(
                HistoryRecord(
                    name=name,
                    unit=normalize_unit(item.unit).canon,
                    qty=qty,
                    base_qty=base_qty,
                    price=price,
                    unit_price_base=price / base_qty,
                    store=item_store or None,
                    date=purchased_at,
                    category=item.category or None,
                )
            )
            if item.category:
                category = item.category.lower()
                group.category_counts[category] = group.category_counts.get(category, 0) + 1

    for group in groups.values():
        # stable sort on the reversed scan: equal dates keep later purchases first
        group.records.reverse()
        group.records.sort(key=lambda record: record.date, reverse=True)
        group.category_mode = _most_frequent(group.category_counts)

    return groups


HistoryLoader = Callable[[str], List[ShoppingList]]


def aggregate_user_history(
    user_id: str,
    *,
    store: Optional[str] = None,
    since_days: Optional[int] = None,
    loader: HistoryLoader = list_user_shopping_lists,
) -> Dict[str, HistoryGroup]:
    """Load every list of ``user_id`` and aggregate its purchases."""

    groups = aggregate_history(loader(user_id), store=store, since_days=since_days)
    logger.debug(
        "Aggregated %s history group(s) for user %s (store=%s, days=%s)",
        len(groups),
        user_id,
        store,
        since_days,
    )
    return groups


__all__ = [
    "HistoryGroup",
    "HistoryLoader",
    "HistoryRecord",
    "aggregate_history",
    "aggregate_user_history",
]
