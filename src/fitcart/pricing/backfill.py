"""Fill planned prices on an existing list from the owner's purchase history."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from fitcart import metrics
from fitcart.db.shopping_lists import get_shopping_list, save_item_estimates
from fitcart.models.shopping import ShoppingList, ShoppingListItem
from fitcart.pricing.estimator import estimate_price
from fitcart.pricing.history import HistoryGroup, aggregate_user_history
from fitcart.pricing.units import group_key

logger = logging.getLogger(__name__)

HistoryProvider = Callable[..., Dict[str, HistoryGroup]]


def plan_backfill(
    items: Iterable[ShoppingListItem],
    history: Mapping[str, HistoryGroup],
    *,
    strategy: str = "median",
    only_missing: bool = True,
) -> Dict[int, Dict[str, Any]]:
    """Return ``{item_id: {"planned_price": ..., "category": ...}}`` for estimable items.

    Items without history are left out; a partial estimate is a valid result.
    """

    updates: Dict[int, Dict[str, Any]] = {}
    for item in items:
        if only_missing and item.planned_price > 0:
            continue

        group = history.get(group_key(item.name, item.unit))
        if group is None or not group.records:
            metrics.PRICE_ESTIMATES.labels(strategy=strategy, result="no_history").inc()
            continue

        update: Dict[str, Any] = {
            "planned_price": estimate_price(group.records, item.qty, item.unit, strategy),
        }
        if not item.category and group.category_mode:
            update["category"] = group.category_mode
        updates[item.id] = update
        metrics.PRICE_ESTIMATES.labels(strategy=strategy, result="estimated").inc()
    return updates


def backfill_prices(
    list_id: int,
    user_id: str,
    *,
    strategy: str = "median",
    store: Optional[str] = None,
    since_days: Optional[int] = None,
    only_missing: bool = True,
    history_provider: HistoryProvider = aggregate_user_history,
) -> ShoppingList:
    """Estimate planned prices for a list and persist them in one write.

    Raises :class:`~fitcart.db.shopping_lists.ShoppingListNotFoundError` when the
    list is not owned by ``user_id``.
    """

    shopping_list = get_shopping_list(list_id, user_id)
    history = history_provider(user_id, store=store, since_days=since_days)
    updates = plan_backfill(
        shopping_list.items,
        history,
        strategy=strategy,
        only_missing=only_missing,
    )

    logger.info(
        "Backfilling prices list=%s user=%s strategy=%s estimated=%s/%s",
        list_id,
        user_id,
        strategy,
        len(updates),
        len(shopping_list.items),
    )
    if not updates:
        return shopping_list
    return save_item_estimates(list_id, user_id, updates)


__all__ = ["backfill_prices", "plan_backfill"]
