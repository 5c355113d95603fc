"""Budget and spend summary for a shopping list, with threshold alerts."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from fitcart import metrics
from fitcart.models.shopping import BudgetStatus, BudgetSummary, CategoryTotals, ShoppingList
from fitcart.pricing.categories import DEFAULT_CATEGORY

logger = logging.getLogger(__name__)

BudgetNotifier = Callable[..., Any]


def budget_status(spent: float, budget: float, warn_pct: float, error_pct: float) -> BudgetStatus:
    """Classify spend against the budget; a zero budget is always ``ok``."""

    if budget > 0 and spent >= budget * error_pct:
        return "over"
    if budget > 0 and spent >= budget * warn_pct:
        return "warn"
    return "ok"


def summarize_budget(shopping_list: ShoppingList) -> BudgetSummary:
    """Compute planned/spent totals, remaining budget, status and per-category totals."""

    planned = 0.0
    spent = 0.0
    by_category: Dict[str, Dict[str, float]] = {}

    for item in shopping_list.items:
        totals = by_category.setdefault(item.category or DEFAULT_CATEGORY, {"planned": 0.0, "spent": 0.0})
        planned += item.planned_price
        totals["planned"] += item.planned_price
        if item.purchased:
            spent += item.purchased_price
            totals["spent"] += item.purchased_price

    budget = float(shopping_list.budget or 0.0)
    alerts = shopping_list.alerts
    return BudgetSummary(
        list_id=shopping_list.id,
        planned=round(planned, 2),
        spent=round(spent, 2),
        budget=budget,
        remaining=round(max(0.0, budget - spent), 2),
        status=budget_status(spent, budget, alerts.warn_pct, alerts.error_pct),
        by_category=[
            CategoryTotals(
                category=category,
                planned=round(totals["planned"], 2),
                spent=round(totals["spent"], 2),
            )
            for category, totals in by_category.items()
        ],
    )


def _alert_text(shopping_list: ShoppingList, status: BudgetStatus) -> tuple[str, str]:
    label = shopping_list.name or f"{shopping_list.month}/{shopping_list.year}"
    if status == "over":
        return "Budget exceeded", f"List {label} went over its budget."
    return "Spending close to the limit", f"List {label} reached its budget warning threshold."


def dispatch_budget_alert(
    notifier: BudgetNotifier,
    shopping_list: ShoppingList,
    status: BudgetStatus,
) -> bool:
    """Deliver a budget alert; delivery failures are logged and never raised.

    Returns ``True`` only when the notifier accepted the alert.
    """

    if status not in ("warn", "over") or not shopping_list.alerts.notify:
        return False

    title, message = _alert_text(shopping_list, status)
    try:
        notifier(
            shopping_list.user_id,
            title=title,
            message=message,
            data={"type": "shopping-budget", "listId": str(shopping_list.id)},
        )
    except Exception as exc:  # noqa: BLE001
        metrics.BUDGET_ALERTS.labels(status=status, result="failed").inc()
        logger.warning(
            "Budget alert delivery failed for list %s: %s",
            shopping_list.id,
            exc,
            extra={"user_id": shopping_list.user_id, "list_id": shopping_list.id},
        )
        return False

    metrics.BUDGET_ALERTS.labels(status=status, result="sent").inc()
    logger.info(
        "Budget alert sent list=%s status=%s",
        shopping_list.id,
        status,
        extra={"user_id": shopping_list.user_id, "list_id": shopping_list.id},
    )
    return True


__all__ = ["budget_status", "dispatch_budget_alert", "summarize_budget"]
