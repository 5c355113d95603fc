"""Synthesize a priced shopping list from meal-plan ingredients."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from fitcart import metrics
from fitcart.db.shopping_lists import create_shopping_list
from fitcart.models.shopping import (
    MealPlanIngredient,
    MealPlanRequest,
    ShoppingList,
    UnknownIngredient,
)
from fitcart.pricing.categories import classify_item
from fitcart.pricing.estimator import estimate_price
from fitcart.pricing.history import HistoryGroup, aggregate_user_history
from fitcart.pricing.units import canonical_unit, group_key

logger = logging.getLogger(__name__)

MEAL_PLAN_LIST_PREFIX = "Meal Plan"

HistoryProvider = Callable[..., Dict[str, HistoryGroup]]
ListCreator = Callable[..., ShoppingList]


class UnknownIngredientsError(ValueError):
    """Raised when meal-plan ingredients have no purchase history."""

    def __init__(self, unknown: List[UnknownIngredient]):
        self.unknown = unknown
        names = ", ".join(entry.name for entry in unknown)
        super().__init__(f"No purchase history for: {names}")


def plan_meal_plan_items(
    ingredients: Iterable[MealPlanIngredient],
    history: Mapping[str, HistoryGroup],
    *,
    strategy: str = "median",
    store: Optional[str] = None,
    allow_unknown: bool = False,
) -> Tuple[List[Dict[str, Any]], List[UnknownIngredient]]:
    """Build item payloads for the new list and collect unresolved ingredients."""

    items: List[Dict[str, Any]] = []
    unknown: List[UnknownIngredient] = []

    for ingredient in ingredients:
        name = ingredient.name.strip()
        unit = canonical_unit(ingredient.unit)
        qty = float(ingredient.qty or 0)
        group = history.get(group_key(name, unit))

        if group is None or not group.records:
            if not allow_unknown:
                unknown.append(UnknownIngredient(name=name, unit=unit, qty=qty))
                continue
            planned_price = 0.0
            category = classify_item(name)
            item_store = ""
        else:
            planned_price = estimate_price(group.records, qty, unit, strategy)
            category = group.category_mode or classify_item(name)
            item_store = store or ""

        items.append(
            {
                "name": name,
                "qty": qty,
                "unit": unit,
                "category": category,
                "planned_price": planned_price,
                "purchased_price": 0.0,
                "purchased": False,
                "store": item_store,
                "notes": ingredient.notes or "",
            }
        )

    return items, unknown


def synthesize_from_meal_plan(
    user_id: str,
    request: MealPlanRequest,
    *,
    history_provider: HistoryProvider = aggregate_user_history,
    list_creator: ListCreator = create_shopping_list,
) -> ShoppingList:
    """Create a new list priced from history; all-or-nothing on unknown ingredients."""

    history = history_provider(user_id, store=request.store, since_days=request.days)
    items, unknown = plan_meal_plan_items(
        request.plan.items,
        history,
        strategy=request.strategy,
        store=request.store,
        allow_unknown=request.allow_unknown,
    )

    if unknown:
        metrics.MEALPLAN_SYNTHESES.labels(result="rejected").inc()
        logger.info(
            "Meal plan rejected for user %s: %s ingredient(s) without history",
            user_id,
            len(unknown),
        )
        raise UnknownIngredientsError(unknown)

    created = list_creator(
        user_id,
        name=request.name,
        year=request.year,
        month=request.month,
        budget=request.budget,
        items=items,
        name_prefix=MEAL_PLAN_LIST_PREFIX,
    )
    metrics.MEALPLAN_SYNTHESES.labels(result="created").inc()
    logger.info(
        "Meal plan list %s created for user %s with %s item(s)",
        created.id,
        user_id,
        len(items),
    )
    return created


__all__ = [
    "MEAL_PLAN_LIST_PREFIX",
    "UnknownIngredientsError",
    "plan_meal_plan_items",
    "synthesize_from_meal_plan",
]
