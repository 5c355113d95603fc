"""Dependency definitions for the fitcart API server."""

from __future__ import annotations

from typing import Callable, Optional

from fastapi import Depends, Header, HTTPException, Request, status

from fitcart.config import Settings, get_settings
from fitcart.db.shopping_lists import get_shopping_list, search_price_history
from fitcart.integrations.push import PushClient
from fitcart.models.shopping import MealPlanRequest, PriceSearchResult, ShoppingList
from fitcart.pricing.backfill import backfill_prices
from fitcart.pricing.budget import BudgetNotifier
from fitcart.pricing.mealplan import synthesize_from_meal_plan

ShoppingListFetcher = Callable[[int, str], ShoppingList]
PriceBackfiller = Callable[..., ShoppingList]
MealPlanSynthesizer = Callable[[str, MealPlanRequest], ShoppingList]
PriceSearcher = Callable[[str, str, Optional[str]], PriceSearchResult]


def get_shopping_list_fetcher() -> ShoppingListFetcher:
    return get_shopping_list


def get_price_backfiller() -> PriceBackfiller:
    return backfill_prices


def get_meal_plan_synthesizer() -> MealPlanSynthesizer:
    return synthesize_from_meal_plan


def get_price_searcher() -> PriceSearcher:
    return lambda user_id, name, store=None: search_price_history(user_id, name, store)


def get_budget_notifier() -> BudgetNotifier:
    """Return the push gateway sender used for budget alerts."""

    return PushClient().send_to_user


def require_api_token(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """Ensure requests carry the configured API token when required."""

    token = settings.api_token
    if not token:
        return

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.split("Bearer ")[-1].strip() == token:
        return

    if request.headers.get("X-API-Key") == token:
        return

    if request.query_params.get("api_token") == token:
        return

    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None, alias="X-User-ID"),
) -> str:
    """Return the user id asserted by the upstream authentication gateway."""

    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing user identity")
    return user_id
