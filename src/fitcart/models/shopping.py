"""Shopping list models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from fitcart.config import PriceStrategy, get_settings

BudgetStatus = Literal["ok", "warn", "over"]


def _default_strategy() -> PriceStrategy:
    return get_settings().default_strategy


class PricePoint(BaseModel):
    """Single observed price for an item at a store."""

    date: datetime
    store: str = Field(default="")
    price: float = Field(ge=0)

    model_config = ConfigDict(frozen=True)


class BudgetAlerts(BaseModel):
    """Budget thresholds expressed as fractions of the list budget."""

    warn_pct: float = Field(default=0.8, ge=0, le=10)
    error_pct: float = Field(default=1.0, ge=0, le=10)
    notify: bool = Field(default=True)

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class ShoppingListItem(BaseModel):
    """Entry embedded in a shopping list."""

    id: int
    name: str
    qty: float = Field(default=1.0, ge=0)
    unit: str = Field(default="un")
    category: Optional[str] = Field(default=None)
    planned_price: float = Field(default=0.0, ge=0)
    purchased_price: float = Field(default=0.0, ge=0)
    purchased: bool = Field(default=False)
    store: str = Field(default="")
    notes: str = Field(default="", max_length=1000)
    price_history: list[PricePoint] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class ShoppingList(BaseModel):
    """Monthly shopping list owned by a single user."""

    id: int
    user_id: str
    name: str = Field(default="")
    year: int
    month: int = Field(ge=1, le=12)
    budget: float = Field(default=0.0, ge=0)
    alerts: BudgetAlerts = Field(default_factory=BudgetAlerts)
    items: list[ShoppingListItem] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class MealPlanIngredient(BaseModel):
    """Normalized ingredient line coming from a meal plan."""

    name: str = Field(min_length=1, max_length=255)
    qty: float = Field(ge=0)
    unit: Optional[str] = Field(default=None, max_length=64)
    notes: Optional[str] = Field(default=None, max_length=1000)

    model_config = ConfigDict(str_strip_whitespace=True)


class MealPlan(BaseModel):
    items: list[MealPlanIngredient] = Field(min_length=1)


class MealPlanRequest(BaseModel):
    """Request to synthesize a new shopping list from meal-plan ingredients."""

    name: Optional[str] = Field(default=None, max_length=255)
    year: Optional[int] = Field(default=None, ge=2000, le=3000)
    month: Optional[int] = Field(default=None, ge=1, le=12)
    budget: Optional[float] = Field(default=None, ge=0)
    allow_unknown: bool = Field(default=False)
    strategy: PriceStrategy = Field(default_factory=_default_strategy)
    store: Optional[str] = Field(default=None, max_length=255)
    days: Optional[int] = Field(default=None, ge=1)
    plan: MealPlan

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EstimatePricesRequest(BaseModel):
    """Options for backfilling planned prices on an existing list."""

    strategy: PriceStrategy = Field(default_factory=_default_strategy)
    store: Optional[str] = Field(default=None, max_length=255)
    days: Optional[int] = Field(default=None, ge=1)
    only_missing: bool = Field(default=True)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UnknownIngredient(BaseModel):
    """Meal-plan ingredient without purchase history."""

    name: str
    unit: str
    qty: float

    model_config = ConfigDict(frozen=True)


class CategoryTotals(BaseModel):
    category: str
    planned: float
    spent: float

    model_config = ConfigDict(frozen=True)


class BudgetSummary(BaseModel):
    """Planned versus spent totals for one list."""

    list_id: int
    planned: float
    spent: float
    budget: float
    remaining: float
    status: BudgetStatus
    by_category: list[CategoryTotals] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class PriceSearchEntry(BaseModel):
    item_name: str
    store: str
    date: datetime
    price: float

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class PriceSearchResult(BaseModel):
    """Price-history entries matching a name across every list of a user."""

    name: str
    store: Optional[str] = None
    count: int
    history: list[PriceSearchEntry] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


__all__ = [
    "BudgetAlerts",
    "BudgetStatus",
    "BudgetSummary",
    "CategoryTotals",
    "EstimatePricesRequest",
    "MealPlan",
    "MealPlanIngredient",
    "MealPlanRequest",
    "PricePoint",
    "PriceSearchEntry",
    "PriceSearchResult",
    "ShoppingList",
    "ShoppingListItem",
    "UnknownIngredient",
]
