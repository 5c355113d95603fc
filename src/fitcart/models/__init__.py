"""Pydantic models defining shared data contracts."""

from fitcart.models.shopping import (
    BudgetAlerts,
    BudgetSummary,
    CategoryTotals,
    EstimatePricesRequest,
    MealPlan,
    MealPlanIngredient,
    MealPlanRequest,
    PricePoint,
    PriceSearchEntry,
    PriceSearchResult,
    ShoppingList,
    ShoppingListItem,
    UnknownIngredient,
)

__all__ = [
    "BudgetAlerts",
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
