"""Command-line interface for fitcart."""

from __future__ import annotations

import json
from typing import Optional

import typer
from pydantic import ValidationError

from fitcart.config import get_settings
from fitcart.db.shopping_lists import (
    ShoppingListNotFoundError,
    get_shopping_list,
    search_price_history,
)
from fitcart.models.shopping import MealPlanRequest
from fitcart.pricing.backfill import backfill_prices
from fitcart.pricing.budget import summarize_budget
from fitcart.pricing.mealplan import UnknownIngredientsError, synthesize_from_meal_plan

app = typer.Typer(help="fitcart shopping-list pricing commands.")

_STRATEGY_HELP = "Pricing strategy: last, avg or median."


def _emit(payload: object, pretty: bool) -> None:
    typer.echo(json.dumps(payload, indent=2 if pretty else None, sort_keys=pretty))


def _check_strategy(strategy: Optional[str]) -> str:
    value = (strategy or get_settings().default_strategy).lower()
    if value not in {"last", "avg", "median"}:
        raise typer.BadParameter(f"unknown strategy '{strategy}'", param_hint="--strategy")
    return value


@app.command("estimate-prices")
def estimate_prices(
    list_id: int = typer.Argument(..., help="Shopping list to update."),
    user: str = typer.Option(..., "--user", help="Owner of the list."),
    strategy: Optional[str] = typer.Option(None, "--strategy", help=_STRATEGY_HELP),
    store: Optional[str] = typer.Option(None, "--store", help="Only use purchases from this store."),
    days: Optional[int] = typer.Option(None, "--days", min=1, help="Only use recent purchases."),
    all_items: bool = typer.Option(
        False, "--all", help="Re-estimate items that already have a planned price."
    ),
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print output JSON."),
) -> None:
    """Fill planned prices on a list from your purchase history."""

    try:
        updated = backfill_prices(
            list_id,
            user,
            strategy=_check_strategy(strategy),
            store=store,
            since_days=days,
            only_missing=not all_items,
        )
    except ShoppingListNotFoundError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    _emit(updated.model_dump(mode="json", by_alias=True), pretty)


@app.command("from-mealplan")
def from_meal_plan(
    plan_path: str = typer.Argument(..., help="JSON file with a meal-plan request body."),
    user: str = typer.Option(..., "--user", help="Owner of the new list."),
    allow_unknown: bool = typer.Option(
        False, "--allow-unknown", help="Include ingredients without history at price 0."
    ),
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print output JSON."),
) -> None:
    """Create a priced shopping list from a meal-plan ingredient file."""

    with open(plan_path, "r", encoding="utf-8") as fh:
        payload = json.load(fh)
    if allow_unknown:
        payload["allowUnknown"] = True

    try:
        request = MealPlanRequest.model_validate(payload)
        created = synthesize_from_meal_plan(user, request)
    except ValidationError as exc:
        typer.secho(f"Invalid meal plan: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from exc
    except UnknownIngredientsError as exc:
        typer.secho(str(exc), fg=typer.colors.YELLOW, err=True)
        _emit({"unknown": [entry.model_dump() for entry in exc.unknown]}, pretty)
        raise typer.Exit(code=1) from exc
    _emit(created.model_dump(mode="json", by_alias=True), pretty)


@app.command()
def summary(
    list_id: int = typer.Argument(..., help="Shopping list to summarize."),
    user: str = typer.Option(..., "--user", help="Owner of the list."),
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print output JSON."),
) -> None:
    """Show planned versus spent totals for a list (no alerts are sent)."""

    try:
        shopping_list = get_shopping_list(list_id, user)
    except ShoppingListNotFoundError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    _emit(summarize_budget(shopping_list).model_dump(mode="json", by_alias=True), pretty)


@app.command("search-prices")
def search_prices(
    name: str = typer.Argument(..., help="Substring of the item name."),
    user: str = typer.Option(..., "--user", help="Whose lists to search."),
    store: Optional[str] = typer.Option(None, "--store", help="Exact store name."),
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print output JSON."),
) -> None:
    """List recorded prices for an item across all lists, newest first."""

    try:
        result = search_price_history(user, name, store)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="NAME") from exc
    _emit(result.model_dump(mode="json", by_alias=True), pretty)


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the ``fitcart`` script."""
    app(prog_name="fitcart", args=argv)


if __name__ == "__main__":
    main()
