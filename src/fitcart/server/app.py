"""ASGI application for fitcart."""
# mypy: ignore-errors

from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Optional
from uuid import uuid4

from fastapi import BackgroundTasks, Body, Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from fitcart import __version__, metrics
from fitcart.config import Settings, get_settings
from fitcart.db.shopping_lists import ShoppingListNotFoundError
from fitcart.logging_utils import configure_logging as configure_app_logging
from fitcart.models.shopping import (
    BudgetSummary,
    EstimatePricesRequest,
    MealPlanRequest,
    PriceSearchResult,
    ShoppingList,
)
from fitcart.pricing.budget import BudgetNotifier, dispatch_budget_alert, summarize_budget
from fitcart.pricing.mealplan import UnknownIngredientsError
from fitcart.server import deps

logger = logging.getLogger(__name__)

UNKNOWN_INGREDIENTS_MESSAGE = "Some meal plan items are not in your purchase history."


def _json_safe(value: Any) -> Any:
    """Convert non-serializable values into JSON-safe representations."""

    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return value.hex()
    if isinstance(value, (list, tuple)):
        return [_json_safe(entry) for entry in value]
    if isinstance(value, dict):
        return {key: _json_safe(sub_value) for key, sub_value in value.items()}
    return repr(value)


def _normalize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Ensure validation error payloads can be serialized to JSON."""

    return [{key: _json_safe(value) for key, value in error.items()} for error in errors]


def _configure_logging(settings: Settings) -> None:
    secrets = [settings.api_token or "", settings.push_api_key or ""]
    configure_app_logging(settings.log_level, settings.log_format, secrets)


def _not_found(exc: LookupError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


def create_app() -> FastAPI:
    """Create and configure a FastAPI application instance."""

    settings = get_settings()
    _configure_logging(settings)

    application = FastAPI(title="fitcart shopping lists", version=__version__)
    logger.debug("Application created with log level %s", settings.log_level)

    if settings.log_requests:
        access_logger = logging.getLogger("fitcart.access")

        @application.middleware("http")
        async def log_request_response(request: Request, call_next):
            """Log request/response details without leaking sensitive data."""

            request_id = request.headers.get("X-Request-ID") or uuid4().hex
            request.state.request_id = request_id
            start = perf_counter()
            path = request.url.path
            method = request.method
            try:
                response: Response = await call_next(request)
            except Exception:
                duration_ms = (perf_counter() - start) * 1000
                access_logger.exception(
                    "HTTP %s %s status=500 duration_ms=%.2f",
                    method,
                    path,
                    duration_ms,
                    extra={"request_id": request_id},
                )
                metrics.REQUEST_COUNT.labels(method=method, path=path, status="500").inc()
                metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(
                    duration_ms / 1000.0
                )
                raise

            duration_ms = (perf_counter() - start) * 1000
            response.headers.setdefault("X-Request-ID", request_id)
            access_logger.info(
                "HTTP %s %s status=%s duration_ms=%.2f",
                method,
                path,
                response.status_code,
                duration_ms,
                extra={"request_id": request_id},
            )
            metrics.REQUEST_COUNT.labels(
                method=method,
                path=path,
                status=str(response.status_code),
            ).inc()
            metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000.0)
            return response

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        log_kwargs: dict[str, Any] = {}
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            log_kwargs["extra"] = {"request_id": request_id}

        logger.warning(
            "Validation error on %s %s: %s",
            request.method,
            request.url.path,
            exc.errors(),
            **log_kwargs,
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": _normalize_validation_errors(exc.errors())},
        )

    @application.get("/metrics", include_in_schema=False)
    def metrics_endpoint() -> Response:
        payload = generate_latest()
        return Response(content=payload, media_type=CONTENT_TYPE_LATEST)

    @application.get(
        "/shopping-lists/prices/search",
        response_model=PriceSearchResult,
        summary="Search price history across lists",
    )
    def shopping_list_price_search(
        name: str = Query(min_length=1, max_length=255, pattern=r"\S"),
        store: Optional[str] = Query(default=None, max_length=255),
        auth: None = Depends(deps.require_api_token),
        user_id: str = Depends(deps.get_current_user_id),
        searcher: deps.PriceSearcher = Depends(deps.get_price_searcher),
    ) -> PriceSearchResult:
        return searcher(user_id, name, store)

    @application.post(
        "/shopping-lists/from-mealplan",
        response_model=ShoppingList,
        status_code=status.HTTP_201_CREATED,
        summary="Create a priced shopping list from a meal plan",
        responses={status.HTTP_400_BAD_REQUEST: {"description": "Ingredients without purchase history"}},
    )
    def shopping_list_from_meal_plan(
        payload: MealPlanRequest,
        auth: None = Depends(deps.require_api_token),
        user_id: str = Depends(deps.get_current_user_id),
        synthesizer: deps.MealPlanSynthesizer = Depends(deps.get_meal_plan_synthesizer),
    ):
        try:
            return synthesizer(user_id, payload)
        except UnknownIngredientsError as exc:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={
                    "message": UNKNOWN_INGREDIENTS_MESSAGE,
                    "unknown": [entry.model_dump() for entry in exc.unknown],
                },
            )

    @application.post(
        "/shopping-lists/{list_id}/estimate-prices",
        response_model=ShoppingList,
        summary="Estimate planned prices from purchase history",
    )
    def shopping_list_estimate_prices(
        list_id: int,
        payload: Optional[EstimatePricesRequest] = Body(default=None),
        auth: None = Depends(deps.require_api_token),
        user_id: str = Depends(deps.get_current_user_id),
        backfiller: deps.PriceBackfiller = Depends(deps.get_price_backfiller),
    ) -> ShoppingList:
        options = payload or EstimatePricesRequest()
        try:
            return backfiller(
                list_id,
                user_id,
                strategy=options.strategy,
                store=options.store,
                since_days=options.days,
                only_missing=options.only_missing,
            )
        except ShoppingListNotFoundError as exc:
            raise _not_found(exc) from exc

    @application.get(
        "/shopping-lists/{list_id}/summary",
        response_model=BudgetSummary,
        summary="Budget and spend summary",
    )
    def shopping_list_summary(
        list_id: int,
        background_tasks: BackgroundTasks,
        auth: None = Depends(deps.require_api_token),
        user_id: str = Depends(deps.get_current_user_id),
        fetcher: deps.ShoppingListFetcher = Depends(deps.get_shopping_list_fetcher),
        notifier: BudgetNotifier = Depends(deps.get_budget_notifier),
    ) -> BudgetSummary:
        try:
            shopping_list = fetcher(list_id, user_id)
        except ShoppingListNotFoundError as exc:
            raise _not_found(exc) from exc

        summary = summarize_budget(shopping_list)
        if summary.status in ("warn", "over"):
            background_tasks.add_task(dispatch_budget_alert, notifier, shopping_list, summary.status)
        return summary

    return application


app = create_app()

__all__ = ["app", "create_app"]
