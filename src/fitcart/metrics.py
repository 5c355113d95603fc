"""Prometheus metrics definitions for fitcart."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "fitcart_http_requests_total",
    "Total number of HTTP requests processed by the fitcart API",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "fitcart_http_request_duration_seconds",
    "Latency of HTTP requests processed by the fitcart API",
    ["method", "path"],
)

PRICE_ESTIMATES = Counter(
    "fitcart_price_estimates_total",
    "Shopping items considered for price estimation by strategy and outcome",
    ["strategy", "result"],
)

MEALPLAN_SYNTHESES = Counter(
    "fitcart_mealplan_syntheses_total",
    "Meal-plan shopping list synthesis attempts by outcome",
    ["result"],
)

BUDGET_ALERTS = Counter(
    "fitcart_budget_alerts_total",
    "Budget alert dispatch attempts by budget status and outcome",
    ["status", "result"],
)

__all__ = [
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "PRICE_ESTIMATES",
    "MEALPLAN_SYNTHESES",
    "BUDGET_ALERTS",
]
