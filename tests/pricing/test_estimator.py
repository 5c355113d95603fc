"""Price estimator tests."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

import pytest

from fitcart.pricing.estimator import estimate_price, pick_unit_price
from fitcart.pricing.history import HistoryRecord

NOW = datetime(2025, 6, 30, tzinfo=timezone.utc)


def _record(unit_price_base: float, *, days_ago: int = 0, base_qty: float = 1.0, price=None) -> HistoryRecord:
    return HistoryRecord(
        name="rice",
        unit="g",
        qty=base_qty,
        base_qty=base_qty,
        price=price if price is not None else unit_price_base * base_qty,
        unit_price_base=unit_price_base,
        store=None,
        date=NOW - timedelta(days=days_ago),
        category=None,
    )


def _records(*prices: float) -> list[HistoryRecord]:
    # newest first, as the aggregator returns them
    return [_record(price, days_ago=index) for index, price in enumerate(prices)]


def test_median_of_odd_and_even_counts():
    assert pick_unit_price(_records(3, 1, 2), "median") == 2
    assert pick_unit_price(_records(4, 1, 3, 2), "median") == 2.5
    assert estimate_price(_records(3, 1, 2), 10, "g", "median") == 20.0
    assert estimate_price(_records(4, 1, 3, 2), 10, "g", "median") == 25.0


def test_last_and_avg_strategies():
    records = _records(4, 1, 1)
    assert estimate_price(records, 1, "g", "last") == 4.0
    assert estimate_price(records, 1, "g", "avg") == 2.0


def test_median_is_the_default_strategy():
    assert estimate_price(_records(5, 1, 2), 1, "g") == 2.0


@pytest.mark.parametrize("strategy", ["last", "avg", "median"])
def test_doubling_quantity_doubles_estimate(strategy):
    records = _records(0.25, 0.5, 0.75)
    single = estimate_price(records, 4, "un", strategy)
    assert estimate_price(records, 8, "un", strategy) == pytest.approx(single * 2)


def test_estimate_converts_requested_unit_to_base():
    records = [_record(0.003, days_ago=0), _record(0.0032, days_ago=3)]
    assert estimate_price(records, 2, "kg", "median") == 6.20
    assert estimate_price(records, 2000, "g", "median") == 6.20


def test_invalid_unit_prices_fall_back_to_latest_record():
    records = [
        _record(math.nan, base_qty=500, price=2.5, days_ago=0),
        _record(0.0, base_qty=100, price=9.0, days_ago=1),
    ]
    # 2.5 / 500 g = 0.005 per gram
    assert estimate_price(records, 1, "kg") == 5.0


def test_degenerate_fallback_returns_zero():
    records = [_record(math.inf, base_qty=0, price=2.0)]
    assert estimate_price(records, 1, "kg") == 0.0
    assert estimate_price([], 1, "kg") == 0.0


@pytest.mark.parametrize("qty", [0, -1, None])
def test_non_positive_quantity_estimates_zero(qty):
    assert estimate_price(_records(1.0), qty, "g") == 0.0


def test_unknown_strategy_is_rejected():
    with pytest.raises(ValueError):
        estimate_price(_records(1.0), 1, "g", "mode")
