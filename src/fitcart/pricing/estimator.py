"""Price estimation from historical per-base-unit prices."""

from __future__ import annotations

import math
from statistics import mean, median
from typing import Optional, Sequence

from fitcart.pricing.history import HistoryRecord
from fitcart.pricing.units import to_base_quantity

STRATEGIES = ("last", "avg", "median")


def _is_valid(record: HistoryRecord) -> bool:
    return math.isfinite(record.unit_price_base) and record.unit_price_base > 0


def pick_unit_price(records: Sequence[HistoryRecord], strategy: str = "median") -> Optional[float]:
    """Representative price per base unit, or ``None`` when nothing usable exists.

    ``records`` must be ordered newest first, as produced by the aggregator.
    """

    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown pricing strategy '{strategy}'")

    valid = [record.unit_price_base for record in records if _is_valid(record)]
    if valid:
        if strategy == "last":
            return valid[0]
        if strategy == "avg":
            return mean(valid)
        return median(valid)

    if not records:
        return None
    latest = records[0]
    if not math.isfinite(latest.base_qty) or latest.base_qty <= 0:
        return None
    return latest.price / latest.base_qty


def estimate_price(
    records: Sequence[HistoryRecord],
    desired_qty: Optional[float],
    desired_unit: Optional[str],
    strategy: str = "median",
) -> float:
    """Estimate the total price of ``desired_qty`` ``desired_unit`` from history.

    A non-positive requested quantity always estimates to 0.
    """

    unit_price = pick_unit_price(records, strategy)
    qty = float(desired_qty or 0)
    if unit_price is None or not math.isfinite(qty) or qty <= 0:
        return 0.0

    total = unit_price * to_base_quantity(qty, desired_unit)
    if not math.isfinite(total) or total <= 0:
        return 0.0
    return round(total, 2)


__all__ = ["STRATEGIES", "estimate_price", "pick_unit_price"]
