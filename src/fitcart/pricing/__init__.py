"""Unit normalization, purchase-history aggregation and price estimation."""

from fitcart.pricing.categories import DEFAULT_CATEGORY, classify_item
from fitcart.pricing.units import (
    UnitInfo,
    canonical_unit,
    group_key,
    normalize_unit,
    to_base_quantity,
)

__all__ = [
    "DEFAULT_CATEGORY",
    "UnitInfo",
    "canonical_unit",
    "classify_item",
    "group_key",
    "normalize_unit",
    "to_base_quantity",
]
