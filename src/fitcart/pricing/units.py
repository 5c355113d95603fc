"""Unit normalization for shopping items.

Every comparison between quantities goes through :func:`normalize_unit`. Units
fall into three conversion groups:

* ``weight``: base unit ``g`` (``g``, ``kg``)
* ``volume``: base unit ``ml`` (``ml``, ``l``)
* ``other``: the unit is its own base with factor 1 (``un``, ``pc``, ``slice``,
  ``cup``, ``pinch``...). Two different "other" units are never converted into
  each other.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

UnitGroup = Literal["weight", "volume", "other"]

DEFAULT_UNIT = "un"


@dataclass(frozen=True)
class UnitInfo:
    """Canonical unit with its conversion group and multiplier to the group base."""

    canon: str
    group: UnitGroup
    base: str
    factor: float


CONVERTIBLE_UNITS: dict[str, UnitInfo] = {
    "g": UnitInfo(canon="g", group="weight", base="g", factor=1.0),
    "kg": UnitInfo(canon="kg", group="weight", base="g", factor=1000.0),
    "ml": UnitInfo(canon="ml", group="volume", base="ml", factor=1.0),
    "l": UnitInfo(canon="l", group="volume", base="ml", factor=1000.0),
}

UNIT_SYNONYMS: dict[str, str] = {
    # weight
    "gr": "g",
    "gram": "g",
    "grams": "g",
    "grama": "g",
    "gramas": "g",
    "kgs": "kg",
    "kilo": "kg",
    "kilos": "kg",
    "kilogram": "kg",
    "kilograms": "kg",
    "quilo": "kg",
    "quilos": "kg",
    # volume
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "mililitro": "ml",
    "mililitros": "ml",
    "lt": "l",
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    "litro": "l",
    "litros": "l",
    # counts
    "unit": "un",
    "units": "un",
    "unidade": "un",
    "unidades": "un",
    "each": "un",
    "ea": "un",
    "pcs": "pc",
    "piece": "pc",
    "pieces": "pc",
}


def canonical_unit(raw: Optional[str]) -> str:
    """Return the canonical short form of ``raw`` (``"un"`` when empty)."""

    key = str(raw or "").strip().lower()
    if not key:
        return DEFAULT_UNIT
    return UNIT_SYNONYMS.get(key, key)


def normalize_unit(raw: Optional[str]) -> UnitInfo:
    """Resolve a free-text unit into a :class:`UnitInfo`; never raises."""

    canon = canonical_unit(raw)
    known = CONVERTIBLE_UNITS.get(canon)
    if known is not None:
        return known
    return UnitInfo(canon=canon, group="other", base=canon, factor=1.0)


def to_base_quantity(qty: Optional[float], raw_unit: Optional[str]) -> float:
    """Convert ``qty`` expressed in ``raw_unit`` to the group's base unit."""

    return float(qty or 0) * normalize_unit(raw_unit).factor


def normalize_name(name: Optional[str]) -> str:
    return str(name or "").strip().lower()


def group_key(name: Optional[str], raw_unit: Optional[str]) -> str:
    """History grouping key: same normalized name and same conversion group."""

    return f"{normalize_name(name)}::{normalize_unit(raw_unit).group}"


__all__ = [
    "DEFAULT_UNIT",
    "UnitGroup",
    "UnitInfo",
    "canonical_unit",
    "group_key",
    "normalize_name",
    "normalize_unit",
    "to_base_quantity",
]
