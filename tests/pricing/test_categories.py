"""Keyword category classifier tests."""

from __future__ import annotations

import pytest

from fitcart.pricing.categories import DEFAULT_CATEGORY, classify_item


@pytest.mark.parametrize(
    ("name", "category"),
    [
        ("Peito de frango", "proteinas"),
        ("Chicken breast", "proteinas"),
        ("Banana prata", "frutas"),
        ("Arroz integral", "graos"),
        ("Leite desnatado", "laticinios"),
        ("Café moído", "bebidas"),
        ("Pasta de dente", "higiene"),
        ("Detergente", "limpeza"),
        ("Whey protein", DEFAULT_CATEGORY),
        ("", DEFAULT_CATEGORY),
    ],
)
def test_classify_item(name, category):
    assert classify_item(name) == category


def test_first_matching_category_wins():
    # "ovo" (proteinas) is listed before "pão" (graos)
    assert classify_item("pão com ovo") == "proteinas"
