"""Keyword-based category classifier for shopping items."""

from __future__ import annotations

from typing import Optional

DEFAULT_CATEGORY = "outros"

# Order matters: the first category with a matching keyword wins.
CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "proteinas",
        ("frango", "carne", "bife", "peru", "atum", "salmão", "ovos", "ovo",
         "chicken", "beef", "steak", "turkey", "tuna", "salmon", "egg"),
    ),
    (
        "frutas",
        ("banana", "maça", "maçã", "laranja", "abacate", "morango", "uva", "kiwi",
         "apple", "orange", "avocado", "strawberr", "grape", "melon"),
    ),
    (
        "vegetais",
        ("alface", "tomate", "cenoura", "brócolis", "couve", "pepino", "cebola", "alho",
         "lettuce", "tomato", "carrot", "broccoli", "cucumber", "onion", "garlic", "spinach"),
    ),
    (
        "graos",
        ("arroz", "feijao", "feijão", "aveia", "massa", "macarrão", "pão", "trigo",
         "rice", "bean", "oat", "spaghetti", "noodle", "bread", "wheat"),
    ),
    (
        "laticinios",
        ("leite", "queijo", "iogurte", "manteiga", "requeijão",
         "milk", "cheese", "yogurt", "yoghurt", "butter"),
    ),
    (
        "bebidas",
        ("água", "agua", "refrigerante", "sumo", "suco", "café", "cha", "chá",
         "water", "soda", "juice", "coffee", "tea"),
    ),
    (
        "higiene",
        ("sabão", "sabonete", "shampoo", "pasta de dente", "creme dental",
         "papel higiénico", "papel higienico", "toothpaste", "toilet paper"),
    ),
    (
        "limpeza",
        ("detergente", "amaciante", "desinfetante", "limpa", "alvejante", "água sanitária",
         "detergent", "softener", "disinfectant", "bleach"),
    ),
)


def classify_item(name: Optional[str]) -> str:
    """Return the first category whose keyword appears in ``name``."""

    lowered = str(name or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


__all__ = ["CATEGORY_KEYWORDS", "DEFAULT_CATEGORY", "classify_item"]
