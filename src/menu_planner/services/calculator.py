"""Per-meal nutrition calculation."""

import logging

from menu_planner.domain.nutrition import (
    IngredientNutrition,
    MealNutrition,
    NutritionTotals,
    ParsedIngredient,
)
from menu_planner.services.fact_table import FactTable
from menu_planner.services.parsing import parse_meal_text

_logger = logging.getLogger(__name__)


def calculate_meal(
    ingredients: list[ParsedIngredient], table: FactTable
) -> MealNutrition:
    """Resolve ingredients against the fact table and sum their nutrients.

    Totals are ``None`` when no ingredient resolves, which is distinct from
    a meal whose foods resolve but carry no nutrients.
    """
    items: list[IngredientNutrition] = []
    total: NutritionTotals | None = None
    for ingredient in ingredients:
        food = table.lookup(ingredient.name)
        if food is None:
            _logger.debug("No food match for %r", ingredient.name)
            items.append(IngredientNutrition(ingredient, None, NutritionTotals()))
            continue
        contribution = food.nutrients.scaled(ingredient.grams / food.base_qty)
        items.append(IngredientNutrition(ingredient, food, contribution))
        total = contribution if total is None else total + contribution
    return MealNutrition(items=items, totals=total)


def compute_totals(text: str | None, table: FactTable) -> NutritionTotals | None:
    """Return the nutrition of a meal description, or None when absent."""
    return calculate_meal(parse_meal_text(text), table).totals
