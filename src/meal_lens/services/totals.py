"""Aggregate totals over captured meals."""

from collections.abc import Iterable

from meal_lens.domain.meals import Macros, MealRecord


def aggregate(meals: Iterable[MealRecord]) -> Macros:
    """Return the element-wise sum of macros across meals."""
    total = Macros()
    for meal in meals:
        total = total + meal.macros
    return total
