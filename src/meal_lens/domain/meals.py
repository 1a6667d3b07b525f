"""Domain models for captured meals."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Macros:
    """Estimated calories and macronutrient grams for a meal."""

    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fat: int = 0

    def __add__(self, other: "Macros") -> "Macros":
        return Macros(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
        )


@dataclass(frozen=True)
class MealRecord:
    """A captured meal with its stored photo and analysis text."""

    id: str
    timestamp: int
    image: str
    macros: Macros
    raw_text: str
