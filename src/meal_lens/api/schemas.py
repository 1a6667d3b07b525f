"""Response models for the meal capture API."""

from typing import Literal

from pydantic import BaseModel

from meal_lens.domain.meals import Macros, MealRecord
from meal_lens.domain.submissions import (
    Failed,
    Idle,
    ReadyToSubmit,
    Submitting,
    SubmissionState,
    Succeeded,
)
from meal_lens.services.macros import strip_macro_lines


class MacrosOut(BaseModel):
    """Calories and macronutrient grams."""

    calories: int
    protein: int
    carbs: int
    fat: int

    @classmethod
    def from_domain(cls, macros: Macros) -> "MacrosOut":
        return cls(
            calories=macros.calories,
            protein=macros.protein,
            carbs=macros.carbs,
            fat=macros.fat,
        )


class MealOut(BaseModel):
    """A stored meal."""

    id: str
    timestamp: int
    image: str
    macros: MacrosOut
    raw_text: str
    notes: str

    @classmethod
    def from_domain(cls, meal: MealRecord) -> "MealOut":
        return cls(
            id=meal.id,
            timestamp=meal.timestamp,
            image=meal.image,
            macros=MacrosOut.from_domain(meal.macros),
            raw_text=meal.raw_text,
            notes=strip_macro_lines(meal.raw_text),
        )


class MealListOut(BaseModel):
    """Meals newest first with their totals."""

    meals: list[MealOut]
    totals: MacrosOut


class SubmissionOut(BaseModel):
    """Current state of the submission workflow."""

    status: Literal["idle", "ready", "submitting", "succeeded", "failed"]
    preview: str | None = None
    filename: str | None = None
    error: str | None = None
    retry_available: bool = False
    meal: MealOut | None = None

    @classmethod
    def from_state(cls, state: SubmissionState) -> "SubmissionOut":
        if isinstance(state, Idle):
            return cls(status="idle")
        if isinstance(state, ReadyToSubmit):
            return cls(
                status="ready",
                preview=state.image.preview,
                filename=state.image.filename,
            )
        if isinstance(state, Submitting):
            return cls(
                status="submitting",
                preview=state.image.preview,
                filename=state.image.filename,
            )
        if isinstance(state, Succeeded):
            return cls(status="succeeded", meal=MealOut.from_domain(state.record))
        if isinstance(state, Failed):
            return cls(
                status="failed",
                preview=state.image.preview,
                filename=state.image.filename,
                error=state.message,
                retry_available=True,
            )
        raise TypeError(f"Unknown submission state: {state!r}")
