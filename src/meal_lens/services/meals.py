"""Persisted, newest-first collection of captured meals."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from meal_lens.domain.errors import PersistedStateCorruptError
from meal_lens.domain.meals import Macros, MealRecord

DEFAULT_STORAGE_KEY = "nutrition_tracker_meals"

_logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Durable key-value persistence for serialized state."""

    def get(self, key: str) -> str | None:
        """Return the stored value or None when the key is absent."""

    def set(self, key: str, value: str) -> None:
        """Overwrite the value stored under the key."""


class _StoredMacros(BaseModel):
    calories: int = Field(ge=0, strict=True)
    protein: int = Field(ge=0, strict=True)
    carbs: int = Field(ge=0, strict=True)
    fat: int = Field(ge=0, strict=True)


class _StoredMeal(BaseModel):
    id: str = Field(strict=True)
    timestamp: int = Field(strict=True)
    image: str = Field(strict=True)
    macros: _StoredMacros
    raw_text: str = Field(alias="rawText", strict=True)


_STORED_MEALS = TypeAdapter(list[_StoredMeal])


def encode_meals(meals: list[MealRecord]) -> str:
    """Serialize meals to the stored JSON array shape."""
    stored = [
        _StoredMeal(
            id=meal.id,
            timestamp=meal.timestamp,
            image=meal.image,
            macros=_StoredMacros(
                calories=meal.macros.calories,
                protein=meal.macros.protein,
                carbs=meal.macros.carbs,
                fat=meal.macros.fat,
            ),
            rawText=meal.raw_text,
        )
        for meal in meals
    ]
    return _STORED_MEALS.dump_json(stored, by_alias=True).decode("utf-8")


def decode_meals(raw: str) -> list[MealRecord]:
    """Parse the stored JSON array shape back into meal records."""
    try:
        stored = _STORED_MEALS.validate_json(raw)
    except ValidationError as exc:
        raise PersistedStateCorruptError("Stored meals are not valid") from exc
    return [
        MealRecord(
            id=item.id,
            timestamp=item.timestamp,
            image=item.image,
            macros=Macros(
                calories=item.macros.calories,
                protein=item.macros.protein,
                carbs=item.macros.carbs,
                fat=item.macros.fat,
            ),
            raw_text=item.raw_text,
        )
        for item in stored
    ]


@dataclass
class MealStore:
    """Owns the meal collection and writes it through to storage.

    The newest meal is always at index 0. Every mutation is saved before
    returning so a restart never loses a committed insert or delete.
    """

    storage: KeyValueStorage
    key: str = DEFAULT_STORAGE_KEY
    _meals: list[MealRecord] = field(default_factory=list, init=False, repr=False)

    def load(self) -> list[MealRecord]:
        """Replace the in-memory collection with the stored one."""
        try:
            raw = self.storage.get(self.key)
            self._meals = [] if raw is None else decode_meals(raw)
        except PersistedStateCorruptError:
            _logger.warning(
                "Stored meals are corrupt, starting empty", extra={"key": self.key}
            )
            self._meals = []
        return list(self._meals)

    def save(self) -> None:
        """Overwrite storage with the full collection."""
        self.storage.set(self.key, encode_meals(self._meals))

    def insert(self, record: MealRecord) -> None:
        """Add a meal at the front and persist."""
        self._commit([record, *self._meals])

    def delete(self, meal_id: str) -> bool:
        """Remove the meal with the id if present and persist."""
        remaining = [meal for meal in self._meals if meal.id != meal_id]
        removed = len(remaining) != len(self._meals)
        self._commit(remaining)
        return removed

    def get(self, meal_id: str) -> MealRecord | None:
        """Return a meal by id."""
        for meal in self._meals:
            if meal.id == meal_id:
                return meal
        return None

    def list_meals(self) -> tuple[MealRecord, ...]:
        """Return a snapshot of meals, newest first."""
        return tuple(self._meals)

    def _commit(self, meals: list[MealRecord]) -> None:
        # Memory only changes once storage accepted the write.
        self.storage.set(self.key, encode_meals(meals))
        self._meals = meals
