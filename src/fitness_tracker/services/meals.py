"""Meal logging service."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from fitness_tracker.domain.nutrition import FoodItem, MealRecord, MealSlot
from fitness_tracker.services import nutrition


class MealRepository(Protocol):
    """Persistence interface for meal records."""

    def create_meal(self, meal: MealRecord) -> MealRecord:
        """Persist a new meal and return it."""

    def get_meal(self, meal_id: UUID) -> MealRecord | None:
        """Return a meal by id, if present."""

    def update_meal(self, meal: MealRecord) -> MealRecord:
        """Save a meal if its version is current and return the stored record.

        Raises ConflictRetryable when the stored version has moved on.
        """

    def list_meals(
        self, owner_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meals logged in [start, end], in any order."""


@dataclass
class MealService:
    """Applies food list mutations and persists recomputed meals."""

    repository: MealRepository

    def log_meal(
        self,
        owner_id: UUID,
        slot: MealSlot,
        foods: list[FoodItem],
        logged_at: datetime | None = None,
        notes: str | None = None,
    ) -> MealRecord:
        """Create a meal from an initial food list."""
        meal = MealRecord(
            id=uuid4(),
            owner_id=owner_id,
            logged_at=logged_at or datetime.now(tz=UTC),
            slot=slot,
            notes=notes,
        )
        for food in foods:
            meal = nutrition.add_food(meal, food)
        return self.repository.create_meal(nutrition.recompute_meal(meal))

    def get_meal(self, owner_id: UUID, meal_id: UUID) -> MealRecord | None:
        """Return a meal owned by the user."""
        meal = self.repository.get_meal(meal_id)
        if meal is None or meal.owner_id != owner_id:
            return None
        return meal

    def add_food(
        self, owner_id: UUID, meal_id: UUID, food: FoodItem
    ) -> MealRecord | None:
        """Append a food and refresh totals."""
        meal = self.get_meal(owner_id, meal_id)
        if meal is None:
            return None
        return self.repository.update_meal(nutrition.add_food(meal, food))

    def remove_food(
        self, owner_id: UUID, meal_id: UUID, index: int
    ) -> MealRecord | None:
        """Remove a food by position and refresh totals."""
        meal = self.get_meal(owner_id, meal_id)
        if meal is None:
            return None
        return self.repository.update_meal(nutrition.remove_food(meal, index))

    def update_food_quantity(
        self, owner_id: UUID, meal_id: UUID, index: int, quantity: float
    ) -> MealRecord | None:
        """Change a food's quantity and refresh totals."""
        meal = self.get_meal(owner_id, meal_id)
        if meal is None:
            return None
        return self.repository.update_meal(
            nutrition.update_food_quantity(meal, index, quantity)
        )
