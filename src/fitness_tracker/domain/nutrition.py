"""Nutrition domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID


class MealSlot(str, Enum):
    """Eating occasion a meal is logged under."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    PRE_WORKOUT = "pre-workout"
    POST_WORKOUT = "post-workout"


class FoodUnit(str, Enum):
    """Unit a food quantity is measured in."""

    GRAM = "g"
    KILOGRAM = "kg"
    MILLILITER = "ml"
    LITER = "l"
    CUP = "cup"
    TABLESPOON = "tbsp"
    TEASPOON = "tsp"
    PIECE = "piece"
    SLICE = "slice"
    SERVING = "serving"


@dataclass(frozen=True)
class NutrientProfile:
    """Nutrient amounts, either per unit or totalled."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0
    cholesterol: float = 0.0


NUTRIENT_FIELDS: tuple[str, ...] = (
    "calories",
    "protein",
    "carbs",
    "fat",
    "fiber",
    "sugar",
    "sodium",
    "cholesterol",
)


@dataclass(frozen=True)
class FoodItem:
    """A food eaten as part of a meal."""

    name: str
    quantity: float
    unit: FoodUnit
    per_unit: NutrientProfile
    micronutrients: dict[str, float] = field(default_factory=dict)
    totals: NutrientProfile = field(default_factory=NutrientProfile)
    micronutrient_totals: dict[str, float] = field(default_factory=dict)
    brand: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class MealRecord:
    """A logged eating occasion with cached totals."""

    id: UUID
    owner_id: UUID
    logged_at: datetime
    slot: MealSlot
    foods: tuple[FoodItem, ...] = ()
    totals: NutrientProfile = field(default_factory=NutrientProfile)
    micronutrient_totals: dict[str, float] = field(default_factory=dict)
    notes: str | None = None
    version: int = 0
