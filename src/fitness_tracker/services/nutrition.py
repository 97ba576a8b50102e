"""Nutrient totals for food items and meals.

Every function here is pure: it takes a record and returns a new one whose
cached totals are consistent with its food list. Meal totals are never written
directly, only recomputed from the foods.
"""

import logging
from dataclasses import replace
from datetime import datetime
from zoneinfo import ZoneInfo

from fitness_tracker.domain.errors import IndexOutOfRange
from fitness_tracker.domain.nutrition import (
    NUTRIENT_FIELDS,
    FoodItem,
    MealRecord,
    NutrientProfile,
)
from fitness_tracker.services.validation import validate_food, validate_quantity

logger = logging.getLogger(__name__)

MORNING_START_HOUR = 5
AFTERNOON_START_HOUR = 12
EVENING_START_HOUR = 17
NIGHT_START_HOUR = 21


def compute_food_totals(food: FoodItem) -> FoodItem:
    """Return the food with totals set to per-unit values times quantity."""
    totals = NutrientProfile(
        **{
            name: getattr(food.per_unit, name) * food.quantity
            for name in NUTRIENT_FIELDS
        }
    )
    micronutrient_totals = {
        name: value * food.quantity for name, value in food.micronutrients.items()
    }
    return replace(food, totals=totals, micronutrient_totals=micronutrient_totals)


def sum_profiles(profiles: list[NutrientProfile]) -> NutrientProfile:
    """Sum nutrient profiles field by field."""
    return NutrientProfile(
        **{
            name: sum(getattr(profile, name) for profile in profiles)
            for name in NUTRIENT_FIELDS
        }
    )


def recompute_meal(meal: MealRecord) -> MealRecord:
    """Recompute every food's totals and then the meal totals."""
    foods = tuple(compute_food_totals(food) for food in meal.foods)
    micronutrient_totals: dict[str, float] = {}
    for food in foods:
        for name, value in food.micronutrient_totals.items():
            micronutrient_totals[name] = micronutrient_totals.get(name, 0.0) + value
    logger.debug("Recomputed totals for meal %s (%d foods)", meal.id, len(foods))
    return replace(
        meal,
        foods=foods,
        totals=sum_profiles([food.totals for food in foods]),
        micronutrient_totals=micronutrient_totals,
    )


def add_food(meal: MealRecord, food: FoodItem) -> MealRecord:
    """Append a food to the meal."""
    validate_food(food)
    return recompute_meal(replace(meal, foods=(*meal.foods, food)))


def remove_food(meal: MealRecord, index: int) -> MealRecord:
    """Remove the food at a position in the meal."""
    _check_index(meal, index)
    foods = meal.foods[:index] + meal.foods[index + 1 :]
    return recompute_meal(replace(meal, foods=foods))


def update_food_quantity(meal: MealRecord, index: int, quantity: float) -> MealRecord:
    """Change the quantity of the food at a position in the meal."""
    _check_index(meal, index)
    validate_quantity(quantity)
    foods = list(meal.foods)
    foods[index] = replace(foods[index], quantity=quantity)
    return recompute_meal(replace(meal, foods=tuple(foods)))


def meal_time_of_day(logged_at: datetime, tz: ZoneInfo) -> str:
    """Return the part of day a meal was eaten in the given timezone."""
    hour = logged_at.astimezone(tz).hour
    if MORNING_START_HOUR <= hour < AFTERNOON_START_HOUR:
        return "morning"
    if AFTERNOON_START_HOUR <= hour < EVENING_START_HOUR:
        return "afternoon"
    if EVENING_START_HOUR <= hour < NIGHT_START_HOUR:
        return "evening"
    return "night"


def _check_index(meal: MealRecord, index: int) -> None:
    if not 0 <= index < len(meal.foods):
        raise IndexOutOfRange(index, len(meal.foods))
