"""Tests for food and meal nutrient totals."""

from dataclasses import replace
from datetime import UTC, datetime
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest

from fitness_tracker.domain.errors import IndexOutOfRange, ValidationError
from fitness_tracker.domain.nutrition import MealRecord, MealSlot, NutrientProfile
from fitness_tracker.services import nutrition
from tests.conftest import make_food


def _empty_meal() -> MealRecord:
    return MealRecord(
        id=uuid4(),
        owner_id=uuid4(),
        logged_at=datetime(2024, 3, 1, 12, 0, tzinfo=UTC),
        slot=MealSlot.LUNCH,
    )


def test_food_totals_scale_with_quantity() -> None:
    food = nutrition.compute_food_totals(
        make_food(calories=52, protein=0.3, quantity=2.5, carbs=14)
    )

    assert food.totals.calories == pytest.approx(130)
    assert food.totals.protein == pytest.approx(0.75)
    assert food.totals.carbs == pytest.approx(35)
    assert food.totals.fat == 0


def test_add_remove_and_update_keep_totals_consistent() -> None:
    meal = nutrition.add_food(_empty_meal(), make_food(calories=100, quantity=2))
    assert meal.totals.calories == 200
    assert meal.totals.protein == 20

    meal = nutrition.add_food(meal, make_food(calories=50, protein=5, quantity=1))
    assert meal.totals.calories == 250
    assert meal.totals.protein == 25
    assert len(meal.foods) == 2

    meal = nutrition.remove_food(meal, 0)
    assert meal.totals.calories == 50
    assert meal.totals.protein == 5
    assert [food.totals.calories for food in meal.foods] == [50]

    meal = nutrition.update_food_quantity(meal, 0, 3)
    assert meal.totals.calories == 150
    assert meal.foods[0].quantity == 3


def test_empty_meal_has_zero_totals() -> None:
    meal = nutrition.recompute_meal(_empty_meal())

    assert meal.totals == NutrientProfile()
    assert meal.micronutrient_totals == {}


def test_removing_last_food_resets_totals() -> None:
    meal = nutrition.add_food(_empty_meal(), make_food(calories=300))
    meal = nutrition.remove_food(meal, 0)

    assert meal.foods == ()
    assert meal.totals.calories == 0


def test_remove_out_of_range_raises_and_leaves_meal() -> None:
    meal = nutrition.add_food(_empty_meal(), make_food())

    with pytest.raises(IndexOutOfRange) as exc_info:
        nutrition.remove_food(meal, 1)

    assert exc_info.value.index == 1
    assert exc_info.value.size == 1
    assert len(meal.foods) == 1


def test_negative_index_is_out_of_range() -> None:
    meal = nutrition.add_food(_empty_meal(), make_food())

    with pytest.raises(IndexOutOfRange):
        nutrition.update_food_quantity(meal, -1, 2)


def test_update_quantity_rejects_non_positive() -> None:
    meal = nutrition.add_food(_empty_meal(), make_food(calories=100))

    with pytest.raises(ValidationError) as exc_info:
        nutrition.update_food_quantity(meal, 0, 0)

    assert exc_info.value.field == "quantity"
    assert meal.totals.calories == 100


def test_add_food_rejects_negative_nutrients() -> None:
    with pytest.raises(ValidationError) as exc_info:
        nutrition.add_food(_empty_meal(), make_food(calories=-5))

    assert exc_info.value.field == "per_unit.calories"


def test_add_food_rejects_blank_name() -> None:
    with pytest.raises(ValidationError):
        nutrition.add_food(_empty_meal(), make_food(name="  "))


def test_micronutrients_are_summed_across_foods() -> None:
    first = replace(make_food(quantity=2), micronutrients={"iron": 1.5})
    second = replace(
        make_food(quantity=1), micronutrients={"iron": 1.0, "vitamin_c": 30.0}
    )

    meal = nutrition.add_food(nutrition.add_food(_empty_meal(), first), second)

    assert meal.micronutrient_totals == {"iron": 4.0, "vitamin_c": 30.0}


@pytest.mark.parametrize(
    ("hour", "expected"),
    [(4, "night"), (5, "morning"), (12, "afternoon"), (17, "evening"), (21, "night")],
)
def test_meal_time_of_day_boundaries(hour: int, expected: str) -> None:
    logged_at = datetime(2024, 3, 1, hour, 30, tzinfo=UTC)

    assert nutrition.meal_time_of_day(logged_at, ZoneInfo("UTC")) == expected


def test_meal_time_of_day_uses_timezone() -> None:
    logged_at = datetime(2024, 3, 1, 14, 0, tzinfo=UTC)

    assert nutrition.meal_time_of_day(logged_at, ZoneInfo("America/New_York")) == (
        "morning"
    )
