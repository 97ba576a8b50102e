"""Explicit field validators for each record kind."""

import math

from fitness_tracker.domain.errors import ValidationError
from fitness_tracker.domain.nutrition import NUTRIENT_FIELDS, FoodItem
from fitness_tracker.domain.sleep import (
    Disturbance,
    HeartRateSummary,
    SleepGoals,
    SleepStages,
)

MIN_QUALITY = 1
MAX_QUALITY = 10
MAX_HOURS = 24.0
MIN_HEART_RATE = 30.0
MAX_HEART_RATE = 200.0
MIN_TARGET_DURATION = 6.0
MAX_TARGET_DURATION = 10.0
MIN_TARGET_QUALITY = 7
MIN_RATING = 1
MAX_RATING = 5

STAGE_FIELDS: tuple[str, ...] = ("deep", "light", "rem", "awake")
HEART_RATE_FIELDS: tuple[str, ...] = (
    "min_bpm",
    "max_bpm",
    "average_bpm",
    "resting_bpm",
)


def validate_food(food: FoodItem) -> None:
    """Validate the raw fields of a food item."""
    if not food.name or not food.name.strip():
        raise ValidationError("name", "must not be empty")
    validate_quantity(food.quantity)
    for name in NUTRIENT_FIELDS:
        _require_non_negative(f"per_unit.{name}", getattr(food.per_unit, name))
    for name, value in food.micronutrients.items():
        _require_non_negative(f"micronutrients.{name}", value)


def validate_quantity(quantity: float) -> None:
    """Quantities must be finite and strictly positive."""
    if not _is_number(quantity) or quantity <= 0:
        raise ValidationError("quantity", "must be greater than zero")


def validate_quality(quality: int) -> None:
    """Sleep quality is an integer in [1, 10]."""
    if not _is_integer(quality) or not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise ValidationError(
            "quality", f"must be an integer between {MIN_QUALITY} and {MAX_QUALITY}"
        )


def validate_stages(stages: SleepStages) -> None:
    """Stage durations are hours within a single day."""
    for name in STAGE_FIELDS:
        value = getattr(stages, name)
        if value is None:
            continue
        _require_non_negative(f"stages.{name}", value)
        if value > MAX_HOURS:
            raise ValidationError(f"stages.{name}", "cannot exceed 24 hours")


def validate_heart_rate(heart_rate: HeartRateSummary | None) -> None:
    """Heart rate readings must be physiologically plausible."""
    if heart_rate is None:
        return
    for name in HEART_RATE_FIELDS:
        value = getattr(heart_rate, name)
        if value is None:
            continue
        if not _is_number(value) or not MIN_HEART_RATE <= value <= MAX_HEART_RATE:
            raise ValidationError(
                f"heart_rate.{name}", "must be between 30 and 200 bpm"
            )


def validate_goals(goals: SleepGoals) -> None:
    """Targets must be within the supported goal ranges."""
    if goals.target_duration is not None and (
        not _is_number(goals.target_duration)
        or not MIN_TARGET_DURATION <= goals.target_duration <= MAX_TARGET_DURATION
    ):
        raise ValidationError(
            "goals.target_duration", "must be between 6 and 10 hours"
        )
    if goals.target_quality is not None and (
        not _is_integer(goals.target_quality)
        or not MIN_TARGET_QUALITY <= goals.target_quality <= MAX_QUALITY
    ):
        raise ValidationError("goals.target_quality", "must be between 7 and 10")


def validate_duration(duration: float) -> None:
    """Session duration in hours must be positive and at most a day."""
    if not _is_number(duration) or duration <= 0:
        raise ValidationError("duration", "must be greater than zero")
    if duration > MAX_HOURS:
        raise ValidationError("duration", "cannot exceed 24 hours")


def validate_disturbance(disturbance: Disturbance) -> None:
    """Disturbance durations are non-negative minutes."""
    if disturbance.duration_minutes is not None:
        _require_non_negative(
            "disturbance.duration_minutes", disturbance.duration_minutes
        )


def validate_rating(rating: int) -> None:
    """Review ratings are integers in [1, 5]."""
    if not _is_integer(rating) or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(
            "rating", f"must be an integer between {MIN_RATING} and {MAX_RATING}"
        )


def validate_workout_delta(field: str, value: float | None) -> float:
    """Return a workout delta, treating a missing value as zero."""
    if value is None:
        return 0
    _require_non_negative(field, value)
    return value


def _require_non_negative(field: str, value: object) -> None:
    if not _is_number(value) or value < 0:
        raise ValidationError(field, "must be a non-negative number")


def _is_number(value: object) -> bool:
    return (
        isinstance(value, int | float)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _is_integer(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
