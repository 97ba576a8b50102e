"""Pydantic models for request payloads."""

from datetime import UTC, date, datetime

from pydantic import AwareDatetime, BaseModel, Field

from fitness_tracker.domain.nutrition import FoodItem, FoodUnit, MealSlot, NutrientProfile
from fitness_tracker.domain.sleep import (
    DataSource,
    Disturbance,
    DisturbanceKind,
    HeartRateSummary,
    SleepGoals,
    SleepStages,
)
from fitness_tracker.domain.user_stats import Achievement, AchievementKind


class FoodItemIn(BaseModel):
    """Food item payload with per-unit nutrient values."""

    name: str
    quantity: float
    unit: FoodUnit
    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0
    cholesterol: float = 0.0
    vitamins: dict[str, float] = Field(default_factory=dict)
    minerals: dict[str, float] = Field(default_factory=dict)
    brand: str | None = None
    notes: str | None = None

    def to_domain(self) -> FoodItem:
        """Convert to a domain food item."""
        return FoodItem(
            name=self.name,
            quantity=self.quantity,
            unit=self.unit,
            per_unit=NutrientProfile(
                calories=self.calories,
                protein=self.protein,
                carbs=self.carbs,
                fat=self.fat,
                fiber=self.fiber,
                sugar=self.sugar,
                sodium=self.sodium,
                cholesterol=self.cholesterol,
            ),
            micronutrients={**self.vitamins, **self.minerals},
            brand=self.brand,
            notes=self.notes,
        )


class MealIn(BaseModel):
    """Payload for logging a meal."""

    slot: MealSlot
    logged_at: AwareDatetime | None = None
    foods: list[FoodItemIn] = Field(default_factory=list)
    notes: str | None = None


class QuantityIn(BaseModel):
    """Payload for changing a food quantity."""

    quantity: float


class StagesIn(BaseModel):
    """Stage durations in hours."""

    deep: float | None = None
    light: float | None = None
    rem: float | None = None
    awake: float | None = None

    def to_domain(self) -> SleepStages:
        """Convert to domain stages."""
        return SleepStages(
            deep=self.deep, light=self.light, rem=self.rem, awake=self.awake
        )


class HeartRateIn(BaseModel):
    """Heart rate readings in bpm."""

    min_bpm: float | None = None
    max_bpm: float | None = None
    average_bpm: float | None = None
    resting_bpm: float | None = None

    def to_domain(self) -> HeartRateSummary:
        """Convert to a domain heart rate summary."""
        return HeartRateSummary(
            min_bpm=self.min_bpm,
            max_bpm=self.max_bpm,
            average_bpm=self.average_bpm,
            resting_bpm=self.resting_bpm,
        )


class GoalsIn(BaseModel):
    """Sleep targets."""

    target_duration: float | None = None
    target_quality: int | None = None

    def to_domain(self) -> SleepGoals:
        """Convert to domain goals."""
        return SleepGoals(
            target_duration=self.target_duration,
            target_quality=self.target_quality,
        )


class SleepSessionIn(BaseModel):
    """Payload for recording a completed sleep session."""

    start_time: AwareDatetime
    end_time: AwareDatetime
    quality: int
    duration: float | None = None
    stages: StagesIn | None = None
    heart_rate: HeartRateIn | None = None
    goals: GoalsIn | None = None
    notes: str | None = None
    data_source: DataSource = DataSource.MANUAL


class DisturbanceIn(BaseModel):
    """Payload for a sleep disturbance."""

    kind: DisturbanceKind
    description: str | None = None
    occurred_at: AwareDatetime | None = None
    duration_minutes: float | None = None

    def to_domain(self) -> Disturbance:
        """Convert to a domain disturbance."""
        return Disturbance(
            kind=self.kind,
            description=self.description,
            occurred_at=self.occurred_at,
            duration_minutes=self.duration_minutes,
        )


class QualityIn(BaseModel):
    """Payload for updating sleep quality."""

    quality: int
    notes: str | None = None


class ReviewIn(BaseModel):
    """Payload for reviewing a catalog item."""

    rating: int
    comment: str | None = None


class WorkoutIn(BaseModel):
    """Payload for a completed workout."""

    calories_burned: float | None = None
    steps: int | None = None
    distance: float | None = None
    workout_day: date | None = None


class AchievementIn(BaseModel):
    """Payload for awarding an achievement."""

    kind: AchievementKind
    name: str
    description: str | None = None
    icon: str | None = None

    def to_domain(self) -> Achievement:
        """Convert to a domain achievement earned now."""
        return Achievement(
            kind=self.kind,
            name=self.name,
            description=self.description,
            icon=self.icon,
            earned_at=datetime.now(tz=UTC),
        )


class TimezoneIn(BaseModel):
    """Payload for setting the user's timezone."""

    timezone: str
