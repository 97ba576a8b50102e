"""Domain models for range summaries."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from fitness_tracker.domain.nutrition import NutrientProfile


class SummaryKind(str, Enum):
    """Record kind a summary is computed over."""

    NUTRITION = "nutrition"
    SLEEP = "sleep"


@dataclass(frozen=True)
class NutritionSummary:
    """Totals and means of meal nutrients over a range."""

    start: datetime
    end: datetime
    count: int
    sums: NutrientProfile
    means: NutrientProfile | None


@dataclass(frozen=True)
class SleepSummary:
    """Statistics of sleep sessions over a range."""

    start: datetime
    end: datetime
    count: int
    total_duration: float
    total_quality: float
    total_score: float
    mean_duration: float | None
    mean_quality: float | None
    mean_score: float | None
    min_quality: int | None
    max_quality: int | None
    duration_std_dev: float | None
    mean_efficiency: float | None
    mean_deep_sleep: float | None
    mean_rem_sleep: float | None


@dataclass(frozen=True)
class DailySummary:
    """Summary of one calendar day."""

    day: date
    summary: NutritionSummary | SleepSummary
