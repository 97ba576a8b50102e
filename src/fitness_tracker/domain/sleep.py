"""Domain models for sleep tracking."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID


class SleepStage(str, Enum):
    """Partition of a sleep session."""

    DEEP = "deep"
    LIGHT = "light"
    REM = "rem"
    AWAKE = "awake"


class SleepCategory(str, Enum):
    """Label derived from the sleep score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    VERY_POOR = "very-poor"


class DisturbanceKind(str, Enum):
    """Cause of a sleep disturbance."""

    NOISE = "noise"
    LIGHT = "light"
    TEMPERATURE = "temperature"
    PAIN = "pain"
    ANXIETY = "anxiety"
    BATHROOM = "bathroom"
    PARTNER = "partner"
    CHILD = "child"
    PET = "pet"
    OTHER = "other"


class DataSource(str, Enum):
    """Where a sleep session was recorded."""

    MANUAL = "manual"
    WEARABLE = "wearable"
    APP = "app"
    OTHER = "other"


@dataclass(frozen=True)
class SleepStages:
    """Stage durations in hours; None means not reported."""

    deep: float | None = None
    light: float | None = None
    rem: float | None = None
    awake: float | None = None

    def get(self, stage: SleepStage) -> float | None:
        """Return the duration reported for a stage."""
        return getattr(self, stage.value)


@dataclass(frozen=True)
class HeartRateSummary:
    """Heart rate readings during sleep, in bpm."""

    min_bpm: float | None = None
    max_bpm: float | None = None
    average_bpm: float | None = None
    resting_bpm: float | None = None


@dataclass(frozen=True)
class SleepGoals:
    """Optional sleep targets."""

    target_duration: float | None = None
    target_quality: int | None = None


@dataclass(frozen=True)
class Disturbance:
    """Something that interrupted sleep."""

    kind: DisturbanceKind
    description: str | None = None
    occurred_at: datetime | None = None
    duration_minutes: float | None = None


@dataclass(frozen=True)
class SleepMetrics:
    """Values derived from a session's raw fields."""

    duration: float
    stage_percentages: dict[SleepStage, float] | None
    efficiency: float | None
    sleep_debt: float | None
    score: int
    category: SleepCategory
    duration_achieved: bool
    quality_achieved: bool


@dataclass(frozen=True)
class SleepSession:
    """A completed sleep session and its derived metrics."""

    id: UUID
    owner_id: UUID
    start_time: datetime
    end_time: datetime
    quality: int
    metrics: SleepMetrics
    reported_duration: float | None = None
    stages: SleepStages = field(default_factory=SleepStages)
    heart_rate: HeartRateSummary | None = None
    goals: SleepGoals = field(default_factory=SleepGoals)
    disturbances: tuple[Disturbance, ...] = ()
    notes: str | None = None
    data_source: DataSource = DataSource.MANUAL
    version: int = 0
