"""Domain models for user statistics and gamification."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from uuid import UUID


class AchievementKind(str, Enum):
    """Category of an achievement."""

    STREAK = "streak"
    WORKOUT = "workout"
    GOAL = "goal"
    SOCIAL = "social"
    SPECIAL = "special"


@dataclass(frozen=True)
class Achievement:
    """An achievement earned by a user."""

    kind: AchievementKind
    name: str
    earned_at: datetime
    description: str | None = None
    icon: str | None = None


@dataclass(frozen=True)
class UserStats:
    """Cumulative counters and progression for one user."""

    user_id: UUID
    total_workouts: int = 0
    total_calories_burned: float = 0.0
    total_steps: int = 0
    total_distance: float = 0.0
    current_streak: int = 0
    longest_streak: int = 0
    last_workout_day: date | None = None
    points: int = 0
    level: int = 1
    achievements: tuple[Achievement, ...] = ()
    version: int = 0


@dataclass(frozen=True)
class Friendship:
    """Directed friend edge from user_id to friend_id."""

    user_id: UUID
    friend_id: UUID
    created_at: datetime
