"""Cumulative user statistics and achievement progression."""

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Protocol
from uuid import UUID

from fitness_tracker.domain.user_stats import Achievement, UserStats
from fitness_tracker.services.validation import validate_workout_delta

logger = logging.getLogger(__name__)

ACHIEVEMENT_POINTS = 10
POINTS_PER_LEVEL = 100


def record_workout(
    stats: UserStats,
    calories_burned: float | None = None,
    steps: int | None = None,
    distance: float | None = None,
    workout_day: date | None = None,
) -> UserStats:
    """Count a completed workout and add its totals."""
    calories = validate_workout_delta("calories_burned", calories_burned)
    step_count = validate_workout_delta("steps", steps)
    km = validate_workout_delta("distance", distance)
    updated = replace(
        stats,
        total_workouts=stats.total_workouts + 1,
        total_calories_burned=stats.total_calories_burned + calories,
        total_steps=stats.total_steps + step_count,
        total_distance=stats.total_distance + km,
    )
    if workout_day is not None:
        updated = advance_streak(updated, workout_day)
    return updated


def advance_streak(stats: UserStats, workout_day: date) -> UserStats:
    """Extend, keep, or restart the streak for a workout on the given day."""
    last = stats.last_workout_day
    if last is not None and workout_day <= last:
        return stats
    if last is not None and workout_day - last == timedelta(days=1):
        current = stats.current_streak + 1
    else:
        current = 1
    return replace(
        stats,
        current_streak=current,
        longest_streak=max(stats.longest_streak, current),
        last_workout_day=workout_day,
    )


def award_achievement(stats: UserStats, achievement: Achievement) -> UserStats:
    """Append an achievement, add its points and check for one level-up.

    At most one level is gained per award, even when the new point total
    passes several level thresholds.
    """
    points = stats.points + ACHIEVEMENT_POINTS
    level = stats.level
    if points >= level * POINTS_PER_LEVEL:
        level += 1
    return replace(
        stats,
        achievements=(*stats.achievements, achievement),
        points=points,
        level=level,
    )


class UserStatsRepository(Protocol):
    """Persistence interface for user statistics."""

    def get_stats(self, user_id: UUID) -> UserStats | None:
        """Return stats for a user, if present."""

    def create_stats(self, stats: UserStats) -> UserStats:
        """Persist new stats and return them."""

    def update_stats(self, stats: UserStats) -> UserStats:
        """Save stats if their version is current and return the stored record.

        Raises ConflictRetryable when the stored version has moved on.
        """


@dataclass
class UserStatsService:
    """Single writer of user counters, streaks, points and level."""

    repository: UserStatsRepository

    def get_stats(self, user_id: UUID) -> UserStats:
        """Return the user's stats, creating zeroed stats on first use."""
        existing = self.repository.get_stats(user_id)
        if existing is not None:
            return existing
        return self.repository.create_stats(UserStats(user_id=user_id))

    def record_workout(
        self,
        user_id: UUID,
        calories_burned: float | None = None,
        steps: int | None = None,
        distance: float | None = None,
        workout_day: date | None = None,
    ) -> UserStats:
        """Add a completed workout to the user's totals."""
        stats = self.get_stats(user_id)
        updated = record_workout(stats, calories_burned, steps, distance, workout_day)
        return self.repository.update_stats(updated)

    def award_achievement(self, user_id: UUID, achievement: Achievement) -> UserStats:
        """Award an achievement to the user."""
        stats = self.get_stats(user_id)
        updated = award_achievement(stats, achievement)
        if updated.level > stats.level:
            logger.info("User %s reached level %d", user_id, updated.level)
        return self.repository.update_stats(updated)
