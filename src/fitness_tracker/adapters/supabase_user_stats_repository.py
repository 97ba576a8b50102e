"""Supabase repository for user statistics."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from fitness_tracker.domain.errors import ConflictRetryable
from fitness_tracker.domain.user_stats import Achievement, AchievementKind, UserStats
from fitness_tracker.services.user_stats import UserStatsRepository

TABLE = "user_stats"
UNIQUE_VIOLATION = "23505"


@dataclass
class SupabaseUserStatsRepository(UserStatsRepository):
    """Supabase implementation for user stats with versioned updates."""

    client: Client

    def get_stats(self, user_id: UUID) -> UserStats | None:
        """Return stats for a user."""
        response = (
            self.client.table(TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def create_stats(self, stats: UserStats) -> UserStats:
        """Insert a stats row, signalling a conflict if another writer won."""
        try:
            response = self.client.table(TABLE).insert(_to_row(stats)).execute()
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise ConflictRetryable("user_stats", stats.user_id) from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create user stats")
        return _parse_row(response.data[0])

    def update_stats(self, stats: UserStats) -> UserStats:
        """Write stats only if the stored version still matches."""
        payload = _to_row(stats)
        payload["version"] = stats.version + 1
        response = (
            self.client.table(TABLE)
            .update(payload)
            .eq("user_id", str(stats.user_id))
            .eq("version", stats.version)
            .execute()
        )
        if not response.data:
            raise ConflictRetryable("user_stats", stats.user_id)
        return _parse_row(response.data[0])


def _to_row(stats: UserStats) -> dict[str, object]:
    return {
        "user_id": str(stats.user_id),
        "total_workouts": stats.total_workouts,
        "total_calories_burned": stats.total_calories_burned,
        "total_steps": stats.total_steps,
        "total_distance": stats.total_distance,
        "current_streak": stats.current_streak,
        "longest_streak": stats.longest_streak,
        "last_workout_day": (
            stats.last_workout_day.isoformat() if stats.last_workout_day else None
        ),
        "points": stats.points,
        "level": stats.level,
        "achievements": [
            {
                "kind": achievement.kind.value,
                "name": achievement.name,
                "description": achievement.description,
                "icon": achievement.icon,
                "earned_at": achievement.earned_at.isoformat(),
            }
            for achievement in stats.achievements
        ],
        "version": stats.version,
    }


def _parse_row(row: dict[str, object]) -> UserStats:
    last_day = row.get("last_workout_day")
    return UserStats(
        user_id=UUID(row["user_id"]),
        total_workouts=int(row.get("total_workouts", 0)),
        total_calories_burned=float(row.get("total_calories_burned", 0.0)),
        total_steps=int(row.get("total_steps", 0)),
        total_distance=float(row.get("total_distance", 0.0)),
        current_streak=int(row.get("current_streak", 0)),
        longest_streak=int(row.get("longest_streak", 0)),
        last_workout_day=(
            date.fromisoformat(last_day) if isinstance(last_day, str) else None
        ),
        points=int(row.get("points", 0)),
        level=int(row.get("level", 1)),
        achievements=tuple(
            Achievement(
                kind=AchievementKind(item["kind"]),
                name=str(item.get("name", "")),
                earned_at=datetime.fromisoformat(item["earned_at"]),
                description=item.get("description"),
                icon=item.get("icon"),
            )
            for item in row.get("achievements") or []
        ),
        version=int(row.get("version", 0)),
    )
