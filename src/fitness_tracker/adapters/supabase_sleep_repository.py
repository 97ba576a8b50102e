"""Supabase repository for sleep sessions."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from fitness_tracker.domain.errors import ConflictRetryable
from fitness_tracker.domain.sleep import (
    DataSource,
    Disturbance,
    DisturbanceKind,
    HeartRateSummary,
    SleepCategory,
    SleepGoals,
    SleepMetrics,
    SleepSession,
    SleepStage,
    SleepStages,
)
from fitness_tracker.services.sleep import SleepRepository

TABLE = "sleep_sessions"


@dataclass
class SupabaseSleepRepository(SleepRepository):
    """Supabase implementation for sleep sessions with versioned updates."""

    client: Client

    def create_session(self, session: SleepSession) -> SleepSession:
        """Insert a session row and return the stored session."""
        response = self.client.table(TABLE).insert(_to_row(session)).execute()
        if not response.data:
            raise RuntimeError("Failed to create sleep session")
        return _parse_row(response.data[0])

    def get_session(self, session_id: UUID) -> SleepSession | None:
        """Return a session by id."""
        response = (
            self.client.table(TABLE)
            .select("*")
            .eq("id", str(session_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def update_session(self, session: SleepSession) -> SleepSession:
        """Write the session only if the stored version still matches."""
        payload = _to_row(session)
        payload["version"] = session.version + 1
        response = (
            self.client.table(TABLE)
            .update(payload)
            .eq("id", str(session.id))
            .eq("version", session.version)
            .execute()
        )
        if not response.data:
            raise ConflictRetryable("sleep_session", session.id)
        return _parse_row(response.data[0])

    def list_sessions(
        self, owner_id: UUID, start: datetime, end: datetime
    ) -> list[SleepSession]:
        """Return sessions starting within the inclusive range."""
        response = (
            self.client.table(TABLE)
            .select("*")
            .eq("owner_id", str(owner_id))
            .gte("start_time", start.isoformat())
            .lte("start_time", end.isoformat())
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _to_row(session: SleepSession) -> dict[str, object]:
    metrics = session.metrics
    return {
        "id": str(session.id),
        "owner_id": str(session.owner_id),
        "start_time": session.start_time.isoformat(),
        "end_time": session.end_time.isoformat(),
        "reported_duration": session.reported_duration,
        "quality": session.quality,
        "stages": {stage.value: session.stages.get(stage) for stage in SleepStage},
        "heart_rate": (
            {
                "min_bpm": session.heart_rate.min_bpm,
                "max_bpm": session.heart_rate.max_bpm,
                "average_bpm": session.heart_rate.average_bpm,
                "resting_bpm": session.heart_rate.resting_bpm,
            }
            if session.heart_rate
            else None
        ),
        "goals": {
            "target_duration": session.goals.target_duration,
            "target_quality": session.goals.target_quality,
        },
        "disturbances": [
            {
                "kind": disturbance.kind.value,
                "description": disturbance.description,
                "occurred_at": (
                    disturbance.occurred_at.isoformat()
                    if disturbance.occurred_at
                    else None
                ),
                "duration_minutes": disturbance.duration_minutes,
            }
            for disturbance in session.disturbances
        ],
        "notes": session.notes,
        "data_source": session.data_source.value,
        "duration": metrics.duration,
        "stage_percentages": (
            {stage.value: value for stage, value in metrics.stage_percentages.items()}
            if metrics.stage_percentages is not None
            else None
        ),
        "efficiency": metrics.efficiency,
        "sleep_debt": metrics.sleep_debt,
        "score": metrics.score,
        "category": metrics.category.value,
        "duration_achieved": metrics.duration_achieved,
        "quality_achieved": metrics.quality_achieved,
        "version": session.version,
    }


def _optional_float(value: object) -> float | None:
    return float(value) if isinstance(value, int | float) else None


def _parse_stages(raw: object) -> SleepStages:
    values = raw if isinstance(raw, dict) else {}
    return SleepStages(
        **{stage.value: _optional_float(values.get(stage.value)) for stage in SleepStage}
    )


def _parse_heart_rate(raw: object) -> HeartRateSummary | None:
    if not isinstance(raw, dict):
        return None
    return HeartRateSummary(
        min_bpm=_optional_float(raw.get("min_bpm")),
        max_bpm=_optional_float(raw.get("max_bpm")),
        average_bpm=_optional_float(raw.get("average_bpm")),
        resting_bpm=_optional_float(raw.get("resting_bpm")),
    )


def _parse_goals(raw: object) -> SleepGoals:
    values = raw if isinstance(raw, dict) else {}
    target_quality = values.get("target_quality")
    return SleepGoals(
        target_duration=_optional_float(values.get("target_duration")),
        target_quality=int(target_quality) if target_quality is not None else None,
    )


def _parse_disturbance(raw: dict[str, object]) -> Disturbance:
    occurred_at = raw.get("occurred_at")
    return Disturbance(
        kind=DisturbanceKind(raw.get("kind", DisturbanceKind.OTHER.value)),
        description=raw.get("description"),
        occurred_at=(
            datetime.fromisoformat(occurred_at)
            if isinstance(occurred_at, str) and occurred_at
            else None
        ),
        duration_minutes=_optional_float(raw.get("duration_minutes")),
    )


def _parse_percentages(raw: object) -> dict[SleepStage, float] | None:
    if not isinstance(raw, dict):
        return None
    return {SleepStage(key): float(value) for key, value in raw.items()}


def _parse_row(row: dict[str, object]) -> SleepSession:
    metrics = SleepMetrics(
        duration=float(row.get("duration", 0.0)),
        stage_percentages=_parse_percentages(row.get("stage_percentages")),
        efficiency=_optional_float(row.get("efficiency")),
        sleep_debt=_optional_float(row.get("sleep_debt")),
        score=int(row.get("score", 0)),
        category=SleepCategory(row.get("category", SleepCategory.VERY_POOR.value)),
        duration_achieved=bool(row.get("duration_achieved", False)),
        quality_achieved=bool(row.get("quality_achieved", False)),
    )
    return SleepSession(
        id=UUID(row["id"]),
        owner_id=UUID(row["owner_id"]),
        start_time=datetime.fromisoformat(row["start_time"]),
        end_time=datetime.fromisoformat(row["end_time"]),
        quality=int(row["quality"]),
        metrics=metrics,
        reported_duration=_optional_float(row.get("reported_duration")),
        stages=_parse_stages(row.get("stages")),
        heart_rate=_parse_heart_rate(row.get("heart_rate")),
        goals=_parse_goals(row.get("goals")),
        disturbances=tuple(
            _parse_disturbance(item) for item in row.get("disturbances") or []
        ),
        notes=row.get("notes"),
        data_source=DataSource(row.get("data_source", DataSource.MANUAL.value)),
        version=int(row.get("version", 0)),
    )
