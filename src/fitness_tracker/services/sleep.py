"""Sleep metrics and sleep session service.

Derived metrics are a pure function of a session's raw fields. Every mutation
builds the new raw state and then calls ``compute_sleep_metrics`` again; no
metric can be set directly.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Protocol
from uuid import UUID, uuid4

from fitness_tracker.domain.sleep import (
    DataSource,
    Disturbance,
    HeartRateSummary,
    SleepCategory,
    SleepGoals,
    SleepMetrics,
    SleepSession,
    SleepStage,
    SleepStages,
)
from fitness_tracker.services.validation import (
    validate_disturbance,
    validate_duration,
    validate_goals,
    validate_heart_rate,
    validate_quality,
    validate_stages,
)

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600.0
DURATION_WEIGHT = 40.0
DURATION_RATIO_CAP = 1.2
QUALITY_WEIGHT = 30.0
EFFICIENCY_WEIGHT = 20.0
# Fixed until consistency is derived from historical sessions.
CONSISTENCY_POINTS = 10.0
MAX_SCORE = 100
CATEGORY_THRESHOLDS: tuple[tuple[int, SleepCategory], ...] = (
    (90, SleepCategory.EXCELLENT),
    (80, SleepCategory.GOOD),
    (70, SleepCategory.FAIR),
    (60, SleepCategory.POOR),
)
ASLEEP_STAGES = (SleepStage.DEEP, SleepStage.LIGHT, SleepStage.REM)


def session_duration(
    start_time: datetime, end_time: datetime, reported_duration: float | None
) -> float:
    """Return the reported duration, or end minus start in hours."""
    if reported_duration is not None:
        duration = reported_duration
    else:
        duration = (end_time - start_time).total_seconds() / SECONDS_PER_HOUR
    validate_duration(duration)
    return duration


def stage_percentages(stages: SleepStages) -> dict[SleepStage, float] | None:
    """Return each reported stage's share of the reported total.

    None when no stage time was reported, so "no data" stays distinct from 0%.
    """
    reported = {
        stage: stages.get(stage)
        for stage in SleepStage
        if stages.get(stage) is not None
    }
    total = sum(reported.values())
    if total <= 0:
        return None
    return {stage: value / total * 100 for stage, value in reported.items()}


def sleep_efficiency(stages: SleepStages, duration: float) -> float | None:
    """Return time asleep as a percentage of time in bed."""
    asleep = [stages.get(stage) for stage in ASLEEP_STAGES]
    if any(value is None for value in asleep) or duration <= 0:
        return None
    return sum(asleep) / duration * 100


def sleep_debt(duration: float, goals: SleepGoals) -> float | None:
    """Return the shortfall against the target duration, floored at zero."""
    if goals.target_duration is None:
        return None
    return max(0.0, goals.target_duration - duration)


def sleep_score(
    duration: float, quality: int, efficiency: float | None, goals: SleepGoals
) -> int:
    """Return the weighted sleep score in [0, 100]."""
    score = 0.0
    if goals.target_duration:
        ratio = min(duration / goals.target_duration, DURATION_RATIO_CAP)
        score += ratio * DURATION_WEIGHT
    score += quality / 10 * QUALITY_WEIGHT
    if efficiency is not None:
        score += efficiency / 100 * EFFICIENCY_WEIGHT
    score += CONSISTENCY_POINTS
    return max(0, min(MAX_SCORE, round(score)))


def sleep_category(score: int) -> SleepCategory:
    """Map a sleep score to its label."""
    for threshold, category in CATEGORY_THRESHOLDS:
        if score >= threshold:
            return category
    return SleepCategory.VERY_POOR


def compute_sleep_metrics(session: SleepSession) -> SleepMetrics:
    """Derive all metrics from the session's raw fields."""
    validate_quality(session.quality)
    validate_stages(session.stages)
    validate_heart_rate(session.heart_rate)
    validate_goals(session.goals)
    duration = session_duration(
        session.start_time, session.end_time, session.reported_duration
    )
    efficiency = sleep_efficiency(session.stages, duration)
    score = sleep_score(duration, session.quality, efficiency, session.goals)
    goals = session.goals
    return SleepMetrics(
        duration=duration,
        stage_percentages=stage_percentages(session.stages),
        efficiency=efficiency,
        sleep_debt=sleep_debt(duration, goals),
        score=score,
        category=sleep_category(score),
        duration_achieved=(
            goals.target_duration is not None and duration >= goals.target_duration
        ),
        quality_achieved=(
            goals.target_quality is not None
            and session.quality >= goals.target_quality
        ),
    )


def refresh_metrics(session: SleepSession) -> SleepSession:
    """Return the session with metrics recomputed from its raw fields."""
    return replace(session, metrics=compute_sleep_metrics(session))


def build_session(  # noqa: PLR0913
    owner_id: UUID,
    start_time: datetime,
    end_time: datetime,
    quality: int,
    reported_duration: float | None = None,
    stages: SleepStages | None = None,
    heart_rate: HeartRateSummary | None = None,
    goals: SleepGoals | None = None,
    notes: str | None = None,
    data_source: DataSource = DataSource.MANUAL,
) -> SleepSession:
    """Create a new session with derived metrics."""
    draft = SleepSession(
        id=uuid4(),
        owner_id=owner_id,
        start_time=start_time,
        end_time=end_time,
        quality=quality,
        metrics=_placeholder_metrics(),
        reported_duration=reported_duration,
        stages=stages or SleepStages(),
        heart_rate=heart_rate,
        goals=goals or SleepGoals(),
        notes=notes,
        data_source=data_source,
    )
    return refresh_metrics(draft)


def update_stages(session: SleepSession, stages: SleepStages) -> SleepSession:
    """Merge reported stage durations into the session."""
    merged = SleepStages(
        **{
            stage.value: (
                stages.get(stage)
                if stages.get(stage) is not None
                else session.stages.get(stage)
            )
            for stage in SleepStage
        }
    )
    return refresh_metrics(replace(session, stages=merged))


def add_disturbance(session: SleepSession, disturbance: Disturbance) -> SleepSession:
    """Record a disturbance against the session."""
    validate_disturbance(disturbance)
    return refresh_metrics(
        replace(session, disturbances=(*session.disturbances, disturbance))
    )


def update_quality(
    session: SleepSession, quality: int, notes: str | None = None
) -> SleepSession:
    """Change the quality rating, appending any notes on a new line."""
    merged_notes = session.notes
    if notes:
        merged_notes = f"{session.notes}\n{notes}" if session.notes else notes
    return refresh_metrics(replace(session, quality=quality, notes=merged_notes))


def update_goals(session: SleepSession, goals: SleepGoals) -> SleepSession:
    """Replace the session's goals."""
    return refresh_metrics(replace(session, goals=goals))


def _placeholder_metrics() -> SleepMetrics:
    return SleepMetrics(
        duration=0.0,
        stage_percentages=None,
        efficiency=None,
        sleep_debt=None,
        score=0,
        category=SleepCategory.VERY_POOR,
        duration_achieved=False,
        quality_achieved=False,
    )


class SleepRepository(Protocol):
    """Persistence interface for sleep sessions."""

    def create_session(self, session: SleepSession) -> SleepSession:
        """Persist a new session and return it."""

    def get_session(self, session_id: UUID) -> SleepSession | None:
        """Return a session by id, if present."""

    def update_session(self, session: SleepSession) -> SleepSession:
        """Save a session if its version is current and return the stored record.

        Raises ConflictRetryable when the stored version has moved on.
        """

    def list_sessions(
        self, owner_id: UUID, start: datetime, end: datetime
    ) -> list[SleepSession]:
        """Return sessions starting in [start, end], in any order."""


@dataclass
class SleepService:
    """Records sleep sessions and applies updates with recomputation."""

    repository: SleepRepository

    def record_session(  # noqa: PLR0913
        self,
        owner_id: UUID,
        start_time: datetime,
        end_time: datetime,
        quality: int,
        reported_duration: float | None = None,
        stages: SleepStages | None = None,
        heart_rate: HeartRateSummary | None = None,
        goals: SleepGoals | None = None,
        notes: str | None = None,
        data_source: DataSource = DataSource.MANUAL,
    ) -> SleepSession:
        """Record a completed sleep session."""
        session = build_session(
            owner_id=owner_id,
            start_time=start_time,
            end_time=end_time,
            quality=quality,
            reported_duration=reported_duration,
            stages=stages,
            heart_rate=heart_rate,
            goals=goals,
            notes=notes,
            data_source=data_source,
        )
        logger.info(
            "Recorded sleep session %s: %.2fh, score %d",
            session.id,
            session.metrics.duration,
            session.metrics.score,
        )
        return self.repository.create_session(session)

    def get_session(self, owner_id: UUID, session_id: UUID) -> SleepSession | None:
        """Return a session owned by the user."""
        session = self.repository.get_session(session_id)
        if session is None or session.owner_id != owner_id:
            return None
        return session

    def update_stages(
        self, owner_id: UUID, session_id: UUID, stages: SleepStages
    ) -> SleepSession | None:
        """Merge stage durations and recompute metrics."""
        session = self.get_session(owner_id, session_id)
        if session is None:
            return None
        return self.repository.update_session(update_stages(session, stages))

    def add_disturbance(
        self, owner_id: UUID, session_id: UUID, disturbance: Disturbance
    ) -> SleepSession | None:
        """Add a disturbance and recompute metrics."""
        session = self.get_session(owner_id, session_id)
        if session is None:
            return None
        return self.repository.update_session(add_disturbance(session, disturbance))

    def update_quality(
        self,
        owner_id: UUID,
        session_id: UUID,
        quality: int,
        notes: str | None = None,
    ) -> SleepSession | None:
        """Change quality and recompute metrics."""
        session = self.get_session(owner_id, session_id)
        if session is None:
            return None
        return self.repository.update_session(update_quality(session, quality, notes))

    def update_goals(
        self, owner_id: UUID, session_id: UUID, goals: SleepGoals
    ) -> SleepSession | None:
        """Replace goals and recompute metrics."""
        session = self.get_session(owner_id, session_id)
        if session is None:
            return None
        return self.repository.update_session(update_goals(session, goals))
