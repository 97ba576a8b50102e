"""Range and per-day summaries of meals and sleep sessions."""

import logging
import statistics
from collections import defaultdict
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import TypeVar
from uuid import UUID
from zoneinfo import ZoneInfo

from fitness_tracker.domain.nutrition import NUTRIENT_FIELDS, MealRecord, NutrientProfile
from fitness_tracker.domain.sleep import SleepSession
from fitness_tracker.domain.summaries import (
    DailySummary,
    NutritionSummary,
    SleepSummary,
    SummaryKind,
)
from fitness_tracker.services.meals import MealRepository
from fitness_tracker.services.nutrition import sum_profiles
from fitness_tracker.services.sleep import SleepRepository

logger = logging.getLogger(__name__)

DEFAULT_INSIGHT_DAYS = 30
DAYS_PER_WEEK = 7

RecordT = TypeVar("RecordT", MealRecord, SleepSession)


@dataclass
class SummaryAggregator:
    """Reduces a user's records over a date range into statistics."""

    meal_repository: MealRepository
    sleep_repository: SleepRepository

    def summarize(
        self, owner_id: UUID, start: datetime, end: datetime, kind: SummaryKind
    ) -> NutritionSummary | SleepSummary:
        """Summarize records whose timestamp falls in [start, end]."""
        if kind is SummaryKind.NUTRITION:
            meals = self.meal_repository.list_meals(owner_id, start, end)
            return summarize_meals(_in_range(meals, _meal_time, start, end), start, end)
        sessions = self.sleep_repository.list_sessions(owner_id, start, end)
        return summarize_sessions(
            _in_range(sessions, _sleep_time, start, end), start, end
        )

    def summarize_by_day(
        self,
        owner_id: UUID,
        start_day: date,
        window_days: int,
        kind: SummaryKind,
        timezone_name: str = "UTC",
    ) -> list[DailySummary]:
        """Return one summary per calendar day that has records, oldest first.

        Days are calendar days in ``timezone_name``.
        """
        if window_days <= 0:
            return []
        tz = ZoneInfo(timezone_name)
        start = datetime.combine(start_day, time.min, tzinfo=tz)
        end = start + timedelta(days=window_days) - timedelta(microseconds=1)
        range_start, range_end = start.astimezone(UTC), end.astimezone(UTC)

        if kind is SummaryKind.NUTRITION:
            meals = self.meal_repository.list_meals(owner_id, range_start, range_end)
            return _by_day(
                _in_range(meals, _meal_time, range_start, range_end),
                _meal_time,
                tz,
                summarize_meals,
            )
        sessions = self.sleep_repository.list_sessions(
            owner_id, range_start, range_end
        )
        return _by_day(
            _in_range(sessions, _sleep_time, range_start, range_end),
            _sleep_time,
            tz,
            summarize_sessions,
        )

    def weekly_trends(
        self,
        owner_id: UUID,
        start_day: date,
        kind: SummaryKind,
        timezone_name: str = "UTC",
    ) -> list[DailySummary]:
        """Return per-day summaries for the seven days from start_day."""
        return self.summarize_by_day(
            owner_id, start_day, DAYS_PER_WEEK, kind, timezone_name
        )

    def sleep_insights(
        self,
        owner_id: UUID,
        days: int = DEFAULT_INSIGHT_DAYS,
        now: datetime | None = None,
    ) -> SleepSummary:
        """Summarize sleep over the trailing window of days."""
        end = now or datetime.now(tz=UTC)
        start = end - timedelta(days=days)
        summary = self.summarize(owner_id, start, end, SummaryKind.SLEEP)
        logger.debug("Sleep insights for %s over %d days", owner_id, days)
        return summary


def summarize_meals(
    meals: Sequence[MealRecord], start: datetime, end: datetime
) -> NutritionSummary:
    """Sum and average meal totals."""
    sums = sum_profiles([meal.totals for meal in meals])
    count = len(meals)
    means = (
        NutrientProfile(
            **{name: getattr(sums, name) / count for name in NUTRIENT_FIELDS}
        )
        if count
        else None
    )
    return NutritionSummary(start=start, end=end, count=count, sums=sums, means=means)


def summarize_sessions(
    sessions: Sequence[SleepSession], start: datetime, end: datetime
) -> SleepSummary:
    """Compute sleep statistics over sessions."""
    durations = [session.metrics.duration for session in sessions]
    qualities = [session.quality for session in sessions]
    scores = [session.metrics.score for session in sessions]
    efficiencies = [
        session.metrics.efficiency
        for session in sessions
        if session.metrics.efficiency is not None
    ]
    deep = [s.stages.deep for s in sessions if s.stages.deep is not None]
    rem = [s.stages.rem for s in sessions if s.stages.rem is not None]
    return SleepSummary(
        start=start,
        end=end,
        count=len(sessions),
        total_duration=float(sum(durations)),
        total_quality=float(sum(qualities)),
        total_score=float(sum(scores)),
        mean_duration=_mean(durations),
        mean_quality=_mean(qualities),
        mean_score=_mean(scores),
        min_quality=min(qualities) if qualities else None,
        max_quality=max(qualities) if qualities else None,
        duration_std_dev=statistics.pstdev(durations) if durations else None,
        mean_efficiency=_mean(efficiencies),
        mean_deep_sleep=_mean(deep),
        mean_rem_sleep=_mean(rem),
    )


def _mean(values: Sequence[float]) -> float | None:
    if not values:
        return None
    return statistics.fmean(values)


def _meal_time(meal: MealRecord) -> datetime:
    return meal.logged_at


def _sleep_time(session: SleepSession) -> datetime:
    return session.start_time


def _in_range(
    records: list[RecordT],
    timestamp: Callable[[RecordT], datetime],
    start: datetime,
    end: datetime,
) -> list[RecordT]:
    selected = [record for record in records if start <= timestamp(record) <= end]
    return sorted(selected, key=timestamp)


def _by_day(
    records: list[RecordT],
    timestamp: Callable[[RecordT], datetime],
    tz: ZoneInfo,
    reduce: Callable[[list[RecordT], datetime, datetime], object],
) -> list[DailySummary]:
    buckets: dict[date, list[RecordT]] = defaultdict(list)
    for record in records:
        buckets[timestamp(record).astimezone(tz).date()].append(record)

    daily = []
    for day in sorted(buckets):
        day_start = datetime.combine(day, time.min, tzinfo=tz)
        day_end = datetime.combine(day, time.max, tzinfo=tz)
        daily.append(
            DailySummary(day=day, summary=reduce(buckets[day], day_start, day_end))
        )
    return daily
