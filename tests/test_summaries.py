"""Tests for range and per-day summaries."""

from datetime import UTC, date, datetime, timedelta
from uuid import uuid4

import pytest

from fitness_tracker.domain.nutrition import MealSlot
from fitness_tracker.domain.summaries import SummaryKind
from fitness_tracker.services.meals import MealService
from fitness_tracker.services.sleep import SleepService
from fitness_tracker.services.summaries import SummaryAggregator
from tests.conftest import InMemoryMealRepository, InMemorySleepRepository, make_food


def _setup() -> tuple[MealService, SleepService, SummaryAggregator]:
    meal_repository = InMemoryMealRepository()
    sleep_repository = InMemorySleepRepository()
    return (
        MealService(meal_repository),
        SleepService(sleep_repository),
        SummaryAggregator(meal_repository, sleep_repository),
    )


def test_empty_range_has_undefined_means() -> None:
    _, _, aggregator = _setup()
    start = datetime(2024, 3, 1, tzinfo=UTC)
    end = datetime(2024, 3, 8, tzinfo=UTC)

    nutrition_summary = aggregator.summarize(uuid4(), start, end, SummaryKind.NUTRITION)
    sleep_summary = aggregator.summarize(uuid4(), start, end, SummaryKind.SLEEP)

    assert nutrition_summary.count == 0
    assert nutrition_summary.sums.calories == 0
    assert nutrition_summary.means is None
    assert sleep_summary.count == 0
    assert sleep_summary.mean_duration is None
    assert sleep_summary.duration_std_dev is None
    assert sleep_summary.min_quality is None


def test_nutrition_summary_sums_and_means() -> None:
    meals, _, aggregator = _setup()
    owner_id = uuid4()
    day = datetime(2024, 3, 1, 8, 0, tzinfo=UTC)
    meals.log_meal(owner_id, MealSlot.BREAKFAST, [make_food(calories=400)], day)
    meals.log_meal(
        owner_id,
        MealSlot.LUNCH,
        [make_food(calories=600)],
        day + timedelta(hours=5),
    )
    meals.log_meal(uuid4(), MealSlot.LUNCH, [make_food(calories=999)], day)

    summary = aggregator.summarize(
        owner_id, day, day + timedelta(hours=5), SummaryKind.NUTRITION
    )

    assert summary.count == 2
    assert summary.sums.calories == 1000
    assert summary.means is not None
    assert summary.means.calories == 500


def test_sleep_summary_statistics() -> None:
    _, sleep, aggregator = _setup()
    owner_id = uuid4()
    first = datetime(2024, 3, 1, 23, 0, tzinfo=UTC)
    sleep.record_session(owner_id, first, first + timedelta(hours=6), quality=5)
    second = first + timedelta(days=1)
    sleep.record_session(owner_id, second, second + timedelta(hours=8), quality=9)

    summary = aggregator.summarize(
        owner_id, first, second + timedelta(hours=1), SummaryKind.SLEEP
    )

    assert summary.count == 2
    assert summary.total_duration == pytest.approx(14.0)
    assert summary.mean_duration == pytest.approx(7.0)
    assert summary.duration_std_dev == pytest.approx(1.0)
    assert summary.mean_quality == 7
    assert summary.min_quality == 5
    assert summary.max_quality == 9
    assert summary.mean_efficiency is None


def test_by_day_is_ascending_and_skips_empty_days() -> None:
    meals, _, aggregator = _setup()
    owner_id = uuid4()
    for day, calories in ((3, 300), (1, 100), (1, 50)):
        meals.log_meal(
            owner_id,
            MealSlot.SNACK,
            [make_food(calories=calories)],
            datetime(2024, 3, day, 12, 0, tzinfo=UTC),
        )

    daily = aggregator.summarize_by_day(
        owner_id, date(2024, 3, 1), 7, SummaryKind.NUTRITION
    )

    assert [entry.day for entry in daily] == [date(2024, 3, 1), date(2024, 3, 3)]
    assert daily[0].summary.count == 2
    assert daily[0].summary.sums.calories == 150
    assert daily[1].summary.sums.calories == 300


def test_by_day_buckets_in_user_timezone() -> None:
    meals, _, aggregator = _setup()
    owner_id = uuid4()
    # 22:00 on March 1 in New York.
    meals.log_meal(
        owner_id,
        MealSlot.DINNER,
        [make_food(calories=700)],
        datetime(2024, 3, 2, 3, 0, tzinfo=UTC),
    )

    in_utc = aggregator.summarize_by_day(
        owner_id, date(2024, 3, 1), 1, SummaryKind.NUTRITION
    )
    in_new_york = aggregator.summarize_by_day(
        owner_id, date(2024, 3, 1), 1, SummaryKind.NUTRITION, "America/New_York"
    )

    assert in_utc == []
    assert [entry.day for entry in in_new_york] == [date(2024, 3, 1)]
    assert in_new_york[0].summary.sums.calories == 700


def test_non_positive_window_is_empty() -> None:
    _, _, aggregator = _setup()

    assert (
        aggregator.summarize_by_day(uuid4(), date(2024, 3, 1), 0, SummaryKind.SLEEP)
        == []
    )


def test_weekly_trends_cover_seven_days() -> None:
    _, sleep, aggregator = _setup()
    owner_id = uuid4()
    for offset in (0, 6, 7):
        start = datetime(2024, 3, 1, 1, 0, tzinfo=UTC) + timedelta(days=offset)
        sleep.record_session(owner_id, start, start + timedelta(hours=7), quality=7)

    trends = aggregator.weekly_trends(owner_id, date(2024, 3, 1), SummaryKind.SLEEP)

    assert [entry.day for entry in trends] == [date(2024, 3, 1), date(2024, 3, 7)]


def test_sleep_insights_use_trailing_window() -> None:
    _, sleep, aggregator = _setup()
    owner_id = uuid4()
    now = datetime(2024, 4, 1, 12, 0, tzinfo=UTC)
    recent = now - timedelta(days=3)
    old = now - timedelta(days=45)
    sleep.record_session(owner_id, recent, recent + timedelta(hours=8), quality=8)
    sleep.record_session(owner_id, old, old + timedelta(hours=5), quality=3)

    summary = aggregator.sleep_insights(owner_id, now=now)

    assert summary.count == 1
    assert summary.mean_quality == 8
