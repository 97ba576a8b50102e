"""Tests for derived sleep metrics."""

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from fitness_tracker.domain.errors import ValidationError
from fitness_tracker.domain.sleep import (
    HeartRateSummary,
    SleepCategory,
    SleepGoals,
    SleepStage,
    SleepStages,
)
from fitness_tracker.services import sleep

START = datetime(2024, 3, 1, 23, 0, tzinfo=UTC)
END = datetime(2024, 3, 2, 7, 0, tzinfo=UTC)
FULL_STAGES = SleepStages(deep=1.5, light=4.0, rem=2.0, awake=0.5)


def test_eight_hour_session_without_goals() -> None:
    session = sleep.build_session(uuid4(), START, END, quality=8)

    assert session.metrics.duration == pytest.approx(8.0)
    assert session.metrics.score == 34
    assert session.metrics.category is SleepCategory.VERY_POOR
    assert session.metrics.stage_percentages is None
    assert session.metrics.efficiency is None
    assert session.metrics.sleep_debt is None
    assert session.metrics.duration_achieved is False
    assert session.metrics.quality_achieved is False


def test_reported_duration_overrides_timestamps() -> None:
    session = sleep.build_session(
        uuid4(), START, END, quality=6, reported_duration=7.5
    )

    assert session.metrics.duration == 7.5


def test_stage_percentages_sum_to_hundred() -> None:
    percentages = sleep.stage_percentages(FULL_STAGES)

    assert percentages is not None
    assert percentages[SleepStage.DEEP] == pytest.approx(18.75)
    assert percentages[SleepStage.LIGHT] == pytest.approx(50.0)
    assert percentages[SleepStage.REM] == pytest.approx(25.0)
    assert percentages[SleepStage.AWAKE] == pytest.approx(6.25)
    assert sum(percentages.values()) == pytest.approx(100.0)


def test_stage_percentages_only_cover_reported_stages() -> None:
    percentages = sleep.stage_percentages(SleepStages(deep=1.0, rem=3.0))

    assert percentages == {SleepStage.DEEP: 25.0, SleepStage.REM: 75.0}


def test_stage_percentages_undefined_without_stage_time() -> None:
    assert sleep.stage_percentages(SleepStages()) is None
    assert sleep.stage_percentages(SleepStages(deep=0, light=0)) is None


def test_efficiency_requires_all_asleep_stages() -> None:
    assert sleep.sleep_efficiency(FULL_STAGES, 8.0) == pytest.approx(93.75)
    assert sleep.sleep_efficiency(SleepStages(deep=1.5, light=4.0), 8.0) is None


def test_debt_is_floored_at_zero() -> None:
    assert sleep.sleep_debt(6.0, SleepGoals(target_duration=8.0)) == 2.0
    assert sleep.sleep_debt(9.0, SleepGoals(target_duration=8.0)) == 0.0
    assert sleep.sleep_debt(9.0, SleepGoals()) is None


def test_full_session_with_goals() -> None:
    session = sleep.build_session(
        uuid4(),
        START,
        END,
        quality=8,
        stages=FULL_STAGES,
        goals=SleepGoals(target_duration=8.0, target_quality=8),
    )

    assert session.metrics.efficiency == pytest.approx(93.75)
    assert session.metrics.score == 93
    assert session.metrics.category is SleepCategory.EXCELLENT
    assert session.metrics.sleep_debt == 0.0
    assert session.metrics.duration_achieved is True
    assert session.metrics.quality_achieved is True


def test_score_is_clamped_to_hundred() -> None:
    score = sleep.sleep_score(
        duration=12.0,
        quality=10,
        efficiency=108.0,
        goals=SleepGoals(target_duration=6.0),
    )

    assert score == 100


def test_score_increases_with_quality() -> None:
    goals = SleepGoals(target_duration=8.0)
    scores = [sleep.sleep_score(7.0, quality, 90.0, goals) for quality in range(1, 11)]

    assert scores == sorted(scores)
    assert all(0 <= score <= 100 for score in scores)


@pytest.mark.parametrize(
    ("score", "expected"),
    [
        (100, SleepCategory.EXCELLENT),
        (90, SleepCategory.EXCELLENT),
        (89, SleepCategory.GOOD),
        (80, SleepCategory.GOOD),
        (70, SleepCategory.FAIR),
        (60, SleepCategory.POOR),
        (59, SleepCategory.VERY_POOR),
        (0, SleepCategory.VERY_POOR),
    ],
)
def test_category_thresholds(score: int, expected: SleepCategory) -> None:
    assert sleep.sleep_category(score) is expected


def test_update_stages_merges_and_recomputes() -> None:
    session = sleep.build_session(
        uuid4(), START, END, quality=7, stages=SleepStages(deep=2.0)
    )
    assert session.metrics.stage_percentages == {SleepStage.DEEP: 100.0}

    updated = sleep.update_stages(session, SleepStages(light=4.0, rem=2.0))

    assert updated.stages == SleepStages(deep=2.0, light=4.0, rem=2.0)
    assert updated.metrics.efficiency == pytest.approx(100.0)
    assert updated.metrics.score > session.metrics.score


def test_update_quality_appends_notes() -> None:
    session = sleep.build_session(uuid4(), START, END, quality=5, notes="late dinner")

    updated = sleep.update_quality(session, 9, "felt rested")

    assert updated.quality == 9
    assert updated.notes == "late dinner\nfelt rested"
    assert updated.metrics.score == 37


def test_update_goals_recomputes_achievement() -> None:
    session = sleep.build_session(uuid4(), START, END, quality=8)

    updated = sleep.update_goals(session, SleepGoals(target_duration=9.0))

    assert updated.metrics.sleep_debt == pytest.approx(1.0)
    assert updated.metrics.duration_achieved is False


@pytest.mark.parametrize("quality", [0, 11])
def test_quality_out_of_range(quality: int) -> None:
    with pytest.raises(ValidationError) as exc_info:
        sleep.build_session(uuid4(), START, END, quality=quality)

    assert exc_info.value.field == "quality"


def test_end_before_start_is_rejected() -> None:
    with pytest.raises(ValidationError) as exc_info:
        sleep.build_session(uuid4(), END, START, quality=7)

    assert exc_info.value.field == "duration"


def test_heart_rate_must_be_plausible() -> None:
    with pytest.raises(ValidationError) as exc_info:
        sleep.build_session(
            uuid4(), START, END, quality=7, heart_rate=HeartRateSummary(max_bpm=250)
        )

    assert exc_info.value.field == "heart_rate.max_bpm"


def test_goals_must_be_in_range() -> None:
    with pytest.raises(ValidationError):
        sleep.build_session(
            uuid4(), START, END, quality=7, goals=SleepGoals(target_duration=5.0)
        )


def test_negative_stage_is_rejected() -> None:
    with pytest.raises(ValidationError) as exc_info:
        sleep.build_session(
            uuid4(), START, END, quality=7, stages=SleepStages(deep=-1.0)
        )

    assert exc_info.value.field == "stages.deep"
