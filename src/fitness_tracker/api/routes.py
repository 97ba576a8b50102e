"""HTTP endpoints for the fitness tracker core.

The caller's identity arrives in the ``X-User-Id`` header, set by the
authenticating gateway in front of this service.
"""

from collections.abc import Callable
from datetime import date
from typing import TypeVar
from uuid import UUID
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status
from fastapi.encoders import jsonable_encoder
from pydantic import AwareDatetime

from fitness_tracker.api.schemas import (
    AchievementIn,
    DisturbanceIn,
    FoodItemIn,
    GoalsIn,
    MealIn,
    QualityIn,
    QuantityIn,
    ReviewIn,
    SleepSessionIn,
    StagesIn,
    TimezoneIn,
    WorkoutIn,
)
from fitness_tracker.containers import AppContainer
from fitness_tracker.domain.nutrition import MealRecord
from fitness_tracker.domain.summaries import SummaryKind
from fitness_tracker.services.concurrency import retry_on_conflict
from fitness_tracker.services.nutrition import meal_time_of_day

T = TypeVar("T")

MAX_WINDOW_DAYS = 366

router = APIRouter()


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the app."""
    return request.app.state.container


async def current_user_id(x_user_id: UUID = Header()) -> UUID:
    """Return the authenticated user id supplied by the gateway."""
    return x_user_id


def _mutate(container: AppContainer, operation: Callable[[], T]) -> T:
    return retry_on_conflict(
        operation, attempts=container.settings.conflict_retry_attempts
    )


def _found(value: T | None, entity: str) -> T:
    if value is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"{entity} not found"
        )
    return value


def _meal_body(
    container: AppContainer, user_id: UUID, meal: MealRecord
) -> dict[str, object]:
    timezone = ZoneInfo(container.user_settings_service.get_timezone(user_id))
    return {
        "meal": jsonable_encoder(meal),
        "time_of_day": meal_time_of_day(meal.logged_at, timezone),
    }


@router.post("/meals", status_code=status.HTTP_201_CREATED)
def log_meal(
    payload: MealIn,
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Log a meal with its foods."""
    meal = container.meal_service.log_meal(
        owner_id=user_id,
        slot=payload.slot,
        foods=[food.to_domain() for food in payload.foods],
        logged_at=payload.logged_at,
        notes=payload.notes,
    )
    return _meal_body(container, user_id, meal)


@router.get("/meals/{meal_id}")
def get_meal(
    meal_id: UUID,
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return a meal."""
    meal = _found(container.meal_service.get_meal(user_id, meal_id), "Meal")
    return _meal_body(container, user_id, meal)


@router.post("/meals/{meal_id}/foods")
def add_food(
    meal_id: UUID,
    payload: FoodItemIn,
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Add a food to a meal."""
    food = payload.to_domain()
    meal = _mutate(
        container,
        lambda: container.meal_service.add_food(user_id, meal_id, food),
    )
    return _meal_body(container, user_id, _found(meal, "Meal"))


@router.delete("/meals/{meal_id}/foods/{index}")
def remove_food(
    meal_id: UUID,
    index: int,
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Remove a food from a meal by position."""
    meal = _mutate(
        container,
        lambda: container.meal_service.remove_food(user_id, meal_id, index),
    )
    return _meal_body(container, user_id, _found(meal, "Meal"))


@router.patch("/meals/{meal_id}/foods/{index}")
def update_food_quantity(
    meal_id: UUID,
    index: int,
    payload: QuantityIn,
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Change the quantity of a food in a meal."""
    meal = _mutate(
        container,
        lambda: container.meal_service.update_food_quantity(
            user_id, meal_id, index, payload.quantity
        ),
    )
    return _meal_body(container, user_id, _found(meal, "Meal"))


@router.post("/sleep", status_code=status.HTTP_201_CREATED)
def record_sleep(
    payload: SleepSessionIn,
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Record a completed sleep session."""
    session = container.sleep_service.record_session(
        owner_id=user_id,
        start_time=payload.start_time,
        end_time=payload.end_time,
        quality=payload.quality,
        reported_duration=payload.duration,
        stages=payload.stages.to_domain() if payload.stages else None,
        heart_rate=payload.heart_rate.to_domain() if payload.heart_rate else None,
        goals=payload.goals.to_domain() if payload.goals else None,
        notes=payload.notes,
        data_source=payload.data_source,
    )
    return {"session": jsonable_encoder(session)}


@router.get("/sleep/{session_id}")
def get_sleep(
    session_id: UUID,
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return a sleep session."""
    session = _found(
        container.sleep_service.get_session(user_id, session_id), "Sleep session"
    )
    return {"session": jsonable_encoder(session)}


@router.patch("/sleep/{session_id}/stages")
def update_sleep_stages(
    session_id: UUID,
    payload: StagesIn,
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Merge stage durations into a session."""
    stages = payload.to_domain()
    session = _mutate(
        container,
        lambda: container.sleep_service.update_stages(user_id, session_id, stages),
    )
    return {"session": jsonable_encoder(_found(session, "Sleep session"))}


@router.post("/sleep/{session_id}/disturbances")
def add_sleep_disturbance(
    session_id: UUID,
    payload: DisturbanceIn,
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Record a disturbance against a session."""
    disturbance = payload.to_domain()
    session = _mutate(
        container,
        lambda: container.sleep_service.add_disturbance(
            user_id, session_id, disturbance
        ),
    )
    return {"session": jsonable_encoder(_found(session, "Sleep session"))}


@router.patch("/sleep/{session_id}/quality")
def update_sleep_quality(
    session_id: UUID,
    payload: QualityIn,
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Change a session's quality rating."""
    session = _mutate(
        container,
        lambda: container.sleep_service.update_quality(
            user_id, session_id, payload.quality, payload.notes
        ),
    )
    return {"session": jsonable_encoder(_found(session, "Sleep session"))}


@router.patch("/sleep/{session_id}/goals")
def update_sleep_goals(
    session_id: UUID,
    payload: GoalsIn,
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Replace a session's goals."""
    goals = payload.to_domain()
    session = _mutate(
        container,
        lambda: container.sleep_service.update_goals(user_id, session_id, goals),
    )
    return {"session": jsonable_encoder(_found(session, "Sleep session"))}


@router.get("/exercises/{exercise_id}/rating")
def get_exercise_rating(
    exercise_id: UUID,
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return an exercise's reviews and average."""
    rating = container.rating_service.get_rating(exercise_id)
    return {"rating": jsonable_encoder(rating)}


@router.post("/exercises/{exercise_id}/reviews")
def review_exercise(
    exercise_id: UUID,
    payload: ReviewIn,
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Add or replace the caller's review of an exercise."""
    rating = _mutate(
        container,
        lambda: container.rating_service.add_review(
            exercise_id, user_id, payload.rating, payload.comment
        ),
    )
    return {"rating": jsonable_encoder(rating)}


@router.post("/exercises/{exercise_id}/usage")
def record_exercise_usage(
    exercise_id: UUID,
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Count one use of an exercise."""
    rating = _mutate(
        container, lambda: container.rating_service.record_usage(exercise_id)
    )
    return {"usage_count": rating.usage_count}


@router.get("/users/me/stats")
def get_user_stats(
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the caller's stats."""
    stats = _mutate(container, lambda: container.user_stats_service.get_stats(user_id))
    return {"stats": jsonable_encoder(stats)}


@router.post("/users/me/workouts")
def record_workout(
    payload: WorkoutIn,
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Add a completed workout to the caller's stats."""
    stats = _mutate(
        container,
        lambda: container.user_stats_service.record_workout(
            user_id,
            calories_burned=payload.calories_burned,
            steps=payload.steps,
            distance=payload.distance,
            workout_day=payload.workout_day,
        ),
    )
    return {"stats": jsonable_encoder(stats)}


@router.post("/users/me/achievements")
def award_achievement(
    payload: AchievementIn,
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Award an achievement to the caller."""
    achievement = payload.to_domain()
    stats = _mutate(
        container,
        lambda: container.user_stats_service.award_achievement(user_id, achievement),
    )
    return {"stats": jsonable_encoder(stats)}


@router.get("/users/me/friends")
def list_friends(
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the caller's friend ids."""
    friends = container.friend_service.list_friends(user_id)
    return {"friends": [str(friend_id) for friend_id in friends]}


@router.put("/users/me/friends/{friend_id}")
def add_friend(
    friend_id: UUID,
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Add a friend; adding an existing friend changes nothing."""
    created = container.friend_service.add_friend(user_id, friend_id)
    return {"friend_id": str(friend_id), "created": created}


@router.delete("/users/me/friends/{friend_id}")
def remove_friend(
    friend_id: UUID,
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Remove a friend; removing a non-friend changes nothing."""
    removed = container.friend_service.remove_friend(user_id, friend_id)
    return {"friend_id": str(friend_id), "removed": removed}


@router.put("/users/me/timezone")
def set_timezone(
    payload: TimezoneIn,
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, str]:
    """Set the timezone used for per-day summaries."""
    container.user_settings_service.set_timezone(user_id, payload.timezone)
    return {"timezone": payload.timezone}


@router.get("/summaries/sleep/insights")
def sleep_insights(
    days: int = Query(30, ge=1, le=MAX_WINDOW_DAYS),
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Summarize the caller's sleep over the trailing days."""
    summary = container.summary_aggregator.sleep_insights(user_id, days=days)
    return {"summary": jsonable_encoder(summary)}


@router.get("/summaries/{kind}")
def summarize(
    kind: SummaryKind,
    start: AwareDatetime,
    end: AwareDatetime,
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Summarize the caller's records in [start, end]."""
    summary = container.summary_aggregator.summarize(user_id, start, end, kind)
    return {"summary": jsonable_encoder(summary)}


@router.get("/summaries/{kind}/daily")
def summarize_by_day(
    kind: SummaryKind,
    start_day: date,
    window_days: int = Query(7, ge=1, le=MAX_WINDOW_DAYS),
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return per-day summaries in the caller's timezone."""
    timezone = container.user_settings_service.get_timezone(user_id)
    days = container.summary_aggregator.summarize_by_day(
        user_id, start_day, window_days, kind, timezone
    )
    return {"timezone": timezone, "days": jsonable_encoder(days)}


@router.get("/summaries/{kind}/weekly")
def weekly_trends(
    kind: SummaryKind,
    start_day: date,
    user_id: UUID = Depends(current_user_id),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return per-day summaries for the week starting at start_day."""
    timezone = container.user_settings_service.get_timezone(user_id)
    days = container.summary_aggregator.weekly_trends(
        user_id, start_day, kind, timezone
    )
    return {"timezone": timezone, "days": jsonable_encoder(days)}
