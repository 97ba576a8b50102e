"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from fitness_tracker.adapters.supabase_friendship_repository import (
    SupabaseFriendshipRepository,
)
from fitness_tracker.adapters.supabase_meal_repository import SupabaseMealRepository
from fitness_tracker.adapters.supabase_rating_repository import (
    SupabaseRatingRepository,
)
from fitness_tracker.adapters.supabase_sleep_repository import SupabaseSleepRepository
from fitness_tracker.adapters.supabase_user_settings_repository import (
    SupabaseUserSettingsRepository,
)
from fitness_tracker.adapters.supabase_user_stats_repository import (
    SupabaseUserStatsRepository,
)
from fitness_tracker.config import Settings
from fitness_tracker.services.friends import FriendService
from fitness_tracker.services.meals import MealService
from fitness_tracker.services.ratings import RatingService
from fitness_tracker.services.sleep import SleepService
from fitness_tracker.services.summaries import SummaryAggregator
from fitness_tracker.services.user_settings import UserSettingsService
from fitness_tracker.services.user_stats import UserStatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    meal_service: MealService
    sleep_service: SleepService
    rating_service: RatingService
    user_stats_service: UserStatsService
    friend_service: FriendService
    summary_aggregator: SummaryAggregator
    user_settings_service: UserSettingsService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    meal_repository = SupabaseMealRepository(supabase_client)
    sleep_repository = SupabaseSleepRepository(supabase_client)
    return AppContainer(
        settings=resolved_settings,
        meal_service=MealService(meal_repository),
        sleep_service=SleepService(sleep_repository),
        rating_service=RatingService(SupabaseRatingRepository(supabase_client)),
        user_stats_service=UserStatsService(
            SupabaseUserStatsRepository(supabase_client)
        ),
        friend_service=FriendService(SupabaseFriendshipRepository(supabase_client)),
        summary_aggregator=SummaryAggregator(
            meal_repository=meal_repository,
            sleep_repository=sleep_repository,
        ),
        user_settings_service=UserSettingsService(
            SupabaseUserSettingsRepository(supabase_client),
            default_timezone=resolved_settings.default_timezone,
        ),
    )
