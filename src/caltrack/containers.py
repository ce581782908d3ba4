"""Dependency container wiring for the application."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from supabase import create_client

from caltrack.adapters.supabase_food_library_repository import (
    SupabaseFoodLibraryRepository,
)
from caltrack.adapters.supabase_meal_repository import SupabaseMealRepository
from caltrack.adapters.supabase_profile_repository import SupabaseProfileRepository
from caltrack.adapters.supabase_water_repository import SupabaseWaterRepository
from caltrack.config import Settings, resolve_timezone
from caltrack.services.cache import utc_now
from caltrack.services.library import FoodLibraryRepository, FoodLibraryService
from caltrack.services.meals import MealRepository, MealService
from caltrack.services.nutrition import NutritionService
from caltrack.services.profiles import ProfileRepository, ProfileService
from caltrack.services.water import WaterRepository, WaterService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    profile_service: ProfileService
    meal_service: MealService
    nutrition_service: NutritionService
    food_library_service: FoodLibraryService
    water_service: WaterService


def build_services(  # noqa: PLR0913
    settings: Settings,
    profile_repository: ProfileRepository,
    meal_repository: MealRepository,
    food_repository: FoodLibraryRepository,
    water_repository: WaterRepository,
    clock: Callable[[], datetime] = utc_now,
) -> AppContainer:
    """Wire services on top of the given repositories."""
    timezone = resolve_timezone(settings.timezone)
    profile_service = ProfileService(
        repository=profile_repository,
        clock=clock,
        reject_non_positive_goals=settings.reject_non_positive_goals,
    )
    meal_service = MealService(
        repository=meal_repository,
        timezone=timezone,
        clock=clock,
    )
    nutrition_service = NutritionService(
        profile_service=profile_service,
        meal_service=meal_service,
        profile_id=settings.profile_id,
        clock=clock,
        weekly_ttl_seconds=settings.weekly_cache_ttl_seconds,
    )
    water_service = WaterService(
        repository=water_repository,
        profile_service=profile_service,
        profile_id=settings.profile_id,
        timezone=timezone,
        clock=clock,
        daily_goal_ml=settings.daily_water_goal_ml,
    )
    return AppContainer(
        settings=settings,
        profile_service=profile_service,
        meal_service=meal_service,
        nutrition_service=nutrition_service,
        food_library_service=FoodLibraryService(food_repository, clock=clock),
        water_service=water_service,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    return build_services(
        resolved_settings,
        profile_repository=SupabaseProfileRepository(supabase_client),
        meal_repository=SupabaseMealRepository(supabase_client),
        food_repository=SupabaseFoodLibraryRepository(supabase_client),
        water_repository=SupabaseWaterRepository(supabase_client),
    )
