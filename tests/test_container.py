"""Tests for container wiring."""

from caltrack.adapters.supabase_food_library_repository import (
    SupabaseFoodLibraryRepository,
)
from caltrack.adapters.supabase_meal_repository import SupabaseMealRepository
from caltrack.adapters.supabase_water_repository import SupabaseWaterRepository
from caltrack.config import Settings
from caltrack.containers import AppContainer, build_container


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings)

    assert isinstance(container.meal_service.repository, SupabaseMealRepository)
    assert isinstance(
        container.food_library_service.repository, SupabaseFoodLibraryRepository
    )
    assert isinstance(container.water_service.repository, SupabaseWaterRepository)
    assert container.nutrition_service.profile_id == settings.profile_id
    assert container.meal_service.timezone.key == "UTC"


def test_build_services_shares_clock_and_timezone(container: AppContainer) -> None:
    service = container.nutrition_service

    assert service.meal_service is container.meal_service
    assert service.profile_service is container.profile_service
    assert service.cache.daily_dates() == []
    assert service.weekly_ttl_seconds == 3600
    water = container.water_service
    assert water.profile_service is container.profile_service
    assert water.timezone == container.meal_service.timezone
    assert water.clock is container.food_library_service.clock


def test_water_goal_setting_overrides_profile(settings: Settings) -> None:
    configured = settings.model_copy(update={"daily_water_goal_ml": 2750.0})

    container = build_container(configured)

    assert container.water_service.goal_ml() == 2750.0
