"""Caller-facing nutrition API: summaries, cache refresh, recommendations."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from uuid import UUID

from caltrack.domain.recommendations import MealRecommendation
from caltrack.domain.summaries import NutritionSummary, WeeklyNutritionSummary
from caltrack.services.cache import DEFAULT_WEEKLY_TTL_SECONDS, SummaryCache, utc_now
from caltrack.services.meals import MealService
from caltrack.services.profiles import ProfileService
from caltrack.services.recommendations import RecommendationEngine
from caltrack.services.summaries import WEEK_DAYS, daily_summary, weekly_summary

_logger = logging.getLogger(__name__)


@dataclass
class NutritionService:
    """Builds and caches summaries for one profile."""

    profile_service: ProfileService
    meal_service: MealService
    profile_id: UUID
    recommendation_engine: RecommendationEngine = field(
        default_factory=RecommendationEngine
    )
    clock: Callable[[], datetime] = field(default=utc_now)
    weekly_ttl_seconds: int = DEFAULT_WEEKLY_TTL_SECONDS
    cache: SummaryCache = field(init=False)

    def __post_init__(self) -> None:
        self.cache = SummaryCache(
            daily_loader=self._build_daily,
            weekly_loader=self._build_weekly,
            today=self.today,
            clock=self.clock,
            weekly_ttl_seconds=self.weekly_ttl_seconds,
        )

    def today(self) -> date:
        return self.meal_service.local_day(self.clock())

    def daily_summary(self, day: date | None = None) -> NutritionSummary:
        """Return the summary for a day, today by default."""
        return self.cache.get_daily(day or self.today())

    def weekly_summary(self, end_date: date | None = None) -> WeeklyNutritionSummary:
        """Return the seven-day summary ending at end_date, today by default."""
        return self.cache.get_weekly(end_date or self.today())

    def refresh_cache(self) -> None:
        """Discard cached summaries and rebuild today's and this week's."""
        self.cache.refresh()

    def evict(self, day: date) -> None:
        """Forget cached values covering a day after its meals changed."""
        self.cache.evict(day)

    def recommendations(self, day: date | None = None) -> list[MealRecommendation]:
        """Return meal suggestions for the day's remaining budget."""
        summary = self.daily_summary(day)
        suggestions = self.recommendation_engine.recommend(summary)
        _logger.debug(
            "Recommendations built: day=%s count=%s", summary.day, len(suggestions)
        )
        return suggestions

    def _build_daily(self, day: date) -> NutritionSummary:
        profile = self.profile_service.require(self.profile_id)
        meals = self.meal_service.get_for_date(day)
        return daily_summary(day, meals, profile, self.meal_service.timezone)

    def _build_weekly(self, end_date: date) -> WeeklyNutritionSummary:
        profile = self.profile_service.require(self.profile_id)
        start_date = end_date - timedelta(days=WEEK_DAYS - 1)
        meals = self.meal_service.get_for_range(start_date, end_date)
        return weekly_summary(
            end_date, profile, meals, self.clock(), self.meal_service.timezone
        )
