"""Water intake logging and hydration summaries."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Protocol
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

from caltrack.domain.water import (
    DEFAULT_WATER_GOAL_ML,
    ML_PER_KG_BODY_WEIGHT,
    STREAK_GOAL_FRACTION,
    WaterDailySummary,
    WaterEntry,
    WaterUnit,
    WaterWeeklySummary,
)
from caltrack.errors import WaterEntryNotFound, call_store
from caltrack.services.cache import utc_now
from caltrack.services.profiles import ProfileService
from caltrack.services.summaries import WEEK_DAYS, day_bounds, range_bounds

_logger = logging.getLogger(__name__)


class WaterRepository(Protocol):
    """Persistence interface for water entries."""

    def save_entry(self, entry: WaterEntry) -> None:
        """Insert a water entry."""

    def get_entry(self, entry_id: UUID) -> WaterEntry | None:
        """Return a water entry by id, if present."""

    def delete_entry(self, entry_id: UUID) -> None:
        """Delete a water entry."""

    def list_entries(self, start: datetime, end: datetime) -> list[WaterEntry]:
        """Return entries logged in [start, end), newest first."""


@dataclass
class WaterService:
    """Logs water and measures daily intake against a goal.

    The goal is the configured ``daily_goal_ml`` when set, otherwise 30 ml per
    kg of the profile's body weight, or 2000 ml when there is no profile.
    """

    repository: WaterRepository
    profile_service: ProfileService
    profile_id: UUID
    timezone: ZoneInfo = field(default_factory=lambda: ZoneInfo("UTC"))
    clock: Callable[[], datetime] = field(default=utc_now)
    daily_goal_ml: float | None = None

    def today(self) -> date:
        return self.clock().astimezone(self.timezone).date()

    def goal_ml(self) -> float:
        if self.daily_goal_ml is not None:
            return self.daily_goal_ml
        profile = self.profile_service.get_current(self.profile_id)
        if profile is None:
            return DEFAULT_WATER_GOAL_ML
        return profile.weight_kg * ML_PER_KG_BODY_WEIGHT

    def log_water(
        self,
        amount: float,
        unit: WaterUnit = WaterUnit.ML,
        logged_at: datetime | None = None,
    ) -> WaterEntry:
        """Store a water entry, timestamped now unless given."""
        if amount <= 0:
            raise ValueError("Water amount must be positive")
        now = self.clock()
        entry = WaterEntry(
            id=uuid4(),
            amount=amount,
            unit=unit,
            logged_at=logged_at or now,
            created_at=now,
        )
        call_store("save_water_entry", lambda: self.repository.save_entry(entry))
        _logger.info(
            "Water logged: entry_id=%s amount_ml=%.1f", entry.id, entry.amount_ml
        )
        return entry

    def delete_entry(self, entry_id: UUID) -> WaterEntry:
        entry = call_store(
            "get_water_entry", lambda: self.repository.get_entry(entry_id)
        )
        if entry is None:
            raise WaterEntryNotFound(str(entry_id))
        call_store(
            "delete_water_entry", lambda: self.repository.delete_entry(entry_id)
        )
        return entry

    def entries_for_date(self, day: date) -> list[WaterEntry]:
        start, end = day_bounds(day, self.timezone)
        return self._list(start, end)

    def daily_summary(self, day: date | None = None) -> WaterDailySummary:
        """Return intake for the day, today by default."""
        target = day or self.today()
        return self._summarize(target, self.entries_for_date(target), self.goal_ml())

    def weekly_summary(self, end_date: date | None = None) -> WaterWeeklySummary:
        """Summarize the seven days ending at end_date.

        The average divides by the number of days with entries. The streak
        counts consecutive days ending today with intake of at least 90% of
        the goal.
        """
        end = end_date or self.today()
        start = end - timedelta(days=WEEK_DAYS - 1)
        goal = self.goal_ml()
        lower, upper = range_bounds(start, end, self.timezone)
        by_day: dict[date, list[WaterEntry]] = {}
        for entry in self._list(lower, upper):
            by_day.setdefault(self._local_day(entry.logged_at), []).append(entry)

        daily = {
            day: self._summarize(day, entries, goal)
            for day, entries in sorted(by_day.items())
        }
        total = sum(summary.total_ml for summary in daily.values())
        return WaterWeeklySummary(
            start_date=start,
            end_date=end,
            goal_ml=goal,
            total_ml=total,
            average_ml=total / max(1, len(daily)),
            streak=_streak(daily, goal, self.today()),
            daily_summaries=daily,
        )

    def _local_day(self, moment: datetime) -> date:
        return moment.astimezone(self.timezone).date()

    def _list(self, start: datetime, end: datetime) -> list[WaterEntry]:
        return call_store(
            "list_water_entries", lambda: self.repository.list_entries(start, end)
        )

    @staticmethod
    def _summarize(
        day: date, entries: Iterable[WaterEntry], goal: float
    ) -> WaterDailySummary:
        ordered = tuple(sorted(entries, key=lambda item: item.logged_at, reverse=True))
        total = sum(entry.amount_ml for entry in ordered)
        return WaterDailySummary(
            day=day,
            total_ml=total,
            goal_ml=goal,
            remaining_ml=max(0.0, goal - total),
            percentage=min(1.0, total / max(1.0, goal)),
            entries=ordered,
        )


def _streak(daily: dict[date, WaterDailySummary], goal: float, today: date) -> int:
    streak = 0
    day = today
    threshold = goal * STREAK_GOAL_FRACTION
    while day in daily and daily[day].total_ml >= threshold:
        streak += 1
        day -= timedelta(days=1)
    return streak
