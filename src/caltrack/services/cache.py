"""Process-local cache for derived summaries."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta

from caltrack.domain.summaries import NutritionSummary, WeeklyNutritionSummary

_logger = logging.getLogger(__name__)

DEFAULT_WEEKLY_TTL_SECONDS = 3600


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class _WeeklyEntry:
    summary: WeeklyNutritionSummary
    refreshed_at: datetime


class SummaryCache:
    """Daily summaries keyed by date plus one weekly slot.

    Daily entries never expire on their own; ``refresh`` or ``evict`` replaces
    them. The weekly slot is reused only for the same end date and only while
    younger than the staleness window, checked against the clock on each read.

    Loaders run outside the lock. ``evict`` and ``clear`` bump generation
    counters; a load that started before the bump returns its value to the
    caller without storing it.
    """

    def __init__(  # noqa: PLR0913
        self,
        daily_loader: Callable[[date], NutritionSummary],
        weekly_loader: Callable[[date], WeeklyNutritionSummary],
        today: Callable[[], date],
        *,
        clock: Callable[[], datetime] = utc_now,
        weekly_ttl_seconds: int = DEFAULT_WEEKLY_TTL_SECONDS,
    ) -> None:
        self._daily_loader = daily_loader
        self._weekly_loader = weekly_loader
        self._today = today
        self._clock = clock
        self._weekly_ttl = timedelta(seconds=weekly_ttl_seconds)
        self._lock = threading.Lock()
        self._daily: dict[date, NutritionSummary] = {}
        self._weekly: _WeeklyEntry | None = None
        self._generation = 0
        self._day_generations: dict[date, int] = {}
        self._weekly_generation = 0

    @property
    def last_refreshed_at(self) -> datetime | None:
        with self._lock:
            return self._weekly.refreshed_at if self._weekly else None

    def daily_dates(self) -> list[date]:
        """Return the dates with a cached daily summary."""
        with self._lock:
            return sorted(self._daily)

    def get_daily(self, day: date) -> NutritionSummary:
        """Return the cached summary for the day, computing it on a miss."""
        with self._lock:
            cached = self._daily.get(day)
            token = self._day_token(day)
        if cached is not None:
            _logger.debug("Daily summary cache hit: day=%s", day)
            return cached

        _logger.debug("Daily summary cache miss: day=%s", day)
        summary = self._daily_loader(day)
        with self._lock:
            if self._day_token(day) != token:
                _logger.debug("Daily summary invalidated during load: day=%s", day)
                return summary
            return self._daily.setdefault(day, summary)

    def get_weekly(self, end_date: date) -> WeeklyNutritionSummary:
        """Return the weekly summary, recomputing when missing or stale."""
        now = self._clock()
        with self._lock:
            entry = self._weekly
            token = self._weekly_token()
        if entry is not None and self._is_fresh(entry, end_date, now):
            _logger.debug("Weekly summary cache hit: end_date=%s", end_date)
            return entry.summary

        _logger.debug("Weekly summary recompute: end_date=%s", end_date)
        summary = self._weekly_loader(end_date)
        with self._lock:
            if self._weekly_token() != token:
                _logger.debug(
                    "Weekly summary invalidated during load: end_date=%s", end_date
                )
                return summary
            self._weekly = _WeeklyEntry(summary=summary, refreshed_at=now)
        return summary

    def refresh(self) -> None:
        """Drop everything, then reload today's daily and the current week."""
        self.clear()
        today = self._today()
        _logger.info("Refreshing summary cache: today=%s", today)
        self.get_daily(today)
        self.get_weekly(today)

    def clear(self) -> None:
        with self._lock:
            self._daily.clear()
            self._weekly = None
            self._generation += 1

    def evict(self, day: date) -> None:
        """Forget the day's summary and any weekly window containing it.

        Weekly loads already in flight are always invalidated, whatever their
        end date.
        """
        with self._lock:
            self._daily.pop(day, None)
            self._day_generations[day] = self._day_generations.get(day, 0) + 1
            self._weekly_generation += 1
            weekly = self._weekly
            if weekly and weekly.summary.start_date <= day <= weekly.summary.end_date:
                self._weekly = None

    def _day_token(self, day: date) -> tuple[int, int]:
        return self._generation, self._day_generations.get(day, 0)

    def _weekly_token(self) -> tuple[int, int]:
        return self._generation, self._weekly_generation

    def _is_fresh(self, entry: _WeeklyEntry, end_date: date, now: datetime) -> bool:
        if entry.summary.end_date != end_date:
            return False
        return now - entry.refreshed_at < self._weekly_ttl
