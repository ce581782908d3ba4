"""Meal logging service and meal store queries."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Protocol
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

from caltrack.domain.meals import FoodEntry, MealRecord, MealType
from caltrack.domain.nutrition import MacroProfile
from caltrack.domain.summaries import RangeTotals
from caltrack.errors import MealNotFound, call_store
from caltrack.services.cache import utc_now
from caltrack.services.summaries import (
    day_bounds,
    range_bounds,
    range_summary,
    sum_meal_totals,
)

_logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for meals and their owned food entries."""

    def list_meals(self, start: datetime, end: datetime) -> list[MealRecord]:
        """Return meals logged in [start, end)."""

    def get_meal(self, meal_id: UUID) -> MealRecord | None:
        """Return a meal with its entries."""

    def save_meal(self, meal: MealRecord) -> None:
        """Insert or replace a meal and its entries."""

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal and its entries."""

    def list_recent_meals(self, limit: int) -> list[MealRecord]:
        """Return the most recently logged meals."""


@dataclass
class MealService:
    """Keeps meal totals consistent with their entries on every write."""

    repository: MealRepository
    timezone: ZoneInfo = field(default_factory=lambda: ZoneInfo("UTC"))
    clock: Callable[[], datetime] = field(default=utc_now)

    def get_for_date(self, day: date) -> list[MealRecord]:
        """Return meals whose timestamp falls within the day."""
        start, end = day_bounds(day, self.timezone)
        return self._list(start, end)

    def get_for_range(self, start: date, end: date) -> list[MealRecord]:
        """Return meals from the start of start to the end of end."""
        lower, upper = range_bounds(start, end, self.timezone)
        return self._list(lower, upper)

    def totals_for_date(self, day: date) -> MacroProfile:
        return sum_meal_totals(self.get_for_date(day))

    def totals_for_range(self, start: date, end: date) -> RangeTotals:
        return range_summary(start, end, self.get_for_range(start, end), self.timezone)

    def recent_meals(self, limit: int = 10) -> list[MealRecord]:
        return call_store(
            "list_recent_meals", lambda: self.repository.list_recent_meals(limit)
        )

    def get_meal(self, meal_id: UUID) -> MealRecord:
        meal = call_store("get_meal", lambda: self.repository.get_meal(meal_id))
        if meal is None:
            raise MealNotFound(str(meal_id))
        return meal

    def create_meal(
        self,
        name: str,
        logged_at: datetime,
        meal_type: MealType,
        entries: list[FoodEntry] | None = None,
        notes: str | None = None,
    ) -> MealRecord:
        """Create a meal, recording usage for each entry."""
        now = self.clock()
        meal = MealRecord(
            id=uuid4(),
            name=name,
            logged_at=logged_at,
            meal_type=meal_type,
            notes=notes,
            created_at=now,
            updated_at=now,
        ).with_entries(tuple(entry.record_usage(now) for entry in entries or []))
        self._save(meal)
        _logger.info(
            "Meal created: meal_id=%s type=%s calories=%.1f",
            meal.id,
            meal.meal_type.value,
            meal.totals.calories,
        )
        return meal

    def update_meal(  # noqa: PLR0913
        self,
        meal_id: UUID,
        *,
        name: str | None = None,
        logged_at: datetime | None = None,
        meal_type: MealType | None = None,
        entries: list[FoodEntry] | None = None,
        notes: str | None = None,
    ) -> MealRecord:
        """Update meal fields; replacing entries recomputes totals."""
        current = self.get_meal(meal_id)
        now = self.clock()
        updated = replace(
            current,
            name=name if name is not None else current.name,
            logged_at=logged_at or current.logged_at,
            meal_type=meal_type or current.meal_type,
            notes=notes if notes is not None else current.notes,
        )
        new_entries = (
            tuple(entry.record_usage(now) for entry in entries)
            if entries is not None
            else updated.entries
        )
        updated = updated.with_entries(new_entries, updated_at=now)
        self._save(updated)
        return updated

    def add_food_entry(
        self, meal_id: UUID, entry: FoodEntry, serving_quantity: float = 1.0
    ) -> MealRecord:
        """Add a copy of entry at the given quantity to the meal."""
        meal = self.get_meal(meal_id)
        now = self.clock()
        added = replace(
            entry.record_usage(now), id=uuid4(), serving_quantity=serving_quantity
        )
        updated = meal.with_entries((*meal.entries, added), updated_at=now)
        self._save(updated)
        return updated

    def remove_food_entry(self, meal_id: UUID, entry_id: UUID) -> MealRecord:
        meal = self.get_meal(meal_id)
        remaining = tuple(entry for entry in meal.entries if entry.id != entry_id)
        updated = meal.with_entries(remaining, updated_at=self.clock())
        self._save(updated)
        return updated

    def toggle_favorite(self, meal_id: UUID) -> MealRecord:
        meal = self.get_meal(meal_id)
        updated = replace(
            meal, is_favorite=not meal.is_favorite, updated_at=self.clock()
        )
        self._save(updated)
        return updated

    def delete_meal(self, meal_id: UUID) -> MealRecord:
        """Delete the meal and its entries, returning what was removed."""
        meal = self.get_meal(meal_id)
        call_store("delete_meal", lambda: self.repository.delete_meal(meal_id))
        _logger.info("Meal deleted: meal_id=%s", meal_id)
        return meal

    def local_day(self, moment: datetime) -> date:
        """Return the calendar day a timestamp belongs to."""
        return moment.astimezone(self.timezone).date()

    def _list(self, start: datetime, end: datetime) -> list[MealRecord]:
        return call_store("list_meals", lambda: self.repository.list_meals(start, end))

    def _save(self, meal: MealRecord) -> None:
        call_store("save_meal", lambda: self.repository.save_meal(meal))
