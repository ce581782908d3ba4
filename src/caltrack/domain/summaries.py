"""Derived summary models."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType

from caltrack.domain.meals import MealRecord, MealType
from caltrack.domain.nutrition import MacroProfile
from caltrack.domain.profile import MacroSplit


@dataclass(frozen=True)
class NutritionSummary:
    """A single day's intake measured against the profile goals."""

    day: date
    totals: MacroProfile
    goals: MacroProfile
    remaining: MacroProfile
    percentages: MacroProfile
    macro_distribution: MacroSplit
    meals_by_type: Mapping[MealType, tuple[MealRecord, ...]]

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "meals_by_type", MappingProxyType(dict(self.meals_by_type))
        )

    @property
    def meal_count(self) -> int:
        return sum(len(meals) for meals in self.meals_by_type.values())

    def has_meal(self, meal_type: MealType) -> bool:
        """Return True when at least one meal is logged for the slot."""
        return bool(self.meals_by_type.get(meal_type))


@dataclass(frozen=True)
class RangeTotals:
    """Totals and per-day averages over a date range."""

    start_date: date
    end_date: date
    day_count: int
    totals: MacroProfile
    averages: MacroProfile


@dataclass(frozen=True)
class WeeklyNutritionSummary:
    """Seven-day window ending at end_date."""

    start_date: date
    end_date: date
    day_count: int
    totals: MacroProfile
    averages: MacroProfile
    goals: MacroProfile
    percentages: MacroProfile
    daily_summaries: Mapping[date, NutritionSummary]

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "daily_summaries", MappingProxyType(dict(self.daily_summaries))
        )
