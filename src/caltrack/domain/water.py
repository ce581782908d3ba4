"""Domain models for water tracking."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from uuid import UUID

ML_PER_FLUID_OUNCE = 29.5735
ML_PER_KG_BODY_WEIGHT = 30.0
DEFAULT_WATER_GOAL_ML = 2000.0
STREAK_GOAL_FRACTION = 0.9


class WaterUnit(str, Enum):
    ML = "ml"
    OZ = "oz"

    def to_ml(self, amount: float) -> float:
        return amount * ML_PER_FLUID_OUNCE if self is WaterUnit.OZ else amount


class WaterIntakeStatus(str, Enum):
    """Hydration band for a day's progress toward the goal."""

    description: str

    def __new__(cls, value: str, description: str) -> "WaterIntakeStatus":
        member = str.__new__(cls, value)
        member._value_ = value
        member.description = description
        return member

    LOW = "low", "Low - Drink more water!"
    MODERATE = "moderate", "Moderate - Keep drinking water."
    GOOD = "good", "Good - Well hydrated!"

    @classmethod
    def for_fraction(cls, fraction: float) -> "WaterIntakeStatus":
        if fraction < 0.5:
            return cls.LOW
        if fraction < 0.8:
            return cls.MODERATE
        return cls.GOOD


@dataclass(frozen=True)
class WaterEntry:
    id: UUID
    amount: float
    unit: WaterUnit
    logged_at: datetime
    created_at: datetime | None = None

    @property
    def amount_ml(self) -> float:
        return self.unit.to_ml(self.amount)


@dataclass(frozen=True)
class WaterDailySummary:
    """One day's intake against the water goal, in millilitres."""

    day: date
    total_ml: float
    goal_ml: float
    remaining_ml: float
    percentage: float
    entries: tuple[WaterEntry, ...]

    @property
    def is_goal_met(self) -> bool:
        return self.total_ml >= self.goal_ml

    @property
    def status(self) -> WaterIntakeStatus:
        return WaterIntakeStatus.for_fraction(self.percentage)


@dataclass(frozen=True)
class WaterWeeklySummary:
    """Seven-day window ending at end_date; only days with entries are listed."""

    start_date: date
    end_date: date
    goal_ml: float
    total_ml: float
    average_ml: float
    streak: int
    daily_summaries: Mapping[date, WaterDailySummary]

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "daily_summaries", MappingProxyType(dict(self.daily_summaries))
        )

    @property
    def days_goal_met(self) -> int:
        summaries = self.daily_summaries.values()
        return sum(1 for summary in summaries if summary.is_goal_met)

    @property
    def goal_completion_rate(self) -> float:
        return self.days_goal_met / max(1, len(self.daily_summaries))
