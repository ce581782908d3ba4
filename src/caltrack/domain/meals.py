"""Domain models for meal logging."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from uuid import UUID

from caltrack.domain.nutrition import ZERO_MACROS, MacroProfile

BREAKFAST_HOURS = range(5, 11)
LUNCH_HOURS = range(11, 15)
DINNER_HOURS = range(17, 22)


class MealType(str, Enum):
    """Meal slot within a day."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    OTHER = "other"

    @classmethod
    def suggested_for_hour(cls, hour: int) -> "MealType":
        """Return the slot a meal logged at this local hour most likely fills."""
        if hour in BREAKFAST_HOURS:
            return cls.BREAKFAST
        if hour in LUNCH_HOURS:
            return cls.LUNCH
        if hour in DINNER_HOURS:
            return cls.DINNER
        return cls.SNACK


class FoodSource(str, Enum):
    """Where a food entry's nutrient values came from."""

    CUSTOM = "custom"
    CATALOG = "catalog"
    SCANNED = "scanned"


OPTIONAL_NUTRIENTS = (
    "sugar_g",
    "fiber_g",
    "sodium_mg",
    "cholesterol_mg",
    "saturated_fat_g",
    "trans_fat_g",
)


@dataclass(frozen=True)
class FoodEntry:
    """A food used in a meal, with per-serving nutrients."""

    id: UUID
    name: str
    per_serving: MacroProfile
    serving_quantity: float = 1.0
    serving_size: str = ""
    sugar_g: float | None = None
    fiber_g: float | None = None
    sodium_mg: float | None = None
    cholesterol_mg: float | None = None
    saturated_fat_g: float | None = None
    trans_fat_g: float | None = None
    source: FoodSource = FoodSource.CUSTOM
    catalog_id: str | None = None
    barcode: str | None = None
    is_favorite: bool = False
    last_used_at: datetime | None = None
    use_count: int = 0

    @property
    def totals(self) -> MacroProfile:
        """Nutrients for the logged quantity."""
        return self.per_serving.scaled(self.serving_quantity)

    def record_usage(self, used_at: datetime) -> "FoodEntry":
        """Return a copy with usage stats bumped."""
        return replace(self, use_count=self.use_count + 1, last_used_at=used_at)


def sum_entry_totals(entries: tuple[FoodEntry, ...]) -> MacroProfile:
    """Sum per-serving nutrients times serving quantity over entries."""
    total = ZERO_MACROS
    for entry in entries:
        total = total + entry.totals
    return total


@dataclass(frozen=True)
class MealRecord:
    """A logged meal with denormalized nutrient totals."""

    id: UUID
    name: str
    logged_at: datetime
    meal_type: MealType
    entries: tuple[FoodEntry, ...] = ()
    totals: MacroProfile = ZERO_MACROS
    is_favorite: bool = False
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = field(default=None, compare=False)

    def with_entries(
        self, entries: tuple[FoodEntry, ...], updated_at: datetime | None = None
    ) -> "MealRecord":
        """Return a copy owning entries, with totals recomputed from them."""
        return replace(
            self,
            entries=tuple(entries),
            totals=sum_entry_totals(tuple(entries)),
            updated_at=updated_at or self.updated_at,
        )
