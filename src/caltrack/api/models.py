"""Request models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, Field

from caltrack.domain.meals import FoodSource, MealType
from caltrack.domain.profile import ActivityLevel, Gender, WeightGoal
from caltrack.domain.water import WaterUnit


class MacroSplitIn(BaseModel):
    carbs: float = Field(ge=0.0)
    protein: float = Field(ge=0.0)
    fat: float = Field(ge=0.0)


class ProfileIn(BaseModel):
    """Body metrics and preferences submitted during onboarding or edits."""

    name: str = ""
    age: int = Field(ge=0, le=130)
    gender: Gender = Gender.NOT_SPECIFIED
    height_cm: float = Field(gt=0)
    weight_kg: float = Field(gt=0)
    activity_level: ActivityLevel = ActivityLevel.MODERATE
    weight_goal: WeightGoal = WeightGoal.MAINTAIN
    macro_split: MacroSplitIn | None = None


class WeightIn(BaseModel):
    weight_kg: float = Field(gt=0)


class FoodEntryIn(BaseModel):
    """Food values per serving plus the number of servings eaten."""

    name: str
    calories: float = Field(ge=0)
    carbs_g: float = Field(default=0.0, ge=0)
    protein_g: float = Field(default=0.0, ge=0)
    fat_g: float = Field(default=0.0, ge=0)
    serving_quantity: float = Field(default=1.0, gt=0)
    serving_size: str = ""
    sugar_g: float | None = Field(default=None, ge=0)
    fiber_g: float | None = Field(default=None, ge=0)
    sodium_mg: float | None = Field(default=None, ge=0)
    cholesterol_mg: float | None = Field(default=None, ge=0)
    saturated_fat_g: float | None = Field(default=None, ge=0)
    trans_fat_g: float | None = Field(default=None, ge=0)
    source: FoodSource = FoodSource.CUSTOM
    catalog_id: str | None = None
    barcode: str | None = None


class MealIn(BaseModel):
    name: str
    logged_at: datetime
    meal_type: MealType | None = None
    entries: list[FoodEntryIn] = Field(default_factory=list)
    notes: str | None = None


class MealUpdateIn(BaseModel):
    """Fields to change on a meal; ``entries`` replaces all entries when set."""

    name: str | None = None
    logged_at: datetime | None = None
    meal_type: MealType | None = None
    entries: list[FoodEntryIn] | None = None
    notes: str | None = None


class LibraryFoodIn(BaseModel):
    name: str = Field(min_length=1)
    calories: float = Field(ge=0)
    carbs_g: float = Field(default=0.0, ge=0)
    protein_g: float = Field(default=0.0, ge=0)
    fat_g: float = Field(default=0.0, ge=0)
    serving_size: str = ""
    barcode: str | None = None
    sugar_g: float | None = Field(default=None, ge=0)
    fiber_g: float | None = Field(default=None, ge=0)
    sodium_mg: float | None = Field(default=None, ge=0)
    cholesterol_mg: float | None = Field(default=None, ge=0)
    saturated_fat_g: float | None = Field(default=None, ge=0)
    trans_fat_g: float | None = Field(default=None, ge=0)


class LogFoodIn(BaseModel):
    serving_quantity: float = Field(default=1.0, gt=0)


class WaterIn(BaseModel):
    amount: float = Field(gt=0)
    unit: WaterUnit = WaterUnit.ML
    logged_at: datetime | None = None
