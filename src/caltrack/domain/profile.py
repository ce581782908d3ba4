"""Profile domain models and their lookup tables."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class Gender(str, Enum):
    """Sex category used by the BMR formula.

    ``bmr_offset`` is the constant term of the Mifflin-St Jeor equation. A
    ``None`` offset means the mean of the male and female formulas is used.
    """

    bmr_offset: float | None

    def __new__(cls, value: str, bmr_offset: float | None) -> "Gender":
        member = str.__new__(cls, value)
        member._value_ = value
        member.bmr_offset = bmr_offset
        return member

    MALE = "male", 5.0
    FEMALE = "female", -161.0
    NON_BINARY = "non_binary", None
    NOT_SPECIFIED = "not_specified", None


class ActivityLevel(str, Enum):
    """Activity level with its TDEE multiplier and protein g/kg target."""

    multiplier: float
    protein_g_per_kg: float

    def __new__(
        cls, value: str, multiplier: float, protein_g_per_kg: float
    ) -> "ActivityLevel":
        member = str.__new__(cls, value)
        member._value_ = value
        member.multiplier = multiplier
        member.protein_g_per_kg = protein_g_per_kg
        return member

    SEDENTARY = "sedentary", 1.2, 0.8
    LIGHT = "light", 1.375, 1.0
    MODERATE = "moderate", 1.55, 1.2
    ACTIVE = "active", 1.725, 1.6
    VERY_ACTIVE = "very_active", 1.9, 2.0


@dataclass(frozen=True)
class MacroSplit:
    """Share of daily calories targeted from each macronutrient."""

    carbs: float
    protein: float
    fat: float

    @property
    def total(self) -> float:
        return self.carbs + self.protein + self.fat


DEFAULT_MACRO_SPLIT = MacroSplit(carbs=0.4, protein=0.3, fat=0.3)


class WeightGoal(str, Enum):
    """Weight goal with its calorie delta and recommended macro split."""

    calorie_delta: float
    recommended_split: MacroSplit

    def __new__(
        cls, value: str, calorie_delta: float, recommended_split: MacroSplit
    ) -> "WeightGoal":
        member = str.__new__(cls, value)
        member._value_ = value
        member.calorie_delta = calorie_delta
        member.recommended_split = recommended_split
        return member

    LOSE = "lose", -500.0, MacroSplit(carbs=0.35, protein=0.40, fat=0.25)
    MAINTAIN = "maintain", 0.0, MacroSplit(carbs=0.40, protein=0.30, fat=0.30)
    GAIN = "gain", 500.0, MacroSplit(carbs=0.45, protein=0.30, fat=0.25)


@dataclass(frozen=True)
class NutritionGoals:
    """Goals derived from a profile by the goal calculator."""

    bmr: float
    tdee: float
    daily_calorie_goal: float
    carb_goal_g: float
    protein_goal_g: float
    fat_goal_g: float


@dataclass(frozen=True)
class Profile:
    """The tracked person's body metrics, preferences and cached goals."""

    id: UUID
    name: str
    age: int
    gender: Gender
    height_cm: float
    weight_kg: float
    activity_level: ActivityLevel
    weight_goal: WeightGoal
    macro_split: MacroSplit
    goals: NutritionGoals
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class WeightEntry:
    """A single recorded body weight."""

    id: UUID
    profile_id: UUID
    recorded_at: datetime
    weight_kg: float
