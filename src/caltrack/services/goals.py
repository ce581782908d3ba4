"""Goal calculator: BMR, TDEE, calorie goal and macro gram targets.

Everything here is pure. Input validation belongs to the input layer, so
negative or zero measurements are computed as given.
"""

from dataclasses import replace
from datetime import datetime

from caltrack.domain.nutrition import (
    CARB_KCAL_PER_GRAM,
    FAT_KCAL_PER_GRAM,
    PROTEIN_KCAL_PER_GRAM,
)
from caltrack.domain.profile import (
    DEFAULT_MACRO_SPLIT,
    ActivityLevel,
    Gender,
    MacroSplit,
    NutritionGoals,
    Profile,
    WeightGoal,
)
from caltrack.errors import InvalidGoalConfiguration

KG_PER_POUND = 0.45359237
POUNDS_PER_KG = 2.2046226218
CM_PER_INCH = 2.54
INCHES_PER_FOOT = 12.0


def _mifflin_st_jeor(
    weight_kg: float, height_cm: float, age: int, offset: float
) -> float:
    return (10.0 * weight_kg) + (6.25 * height_cm) - (5.0 * float(age)) + offset


def calculate_bmr(
    weight_kg: float, height_cm: float, age: int, gender: Gender
) -> float:
    """Return BMR in kcal/day using the Mifflin-St Jeor equation."""
    if gender.bmr_offset is not None:
        return _mifflin_st_jeor(weight_kg, height_cm, age, gender.bmr_offset)
    male = _mifflin_st_jeor(weight_kg, height_cm, age, Gender.MALE.bmr_offset or 0.0)
    female = _mifflin_st_jeor(
        weight_kg, height_cm, age, Gender.FEMALE.bmr_offset or 0.0
    )
    return (male + female) / 2.0


def calculate_tdee(bmr: float, activity_level: ActivityLevel) -> float:
    """Return TDEE as BMR scaled by the activity multiplier."""
    return bmr * activity_level.multiplier


def calculate_daily_calorie_goal(tdee: float, weight_goal: WeightGoal) -> float:
    """Return TDEE adjusted by the goal delta. Not floored at zero."""
    return tdee + weight_goal.calorie_delta


def normalize_macro_split(split: MacroSplit) -> MacroSplit:
    """Rescale the split to sum to 1.0, defaulting to 40/30/30 when empty."""
    total = split.total
    if total <= 0:
        return DEFAULT_MACRO_SPLIT
    return MacroSplit(
        carbs=split.carbs / total,
        protein=split.protein / total,
        fat=split.fat / total,
    )


def calculate_macro_grams(
    calorie_goal: float, split: MacroSplit
) -> tuple[float, float, float]:
    """Return (carbs, protein, fat) grams for a calorie goal."""
    normalized = normalize_macro_split(split)
    return (
        calorie_goal * normalized.carbs / CARB_KCAL_PER_GRAM,
        calorie_goal * normalized.protein / PROTEIN_KCAL_PER_GRAM,
        calorie_goal * normalized.fat / FAT_KCAL_PER_GRAM,
    )


def calories_from_macros(carbs_g: float, protein_g: float, fat_g: float) -> float:
    """Return kcal supplied by the given macro grams."""
    return (
        carbs_g * CARB_KCAL_PER_GRAM
        + protein_g * PROTEIN_KCAL_PER_GRAM
        + fat_g * FAT_KCAL_PER_GRAM
    )


def recommended_protein_g(weight_kg: float, activity_level: ActivityLevel) -> float:
    """Return a daily protein recommendation from body weight and activity."""
    return weight_kg * activity_level.protein_g_per_kg


def compute_goals(profile: Profile) -> NutritionGoals:
    """Derive all goal fields for a profile."""
    bmr = calculate_bmr(
        profile.weight_kg, profile.height_cm, profile.age, profile.gender
    )
    tdee = calculate_tdee(bmr, profile.activity_level)
    calorie_goal = calculate_daily_calorie_goal(tdee, profile.weight_goal)
    carbs_g, protein_g, fat_g = calculate_macro_grams(calorie_goal, profile.macro_split)
    return NutritionGoals(
        bmr=bmr,
        tdee=tdee,
        daily_calorie_goal=calorie_goal,
        carb_goal_g=carbs_g,
        protein_goal_g=protein_g,
        fat_goal_g=fat_g,
    )


def apply_goals(profile: Profile, now: datetime) -> Profile:
    """Return the profile with a normalized split, fresh goals and updated_at."""
    split = normalize_macro_split(profile.macro_split)
    normalized = replace(profile, macro_split=split)
    return replace(normalized, goals=compute_goals(normalized), updated_at=now)


def validate_goals(goals: NutritionGoals) -> None:
    """Reject a non-positive daily calorie goal."""
    if goals.daily_calorie_goal <= 0:
        raise InvalidGoalConfiguration(
            f"Daily calorie goal must be positive, got {goals.daily_calorie_goal:.1f}"
        )


def pounds_to_kg(pounds: float) -> float:
    return pounds * KG_PER_POUND


def kg_to_pounds(kg: float) -> float:
    return kg * POUNDS_PER_KG


def feet_inches_to_cm(feet: int, inches: float) -> float:
    return (feet * INCHES_PER_FOOT + inches) * CM_PER_INCH


def cm_to_feet_inches(cm: float) -> tuple[int, float]:
    total_inches = cm / CM_PER_INCH
    feet = int(total_inches // INCHES_PER_FOOT)
    return feet, total_inches - feet * INCHES_PER_FOOT
