"""Meal recommendation models."""

from dataclasses import dataclass

from caltrack.domain.meals import MealType
from caltrack.domain.nutrition import MacroProfile


@dataclass(frozen=True)
class MealRecommendation:
    """A suggested meal sized to close part of the remaining budget."""

    name: str
    description: str
    meal_type: MealType
    macros: MacroProfile
