"""Heuristic meal recommendations for closing the remaining budget."""

from dataclasses import dataclass

from caltrack.domain.meals import MealType
from caltrack.domain.nutrition import MacroProfile
from caltrack.domain.recommendations import MealRecommendation
from caltrack.domain.summaries import NutritionSummary

BALANCED_DINNER = MacroProfile(calories=500, carbs_g=50, protein_g=30, fat_g=15)
PROTEIN_SNACK = MacroProfile(calories=200, carbs_g=10, protein_g=25, fat_g=8)
LIGHT_SNACK_CAP = MacroProfile(calories=150, carbs_g=15, protein_g=10, fat_g=5)


@dataclass(frozen=True)
class RecommendationEngine:
    """Fixed-threshold rules, each evaluated independently."""

    dinner_min_remaining_kcal: float = 500
    protein_snack_min_remaining_kcal: float = 200
    protein_snack_min_remaining_protein_g: float = 20
    light_snack_max_remaining_kcal: float = 300

    def recommend(self, summary: NutritionSummary) -> list[MealRecommendation]:
        """Return suggestions in rule order: dinner, protein snack, light snack."""
        remaining = summary.remaining
        recommendations: list[MealRecommendation] = []

        if remaining.calories > self.dinner_min_remaining_kcal and not summary.has_meal(
            MealType.DINNER
        ):
            recommendations.append(
                MealRecommendation(
                    name="Balanced dinner",
                    description="Lean protein, whole grains and vegetables.",
                    meal_type=MealType.DINNER,
                    macros=BALANCED_DINNER,
                )
            )

        if (
            remaining.calories > self.protein_snack_min_remaining_kcal
            and remaining.protein_g > self.protein_snack_min_remaining_protein_g
            and not summary.has_meal(MealType.SNACK)
        ):
            recommendations.append(
                MealRecommendation(
                    name="Protein snack",
                    description="Greek yogurt, cottage cheese or a protein shake.",
                    meal_type=MealType.SNACK,
                    macros=PROTEIN_SNACK,
                )
            )

        if 0 < remaining.calories < self.light_snack_max_remaining_kcal:
            recommendations.append(
                MealRecommendation(
                    name="Light snack",
                    description="Fruit or a handful of vegetables.",
                    meal_type=MealType.SNACK,
                    macros=_capped(LIGHT_SNACK_CAP, remaining),
                )
            )

        return recommendations


def _capped(cap: MacroProfile, remaining: MacroProfile) -> MacroProfile:
    return MacroProfile(
        calories=min(cap.calories, remaining.calories),
        carbs_g=min(cap.carbs_g, remaining.carbs_g),
        protein_g=min(cap.protein_g, remaining.protein_g),
        fat_g=min(cap.fat_g, remaining.fat_g),
    )
