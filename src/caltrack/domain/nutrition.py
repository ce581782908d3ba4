"""Nutrition value models shared across meals and summaries."""

from dataclasses import dataclass

CARB_KCAL_PER_GRAM = 4.0
PROTEIN_KCAL_PER_GRAM = 4.0
FAT_KCAL_PER_GRAM = 9.0


@dataclass(frozen=True)
class MacroProfile:
    """Calories and macronutrient grams for one nutrient channel set."""

    calories: float
    carbs_g: float
    protein_g: float
    fat_g: float

    def __add__(self, other: "MacroProfile") -> "MacroProfile":
        return MacroProfile(
            calories=self.calories + other.calories,
            carbs_g=self.carbs_g + other.carbs_g,
            protein_g=self.protein_g + other.protein_g,
            fat_g=self.fat_g + other.fat_g,
        )

    def scaled(self, factor: float) -> "MacroProfile":
        """Return every channel multiplied by factor."""
        return MacroProfile(
            calories=self.calories * factor,
            carbs_g=self.carbs_g * factor,
            protein_g=self.protein_g * factor,
            fat_g=self.fat_g * factor,
        )


ZERO_MACROS = MacroProfile(calories=0.0, carbs_g=0.0, protein_g=0.0, fat_g=0.0)
