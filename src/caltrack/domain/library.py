"""Domain models for the food library."""

from dataclasses import dataclass, replace
from datetime import datetime
from uuid import NAMESPACE_URL, UUID, uuid4, uuid5

from caltrack.domain.meals import FoodEntry, FoodSource
from caltrack.domain.nutrition import MacroProfile


@dataclass(frozen=True)
class LibraryFood:
    """A reusable food with per-serving nutrients and usage stats."""

    id: UUID
    name: str
    per_serving: MacroProfile
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
    use_count: int = 0
    last_used_at: datetime | None = None
    created_at: datetime | None = None

    def record_usage(self, used_at: datetime) -> "LibraryFood":
        return replace(self, use_count=self.use_count + 1, last_used_at=used_at)

    def to_entry(self, serving_quantity: float = 1.0) -> FoodEntry:
        """Return a meal entry copied from this food."""
        return FoodEntry(
            id=uuid4(),
            name=self.name,
            per_serving=self.per_serving,
            serving_quantity=serving_quantity,
            serving_size=self.serving_size,
            sugar_g=self.sugar_g,
            fiber_g=self.fiber_g,
            sodium_mg=self.sodium_mg,
            cholesterol_mg=self.cholesterol_mg,
            saturated_fat_g=self.saturated_fat_g,
            trans_fat_g=self.trans_fat_g,
            source=self.source,
            catalog_id=self.catalog_id,
            barcode=self.barcode,
            is_favorite=self.is_favorite,
            last_used_at=self.last_used_at,
            use_count=self.use_count,
        )


def catalog_food_id(catalog_id: str) -> UUID:
    """Stable library id for a built-in catalog food."""
    return uuid5(NAMESPACE_URL, f"caltrack:catalog:{catalog_id}")


def _catalog_food(  # noqa: PLR0913
    catalog_id: str,
    name: str,
    serving_size: str,
    calories: float,
    carbs_g: float,
    protein_g: float,
    fat_g: float,
    **nutrients: float,
) -> LibraryFood:
    return LibraryFood(
        id=catalog_food_id(catalog_id),
        name=name,
        per_serving=MacroProfile(
            calories=calories, carbs_g=carbs_g, protein_g=protein_g, fat_g=fat_g
        ),
        serving_size=serving_size,
        source=FoodSource.CATALOG,
        catalog_id=catalog_id,
        **nutrients,
    )


COMMON_FOODS: tuple[LibraryFood, ...] = (
    _catalog_food(
        "fruit_apple",
        "Apple",
        "1 medium (182g)",
        calories=95,
        carbs_g=25,
        protein_g=0.5,
        fat_g=0.3,
        sugar_g=19,
        fiber_g=4,
    ),
    _catalog_food(
        "fruit_banana",
        "Banana",
        "1 medium (118g)",
        calories=105,
        carbs_g=27,
        protein_g=1.3,
        fat_g=0.4,
        sugar_g=14,
        fiber_g=3,
    ),
    _catalog_food(
        "protein_chicken_breast",
        "Chicken Breast",
        "100g",
        calories=165,
        carbs_g=0,
        protein_g=31,
        fat_g=3.6,
        sodium_mg=74,
    ),
    _catalog_food(
        "grain_white_rice",
        "White Rice",
        "1 cup cooked (158g)",
        calories=205,
        carbs_g=45,
        protein_g=4.3,
        fat_g=0.4,
        fiber_g=0.6,
    ),
    _catalog_food(
        "dairy_whole_milk",
        "Whole Milk",
        "1 cup (244g)",
        calories=149,
        carbs_g=12,
        protein_g=8,
        fat_g=8,
        sugar_g=12,
    ),
)


def search_common_foods(query: str) -> list[LibraryFood]:
    """Return built-in foods whose name contains the query, ignoring case."""
    needle = query.strip().lower()
    if not needle:
        return []
    return [food for food in COMMON_FOODS if needle in food.name.lower()]
