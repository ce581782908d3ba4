"""Supabase implementation for the food library."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from caltrack.adapters.supabase_meal_repository import optional_float, parse_datetime
from caltrack.domain.library import LibraryFood
from caltrack.domain.meals import OPTIONAL_NUTRIENTS, FoodSource
from caltrack.domain.nutrition import MacroProfile
from caltrack.services.library import FoodLibraryRepository

_TABLE = "foods"


@dataclass
class SupabaseFoodLibraryRepository(FoodLibraryRepository):
    """Supabase-backed repository for the food library."""

    client: Client

    def save_food(self, food: LibraryFood) -> None:
        self.client.table(_TABLE).upsert(_food_payload(food)).execute()

    def get_food(self, food_id: UUID) -> LibraryFood | None:
        """Return a food by id, if present."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("id", str(food_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_food(response.data[0])

    def search_foods(self, query: str, limit: int) -> list[LibraryFood]:
        """Search foods by name."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .ilike("name", f"%{query}%")
            .limit(limit)
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]

    def list_favorites(self) -> list[LibraryFood]:
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("is_favorite", True)
            .order("name", desc=False)
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]

    def list_recent(self, limit: int) -> list[LibraryFood]:
        """Return foods that have been used, most recent first."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .gt("use_count", 0)
            .order("last_used_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]

    def list_frequent(self, limit: int) -> list[LibraryFood]:
        response = (
            self.client.table(_TABLE)
            .select("*")
            .order("use_count", desc=True)
            .order("last_used_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]

    def increment_usage(self, food_id: UUID, used_at: datetime) -> None:
        """Increment usage counters for a food."""
        response = (
            self.client.table(_TABLE)
            .select("use_count")
            .eq("id", str(food_id))
            .limit(1)
            .execute()
        )
        current = 0
        if response.data:
            current = int(response.data[0].get("use_count", 0))
        self.client.table(_TABLE).update(
            {
                "use_count": current + 1,
                "last_used_at": used_at.isoformat(),
            }
        ).eq("id", str(food_id)).execute()

    def delete_food(self, food_id: UUID) -> None:
        self.client.table(_TABLE).delete().eq("id", str(food_id)).execute()


def _parse_food(row: dict[str, object]) -> LibraryFood:
    """Parse a food row into a domain model."""
    optional = {name: optional_float(row.get(name)) for name in OPTIONAL_NUTRIENTS}
    return LibraryFood(
        id=UUID(str(row["id"])),
        name=str(row.get("name") or ""),
        per_serving=MacroProfile(
            calories=float(row.get("calories", 0.0)),
            carbs_g=float(row.get("carbs_g", 0.0)),
            protein_g=float(row.get("protein_g", 0.0)),
            fat_g=float(row.get("fat_g", 0.0)),
        ),
        serving_size=str(row.get("serving_size") or ""),
        source=FoodSource(row.get("source") or FoodSource.CUSTOM.value),
        catalog_id=row.get("catalog_id"),
        barcode=row.get("barcode"),
        is_favorite=bool(row.get("is_favorite", False)),
        use_count=int(row.get("use_count", 0)),
        last_used_at=parse_datetime(row.get("last_used_at")),
        created_at=parse_datetime(row.get("created_at")),
        **optional,
    )


def _food_payload(food: LibraryFood) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": str(food.id),
        "name": food.name,
        "calories": food.per_serving.calories,
        "carbs_g": food.per_serving.carbs_g,
        "protein_g": food.per_serving.protein_g,
        "fat_g": food.per_serving.fat_g,
        "serving_size": food.serving_size,
        "source": food.source.value,
        "catalog_id": food.catalog_id,
        "barcode": food.barcode,
        "is_favorite": food.is_favorite,
        "use_count": food.use_count,
        "last_used_at": food.last_used_at.isoformat() if food.last_used_at else None,
        "created_at": food.created_at.isoformat() if food.created_at else None,
    }
    for name in OPTIONAL_NUTRIENTS:
        payload[name] = getattr(food, name)
    return payload
