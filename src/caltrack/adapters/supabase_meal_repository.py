"""Supabase repository for meals and their food entries."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from caltrack.domain.meals import (
    OPTIONAL_NUTRIENTS,
    FoodEntry,
    FoodSource,
    MealRecord,
    MealType,
)
from caltrack.domain.nutrition import MacroProfile
from caltrack.services.meals import MealRepository

_MEAL_COLUMNS = (
    "id, name, logged_at, meal_type, total_calories, total_carbs_g, "
    "total_protein_g, total_fat_g, is_favorite, notes, created_at, updated_at"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meal persistence."""

    client: Client

    def list_meals(self, start: datetime, end: datetime) -> list[MealRecord]:
        """Return meals logged in [start, end), oldest first."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=False)
            .execute()
        )
        return self._with_entries(response.data or [])

    def get_meal(self, meal_id: UUID) -> MealRecord | None:
        """Return a meal with its entries."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("id", str(meal_id))
            .limit(1)
            .execute()
        )
        meals = self._with_entries(response.data or [])
        return meals[0] if meals else None

    def save_meal(self, meal: MealRecord) -> None:
        """Write the meal header, its entries, then the meal totals.

        Entry rows are upserted before stale ones are deleted, and the totals
        land last, so a failure part way leaves the previous entries and
        totals in place.
        """
        meal_id = str(meal.id)
        self.client.table("meals").upsert(_meal_payload(meal)).execute()
        entry_ids = [str(entry.id) for entry in meal.entries]
        if entry_ids:
            self.client.table("food_entries").upsert(
                [_entry_payload(meal.id, entry) for entry in meal.entries]
            ).execute()
        stale = self.client.table("food_entries").delete().eq("meal_id", meal_id)
        if entry_ids:
            stale = stale.not_.in_("id", entry_ids)
        stale.execute()
        self.client.table("meals").update(_totals_payload(meal)).eq(
            "id", meal_id
        ).execute()

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal and the entries it owns."""
        self.client.table("food_entries").delete().eq("meal_id", str(meal_id)).execute()
        self.client.table("meals").delete().eq("id", str(meal_id)).execute()

    def list_recent_meals(self, limit: int) -> list[MealRecord]:
        """Return the most recently logged meals."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .order("logged_at", desc=True)
            .limit(limit)
            .execute()
        )
        return self._with_entries(response.data or [])

    def _with_entries(self, rows: list[dict[str, object]]) -> list[MealRecord]:
        if not rows:
            return []
        meal_ids = [str(row["id"]) for row in rows]
        response = (
            self.client.table("food_entries")
            .select("*")
            .in_("meal_id", meal_ids)
            .execute()
        )
        entries: dict[str, list[FoodEntry]] = {meal_id: [] for meal_id in meal_ids}
        for entry_row in response.data or []:
            entries.setdefault(str(entry_row["meal_id"]), []).append(
                _parse_entry(entry_row)
            )
        return [_parse_meal(row, tuple(entries[str(row["id"])])) for row in rows]


def parse_datetime(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        parsed = datetime.fromisoformat(raw)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return None


def optional_float(raw: object) -> float | None:
    return float(raw) if isinstance(raw, int | float) else None


def _require_datetime(row: dict[str, object], column: str) -> datetime:
    parsed = parse_datetime(row.get(column))
    if parsed is None:
        raise ValueError(f"Meal row {row.get('id')} has no valid {column}")
    return parsed


def _parse_meal(row: dict[str, object], entries: tuple[FoodEntry, ...]) -> MealRecord:
    return MealRecord(
        id=UUID(str(row["id"])),
        name=str(row.get("name") or ""),
        logged_at=_require_datetime(row, "logged_at"),
        meal_type=MealType(row.get("meal_type") or MealType.OTHER.value),
        entries=entries,
        totals=MacroProfile(
            calories=float(row.get("total_calories", 0.0)),
            carbs_g=float(row.get("total_carbs_g", 0.0)),
            protein_g=float(row.get("total_protein_g", 0.0)),
            fat_g=float(row.get("total_fat_g", 0.0)),
        ),
        is_favorite=bool(row.get("is_favorite", False)),
        notes=row.get("notes"),
        created_at=parse_datetime(row.get("created_at")),
        updated_at=parse_datetime(row.get("updated_at")),
    )


def _parse_entry(row: dict[str, object]) -> FoodEntry:
    optional = {name: optional_float(row.get(name)) for name in OPTIONAL_NUTRIENTS}
    return FoodEntry(
        id=UUID(str(row["id"])),
        name=str(row.get("name") or ""),
        per_serving=MacroProfile(
            calories=float(row.get("calories", 0.0)),
            carbs_g=float(row.get("carbs_g", 0.0)),
            protein_g=float(row.get("protein_g", 0.0)),
            fat_g=float(row.get("fat_g", 0.0)),
        ),
        serving_quantity=float(row.get("serving_quantity", 1.0)),
        serving_size=str(row.get("serving_size") or ""),
        source=FoodSource(row.get("source") or FoodSource.CUSTOM.value),
        catalog_id=row.get("catalog_id"),
        barcode=row.get("barcode"),
        is_favorite=bool(row.get("is_favorite", False)),
        last_used_at=parse_datetime(row.get("last_used_at")),
        use_count=int(row.get("use_count", 0)),
        **optional,
    )


def _meal_payload(meal: MealRecord) -> dict[str, object]:
    """Meal columns other than the stored totals."""
    return {
        "id": str(meal.id),
        "name": meal.name,
        "logged_at": meal.logged_at.isoformat(),
        "meal_type": meal.meal_type.value,
        "is_favorite": meal.is_favorite,
        "notes": meal.notes,
        "created_at": meal.created_at.isoformat() if meal.created_at else None,
        "updated_at": meal.updated_at.isoformat() if meal.updated_at else None,
    }


def _totals_payload(meal: MealRecord) -> dict[str, object]:
    return {
        "total_calories": meal.totals.calories,
        "total_carbs_g": meal.totals.carbs_g,
        "total_protein_g": meal.totals.protein_g,
        "total_fat_g": meal.totals.fat_g,
    }


def _entry_payload(meal_id: UUID, entry: FoodEntry) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": str(entry.id),
        "meal_id": str(meal_id),
        "name": entry.name,
        "calories": entry.per_serving.calories,
        "carbs_g": entry.per_serving.carbs_g,
        "protein_g": entry.per_serving.protein_g,
        "fat_g": entry.per_serving.fat_g,
        "serving_quantity": entry.serving_quantity,
        "serving_size": entry.serving_size,
        "source": entry.source.value,
        "catalog_id": entry.catalog_id,
        "barcode": entry.barcode,
        "is_favorite": entry.is_favorite,
        "last_used_at": entry.last_used_at.isoformat() if entry.last_used_at else None,
        "use_count": entry.use_count,
    }
    for name in OPTIONAL_NUTRIENTS:
        payload[name] = getattr(entry, name)
    return payload
