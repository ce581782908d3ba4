"""Supabase repository for water entries."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from caltrack.adapters.supabase_meal_repository import parse_datetime
from caltrack.domain.water import WaterEntry, WaterUnit
from caltrack.services.water import WaterRepository

_COLUMNS = "id, amount, unit, logged_at, created_at"


@dataclass
class SupabaseWaterRepository(WaterRepository):
    client: Client

    def save_entry(self, entry: WaterEntry) -> None:
        self.client.table("water_entries").insert(
            {
                "id": str(entry.id),
                "amount": entry.amount,
                "unit": entry.unit.value,
                "logged_at": entry.logged_at.isoformat(),
                "created_at": (
                    entry.created_at.isoformat() if entry.created_at else None
                ),
            }
        ).execute()

    def get_entry(self, entry_id: UUID) -> WaterEntry | None:
        response = (
            self.client.table("water_entries")
            .select(_COLUMNS)
            .eq("id", str(entry_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def delete_entry(self, entry_id: UUID) -> None:
        self.client.table("water_entries").delete().eq("id", str(entry_id)).execute()

    def list_entries(self, start: datetime, end: datetime) -> list[WaterEntry]:
        """Return entries logged in [start, end), newest first."""
        response = (
            self.client.table("water_entries")
            .select(_COLUMNS)
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=True)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]


def _parse_entry(row: dict[str, object]) -> WaterEntry:
    logged_at = parse_datetime(row.get("logged_at"))
    if logged_at is None:
        raise ValueError(f"Water entry {row.get('id')} has no valid logged_at")
    return WaterEntry(
        id=UUID(str(row["id"])),
        amount=float(row.get("amount", 0.0)),
        unit=WaterUnit(row.get("unit") or WaterUnit.ML.value),
        logged_at=logged_at,
        created_at=parse_datetime(row.get("created_at")),
    )
