"""Supabase-backed profile repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from caltrack.domain.profile import (
    ActivityLevel,
    Gender,
    MacroSplit,
    NutritionGoals,
    Profile,
    WeightEntry,
    WeightGoal,
)
from caltrack.services.profiles import ProfileRepository

_PROFILE_COLUMNS = (
    "id, name, age, gender, height_cm, weight_kg, activity_level, weight_goal, "
    "carb_pct, protein_pct, fat_pct, bmr, tdee, daily_calorie_goal, "
    "carb_goal_g, protein_goal_g, fat_goal_g, created_at, updated_at"
)


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for the profile and weight history."""

    client: Client

    def get_profile(self, profile_id: UUID) -> Profile | None:
        """Return the profile row, if present."""
        response = (
            self.client.table("profiles")
            .select(_PROFILE_COLUMNS)
            .eq("id", str(profile_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def save_profile(self, profile: Profile) -> None:
        """Upsert the profile row with its derived goal columns."""
        self.client.table("profiles").upsert(_profile_payload(profile)).execute()

    def delete_profile(self, profile_id: UUID) -> None:
        """Delete the profile and its weight history."""
        self.client.table("weight_entries").delete().eq(
            "profile_id", str(profile_id)
        ).execute()
        self.client.table("profiles").delete().eq("id", str(profile_id)).execute()

    def add_weight_entry(self, entry: WeightEntry) -> None:
        """Insert a weight history row."""
        self.client.table("weight_entries").insert(
            {
                "id": str(entry.id),
                "profile_id": str(entry.profile_id),
                "recorded_at": entry.recorded_at.isoformat(),
                "weight_kg": entry.weight_kg,
            }
        ).execute()

    def list_weight_entries(self, profile_id: UUID, limit: int) -> list[WeightEntry]:
        """Return recent weight entries, newest first."""
        response = (
            self.client.table("weight_entries")
            .select("id, profile_id, recorded_at, weight_kg")
            .eq("profile_id", str(profile_id))
            .order("recorded_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [
            WeightEntry(
                id=UUID(str(row["id"])),
                profile_id=UUID(str(row["profile_id"])),
                recorded_at=datetime.fromisoformat(str(row["recorded_at"])),
                weight_kg=float(row.get("weight_kg", 0.0)),
            )
            for row in response.data or []
        ]


def _profile_payload(profile: Profile) -> dict[str, object]:
    return {
        "id": str(profile.id),
        "name": profile.name,
        "age": profile.age,
        "gender": profile.gender.value,
        "height_cm": profile.height_cm,
        "weight_kg": profile.weight_kg,
        "activity_level": profile.activity_level.value,
        "weight_goal": profile.weight_goal.value,
        "carb_pct": profile.macro_split.carbs,
        "protein_pct": profile.macro_split.protein,
        "fat_pct": profile.macro_split.fat,
        "bmr": profile.goals.bmr,
        "tdee": profile.goals.tdee,
        "daily_calorie_goal": profile.goals.daily_calorie_goal,
        "carb_goal_g": profile.goals.carb_goal_g,
        "protein_goal_g": profile.goals.protein_goal_g,
        "fat_goal_g": profile.goals.fat_goal_g,
        "created_at": profile.created_at.isoformat(),
        "updated_at": profile.updated_at.isoformat(),
    }


def _parse_profile(row: dict[str, object]) -> Profile:
    return Profile(
        id=UUID(str(row["id"])),
        name=str(row.get("name") or ""),
        age=int(row.get("age", 0)),
        gender=Gender(row.get("gender") or Gender.NOT_SPECIFIED.value),
        height_cm=float(row.get("height_cm", 0.0)),
        weight_kg=float(row.get("weight_kg", 0.0)),
        activity_level=ActivityLevel(
            row.get("activity_level") or ActivityLevel.MODERATE.value
        ),
        weight_goal=WeightGoal(row.get("weight_goal") or WeightGoal.MAINTAIN.value),
        macro_split=MacroSplit(
            carbs=float(row.get("carb_pct", 0.0)),
            protein=float(row.get("protein_pct", 0.0)),
            fat=float(row.get("fat_pct", 0.0)),
        ),
        goals=NutritionGoals(
            bmr=float(row.get("bmr", 0.0)),
            tdee=float(row.get("tdee", 0.0)),
            daily_calorie_goal=float(row.get("daily_calorie_goal", 0.0)),
            carb_goal_g=float(row.get("carb_goal_g", 0.0)),
            protein_goal_g=float(row.get("protein_goal_g", 0.0)),
            fat_goal_g=float(row.get("fat_goal_g", 0.0)),
        ),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        updated_at=datetime.fromisoformat(str(row["updated_at"])),
    )
