"""Profile lifecycle and goal recomputation."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Protocol
from uuid import UUID, uuid4

from caltrack.domain.profile import (
    ActivityLevel,
    Gender,
    MacroSplit,
    NutritionGoals,
    Profile,
    WeightEntry,
    WeightGoal,
)
from caltrack.errors import GoalsUnavailable, call_store
from caltrack.services.cache import utc_now
from caltrack.services.goals import apply_goals, validate_goals

_logger = logging.getLogger(__name__)

_PENDING_GOALS = NutritionGoals(
    bmr=0.0,
    tdee=0.0,
    daily_calorie_goal=0.0,
    carb_goal_g=0.0,
    protein_goal_g=0.0,
    fat_goal_g=0.0,
)

_EDITABLE_FIELDS = frozenset(
    {
        "name",
        "age",
        "gender",
        "height_cm",
        "weight_kg",
        "activity_level",
        "weight_goal",
        "macro_split",
    }
)


class ProfileRepository(Protocol):
    """Persistence interface for the profile and its weight history."""

    def get_profile(self, profile_id: UUID) -> Profile | None:
        """Return the profile if it exists."""

    def save_profile(self, profile: Profile) -> None:
        """Insert or replace the profile."""

    def delete_profile(self, profile_id: UUID) -> None:
        """Remove the profile."""

    def add_weight_entry(self, entry: WeightEntry) -> None:
        """Append a weight history entry."""

    def list_weight_entries(self, profile_id: UUID, limit: int) -> list[WeightEntry]:
        """Return the most recent weight entries, newest first."""


@dataclass
class ProfileService:
    """Keeps the stored profile's goal fields in sync with its inputs."""

    repository: ProfileRepository
    clock: Callable[[], datetime] = field(default=utc_now)
    reject_non_positive_goals: bool = False

    def get_current(self, profile_id: UUID) -> Profile | None:
        """Return the profile or None when onboarding has not happened."""
        return call_store(
            "get_profile", lambda: self.repository.get_profile(profile_id)
        )

    def require(self, profile_id: UUID) -> Profile:
        """Return the profile or raise GoalsUnavailable."""
        profile = self.get_current(profile_id)
        if profile is None:
            raise GoalsUnavailable(profile_id)
        return profile

    def create_profile(  # noqa: PLR0913
        self,
        profile_id: UUID,
        *,
        name: str,
        age: int,
        gender: Gender,
        height_cm: float,
        weight_kg: float,
        activity_level: ActivityLevel,
        weight_goal: WeightGoal,
        macro_split: MacroSplit | None = None,
    ) -> Profile:
        """Create the profile, using the goal's recommended split by default."""
        now = self.clock()
        draft = Profile(
            id=profile_id,
            name=name,
            age=age,
            gender=gender,
            height_cm=height_cm,
            weight_kg=weight_kg,
            activity_level=activity_level,
            weight_goal=weight_goal,
            macro_split=macro_split or weight_goal.recommended_split,
            goals=_PENDING_GOALS,
            created_at=now,
            updated_at=now,
        )
        profile = self.save(draft)
        self._record_weight(profile, now)
        return profile

    def save(self, profile: Profile) -> Profile:
        """Recompute goals and persist the profile."""
        updated = apply_goals(profile, self.clock())
        if self.reject_non_positive_goals:
            validate_goals(updated.goals)
        call_store("save_profile", lambda: self.repository.save_profile(updated))
        _logger.info(
            "Profile goals recomputed: profile_id=%s calories=%.1f",
            updated.id,
            updated.goals.daily_calorie_goal,
        )
        return updated

    def update_profile(self, profile_id: UUID, **changes: object) -> Profile:
        """Apply edits to the stored profile and recompute its goals."""
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown profile fields: {sorted(unknown)}")
        current = self.require(profile_id)
        updated = self.save(replace(current, **changes))
        if "weight_kg" in changes and current.weight_kg != updated.weight_kg:
            self._record_weight(updated, updated.updated_at)
        return updated

    def update_weight(self, profile_id: UUID, weight_kg: float) -> Profile:
        """Record a new body weight, recomputing goals."""
        current = self.require(profile_id)
        updated = self.save(replace(current, weight_kg=weight_kg))
        self._record_weight(updated, updated.updated_at)
        return updated

    def weight_history(self, profile_id: UUID, limit: int = 30) -> list[WeightEntry]:
        return call_store(
            "list_weight_entries",
            lambda: self.repository.list_weight_entries(profile_id, limit),
        )

    def delete_profile(self, profile_id: UUID) -> None:
        """Delete the profile. Only called on explicit user request."""
        self.require(profile_id)
        call_store("delete_profile", lambda: self.repository.delete_profile(profile_id))
        _logger.info("Profile deleted: profile_id=%s", profile_id)

    def _record_weight(self, profile: Profile, recorded_at: datetime) -> None:
        entry = WeightEntry(
            id=uuid4(),
            profile_id=profile.id,
            recorded_at=recorded_at,
            weight_kg=profile.weight_kg,
        )
        call_store("add_weight_entry", lambda: self.repository.add_weight_entry(entry))
