"""Services for the reusable food library."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from caltrack.domain.library import COMMON_FOODS, LibraryFood, search_common_foods
from caltrack.domain.meals import FoodSource
from caltrack.domain.nutrition import MacroProfile
from caltrack.errors import FoodNotFound, call_store
from caltrack.services.cache import utc_now

_logger = logging.getLogger(__name__)


class FoodLibraryRepository(Protocol):
    """Persistence interface for the food library."""

    def save_food(self, food: LibraryFood) -> None:
        """Insert or replace a food."""

    def get_food(self, food_id: UUID) -> LibraryFood | None:
        """Return a food by id, if present."""

    def search_foods(self, query: str, limit: int) -> list[LibraryFood]:
        """Return foods whose name contains the query."""

    def list_favorites(self) -> list[LibraryFood]:
        """Return favorite foods ordered by name."""

    def list_recent(self, limit: int) -> list[LibraryFood]:
        """Return used foods, most recently used first."""

    def list_frequent(self, limit: int) -> list[LibraryFood]:
        """Return foods ordered by use count, highest first."""

    def increment_usage(self, food_id: UUID, used_at: datetime) -> None:
        """Increment usage counters for a food."""

    def delete_food(self, food_id: UUID) -> None:
        """Delete a food."""


@dataclass
class FoodLibraryService:
    """Application service for library operations.

    Built-in catalog foods are searchable without being stored. The first
    time one is favorited or used it is copied into the library under its
    stable catalog id.
    """

    repository: FoodLibraryRepository
    clock: Callable[[], datetime] = field(default=utc_now)

    def search(self, query: str | None, limit: int = 10) -> list[LibraryFood]:
        """Search stored foods, then built-in foods not already stored."""
        if not query or not query.strip():
            return []
        needle = query.strip()
        stored = self._rank(
            call_store(
                "search_foods", lambda: self.repository.search_foods(needle, limit)
            )
        )
        known = {food.catalog_id for food in stored if food.catalog_id}
        known_ids = {food.id for food in stored}
        builtin = [
            food
            for food in search_common_foods(needle)
            if food.catalog_id not in known and food.id not in known_ids
        ]
        return (stored + builtin)[:limit]

    def common_foods(self) -> list[LibraryFood]:
        return list(COMMON_FOODS)

    def favorites(self) -> list[LibraryFood]:
        return call_store("list_favorites", self.repository.list_favorites)

    def recent(self, limit: int = 10) -> list[LibraryFood]:
        return call_store("list_recent", lambda: self.repository.list_recent(limit))

    def frequent(self, limit: int = 10) -> list[LibraryFood]:
        return call_store(
            "list_frequent", lambda: self.repository.list_frequent(limit)
        )

    def get_food(self, food_id: UUID) -> LibraryFood:
        """Return a stored food, or copy a built-in food into the library."""
        food = call_store("get_food", lambda: self.repository.get_food(food_id))
        if food is not None:
            return food
        builtin = next((item for item in COMMON_FOODS if item.id == food_id), None)
        if builtin is None:
            raise FoodNotFound(str(food_id))
        stored = replace(builtin, created_at=self.clock())
        self._save(stored)
        _logger.info("Catalog food added to library: catalog_id=%s", stored.catalog_id)
        return stored

    def create_custom_food(  # noqa: PLR0913
        self,
        name: str,
        per_serving: MacroProfile,
        serving_size: str = "",
        barcode: str | None = None,
        **nutrients: float | None,
    ) -> LibraryFood:
        """Create a user-defined food."""
        food = LibraryFood(
            id=uuid4(),
            name=name,
            per_serving=per_serving,
            serving_size=serving_size,
            source=FoodSource.SCANNED if barcode else FoodSource.CUSTOM,
            barcode=barcode,
            created_at=self.clock(),
            **nutrients,
        )
        self._save(food)
        _logger.info("Custom food created: food_id=%s name=%s", food.id, food.name)
        return food

    def toggle_favorite(self, food_id: UUID) -> LibraryFood:
        food = self.get_food(food_id)
        updated = replace(food, is_favorite=not food.is_favorite)
        self._save(updated)
        return updated

    def record_use(self, food_id: UUID) -> LibraryFood:
        """Record that a food has been logged and return the updated food."""
        food = self.get_food(food_id)
        now = self.clock()
        call_store(
            "increment_usage", lambda: self.repository.increment_usage(food.id, now)
        )
        return food.record_usage(now)

    def delete_food(self, food_id: UUID) -> None:
        call_store("delete_food", lambda: self.repository.delete_food(food_id))

    def _save(self, food: LibraryFood) -> None:
        call_store("save_food", lambda: self.repository.save_food(food))

    @staticmethod
    def _rank(items: list[LibraryFood]) -> list[LibraryFood]:
        """Rank foods by recent use then frequency."""
        return sorted(
            items,
            key=lambda item: (
                item.last_used_at or datetime.min.replace(tzinfo=UTC),
                item.use_count,
            ),
            reverse=True,
        )
