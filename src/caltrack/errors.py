"""Error taxonomy for the nutrition core."""

import logging
from collections.abc import Callable
from typing import TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class CalTrackError(Exception):
    """Base class for errors raised by the nutrition core."""


class GoalsUnavailable(CalTrackError):
    """Raised when no profile exists to derive nutrition goals from."""

    def __init__(self, profile_id: object | None = None) -> None:
        self.profile_id = profile_id
        super().__init__(f"No profile found for id {profile_id}")


class StoreFailure(CalTrackError):
    """Wraps a persistence error raised by a repository."""

    def __init__(self, action: str, cause: Exception) -> None:
        self.action = action
        super().__init__(f"Store call {action} failed: {cause}")


class InvalidGoalConfiguration(CalTrackError):
    """Raised when strict validation rejects a non-positive calorie goal."""


class MealNotFound(CalTrackError, LookupError):
    """Raised when a meal id does not resolve to a stored meal."""


class FoodNotFound(CalTrackError, LookupError):
    """Raised when a food id matches neither the library nor the catalog."""


class WaterEntryNotFound(CalTrackError, LookupError):
    """Raised when deleting a water entry that is not stored."""


def call_store(action: str, func: Callable[[], T]) -> T:
    """Run a store call, wrapping unexpected errors in StoreFailure."""
    try:
        return func()
    except CalTrackError:
        raise
    except Exception as exc:
        _logger.exception("Store call failed: action=%s", action)
        raise StoreFailure(action, exc) from exc
