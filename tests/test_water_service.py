"""Tests for water tracking."""

from datetime import timedelta
from zoneinfo import ZoneInfo

import pytest

from caltrack.config import DEFAULT_PROFILE_ID
from caltrack.domain.water import WaterIntakeStatus, WaterUnit
from caltrack.errors import WaterEntryNotFound
from caltrack.services.profiles import ProfileService
from caltrack.services.water import WaterService
from tests.conftest import (
    NOW,
    FakeClock,
    InMemoryProfileRepository,
    InMemoryWaterRepository,
    make_profile,
)

TODAY = NOW.date()


def _service(
    *, goal_ml: float | None = 2000.0, with_profile: bool = False
) -> tuple[WaterService, InMemoryWaterRepository]:
    profiles = InMemoryProfileRepository()
    if with_profile:
        profile = make_profile(weight_kg=80)
        profiles.profiles[profile.id] = profile
    repository = InMemoryWaterRepository()
    service = WaterService(
        repository=repository,
        profile_service=ProfileService(profiles),
        profile_id=DEFAULT_PROFILE_ID,
        timezone=ZoneInfo("UTC"),
        clock=FakeClock(),
        daily_goal_ml=goal_ml,
    )
    return service, repository


def test_log_water_defaults_to_now() -> None:
    service, repository = _service()

    entry = service.log_water(250)

    assert entry.logged_at == NOW
    assert entry.unit == WaterUnit.ML
    assert repository.entries[entry.id] == entry


def test_log_water_rejects_non_positive_amount() -> None:
    service, _ = _service()

    with pytest.raises(ValueError):
        service.log_water(0)


def test_daily_summary_converts_ounces() -> None:
    service, _ = _service()
    service.log_water(500)
    service.log_water(10, WaterUnit.OZ, NOW - timedelta(hours=1))

    summary = service.daily_summary()

    assert summary.total_ml == pytest.approx(795.735)
    assert summary.remaining_ml == pytest.approx(2000 - 795.735)
    assert summary.percentage == pytest.approx(795.735 / 2000)
    assert summary.status == WaterIntakeStatus.LOW
    assert summary.is_goal_met is False
    assert summary.entries[0].logged_at == NOW


def test_daily_summary_clamps_when_goal_exceeded() -> None:
    service, _ = _service()
    service.log_water(2500)

    summary = service.daily_summary(TODAY)

    assert summary.remaining_ml == 0
    assert summary.percentage == 1.0
    assert summary.is_goal_met is True
    assert summary.status == WaterIntakeStatus.GOOD


def test_goal_from_profile_weight_or_default() -> None:
    with_profile, _ = _service(goal_ml=None, with_profile=True)
    without_profile, _ = _service(goal_ml=None)

    assert with_profile.goal_ml() == pytest.approx(2400)
    assert without_profile.goal_ml() == 2000


def test_weekly_average_uses_days_with_entries() -> None:
    service, _ = _service()
    service.log_water(1000, logged_at=NOW)
    service.log_water(3000, logged_at=NOW - timedelta(days=2))
    service.log_water(700, logged_at=NOW - timedelta(days=9))

    summary = service.weekly_summary()

    assert summary.start_date == TODAY - timedelta(days=6)
    assert summary.total_ml == pytest.approx(4000)
    assert summary.average_ml == pytest.approx(2000)
    assert sorted(summary.daily_summaries) == [TODAY - timedelta(days=2), TODAY]
    assert summary.days_goal_met == 1
    assert summary.goal_completion_rate == pytest.approx(0.5)


def test_weekly_without_entries_has_zero_average() -> None:
    service, _ = _service()

    summary = service.weekly_summary()

    assert summary.total_ml == 0
    assert summary.average_ml == 0
    assert summary.streak == 0
    assert summary.goal_completion_rate == 0


def test_streak_counts_back_from_today_at_ninety_percent() -> None:
    service, _ = _service()
    service.log_water(1800, logged_at=NOW)
    service.log_water(2000, logged_at=NOW - timedelta(days=1))
    service.log_water(1900, logged_at=NOW - timedelta(days=2))
    service.log_water(1000, logged_at=NOW - timedelta(days=3))
    service.log_water(2500, logged_at=NOW - timedelta(days=4))

    assert service.weekly_summary().streak == 3


def test_streak_is_zero_when_today_is_short() -> None:
    service, _ = _service()
    service.log_water(2000, logged_at=NOW - timedelta(days=1))

    assert service.weekly_summary().streak == 0


def test_delete_entry() -> None:
    service, repository = _service()
    entry = service.log_water(300)

    removed = service.delete_entry(entry.id)

    assert removed == entry
    assert repository.entries == {}
    with pytest.raises(WaterEntryNotFound):
        service.delete_entry(entry.id)


def test_weekly_summary_days_are_read_only() -> None:
    service, _ = _service()
    service.log_water(300)

    summary = service.weekly_summary()

    with pytest.raises(TypeError):
        summary.daily_summaries[TODAY] = None  # type: ignore[index]
    assert list(summary.daily_summaries) == [TODAY]
