"""Tests for summary aggregation."""

from dataclasses import replace
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from caltrack.domain.meals import MealType
from caltrack.domain.nutrition import ZERO_MACROS, MacroProfile
from caltrack.domain.profile import MacroSplit, NutritionGoals
from caltrack.errors import GoalsUnavailable
from caltrack.services.summaries import (
    daily_summary,
    macro_distribution,
    range_summary,
    weekly_summary,
)
from tests.conftest import NOW, make_entry, make_meal, make_profile

UTC_ZONE = ZoneInfo("UTC")
TODAY = NOW.date()


def test_empty_day_reports_goals_as_remaining() -> None:
    profile = make_profile(macro_split=MacroSplit(carbs=0.5, protein=0.25, fat=0.25))

    summary = daily_summary(TODAY, [], profile, UTC_ZONE)

    assert summary.totals == ZERO_MACROS
    assert summary.remaining == summary.goals
    assert summary.remaining.calories == pytest.approx(
        profile.goals.daily_calorie_goal
    )
    assert summary.percentages == ZERO_MACROS
    assert summary.macro_distribution == profile.macro_split
    assert summary.meals_by_type == {}


def test_daily_totals_remaining_and_percentages() -> None:
    profile = make_profile()
    meals = [
        make_meal(NOW.replace(hour=8), MealType.BREAKFAST, make_entry(quantity=2)),
        make_meal(NOW.replace(hour=12), MealType.LUNCH),
    ]

    summary = daily_summary(TODAY, meals, profile, UTC_ZONE)

    assert summary.totals == MacroProfile(
        calories=600, carbs_g=120, protein_g=12, fat_g=3
    )
    assert summary.remaining.calories == pytest.approx(
        profile.goals.daily_calorie_goal - 600
    )
    assert summary.percentages.calories == pytest.approx(
        600 / profile.goals.daily_calorie_goal
    )
    assert list(summary.meals_by_type) == [MealType.BREAKFAST, MealType.LUNCH]


def test_overeating_clamps_remaining_and_percentage() -> None:
    profile = make_profile()
    huge = make_entry(calories=5000, carbs_g=600, protein_g=300, fat_g=200)
    meals = [make_meal(NOW, MealType.DINNER, huge)]

    summary = daily_summary(TODAY, meals, profile, UTC_ZONE)

    assert summary.remaining == ZERO_MACROS
    assert summary.percentages == MacroProfile(
        calories=1.0, carbs_g=1.0, protein_g=1.0, fat_g=1.0
    )


def test_zero_goal_does_not_divide_by_zero() -> None:
    profile = make_profile(macro_split=MacroSplit(carbs=0, protein=0, fat=0))
    profile = replace(
        profile,
        goals=NutritionGoals(
            bmr=0,
            tdee=0,
            daily_calorie_goal=0,
            carb_goal_g=0,
            protein_goal_g=0,
            fat_goal_g=0,
        ),
    )
    meals = [make_meal(NOW, MealType.LUNCH, make_entry(calories=0.5, carbs_g=0.25))]

    summary = daily_summary(TODAY, meals, profile, UTC_ZONE)

    assert summary.percentages.calories == pytest.approx(0.5)
    assert summary.percentages.carbs_g == pytest.approx(0.25)
    assert summary.remaining == ZERO_MACROS


def test_meal_at_midnight_belongs_to_next_day() -> None:
    profile = make_profile()
    midnight = datetime(2026, 10, 15, 0, 0, tzinfo=UTC)
    meals = [make_meal(midnight, MealType.SNACK)]

    before = daily_summary(date(2026, 10, 14), meals, profile, UTC_ZONE)
    after = daily_summary(date(2026, 10, 15), meals, profile, UTC_ZONE)

    assert before.totals == ZERO_MACROS
    assert after.totals.calories == 200


def test_day_boundaries_follow_configured_timezone() -> None:
    profile = make_profile()
    tz = ZoneInfo("America/New_York")
    late_evening = datetime(2026, 10, 15, 2, 30, tzinfo=UTC)
    meals = [make_meal(late_evening, MealType.DINNER)]

    summary = daily_summary(date(2026, 10, 14), meals, profile, tz)

    assert summary.totals.calories == 200
    assert summary.has_meal(MealType.DINNER)


def test_macro_distribution_uses_4_4_9() -> None:
    totals = MacroProfile(calories=0, carbs_g=50, protein_g=25, fat_g=100 / 9)

    distribution = macro_distribution(totals, MacroSplit(carbs=1, protein=0, fat=0))

    assert distribution.carbs == pytest.approx(0.5)
    assert distribution.protein == pytest.approx(0.25)
    assert distribution.fat == pytest.approx(0.25)


def test_missing_profile_raises_goals_unavailable() -> None:
    with pytest.raises(GoalsUnavailable):
        daily_summary(TODAY, [], None, UTC_ZONE)
    with pytest.raises(GoalsUnavailable):
        weekly_summary(TODAY, None, [], NOW, UTC_ZONE)


def test_range_summary_uses_days_between_with_floor_of_one() -> None:
    meals = [
        make_meal(NOW - timedelta(days=2)),
        make_meal(NOW - timedelta(days=1)),
        make_meal(NOW),
    ]

    same_day = range_summary(TODAY, TODAY, meals, UTC_ZONE)
    three_days = range_summary(TODAY - timedelta(days=2), TODAY, meals, UTC_ZONE)

    assert same_day.day_count == 1
    assert same_day.averages.calories == 200
    assert three_days.day_count == 2
    assert three_days.totals.calories == 600
    assert three_days.averages.calories == 300


def test_weekly_summary_goals_and_window() -> None:
    profile = make_profile()
    meals = [make_meal(NOW - timedelta(days=offset)) for offset in range(7)]
    meals.append(make_meal(NOW - timedelta(days=7)))

    summary = weekly_summary(TODAY, profile, meals, NOW, UTC_ZONE)

    assert summary.start_date == TODAY - timedelta(days=6)
    assert summary.totals.calories == 1400
    assert summary.averages.calories == pytest.approx(1400 / 6)
    assert summary.goals.calories == pytest.approx(
        profile.goals.daily_calorie_goal * 7
    )
    assert summary.percentages.calories == pytest.approx(
        1400 / (profile.goals.daily_calorie_goal * 7)
    )
    assert len(summary.daily_summaries) == 7
    assert summary.daily_summaries[TODAY].totals.calories == 200


def test_weekly_summary_skips_future_days() -> None:
    profile = make_profile()
    end_date = TODAY + timedelta(days=3)

    summary = weekly_summary(end_date, profile, [], NOW, UTC_ZONE)

    assert max(summary.daily_summaries) == TODAY
    assert all(day <= TODAY for day in summary.daily_summaries)
    assert len(summary.daily_summaries) == 4


def test_summary_mappings_are_read_only() -> None:
    profile = make_profile()
    meals = [make_meal(NOW)]

    daily = daily_summary(TODAY, meals, profile, UTC_ZONE)
    weekly = weekly_summary(TODAY, profile, meals, NOW, UTC_ZONE)

    with pytest.raises(TypeError):
        daily.meals_by_type[MealType.SNACK] = ()  # type: ignore[index]
    with pytest.raises(TypeError):
        del weekly.daily_summaries[TODAY]  # type: ignore[attr-defined]
    assert daily.meal_count == 1
    assert len(weekly.daily_summaries) == 7


def test_summary_does_not_alias_caller_mapping() -> None:
    grouped = {MealType.LUNCH: (make_meal(NOW),)}
    summary = replace(
        daily_summary(TODAY, [], make_profile(), UTC_ZONE), meals_by_type=grouped
    )

    grouped.clear()

    assert summary.has_meal(MealType.LUNCH)
