"""Summary aggregation over meal records.

Day boundaries are half-open: a meal logged exactly at midnight belongs to
the day that starts at that midnight.
"""

from collections.abc import Iterable
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from caltrack.domain.meals import MealRecord, MealType
from caltrack.domain.nutrition import (
    CARB_KCAL_PER_GRAM,
    FAT_KCAL_PER_GRAM,
    PROTEIN_KCAL_PER_GRAM,
    ZERO_MACROS,
    MacroProfile,
)
from caltrack.domain.profile import MacroSplit, Profile
from caltrack.domain.summaries import (
    NutritionSummary,
    RangeTotals,
    WeeklyNutritionSummary,
)
from caltrack.errors import GoalsUnavailable

WEEK_DAYS = 7


def start_of_day(day: date, tz: ZoneInfo) -> datetime:
    """Return local midnight for the day."""
    return datetime(day.year, day.month, day.day, tzinfo=tz)


def day_bounds(day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """Return the half-open [start, end) interval covering the day."""
    start = start_of_day(day, tz)
    return start, start_of_day(day + timedelta(days=1), tz)


def range_bounds(start: date, end: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """Return [start_of_day(start), start_of_day(end) + 1 day)."""
    return start_of_day(start, tz), start_of_day(end + timedelta(days=1), tz)


def days_between(start: date, end: date) -> int:
    return (end - start).days


def _in_interval(meal: MealRecord, start: datetime, end: datetime) -> bool:
    return start <= meal.logged_at < end


def sum_meal_totals(meals: Iterable[MealRecord]) -> MacroProfile:
    """Sum the stored nutrient totals of meals."""
    total = ZERO_MACROS
    for meal in meals:
        total = total + meal.totals
    return total


def goals_for(profile: Profile | None) -> MacroProfile:
    """Return the profile's daily goals as a nutrient channel set."""
    if profile is None:
        raise GoalsUnavailable()
    goals = profile.goals
    return MacroProfile(
        calories=goals.daily_calorie_goal,
        carbs_g=goals.carb_goal_g,
        protein_g=goals.protein_goal_g,
        fat_g=goals.fat_goal_g,
    )


def remaining_for(totals: MacroProfile, goals: MacroProfile) -> MacroProfile:
    """Return max(0, goal - total) per channel."""
    return MacroProfile(
        calories=max(0.0, goals.calories - totals.calories),
        carbs_g=max(0.0, goals.carbs_g - totals.carbs_g),
        protein_g=max(0.0, goals.protein_g - totals.protein_g),
        fat_g=max(0.0, goals.fat_g - totals.fat_g),
    )


def _fraction(total: float, goal: float) -> float:
    return min(1.0, total / max(1.0, goal))


def percentages_for(totals: MacroProfile, goals: MacroProfile) -> MacroProfile:
    """Return min(1, total / max(1, goal)) per channel."""
    return MacroProfile(
        calories=_fraction(totals.calories, goals.calories),
        carbs_g=_fraction(totals.carbs_g, goals.carbs_g),
        protein_g=_fraction(totals.protein_g, goals.protein_g),
        fat_g=_fraction(totals.fat_g, goals.fat_g),
    )


def macro_distribution(totals: MacroProfile, target_split: MacroSplit) -> MacroSplit:
    """Return each macro's share of macro calories.

    An empty day reports the profile's target split.
    """
    carb_kcal = totals.carbs_g * CARB_KCAL_PER_GRAM
    protein_kcal = totals.protein_g * PROTEIN_KCAL_PER_GRAM
    fat_kcal = totals.fat_g * FAT_KCAL_PER_GRAM
    macro_kcal = carb_kcal + protein_kcal + fat_kcal
    if macro_kcal <= 0:
        return target_split
    return MacroSplit(
        carbs=carb_kcal / macro_kcal,
        protein=protein_kcal / macro_kcal,
        fat=fat_kcal / macro_kcal,
    )


def group_by_meal_type(
    meals: Iterable[MealRecord],
) -> dict[MealType, tuple[MealRecord, ...]]:
    """Group meals by slot, in slot order, sorted by timestamp within a slot."""
    ordered = sorted(meals, key=lambda meal: meal.logged_at)
    grouped: dict[MealType, tuple[MealRecord, ...]] = {}
    for meal_type in MealType:
        slot = tuple(meal for meal in ordered if meal.meal_type == meal_type)
        if slot:
            grouped[meal_type] = slot
    return grouped


def daily_summary(
    day: date, meals: Iterable[MealRecord], profile: Profile | None, tz: ZoneInfo
) -> NutritionSummary:
    """Build the summary for one day from meals and the profile's goals."""
    goals = goals_for(profile)
    start, end = day_bounds(day, tz)
    day_meals = [meal for meal in meals if _in_interval(meal, start, end)]
    totals = sum_meal_totals(day_meals)
    return NutritionSummary(
        day=day,
        totals=totals,
        goals=goals,
        remaining=remaining_for(totals, goals),
        percentages=percentages_for(totals, goals),
        macro_distribution=macro_distribution(totals, profile.macro_split),
        meals_by_type=group_by_meal_type(day_meals),
    )


def range_summary(
    start: date, end: date, meals: Iterable[MealRecord], tz: ZoneInfo
) -> RangeTotals:
    """Total meals in the range and average them per day.

    The divisor is max(1, days_between(start, end)).
    """
    lower, upper = range_bounds(start, end, tz)
    totals = sum_meal_totals(meal for meal in meals if _in_interval(meal, lower, upper))
    day_count = max(1, days_between(start, end))
    return RangeTotals(
        start_date=start,
        end_date=end,
        day_count=day_count,
        totals=totals,
        averages=totals.scaled(1.0 / day_count),
    )


def weekly_summary(
    end_date: date,
    profile: Profile | None,
    meals: Iterable[MealRecord],
    now: datetime,
    tz: ZoneInfo,
) -> WeeklyNutritionSummary:
    """Build the seven-day summary ending at end_date.

    Per-day summaries are only built for days on or before today.
    """
    daily_goals = goals_for(profile)
    meals = list(meals)
    start_date = end_date - timedelta(days=WEEK_DAYS - 1)
    window = range_summary(start_date, end_date, meals, tz)
    weekly_goals = daily_goals.scaled(WEEK_DAYS)

    today = now.astimezone(tz).date()
    daily_summaries: dict[date, NutritionSummary] = {}
    for offset in range(WEEK_DAYS):
        day = start_date + timedelta(days=offset)
        if day > today:
            continue
        daily_summaries[day] = daily_summary(day, meals, profile, tz)

    return WeeklyNutritionSummary(
        start_date=start_date,
        end_date=end_date,
        day_count=window.day_count,
        totals=window.totals,
        averages=window.averages,
        goals=weekly_goals,
        percentages=percentages_for(window.totals, weekly_goals),
        daily_summaries=daily_summaries,
    )
