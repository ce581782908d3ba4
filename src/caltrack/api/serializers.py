"""JSON-friendly views of domain values."""

from caltrack.domain.library import LibraryFood
from caltrack.domain.meals import FoodEntry, MealRecord
from caltrack.domain.nutrition import MacroProfile
from caltrack.domain.profile import MacroSplit, Profile, WeightEntry
from caltrack.domain.recommendations import MealRecommendation
from caltrack.domain.summaries import NutritionSummary, WeeklyNutritionSummary
from caltrack.domain.water import WaterDailySummary, WaterEntry, WaterWeeklySummary


def macros_json(macros: MacroProfile) -> dict[str, float]:
    return {
        "calories": round(macros.calories, 2),
        "carbs_g": round(macros.carbs_g, 2),
        "protein_g": round(macros.protein_g, 2),
        "fat_g": round(macros.fat_g, 2),
    }


def split_json(split: MacroSplit) -> dict[str, float]:
    return {"carbs": split.carbs, "protein": split.protein, "fat": split.fat}


def profile_json(profile: Profile) -> dict[str, object]:
    goals = profile.goals
    return {
        "id": str(profile.id),
        "name": profile.name,
        "age": profile.age,
        "gender": profile.gender.value,
        "height_cm": profile.height_cm,
        "weight_kg": profile.weight_kg,
        "activity_level": profile.activity_level.value,
        "weight_goal": profile.weight_goal.value,
        "macro_split": split_json(profile.macro_split),
        "goals": {
            "bmr": round(goals.bmr, 2),
            "tdee": round(goals.tdee, 2),
            "daily_calorie_goal": round(goals.daily_calorie_goal, 2),
            "carb_goal_g": round(goals.carb_goal_g, 2),
            "protein_goal_g": round(goals.protein_goal_g, 2),
            "fat_goal_g": round(goals.fat_goal_g, 2),
        },
        "updated_at": profile.updated_at.isoformat(),
    }


def weight_entry_json(entry: WeightEntry) -> dict[str, object]:
    return {"recorded_at": entry.recorded_at.isoformat(), "weight_kg": entry.weight_kg}


def entry_json(entry: FoodEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "name": entry.name,
        "serving_quantity": entry.serving_quantity,
        "per_serving": macros_json(entry.per_serving),
        "totals": macros_json(entry.totals),
        "source": entry.source.value,
    }


def meal_json(meal: MealRecord) -> dict[str, object]:
    return {
        "id": str(meal.id),
        "name": meal.name,
        "logged_at": meal.logged_at.isoformat(),
        "meal_type": meal.meal_type.value,
        "is_favorite": meal.is_favorite,
        "totals": macros_json(meal.totals),
        "entries": [entry_json(entry) for entry in meal.entries],
    }


def summary_json(summary: NutritionSummary) -> dict[str, object]:
    return {
        "day": summary.day.isoformat(),
        "totals": macros_json(summary.totals),
        "goals": macros_json(summary.goals),
        "remaining": macros_json(summary.remaining),
        "percentages": macros_json(summary.percentages),
        "macro_distribution": split_json(summary.macro_distribution),
        "meals": {
            meal_type.value: [meal_json(meal) for meal in meals]
            for meal_type, meals in summary.meals_by_type.items()
        },
    }


def weekly_json(summary: WeeklyNutritionSummary) -> dict[str, object]:
    return {
        "start_date": summary.start_date.isoformat(),
        "end_date": summary.end_date.isoformat(),
        "day_count": summary.day_count,
        "totals": macros_json(summary.totals),
        "averages": macros_json(summary.averages),
        "goals": macros_json(summary.goals),
        "percentages": macros_json(summary.percentages),
        "days": {
            day.isoformat(): summary_json(daily)
            for day, daily in sorted(summary.daily_summaries.items())
        },
    }


def recommendation_json(recommendation: MealRecommendation) -> dict[str, object]:
    return {
        "name": recommendation.name,
        "description": recommendation.description,
        "meal_type": recommendation.meal_type.value,
        "macros": macros_json(recommendation.macros),
    }


def food_json(food: LibraryFood) -> dict[str, object]:
    return {
        "id": str(food.id),
        "name": food.name,
        "serving_size": food.serving_size,
        "per_serving": macros_json(food.per_serving),
        "source": food.source.value,
        "catalog_id": food.catalog_id,
        "barcode": food.barcode,
        "is_favorite": food.is_favorite,
        "use_count": food.use_count,
        "last_used_at": food.last_used_at.isoformat() if food.last_used_at else None,
    }


def water_entry_json(entry: WaterEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "amount": entry.amount,
        "unit": entry.unit.value,
        "amount_ml": round(entry.amount_ml, 2),
        "logged_at": entry.logged_at.isoformat(),
    }


def water_daily_json(summary: WaterDailySummary) -> dict[str, object]:
    return {
        "day": summary.day.isoformat(),
        "total_ml": round(summary.total_ml, 2),
        "goal_ml": round(summary.goal_ml, 2),
        "remaining_ml": round(summary.remaining_ml, 2),
        "percentage": round(summary.percentage, 4),
        "is_goal_met": summary.is_goal_met,
        "status": summary.status.value,
        "status_description": summary.status.description,
        "entries": [water_entry_json(entry) for entry in summary.entries],
    }


def water_weekly_json(summary: WaterWeeklySummary) -> dict[str, object]:
    return {
        "start_date": summary.start_date.isoformat(),
        "end_date": summary.end_date.isoformat(),
        "goal_ml": round(summary.goal_ml, 2),
        "total_ml": round(summary.total_ml, 2),
        "average_ml": round(summary.average_ml, 2),
        "streak": summary.streak,
        "days_goal_met": summary.days_goal_met,
        "goal_completion_rate": round(summary.goal_completion_rate, 4),
        "days": {
            day.isoformat(): water_daily_json(daily)
            for day, daily in sorted(summary.daily_summaries.items())
        },
    }
