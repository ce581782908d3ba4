"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, datetime
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from caltrack.api.models import (
    FoodEntryIn,
    LibraryFoodIn,
    LogFoodIn,
    MealIn,
    MealUpdateIn,
    ProfileIn,
    WaterIn,
    WeightIn,
)
from caltrack.api.serializers import (
    food_json,
    meal_json,
    profile_json,
    recommendation_json,
    summary_json,
    water_daily_json,
    water_entry_json,
    water_weekly_json,
    weekly_json,
    weight_entry_json,
)
from caltrack.app_logging import configure_logging
from caltrack.containers import AppContainer
from caltrack.domain.meals import OPTIONAL_NUTRIENTS, FoodEntry, MealType
from caltrack.domain.nutrition import MacroProfile
from caltrack.domain.profile import MacroSplit
from caltrack.errors import (
    FoodNotFound,
    GoalsUnavailable,
    InvalidGoalConfiguration,
    MealNotFound,
    StoreFailure,
    WaterEntryNotFound,
)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            app.state.container.nutrition_service.refresh_cache()
        except GoalsUnavailable:
            logger.info("No profile yet; summary cache left empty")
        except StoreFailure:
            logger.exception("Failed to warm summary cache")
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(GoalsUnavailable)
    async def goals_unavailable(_: Request, exc: GoalsUnavailable) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"error": "goals_unavailable", "detail": str(exc)},
        )

    @app.exception_handler(InvalidGoalConfiguration)
    async def invalid_goals(_: Request, exc: InvalidGoalConfiguration) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": "invalid_goal_configuration", "detail": str(exc)},
        )

    @app.exception_handler(MealNotFound)
    async def meal_not_found(_: Request, exc: MealNotFound) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "meal_not_found", "detail": str(exc)},
        )

    @app.exception_handler(FoodNotFound)
    async def food_not_found(_: Request, exc: FoodNotFound) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "food_not_found", "detail": str(exc)},
        )

    @app.exception_handler(WaterEntryNotFound)
    async def water_entry_not_found(
        _: Request, exc: WaterEntryNotFound
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "water_entry_not_found", "detail": str(exc)},
        )

    @app.exception_handler(StoreFailure)
    async def store_failure(_: Request, exc: StoreFailure) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"error": "store_failure", "detail": exc.action},
        )

    def _container(request: Request) -> AppContainer:
        return request.app.state.container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/profile")
    async def get_profile(request: Request) -> dict[str, object]:
        state = _container(request)
        profile = state.profile_service.require(state.settings.profile_id)
        return {"profile": profile_json(profile)}

    @app.put("/profile")
    async def put_profile(payload: ProfileIn, request: Request) -> dict[str, object]:
        """Create the profile or replace its editable fields."""
        state = _container(request)
        profile_id = state.settings.profile_id
        split = (
            MacroSplit(**payload.macro_split.model_dump())
            if payload.macro_split
            else None
        )
        fields = payload.model_dump(exclude={"macro_split"})
        if state.profile_service.get_current(profile_id) is None:
            profile = state.profile_service.create_profile(
                profile_id, macro_split=split, **fields
            )
        else:
            if split is not None:
                fields["macro_split"] = split
            profile = state.profile_service.update_profile(profile_id, **fields)
        state.nutrition_service.cache.clear()
        return {"profile": profile_json(profile)}

    @app.delete("/profile")
    async def delete_profile(request: Request) -> dict[str, str]:
        state = _container(request)
        state.profile_service.delete_profile(state.settings.profile_id)
        state.nutrition_service.cache.clear()
        return {"status": "deleted"}

    @app.post("/profile/weight")
    async def post_weight(payload: WeightIn, request: Request) -> dict[str, object]:
        state = _container(request)
        profile = state.profile_service.update_weight(
            state.settings.profile_id, payload.weight_kg
        )
        state.nutrition_service.cache.clear()
        return {"profile": profile_json(profile)}

    @app.get("/profile/weight-history")
    async def weight_history(request: Request, limit: int = 30) -> dict[str, object]:
        state = _container(request)
        entries = state.profile_service.weight_history(state.settings.profile_id, limit)
        return {"entries": [weight_entry_json(entry) for entry in entries]}

    @app.get("/summaries/daily")
    async def get_daily(request: Request, day: date | None = None) -> dict[str, object]:
        summary = _container(request).nutrition_service.daily_summary(day)
        return {"summary": summary_json(summary)}

    @app.get("/summaries/weekly")
    async def get_weekly(
        request: Request, end_date: date | None = None
    ) -> dict[str, object]:
        summary = _container(request).nutrition_service.weekly_summary(end_date)
        return {"summary": weekly_json(summary)}

    @app.post("/summaries/refresh")
    async def refresh(request: Request) -> dict[str, str]:
        _container(request).nutrition_service.refresh_cache()
        return {"status": "refreshed"}

    @app.get("/recommendations")
    async def get_recommendations(
        request: Request, day: date | None = None
    ) -> dict[str, object]:
        suggestions = _container(request).nutrition_service.recommendations(day)
        return {"recommendations": [recommendation_json(item) for item in suggestions]}

    @app.get("/meals")
    async def list_meals(
        request: Request, day: date | None = None
    ) -> dict[str, object]:
        state = _container(request)
        meals = state.meal_service.get_for_date(day or state.nutrition_service.today())
        return {"meals": [meal_json(meal) for meal in meals]}

    @app.post("/meals", status_code=status.HTTP_201_CREATED)
    async def create_meal(payload: MealIn, request: Request) -> dict[str, object]:
        state = _container(request)
        tz = state.meal_service.timezone
        logged_at = _localized(payload.logged_at, tz)
        meal_type = payload.meal_type or MealType.suggested_for_hour(
            logged_at.astimezone(tz).hour
        )
        meal = state.meal_service.create_meal(
            name=payload.name,
            logged_at=logged_at,
            meal_type=meal_type,
            entries=[_to_entry(entry) for entry in payload.entries],
            notes=payload.notes,
        )
        _evict_days(state, meal.logged_at)
        logger.info("Meal logged via API: meal_id=%s", meal.id)
        return {"meal": meal_json(meal)}

    @app.patch("/meals/{meal_id}")
    async def update_meal(
        meal_id: UUID, payload: MealUpdateIn, request: Request
    ) -> dict[str, object]:
        """Edit a meal; both the old and the new day are evicted."""
        state = _container(request)
        before = state.meal_service.get_meal(meal_id)
        entries = (
            [_to_entry(entry) for entry in payload.entries]
            if payload.entries is not None
            else None
        )
        meal = state.meal_service.update_meal(
            meal_id,
            name=payload.name,
            logged_at=(
                _localized(payload.logged_at, state.meal_service.timezone)
                if payload.logged_at
                else None
            ),
            meal_type=payload.meal_type,
            entries=entries,
            notes=payload.notes,
        )
        _evict_days(state, before.logged_at, meal.logged_at)
        return {"meal": meal_json(meal)}

    @app.post("/meals/{meal_id}/favorite")
    async def toggle_meal_favorite(
        meal_id: UUID, request: Request
    ) -> dict[str, object]:
        state = _container(request)
        meal = state.meal_service.toggle_favorite(meal_id)
        _evict_days(state, meal.logged_at)
        return {"meal": meal_json(meal)}

    @app.post("/meals/{meal_id}/foods/{food_id}")
    async def log_library_food(
        meal_id: UUID, food_id: UUID, payload: LogFoodIn, request: Request
    ) -> dict[str, object]:
        """Add a library food to a meal and record its use."""
        state = _container(request)
        food = state.food_library_service.get_food(food_id)
        meal = state.meal_service.add_food_entry(
            meal_id, food.to_entry(), payload.serving_quantity
        )
        state.food_library_service.record_use(food.id)
        _evict_days(state, meal.logged_at)
        return {"meal": meal_json(meal)}

    @app.delete("/meals/{meal_id}")
    async def delete_meal(meal_id: UUID, request: Request) -> dict[str, str]:
        state = _container(request)
        meal = state.meal_service.delete_meal(meal_id)
        _evict_days(state, meal.logged_at)
        return {"status": "deleted"}

    @app.post("/meals/{meal_id}/entries")
    async def add_entry(
        meal_id: UUID, payload: FoodEntryIn, request: Request
    ) -> dict[str, object]:
        state = _container(request)
        meal = state.meal_service.add_food_entry(
            meal_id, _to_entry(payload), payload.serving_quantity
        )
        _evict_days(state, meal.logged_at)
        return {"meal": meal_json(meal)}

    @app.delete("/meals/{meal_id}/entries/{entry_id}")
    async def remove_entry(
        meal_id: UUID, entry_id: UUID, request: Request
    ) -> dict[str, object]:
        state = _container(request)
        meal = state.meal_service.remove_food_entry(meal_id, entry_id)
        _evict_days(state, meal.logged_at)
        return {"meal": meal_json(meal)}

    @app.get("/foods/search")
    async def search_foods(
        request: Request, q: str = "", limit: int = 10
    ) -> dict[str, object]:
        foods = _container(request).food_library_service.search(q, limit)
        return {"foods": [food_json(food) for food in foods]}

    @app.get("/foods/common")
    async def common_foods(request: Request) -> dict[str, object]:
        foods = _container(request).food_library_service.common_foods()
        return {"foods": [food_json(food) for food in foods]}

    @app.get("/foods/favorites")
    async def favorite_foods(request: Request) -> dict[str, object]:
        foods = _container(request).food_library_service.favorites()
        return {"foods": [food_json(food) for food in foods]}

    @app.get("/foods/recent")
    async def recent_foods(request: Request, limit: int = 10) -> dict[str, object]:
        foods = _container(request).food_library_service.recent(limit)
        return {"foods": [food_json(food) for food in foods]}

    @app.get("/foods/frequent")
    async def frequent_foods(request: Request, limit: int = 10) -> dict[str, object]:
        foods = _container(request).food_library_service.frequent(limit)
        return {"foods": [food_json(food) for food in foods]}

    @app.post("/foods", status_code=status.HTTP_201_CREATED)
    async def create_food(
        payload: LibraryFoodIn, request: Request
    ) -> dict[str, object]:
        food = _container(request).food_library_service.create_custom_food(
            name=payload.name,
            per_serving=MacroProfile(
                calories=payload.calories,
                carbs_g=payload.carbs_g,
                protein_g=payload.protein_g,
                fat_g=payload.fat_g,
            ),
            serving_size=payload.serving_size,
            barcode=payload.barcode,
            **payload.model_dump(include=set(OPTIONAL_NUTRIENTS)),
        )
        return {"food": food_json(food)}

    @app.get("/foods/{food_id}")
    async def get_food(food_id: UUID, request: Request) -> dict[str, object]:
        food = _container(request).food_library_service.get_food(food_id)
        return {"food": food_json(food)}

    @app.post("/foods/{food_id}/favorite")
    async def toggle_food_favorite(
        food_id: UUID, request: Request
    ) -> dict[str, object]:
        food = _container(request).food_library_service.toggle_favorite(food_id)
        return {"food": food_json(food)}

    @app.delete("/foods/{food_id}")
    async def delete_food(food_id: UUID, request: Request) -> dict[str, str]:
        _container(request).food_library_service.delete_food(food_id)
        return {"status": "deleted"}

    @app.post("/water", status_code=status.HTTP_201_CREATED)
    async def log_water(payload: WaterIn, request: Request) -> dict[str, object]:
        water = _container(request).water_service
        logged_at = (
            _localized(payload.logged_at, water.timezone) if payload.logged_at else None
        )
        entry = water.log_water(payload.amount, payload.unit, logged_at)
        return {"entry": water_entry_json(entry)}

    @app.delete("/water/{entry_id}")
    async def delete_water(entry_id: UUID, request: Request) -> dict[str, str]:
        _container(request).water_service.delete_entry(entry_id)
        return {"status": "deleted"}

    @app.get("/water/daily")
    async def water_daily(
        request: Request, day: date | None = None
    ) -> dict[str, object]:
        summary = _container(request).water_service.daily_summary(day)
        return {"summary": water_daily_json(summary)}

    @app.get("/water/weekly")
    async def water_weekly(
        request: Request, end_date: date | None = None
    ) -> dict[str, object]:
        summary = _container(request).water_service.weekly_summary(end_date)
        return {"summary": water_weekly_json(summary)}

    return app


def _localized(moment: datetime, tz: ZoneInfo) -> datetime:
    """Read naive timestamps as local time in the configured zone."""
    return moment if moment.tzinfo else moment.replace(tzinfo=tz)


def _evict_days(state: AppContainer, *moments: datetime) -> None:
    for day in {state.meal_service.local_day(moment) for moment in moments}:
        state.nutrition_service.evict(day)


def _to_entry(payload: FoodEntryIn) -> FoodEntry:
    return FoodEntry(
        id=uuid4(),
        name=payload.name,
        per_serving=MacroProfile(
            calories=payload.calories,
            carbs_g=payload.carbs_g,
            protein_g=payload.protein_g,
            fat_g=payload.fat_g,
        ),
        serving_quantity=payload.serving_quantity,
        serving_size=payload.serving_size,
        sugar_g=payload.sugar_g,
        fiber_g=payload.fiber_g,
        sodium_mg=payload.sodium_mg,
        cholesterol_mg=payload.cholesterol_mg,
        saturated_fat_g=payload.saturated_fat_g,
        trans_fat_g=payload.trans_fat_g,
        source=payload.source,
        catalog_id=payload.catalog_id,
        barcode=payload.barcode,
    )
