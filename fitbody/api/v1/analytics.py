from typing import List

from fastapi import APIRouter, Depends, Query

from fitbody.core.dependencies import (
    get_current_user, get_workout_repository, get_nutrition_repository, get_progress_repository
)
from fitbody.core.timeutils import local_today, days_ago_start
from fitbody.models.user import User
from fitbody.repositories.workout_repository import WorkoutRepository
from fitbody.repositories.nutrition_repository import NutritionRepository
from fitbody.repositories.progress_repository import ProgressRepository
from fitbody.schemas.analytics import (
    OverviewResponse, DailyCalories, MacroShare, WeightPoint, ForecastResponse
)
from fitbody.services.analytics_service import (
    build_overview, daily_calories, macro_breakdown, format_day
)
from fitbody.services.forecast_service import build_forecast, MIN_SAMPLES

router = APIRouter()

FORECAST_LOOKBACK_DAYS = 30


@router.get("/overview", response_model=OverviewResponse)
async def get_overview(
    current_user: User = Depends(get_current_user),
    workout_repo: WorkoutRepository = Depends(get_workout_repository),
    nutrition_repo: NutritionRepository = Depends(get_nutrition_repository),
    progress_repo: ProgressRepository = Depends(get_progress_repository),
):
    """Калории за неделю и сегодня, текущий вес, стрики и бейджи"""
    workouts = await workout_repo.list_for_user(current_user.id)
    nutrition = await nutrition_repo.list_for_user(current_user.id)
    current_weight = await progress_repo.get_latest_weight(current_user.id)
    return build_overview(workouts, nutrition, current_weight, local_today())


@router.get("/calories", response_model=List[DailyCalories])
async def get_calories_data(
    days: int = Query(default=7, ge=1, le=90),
    current_user: User = Depends(get_current_user),
    workout_repo: WorkoutRepository = Depends(get_workout_repository),
    nutrition_repo: NutritionRepository = Depends(get_nutrition_repository),
):
    """Сожжено и потреблено по дням"""
    today = local_today()
    start = days_ago_start(days - 1, today)
    workouts = await workout_repo.list_for_user(current_user.id, start=start)
    nutrition = await nutrition_repo.list_for_user(current_user.id, start=start)
    return daily_calories(workouts, nutrition, today, days)


@router.get("/macros", response_model=List[MacroShare])
async def get_macros_data(
    days: int = Query(default=7, ge=1, le=90),
    current_user: User = Depends(get_current_user),
    nutrition_repo: NutritionRepository = Depends(get_nutrition_repository),
):
    """Доли БЖУ за период, %"""
    nutrition = await nutrition_repo.list_for_user(
        current_user.id, start=days_ago_start(days, local_today())
    )
    return macro_breakdown(nutrition)


@router.get("/weight-trend", response_model=List[WeightPoint])
async def get_weight_trend(
    days: int = Query(default=FORECAST_LOOKBACK_DAYS, ge=1, le=365),
    current_user: User = Depends(get_current_user),
    progress_repo: ProgressRepository = Depends(get_progress_repository),
):
    entries = await progress_repo.list_for_user(
        current_user.id, start=days_ago_start(days, local_today()), oldest_first=True
    )
    return [WeightPoint(date=format_day(e.date), weight=e.weight) for e in entries]


@router.get("/forecast", response_model=ForecastResponse)
async def get_forecast(
    current_user: User = Depends(get_current_user),
    progress_repo: ProgressRepository = Depends(get_progress_repository),
):
    """Линейный прогноз веса по замерам за 30 дней"""
    entries = await progress_repo.list_for_user(
        current_user.id,
        start=days_ago_start(FORECAST_LOOKBACK_DAYS, local_today()),
        oldest_first=True,
    )
    forecast = build_forecast([e.weight for e in entries])
    if forecast is None:
        return ForecastResponse(
            prediction=None,
            message=f"Need at least {MIN_SAMPLES} weight entries to generate forecast",
            data_points=len(entries),
        )

    return ForecastResponse(
        prediction=forecast.direction,
        message=forecast.message,
        current_weight=forecast.current_weight,
        slope=forecast.slope,
        weekly_trend=forecast.weekly_change,
        monthly_trend=forecast.monthly_change,
        magnitude=forecast.magnitude,
        data_points=forecast.data_points,
    )
