import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from fitbody.core.dependencies import get_current_user, get_nutrition_repository, ensure_owner
from fitbody.core.timeutils import day_bounds, to_local_naive
from fitbody.models.nutrition import NutritionEntry
from fitbody.models.user import User
from fitbody.repositories.nutrition_repository import NutritionRepository
from fitbody.schemas.nutrition import (
    NutritionCreate, NutritionResponse, DailyNutritionSummary, FoodSearchResponse
)
from fitbody.services.analytics_service import (
    calorie_breakdown, macro_percentages, macros_match_calories, summarize_nutrition
)
from fitbody.services.openfoodfacts_service import openfoodfacts_service, FoodSearchUnavailable

router = APIRouter()
logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2


def to_response(entry: NutritionEntry) -> NutritionResponse:
    protein, carbs, fat = entry.protein or 0, entry.carbs or 0, entry.fat or 0
    return NutritionResponse(
        id=entry.id,
        user_id=entry.user_id,
        food=entry.food,
        calories=entry.calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        date=entry.date,
        serving_size=entry.serving_size or "1 serving",
        brand=entry.brand,
        source=entry.source,
        total_macros=protein + carbs + fat,
        macro_percentages=macro_percentages(protein, carbs, fat),
        calorie_breakdown=calorie_breakdown(protein, carbs, fat),
    )


@router.get("", response_model=List[NutritionResponse])
async def get_nutrition(
    day: Optional[date] = Query(default=None, alias="date"),
    current_user: User = Depends(get_current_user),
    repo: NutritionRepository = Depends(get_nutrition_repository),
):
    """Записи питания (все или за один день), новые сверху"""
    start = end = None
    if day is not None:
        start, end = day_bounds(day)
    entries = await repo.list_for_user(current_user.id, start, end)
    return [to_response(entry) for entry in entries]


@router.get("/search", response_model=FoodSearchResponse)
async def search_food(
    query: Optional[str] = None,
    current_user: User = Depends(get_current_user),
):
    """Поиск продуктов в OpenFoodFacts; при сбое - ответ offline для ручного ввода"""
    query = (query or "").strip()
    if not query:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Укажите поисковый запрос")
    if len(query) < MIN_QUERY_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Запрос должен содержать минимум {MIN_QUERY_LENGTH} символа"
        )

    try:
        results = await openfoodfacts_service.search_products(query)
    except FoodSearchUnavailable as e:
        return FoodSearchResponse(
            query=query,
            results=[],
            total_count=0,
            offline=True,
            reason=e.reason,
            message=e.message,
        )

    return FoodSearchResponse(query=query, results=results, total_count=len(results))


@router.get("/summary/{day}", response_model=DailyNutritionSummary)
async def get_daily_summary(
    day: date,
    current_user: User = Depends(get_current_user),
    repo: NutritionRepository = Depends(get_nutrition_repository),
):
    """Итоги питания за календарный день"""
    start, end = day_bounds(day)
    entries = await repo.list_for_user(current_user.id, start, end)
    return DailyNutritionSummary(date=day.isoformat(), **summarize_nutrition(entries))


@router.post("", response_model=NutritionResponse, status_code=status.HTTP_201_CREATED)
async def add_nutrition(
    nutrition_data: NutritionCreate,
    current_user: User = Depends(get_current_user),
    repo: NutritionRepository = Depends(get_nutrition_repository),
):
    if not macros_match_calories(
        nutrition_data.calories, nutrition_data.protein, nutrition_data.carbs, nutrition_data.fat
    ):
        # не блокируем сохранение, только предупреждаем
        calculated = calorie_breakdown(
            nutrition_data.protein, nutrition_data.carbs, nutrition_data.fat
        )["total"]
        logger.warning(
            f"Несогласованные калории/БЖУ у пользователя {current_user.id}: "
            f"указано {nutrition_data.calories} ккал, по БЖУ {calculated} ккал"
        )

    entry = NutritionEntry(
        user_id=current_user.id,
        food=nutrition_data.food,
        calories=nutrition_data.calories,
        protein=nutrition_data.protein,
        carbs=nutrition_data.carbs,
        fat=nutrition_data.fat,
        date=to_local_naive(nutrition_data.date),
        serving_size=nutrition_data.serving_size,
        brand=nutrition_data.brand,
        source=nutrition_data.source,
    )
    entry = await repo.create(entry)
    return to_response(entry)


@router.delete("/{entry_id}")
async def delete_nutrition(
    entry_id: int,
    current_user: User = Depends(get_current_user),
    repo: NutritionRepository = Depends(get_nutrition_repository),
):
    entry = ensure_owner(await repo.get_by_id(entry_id), current_user, "Запись питания не найдена")
    await repo.delete(entry)
    return {"id": entry_id}
