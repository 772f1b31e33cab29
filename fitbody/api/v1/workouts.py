import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from fitbody.core.dependencies import (
    get_current_user, get_workout_repository, get_progress_repository, ensure_owner
)
from fitbody.core.timeutils import to_local_naive
from fitbody.models.user import User
from fitbody.models.workout import Workout
from fitbody.repositories.workout_repository import WorkoutRepository
from fitbody.repositories.progress_repository import ProgressRepository
from fitbody.schemas.workout import WorkoutCreate, WorkoutUpdate, WorkoutResponse
from fitbody.services.calorie_calculator import (
    CalorieDerivationError, resolve_workout_calories, recalculate_on_update
)

router = APIRouter()
logger = logging.getLogger(__name__)

WORKOUT_NOT_FOUND = "Тренировка не найдена"


@router.get("", response_model=List[WorkoutResponse])
async def get_workouts(
    current_user: User = Depends(get_current_user),
    repo: WorkoutRepository = Depends(get_workout_repository),
):
    """Все тренировки пользователя, новые сверху"""
    return await repo.list_for_user(current_user.id)


@router.post("", response_model=WorkoutResponse, status_code=status.HTTP_201_CREATED)
async def create_workout(
    workout_data: WorkoutCreate,
    current_user: User = Depends(get_current_user),
    repo: WorkoutRepository = Depends(get_workout_repository),
    progress_repo: ProgressRepository = Depends(get_progress_repository),
):
    """Добавить тренировку; без калорий они рассчитываются по MET"""
    try:
        calories, weight = await resolve_workout_calories(
            progress_repo,
            current_user.id,
            activity_type=workout_data.activity_type,
            duration_minutes=workout_data.duration_minutes,
            body_weight=workout_data.body_weight,
            calories_burned=workout_data.calories_burned,
        )
    except CalorieDerivationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": e.message, "type": e.code},
        )

    workout = Workout(
        user_id=current_user.id,
        activity_type=workout_data.activity_type,
        duration_minutes=workout_data.duration_minutes,
        body_weight=weight,
        calories_burned=calories,
        date=to_local_naive(workout_data.date),
    )
    return await repo.create(workout)


@router.put("/{workout_id}", response_model=WorkoutResponse)
async def update_workout(
    workout_id: int,
    workout_data: WorkoutUpdate,
    current_user: User = Depends(get_current_user),
    repo: WorkoutRepository = Depends(get_workout_repository),
    progress_repo: ProgressRepository = Depends(get_progress_repository),
):
    workout = ensure_owner(await repo.get_by_id(workout_id), current_user, WORKOUT_NOT_FOUND)

    changes = workout_data.model_dump(exclude_unset=True)
    if changes.get("date") is not None:
        changes["date"] = to_local_naive(changes["date"])
    else:
        changes.pop("date", None)

    current = {
        "activity_type": workout.activity_type,
        "duration_minutes": workout.duration_minutes,
        "body_weight": workout.body_weight,
    }
    changes = await recalculate_on_update(progress_repo, current_user.id, current, changes)
    # null в запросе не затирает обязательные поля
    changes = {k: v for k, v in changes.items() if v is not None or k == "body_weight"}

    return await repo.update(workout, changes)


@router.delete("/{workout_id}")
async def delete_workout(
    workout_id: int,
    current_user: User = Depends(get_current_user),
    repo: WorkoutRepository = Depends(get_workout_repository),
):
    workout = ensure_owner(await repo.get_by_id(workout_id), current_user, WORKOUT_NOT_FOUND)
    await repo.delete(workout)
    logger.info(f"Удалена тренировка {workout_id} пользователя {current_user.id}")
    return {"id": workout_id}
