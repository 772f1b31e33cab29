from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from fitbody.core.dependencies import get_current_user, get_progress_repository, ensure_owner
from fitbody.core.timeutils import to_local_naive
from fitbody.models.progress import Progress
from fitbody.models.user import User
from fitbody.repositories.progress_repository import ProgressRepository, DuplicateEntryError
from fitbody.schemas.progress import ProgressCreate, ProgressResponse, Measurements, WeightChange

router = APIRouter()

MEASUREMENT_FIELDS = ("chest", "waist", "hips", "arms", "thighs")


def weight_change(entry: Progress, previous: Optional[Progress]) -> WeightChange:
    """Изменение веса относительно предыдущей (более ранней) записи"""
    if previous is None or not previous.weight:
        return WeightChange(change=0, percentage=0, is_first=True)
    change = entry.weight - previous.weight
    return WeightChange(
        change=round(change, 1),
        percentage=round(change / previous.weight * 100, 1),
        is_first=False,
    )


def to_response(
    entry: Progress,
    previous: Optional[Progress] = None,
    include_change: bool = True,
) -> ProgressResponse:
    return ProgressResponse(
        id=entry.id,
        user_id=entry.user_id,
        weight=entry.weight,
        date=entry.date,
        notes=entry.notes,
        body_fat=entry.body_fat,
        muscle_mass=entry.muscle_mass,
        measurements=Measurements(**{f: getattr(entry, f) for f in MEASUREMENT_FIELDS}),
        weight_change=weight_change(entry, previous) if include_change else None,
    )


@router.get("", response_model=List[ProgressResponse])
async def get_progress(
    current_user: User = Depends(get_current_user),
    repo: ProgressRepository = Depends(get_progress_repository),
):
    """История веса, новые сверху; у каждой записи - изменение к предыдущей"""
    entries = await repo.list_for_user(current_user.id)
    return [
        to_response(entry, entries[i + 1] if i + 1 < len(entries) else None)
        for i, entry in enumerate(entries)
    ]


@router.post("", response_model=ProgressResponse, status_code=status.HTTP_201_CREATED)
async def add_progress(
    progress_data: ProgressCreate,
    current_user: User = Depends(get_current_user),
    repo: ProgressRepository = Depends(get_progress_repository),
):
    recorded_at = to_local_naive(progress_data.date)
    measurements = progress_data.measurements.model_dump() if progress_data.measurements else {}

    entry = Progress(
        user_id=current_user.id,
        weight=progress_data.weight,
        date=recorded_at,
        entry_day=recorded_at.date(),
        notes=progress_data.notes.strip() if progress_data.notes else None,
        body_fat=progress_data.body_fat,
        muscle_mass=progress_data.muscle_mass,
        **measurements,
    )

    try:
        entry = await repo.create(entry)
    except DuplicateEntryError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return to_response(entry, include_change=False)


@router.delete("/{entry_id}")
async def delete_progress(
    entry_id: int,
    current_user: User = Depends(get_current_user),
    repo: ProgressRepository = Depends(get_progress_repository),
):
    entry = ensure_owner(await repo.get_by_id(entry_id), current_user, "Запись прогресса не найдена")
    await repo.delete(entry)
    return {"id": entry_id}
