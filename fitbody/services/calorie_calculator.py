"""
Расчет сожженных калорий по MET.

calories = MET * вес (кг) * длительность (ч)
"""
import math
from typing import Dict, Optional, Tuple

from fitbody.repositories.progress_repository import ProgressRepository


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class CalorieDerivationError(Exception):
    """Калории не указаны и рассчитать их невозможно."""

    NO_WEIGHT_DATA = "NO_WEIGHT_DATA"
    CANNOT_DERIVE = "CANNOT_DERIVE"

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class CalorieCalculator:
    MET_VALUES: Dict[str, float] = {
        "running": 9.8,
        "walking": 3.8,
        "cycling": 7.5,
        "pushups": 8.0,
    }

    @classmethod
    def get_met(cls, activity_type: Optional[str]) -> Optional[float]:
        if not activity_type:
            return None
        return cls.MET_VALUES.get(activity_type.strip().lower())

    @classmethod
    def calculate(
        cls,
        activity_type: Optional[str],
        duration_minutes: Optional[float],
        weight_kg: Optional[float],
    ) -> Optional[int]:
        """None - тип активности неизвестен или не хватает данных."""
        met = cls.get_met(activity_type)
        if met is None:
            return None
        if not duration_minutes or duration_minutes <= 0:
            return None
        if not weight_kg or weight_kg <= 0:
            return None
        return round_half_up(met * weight_kg * (duration_minutes / 60))


async def resolve_workout_calories(
    progress_repo: ProgressRepository,
    user_id: int,
    activity_type: str,
    duration_minutes: int,
    body_weight: Optional[float] = None,
    calories_burned: Optional[int] = None,
) -> Tuple[int, Optional[float]]:
    """
    Итоговые (калории, вес) для новой тренировки.
    Явно указанные калории важнее расчета; без веса берем последний из прогресса.
    """
    if calories_burned:
        return calories_burned, body_weight

    weight = body_weight
    if not weight:
        weight = await progress_repo.get_latest_weight(user_id)
        if not weight:
            raise CalorieDerivationError(
                CalorieDerivationError.NO_WEIGHT_DATA,
                "Добавьте вес в разделе прогресса для автоматического расчета калорий "
                "или укажите калории вручную",
            )

    calories = CalorieCalculator.calculate(activity_type, duration_minutes, weight)
    if calories is None:
        raise CalorieDerivationError(
            CalorieDerivationError.CANNOT_DERIVE,
            "Невозможно рассчитать калории для этого типа тренировки. Укажите калории вручную",
        )
    return calories, weight


async def recalculate_on_update(
    progress_repo: ProgressRepository,
    user_id: int,
    current: Dict,
    changes: Dict,
) -> Dict:
    """
    Пересчет калорий при изменении тренировки.
    Если пересчитать нельзя - остаются сохраненные калории.
    Явный null в body_weight - вес берется из прогресса; если его нет,
    остается сохраненный вес, по которому считались текущие калории.
    """
    touched = any(k in changes for k in ("activity_type", "duration_minutes", "body_weight"))
    if not touched or changes.get("calories_burned"):
        return changes

    updated = dict(changes)
    activity_type = changes.get("activity_type") or current.get("activity_type")
    duration = changes.get("duration_minutes") or current.get("duration_minutes")
    if "body_weight" in changes:
        weight = changes["body_weight"]
    else:
        weight = current.get("body_weight")

    fetched = False
    if not weight:
        weight = await progress_repo.get_latest_weight(user_id)
        fetched = True

    calories = CalorieCalculator.calculate(activity_type, duration, weight)
    if calories is not None:
        updated["calories_burned"] = calories
        if fetched:
            updated["body_weight"] = weight
    elif "body_weight" in changes and changes["body_weight"] is None:
        updated.pop("body_weight")
    return updated
