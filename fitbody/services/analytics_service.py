"""
Агрегации по записям пользователя: суммы за окно, стрики, доли БЖУ, бейджи.

Все функции чистые: записи приходят из репозиториев, "сегодня" передается явно.
Бейджи и стрики не хранятся и пересчитываются на каждый запрос.
"""
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from fitbody.core.timeutils import day_bounds, days_ago_start
from fitbody.models.nutrition import NutritionEntry
from fitbody.models.workout import Workout
from fitbody.services.calorie_calculator import round_half_up

MACRO_CALORIES_PER_GRAM = {"protein": 4, "carbs": 4, "fat": 9}
MACRO_MISMATCH_TOLERANCE = 20  # %


def _as_day(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def current_streak(dates: Iterable, today: date) -> int:
    """
    Сколько дней подряд, считая назад от today, есть хотя бы одна запись.
    Нет записи сегодня - стрик 0, даже если вчера запись была.
    """
    days = {_as_day(d) for d in dates if d is not None}
    streak = 0
    day = today
    while day in days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def macro_percentages(protein: float, carbs: float, fat: float) -> Dict[str, int]:
    """Доли БЖУ в граммах, %. При нулевой сумме все доли 0."""
    protein, carbs, fat = protein or 0, carbs or 0, fat or 0
    total = protein + carbs + fat
    if total <= 0:
        return {"protein": 0, "carbs": 0, "fat": 0}
    return {
        "protein": round_half_up(protein / total * 100),
        "carbs": round_half_up(carbs / total * 100),
        "fat": round_half_up(fat / total * 100),
    }


def calorie_breakdown(protein: float, carbs: float, fat: float) -> Dict[str, float]:
    breakdown = {
        "protein": (protein or 0) * MACRO_CALORIES_PER_GRAM["protein"],
        "carbs": (carbs or 0) * MACRO_CALORIES_PER_GRAM["carbs"],
        "fat": (fat or 0) * MACRO_CALORIES_PER_GRAM["fat"],
    }
    breakdown["total"] = breakdown["protein"] + breakdown["carbs"] + breakdown["fat"]
    return breakdown


def macros_match_calories(calories: float, protein: float, carbs: float, fat: float) -> bool:
    """Калории из БЖУ отличаются от заявленных не больше чем на 20%."""
    calculated = calorie_breakdown(protein, carbs, fat)["total"]
    if calculated <= 0:
        return True
    if not calories:
        return False
    return abs(calories - calculated) / calories * 100 <= MACRO_MISMATCH_TOLERANCE


def total_burned(workouts: Iterable[Workout]) -> float:
    return sum(w.calories_burned or 0 for w in workouts)


def summarize_nutrition(entries: Iterable[NutritionEntry]) -> Dict[str, float]:
    summary = {"calories": 0.0, "protein": 0.0, "carbs": 0.0, "fat": 0.0, "entries": 0}
    for entry in entries:
        summary["calories"] += entry.calories or 0
        summary["protein"] += entry.protein or 0
        summary["carbs"] += entry.carbs or 0
        summary["fat"] += entry.fat or 0
        summary["entries"] += 1
    return summary


def _in_range(value: datetime, start: datetime, end: Optional[datetime] = None) -> bool:
    return value >= start and (end is None or value < end)


def evaluate_badges(
    total_workouts: int,
    workout_streak: int,
    total_workout_calories: float,
    nutrition_streak: int,
) -> List[Dict]:
    return [
        {"key": "first_workout", "label": "First Workout", "earned": total_workouts >= 1},
        {"key": "ten_workouts", "label": "10 Workouts", "earned": total_workouts >= 10},
        {"key": "streak_7", "label": "7-Day Workout Streak", "earned": workout_streak >= 7},
        {"key": "burn_5000", "label": "Calorie Burner (5,000+)", "earned": total_workout_calories >= 5000},
        {"key": "log_7", "label": "7-Day Logging Streak", "earned": nutrition_streak >= 7},
    ]


def build_overview(
    workouts: Sequence[Workout],
    nutrition: Sequence[NutritionEntry],
    current_weight: Optional[float],
    today: date,
) -> Dict:
    """Сводка для дашборда по всем тренировкам и записям питания пользователя."""
    today_start, today_end = day_bounds(today)
    week_start = days_ago_start(7, today)

    weekly_burned = total_burned(w for w in workouts if _in_range(w.date, week_start))
    today_burned = total_burned(w for w in workouts if _in_range(w.date, today_start, today_end))
    today_in = summarize_nutrition(
        n for n in nutrition if _in_range(n.date, today_start, today_end)
    )["calories"]

    workout_streak = current_streak((w.date for w in workouts), today)
    nutrition_streak = current_streak((n.date for n in nutrition), today)

    return {
        "weekly_calories_burned": weekly_burned,
        "today_calories_in": today_in,
        "current_weight": current_weight,
        "calorie_balance_today": today_in - today_burned,
        "streaks": {"workout": workout_streak, "nutrition": nutrition_streak},
        "badges": evaluate_badges(
            total_workouts=len(workouts),
            workout_streak=workout_streak,
            total_workout_calories=total_burned(workouts),
            nutrition_streak=nutrition_streak,
        ),
    }


def format_day(day: date) -> str:
    """Подпись для графиков: "Oct 18"."""
    return f"{day:%b} {day.day}"


def daily_calories(
    workouts: Iterable[Workout],
    nutrition: Iterable[NutritionEntry],
    today: date,
    days: int = 7,
) -> List[Dict]:
    """Сожжено/потреблено по дням за последние days дней, от старых к новым."""
    burned: Dict[date, float] = {}
    consumed: Dict[date, float] = {}
    for w in workouts:
        day = w.date.date()
        burned[day] = burned.get(day, 0) + (w.calories_burned or 0)
    for n in nutrition:
        day = n.date.date()
        consumed[day] = consumed.get(day, 0) + (n.calories or 0)

    result = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        result.append({
            "date": format_day(day),
            "burned": burned.get(day, 0),
            "consumed": consumed.get(day, 0),
        })
    return result


def macro_breakdown(nutrition: Iterable[NutritionEntry]) -> List[Dict]:
    summary = summarize_nutrition(nutrition)
    shares = macro_percentages(summary["protein"], summary["carbs"], summary["fat"])
    return [
        {"name": "Protein", "value": shares["protein"]},
        {"name": "Carbs", "value": shares["carbs"]},
        {"name": "Fat", "value": shares["fat"]},
    ]
