"""
Прогноз веса: линейный тренд (МНК) по записям прогресса.

x - порядковый номер замера (0, 1, 2, ...), а не число прошедших дней:
пропуск в несколько дней между замерами считается как соседние дни.
"""
from dataclasses import dataclass
from typing import Optional, Sequence

STABLE_WEEKLY_THRESHOLD = 0.1  # кг в неделю
MIN_SAMPLES = 2


@dataclass(frozen=True)
class WeightForecast:
    current_weight: float
    slope: float
    weekly_change: float
    monthly_change: float
    direction: str  # stable | gaining | losing
    magnitude: float
    data_points: int

    @property
    def message(self) -> str:
        if self.direction == "stable":
            return "Your weight is staying stable"
        verb = "gain" if self.direction == "gaining" else "lose"
        return f"At this rate, you'll {verb} {self.magnitude:.1f}kg in 1 month"


def linear_slope(values: Sequence[float]) -> Optional[float]:
    """Наклон прямой МНК по точкам (i, values[i]). None при n < 2."""
    n = len(values)
    if n < MIN_SAMPLES:
        return None

    sum_x = sum_y = sum_xy = sum_x2 = 0.0
    for x, y in enumerate(values):
        sum_x += x
        sum_y += y
        sum_xy += x * y
        sum_x2 += x * x

    denominator = n * sum_x2 - sum_x * sum_x
    # при n >= 2 и различных x знаменатель всегда > 0
    return (n * sum_xy - sum_x * sum_y) / denominator


def classify_trend(weekly_change: float) -> str:
    if abs(weekly_change) < STABLE_WEEKLY_THRESHOLD:
        return "stable"
    return "gaining" if weekly_change > 0 else "losing"


def build_forecast(weights: Sequence[float]) -> Optional[WeightForecast]:
    """weights - от старых к новым. None - недостаточно данных."""
    slope = linear_slope(weights)
    if slope is None:
        return None

    weekly = slope * 7
    monthly = slope * 30
    return WeightForecast(
        current_weight=weights[-1],
        slope=slope,
        weekly_change=round(weekly, 2),
        monthly_change=round(monthly, 2),
        direction=classify_trend(weekly),
        magnitude=round(abs(monthly), 1),
        data_points=len(weights),
    )
