from pydantic import BaseModel
from typing import Optional, List


class Streaks(BaseModel):
    workout: int
    nutrition: int


class Badge(BaseModel):
    key: str
    label: str
    earned: bool


class OverviewResponse(BaseModel):
    weekly_calories_burned: float
    today_calories_in: float
    current_weight: Optional[float] = None
    calorie_balance_today: float
    streaks: Streaks
    badges: List[Badge]


class DailyCalories(BaseModel):
    date: str  # "Oct 18"
    burned: float
    consumed: float


class MacroShare(BaseModel):
    name: str
    value: int


class WeightPoint(BaseModel):
    date: str
    weight: float


class ForecastResponse(BaseModel):
    prediction: Optional[str] = None  # stable | gaining | losing, None - мало данных
    message: str
    current_weight: Optional[float] = None
    slope: Optional[float] = None
    weekly_trend: Optional[float] = None
    monthly_trend: Optional[float] = None
    magnitude: Optional[float] = None
    data_points: int = 0
