from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime

from fitbody.models.nutrition import FoodSourceEnum


class NutritionCreate(BaseModel):
    food: str = Field(min_length=1, max_length=200)
    calories: float = Field(ge=0, le=10000)
    protein: float = Field(default=0, ge=0, le=1000)
    carbs: float = Field(default=0, ge=0, le=1000)
    fat: float = Field(default=0, ge=0, le=1000)
    date: Optional[datetime] = None
    serving_size: str = Field(default="1 serving", max_length=100)
    brand: Optional[str] = Field(default=None, max_length=200)
    source: FoodSourceEnum = FoodSourceEnum.manual

    @field_validator("food")
    @classmethod
    def strip_food(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Укажите название продукта")
        return value


class MacroPercentages(BaseModel):
    protein: int
    carbs: int
    fat: int


class CalorieBreakdown(BaseModel):
    protein: float
    carbs: float
    fat: float
    total: float


class NutritionResponse(BaseModel):
    id: int
    user_id: int
    food: str
    calories: float
    protein: float
    carbs: float
    fat: float
    date: datetime
    serving_size: str
    brand: Optional[str] = None
    source: FoodSourceEnum
    total_macros: float
    macro_percentages: MacroPercentages
    calorie_breakdown: CalorieBreakdown


class DailyNutritionSummary(BaseModel):
    date: str
    calories: float
    protein: float
    carbs: float
    fat: float
    entries: int


class FoodSearchResult(BaseModel):
    name: str
    calories: int  # на 100 г
    protein: int
    carbs: int
    fat: int
    brand: str = ""
    serving_size: str = "100g"
    quantity: str = ""


class FoodSearchResponse(BaseModel):
    query: str
    results: List[FoodSearchResult]
    total_count: int
    offline: bool = False
    reason: Optional[str] = None
    message: Optional[str] = None
