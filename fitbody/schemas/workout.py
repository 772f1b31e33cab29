from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


class WorkoutCreate(BaseModel):
    activity_type: str = Field(min_length=1, max_length=100, description="Тип активности: running, walking, cycling, pushups или любой другой")
    duration_minutes: int = Field(ge=1, description="Длительность в минутах")
    body_weight: Optional[float] = Field(default=None, ge=1, description="Вес тела, кг")
    calories_burned: Optional[int] = Field(default=None, ge=1, description="Если не указано - рассчитывается по MET")
    date: Optional[datetime] = None

    @field_validator("activity_type")
    @classmethod
    def strip_activity_type(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Укажите тип тренировки")
        return value


class WorkoutUpdate(BaseModel):
    activity_type: Optional[str] = Field(default=None, min_length=1, max_length=100)
    duration_minutes: Optional[int] = Field(default=None, ge=1)
    body_weight: Optional[float] = Field(default=None, ge=1)
    calories_burned: Optional[int] = Field(default=None, ge=1)
    date: Optional[datetime] = None

    @field_validator("activity_type")
    @classmethod
    def strip_activity_type(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Укажите тип тренировки")
        return value


class WorkoutResponse(BaseModel):
    id: int
    user_id: int
    activity_type: str
    duration_minutes: int
    body_weight: Optional[float] = None
    calories_burned: int
    date: datetime

    class Config:
        from_attributes = True
