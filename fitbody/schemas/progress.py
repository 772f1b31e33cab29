from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class Measurements(BaseModel):
    chest: Optional[float] = Field(default=None, ge=0)
    waist: Optional[float] = Field(default=None, ge=0)
    hips: Optional[float] = Field(default=None, ge=0)
    arms: Optional[float] = Field(default=None, ge=0)
    thighs: Optional[float] = Field(default=None, ge=0)


class ProgressCreate(BaseModel):
    weight: float = Field(ge=20, le=500, description="Вес, кг (20-500)")
    date: Optional[datetime] = None
    notes: Optional[str] = Field(default=None, max_length=500)
    body_fat: Optional[float] = Field(default=None, ge=0, le=100, description="Процент жира")
    muscle_mass: Optional[float] = Field(default=None, ge=0)
    measurements: Optional[Measurements] = None


class WeightChange(BaseModel):
    change: float
    percentage: float
    is_first: bool


class ProgressResponse(BaseModel):
    id: int
    user_id: int
    weight: float
    date: datetime
    notes: Optional[str] = None
    body_fat: Optional[float] = None
    muscle_mass: Optional[float] = None
    measurements: Measurements
    weight_change: Optional[WeightChange] = None
