import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Enum, Index
from sqlalchemy.orm import relationship

from fitbody.core.base import Base


class FoodSourceEnum(str, enum.Enum):
    manual = "manual"
    openfoodfacts = "openfoodfacts"
    other = "other"


class NutritionEntry(Base):
    __tablename__ = "nutrition_entries"
    __table_args__ = (
        Index("ix_nutrition_user_date", "user_id", "date"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    food = Column(String(200), nullable=False)
    calories = Column(Float, nullable=False)
    protein = Column(Float, default=0, nullable=False)
    carbs = Column(Float, default=0, nullable=False)
    fat = Column(Float, default=0, nullable=False)
    date = Column(DateTime, nullable=False, default=datetime.utcnow)
    serving_size = Column(String, default="1 serving", nullable=False)
    brand = Column(String, nullable=True)
    source = Column(Enum(FoodSourceEnum), default=FoodSourceEnum.manual, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="nutrition_entries")
