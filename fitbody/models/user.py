from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from fitbody.core.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=True)
    password = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Текущий refresh-токен (ротация при каждом /auth/refresh)
    refresh_token = Column(String, nullable=True, index=True)
    refresh_token_expires = Column(DateTime, nullable=True)

    workouts = relationship("Workout", back_populates="user", cascade="all, delete")
    nutrition_entries = relationship("NutritionEntry", back_populates="user", cascade="all, delete")
    progress = relationship("Progress", back_populates="user", cascade="all, delete")
