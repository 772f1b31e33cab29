from datetime import datetime

from sqlalchemy import Column, Integer, Float, String, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from fitbody.core.base import Base


class Progress(Base):
    __tablename__ = "progress"
    __table_args__ = (
        # Не больше одной записи на пользователя за календарный день
        UniqueConstraint("user_id", "entry_day", name="uq_progress_user_day"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    weight = Column(Float, nullable=False)
    date = Column(DateTime, nullable=False)
    entry_day = Column(Date, nullable=False)
    notes = Column(String(500), nullable=True)
    body_fat = Column(Float, nullable=True)
    muscle_mass = Column(Float, nullable=True)

    # Обхваты, см
    chest = Column(Float, nullable=True)
    waist = Column(Float, nullable=True)
    hips = Column(Float, nullable=True)
    arms = Column(Float, nullable=True)
    thighs = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="progress")
