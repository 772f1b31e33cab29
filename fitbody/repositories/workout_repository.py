from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fitbody.models.workout import Workout


class WorkoutRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_user(
        self,
        user_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Workout]:
        """Тренировки пользователя за [start, end), новые сверху."""
        query = select(Workout).where(Workout.user_id == user_id)
        if start is not None:
            query = query.where(Workout.date >= start)
        if end is not None:
            query = query.where(Workout.date < end)
        result = await self.db.execute(query.order_by(Workout.date.desc()))
        return list(result.scalars().all())

    async def get_by_id(self, workout_id: int) -> Optional[Workout]:
        result = await self.db.execute(select(Workout).where(Workout.id == workout_id))
        return result.scalar_one_or_none()

    async def create(self, workout: Workout) -> Workout:
        self.db.add(workout)
        await self.db.commit()
        await self.db.refresh(workout)
        return workout

    async def update(self, workout: Workout, changes: dict) -> Workout:
        for field, value in changes.items():
            setattr(workout, field, value)
        await self.db.commit()
        await self.db.refresh(workout)
        return workout

    async def delete(self, workout: Workout) -> None:
        await self.db.delete(workout)
        await self.db.commit()
