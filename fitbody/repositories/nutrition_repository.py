from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fitbody.models.nutrition import NutritionEntry


class NutritionRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_user(
        self,
        user_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[NutritionEntry]:
        """Записи питания за [start, end), новые сверху."""
        query = select(NutritionEntry).where(NutritionEntry.user_id == user_id)
        if start is not None:
            query = query.where(NutritionEntry.date >= start)
        if end is not None:
            query = query.where(NutritionEntry.date < end)
        result = await self.db.execute(query.order_by(NutritionEntry.date.desc()))
        return list(result.scalars().all())

    async def get_by_id(self, entry_id: int) -> Optional[NutritionEntry]:
        result = await self.db.execute(select(NutritionEntry).where(NutritionEntry.id == entry_id))
        return result.scalar_one_or_none()

    async def create(self, entry: NutritionEntry) -> NutritionEntry:
        self.db.add(entry)
        await self.db.commit()
        await self.db.refresh(entry)
        return entry

    async def delete(self, entry: NutritionEntry) -> None:
        await self.db.delete(entry)
        await self.db.commit()
