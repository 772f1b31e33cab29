import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fitbody.models.progress import Progress

logger = logging.getLogger(__name__)


class DuplicateEntryError(Exception):
    """Запись прогресса за этот день уже существует."""


class ProgressRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_user(
        self,
        user_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        oldest_first: bool = False,
    ) -> List[Progress]:
        query = select(Progress).where(Progress.user_id == user_id)
        if start is not None:
            query = query.where(Progress.date >= start)
        if end is not None:
            query = query.where(Progress.date < end)
        order = Progress.date.asc() if oldest_first else Progress.date.desc()
        result = await self.db.execute(query.order_by(order))
        return list(result.scalars().all())

    async def get_latest(self, user_id: int) -> Optional[Progress]:
        result = await self.db.execute(
            select(Progress)
            .where(Progress.user_id == user_id)
            .order_by(Progress.date.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_latest_weight(self, user_id: int) -> Optional[float]:
        latest = await self.get_latest(user_id)
        return latest.weight if latest else None

    async def get_by_id(self, entry_id: int) -> Optional[Progress]:
        result = await self.db.execute(select(Progress).where(Progress.id == entry_id))
        return result.scalar_one_or_none()

    async def create(self, entry: Progress) -> Progress:
        """
        Сохранить запись. Уникальность (user_id, entry_day) проверяет сама БД,
        поэтому параллельные запросы за один день не создадут дубль.
        """
        self.db.add(entry)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(
                f"Дубль записи прогресса: user_id={entry.user_id}, day={entry.entry_day}"
            )
            raise DuplicateEntryError("Запись прогресса за эту дату уже существует") from e
        await self.db.refresh(entry)
        return entry

    async def delete(self, entry: Progress) -> None:
        await self.db.delete(entry)
        await self.db.commit()
