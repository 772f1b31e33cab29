"""
Работа с календарными днями.

Все даты записей хранятся как naive datetime в часовом поясе settings.TIMEZONE:
стрики, дневные сводки и уникальность записи прогресса считаются по этим дням.
"""
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from fitbody.core.config import settings


def _zone() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)


def local_now() -> datetime:
    return datetime.now(_zone()).replace(tzinfo=None)


def local_today() -> date:
    return local_now().date()


def to_local_naive(value: Optional[datetime]) -> datetime:
    """Привести дату от клиента к локальному naive времени (None -> сейчас)."""
    if value is None:
        return local_now()
    if value.tzinfo is not None:
        return value.astimezone(_zone()).replace(tzinfo=None)
    return value


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """Начало дня и начало следующего дня: [start, end)."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def days_ago_start(days: int, today: Optional[date] = None) -> datetime:
    """Полночь дня, отстоящего на days дней от сегодняшнего."""
    today = today or local_today()
    return datetime.combine(today - timedelta(days=days), time.min)
