"""
Due-date heuristics applied to generated tasks.

"Today" is local midnight. Timezone-aware values (ISO strings ending in Z)
are compared in local time so aware and naive dates can be mixed.
"""
from datetime import datetime, timedelta
from typing import Iterable, Optional

ONE_DAY = timedelta(days=1)


def _local(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def start_of_day(now: Optional[datetime] = None) -> datetime:
    now = _local(now) if now is not None else datetime.now()
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def validate_due_date(due_date: datetime, now: Optional[datetime] = None) -> datetime:
    """
    Return due_date unchanged if it is today (00:00 inclusive) or later,
    otherwise tomorrow at midnight.
    """
    today = start_of_day(now)
    if _local(due_date) < today:
        return today + ONE_DAY
    return due_date


def suggest_due_date(due_dates: Iterable[Optional[datetime]], now: Optional[datetime] = None) -> datetime:
    """Nearest known due date that is today or later, else tomorrow at midnight."""
    today = start_of_day(now)
    upcoming = [d for d in due_dates if d is not None and _local(d) >= today]
    if not upcoming:
        return today + ONE_DAY
    return min(upcoming, key=_local)
