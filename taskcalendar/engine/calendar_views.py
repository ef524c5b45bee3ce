"""Calendar view helpers for taskcalendar (day / week / month date ranges)."""

from datetime import date, timedelta
from enum import Enum
from typing import Iterator, List


class ViewType(str, Enum):
    """Calendar view enumeration."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


def to_weekday_index(day: date) -> int:
    """Weekday of ``day`` with 0 = Sunday ... 6 = Saturday."""
    return (day.weekday() + 1) % 7


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every date from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def week_dates(day: date) -> List[date]:
    """The Sunday-to-Saturday week containing ``day``."""
    start = day - timedelta(days=to_weekday_index(day))
    return [start + timedelta(days=i) for i in range(7)]


def month_dates(day: date) -> List[date]:
    """The month containing ``day``, padded to whole Sunday-start weeks."""
    first = day.replace(day=1)
    next_month = (first + timedelta(days=32)).replace(day=1)
    last = next_month - timedelta(days=1)
    start = first - timedelta(days=to_weekday_index(first))
    end = last + timedelta(days=6 - to_weekday_index(last))
    return list(iter_dates(start, end))


def view_dates(view: ViewType, day: date) -> List[date]:
    view = ViewType(view)
    if view == ViewType.DAY:
        return [day]
    if view == ViewType.WEEK:
        return week_dates(day)
    return month_dates(day)
