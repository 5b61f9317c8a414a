from __future__ import annotations

from datetime import date
from typing import Iterable

from ...core.constants import DAY_COUNTING_CALENDAR, DAY_COUNTING_WORKING, DEFAULT_WEEKEND_DAYS
from .base import DayCountingPolicy
from .calendar_policy import CalendarDayPolicy
from .working_day_policy import WorkingDayPolicy


def build_day_counting_policy(
    name: str = DAY_COUNTING_CALENDAR,
    *,
    weekend_days: Iterable[int] = DEFAULT_WEEKEND_DAYS,
    holidays: Iterable[date] = (),
) -> DayCountingPolicy:
    """Factory Pattern: pick the day-counting rule named in settings."""

    key = (name or DAY_COUNTING_CALENDAR).strip().lower()
    if key == DAY_COUNTING_CALENDAR:
        return CalendarDayPolicy()
    if key == DAY_COUNTING_WORKING:
        return WorkingDayPolicy(weekend_days=weekend_days, holidays=holidays)
    raise ValueError(f"Unknown day counting policy: {name!r}")
