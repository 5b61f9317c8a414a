from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from ...core.constants import DEFAULT_WEEKEND_DAYS
from .base import DayCountingPolicy


class WorkingDayPolicy(DayCountingPolicy):
    """Weekend days and holidays inside the range are not charged."""

    name = "working"

    def __init__(self, weekend_days: Iterable[int] = DEFAULT_WEEKEND_DAYS, holidays: Iterable[date] = ()):
        self._weekend_days = frozenset(int(d) for d in weekend_days)
        self._holidays = frozenset(holidays)

    def is_working_day(self, day: date) -> bool:
        return day.weekday() not in self._weekend_days and day not in self._holidays

    def count_days(self, start_date: date, end_date: date) -> int:
        count = 0
        day = start_date
        while day <= end_date:
            if self.is_working_day(day):
                count += 1
            day += timedelta(days=1)
        return count
