from __future__ import annotations

from datetime import date

from .base import DayCountingPolicy


class CalendarDayPolicy(DayCountingPolicy):
    """Every calendar day in the range counts, both ends included."""

    name = "calendar"

    def count_days(self, start_date: date, end_date: date) -> int:
        if end_date < start_date:
            return 0
        return (end_date - start_date).days + 1
