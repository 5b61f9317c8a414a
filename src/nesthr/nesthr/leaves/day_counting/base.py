from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date


class DayCountingPolicy(ABC):
    """Strategy Pattern: how many leave days an inclusive date range consumes."""

    name: str = ""

    @abstractmethod
    def count_days(self, start_date: date, end_date: date) -> int:
        raise NotImplementedError
