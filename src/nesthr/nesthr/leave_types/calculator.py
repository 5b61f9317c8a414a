from __future__ import annotations

from typing import Optional

from ..core.enums import Gender
from .registry import LeaveTypeRegistry


class EntitlementCalculator:
    """Annual allotment per leave type for an employee's gender."""

    def __init__(self, registry: LeaveTypeRegistry):
        self._registry = registry

    def compute_annual_quota(self, gender: Optional[Gender]) -> dict[str, int]:
        return {d.type_id: int(d.annual_quota) for d in self._registry.list_types_for_gender(gender)}

    def compute_total_days(self, gender: Optional[Gender]) -> int:
        return sum(self.compute_annual_quota(gender).values())
