from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class EntitlementKey:
    employee_id: str
    type_id: str
    year: int


@dataclass(frozen=True)
class LeaveEntitlement:
    employee_id: str
    type_id: str
    year: int
    total_days: int
    remaining_days: int

    @property
    def key(self) -> EntitlementKey:
        return EntitlementKey(self.employee_id, self.type_id, self.year)

    @property
    def used_days(self) -> int:
        return self.total_days - self.remaining_days


@dataclass(frozen=True)
class Balance:
    total: int
    remaining: int


@dataclass(frozen=True)
class EntitlementSummaryRow:
    type_id: str
    label: str
    short_label: str
    total: int
    remaining: int

    def to_dict(self) -> dict:
        return {
            "type": self.type_id,
            "label": self.label,
            "short_label": self.short_label,
            "total": self.total,
            "remaining": self.remaining,
        }
