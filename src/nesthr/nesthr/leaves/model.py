from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: str
    type_id: str
    start_date: date
    end_date: date
    days: int
    status: LeaveStatus
    created_at: datetime
    special_reason: Optional[str] = None
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    cancelled_by: Optional[str] = None

    @property
    def year(self) -> int:
        return self.start_date.year

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "employee_id": self.employee_id,
            "type": self.type_id,
            "start_date": self.start_date.strftime("%Y-%m-%d"),
            "end_date": self.end_date.strftime("%Y-%m-%d"),
            "days": self.days,
            "status": self.status.value,
            "special_reason": self.special_reason,
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M"),
            "decided_by": self.decided_by,
            "decided_at": self.decided_at.strftime("%Y-%m-%d %H:%M") if self.decided_at else None,
            "rejection_reason": self.rejection_reason,
            "cancelled_by": self.cancelled_by,
        }
