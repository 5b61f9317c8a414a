from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import LeaveStatus


@dataclass(frozen=True)
class LeaveStatusChanged:
    """Emitted after every successful leave request transition.

    Delivery and message formatting belong to whoever consumes it.
    """

    request_id: int
    employee_id: str
    type_id: str
    status: LeaveStatus
    actor_id: str
    occurred_at: datetime
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "employee_id": self.employee_id,
            "type": self.type_id,
            "status": self.status.value,
            "actor_id": self.actor_id,
            "occurred_at": self.occurred_at.isoformat(timespec="seconds"),
            "reason": self.reason,
        }
