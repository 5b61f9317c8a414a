from __future__ import annotations

from enum import Enum
from typing import Optional


class Gender(str, Enum):
    """Gender as recorded in the employee directory."""

    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Gender"]:
        v = (value or "").strip()
        if not v:
            return None
        for member in cls:
            if member.value.lower() == v.lower() or member.value[0].lower() == v.lower():
                return member
        raise ValueError(f"Unknown gender: {value!r}")


class LeaveStatus(str, Enum):
    """Leave request workflow states."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (LeaveStatus.REJECTED, LeaveStatus.CANCELLED)


class Decision(str, Enum):
    APPROVE = "APPROVE"
    REJECT = "REJECT"
