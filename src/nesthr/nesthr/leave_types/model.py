from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Gender


@dataclass(frozen=True)
class LeaveTypeDefinition:
    """Policy attributes of one kind of leave.

    Reference data: declared once at start-up, never mutated at runtime.
    """

    type_id: str
    label: str
    short_label: str
    annual_quota: int
    description: str = ""
    carry_forward: bool = False
    max_carry_forward: Optional[int] = None
    gender_restriction: Optional[Gender] = None
    requires_special_reason: bool = False

    def __post_init__(self) -> None:
        if self.annual_quota < 0:
            raise ValueError(f"{self.type_id}: annual_quota must be >= 0")
        if self.carry_forward and self.max_carry_forward is None:
            raise ValueError(f"{self.type_id}: max_carry_forward required when carry_forward is set")
        if not self.carry_forward and self.max_carry_forward is not None:
            raise ValueError(f"{self.type_id}: max_carry_forward only allowed with carry_forward")

    def is_available_to(self, gender: Optional[Gender]) -> bool:
        if self.gender_restriction is None:
            return True
        return self.gender_restriction == gender

    def to_dict(self) -> dict:
        return {
            "type_id": self.type_id,
            "label": self.label,
            "short_label": self.short_label,
            "annual_quota": self.annual_quota,
            "description": self.description,
            "carry_forward": self.carry_forward,
            "max_carry_forward": self.max_carry_forward,
            "gender_restriction": self.gender_restriction.value if self.gender_restriction else None,
            "requires_special_reason": self.requires_special_reason,
        }
