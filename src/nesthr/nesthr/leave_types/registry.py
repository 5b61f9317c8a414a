from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import Gender
from ..core.exceptions import NotFoundError
from .model import LeaveTypeDefinition

CASUAL_LEAVE = "Casual Leave"
SICK_LEAVE = "Sick Leave"
EARNED_LEAVE = "Earned Leave"
MENSTRUATION_LEAVE = "Menstruation Leave"
SPECIAL_LEAVE = "Special Leave"

DEFAULT_LEAVE_TYPES: tuple[LeaveTypeDefinition, ...] = (
    LeaveTypeDefinition(
        type_id=CASUAL_LEAVE,
        label="Casual Leave",
        short_label="CL",
        annual_quota=6,
        description="6 days per year (non-carry forward)",
    ),
    LeaveTypeDefinition(
        type_id=SICK_LEAVE,
        label="Sick Leave",
        short_label="SL",
        annual_quota=6,
        description="6 days per year (non-carry forward)",
    ),
    LeaveTypeDefinition(
        type_id=EARNED_LEAVE,
        label="Earned Leave",
        short_label="EL",
        annual_quota=18,
        description="1.5 days per month (carries forward, max 30 total)",
        carry_forward=True,
        max_carry_forward=30,
    ),
    LeaveTypeDefinition(
        type_id=MENSTRUATION_LEAVE,
        label="Menstruation Leave",
        short_label="ML",
        annual_quota=12,
        description="1 day per month (female employees only)",
        gender_restriction=Gender.FEMALE,
    ),
    LeaveTypeDefinition(
        type_id=SPECIAL_LEAVE,
        label="Special Leave",
        short_label="SpL",
        annual_quota=1,
        description="1 day per year (birthday or special occasion)",
        requires_special_reason=True,
    ),
)


class LeaveTypeRegistry:
    """Read-only catalog of leave types.

    Order of definitions is preserved in every listing.
    """

    def __init__(self, definitions: Iterable[LeaveTypeDefinition] = DEFAULT_LEAVE_TYPES):
        self._definitions: tuple[LeaveTypeDefinition, ...] = tuple(definitions)
        self._by_id = {d.type_id: d for d in self._definitions}
        if len(self._by_id) != len(self._definitions):
            raise ValueError("Duplicate leave type ids in registry")

    def all_types(self) -> Sequence[LeaveTypeDefinition]:
        return self._definitions

    def list_types_for_gender(self, gender: Optional[Gender]) -> list[LeaveTypeDefinition]:
        return [d for d in self._definitions if d.is_available_to(gender)]

    def get_type(self, type_id: str) -> LeaveTypeDefinition:
        definition = self._by_id.get(type_id)
        if definition is None:
            raise NotFoundError(f"Unknown leave type: {type_id}")
        return definition

    def is_eligible(self, type_id: str, gender: Optional[Gender]) -> bool:
        definition = self._by_id.get(type_id)
        return definition is not None and definition.is_available_to(gender)

    def summary_text(self, gender: Optional[Gender]) -> str:
        types = self.list_types_for_gender(gender)
        parts = " + ".join(f"{d.annual_quota} {d.short_label}" for d in types)
        total = sum(d.annual_quota for d in types)
        return f"{total} days total ({parts})"
