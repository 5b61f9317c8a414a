from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRequest


class LeaveRequestRepository(Protocol):
    def create(
        self,
        *,
        employee_id: str,
        type_id: str,
        start_date: date,
        end_date: date,
        days: int,
        special_reason: Optional[str],
    ) -> int:
        """Persist a new PENDING request and return its id."""

        raise NotImplementedError

    def get(self, *, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        decided_by: str,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """PENDING -> ``status``. False if the request is no longer PENDING."""

        raise NotImplementedError

    def cancel(
        self,
        *,
        request_id: int,
        cancelled_by: str,
        from_statuses: Sequence[LeaveStatus],
    ) -> bool:
        """``from_statuses`` -> CANCELLED. False if the status is not one of them."""

        raise NotImplementedError

    def restore(self, request: LeaveRequest) -> None:
        """Write back the workflow fields of a snapshot (undo of a transition)."""

        raise NotImplementedError

    def list_for_employees(
        self,
        *,
        employee_ids: Sequence[str],
        status: Optional[LeaveStatus] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        """Newest first."""

        raise NotImplementedError
