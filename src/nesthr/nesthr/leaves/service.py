from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..carry_forward.service import CarryForwardService
from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_PENDING_LIST_LIMIT, DEFAULT_REQUEST_LIST_LIMIT
from ..core.enums import Decision, LeaveStatus
from ..core.exceptions import (
    InvalidRangeError,
    InvalidTransitionError,
    InvalidTypeError,
    MissingReasonError,
    NotFoundError,
)
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..entitlements.ledger import BalanceLedger
from ..entitlements.model import EntitlementKey
from ..leave_types.registry import LeaveTypeRegistry
from ..notifications.events import LeaveStatusChanged
from ..notifications.publisher import NotificationPublisher
from .day_counting.base import DayCountingPolicy
from .model import LeaveRequest
from .repository import LeaveRequestRepository

logger = logging.getLogger(__name__)

_CANCELLABLE = (LeaveStatus.PENDING, LeaveStatus.APPROVED)


class LeaveRequestService:
    """Use case: leave request workflow.

    PENDING -> APPROVED | REJECTED | CANCELLED, APPROVED -> CANCELLED.
    Days are reserved on creation; rejection and cancellation give them back.
    """

    def __init__(
        self,
        requests: LeaveRequestRepository,
        employees: EmployeeRepository,
        registry: LeaveTypeRegistry,
        ledger: BalanceLedger,
        day_counter: DayCountingPolicy,
        publisher: NotificationPublisher,
        carry_forward: Optional[CarryForwardService] = None,
    ):
        self._requests = requests
        self._employees = employees
        self._registry = registry
        self._ledger = ledger
        self._day_counter = day_counter
        self._publisher = publisher
        self._carry_forward = carry_forward

    def _require_employee(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(str(employee_id))
        if not employee:
            raise NotFoundError(f"Unknown employee: {employee_id}")
        return employee

    def get(self, request_id: int) -> LeaveRequest:
        req = self._requests.get(request_id=int(request_id))
        if not req:
            raise NotFoundError(f"Leave request {request_id} not found")
        return req

    @staticmethod
    def _keys(req: LeaveRequest) -> tuple[EntitlementKey, EntitlementKey]:
        # The next year is locked too: a release may be carried into it.
        return (
            EntitlementKey(req.employee_id, req.type_id, req.year),
            EntitlementKey(req.employee_id, req.type_id, req.year + 1),
        )

    def _give_back(self, req: LeaveRequest) -> None:
        self._ledger.release(req.employee_id, req.type_id, req.year, req.days)
        if self._carry_forward is None:
            return
        try:
            self._carry_forward.carry_late_release(req.employee_id, req.type_id, req.year, req.days)
        except Exception:
            self._ledger.reserve(req.employee_id, req.type_id, req.year, req.days)
            raise

    def _emit(self, req: LeaveRequest, *, actor_id: str, reason: Optional[str] = None) -> None:
        event = LeaveStatusChanged(
            request_id=req.request_id,
            employee_id=req.employee_id,
            type_id=req.type_id,
            status=req.status,
            actor_id=str(actor_id),
            occurred_at=now_local(),
            reason=reason,
        )
        try:
            self._publisher.publish(event)
        except Exception:
            # The transition is committed; a lost notification must not undo it.
            logger.exception("Failed to publish %s for request %s", req.status.value, req.request_id)

    def count_days(self, start_date: date, end_date: date) -> int:
        return self._day_counter.count_days(start_date, end_date)

    def create(
        self,
        *,
        employee_id: str,
        type_id: str,
        start_date: date,
        end_date: date,
        special_reason: Optional[str] = None,
    ) -> int:
        employee = self._require_employee(employee_id)

        try:
            definition = self._registry.get_type(type_id)
        except NotFoundError:
            raise InvalidTypeError(f"Unknown leave type: {type_id}")
        if not definition.is_available_to(employee.gender):
            raise InvalidTypeError(f"{definition.label} is not available to this employee")

        if end_date < start_date:
            raise InvalidRangeError("End date must be on or after the start date")
        if start_date.year != end_date.year:
            raise InvalidRangeError("A leave request cannot span two calendar years; submit one per year")

        reason = optional_text(special_reason)
        if definition.requires_special_reason and not reason:
            raise MissingReasonError(f"{definition.label} requires a reason")

        days = self._day_counter.count_days(start_date, end_date)
        if days <= 0:
            raise InvalidRangeError("The selected dates contain no chargeable leave days")

        key = EntitlementKey(employee.employee_id, definition.type_id, start_date.year)
        with self._ledger.locked(key):
            if self._carry_forward is not None:
                self._carry_forward.ensure_year_open(key.employee_id, key.type_id, key.year)
            self._ledger.reserve(key.employee_id, key.type_id, key.year, days)
            try:
                request_id = self._requests.create(
                    employee_id=employee.employee_id,
                    type_id=definition.type_id,
                    start_date=start_date,
                    end_date=end_date,
                    days=days,
                    special_reason=reason,
                )
            except Exception:
                logger.error("Persisting leave request failed for %s; releasing %d day(s)", key, days)
                self._ledger.release(key.employee_id, key.type_id, key.year, days)
                raise

        logger.info("Leave request %s created: %s, %d day(s) of %s", request_id, employee.employee_id, days, type_id)
        self._emit(self.get(request_id), actor_id=employee.employee_id)
        return request_id

    def approve(self, *, request_id: int, approver_id: str) -> LeaveRequest:
        approver_id = require_non_empty(approver_id, "Approver")
        req = self.get(request_id)
        if req.status != LeaveStatus.PENDING:
            raise InvalidTransitionError(f"Cannot approve a request that is {req.status.value}")

        # Days were reserved at creation; approval only confirms them.
        if not self._requests.decide(request_id=req.request_id, status=LeaveStatus.APPROVED, decided_by=approver_id):
            raise InvalidTransitionError("Request was decided concurrently")

        updated = self.get(req.request_id)
        logger.info("Leave request %s approved by %s", req.request_id, approver_id)
        self._emit(updated, actor_id=approver_id)
        return updated

    def reject(self, *, request_id: int, approver_id: str, reason: Optional[str] = None) -> LeaveRequest:
        approver_id = require_non_empty(approver_id, "Approver")
        note = optional_text(reason)
        req = self.get(request_id)
        if req.status != LeaveStatus.PENDING:
            raise InvalidTransitionError(f"Cannot reject a request that is {req.status.value}")

        with self._ledger.locked(*self._keys(req)):
            if not self._requests.decide(
                request_id=req.request_id,
                status=LeaveStatus.REJECTED,
                decided_by=approver_id,
                rejection_reason=note,
            ):
                raise InvalidTransitionError("Request was decided concurrently")
            try:
                self._give_back(req)
            except Exception:
                self._requests.restore(req)
                raise

        updated = self.get(req.request_id)
        logger.info("Leave request %s rejected by %s", req.request_id, approver_id)
        self._emit(updated, actor_id=approver_id, reason=note)
        return updated

    def decide(
        self,
        *,
        request_id: int,
        decision: Decision,
        approver_id: str,
        reason: Optional[str] = None,
    ) -> LeaveRequest:
        if decision == Decision.APPROVE:
            return self.approve(request_id=request_id, approver_id=approver_id)
        return self.reject(request_id=request_id, approver_id=approver_id, reason=reason)

    def cancel(self, *, request_id: int, actor_id: str) -> LeaveRequest:
        actor_id = require_non_empty(actor_id, "Actor")
        req = self.get(request_id)
        if req.status not in _CANCELLABLE:
            raise InvalidTransitionError(f"Cannot cancel a request that is {req.status.value}")

        with self._ledger.locked(*self._keys(req)):
            if not self._requests.cancel(request_id=req.request_id, cancelled_by=actor_id, from_statuses=_CANCELLABLE):
                raise InvalidTransitionError("Request was already cancelled or decided")
            try:
                self._give_back(req)
            except Exception:
                self._requests.restore(req)
                raise

        updated = self.get(req.request_id)
        logger.info("Leave request %s cancelled by %s (was %s)", req.request_id, actor_id, req.status.value)
        self._emit(updated, actor_id=actor_id)
        return updated

    def list_for_employee(
        self,
        *,
        employee_id: str,
        status: Optional[LeaveStatus] = None,
        limit: int = DEFAULT_REQUEST_LIST_LIMIT,
    ) -> Sequence[LeaveRequest]:
        employee = self._require_employee(employee_id)
        return self._requests.list_for_employees(employee_ids=[employee.employee_id], status=status, limit=limit)

    def list_pending_for_manager(self, *, manager_id: str, limit: int = DEFAULT_PENDING_LIST_LIMIT) -> Sequence[LeaveRequest]:
        reports = [e.employee_id for e in self._employees.list_reports(str(manager_id))]
        return self._requests.list_for_employees(employee_ids=reports, status=LeaveStatus.PENDING, limit=limit)

    def count_pending_for_manager(self, *, manager_id: str) -> int:
        return len(self.list_pending_for_manager(manager_id=manager_id))
