from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest

from src.nesthr.nesthr.carry_forward.model import EmployeeRollover
from src.nesthr.nesthr.container import build_services
from src.nesthr.nesthr.core.enums import Gender, LeaveStatus
from src.nesthr.nesthr.core.exceptions import AlreadyProcessedError
from src.nesthr.nesthr.employees.model import Employee
from src.nesthr.nesthr.entitlements.model import LeaveEntitlement
from src.nesthr.nesthr.leaves.model import LeaveRequest


class InMemoryEmployees:
    def __init__(self, employees=()):
        self._by_id: dict[str, Employee] = {e.employee_id: e for e in employees}

    def add(self, employee: Employee) -> None:
        self._by_id[employee.employee_id] = employee

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self._by_id.get(employee_id)

    def list_active_by_org(self, org_id: str):
        return sorted(
            (e for e in self._by_id.values() if e.org_id == org_id and e.is_active),
            key=lambda e: e.employee_id,
        )

    def list_reports(self, manager_id: str):
        return [e for e in self._by_id.values() if e.manager_id == manager_id and e.is_active]


class InMemoryEntitlements:
    def __init__(self):
        self._rows: dict[tuple[str, str, int], LeaveEntitlement] = {}
        self._mutex = threading.Lock()

    def put(self, row: LeaveEntitlement) -> None:
        self._rows[(row.employee_id, row.type_id, row.year)] = row

    def get(self, *, employee_id, type_id, year):
        return self._rows.get((employee_id, type_id, int(year)))

    def list_for_year(self, *, employee_id, year):
        return [r for (e, _, y), r in self._rows.items() if e == employee_id and y == int(year)]

    def all_rows(self):
        return list(self._rows.values())

    def insert_if_missing(self, entitlement):
        with self._mutex:
            key = (entitlement.employee_id, entitlement.type_id, entitlement.year)
            if key in self._rows:
                return False
            self._rows[key] = entitlement
            return True

    def try_decrement(self, *, employee_id, type_id, year, days):
        with self._mutex:
            row = self._rows.get((employee_id, type_id, int(year)))
            if row is None or row.remaining_days < days:
                return False
            self._rows[(employee_id, type_id, int(year))] = replace(row, remaining_days=row.remaining_days - days)
            return True

    def try_increment(self, *, employee_id, type_id, year, days):
        with self._mutex:
            row = self._rows.get((employee_id, type_id, int(year)))
            if row is None or row.remaining_days + days > row.total_days:
                return False
            self._rows[(employee_id, type_id, int(year))] = replace(row, remaining_days=row.remaining_days + days)
            return True


class InMemoryLeaveRequests:
    def __init__(self):
        self._next_id = 1
        self._by_id: dict[int, LeaveRequest] = {}

    def create(self, *, employee_id, type_id, start_date, end_date, days, special_reason):
        rid = self._next_id
        self._next_id += 1
        self._by_id[rid] = LeaveRequest(
            request_id=rid,
            employee_id=employee_id,
            type_id=type_id,
            start_date=start_date,
            end_date=end_date,
            days=days,
            status=LeaveStatus.PENDING,
            created_at=datetime(2026, 1, 2, 9, 0, 0),
            special_reason=special_reason,
        )
        return rid

    def get(self, *, request_id):
        return self._by_id.get(int(request_id))

    def decide(self, *, request_id, status, decided_by, rejection_reason=None):
        req = self._by_id.get(int(request_id))
        if not req or req.status != LeaveStatus.PENDING:
            return False
        self._by_id[req.request_id] = replace(
            req,
            status=status,
            decided_by=decided_by,
            decided_at=datetime(2026, 1, 3, 10, 0, 0),
            rejection_reason=rejection_reason,
        )
        return True

    def cancel(self, *, request_id, cancelled_by, from_statuses):
        req = self._by_id.get(int(request_id))
        if not req or req.status not in from_statuses:
            return False
        self._by_id[req.request_id] = replace(req, status=LeaveStatus.CANCELLED, cancelled_by=cancelled_by)
        return True

    def restore(self, request):
        self._by_id[request.request_id] = request

    def list_for_employees(self, *, employee_ids, status=None, limit=200):
        rows = [
            r for r in self._by_id.values()
            if r.employee_id in set(employee_ids) and (status is None or r.status == status)
        ]
        rows.sort(key=lambda r: r.request_id, reverse=True)
        return rows[:limit]


class InMemoryCarryForwardLog:
    def __init__(self, entitlements: InMemoryEntitlements):
        self._entitlements = entitlements
        self.entries: dict[tuple[str, int], EmployeeRollover] = {}

    def processed_employee_ids(self, *, org_id, from_year):
        return {e for (e, y), r in self.entries.items() if y == int(from_year) and r.org_id == org_id}

    def is_processed(self, *, employee_id, from_year):
        return (employee_id, int(from_year)) in self.entries

    def apply(self, rollover):
        key = (rollover.employee_id, rollover.from_year)
        if key in self.entries:
            raise AlreadyProcessedError(f"{rollover.employee_id} already processed")
        for opening in rollover.openings:
            existing = self._entitlements.get(
                employee_id=rollover.employee_id, type_id=opening.type_id, year=rollover.to_year
            )
            if existing is None:
                row = LeaveEntitlement(
                    employee_id=rollover.employee_id,
                    type_id=opening.type_id,
                    year=rollover.to_year,
                    total_days=opening.total_days,
                    remaining_days=opening.total_days,
                )
            else:
                row = replace(
                    existing,
                    total_days=existing.total_days + opening.carried_days,
                    remaining_days=existing.remaining_days + opening.carried_days,
                )
            self._entitlements.put(row)
        self.entries[key] = rollover

    def add_late_release(self, *, employee_id, type_id, from_year, carried_days, forfeited_days):
        key = (employee_id, int(from_year))
        rollover = self.entries[key]
        if carried_days:
            row = self._entitlements.get(employee_id=employee_id, type_id=type_id, year=int(from_year) + 1)
            self._entitlements.put(
                replace(
                    row,
                    total_days=row.total_days + carried_days,
                    remaining_days=row.remaining_days + carried_days,
                )
            )
        self.entries[key] = replace(
            rollover,
            carried_days=rollover.carried_days + carried_days,
            forfeited_days=rollover.forfeited_days + forfeited_days,
        )


class RecordingPublisher:
    def __init__(self):
        self.events = []

    def publish(self, event):
        self.events.append(event)


ORG = "org-1"


@pytest.fixture
def employees():
    return InMemoryEmployees(
        [
            Employee("emp-f", ORG, "Asha Rao", gender=Gender.FEMALE, manager_id="mgr-1"),
            Employee("emp-m", ORG, "Vikram Das", gender=Gender.MALE, manager_id="mgr-1"),
            Employee("emp-n", ORG, "Sam Lee", gender=None, manager_id="mgr-2"),
            Employee("mgr-1", ORG, "Meera Iyer", gender=Gender.FEMALE),
            Employee("emp-x", "org-2", "Other Org", gender=Gender.MALE),
        ]
    )


@pytest.fixture
def entitlements():
    return InMemoryEntitlements()


@pytest.fixture
def leave_requests_repo():
    return InMemoryLeaveRequests()


@pytest.fixture
def carry_log(entitlements):
    return InMemoryCarryForwardLog(entitlements)


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def container(employees, entitlements, leave_requests_repo, carry_log, publisher):
    return build_services(
        employees_repo=employees,
        entitlements_repo=entitlements,
        leave_requests_repo=leave_requests_repo,
        carry_forward_repo=carry_log,
        publisher=publisher,
        lock_timeout=0.5,
    )


@pytest.fixture
def ledger(container):
    return container.ledger


@pytest.fixture
def leave_service(container):
    return container.leave_request_service


@pytest.fixture
def carry_forward_service(container):
    return container.carry_forward_service
