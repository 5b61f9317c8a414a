from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from typing import Optional

from ..common.validators import require_positive_int
from ..core.enums import Gender
from ..core.exceptions import (
    InsufficientBalanceError,
    InvalidTypeError,
    NotFoundError,
    OverReleaseError,
)
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..leave_types.calculator import EntitlementCalculator
from ..leave_types.registry import LeaveTypeRegistry
from .locks import KeyedLocks
from .model import Balance, EntitlementKey, EntitlementSummaryRow, LeaveEntitlement
from .repository import EntitlementRepository

logger = logging.getLogger(__name__)


class BalanceLedger:
    """Remaining-balance bookkeeping per (employee, leave type, year).

    All mutations of one key run under that key's lock. The repository's
    conditional updates are the second guard, for writers in other processes.
    """

    def __init__(
        self,
        entitlements: EntitlementRepository,
        employees: EmployeeRepository,
        registry: LeaveTypeRegistry,
        calculator: EntitlementCalculator,
        *,
        locks: Optional[KeyedLocks] = None,
    ):
        self._entitlements = entitlements
        self._employees = employees
        self._registry = registry
        self._calculator = calculator
        self._locks = locks or KeyedLocks()

    def locked(self, *keys: EntitlementKey) -> AbstractContextManager:
        """Hold the ledger locks of ``keys`` across a multi-step operation."""
        return self._locks.hold(*keys)

    def _require_employee(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(str(employee_id))
        if not employee:
            raise NotFoundError(f"Unknown employee: {employee_id}")
        return employee

    def _ensure_row(self, employee_id: str, type_id: str, year: int, gender: Optional[Gender]) -> LeaveEntitlement:
        current = self._entitlements.get(employee_id=employee_id, type_id=type_id, year=year)
        if current is not None:
            return current

        quota = self._calculator.compute_annual_quota(gender).get(type_id)
        if quota is None:
            raise InvalidTypeError(f"{type_id} is not available to this employee")
        row = LeaveEntitlement(
            employee_id=employee_id,
            type_id=type_id,
            year=int(year),
            total_days=quota,
            remaining_days=quota,
        )
        if self._entitlements.insert_if_missing(row):
            logger.info("Initialized %s %s for %s: %d days", year, type_id, employee_id, quota)
        stored = self._entitlements.get(employee_id=employee_id, type_id=type_id, year=year)
        return stored or row

    def initialize_year(self, employee_id: str, year: int, gender: Optional[Gender]) -> list[LeaveEntitlement]:
        """Create missing rows with total = remaining = quota. Existing rows are kept as they are."""

        employee_id = str(employee_id)
        rows: list[LeaveEntitlement] = []
        for type_id in self._calculator.compute_annual_quota(gender):
            with self._locks.hold(EntitlementKey(employee_id, type_id, int(year))):
                rows.append(self._ensure_row(employee_id, type_id, int(year), gender))
        return rows

    def reserve(self, employee_id: str, type_id: str, year: int, days: int) -> Balance:
        days = require_positive_int(days, "days")
        employee = self._require_employee(employee_id)
        if not self._registry.is_eligible(type_id, employee.gender):
            raise InvalidTypeError(f"{type_id} is not available to employee {employee.employee_id}")

        key = EntitlementKey(employee.employee_id, type_id, int(year))
        with self._locks.hold(key):
            current = self._ensure_row(employee.employee_id, type_id, int(year), employee.gender)
            if days > current.remaining_days:
                logger.warning(
                    "Reserve refused for %s: %d days of %s requested, %d remaining",
                    key, days, type_id, current.remaining_days,
                )
                raise InsufficientBalanceError(
                    f"Insufficient {type_id} balance: {current.remaining_days} day(s) remaining, {days} requested"
                )
            if not self._entitlements.try_decrement(
                employee_id=key.employee_id, type_id=type_id, year=key.year, days=days
            ):
                raise InsufficientBalanceError(f"Insufficient {type_id} balance")

            logger.info("Reserved %d day(s) on %s", days, key)
            return Balance(total=current.total_days, remaining=current.remaining_days - days)

    def release(self, employee_id: str, type_id: str, year: int, days: int) -> Balance:
        days = require_positive_int(days, "days")
        key = EntitlementKey(str(employee_id), type_id, int(year))
        with self._locks.hold(key):
            current = self._entitlements.get(employee_id=key.employee_id, type_id=type_id, year=key.year)
            if current is None:
                raise NotFoundError(f"No {type_id} entitlement for {employee_id} in {year}")
            if current.remaining_days + days > current.total_days:
                logger.error(
                    "Over-release on %s: +%d would exceed total %d (remaining %d)",
                    key, days, current.total_days, current.remaining_days,
                )
                raise OverReleaseError(
                    f"Releasing {days} day(s) would exceed the {type_id} total of {current.total_days}"
                )
            if not self._entitlements.try_increment(
                employee_id=key.employee_id, type_id=type_id, year=key.year, days=days
            ):
                raise OverReleaseError(f"Release of {days} day(s) on {type_id} rejected by store")

            logger.info("Released %d day(s) on %s", days, key)
            return Balance(total=current.total_days, remaining=current.remaining_days + days)

    def find_balance(self, employee_id: str, type_id: str, year: int) -> Optional[Balance]:
        current = self._entitlements.get(employee_id=str(employee_id), type_id=type_id, year=int(year))
        if current is None:
            return None
        return Balance(total=current.total_days, remaining=current.remaining_days)

    def get_balance(self, employee_id: str, type_id: str, year: int) -> Balance:
        balance = self.find_balance(employee_id, type_id, year)
        if balance is None:
            raise NotFoundError(f"No {type_id} entitlement for {employee_id} in {year}")
        return balance

    def summary(self, employee_id: str, year: int) -> list[EntitlementSummaryRow]:
        self._require_employee(employee_id)
        rows = {r.type_id: r for r in self._entitlements.list_for_year(employee_id=str(employee_id), year=int(year))}

        out: list[EntitlementSummaryRow] = []
        for definition in self._registry.all_types():
            row = rows.pop(definition.type_id, None)
            if row is None:
                continue
            out.append(
                EntitlementSummaryRow(
                    type_id=definition.type_id,
                    label=definition.label,
                    short_label=definition.short_label,
                    total=row.total_days,
                    remaining=row.remaining_days,
                )
            )
        # Rows for types no longer in the catalog are still the employee's balance.
        for type_id in sorted(rows):
            row = rows[type_id]
            out.append(
                EntitlementSummaryRow(
                    type_id=type_id,
                    label=type_id,
                    short_label=type_id,
                    total=row.total_days,
                    remaining=row.remaining_days,
                )
            )
        return out
