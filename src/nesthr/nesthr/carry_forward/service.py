from __future__ import annotations

import logging

from ..common.validators import require_non_empty, require_positive_int
from ..core.exceptions import AlreadyProcessedError, DomainError, InvalidRangeError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..entitlements.ledger import BalanceLedger
from ..entitlements.model import EntitlementKey
from ..leave_types.calculator import EntitlementCalculator
from ..leave_types.registry import LeaveTypeRegistry
from .model import CarryForwardFailure, CarryForwardReport, EmployeeRollover, YearOpening
from .repository import CarryForwardRepository

logger = logging.getLogger(__name__)


class CarryForwardService:
    """Use case: year-end rollover of leave balances for one org.

    Quotas are recomputed from the employee's current gender. Carrying types
    add ``min(previous remaining, cap)`` on top of the quota; the rest is
    forfeited. Each employee is processed on their own: a failure is recorded
    in the report and the batch goes on.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        carry_log: CarryForwardRepository,
        registry: LeaveTypeRegistry,
        calculator: EntitlementCalculator,
        ledger: BalanceLedger,
    ):
        self._employees = employees
        self._carry_log = carry_log
        self._registry = registry
        self._calculator = calculator
        self._ledger = ledger

    def plan(self, employee: Employee, from_year: int) -> EmployeeRollover:
        openings: list[YearOpening] = []
        carried_total = 0
        forfeited_total = 0

        for type_id, quota in self._calculator.compute_annual_quota(employee.gender).items():
            definition = self._registry.get_type(type_id)
            carried = 0
            if definition.carry_forward:
                previous = self._ledger.find_balance(employee.employee_id, type_id, from_year)
                previous_remaining = previous.remaining if previous else 0
                carried = min(previous_remaining, int(definition.max_carry_forward or 0))
                carried_total += carried
                forfeited_total += previous_remaining - carried
            openings.append(YearOpening(type_id=type_id, total_days=quota + carried, carried_days=carried))

        return EmployeeRollover(
            employee_id=employee.employee_id,
            org_id=employee.org_id,
            from_year=int(from_year),
            openings=tuple(openings),
            carried_days=carried_total,
            forfeited_days=forfeited_total,
        )

    def ensure_year_open(self, employee_id: str, type_id: str, year: int) -> None:
        """Refuse new reservations against a carrying balance that was already rolled over."""

        definition = self._registry.get_type(type_id)
        if definition.carry_forward and self._carry_log.is_processed(employee_id=str(employee_id), from_year=int(year)):
            raise InvalidRangeError(
                f"{definition.label} for {year} was already carried forward; the year is closed"
            )

    def carry_late_release(self, employee_id: str, type_id: str, from_year: int, days: int) -> int:
        """Pass days released into a rolled-over year on to the next year, up to the cap.

        Call with ``days`` already released and the ledger locks of both years
        held. Returns the number of days added to ``from_year + 1``.
        """

        definition = self._registry.get_type(type_id)
        if not definition.carry_forward:
            return 0
        if not self._carry_log.is_processed(employee_id=str(employee_id), from_year=int(from_year)):
            return 0

        cap = int(definition.max_carry_forward or 0)
        remaining = self._ledger.get_balance(employee_id, type_id, from_year).remaining
        extra = min(remaining, cap) - min(remaining - days, cap)
        self._carry_log.add_late_release(
            employee_id=str(employee_id),
            type_id=type_id,
            from_year=int(from_year),
            carried_days=extra,
            forfeited_days=days - extra,
        )
        logger.info(
            "%s: %d day(s) of %s released into closed year %s, %d carried to %s",
            employee_id, days, type_id, from_year, extra, int(from_year) + 1,
        )
        return extra

    def _process(self, employee: Employee, from_year: int) -> EmployeeRollover:
        type_ids = list(self._calculator.compute_annual_quota(employee.gender))
        keys = [
            EntitlementKey(employee.employee_id, type_id, year)
            for type_id in type_ids
            for year in (from_year, from_year + 1)
        ]
        with self._ledger.locked(*keys):
            rollover = self.plan(employee, from_year)
            self._carry_log.apply(rollover)
        return rollover

    def run(self, *, org_id: str, from_year: int) -> CarryForwardReport:
        org_id = require_non_empty(org_id, "Organization")
        from_year = require_positive_int(from_year, "Year")

        employees = list(self._employees.list_active_by_org(org_id))
        done = self._carry_log.processed_employee_ids(org_id=org_id, from_year=from_year)
        pending = [e for e in employees if e.employee_id not in done]

        if employees and not pending:
            raise AlreadyProcessedError(f"Carry-forward {from_year} -> {from_year + 1} already ran for {org_id}")

        report = CarryForwardReport(org_id=org_id, from_year=from_year, skipped=len(employees) - len(pending))
        logger.info(
            "Carry-forward %s -> %s for %s: %d employee(s), %d already done",
            from_year, from_year + 1, org_id, len(pending), report.skipped,
        )

        for employee in pending:
            try:
                rollover = self._process(employee, from_year)
            except DomainError as e:
                logger.warning("Carry-forward failed for %s: %s", employee.employee_id, e)
                report.failed.append(CarryForwardFailure(employee.employee_id, e.code, str(e)))
                continue
            except Exception as e:
                logger.exception("Carry-forward crashed for %s", employee.employee_id)
                report.failed.append(CarryForwardFailure(employee.employee_id, "internal_error", str(e)))
                continue

            report.processed += 1
            if rollover.forfeited_days:
                logger.info(
                    "%s: carried %d day(s), forfeited %d",
                    employee.employee_id, rollover.carried_days, rollover.forfeited_days,
                )

        logger.info(
            "Carry-forward %s done for %s: processed=%d failed=%d",
            from_year, org_id, report.processed, len(report.failed),
        )
        return report
