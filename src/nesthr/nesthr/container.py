from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .carry_forward.mysql_carry_forward_repository import MySQLCarryForwardRepository
from .carry_forward.repository import CarryForwardRepository
from .carry_forward.service import CarryForwardService
from .core.constants import DAY_COUNTING_CALENDAR, DEFAULT_LOCK_TIMEOUT_SECONDS, DEFAULT_WEEKEND_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .entitlements.ledger import BalanceLedger
from .entitlements.locks import KeyedLocks
from .entitlements.mysql_entitlement_repository import MySQLEntitlementRepository
from .entitlements.repository import EntitlementRepository
from .leave_types.calculator import EntitlementCalculator
from .leave_types.registry import LeaveTypeRegistry
from .leaves.day_counting.factory import build_day_counting_policy
from .leaves.mysql_leave_request_repository import MySQLLeaveRequestRepository
from .leaves.repository import LeaveRequestRepository
from .leaves.service import LeaveRequestService
from .notifications.publisher import LoggingNotificationPublisher, NotificationPublisher


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    entitlements_repo: EntitlementRepository
    leave_requests_repo: LeaveRequestRepository
    carry_forward_repo: CarryForwardRepository

    registry: LeaveTypeRegistry
    calculator: EntitlementCalculator
    ledger: BalanceLedger
    leave_request_service: LeaveRequestService
    carry_forward_service: CarryForwardService


def build_services(
    *,
    employees_repo: EmployeeRepository,
    entitlements_repo: EntitlementRepository,
    leave_requests_repo: LeaveRequestRepository,
    carry_forward_repo: CarryForwardRepository,
    publisher: Optional[NotificationPublisher] = None,
    registry: Optional[LeaveTypeRegistry] = None,
    day_counting: str = DAY_COUNTING_CALENDAR,
    weekend_days=DEFAULT_WEEKEND_DAYS,
    holidays=(),
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS,
) -> Container:
    """Wire services on top of any repository implementations."""

    registry = registry or LeaveTypeRegistry()
    calculator = EntitlementCalculator(registry)
    ledger = BalanceLedger(
        entitlements_repo,
        employees_repo,
        registry,
        calculator,
        locks=KeyedLocks(timeout=lock_timeout),
    )
    carry_forward_service = CarryForwardService(employees_repo, carry_forward_repo, registry, calculator, ledger)
    leave_request_service = LeaveRequestService(
        leave_requests_repo,
        employees_repo,
        registry,
        ledger,
        build_day_counting_policy(day_counting, weekend_days=weekend_days, holidays=holidays),
        publisher or LoggingNotificationPublisher(),
        carry_forward=carry_forward_service,
    )

    return Container(
        employees_repo=employees_repo,
        entitlements_repo=entitlements_repo,
        leave_requests_repo=leave_requests_repo,
        carry_forward_repo=carry_forward_repo,
        registry=registry,
        calculator=calculator,
        ledger=ledger,
        leave_request_service=leave_request_service,
        carry_forward_service=carry_forward_service,
    )


def build_container(*, db_config: dict, settings: object = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        employees_repo=MySQLEmployeeRepository(conn),
        entitlements_repo=MySQLEntitlementRepository(conn),
        leave_requests_repo=MySQLLeaveRequestRepository(conn),
        carry_forward_repo=MySQLCarryForwardRepository(conn),
        day_counting=getattr(settings, "LEAVE_DAY_COUNTING", DAY_COUNTING_CALENDAR),
        weekend_days=getattr(settings, "WEEKEND_DAYS", DEFAULT_WEEKEND_DAYS),
        holidays=getattr(settings, "HOLIDAYS", ()),
        lock_timeout=float(getattr(settings, "LEDGER_LOCK_TIMEOUT_SECONDS", DEFAULT_LOCK_TIMEOUT_SECONDS)),
    )
