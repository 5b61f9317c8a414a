from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from src.nesthr.nesthr.core.enums import Gender
from src.nesthr.nesthr.core.exceptions import (
    AlreadyProcessedError,
    InvalidRangeError,
    InvalidTypeError,
    ValidationError,
)
from src.nesthr.nesthr.employees.mysql_employee_repository import _to_employee
from src.nesthr.nesthr.entitlements.model import Balance, LeaveEntitlement
from src.nesthr.nesthr.leave_types.registry import (
    CASUAL_LEAVE,
    EARNED_LEAVE,
    MENSTRUATION_LEAVE,
    SICK_LEAVE,
)

ORG = "org-1"


def _set_remaining(entitlements, employee_id, type_id, year, total, remaining):
    entitlements.put(LeaveEntitlement(employee_id, type_id, year, total_days=total, remaining_days=remaining))


def test_earned_leave_below_cap_is_carried_in_full(carry_forward_service, entitlements, ledger):
    _set_remaining(entitlements, "emp-m", EARNED_LEAVE, 2025, 40, 25)
    report = carry_forward_service.run(org_id=ORG, from_year=2025)

    assert report.failed == []
    assert ledger.get_balance("emp-m", EARNED_LEAVE, 2026) == Balance(total=43, remaining=43)


def test_earned_leave_above_cap_is_capped(carry_forward_service, entitlements, ledger, carry_log):
    _set_remaining(entitlements, "emp-m", EARNED_LEAVE, 2025, 48, 35)
    carry_forward_service.run(org_id=ORG, from_year=2025)

    assert ledger.get_balance("emp-m", EARNED_LEAVE, 2026) == Balance(total=48, remaining=48)
    rollover = carry_log.entries[("emp-m", 2025)]
    assert rollover.carried_days == 30
    assert rollover.forfeited_days == 5


def test_non_carrying_types_reset_to_quota(carry_forward_service, entitlements, ledger):
    _set_remaining(entitlements, "emp-f", CASUAL_LEAVE, 2025, 6, 1)
    _set_remaining(entitlements, "emp-f", SICK_LEAVE, 2025, 6, 6)
    carry_forward_service.run(org_id=ORG, from_year=2025)

    assert ledger.get_balance("emp-f", CASUAL_LEAVE, 2026) == Balance(total=6, remaining=6)
    assert ledger.get_balance("emp-f", SICK_LEAVE, 2026) == Balance(total=6, remaining=6)
    assert ledger.get_balance("emp-f", MENSTRUATION_LEAVE, 2026) == Balance(total=12, remaining=12)
    assert ledger.get_balance("emp-f", EARNED_LEAVE, 2026) == Balance(total=18, remaining=18)


def test_quotas_follow_current_gender(carry_forward_service, ledger):
    carry_forward_service.run(org_id=ORG, from_year=2025)
    assert ledger.find_balance("emp-m", MENSTRUATION_LEAVE, 2026) is None
    assert ledger.find_balance("emp-n", MENSTRUATION_LEAVE, 2026) is None


def test_report_counts_only_org_employees(carry_forward_service, ledger):
    report = carry_forward_service.run(org_id=ORG, from_year=2025)
    assert report.processed == 4
    assert report.skipped == 0
    assert report.to_year == 2026
    assert ledger.find_balance("emp-x", CASUAL_LEAVE, 2026) is None


def test_second_run_is_rejected_without_changing_balances(carry_forward_service, entitlements, ledger):
    _set_remaining(entitlements, "emp-m", EARNED_LEAVE, 2025, 18, 10)
    carry_forward_service.run(org_id=ORG, from_year=2025)
    with pytest.raises(AlreadyProcessedError):
        carry_forward_service.run(org_id=ORG, from_year=2025)
    assert ledger.get_balance("emp-m", EARNED_LEAVE, 2026) == Balance(total=28, remaining=28)


def test_existing_next_year_row_is_topped_up(carry_forward_service, entitlements, ledger):
    _set_remaining(entitlements, "emp-m", EARNED_LEAVE, 2025, 18, 10)
    # Already used 3 days of the lazily created 2026 row.
    _set_remaining(entitlements, "emp-m", EARNED_LEAVE, 2026, 18, 15)
    carry_forward_service.run(org_id=ORG, from_year=2025)
    assert ledger.get_balance("emp-m", EARNED_LEAVE, 2026) == Balance(total=28, remaining=25)


def test_failure_for_one_employee_does_not_stop_the_batch(carry_forward_service, carry_log, ledger, monkeypatch):
    original = carry_log.apply

    def flaky(rollover):
        if rollover.employee_id == "emp-f":
            raise InvalidTypeError("corrupt row")
        return original(rollover)

    monkeypatch.setattr(carry_log, "apply", flaky)
    report = carry_forward_service.run(org_id=ORG, from_year=2025)

    assert report.processed == 3
    assert report.failed_employee_ids == ["emp-f"]
    assert report.failed[0].error_code == "invalid_type"
    assert ledger.find_balance("emp-f", CASUAL_LEAVE, 2026) is None

    monkeypatch.setattr(carry_log, "apply", original)
    retry = carry_forward_service.run(org_id=ORG, from_year=2025)
    assert retry.processed == 1
    assert retry.skipped == 3
    assert ledger.get_balance("emp-f", CASUAL_LEAVE, 2026).total == 6


def test_unexpected_error_is_reported_as_internal(carry_forward_service, carry_log, monkeypatch):
    def broken(_rollover):
        raise RuntimeError("disk full")

    monkeypatch.setattr(carry_log, "apply", broken)
    report = carry_forward_service.run(org_id=ORG, from_year=2025)
    assert report.processed == 0
    assert {f.error_code for f in report.failed} == {"internal_error"}
    payload = report.to_dict()
    assert payload["failed"] == ["emp-f", "emp-m", "emp-n", "mgr-1"]
    assert payload["failures"][0] == {"employee_id": "emp-f", "error": "internal_error", "message": "disk full"}


def test_plan_does_not_write(carry_forward_service, employees, entitlements):
    _set_remaining(entitlements, "emp-m", EARNED_LEAVE, 2025, 18, 7)
    rollover = carry_forward_service.plan(employees.get_by_id("emp-m"), 2025)
    assert rollover.carried_days == 7
    assert rollover.to_year == 2026
    assert {o.type_id: o.total_days for o in rollover.openings}[EARNED_LEAVE] == 25
    assert entitlements.get(employee_id="emp-m", type_id=EARNED_LEAVE, year=2026) is None


def test_empty_org_reports_nothing(carry_forward_service):
    report = carry_forward_service.run(org_id="org-empty", from_year=2025)
    assert report.processed == 0
    assert report.failed == []


def test_run_validates_input(carry_forward_service):
    with pytest.raises(ValidationError):
        carry_forward_service.run(org_id="", from_year=2025)
    with pytest.raises(ValidationError):
        carry_forward_service.run(org_id=ORG, from_year=0)


def test_gender_change_drops_restricted_type_next_year(carry_forward_service, employees, ledger):
    employees.add(replace(employees.get_by_id("emp-f"), gender=Gender.OTHER))
    carry_forward_service.run(org_id=ORG, from_year=2025)
    assert ledger.find_balance("emp-f", MENSTRUATION_LEAVE, 2026) is None


def test_employee_without_gender_gets_common_types(carry_forward_service, entitlements, ledger, carry_log):
    _set_remaining(entitlements, "emp-n", EARNED_LEAVE, 2025, 18, 12)
    report = carry_forward_service.run(org_id=ORG, from_year=2025)

    assert "emp-n" not in report.failed_employee_ids
    opened = sorted(r.type_id for r in entitlements.all_rows() if r.employee_id == "emp-n" and r.year == 2026)
    assert opened == sorted([CASUAL_LEAVE, SICK_LEAVE, EARNED_LEAVE, "Special Leave"])
    assert ledger.get_balance("emp-n", EARNED_LEAVE, 2026) == Balance(total=30, remaining=30)
    assert carry_log.entries[("emp-n", 2025)].carried_days == 12


def test_rejection_after_rollover_carries_returned_days(carry_forward_service, leave_service, ledger, carry_log):
    ledger.initialize_year("emp-m", 2025, Gender.MALE)
    rid = leave_service.create(
        employee_id="emp-m",
        type_id=EARNED_LEAVE,
        start_date=date(2025, 12, 1),
        end_date=date(2025, 12, 5),
    )
    carry_forward_service.run(org_id=ORG, from_year=2025)
    assert ledger.get_balance("emp-m", EARNED_LEAVE, 2026) == Balance(total=31, remaining=31)

    leave_service.reject(request_id=rid, approver_id="mgr-1")

    assert ledger.get_balance("emp-m", EARNED_LEAVE, 2025) == Balance(total=18, remaining=18)
    assert ledger.get_balance("emp-m", EARNED_LEAVE, 2026) == Balance(total=36, remaining=36)
    assert carry_log.entries[("emp-m", 2025)].carried_days == 18


def test_late_release_above_cap_is_forfeited(carry_forward_service, leave_service, entitlements, ledger, carry_log):
    _set_remaining(entitlements, "emp-m", EARNED_LEAVE, 2025, 40, 40)
    rid = leave_service.create(
        employee_id="emp-m",
        type_id=EARNED_LEAVE,
        start_date=date(2025, 11, 3),
        end_date=date(2025, 11, 14),
    )
    leave_service.approve(request_id=rid, approver_id="mgr-1")
    carry_forward_service.run(org_id=ORG, from_year=2025)
    # 28 remaining at rollover: all of it carried.
    assert ledger.get_balance("emp-m", EARNED_LEAVE, 2026).total == 46

    leave_service.cancel(request_id=rid, actor_id="emp-m")

    assert ledger.get_balance("emp-m", EARNED_LEAVE, 2026) == Balance(total=48, remaining=48)
    rollover = carry_log.entries[("emp-m", 2025)]
    assert rollover.carried_days == 30
    assert rollover.forfeited_days == 10


def test_closed_year_refuses_new_carrying_requests(carry_forward_service, leave_service, ledger):
    carry_forward_service.run(org_id=ORG, from_year=2025)

    with pytest.raises(InvalidRangeError):
        leave_service.create(
            employee_id="emp-m",
            type_id=EARNED_LEAVE,
            start_date=date(2025, 12, 29),
            end_date=date(2025, 12, 30),
        )
    assert ledger.find_balance("emp-m", EARNED_LEAVE, 2025) is None

    rid = leave_service.create(
        employee_id="emp-m",
        type_id=SICK_LEAVE,
        start_date=date(2025, 12, 29),
        end_date=date(2025, 12, 29),
    )
    assert leave_service.get(rid).days == 1


def test_unreadable_stored_gender_does_not_abort_the_batch(carry_forward_service, employees, ledger):
    employees.add(
        _to_employee(
            {"employee_id": "emp-q", "org_id": ORG, "full_name": "Quinn", "gender": "?", "manager_id": None, "is_active": 1}
        )
    )
    report = carry_forward_service.run(org_id=ORG, from_year=2025)

    assert report.processed == 5
    assert report.failed == []
    assert ledger.get_balance("emp-q", CASUAL_LEAVE, 2026) == Balance(total=6, remaining=6)
    assert ledger.find_balance("emp-q", MENSTRUATION_LEAVE, 2026) is None
