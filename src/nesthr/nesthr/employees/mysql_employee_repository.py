from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.enums import Gender
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

_COLUMNS = "employee_id, org_id, full_name, gender, manager_id, is_active"


def _stored_gender(employee_id: str, value: Optional[str]) -> Optional[Gender]:
    # The column is free text; an unreadable value counts as "not specified".
    try:
        return Gender.parse(value)
    except ValueError:
        logger.warning("Employee %s has unrecognized gender %r; treating it as unspecified", employee_id, value)
        return None


def _to_employee(r: dict) -> Employee:
    employee_id = str(r["employee_id"])
    return Employee(
        employee_id=employee_id,
        org_id=str(r["org_id"]),
        full_name=r["full_name"],
        gender=_stored_gender(employee_id, r.get("gender")),
        manager_id=r.get("manager_id"),
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (str(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_active_by_org(self, org_id: str) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE org_id=%s AND is_active=1 ORDER BY employee_id",
                (str(org_id),),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def list_reports(self, manager_id: str) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE manager_id=%s AND is_active=1 ORDER BY full_name",
                (str(manager_id),),
            )
            return [_to_employee(r) for r in fetchall(cur)]
