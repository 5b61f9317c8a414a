from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveEntitlement
from .repository import EntitlementRepository


def _to_entitlement(r: dict) -> LeaveEntitlement:
    return LeaveEntitlement(
        employee_id=str(r["employee_id"]),
        type_id=r["leave_type"],
        year=int(r["year"]),
        total_days=int(r["total_days"]),
        remaining_days=int(r["remaining_days"]),
    )


class MySQLEntitlementRepository(EntitlementRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, employee_id: str, type_id: str, year: int) -> Optional[LeaveEntitlement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, leave_type, year, total_days, remaining_days
                FROM leave_entitlements
                WHERE employee_id=%s AND leave_type=%s AND year=%s
                """,
                (str(employee_id), type_id, int(year)),
            )
            r = fetchone(cur)
            return _to_entitlement(r) if r else None

    def list_for_year(self, *, employee_id: str, year: int) -> Sequence[LeaveEntitlement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, leave_type, year, total_days, remaining_days
                FROM leave_entitlements
                WHERE employee_id=%s AND year=%s
                """,
                (str(employee_id), int(year)),
            )
            return [_to_entitlement(r) for r in fetchall(cur)]

    def insert_if_missing(self, entitlement: LeaveEntitlement) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO leave_entitlements(employee_id, leave_type, year, total_days, remaining_days)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    entitlement.employee_id,
                    entitlement.type_id,
                    int(entitlement.year),
                    int(entitlement.total_days),
                    int(entitlement.remaining_days),
                ),
            )
            return cur.rowcount > 0

    def try_decrement(self, *, employee_id: str, type_id: str, year: int, days: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_entitlements
                SET remaining_days = remaining_days - %s
                WHERE employee_id=%s AND leave_type=%s AND year=%s AND remaining_days >= %s
                """,
                (int(days), str(employee_id), type_id, int(year), int(days)),
            )
            return cur.rowcount > 0

    def try_increment(self, *, employee_id: str, type_id: str, year: int, days: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_entitlements
                SET remaining_days = remaining_days + %s
                WHERE employee_id=%s AND leave_type=%s AND year=%s AND remaining_days + %s <= total_days
                """,
                (int(days), str(employee_id), type_id, int(year), int(days)),
            )
            return cur.rowcount > 0
