from __future__ import annotations

import mysql.connector

from ..core.exceptions import AlreadyProcessedError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import EmployeeRollover
from .repository import CarryForwardRepository


class MySQLCarryForwardRepository(CarryForwardRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def processed_employee_ids(self, *, org_id: str, from_year: int) -> set[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT employee_id FROM carry_forward_log WHERE org_id=%s AND from_year=%s",
                (str(org_id), int(from_year)),
            )
            return {str(r["employee_id"]) for r in fetchall(cur)}

    def is_processed(self, *, employee_id: str, from_year: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS hit FROM carry_forward_log WHERE employee_id=%s AND from_year=%s",
                (str(employee_id), int(from_year)),
            )
            return fetchone(cur) is not None

    def apply(self, rollover: EmployeeRollover) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            # Log first: the primary key rejects a second run before any balance moves.
            try:
                cur.execute(
                    """
                    INSERT INTO carry_forward_log(employee_id, org_id, from_year, carried_days, forfeited_days)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (
                        rollover.employee_id,
                        rollover.org_id,
                        int(rollover.from_year),
                        int(rollover.carried_days),
                        int(rollover.forfeited_days),
                    ),
                )
            except mysql.connector.IntegrityError:
                raise AlreadyProcessedError(
                    f"Carry-forward {rollover.from_year} already applied to {rollover.employee_id}"
                )
            for opening in rollover.openings:
                cur.execute(
                    """
                    INSERT INTO leave_entitlements(employee_id, leave_type, year, total_days, remaining_days)
                    VALUES(%s,%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE
                        total_days = total_days + %s,
                        remaining_days = remaining_days + %s
                    """,
                    (
                        rollover.employee_id,
                        opening.type_id,
                        int(rollover.to_year),
                        int(opening.total_days),
                        int(opening.total_days),
                        int(opening.carried_days),
                        int(opening.carried_days),
                    ),
                )

    def add_late_release(
        self,
        *,
        employee_id: str,
        type_id: str,
        from_year: int,
        carried_days: int,
        forfeited_days: int,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE carry_forward_log
                SET carried_days = carried_days + %s, forfeited_days = forfeited_days + %s
                WHERE employee_id=%s AND from_year=%s
                """,
                (int(carried_days), int(forfeited_days), str(employee_id), int(from_year)),
            )
            if cur.rowcount == 0:
                raise NotFoundError(f"No carry-forward {from_year} entry for {employee_id}")
            if carried_days:
                cur.execute(
                    """
                    UPDATE leave_entitlements
                    SET total_days = total_days + %s, remaining_days = remaining_days + %s
                    WHERE employee_id=%s AND leave_type=%s AND year=%s
                    """,
                    (int(carried_days), int(carried_days), str(employee_id), type_id, int(from_year) + 1),
                )
                if cur.rowcount == 0:
                    raise NotFoundError(f"No {type_id} entitlement for {employee_id} in {int(from_year) + 1}")
