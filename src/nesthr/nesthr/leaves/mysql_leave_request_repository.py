from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import LeaveRequest
from .repository import LeaveRequestRepository

_COLUMNS = """
    request_id, employee_id, leave_type, start_date, end_date, days, status,
    special_reason, created_at, decided_by, decided_at, rejection_reason, cancelled_by
"""


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=str(r["employee_id"]),
        type_id=r["leave_type"],
        start_date=r["start_date"],
        end_date=r["end_date"],
        days=int(r["days"]),
        status=LeaveStatus(r["status"]),
        created_at=r["created_at"],
        special_reason=r.get("special_reason"),
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
        rejection_reason=r.get("rejection_reason"),
        cancelled_by=r.get("cancelled_by"),
    )


class MySQLLeaveRequestRepository(LeaveRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, leave_type, start_date, end_date, days, status, special_reason)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    str(employee_id),
                    type_id,
                    start_date,
                    end_date,
                    int(days),
                    LeaveStatus.PENDING.value,
                    special_reason,
                ),
            )
            return int(cur.lastrowid)

    def get(self, *, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def decide(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        decided_by: str,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, decided_by=%s, decided_at=NOW(), rejection_reason=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    str(decided_by),
                    rejection_reason,
                    int(request_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def cancel(
        self,
        *,
        request_id: int,
        cancelled_by: str,
        from_statuses: Sequence[LeaveStatus],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE leave_requests
                SET status=%s, cancelled_by=%s
                WHERE request_id=%s AND status IN ({in_clause(from_statuses)})
                """,
                (
                    LeaveStatus.CANCELLED.value,
                    str(cancelled_by),
                    int(request_id),
                    *[s.value for s in from_statuses],
                ),
            )
            return cur.rowcount > 0

    def restore(self, request: LeaveRequest) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, decided_by=%s, decided_at=%s, rejection_reason=%s, cancelled_by=%s
                WHERE request_id=%s
                """,
                (
                    request.status.value,
                    request.decided_by,
                    request.decided_at,
                    request.rejection_reason,
                    request.cancelled_by,
                    int(request.request_id),
                ),
            )

    def list_for_employees(
        self,
        *,
        employee_ids: Sequence[str],
        status: Optional[LeaveStatus] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        if not employee_ids:
            return []

        clauses = [f"employee_id IN ({in_clause(employee_ids)})"]
        params: list[object] = [str(e) for e in employee_ids]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE {where}
                ORDER BY created_at DESC, request_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_request(r) for r in fetchall(cur)]
