from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveApplication
from .repository import LeaveRepository

_COLUMNS = """
    leave_id, company_id, employee_id, leave_type_id, start_date, end_date, reason,
    status, created_at, decided_by, decided_at, manager_comments
"""


def _row_to_leave(r: dict) -> LeaveApplication:
    return LeaveApplication(
        leave_id=int(r["leave_id"]),
        company_id=int(r["company_id"]),
        employee_id=int(r["employee_id"]),
        leave_type_id=int(r["leave_type_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        decided_by=int(r["decided_by"]) if r.get("decided_by") else None,
        decided_at=r.get("decided_at"),
        manager_comments=r.get("manager_comments"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        company_id: int,
        employee_id: int,
        leave_type_id: int,
        start_date: date,
        end_date: date,
        reason: str,
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_applications(company_id, employee_id, leave_type_id, start_date, end_date,
                                               reason, status, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    company_id,
                    employee_id,
                    leave_type_id,
                    start_date,
                    end_date,
                    reason,
                    RequestStatus.PENDING.value,
                    created_at,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, company_id: int, leave_id: int) -> Optional[LeaveApplication]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_applications WHERE company_id=%s AND leave_id=%s",
                (company_id, leave_id),
            )
            r = fetchone(cur)
            return _row_to_leave(r) if r else None

    def list(
        self,
        company_id: int,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[LeaveApplication]:
        where = ["company_id=%s"]
        params: list = [company_id]
        if status:
            where.append("status=%s")
            params.append(status.value)
        if employee_id:
            where.append("employee_id=%s")
            params.append(int(employee_id))
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_applications
                WHERE {' AND '.join(where)}
                ORDER BY created_at DESC, leave_id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

    def decide(
        self,
        company_id: int,
        leave_id: int,
        *,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
        manager_comments: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_applications
                SET status=%s, decided_by=%s, decided_at=%s, manager_comments=%s
                WHERE company_id=%s AND leave_id=%s AND status=%s
                """,
                (
                    status.value,
                    decided_by,
                    decided_at,
                    manager_comments,
                    company_id,
                    leave_id,
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def find_approved_covering(self, company_id: int, employee_id: int, day: date) -> Optional[LeaveApplication]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_applications
                WHERE company_id=%s AND employee_id=%s AND status=%s
                  AND start_date<=%s AND end_date>=%s
                ORDER BY leave_id
                LIMIT 1
                """,
                (company_id, employee_id, RequestStatus.APPROVED.value, day, day),
            )
            r = fetchone(cur)
            return _row_to_leave(r) if r else None

    def list_approved_overlapping(
        self, company_id: int, employee_id: int, start: date, end: date
    ) -> Sequence[LeaveApplication]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_applications
                WHERE company_id=%s AND employee_id=%s AND status=%s
                  AND start_date<=%s AND end_date>=%s
                ORDER BY start_date
                """,
                (company_id, employee_id, RequestStatus.APPROVED.value, end, start),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]
