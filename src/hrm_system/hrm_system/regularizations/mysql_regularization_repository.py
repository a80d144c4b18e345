from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import AttendanceRegularization
from .repository import RegularizationRepository

_COLUMNS = """
    regularization_id, company_id, employee_id, attendance_id, work_date,
    original_clock_in, original_clock_out, requested_clock_in, requested_clock_out,
    reason, status, created_at, decided_by, decided_at, manager_comments
"""


def _row_to_regularization(r: dict) -> AttendanceRegularization:
    return AttendanceRegularization(
        regularization_id=int(r["regularization_id"]),
        company_id=int(r["company_id"]),
        employee_id=int(r["employee_id"]),
        attendance_id=int(r["attendance_id"]),
        work_date=r["work_date"],
        original_clock_in=normalize_mysql_time(r.get("original_clock_in")),
        original_clock_out=normalize_mysql_time(r.get("original_clock_out")),
        requested_clock_in=normalize_mysql_time(r.get("requested_clock_in")),
        requested_clock_out=normalize_mysql_time(r.get("requested_clock_out")),
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        decided_by=int(r["decided_by"]) if r.get("decided_by") else None,
        decided_at=r.get("decided_at"),
        manager_comments=r.get("manager_comments"),
    )


class MySQLRegularizationRepository(RegularizationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, regularization: AttendanceRegularization) -> int:
        g = regularization
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_regularizations(
                    company_id, employee_id, attendance_id, work_date,
                    original_clock_in, original_clock_out, requested_clock_in, requested_clock_out,
                    reason, status, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    g.company_id,
                    g.employee_id,
                    g.attendance_id,
                    g.work_date,
                    g.original_clock_in,
                    g.original_clock_out,
                    g.requested_clock_in,
                    g.requested_clock_out,
                    g.reason,
                    g.status.value,
                    g.created_at,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, company_id: int, regularization_id: int) -> Optional[AttendanceRegularization]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_regularizations WHERE company_id=%s AND regularization_id=%s",
                (company_id, regularization_id),
            )
            r = fetchone(cur)
            return _row_to_regularization(r) if r else None

    def get_for_attendance(self, company_id: int, attendance_id: int) -> Optional[AttendanceRegularization]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_regularizations
                WHERE company_id=%s AND attendance_id=%s
                ORDER BY regularization_id DESC
                LIMIT 1
                """,
                (company_id, attendance_id),
            )
            r = fetchone(cur)
            return _row_to_regularization(r) if r else None

    def list(
        self,
        company_id: int,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[AttendanceRegularization]:
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
                FROM attendance_regularizations
                WHERE {' AND '.join(where)}
                ORDER BY created_at DESC, regularization_id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_row_to_regularization(r) for r in fetchall(cur)]

    def update_request(self, regularization: AttendanceRegularization) -> bool:
        g = regularization
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_regularizations
                SET requested_clock_in=%s, requested_clock_out=%s, reason=%s
                WHERE company_id=%s AND regularization_id=%s AND status=%s
                """,
                (
                    g.requested_clock_in,
                    g.requested_clock_out,
                    g.reason,
                    g.company_id,
                    g.regularization_id,
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def delete(self, company_id: int, regularization_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance_regularizations WHERE company_id=%s AND regularization_id=%s AND status=%s",
                (company_id, regularization_id, RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def decide(
        self,
        company_id: int,
        regularization_id: int,
        *,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
        manager_comments: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_regularizations
                SET status=%s, decided_by=%s, decided_at=%s, manager_comments=%s
                WHERE company_id=%s AND regularization_id=%s AND status=%s
                """,
                (
                    status.value,
                    decided_by,
                    decided_at,
                    manager_comments,
                    company_id,
                    regularization_id,
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
