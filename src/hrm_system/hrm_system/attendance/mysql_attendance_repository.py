from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, company_id, employee_id, work_date, clock_in, clock_out, status,
    shift_id, attendance_policy_id, break_hours, is_weekend, is_holiday,
    worked_hours, overtime_hours, is_late, is_early_departure, notes, created_by
"""


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        company_id=int(r["company_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        clock_in=normalize_mysql_time(r.get("clock_in")),
        clock_out=normalize_mysql_time(r.get("clock_out")),
        status=AttendanceStatus(r["status"]),
        shift_id=int(r["shift_id"]) if r.get("shift_id") else None,
        attendance_policy_id=int(r["attendance_policy_id"]) if r.get("attendance_policy_id") else None,
        break_hours=float(r.get("break_hours") or 0),
        is_weekend=bool(r.get("is_weekend")),
        is_holiday=bool(r.get("is_holiday")),
        worked_hours=float(r.get("worked_hours") or 0),
        overtime_hours=float(r.get("overtime_hours") or 0),
        is_late=bool(r.get("is_late")),
        is_early_departure=bool(r.get("is_early_departure")),
        notes=r.get("notes"),
        created_by=int(r["created_by"]) if r.get("created_by") else None,
    )


def _mutable_params(record: AttendanceRecord) -> tuple:
    return (
        record.clock_in,
        record.clock_out,
        record.status.value,
        record.shift_id,
        record.attendance_policy_id,
        record.break_hours,
        int(record.is_weekend),
        int(record.is_holiday),
        record.worked_hours,
        record.overtime_hours,
        int(record.is_late),
        int(record.is_early_departure),
        record.notes,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, company_id: int, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE company_id=%s AND attendance_id=%s",
                (company_id, attendance_id),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_for_employee_and_date(self, company_id: int, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE company_id=%s AND employee_id=%s AND work_date=%s
                """,
                (company_id, employee_id, work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_for_employee_between(
        self, company_id: int, employee_id: int, start: date, end: date
    ) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE company_id=%s AND employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date
                """,
                (company_id, employee_id, start, end),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def search(
        self,
        company_id: int,
        *,
        employee_id: Optional[int] = None,
        status: Optional[AttendanceStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[AttendanceRecord]:
        where = ["company_id=%s"]
        params: list = [company_id]
        if employee_id:
            where.append("employee_id=%s")
            params.append(int(employee_id))
        if status:
            where.append("status=%s")
            params.append(status.value)
        if date_from:
            where.append("work_date>=%s")
            params.append(date_from)
        if date_to:
            where.append("work_date<=%s")
            params.append(date_to)
        params.extend([int(limit), int(offset)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {' AND '.join(where)}
                ORDER BY work_date DESC, attendance_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def add(self, record: AttendanceRecord) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    clock_in, clock_out, status, shift_id, attendance_policy_id, break_hours,
                    is_weekend, is_holiday, worked_hours, overtime_hours, is_late, is_early_departure,
                    notes, company_id, employee_id, work_date, created_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                _mutable_params(record)
                + (record.company_id, record.employee_id, record.work_date, record.created_by),
            )
            return int(cur.lastrowid)

    def update(self, record: AttendanceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET clock_in=%s, clock_out=%s, status=%s, shift_id=%s, attendance_policy_id=%s,
                    break_hours=%s, is_weekend=%s, is_holiday=%s, worked_hours=%s, overtime_hours=%s,
                    is_late=%s, is_early_departure=%s, notes=%s
                WHERE company_id=%s AND attendance_id=%s
                """,
                _mutable_params(record) + (record.company_id, record.attendance_id),
            )
            return cur.rowcount > 0
