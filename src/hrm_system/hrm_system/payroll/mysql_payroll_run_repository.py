from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import PayrollFrequency, PayrollRunStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import PayrollRun
from .repository import PayrollRunRepository

_COLUMNS = """
    run_id, company_id, title, payroll_frequency, pay_period_start, pay_period_end, pay_date,
    status, total_gross_pay, total_deductions, total_net_pay, employee_count, notes, created_by
"""


def _row_to_run(r: dict) -> PayrollRun:
    return PayrollRun(
        run_id=int(r["run_id"]),
        company_id=int(r["company_id"]),
        title=r["title"],
        frequency=PayrollFrequency(r["payroll_frequency"]),
        period_start=r["pay_period_start"],
        period_end=r["pay_period_end"],
        pay_date=r["pay_date"],
        status=PayrollRunStatus(r["status"]),
        total_gross_pay=to_decimal(r.get("total_gross_pay")),
        total_deductions=to_decimal(r.get("total_deductions")),
        total_net_pay=to_decimal(r.get("total_net_pay")),
        employee_count=int(r.get("employee_count") or 0),
        notes=r.get("notes"),
        created_by=int(r["created_by"]) if r.get("created_by") else None,
    )


class MySQLPayrollRunRepository(PayrollRunRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, run: PayrollRun) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_runs(company_id, title, payroll_frequency, pay_period_start, pay_period_end,
                                         pay_date, status, notes, created_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    run.company_id,
                    run.title,
                    run.frequency.value,
                    run.period_start,
                    run.period_end,
                    run.pay_date,
                    run.status.value,
                    run.notes,
                    run.created_by,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, company_id: int, run_id: int) -> Optional[PayrollRun]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payroll_runs WHERE company_id=%s AND run_id=%s",
                (company_id, run_id),
            )
            r = fetchone(cur)
            return _row_to_run(r) if r else None

    def list(self, company_id: int, *, limit: int = 100) -> Sequence[PayrollRun]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_runs
                WHERE company_id=%s
                ORDER BY pay_period_start DESC, run_id DESC
                LIMIT %s
                """,
                (company_id, int(limit)),
            )
            return [_row_to_run(r) for r in fetchall(cur)]

    def find_by_period(self, company_id: int, period_start: date, period_end: date) -> Optional[PayrollRun]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_runs
                WHERE company_id=%s AND pay_period_start=%s AND pay_period_end=%s
                LIMIT 1
                """,
                (company_id, period_start, period_end),
            )
            r = fetchone(cur)
            return _row_to_run(r) if r else None

    def update(self, run: PayrollRun) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_runs
                SET title=%s, payroll_frequency=%s, pay_period_start=%s, pay_period_end=%s, pay_date=%s,
                    status=%s, total_gross_pay=%s, total_deductions=%s, total_net_pay=%s,
                    employee_count=%s, notes=%s
                WHERE company_id=%s AND run_id=%s
                """,
                (
                    run.title,
                    run.frequency.value,
                    run.period_start,
                    run.period_end,
                    run.pay_date,
                    run.status.value,
                    run.total_gross_pay,
                    run.total_deductions,
                    run.total_net_pay,
                    run.employee_count,
                    run.notes,
                    run.company_id,
                    run.run_id,
                ),
            )
            return cur.rowcount > 0

    def delete(self, company_id: int, run_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_runs WHERE company_id=%s AND run_id=%s", (company_id, run_id))
            return cur.rowcount > 0
