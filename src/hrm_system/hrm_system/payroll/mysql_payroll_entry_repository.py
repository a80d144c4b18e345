from __future__ import annotations

import json
from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, load_json, to_decimal
from ..salary.model import BreakdownLine
from .model import AttendanceSummary, PayrollEntry
from .repository import PayrollEntryRepository

_COLUMNS = """
    entry_id, run_id, company_id, employee_id, basic_salary, per_day_salary,
    working_days, present_days, half_days, absent_days, holiday_days, paid_leave_days, unpaid_leave_days,
    overtime_hours, overtime_amount, unpaid_leave_deduction,
    earnings_breakdown, deductions_breakdown, gross_pay, total_deductions, net_pay
"""


def _dump_lines(lines: Iterable[BreakdownLine]) -> str:
    return json.dumps([line.to_dict() for line in lines])


def _load_lines(value) -> tuple[BreakdownLine, ...]:
    return tuple(
        BreakdownLine(name=d["name"], amount=to_decimal(d["amount"]), component_id=d.get("component_id"))
        for d in load_json(value, [])
    )


def _row_to_entry(r: dict) -> PayrollEntry:
    return PayrollEntry(
        entry_id=int(r["entry_id"]),
        run_id=int(r["run_id"]),
        company_id=int(r["company_id"]),
        employee_id=int(r["employee_id"]),
        basic_salary=to_decimal(r["basic_salary"]),
        summary=AttendanceSummary(
            working_days=int(r["working_days"]),
            present_days=int(r["present_days"]),
            half_days=int(r["half_days"]),
            absent_days=int(r["absent_days"]),
            holiday_days=int(r["holiday_days"]),
            paid_leave_days=int(r["paid_leave_days"]),
            unpaid_leave_days=int(r["unpaid_leave_days"]),
            overtime_hours=to_decimal(r["overtime_hours"]),
        ),
        per_day_salary=to_decimal(r["per_day_salary"]),
        overtime_amount=to_decimal(r["overtime_amount"]),
        unpaid_leave_deduction=to_decimal(r["unpaid_leave_deduction"]),
        earnings=_load_lines(r.get("earnings_breakdown")),
        deductions=_load_lines(r.get("deductions_breakdown")),
        gross_pay=to_decimal(r["gross_pay"]),
        total_deductions=to_decimal(r["total_deductions"]),
        net_pay=to_decimal(r["net_pay"]),
    )


class MySQLPayrollEntryRepository(PayrollEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add_many(self, entries: Iterable[PayrollEntry]) -> None:
        rows = [
            (
                e.run_id,
                e.company_id,
                e.employee_id,
                e.basic_salary,
                e.per_day_salary,
                e.summary.working_days,
                e.summary.present_days,
                e.summary.half_days,
                e.summary.absent_days,
                e.summary.holiday_days,
                e.summary.paid_leave_days,
                e.summary.unpaid_leave_days,
                e.summary.overtime_hours,
                e.overtime_amount,
                e.unpaid_leave_deduction,
                _dump_lines(e.earnings),
                _dump_lines(e.deductions),
                e.gross_pay,
                e.total_deductions,
                e.net_pay,
            )
            for e in entries
        ]
        if not rows:
            return
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO payroll_entries(
                    run_id, company_id, employee_id, basic_salary, per_day_salary,
                    working_days, present_days, half_days, absent_days, holiday_days,
                    paid_leave_days, unpaid_leave_days, overtime_hours, overtime_amount, unpaid_leave_deduction,
                    earnings_breakdown, deductions_breakdown, gross_pay, total_deductions, net_pay
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                rows,
            )

    def list_for_run(self, company_id: int, run_id: int) -> Sequence[PayrollEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payroll_entries WHERE company_id=%s AND run_id=%s ORDER BY employee_id",
                (company_id, run_id),
            )
            return [_row_to_entry(r) for r in fetchall(cur)]

    def get_for_employee(self, company_id: int, run_id: int, employee_id: int) -> Optional[PayrollEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payroll_entries WHERE company_id=%s AND run_id=%s AND employee_id=%s",
                (company_id, run_id, employee_id),
            )
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def delete_for_run(self, company_id: int, run_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_entries WHERE company_id=%s AND run_id=%s", (company_id, run_id))
