from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "employee_id, company_id, full_name, shift_id, attendance_policy_id, base_salary, is_active"


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        company_id=int(r["company_id"]),
        full_name=r["full_name"],
        shift_id=int(r["shift_id"]) if r.get("shift_id") else None,
        attendance_policy_id=int(r["attendance_policy_id"]) if r.get("attendance_policy_id") else None,
        base_salary=Decimal(str(r["base_salary"])) if r.get("base_salary") is not None else None,
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, company_id: int, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE company_id=%s AND employee_id=%s",
                (company_id, employee_id),
            )
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def list_active(self, company_id: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                WHERE company_id=%s AND is_active=1
                ORDER BY employee_id
                """,
                (company_id,),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]
