from __future__ import annotations

import json
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, load_json, to_decimal
from .model import EmployeeSalary
from .repository import EmployeeSalaryRepository

_COLUMNS = "salary_id, company_id, employee_id, basic_salary, components, is_active, notes"


def _row_to_salary(r: dict) -> EmployeeSalary:
    return EmployeeSalary(
        salary_id=int(r["salary_id"]),
        company_id=int(r["company_id"]),
        employee_id=int(r["employee_id"]),
        basic_salary=to_decimal(r.get("basic_salary")),
        component_ids=tuple(int(i) for i in load_json(r.get("components"), [])),
        is_active=bool(r.get("is_active")),
        notes=r.get("notes"),
    )


class MySQLEmployeeSalaryRepository(EmployeeSalaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, company_id: int, salary_id: int) -> Optional[EmployeeSalary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employee_salaries WHERE company_id=%s AND salary_id=%s",
                (company_id, salary_id),
            )
            r = fetchone(cur)
            return _row_to_salary(r) if r else None

    def get_active(self, company_id: int, employee_id: int) -> Optional[EmployeeSalary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employee_salaries
                WHERE company_id=%s AND employee_id=%s AND is_active=1
                ORDER BY salary_id DESC
                LIMIT 1
                """,
                (company_id, employee_id),
            )
            r = fetchone(cur)
            return _row_to_salary(r) if r else None

    def list(self, company_id: int, *, employee_id: Optional[int] = None) -> Sequence[EmployeeSalary]:
        where = ["company_id=%s"]
        params: list = [company_id]
        if employee_id:
            where.append("employee_id=%s")
            params.append(int(employee_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employee_salaries WHERE {' AND '.join(where)} ORDER BY salary_id DESC",
                tuple(params),
            )
            return [_row_to_salary(r) for r in fetchall(cur)]

    def save(self, salary: EmployeeSalary) -> int:
        s = salary
        params = (s.basic_salary, json.dumps(list(s.component_ids)), int(s.is_active), s.notes)
        with db_cursor(self._conn_factory) as (_, cur):
            if s.salary_id:
                cur.execute(
                    """
                    UPDATE employee_salaries
                    SET basic_salary=%s, components=%s, is_active=%s, notes=%s
                    WHERE company_id=%s AND salary_id=%s
                    """,
                    params + (s.company_id, s.salary_id),
                )
                return s.salary_id
            cur.execute(
                """
                INSERT INTO employee_salaries(basic_salary, components, is_active, notes, company_id, employee_id)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                params + (s.company_id, s.employee_id),
            )
            return int(cur.lastrowid)

    def deactivate_others(self, company_id: int, employee_id: int, keep_salary_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employee_salaries SET is_active=0
                WHERE company_id=%s AND employee_id=%s AND salary_id<>%s
                """,
                (company_id, employee_id, keep_salary_id),
            )
