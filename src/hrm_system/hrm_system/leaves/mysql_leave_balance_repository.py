from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveBalance
from .repository import LeaveBalanceRepository

_COLUMNS = """
    balance_id, company_id, employee_id, leave_type_id, year,
    allocated_days, carried_forward, manual_adjustment, used_days
"""


def _row_to_balance(r: dict) -> LeaveBalance:
    return LeaveBalance(
        balance_id=int(r["balance_id"]),
        company_id=int(r["company_id"]),
        employee_id=int(r["employee_id"]),
        leave_type_id=int(r["leave_type_id"]),
        year=int(r["year"]),
        allocated_days=float(r["allocated_days"]),
        carried_forward=float(r.get("carried_forward") or 0),
        manual_adjustment=float(r.get("manual_adjustment") or 0),
        used_days=float(r.get("used_days") or 0),
    )


class MySQLLeaveBalanceRepository(LeaveBalanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, company_id: int, employee_id: int, leave_type_id: int, year: int) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM leave_balances
                WHERE company_id=%s AND employee_id=%s AND leave_type_id=%s AND year=%s
                """,
                (company_id, employee_id, leave_type_id, year),
            )
            r = fetchone(cur)
            return _row_to_balance(r) if r else None

    def list_for_employee(
        self, company_id: int, employee_id: int, *, year: Optional[int] = None
    ) -> Sequence[LeaveBalance]:
        sql = f"SELECT {_COLUMNS} FROM leave_balances WHERE company_id=%s AND employee_id=%s"
        params: list = [company_id, employee_id]
        if year is not None:
            sql += " AND year=%s"
            params.append(year)
        sql += " ORDER BY year DESC, leave_type_id"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_balance(r) for r in fetchall(cur)]

    def save(self, balance: LeaveBalance) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            if balance.balance_id:
                cur.execute(
                    """
                    UPDATE leave_balances
                    SET allocated_days=%s, carried_forward=%s, manual_adjustment=%s
                    WHERE company_id=%s AND balance_id=%s
                    """,
                    (
                        balance.allocated_days,
                        balance.carried_forward,
                        balance.manual_adjustment,
                        balance.company_id,
                        balance.balance_id,
                    ),
                )
                return balance.balance_id
            cur.execute(
                """
                INSERT INTO leave_balances(company_id, employee_id, leave_type_id, year,
                                           allocated_days, carried_forward, manual_adjustment, used_days)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    balance.company_id,
                    balance.employee_id,
                    balance.leave_type_id,
                    balance.year,
                    balance.allocated_days,
                    balance.carried_forward,
                    balance.manual_adjustment,
                    balance.used_days,
                ),
            )
            return int(cur.lastrowid)

    def add_used(self, company_id: int, balance_id: int, days: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE leave_balances SET used_days = used_days + %s WHERE company_id=%s AND balance_id=%s",
                (days, company_id, balance_id),
            )
            return cur.rowcount > 0
