from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveType
from .repository import LeaveTypeRepository


def _row_to_leave_type(r: dict) -> LeaveType:
    return LeaveType(
        leave_type_id=int(r["leave_type_id"]),
        company_id=int(r["company_id"]),
        name=r["name"],
        is_paid=bool(r.get("is_paid", 1)),
    )


class MySQLLeaveTypeRepository(LeaveTypeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, company_id: int, leave_type_id: int) -> Optional[LeaveType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT leave_type_id, company_id, name, is_paid FROM leave_types WHERE company_id=%s AND leave_type_id=%s",
                (company_id, leave_type_id),
            )
            r = fetchone(cur)
            return _row_to_leave_type(r) if r else None

    def list_for_company(self, company_id: int) -> Sequence[LeaveType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT leave_type_id, company_id, name, is_paid FROM leave_types WHERE company_id=%s ORDER BY name",
                (company_id,),
            )
            return [_row_to_leave_type(r) for r in fetchall(cur)]
