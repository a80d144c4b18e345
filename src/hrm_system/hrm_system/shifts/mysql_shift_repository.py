from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import RecordStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Shift
from .repository import ShiftRepository

_COLUMNS = """
    shift_id, company_id, shift_name, start_time, end_time, break_minutes,
    break_start_time, break_end_time, is_night_shift, status
"""


def _row_to_shift(r: dict) -> Shift:
    return Shift(
        shift_id=int(r["shift_id"]),
        company_id=int(r["company_id"]),
        shift_name=r["shift_name"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        break_minutes=int(r.get("break_minutes") or 0),
        break_start_time=normalize_mysql_time(r.get("break_start_time")),
        break_end_time=normalize_mysql_time(r.get("break_end_time")),
        is_night_shift=bool(r.get("is_night_shift")),
        status=RecordStatus(r["status"]),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_company(self, company_id: int) -> Sequence[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM shifts WHERE company_id=%s ORDER BY shift_id",
                (company_id,),
            )
            return [_row_to_shift(r) for r in fetchall(cur)]

    def get_by_id(self, company_id: int, shift_id: int) -> Optional[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM shifts WHERE company_id=%s AND shift_id=%s",
                (company_id, shift_id),
            )
            r = fetchone(cur)
            return _row_to_shift(r) if r else None

    def get_by_name(self, company_id: int, shift_name: str) -> Optional[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM shifts WHERE company_id=%s AND shift_name=%s",
                (company_id, shift_name),
            )
            r = fetchone(cur)
            return _row_to_shift(r) if r else None

    def save(self, shift: Shift) -> int:
        params = (
            shift.shift_name,
            shift.start_time,
            shift.end_time,
            int(shift.break_minutes),
            shift.break_start_time,
            shift.break_end_time,
            int(shift.is_night_shift),
            shift.status.value,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            if shift.shift_id:
                cur.execute(
                    """
                    UPDATE shifts
                    SET shift_name=%s, start_time=%s, end_time=%s, break_minutes=%s,
                        break_start_time=%s, break_end_time=%s, is_night_shift=%s, status=%s
                    WHERE company_id=%s AND shift_id=%s
                    """,
                    params + (shift.company_id, shift.shift_id),
                )
                return shift.shift_id
            cur.execute(
                """
                INSERT INTO shifts(shift_name, start_time, end_time, break_minutes,
                                   break_start_time, break_end_time, is_night_shift, status, company_id)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                params + (shift.company_id,),
            )
            return int(cur.lastrowid)
