from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Holiday
from .repository import HolidayRepository


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_overlapping(self, company_id: int, start: date, end: date) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_id, company_id, name, start_date, end_date
                FROM holidays
                WHERE company_id=%s AND start_date<=%s AND end_date>=%s
                ORDER BY start_date
                """,
                (company_id, end, start),
            )
            return [
                Holiday(
                    holiday_id=int(r["holiday_id"]),
                    company_id=int(r["company_id"]),
                    name=r["name"],
                    start_date=r["start_date"],
                    end_date=r["end_date"],
                )
                for r in fetchall(cur)
            ]

    def create(self, *, company_id: int, name: str, start_date: date, end_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO holidays(company_id, name, start_date, end_date) VALUES(%s,%s,%s,%s)",
                (company_id, name, start_date, end_date),
            )
            return int(cur.lastrowid)
