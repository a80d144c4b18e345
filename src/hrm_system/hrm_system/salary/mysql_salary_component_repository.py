from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import CalculationType, ComponentType, RecordStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, to_decimal
from .model import FixedAmount, PercentOfBasic, SalaryComponent
from .repository import SalaryComponentRepository

_COLUMNS = """
    component_id, company_id, name, description, component_type,
    calculation_type, amount, percentage, status
"""


def _row_to_component(r: dict) -> SalaryComponent:
    if CalculationType(r["calculation_type"]) == CalculationType.PERCENTAGE:
        calculation = PercentOfBasic(percentage=to_decimal(r.get("percentage")))
    else:
        calculation = FixedAmount(amount=to_decimal(r.get("amount")))
    return SalaryComponent(
        component_id=int(r["component_id"]),
        company_id=int(r["company_id"]),
        name=r["name"],
        component_type=ComponentType(r["component_type"]),
        calculation=calculation,
        status=RecordStatus(r["status"]),
        description=r.get("description"),
    )


class MySQLSalaryComponentRepository(SalaryComponentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_company(self, company_id: int) -> Sequence[SalaryComponent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salary_components WHERE company_id=%s ORDER BY component_id",
                (company_id,),
            )
            return [_row_to_component(r) for r in fetchall(cur)]

    def get_by_id(self, company_id: int, component_id: int) -> Optional[SalaryComponent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salary_components WHERE company_id=%s AND component_id=%s",
                (company_id, component_id),
            )
            r = fetchone(cur)
            return _row_to_component(r) if r else None

    def get_by_name(self, company_id: int, name: str) -> Optional[SalaryComponent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salary_components WHERE company_id=%s AND name=%s",
                (company_id, name),
            )
            r = fetchone(cur)
            return _row_to_component(r) if r else None

    def get_many(self, company_id: int, component_ids: Iterable[int]) -> Sequence[SalaryComponent]:
        ids = sorted({int(i) for i in component_ids})
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM salary_components
                WHERE company_id=%s AND component_id IN ({in_clause(ids)})
                ORDER BY component_id
                """,
                (company_id, *ids),
            )
            return [_row_to_component(r) for r in fetchall(cur)]

    def save(self, component: SalaryComponent) -> int:
        c = component
        amount = c.calculation.amount if isinstance(c.calculation, FixedAmount) else None
        percentage = c.calculation.percentage if isinstance(c.calculation, PercentOfBasic) else None
        params = (
            c.name,
            c.description,
            c.component_type.value,
            c.calculation_type.value,
            amount,
            percentage,
            c.status.value,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            if c.component_id:
                cur.execute(
                    """
                    UPDATE salary_components
                    SET name=%s, description=%s, component_type=%s, calculation_type=%s,
                        amount=%s, percentage=%s, status=%s
                    WHERE company_id=%s AND component_id=%s
                    """,
                    params + (c.company_id, c.component_id),
                )
                return c.component_id
            cur.execute(
                """
                INSERT INTO salary_components(name, description, component_type, calculation_type,
                                              amount, percentage, status, company_id)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                params + (c.company_id,),
            )
            return int(cur.lastrowid)
