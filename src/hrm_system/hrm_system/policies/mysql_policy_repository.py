from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import RecordStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendancePolicy
from .repository import AttendancePolicyRepository

_COLUMNS = """
    policy_id, company_id, policy_name, late_grace_minutes, early_departure_grace_minutes,
    half_day_threshold_hours, overtime_threshold_hours, status
"""


def _row_to_policy(r: dict) -> AttendancePolicy:
    return AttendancePolicy(
        policy_id=int(r["policy_id"]),
        company_id=int(r["company_id"]),
        policy_name=r["policy_name"],
        late_grace_minutes=int(r.get("late_grace_minutes") or 0),
        early_departure_grace_minutes=int(r.get("early_departure_grace_minutes") or 0),
        half_day_threshold_hours=float(r["half_day_threshold_hours"]),
        overtime_threshold_hours=float(r["overtime_threshold_hours"]),
        status=RecordStatus(r["status"]),
    )


class MySQLAttendancePolicyRepository(AttendancePolicyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_company(self, company_id: int) -> Sequence[AttendancePolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_policies WHERE company_id=%s ORDER BY policy_id",
                (company_id,),
            )
            return [_row_to_policy(r) for r in fetchall(cur)]

    def get_by_id(self, company_id: int, policy_id: int) -> Optional[AttendancePolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_policies WHERE company_id=%s AND policy_id=%s",
                (company_id, policy_id),
            )
            r = fetchone(cur)
            return _row_to_policy(r) if r else None

    def get_by_name(self, company_id: int, policy_name: str) -> Optional[AttendancePolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_policies WHERE company_id=%s AND policy_name=%s",
                (company_id, policy_name),
            )
            r = fetchone(cur)
            return _row_to_policy(r) if r else None

    def save(self, policy: AttendancePolicy) -> int:
        params = (
            policy.policy_name,
            int(policy.late_grace_minutes),
            int(policy.early_departure_grace_minutes),
            policy.half_day_threshold_hours,
            policy.overtime_threshold_hours,
            policy.status.value,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            if policy.policy_id:
                cur.execute(
                    """
                    UPDATE attendance_policies
                    SET policy_name=%s, late_grace_minutes=%s, early_departure_grace_minutes=%s,
                        half_day_threshold_hours=%s, overtime_threshold_hours=%s, status=%s
                    WHERE company_id=%s AND policy_id=%s
                    """,
                    params + (policy.company_id, policy.policy_id),
                )
                return policy.policy_id
            cur.execute(
                """
                INSERT INTO attendance_policies(policy_name, late_grace_minutes, early_departure_grace_minutes,
                                                half_day_threshold_hours, overtime_threshold_hours, status, company_id)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                params + (policy.company_id,),
            )
            return int(cur.lastrowid)
