from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendancePolicy


class AttendancePolicyRepository(Protocol):
    def list_for_company(self, company_id: int) -> Sequence[AttendancePolicy]:
        raise NotImplementedError

    def get_by_id(self, company_id: int, policy_id: int) -> Optional[AttendancePolicy]:
        raise NotImplementedError

    def get_by_name(self, company_id: int, policy_name: str) -> Optional[AttendancePolicy]:
        raise NotImplementedError

    def save(self, policy: AttendancePolicy) -> int:
        raise NotImplementedError
