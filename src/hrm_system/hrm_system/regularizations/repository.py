from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import AttendanceRegularization


class RegularizationRepository(Protocol):
    def create(self, regularization: AttendanceRegularization) -> int:
        raise NotImplementedError

    def get_by_id(self, company_id: int, regularization_id: int) -> Optional[AttendanceRegularization]:
        raise NotImplementedError

    def get_for_attendance(self, company_id: int, attendance_id: int) -> Optional[AttendanceRegularization]:
        raise NotImplementedError

    def list(
        self,
        company_id: int,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[AttendanceRegularization]:
        raise NotImplementedError

    def update_request(self, regularization: AttendanceRegularization) -> bool:
        """Rewrite requested times/reason of a pending request."""

        raise NotImplementedError

    def delete(self, company_id: int, regularization_id: int) -> bool:
        raise NotImplementedError

    def decide(
        self,
        company_id: int,
        regularization_id: int,
        *,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
        manager_comments: Optional[str] = None,
    ) -> bool:
        """Only pending requests can be decided; returns False otherwise."""

        raise NotImplementedError
