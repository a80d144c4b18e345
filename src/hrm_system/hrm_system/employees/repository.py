from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def get_by_id(self, company_id: int, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_active(self, company_id: int) -> Sequence[Employee]:
        raise NotImplementedError
