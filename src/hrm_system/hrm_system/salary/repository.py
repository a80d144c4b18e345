from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import EmployeeSalary, SalaryComponent


class SalaryComponentRepository(Protocol):
    def list_for_company(self, company_id: int) -> Sequence[SalaryComponent]:
        raise NotImplementedError

    def get_by_id(self, company_id: int, component_id: int) -> Optional[SalaryComponent]:
        raise NotImplementedError

    def get_by_name(self, company_id: int, name: str) -> Optional[SalaryComponent]:
        raise NotImplementedError

    def get_many(self, company_id: int, component_ids: Iterable[int]) -> Sequence[SalaryComponent]:
        """Components of the tenant among component_ids, in id order."""

        raise NotImplementedError

    def save(self, component: SalaryComponent) -> int:
        """Insert when component_id == 0, else update; returns the id."""

        raise NotImplementedError


class EmployeeSalaryRepository(Protocol):
    def get_by_id(self, company_id: int, salary_id: int) -> Optional[EmployeeSalary]:
        raise NotImplementedError

    def get_active(self, company_id: int, employee_id: int) -> Optional[EmployeeSalary]:
        raise NotImplementedError

    def list(self, company_id: int, *, employee_id: Optional[int] = None) -> Sequence[EmployeeSalary]:
        raise NotImplementedError

    def save(self, salary: EmployeeSalary) -> int:
        raise NotImplementedError

    def deactivate_others(self, company_id: int, employee_id: int, keep_salary_id: int) -> None:
        raise NotImplementedError
