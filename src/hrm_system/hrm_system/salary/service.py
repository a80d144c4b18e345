from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence

from ..common.money import to_money
from ..common.validators import require_non_empty
from ..core.enums import CalculationType, ComponentType, RecordStatus
from ..core.exceptions import ConflictError, EmployeeNotFoundError, NotFoundError, ValidationError
from ..core.tenant import TenantContext
from ..employees.repository import EmployeeRepository
from .model import (
    Calculation,
    EmployeeSalary,
    FixedAmount,
    PercentOfBasic,
    SalaryBreakdown,
    SalaryComponent,
    calculate_breakdown,
)
from .repository import EmployeeSalaryRepository, SalaryComponentRepository

logger = logging.getLogger(__name__)


def _decimal(value, field_name: str) -> Decimal:
    try:
        result = Decimal(str(value if value is not None else "0"))
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number")
    if result < 0:
        raise ValidationError(f"{field_name} must be zero or greater")
    return result


def build_calculation(calculation_type: CalculationType, *, amount=None, percentage=None) -> Calculation:
    if calculation_type == CalculationType.PERCENTAGE:
        pct = _decimal(percentage, "Percentage")
        if pct > 100:
            raise ValidationError("Percentage must be between 0 and 100")
        return PercentOfBasic(percentage=pct)
    return FixedAmount(amount=to_money(_decimal(amount, "Amount")))


@dataclass(frozen=True)
class ComponentInput:
    name: str
    component_type: ComponentType
    calculation_type: CalculationType
    amount: Optional[Decimal] = None
    percentage: Optional[Decimal] = None
    description: Optional[str] = None


class SalaryComponentService:
    def __init__(self, components: SalaryComponentRepository):
        self._components = components

    def list(self, tenant: TenantContext) -> Sequence[SalaryComponent]:
        return self._components.list_for_company(tenant.company_id)

    def get(self, tenant: TenantContext, component_id: int) -> SalaryComponent:
        component = self._components.get_by_id(tenant.company_id, int(component_id))
        if not component:
            raise NotFoundError("Salary component not found")
        return component

    def _check_name(self, tenant: TenantContext, name: str, *, exclude_id: int = 0) -> str:
        name = require_non_empty(name, "Component name")
        existing = self._components.get_by_name(tenant.company_id, name)
        if existing and existing.component_id != exclude_id:
            raise ConflictError("Salary component with this name already exists")
        return name

    def create(self, tenant: TenantContext, data: ComponentInput) -> SalaryComponent:
        component = SalaryComponent(
            component_id=0,
            company_id=tenant.company_id,
            name=self._check_name(tenant, data.name),
            component_type=data.component_type,
            calculation=build_calculation(data.calculation_type, amount=data.amount, percentage=data.percentage),
            description=(data.description or "").strip() or None,
        )
        component_id = self._components.save(component)
        logger.info("Salary component %s created for company %s", component_id, tenant.company_id)
        return replace(component, component_id=component_id)

    def update(self, tenant: TenantContext, component_id: int, data: ComponentInput) -> SalaryComponent:
        current = self.get(tenant, component_id)
        updated = replace(
            current,
            name=self._check_name(tenant, data.name, exclude_id=current.component_id),
            component_type=data.component_type,
            calculation=build_calculation(data.calculation_type, amount=data.amount, percentage=data.percentage),
            description=(data.description or "").strip() or None,
        )
        self._components.save(updated)
        return updated

    def toggle_status(self, tenant: TenantContext, component_id: int) -> SalaryComponent:
        current = self.get(tenant, component_id)
        status = RecordStatus.INACTIVE if current.is_active else RecordStatus.ACTIVE
        updated = replace(current, status=status)
        self._components.save(updated)
        return updated


class EmployeeSalaryService:
    """One active salary configuration per employee."""

    def __init__(
        self,
        salaries: EmployeeSalaryRepository,
        components: SalaryComponentRepository,
        employees: EmployeeRepository,
    ):
        self._salaries = salaries
        self._components = components
        self._employees = employees

    def _require_employee(self, tenant: TenantContext, employee_id: int):
        employee = self._employees.get_by_id(tenant.company_id, int(employee_id))
        if not employee:
            raise EmployeeNotFoundError("Employee profile not found")
        return employee

    def list(self, tenant: TenantContext, *, employee_id: Optional[int] = None) -> Sequence[EmployeeSalary]:
        return self._salaries.list(tenant.company_id, employee_id=employee_id)

    def get(self, tenant: TenantContext, salary_id: int) -> EmployeeSalary:
        salary = self._salaries.get_by_id(tenant.company_id, int(salary_id))
        if not salary:
            raise NotFoundError("Employee salary not found")
        return salary

    def get_or_create_active(self, tenant: TenantContext, employee_id: int) -> EmployeeSalary:
        """Active salary; a placeholder from the profile's base salary is created when missing."""
        employee = self._require_employee(tenant, employee_id)
        salary = self._salaries.get_active(tenant.company_id, employee.employee_id)
        if salary:
            return salary

        placeholder = EmployeeSalary(
            salary_id=0,
            company_id=tenant.company_id,
            employee_id=employee.employee_id,
            basic_salary=to_money(employee.base_salary or 0),
        )
        salary_id = self._salaries.save(placeholder)
        logger.info("Placeholder salary %s created for employee=%s", salary_id, employee.employee_id)
        return replace(placeholder, salary_id=salary_id)

    def _check_components(self, tenant: TenantContext, component_ids) -> tuple[int, ...]:
        ids = tuple(sorted({int(i) for i in component_ids or ()}))
        found = {c.component_id for c in self._components.get_many(tenant.company_id, ids)}
        missing = [i for i in ids if i not in found]
        if missing:
            raise ValidationError(f"Unknown salary components: {', '.join(str(i) for i in missing)}")
        return ids

    def assign(
        self,
        tenant: TenantContext,
        employee_id: int,
        *,
        basic_salary,
        component_ids=(),
        notes: Optional[str] = None,
    ) -> EmployeeSalary:
        employee = self._require_employee(tenant, employee_id)
        salary = EmployeeSalary(
            salary_id=0,
            company_id=tenant.company_id,
            employee_id=employee.employee_id,
            basic_salary=to_money(_decimal(basic_salary, "Basic salary")),
            component_ids=self._check_components(tenant, component_ids),
            notes=(notes or "").strip() or None,
        )
        salary_id = self._salaries.save(salary)
        self._salaries.deactivate_others(tenant.company_id, employee.employee_id, salary_id)
        logger.info("Salary %s assigned to employee=%s", salary_id, employee.employee_id)
        return replace(salary, salary_id=salary_id)

    def toggle_status(self, tenant: TenantContext, salary_id: int) -> EmployeeSalary:
        current = self.get(tenant, salary_id)
        updated = replace(current, is_active=not current.is_active)
        self._salaries.save(updated)
        if updated.is_active:
            self._salaries.deactivate_others(tenant.company_id, updated.employee_id, updated.salary_id)
        return updated

    def components_for(self, tenant: TenantContext, salary: EmployeeSalary) -> Sequence[SalaryComponent]:
        return self._components.get_many(tenant.company_id, salary.component_ids)

    def breakdown(self, tenant: TenantContext, employee_id: int) -> SalaryBreakdown:
        salary = self.get_or_create_active(tenant, employee_id)
        return calculate_breakdown(salary.basic_salary, self.components_for(tenant, salary))
