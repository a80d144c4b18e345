from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Union

from ..common.money import ZERO, to_money
from ..core.enums import CalculationType, ComponentType, RecordStatus


@dataclass(frozen=True)
class FixedAmount:
    amount: Decimal

    def amount_for(self, basic_salary: Decimal) -> Decimal:
        return to_money(self.amount)


@dataclass(frozen=True)
class PercentOfBasic:
    percentage: Decimal

    def amount_for(self, basic_salary: Decimal) -> Decimal:
        return to_money(Decimal(basic_salary) * Decimal(self.percentage) / Decimal(100))


Calculation = Union[FixedAmount, PercentOfBasic]


def calculation_type_of(calculation: Calculation) -> CalculationType:
    return CalculationType.PERCENTAGE if isinstance(calculation, PercentOfBasic) else CalculationType.FIXED


@dataclass(frozen=True)
class SalaryComponent:
    """A reusable earning or deduction, either a fixed amount or a % of basic salary."""

    component_id: int
    company_id: int
    name: str
    component_type: ComponentType
    calculation: Calculation
    status: RecordStatus = RecordStatus.ACTIVE
    description: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == RecordStatus.ACTIVE

    @property
    def calculation_type(self) -> CalculationType:
        return calculation_type_of(self.calculation)

    def amount_for(self, basic_salary: Decimal) -> Decimal:
        return self.calculation.amount_for(basic_salary)


@dataclass(frozen=True)
class EmployeeSalary:
    """Salary configuration of one employee; at most one is active at a time."""

    salary_id: int
    company_id: int
    employee_id: int
    basic_salary: Decimal
    component_ids: tuple[int, ...] = ()
    is_active: bool = True
    notes: Optional[str] = None


@dataclass(frozen=True)
class BreakdownLine:
    name: str
    amount: Decimal
    component_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {"name": self.name, "amount": str(self.amount), "component_id": self.component_id}


@dataclass(frozen=True)
class SalaryBreakdown:
    basic_salary: Decimal
    earnings: tuple[BreakdownLine, ...] = ()
    deductions: tuple[BreakdownLine, ...] = ()

    @property
    def total_earnings(self) -> Decimal:
        return to_money(self.basic_salary) + sum((line.amount for line in self.earnings), ZERO)

    @property
    def total_deductions(self) -> Decimal:
        return sum((line.amount for line in self.deductions), ZERO)

    @property
    def net_salary(self) -> Decimal:
        return self.total_earnings - self.total_deductions

    def to_dict(self) -> dict:
        return {
            "basic_salary": str(to_money(self.basic_salary)),
            "earnings": [line.to_dict() for line in self.earnings],
            "deductions": [line.to_dict() for line in self.deductions],
            "total_earnings": str(self.total_earnings),
            "total_deductions": str(self.total_deductions),
            "net_salary": str(self.net_salary),
        }


def calculate_breakdown(basic_salary: Decimal, components: Iterable[SalaryComponent]) -> SalaryBreakdown:
    """Split active components into earning/deduction lines; inactive ones are ignored."""
    earnings: list[BreakdownLine] = []
    deductions: list[BreakdownLine] = []
    for c in components:
        if not c.is_active:
            continue
        line = BreakdownLine(name=c.name, amount=c.amount_for(basic_salary), component_id=c.component_id)
        if c.component_type == ComponentType.EARNING:
            earnings.append(line)
        else:
            deductions.append(line)
    return SalaryBreakdown(basic_salary=to_money(basic_salary), earnings=tuple(earnings), deductions=tuple(deductions))
