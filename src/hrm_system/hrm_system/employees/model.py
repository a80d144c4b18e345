from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee profile within one company."""

    employee_id: int
    company_id: int
    full_name: str
    shift_id: Optional[int] = None
    attendance_policy_id: Optional[int] = None
    base_salary: Optional[Decimal] = None
    is_active: bool = True
