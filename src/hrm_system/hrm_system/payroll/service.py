from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.money import ZERO
from ..common.validators import require_date_order, require_non_empty
from ..core.enums import PayrollFrequency, PayrollRunStatus
from ..core.exceptions import ConflictError, NotFoundError, PayrollRunStateError, ValidationError
from ..core.tenant import TenantContext
from ..employees.repository import EmployeeRepository
from ..leaves.repository import LeaveRepository, LeaveTypeRepository
from ..salary.service import EmployeeSalaryService
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollEntry, PayrollRun, PayrollSettings
from .repository import PayrollEntryRepository, PayrollRunRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayrollRunInput:
    title: str
    frequency: PayrollFrequency
    period_start: date
    period_end: date
    pay_date: date
    notes: Optional[str] = None


class PayrollService:
    """Payroll run lifecycle: draft -> processed (completed).

    Entries are snapshots. Once a run is completed its entries are only read
    back, never recomputed, so later edits to salaries or attendance do not
    change what was paid.
    """

    def __init__(
        self,
        runs: PayrollRunRepository,
        entries: PayrollEntryRepository,
        employees: EmployeeRepository,
        salaries: EmployeeSalaryService,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        leave_types: LeaveTypeRepository,
        *,
        settings: PayrollSettings | None = None,
        calculator: PayrollCalculator | None = None,
    ):
        self._runs = runs
        self._entries = entries
        self._employees = employees
        self._salaries = salaries
        self._attendance = attendance
        self._leaves = leaves
        self._leave_types = leave_types
        self._settings = settings or PayrollSettings()
        self._calculator = calculator or StandardPayrollCalculator()

    def _validate(self, tenant: TenantContext, data: PayrollRunInput, *, exclude_id: int = 0) -> str:
        title = require_non_empty(data.title, "Title")
        require_date_order(data.period_start, data.period_end, strict=True)
        if data.pay_date < data.period_end:
            raise ValidationError("Pay date must be on or after the period end")
        existing = self._runs.find_by_period(tenant.company_id, data.period_start, data.period_end)
        if existing and existing.run_id != exclude_id:
            raise ConflictError("A payroll run already exists for this period")
        return title

    def get_run(self, tenant: TenantContext, run_id: int) -> PayrollRun:
        run = self._runs.get_by_id(tenant.company_id, int(run_id))
        if not run:
            raise NotFoundError("Payroll run not found")
        return run

    def _get_draft(self, tenant: TenantContext, run_id: int) -> PayrollRun:
        run = self.get_run(tenant, run_id)
        if not run.is_draft:
            raise PayrollRunStateError("Only draft payroll runs can be changed")
        return run

    def list_runs(self, tenant: TenantContext) -> Sequence[PayrollRun]:
        return self._runs.list(tenant.company_id)

    def create_run(self, tenant: TenantContext, data: PayrollRunInput) -> PayrollRun:
        run = PayrollRun(
            run_id=0,
            company_id=tenant.company_id,
            title=self._validate(tenant, data),
            frequency=data.frequency,
            period_start=data.period_start,
            period_end=data.period_end,
            pay_date=data.pay_date,
            notes=(data.notes or "").strip() or None,
            created_by=tenant.user_id,
        )
        run_id = self._runs.create(run)
        logger.info("Payroll run %s created for %s..%s", run_id, data.period_start, data.period_end)
        return replace(run, run_id=run_id)

    def update_run(self, tenant: TenantContext, run_id: int, data: PayrollRunInput) -> PayrollRun:
        current = self._get_draft(tenant, run_id)
        updated = replace(
            current,
            title=self._validate(tenant, data, exclude_id=current.run_id),
            frequency=data.frequency,
            period_start=data.period_start,
            period_end=data.period_end,
            pay_date=data.pay_date,
            notes=(data.notes or "").strip() or None,
        )
        self._runs.update(updated)
        return updated

    def delete_run(self, tenant: TenantContext, run_id: int) -> None:
        run = self._get_draft(tenant, run_id)
        self._entries.delete_for_run(tenant.company_id, run.run_id)
        self._runs.delete(tenant.company_id, run.run_id)
        logger.info("Payroll run %s deleted by user=%s", run.run_id, tenant.user_id)

    def _compute_entries(self, tenant: TenantContext, run: PayrollRun) -> list[PayrollEntry]:
        leave_types = {t.leave_type_id: t for t in self._leave_types.list_for_company(tenant.company_id)}
        entries: list[PayrollEntry] = []
        for employee in self._employees.list_active(tenant.company_id):
            salary = self._salaries.get_or_create_active(tenant, employee.employee_id)
            entries.append(
                self._calculator.aggregate(
                    salary=salary,
                    components=self._salaries.components_for(tenant, salary),
                    records=self._attendance.list_for_employee_between(
                        tenant.company_id, employee.employee_id, run.period_start, run.period_end
                    ),
                    leaves=self._leaves.list_approved_overlapping(
                        tenant.company_id, employee.employee_id, run.period_start, run.period_end
                    ),
                    leave_types=leave_types,
                    period_start=run.period_start,
                    period_end=run.period_end,
                    settings=self._settings,
                    run_id=run.run_id,
                )
            )
        return entries

    def process_run(self, tenant: TenantContext, run_id: int) -> PayrollRun:
        run = self._get_draft(tenant, run_id)
        logger.info("Processing payroll run %s for company %s", run.run_id, tenant.company_id)

        try:
            # A draft may hold entries from an earlier failed attempt.
            self._entries.delete_for_run(tenant.company_id, run.run_id)
            entries = self._compute_entries(tenant, run)
            self._entries.add_many(entries)

            completed = replace(
                run,
                status=PayrollRunStatus.COMPLETED,
                total_gross_pay=sum((e.gross_pay for e in entries), ZERO),
                total_deductions=sum((e.total_deductions for e in entries), ZERO),
                total_net_pay=sum((e.net_pay for e in entries), ZERO),
                employee_count=len(entries),
            )
            self._runs.update(completed)
        except Exception:
            logger.exception("Payroll run %s failed; reverting to draft", run.run_id)
            self._entries.delete_for_run(tenant.company_id, run.run_id)
            self._runs.update(run)
            raise

        logger.info(
            "Payroll run %s completed: employees=%s net=%s",
            completed.run_id,
            completed.employee_count,
            completed.total_net_pay,
        )
        return completed

    def list_entries(self, tenant: TenantContext, run_id: int) -> Sequence[PayrollEntry]:
        run = self.get_run(tenant, run_id)
        return self._entries.list_for_run(tenant.company_id, run.run_id)

    def get_entry(self, tenant: TenantContext, run_id: int, employee_id: int) -> PayrollEntry:
        run = self.get_run(tenant, run_id)
        entry = self._entries.get_for_employee(tenant.company_id, run.run_id, int(employee_id))
        if not entry:
            raise NotFoundError("Payroll entry not found")
        return entry
