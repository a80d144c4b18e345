from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_negative
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    DomainError,
    DuplicateAttendanceError,
    EmployeeNotFoundError,
    LeaveConflictError,
    NotFoundError,
    ValidationError,
)
from ..core.tenant import TenantContext
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..holidays.calendar import WorkCalendar
from ..leaves.repository import LeaveRepository
from .classifier import AttendanceClassifier
from .model import AttendanceRecord, AttendanceView
from .overlay import LeaveOverlay
from .repository import AttendanceRepository
from .resolver import PolicyResolver, ResolvedRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManualAttendanceInput:
    employee_id: int
    work_date: date
    clock_in: Optional[time] = None
    clock_out: Optional[time] = None
    status: Optional[AttendanceStatus] = None
    break_hours: float = 0.0
    notes: Optional[str] = None


@dataclass(frozen=True)
class RolloverSummary:
    work_date: date
    absent: int = 0
    holiday: int = 0
    skipped: int = 0

    def to_dict(self) -> dict:
        return {
            "date": self.work_date.strftime("%Y-%m-%d"),
            "absent": self.absent,
            "holiday": self.holiday,
            "skipped": self.skipped,
        }


def _clock(now: datetime) -> time:
    return now.time().replace(microsecond=0)


class AttendanceService:
    """Clock events, manual entries and the daily rollover.

    Every write goes resolver -> classifier -> repository, and the resolver runs
    before anything is persisted so a missing shift/policy leaves no trace.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        resolver: PolicyResolver,
        calendar: WorkCalendar,
        leaves: LeaveRepository,
        overlay: LeaveOverlay,
        *,
        classifier: AttendanceClassifier | None = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._resolver = resolver
        self._calendar = calendar
        self._leaves = leaves
        self._overlay = overlay
        self._classifier = classifier or AttendanceClassifier()

    def _get_employee(self, tenant: TenantContext, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(tenant.company_id, int(employee_id))
        if not employee:
            raise EmployeeNotFoundError("Employee profile not found")
        return employee

    def _get_record(self, tenant: TenantContext, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(tenant.company_id, int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def _ensure_no_leave(self, tenant: TenantContext, employee_id: int, work_date: date) -> None:
        if self._leaves.find_approved_covering(tenant.company_id, employee_id, work_date):
            raise LeaveConflictError("Employee has approved leave on this date")

    def _blank_record(
        self, tenant: TenantContext, employee_id: int, work_date: date, rules: Optional[ResolvedRules]
    ) -> AttendanceRecord:
        return AttendanceRecord(
            attendance_id=0,
            company_id=tenant.company_id,
            employee_id=employee_id,
            work_date=work_date,
            clock_in=None,
            clock_out=None,
            status=AttendanceStatus.ABSENT,
            shift_id=rules.shift.shift_id if rules else None,
            attendance_policy_id=rules.policy.policy_id if rules else None,
            is_weekend=not self._calendar.is_working_day(work_date),
            is_holiday=self._calendar.holiday_on(tenant.company_id, work_date) is not None,
            created_by=tenant.user_id,
        )

    def _persist(self, record: AttendanceRecord) -> AttendanceRecord:
        if record.attendance_id:
            self._attendance.update(record)
            return record
        attendance_id = self._attendance.add(record)
        return replace(record, attendance_id=attendance_id)

    # ---- clock events ----

    def clock_in(self, tenant: TenantContext, employee_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        employee = self._get_employee(tenant, employee_id)
        if not self._calendar.is_working_day(today):
            raise ValidationError("Cannot clock in on a non-working day")
        self._ensure_no_leave(tenant, employee.employee_id, today)

        existing = self._attendance.get_for_employee_and_date(tenant.company_id, employee.employee_id, today)
        if existing and existing.clock_in is not None:
            raise DuplicateAttendanceError("Already clocked in today")

        rules = self._resolver.resolve(tenant, employee)

        # A rollover-created absent row for today is taken over, not duplicated.
        base = existing or self._blank_record(tenant, employee.employee_id, today, rules)
        candidate = replace(base, clock_in=_clock(now), clock_out=None, status=AttendanceStatus.ABSENT)
        record = self._persist(self._classifier.classify(candidate, rules.shift, rules.policy))

        logger.info(
            "Clock-in employee=%s company=%s date=%s late=%s",
            employee.employee_id,
            tenant.company_id,
            today,
            record.is_late,
        )
        return record

    def _open_record(self, tenant: TenantContext, employee_id: int, today: date) -> Optional[AttendanceRecord]:
        record = self._attendance.get_for_employee_and_date(tenant.company_id, employee_id, today)
        if record and record.clock_in is not None:
            return record

        # Night shifts clock out after midnight, against yesterday's record.
        yesterday = self._attendance.get_for_employee_and_date(
            tenant.company_id, employee_id, today - timedelta(days=1)
        )
        if yesterday and yesterday.clock_in is not None and yesterday.clock_out is None and yesterday.shift_id:
            employee = self._get_employee(tenant, employee_id)
            rules = self._resolver.rules_for_record(tenant, yesterday, employee)
            if rules.shift.is_night_shift:
                return yesterday
        return record

    def clock_out(self, tenant: TenantContext, employee_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()

        employee = self._get_employee(tenant, employee_id)
        record = self._open_record(tenant, employee.employee_id, now.date())
        if not record or record.clock_in is None:
            raise ValidationError("No clock-in found for today")
        if record.clock_out is not None:
            raise ValidationError("Already clocked out")

        rules = self._resolver.rules_for_record(tenant, record, employee)
        candidate = replace(record, clock_out=_clock(now))
        updated = self._classifier.classify(candidate, rules.shift, rules.policy)
        self._attendance.update(updated)

        logger.info(
            "Clock-out employee=%s company=%s date=%s worked=%.2f status=%s",
            employee.employee_id,
            tenant.company_id,
            updated.work_date,
            updated.worked_hours,
            updated.status.value,
        )
        return updated

    # ---- manual entries ----

    def create_manual(self, tenant: TenantContext, data: ManualAttendanceInput) -> AttendanceRecord:
        employee = self._get_employee(tenant, data.employee_id)
        require_non_negative(data.break_hours, "Break hours")
        if data.status != AttendanceStatus.ON_LEAVE:
            self._ensure_no_leave(tenant, employee.employee_id, data.work_date)

        if self._attendance.get_for_employee_and_date(tenant.company_id, employee.employee_id, data.work_date):
            raise DuplicateAttendanceError("Attendance record already exists for this employee on this date")

        rules = self._resolver.resolve(tenant, employee)
        base = self._blank_record(tenant, employee.employee_id, data.work_date, rules)
        candidate = replace(
            base,
            clock_in=data.clock_in,
            clock_out=data.clock_out,
            break_hours=float(data.break_hours or 0),
            notes=data.notes,
            # on_leave/holiday are kept as given; anything else is derived.
            status=data.status if data.status == AttendanceStatus.ON_LEAVE else AttendanceStatus.ABSENT,
            is_holiday=base.is_holiday or data.status == AttendanceStatus.HOLIDAY,
        )
        record = self._persist(self._classifier.classify(candidate, rules.shift, rules.policy))
        logger.info(
            "Manual attendance %s created for employee=%s date=%s by user=%s",
            record.attendance_id,
            employee.employee_id,
            data.work_date,
            tenant.user_id,
        )
        return record

    def update_manual(self, tenant: TenantContext, attendance_id: int, data: ManualAttendanceInput) -> AttendanceRecord:
        """Edit clock times/notes of a record.

        The shift and policy are re-resolved. Status is re-derived when the
        clock times change; with unchanged times a supplied status is kept.
        """
        current = self._get_record(tenant, attendance_id)
        employee = self._get_employee(tenant, current.employee_id)
        require_non_negative(data.break_hours, "Break hours")

        times_changed = data.clock_in != current.clock_in or data.clock_out != current.clock_out
        rules = self._resolver.resolve(tenant, employee)

        candidate = replace(
            current,
            clock_in=data.clock_in,
            clock_out=data.clock_out,
            break_hours=float(data.break_hours or 0),
            notes=data.notes if data.notes is not None else current.notes,
            is_holiday=current.is_holiday or data.status == AttendanceStatus.HOLIDAY,
            status=data.status or current.status,
        )
        if candidate.status == AttendanceStatus.ON_LEAVE and times_changed and candidate.clock_in is not None:
            candidate = replace(candidate, status=AttendanceStatus.PRESENT)
        updated = self._classifier.classify(candidate, rules.shift, rules.policy)
        if data.status and not times_changed:
            updated = replace(updated, status=data.status)

        self._attendance.update(updated)
        logger.info("Attendance %s updated by user=%s", updated.attendance_id, tenant.user_id)
        return updated

    def apply_times(
        self, tenant: TenantContext, attendance_id: int, *, clock_in: Optional[time], clock_out: Optional[time]
    ) -> AttendanceRecord:
        """Overwrite clock times and reclassify against the record's stored shift/policy."""
        current = self._get_record(tenant, attendance_id)
        employee = self._get_employee(tenant, current.employee_id)
        rules = self._resolver.rules_for_record(tenant, current, employee)

        candidate = replace(
            current,
            clock_in=clock_in if clock_in is not None else current.clock_in,
            clock_out=clock_out if clock_out is not None else current.clock_out,
        )
        if candidate.status == AttendanceStatus.ON_LEAVE and candidate.clock_in is not None:
            candidate = replace(candidate, status=AttendanceStatus.PRESENT)
        updated = self._classifier.classify(candidate, rules.shift, rules.policy)
        self._attendance.update(updated)
        return updated

    # ---- reads ----

    def get_today_record(
        self, tenant: TenantContext, employee_id: int, *, today: date | None = None
    ) -> Optional[AttendanceView]:
        today = today or now_local().date()
        record = self._attendance.get_for_employee_and_date(tenant.company_id, int(employee_id), today)
        return self._overlay.overlay(tenant, record) if record else None

    def list_records(
        self,
        tenant: TenantContext,
        *,
        employee_id: Optional[int] = None,
        status: Optional[AttendanceStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[AttendanceView]:
        if date_from and date_to and date_to < date_from:
            raise ValidationError("date_to must be on or after date_from")
        rows = self._attendance.search(
            tenant.company_id,
            employee_id=employee_id,
            status=status,
            date_from=date_from,
            date_to=date_to,
            limit=max(1, min(int(limit), 500)),
            offset=max(0, int(offset)),
        )
        return [self._overlay.overlay(tenant, r) for r in rows]

    # ---- bulk writers ----

    def _try_resolve(self, tenant: TenantContext, employee: Employee) -> Optional[ResolvedRules]:
        try:
            return self._resolver.resolve(tenant, employee)
        except DomainError as e:
            logger.warning("No rules for employee=%s company=%s: %s", employee.employee_id, tenant.company_id, e)
            return None

    def mark_on_leave(self, tenant: TenantContext, employee_id: int, dates: Iterable[date]) -> int:
        """Put working dates on leave.

        Dates without a record get a new on_leave row. Absent rows that never
        saw a clock-in (written by the rollover) are switched to on_leave.
        Anything with a clock-in is left alone.
        """
        employee = self._get_employee(tenant, employee_id)
        rules = self._try_resolve(tenant, employee)
        marked = 0
        for day in dates:
            if not self._calendar.is_working_day(day):
                continue
            existing = self._attendance.get_for_employee_and_date(tenant.company_id, employee.employee_id, day)
            if existing:
                if existing.status == AttendanceStatus.ABSENT and existing.clock_in is None:
                    self._attendance.update(replace(existing, status=AttendanceStatus.ON_LEAVE))
                    marked += 1
                continue
            record = replace(
                self._blank_record(tenant, employee.employee_id, day, rules),
                status=AttendanceStatus.ON_LEAVE,
            )
            self._attendance.add(record)
            marked += 1
        return marked

    def mark_absentees(self, tenant: TenantContext, work_date: date) -> RolloverSummary:
        """Close a day: absent rows for missing employees, holiday rows on holidays."""
        if not self._calendar.is_working_day(work_date):
            return RolloverSummary(work_date=work_date)

        holiday = self._calendar.holiday_on(tenant.company_id, work_date)
        absent = holidays = skipped = 0

        employees: Sequence[Employee] = self._employees.list_active(tenant.company_id)
        for employee in employees:
            if self._attendance.get_for_employee_and_date(tenant.company_id, employee.employee_id, work_date):
                continue
            if not holiday and self._leaves.find_approved_covering(
                tenant.company_id, employee.employee_id, work_date
            ):
                continue

            rules = self._try_resolve(tenant, employee)
            if not rules:
                skipped += 1
                continue

            record = self._blank_record(tenant, employee.employee_id, work_date, rules)
            if holiday:
                record = replace(record, status=AttendanceStatus.HOLIDAY, is_holiday=True, notes=holiday.name)
                holidays += 1
            else:
                absent += 1
            self._attendance.add(self._classifier.classify(record, rules.shift, rules.policy))

        logger.info(
            "Rollover company=%s date=%s absent=%s holiday=%s skipped=%s",
            tenant.company_id,
            work_date,
            absent,
            holidays,
            skipped,
        )
        return RolloverSummary(work_date=work_date, absent=absent, holiday=holidays, skipped=skipped)
