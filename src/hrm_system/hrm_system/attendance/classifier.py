from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Optional

from ..policies.model import AttendancePolicy
from ..shifts.model import Shift
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord


def _minutes(delta: timedelta) -> int:
    return int(delta.total_seconds() // 60)


def clock_span(record: AttendanceRecord) -> Optional[tuple[datetime, datetime]]:
    """Clock-in/out as datetimes; a clock-out earlier than the clock-in is next day."""
    if record.clock_in is None or record.clock_out is None:
        return None
    start = datetime.combine(record.work_date, record.clock_in)
    end = datetime.combine(record.work_date, record.clock_out)
    if end < start:
        end += timedelta(days=1)
    return start, end


def break_minutes(record: AttendanceRecord, shift: Shift, span: tuple[datetime, datetime]) -> int:
    """Manual break_hours win; else the part of the shift's break window that was worked through."""
    if record.break_hours and record.break_hours > 0:
        return int(round(record.break_hours * 60))

    window = shift.break_window_for(record.work_date)
    if window:
        start = max(span[0], window[0])
        end = min(span[1], window[1])
        return max(_minutes(end - start), 0)

    return int(shift.break_minutes or 0)


@dataclass(frozen=True)
class AttendanceClassifier:
    """Derives worked/overtime hours, late/early flags and status for a record.

    classify() is a pure function of (record, shift, policy): it never reads the
    clock, so re-running it on an unchanged record yields identical fields.
    """

    factory: AttendanceStrategyFactory = field(default_factory=AttendanceStrategyFactory)

    def worked_minutes(self, record: AttendanceRecord, shift: Shift) -> int:
        span = clock_span(record)
        if not span:
            return 0
        minutes = _minutes(span[1] - span[0]) - break_minutes(record, shift, span)
        return max(minutes, 0)

    def is_late(self, record: AttendanceRecord, shift: Shift, policy: AttendancePolicy) -> bool:
        if record.clock_in is None:
            return False
        shift_start, _ = shift.window_for(record.work_date)
        clock_in = datetime.combine(record.work_date, record.clock_in)
        return clock_in > shift_start + timedelta(minutes=int(policy.late_grace_minutes))

    def is_early_departure(self, record: AttendanceRecord, shift: Shift, policy: AttendancePolicy) -> bool:
        span = clock_span(record)
        if not span:
            return False
        _, shift_end = shift.window_for(record.work_date)
        return span[1] < shift_end - timedelta(minutes=int(policy.early_departure_grace_minutes))

    def classify(self, record: AttendanceRecord, shift: Shift, policy: AttendancePolicy) -> AttendanceRecord:
        worked_hours = round(self.worked_minutes(record, shift) / 60, 2)
        overtime_hours = round(max(0.0, worked_hours - float(policy.overtime_threshold_hours)), 2)

        strategy = self.factory.for_record(record, worked_hours=worked_hours, policy=policy)
        decision = strategy.decide(record, worked_hours=worked_hours)

        return replace(
            record,
            shift_id=shift.shift_id,
            attendance_policy_id=policy.policy_id,
            worked_hours=worked_hours,
            overtime_hours=overtime_hours,
            is_late=self.is_late(record, shift, policy),
            is_early_departure=self.is_early_departure(record, shift, policy),
            status=decision.status,
            notes=decision.note or record.notes,
        )
