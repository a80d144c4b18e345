from __future__ import annotations

from enum import Enum


class RecordStatus(str, Enum):
    """Lifecycle of master data (shifts, policies, components)."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class AttendanceStatus(str, Enum):
    """Normalized daily attendance status stored in the database."""

    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half_day"
    ON_LEAVE = "on_leave"
    HOLIDAY = "holiday"


class RequestStatus(str, Enum):
    """Approval flow state (leave applications, regularizations)."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ComponentType(str, Enum):
    EARNING = "earning"
    DEDUCTION = "deduction"


class CalculationType(str, Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


class PayrollFrequency(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class PayrollRunStatus(str, Enum):
    DRAFT = "draft"
    COMPLETED = "completed"
