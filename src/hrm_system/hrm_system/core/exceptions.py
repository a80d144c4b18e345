class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a tenant-scoped entity does not exist."""


class EmployeeNotFoundError(NotFoundError):
    """Raised when an operation targets a missing employee profile."""


class ConflictError(DomainError):
    """Raised when a write would collide with existing data."""


class DuplicateAttendanceError(ConflictError):
    """An attendance record already exists for the employee and date."""


class LeaveConflictError(ConflictError):
    """The employee has approved leave covering the date."""


class NoActiveShiftError(DomainError):
    def __init__(self, message: str = "No active shift found. Please contact HR."):
        super().__init__(message)


class NoActivePolicyError(DomainError):
    def __init__(self, message: str = "No active attendance policy found. Please contact HR."):
        super().__init__(message)


class PayrollRunStateError(DomainError):
    """Raised when a payroll run is not in the state an operation requires."""


class InsufficientLeaveBalanceError(ValidationError):
    """The leave balance for the year does not cover the requested days."""
