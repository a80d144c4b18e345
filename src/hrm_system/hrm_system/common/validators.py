from __future__ import annotations

from datetime import date

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_non_negative(value, field_name: str):
    if value is None or value < 0:
        raise ValidationError(f"{field_name} must be zero or greater")
    return value


def require_date_order(start: date, end: date, *, strict: bool = False) -> None:
    if strict and end <= start:
        raise ValidationError("End date must be after start date")
    if end < start:
        raise ValidationError("End date must be on or after start date")
