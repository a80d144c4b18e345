from __future__ import annotations

from typing import Optional

from flask import Flask, request

from ..common.datetime_utils import parse_clock_time
from ..common.http import current_tenant, json_body, json_endpoint, ok, optional_date_arg, require_date
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..container import Container
from .service import ManualAttendanceInput


def _status_arg(raw: Optional[str]) -> Optional[AttendanceStatus]:
    value = (raw or "").strip()
    if not value:
        return None
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown attendance status: {value}")


def _clock_field(payload: dict, name: str):
    try:
        return parse_clock_time(payload.get(name))
    except ValueError:
        raise ValidationError(f"{name} must be HH:MM")


def _manual_input(payload: dict, *, employee_id: int, work_date) -> ManualAttendanceInput:
    try:
        break_hours = float(payload.get("break_hours") or 0)
    except (TypeError, ValueError):
        raise ValidationError("break_hours must be a number")
    return ManualAttendanceInput(
        employee_id=employee_id,
        work_date=work_date,
        clock_in=_clock_field(payload, "clock_in"),
        clock_out=_clock_field(payload, "clock_out"),
        status=_status_arg(payload.get("status")),
        break_hours=break_hours,
        notes=payload.get("notes"),
    )


def _employee_id(raw, default: int) -> int:
    value = str(raw if raw is not None else "").strip()
    if not value:
        return default
    if not value.isdigit():
        raise ValidationError("employee_id must be an integer")
    return int(value) or default


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="attendance_clock_in")
    @json_endpoint
    def clock_in():
        tenant = current_tenant()
        employee_id = _employee_id(json_body().get("employee_id"), tenant.user_id)
        record = service.clock_in(tenant, employee_id)
        return ok({"attendance_id": record.attendance_id, "is_late": record.is_late}, message="Clocked in", status=201)

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="attendance_clock_out")
    @json_endpoint
    def clock_out():
        tenant = current_tenant()
        employee_id = _employee_id(json_body().get("employee_id"), tenant.user_id)
        record = service.clock_out(tenant, employee_id)
        return ok(
            {
                "attendance_id": record.attendance_id,
                "status": record.status.value,
                "worked_hours": record.worked_hours,
                "overtime_hours": record.overtime_hours,
            },
            message="Clocked out",
        )

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @json_endpoint
    def today():
        tenant = current_tenant()
        employee_id = _employee_id(request.args.get("employee_id"), tenant.user_id)
        view = service.get_today_record(tenant, employee_id)
        return ok(view.to_dict() if view else None)

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @json_endpoint
    def list_records():
        tenant = current_tenant()
        employee_id = request.args.get("employee_id", type=int)
        rows = service.list_records(
            tenant,
            employee_id=employee_id,
            status=_status_arg(request.args.get("status")),
            date_from=optional_date_arg("date_from"),
            date_to=optional_date_arg("date_to"),
            limit=request.args.get("limit", default=50, type=int),
            offset=request.args.get("offset", default=0, type=int),
        )
        return ok([v.to_dict() for v in rows])

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_create")
    @json_endpoint
    def create_manual():
        tenant = current_tenant()
        payload = json_body()
        if not str(payload.get("employee_id") or "").isdigit():
            raise ValidationError("employee_id is required")
        data = _manual_input(payload, employee_id=int(payload["employee_id"]), work_date=require_date(payload, "date"))
        record = service.create_manual(tenant, data)
        return ok({"attendance_id": record.attendance_id, "status": record.status.value}, status=201)

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="attendance_update")
    @json_endpoint
    def update_manual(attendance_id: int):
        tenant = current_tenant()
        payload = json_body()
        # employee and date are fixed once a record exists
        data = _manual_input(payload, employee_id=0, work_date=None)
        record = service.update_manual(tenant, attendance_id, data)
        return ok({"attendance_id": record.attendance_id, "status": record.status.value})

    @app.route("/api/attendance/rollover", methods=["POST"], endpoint="attendance_rollover")
    @json_endpoint
    def rollover():
        tenant = current_tenant()
        summary = service.mark_absentees(tenant, require_date(json_body(), "date"))
        return ok(summary.to_dict())
