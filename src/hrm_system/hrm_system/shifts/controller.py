from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import format_clock, parse_clock_time
from ..common.http import current_tenant, json_body, json_endpoint, ok
from ..core.exceptions import ValidationError
from ..container import Container
from .model import Shift
from .service import ShiftInput


def _to_dict(s: Shift) -> dict:
    return {
        "id": s.shift_id,
        "name": s.shift_name,
        "start_time": format_clock(s.start_time),
        "end_time": format_clock(s.end_time),
        "break_minutes": s.break_minutes,
        "break_start_time": format_clock(s.break_start_time),
        "break_end_time": format_clock(s.break_end_time),
        "is_night_shift": s.is_night_shift,
        "working_hours": s.working_hours,
        "status": s.status.value,
    }


def _input(payload: dict) -> ShiftInput:
    try:
        start = parse_clock_time(payload.get("start_time"))
        end = parse_clock_time(payload.get("end_time"))
        break_minutes = int(payload.get("break_minutes") or 0)
        break_start = parse_clock_time(payload.get("break_start_time"))
        break_end = parse_clock_time(payload.get("break_end_time"))
    except (TypeError, ValueError):
        raise ValidationError("Invalid shift times (HH:MM) or break minutes")
    if start is None or end is None:
        raise ValidationError("start_time and end_time are required")
    return ShiftInput(
        shift_name=str(payload.get("name") or ""),
        start_time=start,
        end_time=end,
        break_minutes=break_minutes,
        break_start_time=break_start,
        break_end_time=break_end,
        is_night_shift=bool(payload.get("is_night_shift")),
    )


def register(app: Flask, container: Container) -> None:
    service = container.shift_service

    @app.route("/api/shifts", methods=["GET"], endpoint="shifts_list")
    @json_endpoint
    def list_shifts():
        tenant = current_tenant()
        return ok([_to_dict(s) for s in service.list(tenant)])

    @app.route("/api/shifts", methods=["POST"], endpoint="shifts_create")
    @json_endpoint
    def create_shift():
        tenant = current_tenant()
        return ok(_to_dict(service.create(tenant, _input(json_body()))), status=201)

    @app.route("/api/shifts/<int:shift_id>", methods=["PUT"], endpoint="shifts_update")
    @json_endpoint
    def update_shift(shift_id: int):
        tenant = current_tenant()
        return ok(_to_dict(service.update(tenant, shift_id, _input(json_body()))))

    @app.route("/api/shifts/<int:shift_id>/toggle-status", methods=["POST"], endpoint="shifts_toggle")
    @json_endpoint
    def toggle_shift(shift_id: int):
        tenant = current_tenant()
        return ok(_to_dict(service.toggle_status(tenant, shift_id)))
