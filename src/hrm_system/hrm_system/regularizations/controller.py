from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import format_clock, parse_clock_time
from ..common.http import current_tenant, json_body, json_endpoint, ok
from ..core.enums import RequestStatus
from ..core.exceptions import ValidationError
from ..container import Container
from .model import AttendanceRegularization
from .service import RegularizationInput


def _to_dict(g: AttendanceRegularization) -> dict:
    return {
        "id": g.regularization_id,
        "employee_id": g.employee_id,
        "attendance_id": g.attendance_id,
        "date": g.work_date.strftime("%Y-%m-%d"),
        "original_clock_in": format_clock(g.original_clock_in),
        "original_clock_out": format_clock(g.original_clock_out),
        "requested_clock_in": format_clock(g.requested_clock_in),
        "requested_clock_out": format_clock(g.requested_clock_out),
        "reason": g.reason,
        "status": g.status.value,
        "manager_comments": g.manager_comments,
    }


def _input(payload: dict, *, attendance_id: int = 0) -> RegularizationInput:
    try:
        return RegularizationInput(
            attendance_id=int(payload.get("attendance_id") or attendance_id),
            requested_clock_in=parse_clock_time(payload.get("requested_clock_in")),
            requested_clock_out=parse_clock_time(payload.get("requested_clock_out")),
            reason=str(payload.get("reason") or ""),
        )
    except (TypeError, ValueError):
        raise ValidationError("Invalid attendance_id or time (HH:MM)")


def register(app: Flask, container: Container) -> None:
    service = container.regularization_service

    @app.route("/api/regularizations", methods=["GET"], endpoint="regularizations_list")
    @json_endpoint
    def list_regularizations():
        tenant = current_tenant()
        raw_status = (request.args.get("status") or "").strip()
        try:
            status = RequestStatus(raw_status) if raw_status else None
        except ValueError:
            raise ValidationError(f"Unknown request status: {raw_status}")
        rows = service.list(tenant, status=status, employee_id=request.args.get("employee_id", type=int))
        return ok([_to_dict(g) for g in rows])

    @app.route("/api/regularizations", methods=["POST"], endpoint="regularizations_create")
    @json_endpoint
    def create():
        tenant = current_tenant()
        g = service.create(tenant, _input(json_body()))
        return ok(_to_dict(g), message="Regularization request created", status=201)

    @app.route("/api/regularizations/<int:regularization_id>", methods=["PUT"], endpoint="regularizations_update")
    @json_endpoint
    def update(regularization_id: int):
        tenant = current_tenant()
        g = service.update(tenant, regularization_id, _input(json_body()))
        return ok(_to_dict(g))

    @app.route("/api/regularizations/<int:regularization_id>", methods=["DELETE"], endpoint="regularizations_delete")
    @json_endpoint
    def delete(regularization_id: int):
        tenant = current_tenant()
        service.delete(tenant, regularization_id)
        return ok(message="Regularization request deleted")

    @app.route(
        "/api/regularizations/<int:regularization_id>/approve", methods=["POST"], endpoint="regularizations_approve"
    )
    @json_endpoint
    def approve(regularization_id: int):
        tenant = current_tenant()
        g = service.approve(tenant, regularization_id, comments=str(json_body().get("comments") or ""))
        return ok(_to_dict(g), message="Regularization approved")

    @app.route(
        "/api/regularizations/<int:regularization_id>/reject", methods=["POST"], endpoint="regularizations_reject"
    )
    @json_endpoint
    def reject(regularization_id: int):
        tenant = current_tenant()
        g = service.reject(tenant, regularization_id, comments=str(json_body().get("comments") or ""))
        return ok(_to_dict(g), message="Regularization rejected")
