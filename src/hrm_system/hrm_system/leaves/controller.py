from __future__ import annotations

from typing import Optional

from flask import Flask, request

from ..common.http import current_tenant, json_body, json_endpoint, ok, require_date
from ..core.enums import RequestStatus
from ..core.exceptions import ValidationError
from ..container import Container
from .model import LeaveApplication, LeaveBalance


def _to_dict(a: LeaveApplication) -> dict:
    return {
        "id": a.leave_id,
        "employee_id": a.employee_id,
        "leave_type_id": a.leave_type_id,
        "start_date": a.start_date.strftime("%Y-%m-%d"),
        "end_date": a.end_date.strftime("%Y-%m-%d"),
        "reason": a.reason,
        "status": a.status.value,
        "decided_by": a.decided_by,
        "manager_comments": a.manager_comments,
    }


def _balance_to_dict(b: LeaveBalance) -> dict:
    return {
        "id": b.balance_id,
        "employee_id": b.employee_id,
        "leave_type_id": b.leave_type_id,
        "year": b.year,
        "allocated_days": b.allocated_days,
        "carried_forward": b.carried_forward,
        "manual_adjustment": b.manual_adjustment,
        "used_days": b.used_days,
        "remaining_days": b.remaining_days,
    }


def _status_arg(raw: Optional[str]) -> Optional[RequestStatus]:
    value = (raw or "").strip()
    if not value:
        return None
    try:
        return RequestStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown request status: {value}")


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leave-types", methods=["GET"], endpoint="leave_types_list")
    @json_endpoint
    def list_types():
        tenant = current_tenant()
        return ok([{"id": t.leave_type_id, "name": t.name, "is_paid": t.is_paid} for t in service.list_types(tenant)])

    @app.route("/api/leaves", methods=["GET"], endpoint="leaves_list")
    @json_endpoint
    def list_leaves():
        tenant = current_tenant()
        rows = service.list(
            tenant,
            status=_status_arg(request.args.get("status")),
            employee_id=request.args.get("employee_id", type=int),
        )
        return ok([_to_dict(a) for a in rows])

    @app.route("/api/leaves", methods=["POST"], endpoint="leaves_apply")
    @json_endpoint
    def apply():
        tenant = current_tenant()
        payload = json_body()
        try:
            leave_type_id = int(payload.get("leave_type_id") or 0)
            employee_id = int(payload.get("employee_id") or tenant.user_id)
        except (TypeError, ValueError):
            raise ValidationError("employee_id and leave_type_id must be integers")
        application = service.apply(
            tenant,
            employee_id=employee_id,
            leave_type_id=leave_type_id,
            start_date=require_date(payload, "start_date"),
            end_date=require_date(payload, "end_date"),
            reason=str(payload.get("reason") or ""),
        )
        return ok(_to_dict(application), message="Leave application submitted", status=201)

    @app.route("/api/leaves/<int:leave_id>/approve", methods=["POST"], endpoint="leaves_approve")
    @json_endpoint
    def approve(leave_id: int):
        tenant = current_tenant()
        application = service.approve(tenant, leave_id, comments=str(json_body().get("comments") or ""))
        return ok(_to_dict(application), message="Leave approved")

    @app.route("/api/leaves/<int:leave_id>/reject", methods=["POST"], endpoint="leaves_reject")
    @json_endpoint
    def reject(leave_id: int):
        tenant = current_tenant()
        application = service.reject(tenant, leave_id, comments=str(json_body().get("comments") or ""))
        return ok(_to_dict(application), message="Leave rejected")

    @app.route("/api/leave-balances", methods=["GET"], endpoint="leave_balances_list")
    @json_endpoint
    def list_balances():
        tenant = current_tenant()
        employee_id = request.args.get("employee_id", default=tenant.user_id, type=int)
        rows = service.list_balances(tenant, employee_id, year=request.args.get("year", type=int))
        return ok([_balance_to_dict(b) for b in rows])

    @app.route("/api/leave-balances", methods=["PUT"], endpoint="leave_balances_set")
    @json_endpoint
    def set_balance():
        tenant = current_tenant()
        payload = json_body()
        try:
            values = dict(
                employee_id=int(payload.get("employee_id") or 0),
                leave_type_id=int(payload.get("leave_type_id") or 0),
                year=int(payload.get("year") or 0),
                allocated_days=float(payload.get("allocated_days") or 0),
                carried_forward=float(payload.get("carried_forward") or 0),
                manual_adjustment=float(payload.get("manual_adjustment") or 0),
            )
        except (TypeError, ValueError):
            raise ValidationError("employee_id, leave_type_id and year must be integers, day counts numbers")
        balance = service.set_balance(tenant, **values)
        return ok(_balance_to_dict(balance), message="Leave balance saved")
