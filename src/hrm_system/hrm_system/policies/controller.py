from __future__ import annotations

from flask import Flask

from ..common.http import current_tenant, json_body, json_endpoint, ok
from ..core.constants import (
    DEFAULT_HALF_DAY_THRESHOLD_HOURS,
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_OVERTIME_THRESHOLD_HOURS,
)
from ..core.exceptions import ValidationError
from ..container import Container
from .model import AttendancePolicy
from .service import PolicyInput


def _to_dict(p: AttendancePolicy) -> dict:
    return {
        "id": p.policy_id,
        "name": p.policy_name,
        "late_grace_minutes": p.late_grace_minutes,
        "early_departure_grace_minutes": p.early_departure_grace_minutes,
        "half_day_threshold_hours": p.half_day_threshold_hours,
        "overtime_threshold_hours": p.overtime_threshold_hours,
        "status": p.status.value,
    }


def _input(payload: dict) -> PolicyInput:
    try:
        return PolicyInput(
            policy_name=str(payload.get("name") or ""),
            late_grace_minutes=int(payload.get("late_grace_minutes", DEFAULT_LATE_GRACE_MINUTES)),
            early_departure_grace_minutes=int(payload.get("early_departure_grace_minutes", 0)),
            half_day_threshold_hours=float(payload.get("half_day_threshold_hours", DEFAULT_HALF_DAY_THRESHOLD_HOURS)),
            overtime_threshold_hours=float(payload.get("overtime_threshold_hours", DEFAULT_OVERTIME_THRESHOLD_HOURS)),
        )
    except (TypeError, ValueError):
        raise ValidationError("Policy thresholds must be numbers")


def register(app: Flask, container: Container) -> None:
    service = container.policy_service

    @app.route("/api/attendance-policies", methods=["GET"], endpoint="policies_list")
    @json_endpoint
    def list_policies():
        tenant = current_tenant()
        return ok([_to_dict(p) for p in service.list(tenant)])

    @app.route("/api/attendance-policies", methods=["POST"], endpoint="policies_create")
    @json_endpoint
    def create_policy():
        tenant = current_tenant()
        return ok(_to_dict(service.create(tenant, _input(json_body()))), status=201)

    @app.route("/api/attendance-policies/<int:policy_id>", methods=["PUT"], endpoint="policies_update")
    @json_endpoint
    def update_policy(policy_id: int):
        tenant = current_tenant()
        return ok(_to_dict(service.update(tenant, policy_id, _input(json_body()))))

    @app.route("/api/attendance-policies/<int:policy_id>/toggle-status", methods=["POST"], endpoint="policies_toggle")
    @json_endpoint
    def toggle_policy(policy_id: int):
        tenant = current_tenant()
        return ok(_to_dict(service.toggle_status(tenant, policy_id)))
