from __future__ import annotations

from flask import Flask

from ..common.http import current_tenant, json_body, json_endpoint, ok, require_date
from ..core.enums import PayrollFrequency
from ..core.exceptions import ValidationError
from ..container import Container
from .service import PayrollRunInput


def _run_input(payload: dict) -> PayrollRunInput:
    try:
        frequency = PayrollFrequency(str(payload.get("payroll_frequency") or PayrollFrequency.MONTHLY.value))
    except ValueError:
        raise ValidationError("payroll_frequency must be weekly, biweekly or monthly")
    return PayrollRunInput(
        title=str(payload.get("title") or ""),
        frequency=frequency,
        period_start=require_date(payload, "pay_period_start"),
        period_end=require_date(payload, "pay_period_end"),
        pay_date=require_date(payload, "pay_date"),
        notes=payload.get("notes"),
    )


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/payroll-runs", methods=["GET"], endpoint="payroll_runs_list")
    @json_endpoint
    def list_runs():
        tenant = current_tenant()
        return ok([r.to_dict() for r in service.list_runs(tenant)])

    @app.route("/api/payroll-runs", methods=["POST"], endpoint="payroll_runs_create")
    @json_endpoint
    def create_run():
        tenant = current_tenant()
        run = service.create_run(tenant, _run_input(json_body()))
        return ok(run.to_dict(), message="Payroll run created", status=201)

    @app.route("/api/payroll-runs/<int:run_id>", methods=["GET"], endpoint="payroll_runs_get")
    @json_endpoint
    def get_run(run_id: int):
        tenant = current_tenant()
        return ok(service.get_run(tenant, run_id).to_dict())

    @app.route("/api/payroll-runs/<int:run_id>", methods=["PUT"], endpoint="payroll_runs_update")
    @json_endpoint
    def update_run(run_id: int):
        tenant = current_tenant()
        run = service.update_run(tenant, run_id, _run_input(json_body()))
        return ok(run.to_dict())

    @app.route("/api/payroll-runs/<int:run_id>", methods=["DELETE"], endpoint="payroll_runs_delete")
    @json_endpoint
    def delete_run(run_id: int):
        tenant = current_tenant()
        service.delete_run(tenant, run_id)
        return ok(message="Payroll run deleted")

    @app.route("/api/payroll-runs/<int:run_id>/process", methods=["POST"], endpoint="payroll_runs_process")
    @json_endpoint
    def process_run(run_id: int):
        tenant = current_tenant()
        run = service.process_run(tenant, run_id)
        return ok(run.to_dict(), message="Payroll processed")

    @app.route("/api/payroll-runs/<int:run_id>/entries", methods=["GET"], endpoint="payroll_entries_list")
    @json_endpoint
    def list_entries(run_id: int):
        tenant = current_tenant()
        return ok([e.to_dict() for e in service.list_entries(tenant, run_id)])

    @app.route(
        "/api/payroll-runs/<int:run_id>/entries/<int:employee_id>",
        methods=["GET"],
        endpoint="payroll_entries_get",
    )
    @json_endpoint
    def get_entry(run_id: int, employee_id: int):
        tenant = current_tenant()
        return ok(service.get_entry(tenant, run_id, employee_id).to_dict())
