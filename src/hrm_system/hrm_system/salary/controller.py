from __future__ import annotations

from flask import Flask, request

from ..common.http import current_tenant, json_body, json_endpoint, ok
from ..core.enums import CalculationType, ComponentType
from ..core.exceptions import ValidationError
from ..container import Container
from .model import EmployeeSalary, FixedAmount, SalaryComponent
from .service import ComponentInput


def _component_to_dict(c: SalaryComponent) -> dict:
    return {
        "id": c.component_id,
        "name": c.name,
        "description": c.description,
        "type": c.component_type.value,
        "calculation_type": c.calculation_type.value,
        "amount": str(c.calculation.amount) if isinstance(c.calculation, FixedAmount) else None,
        "percentage": None if isinstance(c.calculation, FixedAmount) else str(c.calculation.percentage),
        "status": c.status.value,
    }


def _salary_to_dict(s: EmployeeSalary) -> dict:
    return {
        "id": s.salary_id,
        "employee_id": s.employee_id,
        "basic_salary": str(s.basic_salary),
        "components": list(s.component_ids),
        "is_active": s.is_active,
        "notes": s.notes,
    }


def _component_input(payload: dict) -> ComponentInput:
    try:
        component_type = ComponentType(str(payload.get("type") or ""))
        calculation_type = CalculationType(str(payload.get("calculation_type") or ""))
    except ValueError:
        raise ValidationError("type must be earning/deduction and calculation_type fixed/percentage")
    return ComponentInput(
        name=str(payload.get("name") or ""),
        component_type=component_type,
        calculation_type=calculation_type,
        amount=payload.get("amount"),
        percentage=payload.get("percentage"),
        description=payload.get("description"),
    )


def register(app: Flask, container: Container) -> None:
    components = container.salary_component_service
    salaries = container.employee_salary_service

    @app.route("/api/salary-components", methods=["GET"], endpoint="salary_components_list")
    @json_endpoint
    def list_components():
        tenant = current_tenant()
        return ok([_component_to_dict(c) for c in components.list(tenant)])

    @app.route("/api/salary-components", methods=["POST"], endpoint="salary_components_create")
    @json_endpoint
    def create_component():
        tenant = current_tenant()
        c = components.create(tenant, _component_input(json_body()))
        return ok(_component_to_dict(c), status=201)

    @app.route("/api/salary-components/<int:component_id>", methods=["PUT"], endpoint="salary_components_update")
    @json_endpoint
    def update_component(component_id: int):
        tenant = current_tenant()
        c = components.update(tenant, component_id, _component_input(json_body()))
        return ok(_component_to_dict(c))

    @app.route(
        "/api/salary-components/<int:component_id>/toggle-status",
        methods=["POST"],
        endpoint="salary_components_toggle",
    )
    @json_endpoint
    def toggle_component(component_id: int):
        tenant = current_tenant()
        return ok(_component_to_dict(components.toggle_status(tenant, component_id)))

    @app.route("/api/employee-salaries", methods=["GET"], endpoint="employee_salaries_list")
    @json_endpoint
    def list_salaries():
        tenant = current_tenant()
        rows = salaries.list(tenant, employee_id=request.args.get("employee_id", type=int))
        return ok([_salary_to_dict(s) for s in rows])

    @app.route("/api/employee-salaries", methods=["POST"], endpoint="employee_salaries_assign")
    @json_endpoint
    def assign_salary():
        tenant = current_tenant()
        payload = json_body()
        if not str(payload.get("employee_id") or "").isdigit():
            raise ValidationError("employee_id is required")
        s = salaries.assign(
            tenant,
            int(payload["employee_id"]),
            basic_salary=payload.get("basic_salary"),
            component_ids=payload.get("components") or (),
            notes=payload.get("notes"),
        )
        return ok(_salary_to_dict(s), status=201)

    @app.route(
        "/api/employee-salaries/<int:salary_id>/toggle-status",
        methods=["POST"],
        endpoint="employee_salaries_toggle",
    )
    @json_endpoint
    def toggle_salary(salary_id: int):
        tenant = current_tenant()
        return ok(_salary_to_dict(salaries.toggle_status(tenant, salary_id)))

    @app.route("/api/employees/<int:employee_id>/salary-breakdown", methods=["GET"], endpoint="salary_breakdown")
    @json_endpoint
    def breakdown(employee_id: int):
        tenant = current_tenant()
        return ok(salaries.breakdown(tenant, employee_id).to_dict())
