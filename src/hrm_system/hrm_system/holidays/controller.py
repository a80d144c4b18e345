from __future__ import annotations

from flask import Flask

from ..common.http import current_tenant, json_body, json_endpoint, ok, optional_date_arg, require_date
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.holiday_service

    @app.route("/api/holidays", methods=["GET"], endpoint="holidays_list")
    @json_endpoint
    def list_holidays():
        tenant = current_tenant()
        start = optional_date_arg("start")
        end = optional_date_arg("end")
        if not start or not end:
            raise ValidationError("start and end are required")
        rows = service.list_between(tenant, start, end)
        return ok(
            [
                {
                    "id": h.holiday_id,
                    "name": h.name,
                    "start_date": h.start_date.strftime("%Y-%m-%d"),
                    "end_date": h.end_date.strftime("%Y-%m-%d"),
                }
                for h in rows
            ]
        )

    @app.route("/api/holidays", methods=["POST"], endpoint="holidays_create")
    @json_endpoint
    def create_holiday():
        tenant = current_tenant()
        payload = json_body()
        holiday_id = service.create(
            tenant,
            name=str(payload.get("name") or ""),
            start_date=require_date(payload, "start_date"),
            end_date=require_date(payload, "end_date"),
        )
        return ok({"id": holiday_id}, status=201)
