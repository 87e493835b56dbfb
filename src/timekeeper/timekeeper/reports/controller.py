from __future__ import annotations

from flask import Flask, request

from ..common.http import int_value, ok
from ..container import Container
from ..users.guards import admin_required


def register(app: Flask, container: Container) -> None:
    admin_only = admin_required(container.auth_service)

    @app.route(
        "/api/admin/<int:admin_id>/employees/<int:employee_id>/monthly-report",
        methods=["GET"],
        endpoint="admin_employee_monthly_report",
    )
    @admin_only
    def monthly_report(admin, employee_id: int):
        today = container.clock.today()
        report = container.report_service.build_monthly_report(
            employee_id=employee_id,
            month=int_value(request.args.get("month"), "month", default=today.month),
            year=int_value(request.args.get("year"), "year", default=today.year),
        )
        return ok(report=report.to_dict())
