from __future__ import annotations

from flask import Flask

from ..common.http import date_value, json_body, ok
from ..container import Container
from ..users.guards import admin_required


def register(app: Flask, container: Container) -> None:
    admin_only = admin_required(container.auth_service)

    @app.route("/api/admin/<int:admin_id>/absence-sweep/run", methods=["POST"], endpoint="admin_run_absence_sweep")
    @admin_only
    def run_sweep(admin):
        body = json_body()
        summary = container.absence_sweep_service.run(date_value(body.get("date"), "date", required=False))
        return ok(message=summary.message, summary=summary.to_dict())

    @app.route("/api/admin/<int:admin_id>/absence-sweep/status", methods=["GET"], endpoint="admin_absence_sweep_status")
    @admin_only
    def sweep_status(admin):
        scheduler = container.sweep_scheduler
        return ok(scheduler=scheduler.status() if scheduler else {"running": False})
