from __future__ import annotations

from flask import Flask, request

from ..common.http import date_value, json_body, ok, str_value
from ..container import Container
from ..core.constants import DEFAULT_PAGE_SIZE
from ..users.guards import admin_required


def register(app: Flask, container: Container) -> None:
    admin_only = admin_required(container.auth_service)
    service = container.overtime_review_service

    @app.route("/api/admin/<int:admin_id>/overtime", methods=["GET"], endpoint="admin_list_overtime")
    @admin_only
    def list_records(admin):
        page = service.list(
            status=request.args.get("status"),
            type=request.args.get("type"),
            page=request.args.get("page", 1),
            page_size=request.args.get("pageSize", DEFAULT_PAGE_SIZE),
        )
        return ok(records=[r.to_dict() for r in page.items], pagination=page.meta())

    @app.route(
        "/api/admin/<int:admin_id>/overtime/<int:record_id>/approve",
        methods=["POST"],
        endpoint="admin_approve_overtime",
    )
    @admin_only
    def approve(admin, record_id: int):
        body = json_body()
        record = service.approve(
            record_id=record_id,
            reviewer_id=admin.user_id,
            notes=str_value(body.get("notes"), "notes"),
        )
        return ok(message=f"{record.type.value} record approved", record=record.to_dict())

    @app.route(
        "/api/admin/<int:admin_id>/overtime/<int:record_id>/decline",
        methods=["POST"],
        endpoint="admin_decline_overtime",
    )
    @admin_only
    def decline(admin, record_id: int):
        body = json_body()
        record = service.decline(
            record_id=record_id,
            reviewer_id=admin.user_id,
            notes=str_value(body.get("notes"), "notes"),
        )
        return ok(message=f"{record.type.value} record declined", record=record.to_dict())

    @app.route("/api/admin/<int:admin_id>/overtime/statistics", methods=["GET"], endpoint="admin_overtime_statistics")
    @admin_only
    def statistics(admin):
        stats = service.statistics(
            start=date_value(request.args.get("start"), "start", required=False),
            end=date_value(request.args.get("end"), "end", required=False),
        )
        return ok(statistics=stats.to_dict())
