from __future__ import annotations

from flask import Flask

from ..common.http import int_value, json_body, ok, str_value
from ..container import Container
from .guards import admin_required


def _user_dict(user) -> dict:
    return {
        "userId": user.user_id,
        "fullName": user.full_name,
        "email": user.email,
        "role": user.role.value,
        "isActive": user.is_active,
        "lateGracePeriodCount": user.late_grace_period_count,
    }


def register(app: Flask, container: Container) -> None:
    admin_only = admin_required(container.auth_service)

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        body = json_body()
        user = container.auth_service.authenticate(
            str_value(body.get("email"), "email"),
            str_value(body.get("password"), "password"),
        )
        return ok(user=_user_dict(user))

    @app.route(
        "/api/admin/<int:admin_id>/employees/<int:employee_id>/grace-periods",
        methods=["PUT"],
        endpoint="admin_reset_grace_periods",
    )
    @admin_only
    def reset_grace_periods(admin, employee_id: int):
        body = json_body()
        user = container.employee_service.reset_grace_periods(
            admin_user_id=admin.user_id,
            employee_id=employee_id,
            count=int_value(body["count"], "count") if body.get("count") not in (None, "") else None,
        )
        return ok(message="Grace periods updated", user=_user_dict(user))
