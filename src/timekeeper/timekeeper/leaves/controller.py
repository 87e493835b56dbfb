from __future__ import annotations

from flask import Flask, request

from ..common.http import date_value, int_value, json_body, ok, str_value
from ..container import Container
from ..core.constants import DEFAULT_PAGE_SIZE
from ..users.guards import admin_required, employee_required


def register(app: Flask, container: Container) -> None:
    employee_only = employee_required(container.auth_service)
    admin_only = admin_required(container.auth_service)

    # -------- Employee --------
    @app.route("/api/leaves", methods=["POST"], endpoint="leave_submit")
    @employee_only
    def submit_leave(employee):
        body = json_body()
        leave = container.leave_request_service.submit(
            employee_id=employee.user_id,
            reason=str_value(body.get("reason"), "reason"),
            start_date=date_value(body.get("startDate"), "startDate"),
            end_date=date_value(body.get("endDate"), "endDate"),
            category=str_value(body.get("leaveCategory"), "leaveCategory"),
        )
        return ok(201, message="Leave request submitted", leave=leave.to_dict())

    @app.route("/api/leaves/mine", methods=["POST"], endpoint="leave_mine")
    @employee_only
    def my_leaves(employee):
        body = json_body()
        page = container.leave_request_service.list_for_employee(
            employee_id=employee.user_id,
            page=body.get("page", 1),
            page_size=body.get("pageSize", DEFAULT_PAGE_SIZE),
        )
        return ok(leaves=[r.to_dict() for r in page.items], pagination=page.meta())

    @app.route("/api/leaves/balances", methods=["POST"], endpoint="leave_balances")
    @employee_only
    def my_balances(employee):
        balances = container.leave_balance_service.balances(employee.user_id)
        return ok(balances={c.value: b.to_dict() for c, b in balances.items()})

    # -------- Admin --------
    @app.route("/api/admin/<int:admin_id>/leaves", methods=["GET"], endpoint="admin_list_leaves")
    @admin_only
    def list_leaves(admin):
        page = container.leave_request_service.list_requests(
            page=request.args.get("page", 1),
            page_size=request.args.get("pageSize", DEFAULT_PAGE_SIZE),
            status=request.args.get("status"),
        )
        return ok(leaves=[r.to_dict() for r in page.items], pagination=page.meta())

    @app.route(
        "/api/admin/<int:admin_id>/leaves/<int:leave_id>/approve",
        methods=["POST"],
        endpoint="admin_approve_leave",
    )
    @admin_only
    def approve_leave(admin, leave_id: int):
        outcome = container.leave_balance_service.approve(leave_id=leave_id, approver_id=admin.user_id)
        return ok(
            message="Leave request approved",
            leave=outcome.request.to_dict(),
            balance=outcome.balance.to_dict(),
        )

    @app.route(
        "/api/admin/<int:admin_id>/leaves/<int:leave_id>/decline",
        methods=["POST"],
        endpoint="admin_decline_leave",
    )
    @admin_only
    def decline_leave(admin, leave_id: int):
        body = json_body()
        leave = container.leave_balance_service.decline(
            leave_id=leave_id,
            decliner_id=admin.user_id,
            reason=str_value(body.get("reason"), "reason"),
        )
        return ok(message="Leave request declined", leave=leave.to_dict())

    @app.route(
        "/api/admin/<int:admin_id>/employees/<int:employee_id>/leave-balances/<category>",
        methods=["PUT"],
        endpoint="admin_edit_leave_balance",
    )
    @admin_only
    def edit_balance(admin, employee_id: int, category: str):
        body = json_body()
        balance = container.leave_balance_service.edit_beginning_balance(
            employee_id=employee_id,
            category=category,
            beginning=body.get("beginning"),
            admin_id=admin.user_id,
        )
        return ok(message="Leave balance updated", balance=balance.to_dict())

    @app.route(
        "/api/admin/<int:admin_id>/employees/<int:employee_id>/leave-balances",
        methods=["GET"],
        endpoint="admin_get_leave_balances",
    )
    @admin_only
    def employee_balances(admin, employee_id: int):
        balances = container.leave_balance_service.balances(employee_id)
        return ok(balances={c.value: b.to_dict() for c, b in balances.items()})
