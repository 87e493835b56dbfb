from __future__ import annotations

from flask import Flask, request

from ..common.http import date_value, datetime_value, int_value, json_body, ok
from ..container import Container
from ..users.guards import admin_required
from .model import ScheduleSlot


def _slot_dict(slot: ScheduleSlot) -> dict:
    return {
        "scheduleId": slot.schedule_id,
        "date": slot.slot_date.isoformat(),
        "start": slot.start.isoformat(),
        "end": slot.end.isoformat(),
        "assignedEmployeeId": slot.assigned_employee_id,
        "createdBy": slot.created_by,
    }


def register(app: Flask, container: Container) -> None:
    admin_only = admin_required(container.auth_service)

    @app.route("/api/admin/<int:admin_id>/schedules", methods=["POST"], endpoint="admin_create_schedule")
    @admin_only
    def create_schedule(admin):
        body = json_body()
        slot_date = date_value(body.get("date"), "date")
        slot = container.schedule_service.create_slot(
            slot_date=slot_date,
            start=datetime_value(body.get("start"), "start", on_date=slot_date),
            end=datetime_value(body.get("end"), "end", on_date=slot_date),
            created_by=admin.user_id,
        )
        employee_id = body.get("employeeId")
        if employee_id not in (None, ""):
            slot = container.schedule_service.assign(
                schedule_id=slot.schedule_id,
                employee_id=int_value(employee_id, "employeeId"),
            )
        return ok(201, message="Schedule created", schedule=_slot_dict(slot))

    @app.route(
        "/api/admin/<int:admin_id>/schedules/<int:schedule_id>/assign",
        methods=["POST"],
        endpoint="admin_assign_schedule",
    )
    @admin_only
    def assign_schedule(admin, schedule_id: int):
        body = json_body()
        slot = container.schedule_service.assign(
            schedule_id=schedule_id,
            employee_id=int_value(body.get("employeeId"), "employeeId"),
        )
        return ok(message="Employee assigned", schedule=_slot_dict(slot))

    @app.route(
        "/api/admin/<int:admin_id>/schedules/<int:schedule_id>/reassign",
        methods=["POST"],
        endpoint="admin_reassign_schedule",
    )
    @admin_only
    def reassign_schedule(admin, schedule_id: int):
        body = json_body()
        slot = container.schedule_service.reassign(
            schedule_id=schedule_id,
            employee_id=int_value(body.get("employeeId"), "employeeId"),
        )
        return ok(message="Employee reassigned", schedule=_slot_dict(slot))

    @app.route(
        "/api/admin/<int:admin_id>/schedules/<int:schedule_id>",
        methods=["DELETE"],
        endpoint="admin_delete_schedule",
    )
    @admin_only
    def delete_schedule(admin, schedule_id: int):
        container.schedule_service.delete_slot(schedule_id=schedule_id)
        return ok(message="Schedule deleted")

    @app.route("/api/admin/<int:admin_id>/schedules", methods=["GET"], endpoint="admin_list_schedules")
    @admin_only
    def list_schedules(admin):
        today = container.clock.today()
        month = container.schedule_service.find_slots_in_month(
            month=int_value(request.args.get("month"), "month", default=today.month),
            year=int_value(request.args.get("year"), "year", default=today.year),
        )
        return ok(
            count=month.count,
            period={"start": month.period_start.isoformat(), "end": month.period_end.isoformat()},
            schedules=[_slot_dict(s) for s in month.schedules],
        )
