from __future__ import annotations

from flask import Flask

from ..common.http import date_value, int_value, json_body, ok, request_meta, str_value
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..users.guards import employee_required
from .model import AttendanceHistoryEntry, TransitionResult


def _transition_payload(result: TransitionResult):
    return ok(
        message=result.message,
        state=result.state,
        needsReason=result.needs_reason,
        attendance=result.entry.to_dict(),
    )


def _history_dict(h: AttendanceHistoryEntry) -> dict:
    return {
        "historyId": h.history_id,
        "attendanceId": h.attendance_id,
        "action": h.action.value,
        "occurredAt": h.occurred_at.isoformat(),
        "details": h.details,
        "ipAddress": h.ip_address,
        "userAgent": h.user_agent,
    }


def register(app: Flask, container: Container) -> None:
    employee_only = employee_required(container.auth_service)
    service = container.attendance_service

    @app.route("/api/attendance/time-in", methods=["POST"], endpoint="attendance_time_in")
    @employee_only
    def time_in(employee):
        return _transition_payload(service.time_in(employee.user_id, meta=request_meta()))

    @app.route("/api/attendance/go-on-break", methods=["POST"], endpoint="attendance_go_on_break")
    @employee_only
    def go_on_break(employee):
        return _transition_payload(service.go_on_break(employee.user_id, meta=request_meta()))

    @app.route("/api/attendance/back-from-break", methods=["POST"], endpoint="attendance_back_from_break")
    @employee_only
    def back_from_break(employee):
        return _transition_payload(service.back_from_break(employee.user_id, meta=request_meta()))

    @app.route("/api/attendance/skip-break-time-out", methods=["POST"], endpoint="attendance_skip_break_time_out")
    @employee_only
    def skip_break_time_out(employee):
        return _transition_payload(service.skip_break_time_out(employee.user_id, meta=request_meta()))

    @app.route("/api/attendance/time-out", methods=["POST"], endpoint="attendance_time_out")
    @employee_only
    def time_out(employee):
        return _transition_payload(service.time_out(employee.user_id, meta=request_meta()))

    @app.route("/api/attendance/overtime-reason", methods=["POST"], endpoint="attendance_overtime_reason")
    @employee_only
    def submit_reason(employee):
        body = json_body()
        record = service.submit_reason(
            employee.user_id,
            reason=str_value(body.get("reason"), "reason"),
            work_date=date_value(body.get("date"), "date", required=False),
        )
        return ok(201, message=f"{record.type.value} reason submitted", record=record.to_dict())

    @app.route("/api/attendance/today", methods=["POST"], endpoint="attendance_today")
    @employee_only
    def today(employee):
        entry = service.today_entry(employee.user_id)
        return ok(attendance=entry.to_dict() if entry else None)

    @app.route("/api/attendance/history", methods=["POST"], endpoint="attendance_history")
    @employee_only
    def history(employee):
        body = json_body()
        rows = service.history(
            employee.user_id,
            limit=int_value(body.get("limit"), "limit", default=DEFAULT_HISTORY_LIMIT),
        )
        return ok(history=[_history_dict(h) for h in rows])
