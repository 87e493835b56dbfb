from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.clock import Clock
from ..common.validators import require_max_length, require_non_empty
from ..core.constants import DEFAULT_HISTORY_LIMIT, OVERTIME_REASON_MAX_LENGTH
from ..core.enums import AttendanceAction, ReviewStatus
from ..core.exceptions import ConflictError, DeliveryError, NotFoundError, ValidationError
from ..notifications.notifier import NotificationKind, Notifier
from ..overtime.model import OvertimeRecord
from ..overtime.repository import OvertimeRepository
from ..schedules.service import ScheduleService
from ..users.service import AuthService
from . import calculations
from .factory import AttendanceStrategyFactory
from .model import (
    AttendanceEntry,
    AttendanceHistoryEntry,
    Completed,
    MarkedAbsent,
    MarkedOnLeave,
    OnBreak,
    RequestMeta,
    TransitionResult,
    Working,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Daily clock-in / break / clock-out state machine for one employee.

    NoRecord -> Working -> (OnBreak -> Working) -> Completed. Every transition
    is persisted together with one history row; updates are conditional on
    the entry version so a concurrent double-submit ends in a Conflict.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        schedules: ScheduleService,
        auth: AuthService,
        clock: Clock,
        *,
        overtime: OvertimeRepository,
        notifier: Notifier,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
    ):
        self._attendance = attendance
        self._schedules = schedules
        self._auth = auth
        self._clock = clock
        self._overtime = overtime
        self._notifier = notifier
        self._factory = strategy_factory or AttendanceStrategyFactory()

    # ---- transitions ----

    def time_in(self, employee_id: int, *, meta: Optional[RequestMeta] = None) -> TransitionResult:
        employee = self._auth.require_employee(employee_id)
        now = self._clock.now()
        today = now.date()

        existing = self._attendance.get_for_employee_and_date(employee.user_id, today)
        if existing:
            if isinstance(existing.phase, (MarkedAbsent, MarkedOnLeave)):
                raise ConflictError(f"Today is already marked {existing.status.value}")
            raise ConflictError("Employee is already clocked in")

        slot = self._schedules.find_slot_for(employee_id=employee.user_id, day=today)
        if not slot:
            raise NotFoundError("No schedule found for today")

        late = calculations.late_minutes(now, slot.start)
        strategy = self._factory.for_checkin(
            late_minutes=late,
            grace_periods_left=employee.late_grace_period_count,
        )
        decision = strategy.decide_checkin(late_minutes=late)

        entry = AttendanceEntry(
            attendance_id=0,
            employee_id=employee.user_id,
            work_date=today,
            phase=Working(),
            status=decision.status,
            schedule_id=slot.schedule_id,
            scheduled_start=slot.start,
            scheduled_end=slot.end,
            time_in=now,
            is_late=decision.is_late,
            late_minutes=decision.late_minutes,
            grace_period_used=decision.grace_period_used,
        )
        grace_left = employee.late_grace_period_count - (1 if decision.grace_period_used else 0)
        history = self._history(
            entry,
            AttendanceAction.TIME_IN,
            now,
            meta,
            {
                "scheduledStart": slot.start.isoformat(),
                "scheduledEnd": slot.end.isoformat(),
                "lateMinutes": decision.late_minutes,
                "isLate": decision.is_late,
                "gracePeriodUsed": decision.grace_period_used,
                "gracePeriodsLeft": grace_left,
                "status": decision.status.value,
            },
        )

        stored = self._attendance.create_time_in(
            entry=entry,
            history=history,
            consume_grace_period=decision.grace_period_used,
        )
        if stored is None:
            raise ConflictError("Employee is already clocked in")

        logger.info(
            "Employee %s timed in at %s (status=%s, late=%s min)",
            employee.user_id,
            now.isoformat(),
            decision.status.value,
            decision.late_minutes,
        )
        if decision.is_late:
            message = f"Timed in {decision.late_minutes} minute(s) late"
        elif decision.grace_period_used:
            message = f"Timed in within the grace period, {grace_left} grace period(s) left"
        else:
            message = "Timed in on time"
        return TransitionResult(entry=stored, action=AttendanceAction.TIME_IN, message=message)

    def go_on_break(self, employee_id: int, *, meta: Optional[RequestMeta] = None) -> TransitionResult:
        entry = self._require_open_entry(employee_id)
        if isinstance(entry.phase, OnBreak):
            raise ConflictError("Employee is already on break")
        if entry.break_taken:
            raise ConflictError("Break has already been taken today")

        now = self._clock.now()
        updated = replace(entry, phase=OnBreak(since=now))
        return self._save(
            entry,
            updated,
            AttendanceAction.GO_ON_BREAK,
            now,
            meta,
            {"breakStart": now.isoformat()},
            "Break started",
        )

    def back_from_break(self, employee_id: int, *, meta: Optional[RequestMeta] = None) -> TransitionResult:
        entry = self._require_open_entry(employee_id)
        if not isinstance(entry.phase, OnBreak):
            raise ValidationError("Employee is not on break")

        now = self._clock.now()
        duration = calculations.break_hours(entry.phase.since, now)
        updated = replace(entry, phase=Working(break_used=True), break_time=entry.break_time + duration)
        return self._save(
            entry,
            updated,
            AttendanceAction.BACK_FROM_BREAK,
            now,
            meta,
            {
                "breakStart": entry.phase.since.isoformat(),
                "breakEnd": now.isoformat(),
                "breakDuration": round(duration, 4),
                "breakTime": round(updated.break_time, 4),
            },
            "Break ended",
        )

    def skip_break_time_out(self, employee_id: int, *, meta: Optional[RequestMeta] = None) -> TransitionResult:
        entry = self._require_open_entry(employee_id)
        if isinstance(entry.phase, OnBreak):
            raise ValidationError("Cannot time out while on break")
        if entry.break_taken:
            raise ValidationError("Break was already taken today, use time out instead")
        return self._complete(entry, AttendanceAction.SKIP_BREAK_TIME_OUT, meta)

    def time_out(self, employee_id: int, *, meta: Optional[RequestMeta] = None) -> TransitionResult:
        entry = self._require_open_entry(employee_id)
        if isinstance(entry.phase, OnBreak):
            raise ValidationError("Cannot time out while on break")
        return self._complete(entry, AttendanceAction.TIME_OUT, meta)

    def submit_reason(
        self,
        employee_id: int,
        *,
        reason: str,
        work_date: Optional[date] = None,
    ) -> OvertimeRecord:
        """Explain a flagged overtime/undertime day.

        The admin notice doubles as the review prompt, so the record is only
        stored once that notice has been delivered.
        """

        employee = self._auth.require_employee(employee_id)
        day = work_date or self._clock.today()
        reason = require_max_length(require_non_empty(reason, "Reason"), "Reason", OVERTIME_REASON_MAX_LENGTH)

        entry = self._attendance.get_for_employee_and_date(employee.user_id, day)
        if not entry:
            raise NotFoundError("No attendance record found for that day")
        if not entry.is_completed:
            raise ValidationError("Time out before submitting a reason")
        deviation = entry.deviation_type
        if deviation is None:
            raise ValidationError("No overtime or undertime was recorded for that day")

        if self._overtime.get_by_attendance_and_type(attendance_id=entry.attendance_id, type=deviation):
            raise ConflictError(f"{deviation.value} reason was already submitted for {day.isoformat()}")

        now = self._clock.now()
        record = OvertimeRecord(
            record_id=0,
            employee_id=employee.user_id,
            attendance_id=entry.attendance_id,
            type=deviation,
            record_date=day,
            scheduled_end=entry.scheduled_end,
            actual_time_out=entry.time_out,
            minutes=entry.deviation_minutes,
            reason=reason,
            status=ReviewStatus.PENDING,
            submitted_at=now,
        )

        delivered = self._notifier.notify(
            self._auth.admin_recipients(),
            NotificationKind.OVERTIME_REASON_SUBMITTED,
            {
                "employee_name": employee.full_name,
                "type": deviation.value.lower(),
                "date": day.isoformat(),
                "scheduled_end": entry.scheduled_end.strftime("%H:%M") if entry.scheduled_end else "-",
                "time_out": entry.time_out.strftime("%H:%M"),
                "minutes": record.minutes,
                "reason": reason,
            },
        )
        if not delivered:
            raise DeliveryError("Could not notify admins, the reason was not submitted")

        record_id = self._overtime.create(record)
        if record_id is None:
            raise ConflictError(f"{deviation.value} reason was already submitted for {day.isoformat()}")

        logger.info(
            "%s record %s submitted by employee %s for %s",
            deviation.value,
            record_id,
            employee.user_id,
            day.isoformat(),
        )
        return replace(record, record_id=record_id)

    # ---- reads ----

    def today_entry(self, employee_id: int) -> Optional[AttendanceEntry]:
        employee = self._auth.require_employee(employee_id)
        return self._attendance.get_for_employee_and_date(employee.user_id, self._clock.today())

    def history(self, employee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceHistoryEntry]:
        employee = self._auth.require_employee(employee_id)
        if int(limit) < 1:
            raise ValidationError("Limit must be at least 1")
        return self._attendance.list_history(employee.user_id, limit=int(limit))

    # ---- helpers ----

    def _require_open_entry(self, employee_id: int) -> AttendanceEntry:
        employee = self._auth.require_employee(employee_id)
        entry = self._attendance.get_for_employee_and_date(employee.user_id, self._clock.today())
        if not entry or entry.time_in is None:
            raise ValidationError("Employee has not timed in today")
        if isinstance(entry.phase, Completed):
            raise ValidationError("Employee has already timed out today")
        return entry

    def _complete(
        self,
        entry: AttendanceEntry,
        action: AttendanceAction,
        meta: Optional[RequestMeta],
    ) -> TransitionResult:
        now = self._clock.now()
        total = calculations.total_hours(entry.time_in, now, entry.break_time)
        minutes_diff = calculations.minutes_past_end(now, entry.scheduled_end) if entry.scheduled_end else 0.0
        decision = self._factory.for_checkout(minutes_diff=minutes_diff).decide_checkout(minutes_diff=minutes_diff)

        updated = replace(
            entry,
            phase=Completed(time_out=now),
            total_hours=total,
            is_overtime=decision.is_overtime,
            overtime_minutes=decision.overtime_minutes,
            is_undertime=decision.is_undertime,
            undertime_minutes=decision.undertime_minutes,
        )
        needs_reason = decision.deviation_type is not None
        if decision.is_overtime:
            message = f"Timed out with {decision.overtime_minutes} minute(s) of overtime, please submit a reason"
        elif decision.is_undertime:
            message = f"Timed out {decision.undertime_minutes} minute(s) early, please submit a reason"
        else:
            message = "Timed out"

        return self._save(
            entry,
            updated,
            action,
            now,
            meta,
            {
                "timeIn": entry.time_in.isoformat(),
                "timeOut": now.isoformat(),
                "breakTime": round(entry.break_time, 4),
                "totalHours": round(total, 4),
                "minutesDiff": round(minutes_diff, 2),
                "isOvertime": decision.is_overtime,
                "overtimeMinutes": decision.overtime_minutes,
                "isUndertime": decision.is_undertime,
                "undertimeMinutes": decision.undertime_minutes,
            },
            message,
            needs_reason=needs_reason,
        )

    def _save(
        self,
        current: AttendanceEntry,
        updated: AttendanceEntry,
        action: AttendanceAction,
        now: datetime,
        meta: Optional[RequestMeta],
        details: dict,
        message: str,
        *,
        needs_reason: bool = False,
    ) -> TransitionResult:
        history = self._history(updated, action, now, meta, details)
        if not self._attendance.save_transition(entry=updated, history=history, expected_version=current.version):
            raise ConflictError("Attendance record was changed by another request, please retry")

        logger.info("Employee %s: %s at %s", current.employee_id, action.value, now.isoformat())
        return TransitionResult(
            entry=replace(updated, version=current.version + 1),
            action=action,
            message=message,
            needs_reason=needs_reason,
        )

    @staticmethod
    def _history(
        entry: AttendanceEntry,
        action: AttendanceAction,
        now: datetime,
        meta: Optional[RequestMeta],
        details: dict,
    ) -> AttendanceHistoryEntry:
        meta = meta or RequestMeta()
        return AttendanceHistoryEntry(
            history_id=0,
            employee_id=entry.employee_id,
            attendance_id=entry.attendance_id,
            action=action,
            occurred_at=now,
            details=details,
            ip_address=meta.ip_address,
            user_agent=meta.user_agent,
        )
