from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional, Union

from ..core.enums import AttendanceAction, AttendanceStatus, DeviationType


@dataclass(frozen=True)
class Working:
    """Timed in and working; `break_used` once the single daily break is over."""

    break_used: bool = False
    name = "working"


@dataclass(frozen=True)
class OnBreak:
    since: datetime
    name = "on_break"


@dataclass(frozen=True)
class Completed:
    time_out: datetime
    name = "completed"


@dataclass(frozen=True)
class MarkedAbsent:
    """Created by the absence sweep for a scheduled day without a time-in."""

    name = "absent"


@dataclass(frozen=True)
class MarkedOnLeave:
    """Created by the absence sweep for a scheduled day covered by approved leave."""

    name = "on_leave"


DayPhase = Union[Working, OnBreak, Completed, MarkedAbsent, MarkedOnLeave]


@dataclass(frozen=True)
class AttendanceEntry:
    """Domain entity: one employee's attendance for one calendar day."""

    attendance_id: int
    employee_id: int
    work_date: date
    phase: DayPhase
    status: AttendanceStatus
    schedule_id: Optional[int] = None
    scheduled_start: Optional[datetime] = None
    scheduled_end: Optional[datetime] = None
    time_in: Optional[datetime] = None
    break_time: float = 0.0
    total_hours: float = 0.0
    is_late: bool = False
    late_minutes: int = 0
    grace_period_used: bool = False
    is_overtime: bool = False
    overtime_minutes: int = 0
    is_undertime: bool = False
    undertime_minutes: int = 0
    version: int = 1

    @property
    def on_break(self) -> bool:
        return isinstance(self.phase, OnBreak)

    @property
    def break_start(self) -> Optional[datetime]:
        return self.phase.since if isinstance(self.phase, OnBreak) else None

    @property
    def time_out(self) -> Optional[datetime]:
        return self.phase.time_out if isinstance(self.phase, Completed) else None

    @property
    def break_taken(self) -> bool:
        if isinstance(self.phase, OnBreak):
            return True
        if isinstance(self.phase, Working):
            return self.phase.break_used
        return self.break_time > 0

    @property
    def is_absent(self) -> bool:
        return isinstance(self.phase, MarkedAbsent)

    @property
    def is_completed(self) -> bool:
        return isinstance(self.phase, Completed)

    @property
    def deviation_type(self) -> Optional[DeviationType]:
        if self.is_overtime:
            return DeviationType.OVERTIME
        if self.is_undertime:
            return DeviationType.UNDERTIME
        return None

    @property
    def deviation_minutes(self) -> int:
        if self.is_overtime:
            return self.overtime_minutes
        if self.is_undertime:
            return self.undertime_minutes
        return 0

    def to_dict(self) -> dict[str, Any]:
        def _iso(value):
            return value.isoformat() if value else None

        return {
            "attendanceId": self.attendance_id,
            "employeeId": self.employee_id,
            "date": self.work_date.isoformat(),
            "state": self.phase.name,
            "scheduleId": self.schedule_id,
            "scheduledStart": _iso(self.scheduled_start),
            "scheduledEnd": _iso(self.scheduled_end),
            "timeIn": _iso(self.time_in),
            "timeOut": _iso(self.time_out),
            "onBreak": self.on_break,
            "breakStart": _iso(self.break_start),
            "breakTime": round(self.break_time, 4),
            "totalHours": round(self.total_hours, 4),
            "isLate": self.is_late,
            "lateMinutes": self.late_minutes,
            "gracePeriodUsed": self.grace_period_used,
            "isOvertime": self.is_overtime,
            "overtimeMinutes": self.overtime_minutes,
            "isUndertime": self.is_undertime,
            "undertimeMinutes": self.undertime_minutes,
            "isAbsent": self.is_absent,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class RequestMeta:
    """Caller metadata recorded with every history entry."""

    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


@dataclass(frozen=True)
class AttendanceHistoryEntry:
    """Append-only audit row: one per state transition."""

    history_id: int
    employee_id: int
    attendance_id: int
    action: AttendanceAction
    occurred_at: datetime
    details: dict = field(default_factory=dict)
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


@dataclass(frozen=True)
class TransitionResult:
    entry: AttendanceEntry
    action: AttendanceAction
    message: str
    needs_reason: bool = False

    @property
    def state(self) -> str:
        return "needs_reason" if self.needs_reason else self.entry.phase.name
