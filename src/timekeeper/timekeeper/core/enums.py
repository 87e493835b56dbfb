from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization checks."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    """Day status stored on an attendance entry."""

    PRESENT = "Present"
    LATE = "Late"
    ABSENT = "Absent"
    ON_LEAVE = "OnLeave"


class AttendanceAction(str, Enum):
    """Transitions recorded in the attendance history log."""

    TIME_IN = "time_in"
    GO_ON_BREAK = "go_on_break"
    BACK_FROM_BREAK = "back_from_break"
    TIME_OUT = "time_out"
    SKIP_BREAK_TIME_OUT = "skip_break_time_out"


class LeaveCategory(str, Enum):
    SICK = "sickLeave"
    VACATION = "vacationLeave"


class LeaveType(str, Enum):
    SINGLE = "single"
    MULTI = "multi"


class LeaveStatus(str, Enum):
    """Leave request workflow state."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DECLINED = "DECLINED"


class DeviationType(str, Enum):
    OVERTIME = "Overtime"
    UNDERTIME = "Undertime"


class ReviewStatus(str, Enum):
    """Overtime/undertime record review state."""

    PENDING = "Pending"
    APPROVED = "Approved"
    DECLINED = "Declined"
