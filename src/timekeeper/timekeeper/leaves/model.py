from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import LeaveCategory, LeaveStatus, LeaveType
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class LeaveBalance:
    """Per-employee, per-category leave ledger.

    `remaining == beginning - availments` and `remaining >= 0` after every mutation.
    """

    employee_id: int
    category: LeaveCategory
    beginning: float = 0.0
    availments: float = 0.0
    remaining: float = 0.0
    active: float = 0.0
    reserved: float = 0.0
    updated_by: Optional[int] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "beginning": self.beginning,
            "availments": self.availments,
            "remaining": self.remaining,
            "active": self.active,
            "reserved": self.reserved,
            "updatedBy": self.updated_by,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class LeaveRequest:
    leave_id: int
    employee_id: int
    reason: str
    start_date: date
    end_date: date
    number_of_days: int
    leave_type: LeaveType
    leave_category: LeaveCategory
    status: LeaveStatus
    created_at: datetime
    approved_by: Optional[int] = None
    declined_by: Optional[int] = None
    decline_reason: Optional[str] = None
    days_approved: int = 0

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> dict[str, Any]:
        return {
            "leaveId": self.leave_id,
            "employeeId": self.employee_id,
            "reason": self.reason,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "numberOfDays": self.number_of_days,
            "leaveType": self.leave_type.value,
            "leaveCategory": self.leave_category.value,
            "status": self.status.value,
            "approvedBy": self.approved_by,
            "declinedBy": self.declined_by,
            "declineReason": self.decline_reason,
            "daysApproved": self.days_approved,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class ApprovalOutcome:
    request: LeaveRequest
    balance: LeaveBalance


def parse_category(value) -> LeaveCategory:
    try:
        return LeaveCategory(value)
    except ValueError:
        allowed = ", ".join(c.value for c in LeaveCategory)
        raise ValidationError(f"Leave category must be one of: {allowed}")
