from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import DeviationType, ReviewStatus


@dataclass(frozen=True)
class OvertimeRecord:
    """Employee-explained deviation from the scheduled end, awaiting admin review."""

    record_id: int
    employee_id: int
    attendance_id: int
    type: DeviationType
    record_date: date
    scheduled_end: datetime
    actual_time_out: datetime
    minutes: int
    reason: str
    status: ReviewStatus
    submitted_at: datetime
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "recordId": self.record_id,
            "employeeId": self.employee_id,
            "attendanceId": self.attendance_id,
            "type": self.type.value,
            "date": self.record_date.isoformat(),
            "scheduledEnd": self.scheduled_end.isoformat() if self.scheduled_end else None,
            "actualTimeOut": self.actual_time_out.isoformat() if self.actual_time_out else None,
            "minutes": self.minutes,
            "reason": self.reason,
            "status": self.status.value,
            "submittedAt": self.submitted_at.isoformat(),
            "reviewedBy": self.reviewed_by,
            "reviewedAt": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "reviewNotes": self.review_notes,
        }


@dataclass(frozen=True)
class OvertimeStatistics:
    by_status: dict[str, int]
    by_type: dict[str, int]
    approved_minutes: dict[str, int]
    total: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "byStatus": self.by_status,
            "byType": self.by_type,
            "approvedMinutes": self.approved_minutes,
            "total": self.total,
        }
