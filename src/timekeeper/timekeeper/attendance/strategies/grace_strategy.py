from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import CheckInDecision, CheckInStrategy


class GraceStrategy(CheckInStrategy):
    """Minor lateness forgiven by consuming one grace period."""

    def decide_checkin(self, *, late_minutes: int) -> CheckInDecision:
        return CheckInDecision(
            status=AttendanceStatus.PRESENT,
            is_late=False,
            late_minutes=late_minutes,
            grace_period_used=True,
        )
