from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import CheckInDecision, CheckInStrategy


class LateStrategy(CheckInStrategy):
    """Late check-in."""

    def decide_checkin(self, *, late_minutes: int) -> CheckInDecision:
        return CheckInDecision(status=AttendanceStatus.LATE, is_late=True, late_minutes=late_minutes)
