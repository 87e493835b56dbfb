from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import CheckInDecision, CheckInStrategy, CheckOutDecision, CheckOutStrategy


class NormalStrategy(CheckInStrategy, CheckOutStrategy):
    """On-time check-in, check-out within the schedule tolerance."""

    def decide_checkin(self, *, late_minutes: int) -> CheckInDecision:
        return CheckInDecision(status=AttendanceStatus.PRESENT, late_minutes=late_minutes)

    def decide_checkout(self, *, minutes_diff: float) -> CheckOutDecision:
        return CheckOutDecision(minutes_diff=minutes_diff)
