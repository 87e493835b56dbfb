from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import (
    DEFAULT_LATE_GRACE_MINUTES,
    OVERTIME_THRESHOLD_MINUTES,
    UNDERTIME_THRESHOLD_MINUTES,
)
from .strategies.base import CheckInStrategy, CheckOutStrategy
from .strategies.grace_strategy import GraceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy
from .strategies.overtime_strategy import OvertimeStrategy
from .strategies.undertime_strategy import UndertimeStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    overtime_threshold_minutes: int = OVERTIME_THRESHOLD_MINUTES
    undertime_threshold_minutes: int = UNDERTIME_THRESHOLD_MINUTES

    def for_checkin(self, *, late_minutes: int, grace_periods_left: int) -> CheckInStrategy:
        if late_minutes <= 0:
            return NormalStrategy()
        if late_minutes <= self.grace_minutes and grace_periods_left > 0:
            return GraceStrategy()
        return LateStrategy()

    def for_checkout(self, *, minutes_diff: float) -> CheckOutStrategy:
        if minutes_diff > self.overtime_threshold_minutes:
            return OvertimeStrategy()
        if minutes_diff < -self.undertime_threshold_minutes:
            return UndertimeStrategy()
        return NormalStrategy()
