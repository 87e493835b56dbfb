from __future__ import annotations

import math

from .base import CheckOutDecision, CheckOutStrategy


class OvertimeStrategy(CheckOutStrategy):
    """Time-out past the scheduled end beyond the overtime threshold."""

    def decide_checkout(self, *, minutes_diff: float) -> CheckOutDecision:
        return CheckOutDecision(
            minutes_diff=minutes_diff,
            is_overtime=True,
            overtime_minutes=math.floor(minutes_diff + 0.5),
        )
