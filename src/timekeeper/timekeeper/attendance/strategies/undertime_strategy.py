from __future__ import annotations

import math

from .base import CheckOutDecision, CheckOutStrategy


class UndertimeStrategy(CheckOutStrategy):
    """Time-out before the scheduled end beyond the undertime threshold."""

    def decide_checkout(self, *, minutes_diff: float) -> CheckOutDecision:
        return CheckOutDecision(
            minutes_diff=minutes_diff,
            is_undertime=True,
            undertime_minutes=math.floor(abs(minutes_diff) + 0.5),
        )
