from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import AttendanceStatus, DeviationType


@dataclass(frozen=True)
class CheckInDecision:
    status: AttendanceStatus
    is_late: bool = False
    late_minutes: int = 0
    grace_period_used: bool = False


@dataclass(frozen=True)
class CheckOutDecision:
    minutes_diff: float
    is_overtime: bool = False
    overtime_minutes: int = 0
    is_undertime: bool = False
    undertime_minutes: int = 0

    @property
    def deviation_type(self) -> Optional[DeviationType]:
        if self.is_overtime:
            return DeviationType.OVERTIME
        if self.is_undertime:
            return DeviationType.UNDERTIME
        return None


class CheckInStrategy(ABC):
    """Strategy Pattern: decide lateness status on time-in."""

    @abstractmethod
    def decide_checkin(self, *, late_minutes: int) -> CheckInDecision:
        raise NotImplementedError


class CheckOutStrategy(ABC):
    """Strategy Pattern: decide overtime/undertime on time-out."""

    @abstractmethod
    def decide_checkout(self, *, minutes_diff: float) -> CheckOutDecision:
        raise NotImplementedError
