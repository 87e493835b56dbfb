from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class ScheduleSlot:
    """A work period on one date, optionally bound to exactly one employee."""

    schedule_id: int
    slot_date: date
    start: datetime
    end: datetime
    created_by: int
    assigned_employee_id: Optional[int] = None

    @property
    def is_assigned(self) -> bool:
        return self.assigned_employee_id is not None


@dataclass(frozen=True)
class MonthSchedule:
    schedules: list[ScheduleSlot]
    period_start: date
    period_end: date

    @property
    def count(self) -> int:
        return len(self.schedules)
