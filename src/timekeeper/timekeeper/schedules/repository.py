from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import ScheduleSlot


class ScheduleRepository(Protocol):
    def create(self, *, slot_date: date, start: datetime, end: datetime, created_by: int) -> int:
        """Insert an unassigned slot. Returns schedule_id."""

        raise NotImplementedError

    def get_by_id(self, schedule_id: int) -> Optional[ScheduleSlot]:
        raise NotImplementedError

    def delete(self, *, schedule_id: int) -> bool:
        raise NotImplementedError

    def list_for_employee_on_date(self, *, employee_id: int, slot_date: date) -> Sequence[ScheduleSlot]:
        raise NotImplementedError

    def list_range(self, *, start: date, end: date, employee_id: Optional[int] = None) -> Sequence[ScheduleSlot]:
        """Slots with start <= slot_date <= end, ordered by date then start."""

        raise NotImplementedError

    def list_assigned_on_date(self, *, slot_date: date) -> Sequence[ScheduleSlot]:
        raise NotImplementedError

    def set_assignee(self, *, schedule_id: int, employee_id: int, expected_employee_id: Optional[int]) -> bool:
        """Conditional update: only succeeds if the current assignee is still `expected_employee_id`."""

        raise NotImplementedError
