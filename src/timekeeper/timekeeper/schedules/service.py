from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..common.clock import Clock
from ..common.datetime_utils import intervals_overlap, month_bounds
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..notifications.notifier import NotificationKind, Notifier
from ..users.service import AuthService
from .model import MonthSchedule, ScheduleSlot
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


class ScheduleService:
    """Schedule registry: slots per day, each bound to at most one employee.

    An employee never holds two slots on the same date whose [start, end)
    intervals intersect. Reassigning a slot to its current assignee is
    rejected as an overlap with itself.
    """

    def __init__(
        self,
        schedules: ScheduleRepository,
        auth: AuthService,
        clock: Clock,
        notifier: Optional[Notifier] = None,
    ):
        self._schedules = schedules
        self._auth = auth
        self._clock = clock
        self._notifier = notifier

    def create_slot(self, *, slot_date: date, start: datetime, end: datetime, created_by: int) -> ScheduleSlot:
        self._auth.require_admin(created_by)

        if start >= end:
            raise ValidationError("Schedule start must be before its end")
        if start.date() != slot_date:
            raise ValidationError("Schedule start must fall on the schedule date")

        schedule_id = self._schedules.create(slot_date=slot_date, start=start, end=end, created_by=int(created_by))
        logger.info("Schedule slot %s created for %s by %s", schedule_id, slot_date, created_by)
        return ScheduleSlot(
            schedule_id=schedule_id,
            slot_date=slot_date,
            start=start,
            end=end,
            created_by=int(created_by),
        )

    def assign(self, *, schedule_id: int, employee_id: int) -> ScheduleSlot:
        slot = self._get_slot(schedule_id)
        if slot.is_assigned and slot.assigned_employee_id != int(employee_id):
            raise ConflictError("Schedule slot is already assigned, reassign it instead")
        return self._set_assignee(slot, employee_id)

    def reassign(self, *, schedule_id: int, employee_id: int) -> ScheduleSlot:
        slot = self._get_slot(schedule_id)
        if not slot.is_assigned:
            raise ValidationError("Schedule slot has no assigned employee to replace")
        return self._set_assignee(slot, employee_id)

    def delete_slot(self, *, schedule_id: int) -> None:
        if not self._schedules.delete(schedule_id=int(schedule_id)):
            raise NotFoundError("Schedule slot not found")
        logger.info("Schedule slot %s deleted", schedule_id)

    def find_slots_in_month(self, *, month: int, year: int) -> MonthSchedule:
        try:
            start, end = month_bounds(int(month), int(year))
        except (TypeError, ValueError):
            raise ValidationError("Invalid month or year")
        slots = list(self._schedules.list_range(start=start, end=end))
        return MonthSchedule(schedules=slots, period_start=start, period_end=end)

    def find_slot_for(self, *, employee_id: int, day: date) -> Optional[ScheduleSlot]:
        slots = self._schedules.list_for_employee_on_date(employee_id=int(employee_id), slot_date=day)
        if not slots:
            return None
        return min(slots, key=lambda s: s.start)

    def find_today_slot_for(self, employee_id: int) -> Optional[ScheduleSlot]:
        return self.find_slot_for(employee_id=employee_id, day=self._clock.today())

    def _get_slot(self, schedule_id: int) -> ScheduleSlot:
        slot = self._schedules.get_by_id(int(schedule_id))
        if not slot:
            raise NotFoundError("Schedule slot not found")
        return slot

    def _ensure_no_overlap(self, slot: ScheduleSlot, employee_id: int) -> None:
        existing = self._schedules.list_for_employee_on_date(employee_id=employee_id, slot_date=slot.slot_date)
        for other in existing:
            if intervals_overlap(slot.start, slot.end, other.start, other.end):
                raise ConflictError(
                    f"Employee already has a conflicting schedule on {slot.slot_date.isoformat()} "
                    f"({other.start:%H:%M}-{other.end:%H:%M})"
                )

    def _set_assignee(self, slot: ScheduleSlot, employee_id: int) -> ScheduleSlot:
        employee = self._auth.require_employee(employee_id)
        self._ensure_no_overlap(slot, employee.user_id)

        ok = self._schedules.set_assignee(
            schedule_id=slot.schedule_id,
            employee_id=employee.user_id,
            expected_employee_id=slot.assigned_employee_id,
        )
        if not ok:
            raise ConflictError("Schedule slot was changed by another request, please retry")

        logger.info("Schedule slot %s assigned to employee %s", slot.schedule_id, employee.user_id)
        if self._notifier:
            delivered = self._notifier.notify(
                [employee.email],
                NotificationKind.SCHEDULE_ASSIGNED,
                {
                    "employee_name": employee.full_name,
                    "date": slot.slot_date.isoformat(),
                    "start": slot.start.strftime("%H:%M"),
                    "end": slot.end.strftime("%H:%M"),
                },
            )
            if not delivered:
                logger.warning("Schedule notification to employee %s was not delivered", employee.user_id)

        return ScheduleSlot(
            schedule_id=slot.schedule_id,
            slot_date=slot.slot_date,
            start=slot.start,
            end=slot.end,
            created_by=slot.created_by,
            assigned_employee_id=employee.user_id,
        )
