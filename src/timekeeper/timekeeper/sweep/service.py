from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from ..attendance.model import AttendanceEntry, MarkedAbsent, MarkedOnLeave
from ..attendance.repository import AttendanceRepository
from ..common.clock import Clock
from ..core.enums import AttendanceStatus
from ..leaves.repository import LeaveRepository
from ..schedules.model import ScheduleSlot
from ..schedules.repository import ScheduleRepository

logger = logging.getLogger(__name__)

ABSENT = "absent"
ON_LEAVE = "on_leave"
ALREADY_MARKED = "already_marked"
CLOCKED_IN = "clocked_in"


@dataclass(frozen=True)
class SweepSummary:
    date: date
    total_slots: int = 0
    absences_marked: int = 0
    on_leave_marked: int = 0
    already_marked: int = 0
    clocked_in: int = 0
    failures: int = 0

    @property
    def message(self) -> str:
        return f"Absence marking completed: {self.absences_marked} new absence(s) marked"

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "totalSlots": self.total_slots,
            "absencesMarked": self.absences_marked,
            "onLeaveMarked": self.on_leave_marked,
            "alreadyMarked": self.already_marked,
            "clockedIn": self.clocked_in,
            "failures": self.failures,
            "message": self.message,
        }


class AbsenceSweepService:
    """Nightly reconciliation of assigned slots that were never clocked into.

    Only creates entries that do not exist yet, so running it again for the
    same day changes nothing. A slot that fails is logged and counted; the
    remaining slots are still processed.
    """

    def __init__(
        self,
        schedules: ScheduleRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        clock: Clock,
    ):
        self._schedules = schedules
        self._attendance = attendance
        self._leaves = leaves
        self._clock = clock

    def run(self, today: Optional[date] = None) -> SweepSummary:
        today = today or self._clock.today()
        logger.info("Running absence sweep for %s", today.isoformat())

        slots = [s for s in self._schedules.list_assigned_on_date(slot_date=today) if s.is_assigned]
        counts = {ABSENT: 0, ON_LEAVE: 0, ALREADY_MARKED: 0, CLOCKED_IN: 0}
        failures = 0

        for slot in slots:
            try:
                counts[self._process_slot(slot, today)] += 1
            except Exception:
                failures += 1
                logger.exception(
                    "Absence sweep failed for schedule %s (employee %s)",
                    slot.schedule_id,
                    slot.assigned_employee_id,
                )

        summary = SweepSummary(
            date=today,
            total_slots=len(slots),
            absences_marked=counts[ABSENT],
            on_leave_marked=counts[ON_LEAVE],
            already_marked=counts[ALREADY_MARKED],
            clocked_in=counts[CLOCKED_IN],
            failures=failures,
        )
        logger.info("Absence sweep summary: %s", summary.to_dict())
        return summary

    def _process_slot(self, slot: ScheduleSlot, today: date) -> str:
        employee_id = int(slot.assigned_employee_id)
        existing = self._attendance.get_for_employee_and_date(employee_id, today)
        on_leave = self._leaves.find_approved_covering(employee_id=employee_id, day=today) is not None

        if existing:
            if isinstance(existing.phase, (MarkedAbsent, MarkedOnLeave)):
                return ALREADY_MARKED
            return CLOCKED_IN

        if on_leave:
            marker = self._marker(slot, today, MarkedOnLeave(), AttendanceStatus.ON_LEAVE)
            outcome = ON_LEAVE
        else:
            marker = self._marker(slot, today, MarkedAbsent(), AttendanceStatus.ABSENT)
            outcome = ABSENT

        # A live time-in may win the race for the same day.
        if self._attendance.create_marker(marker) is None:
            logger.info("Employee %s already has an entry for %s", employee_id, today.isoformat())
            return ALREADY_MARKED

        logger.info("Marked employee %s as %s for %s", employee_id, marker.status.value, today.isoformat())
        return outcome

    @staticmethod
    def _marker(slot: ScheduleSlot, today: date, phase, status: AttendanceStatus) -> AttendanceEntry:
        return AttendanceEntry(
            attendance_id=0,
            employee_id=int(slot.assigned_employee_id),
            work_date=today,
            phase=phase,
            status=status,
            schedule_id=slot.schedule_id,
            scheduled_start=slot.start,
            scheduled_end=slot.end,
        )
