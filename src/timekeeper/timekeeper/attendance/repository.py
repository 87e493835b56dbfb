from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceEntry, AttendanceHistoryEntry


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceEntry]:
        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceEntry]:
        raise NotImplementedError

    def create_time_in(
        self,
        *,
        entry: AttendanceEntry,
        history: AttendanceHistoryEntry,
        consume_grace_period: bool,
    ) -> Optional[AttendanceEntry]:
        """Insert the day's entry, its history row and (optionally) decrement the
        employee's grace counter in one transaction.

        Returns the stored entry, or None when an entry for that day already exists.
        """

        raise NotImplementedError

    def save_transition(
        self,
        *,
        entry: AttendanceEntry,
        history: AttendanceHistoryEntry,
        expected_version: int,
    ) -> bool:
        """Update the entry and append its history row in one transaction.

        Only succeeds while the stored version still equals `expected_version`.
        """

        raise NotImplementedError

    def create_marker(self, entry: AttendanceEntry) -> Optional[AttendanceEntry]:
        """Insert an Absent/OnLeave entry; None when the day already has an entry."""

        raise NotImplementedError

    def list_history(self, employee_id: int, *, limit: int) -> Sequence[AttendanceHistoryEntry]:
        raise NotImplementedError

    def list_range(self, employee_id: int, *, start: date, end: date) -> Sequence[AttendanceEntry]:
        raise NotImplementedError
