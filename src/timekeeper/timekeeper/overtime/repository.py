from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import DeviationType, ReviewStatus
from .model import OvertimeRecord


class OvertimeRepository(Protocol):
    def create(self, record: OvertimeRecord) -> Optional[int]:
        """Insert a record; returns None if one already exists for (attendance_id, type)."""

        raise NotImplementedError

    def get_by_id(self, record_id: int) -> Optional[OvertimeRecord]:
        raise NotImplementedError

    def get_by_attendance_and_type(self, *, attendance_id: int, type: DeviationType) -> Optional[OvertimeRecord]:
        raise NotImplementedError

    def list_page(
        self,
        *,
        status: Optional[ReviewStatus] = None,
        type: Optional[DeviationType] = None,
        limit: int,
        offset: int,
    ) -> tuple[Sequence[OvertimeRecord], int]:
        """Newest first. Returns (items, total matching)."""

        raise NotImplementedError

    def list_between(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[OvertimeRecord]:
        raise NotImplementedError

    def list_for_employee(self, *, employee_id: int, start: date, end: date) -> Sequence[OvertimeRecord]:
        raise NotImplementedError

    def review(
        self,
        *,
        record_id: int,
        status: ReviewStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        review_notes: Optional[str] = None,
    ) -> bool:
        """Conditional update: only a Pending record can be reviewed."""

        raise NotImplementedError
