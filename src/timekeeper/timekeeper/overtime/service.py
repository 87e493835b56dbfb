from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from ..common.clock import Clock
from ..common.pagination import Page, PageRequest
from ..common.validators import require_max_length, require_non_empty, require_text
from ..core.constants import DEFAULT_PAGE_SIZE, OVERTIME_REASON_MAX_LENGTH
from ..core.enums import DeviationType, ReviewStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..users.service import AuthService
from .model import OvertimeRecord, OvertimeStatistics
from .repository import OvertimeRepository

logger = logging.getLogger(__name__)


def _parse_enum(enum_cls, value, field_name: str):
    if value in (None, ""):
        return None
    for member in enum_cls:
        if str(value).lower() == member.value.lower():
            return member
    allowed = ", ".join(m.value for m in enum_cls)
    raise ValidationError(f"{field_name} must be one of: {allowed}")


class OvertimeReviewService:
    """Admin review of overtime/undertime records; each record is reviewed once."""

    def __init__(self, overtime: OvertimeRepository, auth: AuthService, clock: Clock):
        self._overtime = overtime
        self._auth = auth
        self._clock = clock

    def list(self, *, status=None, type=None, page=1, page_size=DEFAULT_PAGE_SIZE) -> Page[OvertimeRecord]:
        paging = PageRequest.of(page, page_size)
        items, total = self._overtime.list_page(
            status=_parse_enum(ReviewStatus, status, "Status"),
            type=_parse_enum(DeviationType, type, "Type"),
            limit=paging.page_size,
            offset=paging.offset,
        )
        return Page(items=list(items), total=total, page=paging.page, page_size=paging.page_size)

    def approve(self, *, record_id: int, reviewer_id: int, notes: Optional[str] = None) -> OvertimeRecord:
        notes = require_text(notes, "Review notes").strip() or None
        return self._review(record_id, reviewer_id, ReviewStatus.APPROVED, notes)

    def decline(self, *, record_id: int, reviewer_id: int, notes: str) -> OvertimeRecord:
        notes = require_non_empty(notes, "Review notes")
        return self._review(record_id, reviewer_id, ReviewStatus.DECLINED, notes)

    def statistics(self, *, start: Optional[date] = None, end: Optional[date] = None) -> OvertimeStatistics:
        if start and end and end < start:
            raise ValidationError("End date must be on or after the start date")

        by_status = {s.value: 0 for s in ReviewStatus}
        by_type = {t.value: 0 for t in DeviationType}
        approved_minutes = {t.value: 0 for t in DeviationType}
        records = self._overtime.list_between(start=start, end=end)
        for r in records:
            by_status[r.status.value] += 1
            by_type[r.type.value] += 1
            if r.status == ReviewStatus.APPROVED:
                approved_minutes[r.type.value] += int(r.minutes)

        return OvertimeStatistics(
            by_status=by_status,
            by_type=by_type,
            approved_minutes=approved_minutes,
            total=len(records),
        )

    def _review(
        self,
        record_id: int,
        reviewer_id: int,
        status: ReviewStatus,
        notes: Optional[str],
    ) -> OvertimeRecord:
        admin = self._auth.require_admin(reviewer_id)
        require_max_length(notes, "Review notes", OVERTIME_REASON_MAX_LENGTH)

        record = self._overtime.get_by_id(int(record_id))
        if not record:
            raise NotFoundError("Overtime record not found")
        if record.status != ReviewStatus.PENDING:
            raise ValidationError("Overtime record already reviewed")

        now = self._clock.now()
        ok = self._overtime.review(
            record_id=record.record_id,
            status=status,
            reviewed_by=admin.user_id,
            reviewed_at=now,
            review_notes=notes,
        )
        if not ok:
            raise ValidationError("Overtime record already reviewed")

        logger.info(
            "%s record %s %s by admin %s",
            record.type.value,
            record.record_id,
            status.value.lower(),
            admin.user_id,
        )
        return replace(record, status=status, reviewed_by=admin.user_id, reviewed_at=now, review_notes=notes)
