from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from ..common.clock import Clock
from ..common.datetime_utils import inclusive_day_count
from ..common.pagination import Page, PageRequest
from ..common.validators import require_length_between
from ..core.constants import DEFAULT_PAGE_SIZE, LEAVE_REASON_MAX_LENGTH, LEAVE_REASON_MIN_LENGTH
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import ValidationError
from ..notifications.notifier import NotificationKind, Notifier
from ..users.service import AuthService
from .model import LeaveRequest, parse_category
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveRequestService:
    """Leave request intake and listing.

    Admins are told about new requests best-effort: a failed notice is logged
    and the request stays submitted.
    """

    def __init__(
        self,
        leaves: LeaveRepository,
        auth: AuthService,
        clock: Clock,
        notifier: Optional[Notifier] = None,
    ):
        self._leaves = leaves
        self._auth = auth
        self._clock = clock
        self._notifier = notifier

    def submit(
        self,
        *,
        employee_id: int,
        reason: str,
        start_date: date,
        end_date: date,
        category,
    ) -> LeaveRequest:
        employee = self._auth.require_employee(employee_id)
        reason = require_length_between(reason, "Reason", LEAVE_REASON_MIN_LENGTH, LEAVE_REASON_MAX_LENGTH)
        category = parse_category(category)

        today = self._clock.today()
        if start_date <= today:
            raise ValidationError("Leave must start after today")
        if end_date < start_date:
            raise ValidationError("End date must be on or after the start date")

        request = LeaveRequest(
            leave_id=0,
            employee_id=employee.user_id,
            reason=reason,
            start_date=start_date,
            end_date=end_date,
            number_of_days=inclusive_day_count(start_date, end_date),
            leave_type=LeaveType.SINGLE if start_date == end_date else LeaveType.MULTI,
            leave_category=category,
            status=LeaveStatus.PENDING,
            created_at=self._clock.now(),
        )
        leave_id = self._leaves.create_request(request)
        request = replace(request, leave_id=leave_id)
        logger.info(
            "Leave request %s submitted by employee %s (%s, %s day(s))",
            leave_id,
            employee.user_id,
            category.value,
            request.number_of_days,
        )

        if self._notifier:
            delivered = self._notifier.notify(
                self._auth.admin_recipients(),
                NotificationKind.LEAVE_REQUEST_SUBMITTED,
                {
                    "employee_name": employee.full_name,
                    "category": category.value,
                    "start_date": start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                    "days": request.number_of_days,
                    "reason": reason,
                },
            )
            if not delivered:
                logger.warning("Admins were not notified of leave request %s", leave_id)
        return request

    def list_requests(
        self,
        *,
        page=1,
        page_size=DEFAULT_PAGE_SIZE,
        status=None,
    ) -> Page[LeaveRequest]:
        paging = PageRequest.of(page, page_size)
        status = self._parse_status(status)
        items, total = self._leaves.list_requests_page(status=status, limit=paging.page_size, offset=paging.offset)
        return Page(items=list(items), total=total, page=paging.page, page_size=paging.page_size)

    def list_for_employee(self, *, employee_id: int, page=1, page_size=DEFAULT_PAGE_SIZE) -> Page[LeaveRequest]:
        employee = self._auth.require_employee(employee_id)
        paging = PageRequest.of(page, page_size)
        items, total = self._leaves.list_requests_page(
            employee_id=employee.user_id,
            limit=paging.page_size,
            offset=paging.offset,
        )
        return Page(items=list(items), total=total, page=paging.page, page_size=paging.page_size)

    @staticmethod
    def _parse_status(value) -> Optional[LeaveStatus]:
        if value in (None, ""):
            return None
        try:
            return LeaveStatus(str(value).upper())
        except ValueError:
            raise ValidationError("Status must be PENDING, APPROVED or DECLINED")
