from __future__ import annotations

import logging
from typing import Optional

from ..common.clock import Clock
from ..common.datetime_utils import inclusive_day_count
from ..common.validators import require_non_empty
from ..core.enums import LeaveCategory, LeaveStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..notifications.notifier import NotificationKind, Notifier
from ..users.service import AuthService
from .model import ApprovalOutcome, LeaveBalance, LeaveRequest, parse_category
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveBalanceService:
    """Approval, decline and admin edits: the only writers of leave balances."""

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

    def approve(self, *, leave_id: int, approver_id: int) -> ApprovalOutcome:
        admin = self._auth.require_admin(approver_id)
        request = self._get_pending(leave_id)

        days = inclusive_day_count(request.start_date, request.end_date)
        balance = self._leaves.get_balance(request.employee_id, request.leave_category)
        remaining = balance.remaining if balance else 0.0
        if remaining < days:
            raise ValidationError(
                f"Insufficient {request.leave_category.value} balance: "
                f"{remaining:g} day(s) remaining, {days} requested"
            )

        # Status and balance are re-checked under lock by the repository.
        outcome = self._leaves.approve(
            leave_id=request.leave_id,
            approved_by=admin.user_id,
            days=days,
            decided_at=self._clock.now(),
        )
        logger.info(
            "Leave request %s approved by %s: %s day(s) of %s",
            request.leave_id,
            admin.user_id,
            days,
            request.leave_category.value,
        )
        self._notify_decision(outcome.request)
        return outcome

    def decline(self, *, leave_id: int, decliner_id: int, reason: str) -> LeaveRequest:
        admin = self._auth.require_admin(decliner_id)
        reason = require_non_empty(reason, "Decline reason")
        request = self._get_pending(leave_id)

        if not self._leaves.decline(leave_id=request.leave_id, declined_by=admin.user_id, reason=reason):
            raise ConflictError("Leave request already processed")

        logger.info("Leave request %s declined by %s", request.leave_id, admin.user_id)
        declined = self._leaves.get_request(request.leave_id)
        self._notify_decision(declined)
        return declined

    def edit_beginning_balance(
        self,
        *,
        employee_id: int,
        category,
        beginning,
        admin_id: int,
    ) -> LeaveBalance:
        admin = self._auth.require_admin(admin_id)
        employee = self._auth.require_employee(employee_id)
        category = parse_category(category)
        try:
            beginning = float(beginning)
        except (TypeError, ValueError):
            raise ValidationError("Beginning balance must be a number")
        if beginning < 0:
            raise ValidationError("Beginning balance cannot be negative")

        current = self._leaves.get_balance(employee.user_id, category)
        availments = current.availments if current else 0.0
        if beginning < availments:
            raise ValidationError(
                f"Beginning balance cannot be lower than the {availments:g} day(s) already availed"
            )

        updated = self._leaves.set_beginning(
            employee_id=employee.user_id,
            category=category,
            beginning=beginning,
            updated_by=admin.user_id,
            updated_at=self._clock.now(),
        )
        if updated is None:
            raise ValidationError("Beginning balance cannot be lower than the days already availed")

        logger.info(
            "%s beginning balance of employee %s set to %g by %s",
            category.value,
            employee.user_id,
            beginning,
            admin.user_id,
        )
        return updated

    def balances(self, employee_id: int) -> dict[LeaveCategory, LeaveBalance]:
        """Snapshot of both categories; a category never written reads as zeros."""

        employee = self._auth.require_employee(employee_id)
        stored = {b.category: b for b in self._leaves.list_balances(employee.user_id)}
        return {c: stored.get(c) or LeaveBalance(employee_id=employee.user_id, category=c) for c in LeaveCategory}

    def _get_pending(self, leave_id: int) -> LeaveRequest:
        request = self._leaves.get_request(int(leave_id))
        if not request:
            raise NotFoundError("Leave request not found")
        if request.status != LeaveStatus.PENDING:
            raise ConflictError("Leave request already processed")
        return request

    def _notify_decision(self, request: LeaveRequest) -> None:
        if not self._notifier:
            return
        employee = self._auth.find_user(request.employee_id)
        if not employee:
            return
        delivered = self._notifier.notify(
            [employee.email],
            NotificationKind.LEAVE_REQUEST_DECIDED,
            {
                "employee_name": employee.full_name,
                "status": request.status.value.lower(),
                "start_date": request.start_date.isoformat(),
                "end_date": request.end_date.isoformat(),
                "category": request.leave_category.value,
                "decline_reason": request.decline_reason or "-",
            },
        )
        if not delivered:
            logger.warning("Leave decision notice for request %s was not delivered", request.leave_id)
