from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveCategory, LeaveStatus
from .model import ApprovalOutcome, LeaveBalance, LeaveRequest


class LeaveRepository(Protocol):
    # Leave requests
    def create_request(self, request: LeaveRequest) -> int:
        raise NotImplementedError

    def get_request(self, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests_page(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[int] = None,
        limit: int,
        offset: int,
    ) -> tuple[Sequence[LeaveRequest], int]:
        """Newest first. Returns (items, total matching)."""

        raise NotImplementedError

    def find_approved_covering(self, *, employee_id: int, day: date) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def decline(self, *, leave_id: int, declined_by: int, reason: str) -> bool:
        """Conditional update: only a PENDING request can be declined."""

        raise NotImplementedError

    # Balances
    def get_balance(self, employee_id: int, category: LeaveCategory) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def list_balances(self, employee_id: int) -> Sequence[LeaveBalance]:
        raise NotImplementedError

    def approve(
        self,
        *,
        leave_id: int,
        approved_by: int,
        days: int,
        decided_at: datetime,
    ) -> ApprovalOutcome:
        """Approve a PENDING request and charge `days` to its balance atomically.

        Raises ConflictError when the request is no longer PENDING and
        ValidationError when the balance no longer covers `days`; nothing is
        written in either case.
        """

        raise NotImplementedError

    def set_beginning(
        self,
        *,
        employee_id: int,
        category: LeaveCategory,
        beginning: float,
        updated_by: int,
        updated_at: datetime,
    ) -> Optional[LeaveBalance]:
        """Reset `beginning` and recompute `remaining`, creating the balance if missing.

        Returns None when `beginning` is below the current availments.
        """

        raise NotImplementedError
