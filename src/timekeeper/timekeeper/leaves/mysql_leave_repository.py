from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveCategory, LeaveStatus, LeaveType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import ApprovalOutcome, LeaveBalance, LeaveRequest
from .repository import LeaveRepository

_REQUEST_COLUMNS = """
    leave_id, employee_id, reason, start_date, end_date, number_of_days, leave_type,
    leave_category, status, approved_by, declined_by, decline_reason, days_approved, created_at
"""

_BALANCE_COLUMNS = """
    employee_id, category, beginning, availments, remaining, active, reserved, updated_by, updated_at
"""


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        reason=r["reason"],
        start_date=r["start_date"],
        end_date=r["end_date"],
        number_of_days=int(r["number_of_days"]),
        leave_type=LeaveType(r["leave_type"]),
        leave_category=LeaveCategory(r["leave_category"]),
        status=LeaveStatus(r["status"]),
        created_at=r["created_at"],
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        declined_by=int(r["declined_by"]) if r.get("declined_by") is not None else None,
        decline_reason=r.get("decline_reason"),
        days_approved=int(r.get("days_approved") or 0),
    )


def _to_balance(r: dict) -> LeaveBalance:
    return LeaveBalance(
        employee_id=int(r["employee_id"]),
        category=LeaveCategory(r["category"]),
        beginning=as_float(r["beginning"]),
        availments=as_float(r["availments"]),
        remaining=as_float(r["remaining"]),
        active=as_float(r["active"]),
        reserved=as_float(r["reserved"]),
        updated_by=int(r["updated_by"]) if r.get("updated_by") is not None else None,
        updated_at=r.get("updated_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Leave requests --------
    def create_request(self, request: LeaveRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    employee_id, reason, start_date, end_date, number_of_days,
                    leave_type, leave_category, status, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    request.employee_id,
                    request.reason,
                    request.start_date,
                    request.end_date,
                    int(request.number_of_days),
                    request.leave_type.value,
                    request.leave_category.value,
                    request.status.value,
                    request.created_at,
                ),
            )
            return int(cur.lastrowid)

    def get_request(self, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_REQUEST_COLUMNS} FROM leave_requests WHERE leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_requests_page(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[int] = None,
        limit: int,
        offset: int,
    ) -> tuple[Sequence[LeaveRequest], int]:
        where = []
        params: list = []
        if status is not None:
            where.append("status=%s")
            params.append(status.value)
        if employee_id is not None:
            where.append("employee_id=%s")
            params.append(int(employee_id))
        where_sql = ("WHERE " + " AND ".join(where)) if where else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM leave_requests {where_sql}", tuple(params))
            total = int((fetchone(cur) or {}).get("total") or 0)
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM leave_requests
                {where_sql}
                ORDER BY created_at DESC, leave_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            return [_to_request(r) for r in fetchall(cur)], total

    def find_approved_covering(self, *, employee_id: int, day: date) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM leave_requests
                WHERE employee_id=%s AND status=%s AND start_date <= %s AND end_date >= %s
                ORDER BY start_date ASC
                LIMIT 1
                """,
                (int(employee_id), LeaveStatus.APPROVED.value, day, day),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def decline(self, *, leave_id: int, declined_by: int, reason: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, declined_by=%s, decline_reason=%s
                WHERE leave_id=%s AND status=%s
                """,
                (
                    LeaveStatus.DECLINED.value,
                    int(declined_by),
                    reason,
                    int(leave_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    # -------- Balances --------
    def get_balance(self, employee_id: int, category: LeaveCategory) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_BALANCE_COLUMNS} FROM leave_balances WHERE employee_id=%s AND category=%s",
                (int(employee_id), category.value),
            )
            r = fetchone(cur)
            return _to_balance(r) if r else None

    def list_balances(self, employee_id: int) -> Sequence[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_BALANCE_COLUMNS} FROM leave_balances WHERE employee_id=%s ORDER BY category",
                (int(employee_id),),
            )
            return [_to_balance(r) for r in fetchall(cur)]

    def approve(
        self,
        *,
        leave_id: int,
        approved_by: int,
        days: int,
        decided_at: datetime,
    ) -> ApprovalOutcome:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_REQUEST_COLUMNS} FROM leave_requests WHERE leave_id=%s FOR UPDATE",
                (int(leave_id),),
            )
            r = fetchone(cur)
            if not r:
                raise NotFoundError("Leave request not found")
            request = _to_request(r)
            if request.status != LeaveStatus.PENDING:
                raise ConflictError("Leave request already processed")

            cur.execute(
                "INSERT IGNORE INTO leave_balances(employee_id, category) VALUES(%s,%s)",
                (request.employee_id, request.leave_category.value),
            )
            cur.execute(
                f"SELECT {_BALANCE_COLUMNS} FROM leave_balances WHERE employee_id=%s AND category=%s FOR UPDATE",
                (request.employee_id, request.leave_category.value),
            )
            balance = _to_balance(fetchone(cur))
            if balance.remaining < days:
                raise ValidationError(
                    f"Insufficient {request.leave_category.value} balance: "
                    f"{balance.remaining:g} day(s) remaining, {days} requested"
                )

            cur.execute(
                """
                UPDATE leave_balances
                SET availments = availments + %s,
                    remaining = remaining - %s,
                    active = active + %s,
                    updated_by=%s, updated_at=%s
                WHERE employee_id=%s AND category=%s
                """,
                (
                    days,
                    days,
                    days,
                    int(approved_by),
                    decided_at,
                    request.employee_id,
                    request.leave_category.value,
                ),
            )
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approved_by=%s, days_approved=%s, number_of_days=%s
                WHERE leave_id=%s AND status=%s
                """,
                (
                    LeaveStatus.APPROVED.value,
                    int(approved_by),
                    int(days),
                    int(days),
                    int(leave_id),
                    LeaveStatus.PENDING.value,
                ),
            )

            cur.execute(f"SELECT {_REQUEST_COLUMNS} FROM leave_requests WHERE leave_id=%s", (int(leave_id),))
            approved = _to_request(fetchone(cur))
            cur.execute(
                f"SELECT {_BALANCE_COLUMNS} FROM leave_balances WHERE employee_id=%s AND category=%s",
                (request.employee_id, request.leave_category.value),
            )
            return ApprovalOutcome(request=approved, balance=_to_balance(fetchone(cur)))

    def set_beginning(
        self,
        *,
        employee_id: int,
        category: LeaveCategory,
        beginning: float,
        updated_by: int,
        updated_at: datetime,
    ) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO leave_balances(employee_id, category) VALUES(%s,%s)",
                (int(employee_id), category.value),
            )
            cur.execute(
                f"SELECT {_BALANCE_COLUMNS} FROM leave_balances WHERE employee_id=%s AND category=%s FOR UPDATE",
                (int(employee_id), category.value),
            )
            if _to_balance(fetchone(cur)).availments > beginning:
                return None
            cur.execute(
                """
                UPDATE leave_balances
                SET beginning=%s, remaining = %s - availments, updated_by=%s, updated_at=%s
                WHERE employee_id=%s AND category=%s
                """,
                (beginning, beginning, int(updated_by), updated_at, int(employee_id), category.value),
            )
            cur.execute(
                f"SELECT {_BALANCE_COLUMNS} FROM leave_balances WHERE employee_id=%s AND category=%s",
                (int(employee_id), category.value),
            )
            return _to_balance(fetchone(cur))
