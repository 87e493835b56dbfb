from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import DeviationType, ReviewStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import OvertimeRecord
from .repository import OvertimeRepository

_COLUMNS = """
    record_id, employee_id, attendance_id, type, record_date, scheduled_end, actual_time_out,
    minutes, reason, status, submitted_at, reviewed_by, reviewed_at, review_notes
"""


def _to_record(r: dict) -> OvertimeRecord:
    return OvertimeRecord(
        record_id=int(r["record_id"]),
        employee_id=int(r["employee_id"]),
        attendance_id=int(r["attendance_id"]),
        type=DeviationType(r["type"]),
        record_date=r["record_date"],
        scheduled_end=r["scheduled_end"],
        actual_time_out=r["actual_time_out"],
        minutes=int(r["minutes"]),
        reason=r["reason"],
        status=ReviewStatus(r["status"]),
        submitted_at=r["submitted_at"],
        reviewed_by=int(r["reviewed_by"]) if r.get("reviewed_by") is not None else None,
        reviewed_at=r.get("reviewed_at"),
        review_notes=r.get("review_notes"),
    )


class MySQLOvertimeRepository(OvertimeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, record: OvertimeRecord) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO overtime_records(
                        employee_id, attendance_id, type, record_date, scheduled_end,
                        actual_time_out, minutes, reason, status, submitted_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.employee_id,
                        record.attendance_id,
                        record.type.value,
                        record.record_date,
                        record.scheduled_end,
                        record.actual_time_out,
                        int(record.minutes),
                        record.reason,
                        record.status.value,
                        record.submitted_at,
                    ),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                return None
            raise

    def get_by_id(self, record_id: int) -> Optional[OvertimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM overtime_records WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_by_attendance_and_type(self, *, attendance_id: int, type: DeviationType) -> Optional[OvertimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM overtime_records WHERE attendance_id=%s AND type=%s",
                (int(attendance_id), type.value),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_page(
        self,
        *,
        status: Optional[ReviewStatus] = None,
        type: Optional[DeviationType] = None,
        limit: int,
        offset: int,
    ) -> tuple[Sequence[OvertimeRecord], int]:
        clauses = ["1=1"]
        params: list[object] = []
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if type is not None:
            clauses.append("type=%s")
            params.append(type.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM overtime_records WHERE {where}", tuple(params))
            total = int(fetchone(cur)["total"])
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM overtime_records
                WHERE {where}
                ORDER BY submitted_at DESC, record_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            return [_to_record(r) for r in fetchall(cur)], total

    def list_between(self, *, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[OvertimeRecord]:
        clauses = ["1=1"]
        params: list[object] = []
        if start is not None:
            clauses.append("record_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("record_date <= %s")
            params.append(end)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM overtime_records WHERE {where}", tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_employee(self, *, employee_id: int, start: date, end: date) -> Sequence[OvertimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM overtime_records
                WHERE employee_id=%s AND record_date BETWEEN %s AND %s
                ORDER BY record_date ASC
                """,
                (int(employee_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def review(
        self,
        *,
        record_id: int,
        status: ReviewStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        review_notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE overtime_records
                SET status=%s, reviewed_by=%s, reviewed_at=%s, review_notes=%s
                WHERE record_id=%s AND status=%s
                """,
                (status.value, int(reviewed_by), reviewed_at, review_notes, int(record_id), ReviewStatus.PENDING.value),
            )
            return cur.rowcount > 0
