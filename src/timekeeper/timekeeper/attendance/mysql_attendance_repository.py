from __future__ import annotations

import json
from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceAction, AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import (
    AttendanceEntry,
    AttendanceHistoryEntry,
    Completed,
    DayPhase,
    MarkedAbsent,
    MarkedOnLeave,
    OnBreak,
    Working,
)
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, employee_id, work_date, schedule_id, scheduled_start, scheduled_end,
    time_in, time_out, on_break, break_start, break_taken, break_time, total_hours,
    is_late, late_minutes, grace_period_used, is_overtime, overtime_minutes,
    is_undertime, undertime_minutes, is_absent, status, version
"""


def _to_phase(r: dict) -> DayPhase:
    if r.get("time_out") is not None:
        return Completed(time_out=r["time_out"])
    if r["on_break"]:
        return OnBreak(since=r["break_start"])
    if r["is_absent"]:
        return MarkedAbsent()
    if r["status"] == AttendanceStatus.ON_LEAVE.value and r.get("time_in") is None:
        return MarkedOnLeave()
    return Working(break_used=bool(r["break_taken"]))


def _to_entry(r: dict) -> AttendanceEntry:
    return AttendanceEntry(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        phase=_to_phase(r),
        status=AttendanceStatus(r["status"]),
        schedule_id=int(r["schedule_id"]) if r.get("schedule_id") is not None else None,
        scheduled_start=r.get("scheduled_start"),
        scheduled_end=r.get("scheduled_end"),
        time_in=r.get("time_in"),
        break_time=as_float(r.get("break_time")),
        total_hours=as_float(r.get("total_hours")),
        is_late=bool(r["is_late"]),
        late_minutes=int(r["late_minutes"]),
        grace_period_used=bool(r["grace_period_used"]),
        is_overtime=bool(r["is_overtime"]),
        overtime_minutes=int(r["overtime_minutes"]),
        is_undertime=bool(r["is_undertime"]),
        undertime_minutes=int(r["undertime_minutes"]),
        version=int(r["version"]),
    )


def _to_history(r: dict) -> AttendanceHistoryEntry:
    details = r.get("details") or {}
    if isinstance(details, (bytes, str)):
        details = json.loads(details)
    return AttendanceHistoryEntry(
        history_id=int(r["history_id"]),
        employee_id=int(r["employee_id"]),
        attendance_id=int(r["attendance_id"]),
        action=AttendanceAction(r["action"]),
        occurred_at=r["occurred_at"],
        details=details,
        ip_address=r.get("ip_address"),
        user_agent=r.get("user_agent"),
    )


def _entry_values(e: AttendanceEntry) -> tuple:
    return (
        e.schedule_id,
        e.scheduled_start,
        e.scheduled_end,
        e.time_in,
        e.time_out,
        int(e.on_break),
        e.break_start,
        int(e.break_taken),
        e.break_time,
        e.total_hours,
        int(e.is_late),
        int(e.late_minutes),
        int(e.grace_period_used),
        int(e.is_overtime),
        int(e.overtime_minutes),
        int(e.is_undertime),
        int(e.undertime_minutes),
        int(e.is_absent),
        e.status.value,
    )


_INSERT_ENTRY = """
    INSERT INTO attendance_entries(
        employee_id, work_date, schedule_id, scheduled_start, scheduled_end,
        time_in, time_out, on_break, break_start, break_taken, break_time, total_hours,
        is_late, late_minutes, grace_period_used, is_overtime, overtime_minutes,
        is_undertime, undertime_minutes, is_absent, status, version
    )
    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,1)
"""

_INSERT_HISTORY = """
    INSERT INTO attendance_history(employee_id, attendance_id, action, occurred_at, details, ip_address, user_agent)
    VALUES(%s,%s,%s,%s,%s,%s,%s)
"""


def _history_values(h: AttendanceHistoryEntry, attendance_id: int) -> tuple:
    return (
        h.employee_id,
        int(attendance_id),
        h.action.value,
        h.occurred_at,
        json.dumps(h.details, default=str),
        h.ip_address,
        (h.user_agent or "")[:255] or None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_entries WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_entries WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def create_time_in(
        self,
        *,
        entry: AttendanceEntry,
        history: AttendanceHistoryEntry,
        consume_grace_period: bool,
    ) -> Optional[AttendanceEntry]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(_INSERT_ENTRY, (entry.employee_id, entry.work_date) + _entry_values(entry))
                attendance_id = int(cur.lastrowid)
                cur.execute(_INSERT_HISTORY, _history_values(history, attendance_id))
                if consume_grace_period:
                    cur.execute(
                        """
                        UPDATE users
                        SET late_grace_period_count = late_grace_period_count - 1
                        WHERE user_id=%s AND late_grace_period_count > 0
                        """,
                        (entry.employee_id,),
                    )
        except IntegrityError as e:
            if is_duplicate_key(e):
                return None
            raise
        return replace(entry, attendance_id=attendance_id, version=1)

    def save_transition(
        self,
        *,
        entry: AttendanceEntry,
        history: AttendanceHistoryEntry,
        expected_version: int,
    ) -> bool:
        with db_cursor(self._conn_factory) as (conn, cur):
            cur.execute(
                """
                UPDATE attendance_entries
                SET schedule_id=%s, scheduled_start=%s, scheduled_end=%s, time_in=%s, time_out=%s,
                    on_break=%s, break_start=%s, break_taken=%s, break_time=%s, total_hours=%s,
                    is_late=%s, late_minutes=%s, grace_period_used=%s, is_overtime=%s, overtime_minutes=%s,
                    is_undertime=%s, undertime_minutes=%s, is_absent=%s, status=%s, version=version + 1
                WHERE attendance_id=%s AND version=%s
                """,
                _entry_values(entry) + (entry.attendance_id, int(expected_version)),
            )
            if cur.rowcount == 0:
                conn.rollback()
                return False
            cur.execute(_INSERT_HISTORY, _history_values(history, entry.attendance_id))
            return True

    def create_marker(self, entry: AttendanceEntry) -> Optional[AttendanceEntry]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(_INSERT_ENTRY, (entry.employee_id, entry.work_date) + _entry_values(entry))
                attendance_id = int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                return None
            raise
        return replace(entry, attendance_id=attendance_id, version=1)

    def list_history(self, employee_id: int, *, limit: int) -> Sequence[AttendanceHistoryEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT history_id, employee_id, attendance_id, action, occurred_at, details, ip_address, user_agent
                FROM attendance_history
                WHERE employee_id=%s
                ORDER BY occurred_at DESC, history_id DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_to_history(r) for r in fetchall(cur)]

    def list_range(self, employee_id: int, *, start: date, end: date) -> Sequence[AttendanceEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_entries
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (int(employee_id), start, end),
            )
            return [_to_entry(r) for r in fetchall(cur)]
