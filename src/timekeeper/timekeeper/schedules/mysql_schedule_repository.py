from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ScheduleSlot
from .repository import ScheduleRepository

_COLUMNS = "schedule_id, slot_date, start_at, end_at, assigned_employee_id, created_by"


def _to_slot(r: dict) -> ScheduleSlot:
    return ScheduleSlot(
        schedule_id=int(r["schedule_id"]),
        slot_date=r["slot_date"],
        start=r["start_at"],
        end=r["end_at"],
        created_by=int(r["created_by"]),
        assigned_employee_id=int(r["assigned_employee_id"]) if r.get("assigned_employee_id") is not None else None,
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, slot_date: date, start: datetime, end: datetime, created_by: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO schedule_slots(slot_date, start_at, end_at, created_by)
                VALUES(%s,%s,%s,%s)
                """,
                (slot_date, start, end, int(created_by)),
            )
            return int(cur.lastrowid)

    def get_by_id(self, schedule_id: int) -> Optional[ScheduleSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM schedule_slots WHERE schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return _to_slot(r) if r else None

    def delete(self, *, schedule_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM schedule_slots WHERE schedule_id=%s", (int(schedule_id),))
            return cur.rowcount > 0

    def list_for_employee_on_date(self, *, employee_id: int, slot_date: date) -> Sequence[ScheduleSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM schedule_slots
                WHERE assigned_employee_id=%s AND slot_date=%s
                ORDER BY start_at ASC
                """,
                (int(employee_id), slot_date),
            )
            return [_to_slot(r) for r in fetchall(cur)]

    def list_range(self, *, start: date, end: date, employee_id: Optional[int] = None) -> Sequence[ScheduleSlot]:
        clauses = ["slot_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if employee_id is not None:
            clauses.append("assigned_employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM schedule_slots
                WHERE {where}
                ORDER BY slot_date ASC, start_at ASC
                """,
                tuple(params),
            )
            return [_to_slot(r) for r in fetchall(cur)]

    def list_assigned_on_date(self, *, slot_date: date) -> Sequence[ScheduleSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM schedule_slots
                WHERE slot_date=%s AND assigned_employee_id IS NOT NULL
                ORDER BY start_at ASC
                """,
                (slot_date,),
            )
            return [_to_slot(r) for r in fetchall(cur)]

    def set_assignee(self, *, schedule_id: int, employee_id: int, expected_employee_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE schedule_slots
                SET assigned_employee_id=%s
                WHERE schedule_id=%s AND assigned_employee_id <=> %s
                """,
                (int(employee_id), int(schedule_id), expected_employee_id),
            )
            return cur.rowcount > 0
