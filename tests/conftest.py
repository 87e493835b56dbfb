from __future__ import annotations

from datetime import datetime

import pytest
from werkzeug.security import generate_password_hash

from src.timekeeper.timekeeper.common.clock import FixedClock
from src.timekeeper.timekeeper.container import assemble
from src.timekeeper.timekeeper.core.enums import Role
from src.timekeeper.timekeeper.users.model import User
from tests.fakes import (
    ADMIN_ID,
    EMPLOYEE_ID,
    OTHER_EMPLOYEE_ID,
    WORK_DAY,
    InMemoryAttendance,
    InMemoryLeaves,
    InMemoryOvertime,
    InMemorySchedules,
    InMemoryUsers,
    RecordingNotifier,
)


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 11, 10, 8, 0))


@pytest.fixture
def users():
    repo = InMemoryUsers()
    repo.add(
        User(
            user_id=ADMIN_ID,
            full_name="Ada Admin",
            email="admin@example.com",
            password_hash=generate_password_hash("admin-pass"),
            role=Role.ADMIN,
        )
    )
    repo.add(
        User(
            user_id=EMPLOYEE_ID,
            full_name="Juan Dela Cruz",
            email="juan@example.com",
            password_hash=generate_password_hash("juan-pass"),
            role=Role.EMPLOYEE,
        )
    )
    repo.add(
        User(
            user_id=OTHER_EMPLOYEE_ID,
            full_name="Maria Santos",
            email="maria@example.com",
            password_hash=generate_password_hash("maria-pass"),
            role=Role.EMPLOYEE,
        )
    )
    return repo


@pytest.fixture
def schedules():
    return InMemorySchedules()


@pytest.fixture
def attendance(users):
    return InMemoryAttendance(users)


@pytest.fixture
def leaves():
    return InMemoryLeaves()


@pytest.fixture
def overtime():
    return InMemoryOvertime()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def container(users, schedules, attendance, leaves, overtime, clock, notifier):
    return assemble(
        users_repo=users,
        schedules_repo=schedules,
        attendance_repo=attendance,
        leaves_repo=leaves,
        overtime_repo=overtime,
        clock=clock,
        notifier=notifier,
    )


@pytest.fixture
def make_slot(container):
    """Create a slot on the work day (08:00-17:00 unless told otherwise) and assign it."""

    def _make(employee_id=EMPLOYEE_ID, *, day=WORK_DAY, start=(8, 0), end=(17, 0)):
        slot = container.schedule_service.create_slot(
            slot_date=day,
            start=datetime(day.year, day.month, day.day, *start),
            end=datetime(day.year, day.month, day.day, *end),
            created_by=ADMIN_ID,
        )
        if employee_id is None:
            return slot
        return container.schedule_service.assign(schedule_id=slot.schedule_id, employee_id=employee_id)

    return _make
