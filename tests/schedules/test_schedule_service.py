from datetime import date, datetime

import pytest

from src.timekeeper.timekeeper.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.timekeeper.timekeeper.notifications.notifier import NotificationKind
from tests.fakes import ADMIN_ID, EMPLOYEE_ID, OTHER_EMPLOYEE_ID, WORK_DAY


def test_overlapping_slots_cannot_share_an_employee(container, make_slot):
    make_slot(start=(8, 0), end=(17, 0))
    evening = make_slot(employee_id=None, start=(12, 0), end=(20, 0))

    with pytest.raises(ConflictError, match="conflicting schedule"):
        container.schedule_service.assign(schedule_id=evening.schedule_id, employee_id=EMPLOYEE_ID)


def test_touching_slots_do_not_overlap(container, make_slot):
    make_slot(start=(8, 0), end=(12, 0))
    afternoon = make_slot(employee_id=None, start=(12, 0), end=(17, 0))

    assigned = container.schedule_service.assign(schedule_id=afternoon.schedule_id, employee_id=EMPLOYEE_ID)

    assert assigned.assigned_employee_id == EMPLOYEE_ID


def test_reassign_to_the_current_assignee_is_a_conflict(container, make_slot):
    slot = make_slot()

    with pytest.raises(ConflictError):
        container.schedule_service.reassign(schedule_id=slot.schedule_id, employee_id=EMPLOYEE_ID)


def test_reassign_moves_the_slot_to_another_employee(container, schedules, make_slot):
    slot = make_slot()

    moved = container.schedule_service.reassign(schedule_id=slot.schedule_id, employee_id=OTHER_EMPLOYEE_ID)

    assert moved.assigned_employee_id == OTHER_EMPLOYEE_ID
    assert schedules.get_by_id(slot.schedule_id).assigned_employee_id == OTHER_EMPLOYEE_ID


def test_assign_to_a_taken_slot_is_a_conflict(container, make_slot):
    slot = make_slot()

    with pytest.raises(ConflictError, match="reassign"):
        container.schedule_service.assign(schedule_id=slot.schedule_id, employee_id=OTHER_EMPLOYEE_ID)


def test_reassign_of_an_unassigned_slot_is_rejected(container, make_slot):
    slot = make_slot(employee_id=None)

    with pytest.raises(ValidationError):
        container.schedule_service.reassign(schedule_id=slot.schedule_id, employee_id=EMPLOYEE_ID)


def test_assign_to_an_unknown_employee_or_slot(container, make_slot):
    slot = make_slot(employee_id=None)

    with pytest.raises(NotFoundError):
        container.schedule_service.assign(schedule_id=slot.schedule_id, employee_id=99)
    with pytest.raises(NotFoundError):
        container.schedule_service.assign(schedule_id=404, employee_id=EMPLOYEE_ID)
    with pytest.raises(NotFoundError):
        container.schedule_service.assign(schedule_id=slot.schedule_id, employee_id=ADMIN_ID)


def test_only_admins_create_slots(container):
    with pytest.raises(AuthorizationError):
        container.schedule_service.create_slot(
            slot_date=WORK_DAY,
            start=datetime(2025, 11, 10, 8, 0),
            end=datetime(2025, 11, 10, 17, 0),
            created_by=EMPLOYEE_ID,
        )


def test_slot_bounds_are_validated(container):
    with pytest.raises(ValidationError):
        container.schedule_service.create_slot(
            slot_date=WORK_DAY,
            start=datetime(2025, 11, 10, 17, 0),
            end=datetime(2025, 11, 10, 8, 0),
            created_by=ADMIN_ID,
        )
    with pytest.raises(ValidationError):
        container.schedule_service.create_slot(
            slot_date=WORK_DAY,
            start=datetime(2025, 11, 11, 8, 0),
            end=datetime(2025, 11, 11, 17, 0),
            created_by=ADMIN_ID,
        )


def test_assignment_notifies_the_employee(container, notifier, make_slot):
    make_slot()

    recipients, kind, payload = notifier.sent[-1]
    assert kind == NotificationKind.SCHEDULE_ASSIGNED
    assert recipients == ["juan@example.com"]
    assert (payload["start"], payload["end"]) == ("08:00", "17:00")


def test_failed_assignment_notice_does_not_undo_the_assignment(container, notifier, make_slot):
    notifier.deliver = False

    slot = make_slot()

    assert slot.assigned_employee_id == EMPLOYEE_ID


def test_find_slots_in_month(container, make_slot):
    make_slot()
    make_slot(employee_id=OTHER_EMPLOYEE_ID, day=date(2025, 11, 30))
    make_slot(day=date(2025, 12, 1))

    month = container.schedule_service.find_slots_in_month(month=11, year=2025)

    assert month.count == 2
    assert (month.period_start, month.period_end) == (date(2025, 11, 1), date(2025, 11, 30))
    with pytest.raises(ValidationError):
        container.schedule_service.find_slots_in_month(month=13, year=2025)


def test_find_slot_for_picks_the_earliest(container, make_slot):
    make_slot(start=(13, 0), end=(17, 0))
    make_slot(start=(8, 0), end=(12, 0))

    slot = container.schedule_service.find_slot_for(employee_id=EMPLOYEE_ID, day=WORK_DAY)

    assert slot.start == datetime(2025, 11, 10, 8, 0)
    assert container.schedule_service.find_slot_for(employee_id=OTHER_EMPLOYEE_ID, day=WORK_DAY) is None


def test_delete_slot(container, schedules, make_slot):
    slot = make_slot()

    container.schedule_service.delete_slot(schedule_id=slot.schedule_id)

    assert schedules.get_by_id(slot.schedule_id) is None
    with pytest.raises(NotFoundError):
        container.schedule_service.delete_slot(schedule_id=slot.schedule_id)
