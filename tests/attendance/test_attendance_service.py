from datetime import datetime

import pytest

from src.timekeeper.timekeeper.attendance.model import AttendanceEntry, MarkedAbsent, RequestMeta
from src.timekeeper.timekeeper.core.enums import (
    AttendanceAction,
    AttendanceStatus,
    DeviationType,
    ReviewStatus,
)
from src.timekeeper.timekeeper.core.exceptions import (
    ConflictError,
    DeliveryError,
    NotFoundError,
    ValidationError,
)
from src.timekeeper.timekeeper.notifications.notifier import NotificationKind
from tests.fakes import EMPLOYEE_ID, WORK_DAY


def at(hour, minute=0):
    return datetime(2025, 11, 10, hour, minute)


def test_time_in_within_grace_consumes_one_grace_period(container, users, clock, make_slot):
    make_slot()
    clock.set(at(8, 3))

    result = container.attendance_service.time_in(EMPLOYEE_ID)

    assert result.entry.status == AttendanceStatus.PRESENT
    assert result.entry.late_minutes == 3
    assert result.entry.grace_period_used is True
    assert result.entry.is_late is False
    assert result.state == "working"
    assert "2 grace period(s) left" in result.message
    assert users.get_by_id(EMPLOYEE_ID).late_grace_period_count == 2


def test_time_in_after_grace_window_is_late(container, users, clock, make_slot):
    make_slot()
    clock.set(at(8, 10))

    result = container.attendance_service.time_in(EMPLOYEE_ID)

    assert result.entry.status == AttendanceStatus.LATE
    assert result.entry.is_late is True
    assert result.entry.late_minutes == 10
    assert result.message == "Timed in 10 minute(s) late"
    assert users.get_by_id(EMPLOYEE_ID).late_grace_period_count == 3


def test_time_in_without_grace_periods_left_is_late(container, users, clock, make_slot):
    make_slot()
    users.set_grace_period_count(EMPLOYEE_ID, count=0)
    clock.set(at(8, 2))

    result = container.attendance_service.time_in(EMPLOYEE_ID)

    assert result.entry.status == AttendanceStatus.LATE
    assert result.entry.grace_period_used is False
    assert users.get_by_id(EMPLOYEE_ID).late_grace_period_count == 0


def test_time_in_on_time(container, clock, make_slot):
    make_slot()
    clock.set(at(7, 55))

    result = container.attendance_service.time_in(EMPLOYEE_ID)

    assert result.entry.status == AttendanceStatus.PRESENT
    assert result.entry.late_minutes == 0
    assert result.message == "Timed in on time"


def test_time_in_without_schedule_is_not_found(container):
    with pytest.raises(NotFoundError):
        container.attendance_service.time_in(EMPLOYEE_ID)


def test_second_time_in_is_a_conflict(container, make_slot):
    make_slot()
    container.attendance_service.time_in(EMPLOYEE_ID)

    with pytest.raises(ConflictError):
        container.attendance_service.time_in(EMPLOYEE_ID)


def test_time_in_on_a_day_marked_absent_is_a_conflict(container, attendance, make_slot):
    make_slot()
    attendance.create_marker(
        AttendanceEntry(
            attendance_id=0,
            employee_id=EMPLOYEE_ID,
            work_date=WORK_DAY,
            phase=MarkedAbsent(),
            status=AttendanceStatus.ABSENT,
        )
    )

    with pytest.raises(ConflictError, match="Absent"):
        container.attendance_service.time_in(EMPLOYEE_ID)


def test_break_flow_accumulates_break_time_once(container, clock, make_slot):
    make_slot()
    service = container.attendance_service
    service.time_in(EMPLOYEE_ID)

    clock.set(at(12, 0))
    on_break = service.go_on_break(EMPLOYEE_ID)
    assert on_break.state == "on_break"
    assert on_break.entry.break_start == at(12, 0)

    with pytest.raises(ConflictError):
        service.go_on_break(EMPLOYEE_ID)

    clock.set(at(12, 45))
    back = service.back_from_break(EMPLOYEE_ID)
    assert back.state == "working"
    assert back.entry.break_time == pytest.approx(0.75)

    with pytest.raises(ConflictError):
        service.go_on_break(EMPLOYEE_ID)


def test_back_from_break_requires_being_on_break(container, make_slot):
    make_slot()
    container.attendance_service.time_in(EMPLOYEE_ID)

    with pytest.raises(ValidationError):
        container.attendance_service.back_from_break(EMPLOYEE_ID)


def test_transitions_before_time_in_are_rejected(container, make_slot):
    make_slot()

    with pytest.raises(ValidationError, match="has not timed in"):
        container.attendance_service.go_on_break(EMPLOYEE_ID)
    with pytest.raises(ValidationError, match="has not timed in"):
        container.attendance_service.time_out(EMPLOYEE_ID)


def test_time_out_while_on_break_is_rejected(container, clock, make_slot):
    make_slot()
    container.attendance_service.time_in(EMPLOYEE_ID)
    clock.set(at(12, 0))
    container.attendance_service.go_on_break(EMPLOYEE_ID)

    with pytest.raises(ValidationError, match="on break"):
        container.attendance_service.time_out(EMPLOYEE_ID)
    with pytest.raises(ValidationError, match="on break"):
        container.attendance_service.skip_break_time_out(EMPLOYEE_ID)


def test_time_out_twice_is_rejected(container, clock, make_slot):
    make_slot()
    container.attendance_service.time_in(EMPLOYEE_ID)
    clock.set(at(17, 0))
    container.attendance_service.time_out(EMPLOYEE_ID)

    with pytest.raises(ValidationError, match="already timed out"):
        container.attendance_service.time_out(EMPLOYEE_ID)


def test_time_out_past_threshold_flags_overtime(container, clock, make_slot):
    make_slot()
    container.attendance_service.time_in(EMPLOYEE_ID)
    clock.set(at(12, 0))
    container.attendance_service.go_on_break(EMPLOYEE_ID)
    clock.set(at(13, 0))
    container.attendance_service.back_from_break(EMPLOYEE_ID)
    clock.set(at(17, 25))

    result = container.attendance_service.time_out(EMPLOYEE_ID)

    assert result.needs_reason is True
    assert result.state == "needs_reason"
    assert result.entry.is_overtime is True
    assert result.entry.overtime_minutes == 25
    assert result.entry.time_out == at(17, 25)
    assert result.entry.total_hours == pytest.approx(8 + 25 / 60)


def test_overtime_half_minute_rounds_up(container, clock, make_slot):
    make_slot()
    container.attendance_service.time_in(EMPLOYEE_ID)
    clock.set(datetime(2025, 11, 10, 17, 24, 30))

    result = container.attendance_service.time_out(EMPLOYEE_ID)

    assert result.entry.overtime_minutes == 25


def test_time_out_within_tolerance_needs_no_reason(container, clock, make_slot):
    make_slot()
    container.attendance_service.time_in(EMPLOYEE_ID)
    clock.set(at(17, 15))

    result = container.attendance_service.time_out(EMPLOYEE_ID)

    assert result.needs_reason is False
    assert result.state == "completed"
    assert result.entry.deviation_type is None


def test_skip_break_time_out_flags_undertime(container, clock, make_slot):
    make_slot()
    container.attendance_service.time_in(EMPLOYEE_ID)
    clock.set(at(16, 50))

    result = container.attendance_service.skip_break_time_out(EMPLOYEE_ID)

    assert result.action == AttendanceAction.SKIP_BREAK_TIME_OUT
    assert result.entry.is_undertime is True
    assert result.entry.undertime_minutes == 10
    assert result.entry.break_time == 0
    assert result.entry.total_hours == pytest.approx(8 + 50 / 60)


def test_skip_break_time_out_after_a_break_is_rejected(container, clock, make_slot):
    make_slot()
    service = container.attendance_service
    service.time_in(EMPLOYEE_ID)
    clock.set(at(12, 0))
    service.go_on_break(EMPLOYEE_ID)
    clock.set(at(12, 30))
    service.back_from_break(EMPLOYEE_ID)

    with pytest.raises(ValidationError):
        service.skip_break_time_out(EMPLOYEE_ID)


def test_every_transition_writes_one_history_row(container, clock, make_slot):
    make_slot()
    service = container.attendance_service
    meta = RequestMeta(ip_address="10.0.0.7", user_agent="pytest")
    service.time_in(EMPLOYEE_ID, meta=meta)
    clock.set(at(12, 0))
    service.go_on_break(EMPLOYEE_ID, meta=meta)
    clock.set(at(13, 0))
    service.back_from_break(EMPLOYEE_ID, meta=meta)
    clock.set(at(17, 0))
    service.time_out(EMPLOYEE_ID, meta=meta)

    history = service.history(EMPLOYEE_ID)

    assert [h.action for h in history] == [
        AttendanceAction.TIME_OUT,
        AttendanceAction.BACK_FROM_BREAK,
        AttendanceAction.GO_ON_BREAK,
        AttendanceAction.TIME_IN,
    ]
    assert all(h.ip_address == "10.0.0.7" for h in history)
    assert history[0].details["totalHours"] == 8.0
    assert len(service.history(EMPLOYEE_ID, limit=2)) == 2
    with pytest.raises(ValidationError):
        service.history(EMPLOYEE_ID, limit=0)


def test_entry_version_advances_with_each_transition(container, clock, make_slot):
    make_slot()
    first = container.attendance_service.time_in(EMPLOYEE_ID)
    clock.set(at(12, 0))
    second = container.attendance_service.go_on_break(EMPLOYEE_ID)

    assert first.entry.version == 1
    assert second.entry.version == 2
    assert container.attendance_service.today_entry(EMPLOYEE_ID).version == 2


def test_stale_transition_is_a_conflict(container, attendance, clock, make_slot):
    make_slot()
    container.attendance_service.time_in(EMPLOYEE_ID)
    entry = attendance.get_for_employee_and_date(EMPLOYEE_ID, WORK_DAY)
    clock.set(at(12, 0))
    container.attendance_service.go_on_break(EMPLOYEE_ID)

    assert attendance.save_transition(entry=entry, history=attendance.history[0], expected_version=entry.version) is False


def _finish_with_overtime(container, clock):
    container.attendance_service.time_in(EMPLOYEE_ID)
    clock.set(at(17, 25))
    container.attendance_service.time_out(EMPLOYEE_ID)


def test_submit_reason_creates_pending_record_and_notifies_admins(container, clock, notifier, make_slot):
    make_slot()
    _finish_with_overtime(container, clock)

    record = container.attendance_service.submit_reason(EMPLOYEE_ID, reason="Closing the monthly books")

    assert record.record_id > 0
    assert record.type == DeviationType.OVERTIME
    assert record.status == ReviewStatus.PENDING
    assert record.minutes == 25
    assert record.actual_time_out == at(17, 25)
    recipients, kind, payload = notifier.sent[-1]
    assert kind == NotificationKind.OVERTIME_REASON_SUBMITTED
    assert recipients == ["admin@example.com"]
    assert payload["minutes"] == 25


def test_submit_reason_twice_is_a_conflict(container, clock, make_slot):
    make_slot()
    _finish_with_overtime(container, clock)
    container.attendance_service.submit_reason(EMPLOYEE_ID, reason="Closing the monthly books")

    with pytest.raises(ConflictError):
        container.attendance_service.submit_reason(EMPLOYEE_ID, reason="Again")


def test_submit_reason_is_not_stored_when_admins_cannot_be_notified(container, clock, notifier, overtime, make_slot):
    make_slot()
    _finish_with_overtime(container, clock)
    notifier.deliver = False

    with pytest.raises(DeliveryError):
        container.attendance_service.submit_reason(EMPLOYEE_ID, reason="Closing the monthly books")

    assert overtime.records == {}


def test_submit_reason_requires_a_flagged_completed_day(container, clock, make_slot):
    make_slot()
    service = container.attendance_service

    with pytest.raises(NotFoundError):
        service.submit_reason(EMPLOYEE_ID, reason="Anything")

    service.time_in(EMPLOYEE_ID)
    with pytest.raises(ValidationError, match="Time out"):
        service.submit_reason(EMPLOYEE_ID, reason="Anything")

    clock.set(at(17, 0))
    service.time_out(EMPLOYEE_ID)
    with pytest.raises(ValidationError, match="No overtime"):
        service.submit_reason(EMPLOYEE_ID, reason="Anything")


def test_submit_reason_validates_text(container, clock, make_slot):
    make_slot()
    _finish_with_overtime(container, clock)

    with pytest.raises(ValidationError):
        container.attendance_service.submit_reason(EMPLOYEE_ID, reason="   ")
    with pytest.raises(ValidationError):
        container.attendance_service.submit_reason(EMPLOYEE_ID, reason="x" * 501)
