from datetime import date, datetime

import pytest

from src.timekeeper.timekeeper.core.enums import DeviationType, ReviewStatus
from src.timekeeper.timekeeper.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.timekeeper.timekeeper.overtime.model import OvertimeRecord
from tests.fakes import ADMIN_ID, EMPLOYEE_ID


def _record(overtime, *, attendance_id, type=DeviationType.OVERTIME, minutes=30, day=date(2025, 11, 10)):
    record = OvertimeRecord(
        record_id=0,
        employee_id=EMPLOYEE_ID,
        attendance_id=attendance_id,
        type=type,
        record_date=day,
        scheduled_end=datetime(day.year, day.month, day.day, 17, 0),
        actual_time_out=datetime(day.year, day.month, day.day, 17, 30),
        minutes=minutes,
        reason="Inventory count",
        status=ReviewStatus.PENDING,
        submitted_at=datetime(day.year, day.month, day.day, 17, 35),
    )
    return overtime.create(record)


def test_approve_records_the_reviewer(container, overtime, clock):
    record_id = _record(overtime, attendance_id=1)

    reviewed = container.overtime_review_service.approve(record_id=record_id, reviewer_id=ADMIN_ID, notes=" ok ")

    assert reviewed.status == ReviewStatus.APPROVED
    assert reviewed.reviewed_by == ADMIN_ID
    assert reviewed.reviewed_at == clock.now()
    assert reviewed.review_notes == "ok"
    assert overtime.get_by_id(record_id).status == ReviewStatus.APPROVED


def test_decline_requires_notes(container, overtime):
    record_id = _record(overtime, attendance_id=1)

    with pytest.raises(ValidationError):
        container.overtime_review_service.decline(record_id=record_id, reviewer_id=ADMIN_ID, notes="")

    declined = container.overtime_review_service.decline(
        record_id=record_id,
        reviewer_id=ADMIN_ID,
        notes="Not pre-approved",
    )
    assert declined.status == ReviewStatus.DECLINED


def test_a_record_is_reviewed_only_once(container, overtime):
    record_id = _record(overtime, attendance_id=1)
    container.overtime_review_service.approve(record_id=record_id, reviewer_id=ADMIN_ID)

    with pytest.raises(ValidationError, match="already reviewed"):
        container.overtime_review_service.decline(record_id=record_id, reviewer_id=ADMIN_ID, notes="Changed my mind")


def test_review_requires_an_admin_and_an_existing_record(container, overtime):
    record_id = _record(overtime, attendance_id=1)

    with pytest.raises(AuthorizationError):
        container.overtime_review_service.approve(record_id=record_id, reviewer_id=EMPLOYEE_ID)
    with pytest.raises(NotFoundError):
        container.overtime_review_service.approve(record_id=999, reviewer_id=ADMIN_ID)


def test_review_notes_have_a_length_limit(container, overtime):
    record_id = _record(overtime, attendance_id=1)

    with pytest.raises(ValidationError):
        container.overtime_review_service.approve(record_id=record_id, reviewer_id=ADMIN_ID, notes="x" * 501)


def test_review_notes_must_be_text(container, overtime):
    record_id = _record(overtime, attendance_id=1)

    with pytest.raises(ValidationError, match="must be a string"):
        container.overtime_review_service.approve(record_id=record_id, reviewer_id=ADMIN_ID, notes=42)
    with pytest.raises(ValidationError, match="must be a string"):
        container.overtime_review_service.decline(record_id=record_id, reviewer_id=ADMIN_ID, notes=42)
    assert overtime.get_by_id(record_id).status == ReviewStatus.PENDING


def test_one_record_per_attendance_and_type(overtime):
    assert _record(overtime, attendance_id=1) is not None
    assert _record(overtime, attendance_id=1) is None
    assert _record(overtime, attendance_id=1, type=DeviationType.UNDERTIME) is not None


def test_list_filters_case_insensitively(container, overtime):
    _record(overtime, attendance_id=1)
    _record(overtime, attendance_id=2, type=DeviationType.UNDERTIME)
    approved = _record(overtime, attendance_id=3)
    container.overtime_review_service.approve(record_id=approved, reviewer_id=ADMIN_ID)

    pending_overtime = container.overtime_review_service.list(status="pending", type="OVERTIME")
    everything = container.overtime_review_service.list(page_size=2)

    assert [r.attendance_id for r in pending_overtime.items] == [1]
    assert everything.total == 3
    assert len(everything.items) == 2
    with pytest.raises(ValidationError):
        container.overtime_review_service.list(type="holiday")


def test_statistics(container, overtime):
    first = _record(overtime, attendance_id=1, minutes=30)
    _record(overtime, attendance_id=2, minutes=45)
    under = _record(overtime, attendance_id=3, type=DeviationType.UNDERTIME, minutes=15)
    _record(overtime, attendance_id=4, minutes=60, day=date(2025, 12, 1))
    container.overtime_review_service.approve(record_id=first, reviewer_id=ADMIN_ID)
    container.overtime_review_service.approve(record_id=under, reviewer_id=ADMIN_ID)

    stats = container.overtime_review_service.statistics(start=date(2025, 11, 1), end=date(2025, 11, 30))

    assert stats.total == 3
    assert stats.by_status == {"Pending": 1, "Approved": 2, "Declined": 0}
    assert stats.by_type == {"Overtime": 2, "Undertime": 1}
    assert stats.approved_minutes == {"Overtime": 30, "Undertime": 15}
    assert stats.to_dict()["approvedMinutes"]["Overtime"] == 30
    with pytest.raises(ValidationError):
        container.overtime_review_service.statistics(start=date(2025, 11, 30), end=date(2025, 11, 1))
