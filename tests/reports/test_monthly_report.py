from datetime import date, datetime

import pytest

from src.timekeeper.timekeeper.core.enums import LeaveCategory
from src.timekeeper.timekeeper.core.exceptions import NotFoundError, ValidationError
from tests.fakes import ADMIN_ID, EMPLOYEE_ID


def _work_day(container, clock, make_slot, day, *, time_in, time_out):
    make_slot(day=day)
    clock.set(datetime(day.year, day.month, day.day, *time_in))
    container.attendance_service.time_in(EMPLOYEE_ID)
    clock.set(datetime(day.year, day.month, day.day, *time_out))
    container.attendance_service.time_out(EMPLOYEE_ID)


def test_monthly_report_summarises_the_month(container, clock, leaves, make_slot):
    leaves.seed_balance(EMPLOYEE_ID, LeaveCategory.VACATION, beginning=10)
    _work_day(container, clock, make_slot, date(2025, 11, 10), time_in=(8, 3), time_out=(17, 30))
    container.attendance_service.submit_reason(EMPLOYEE_ID, reason="Quarter end closing")
    _work_day(container, clock, make_slot, date(2025, 11, 11), time_in=(8, 20), time_out=(17, 0))
    make_slot(day=date(2025, 11, 12))
    container.absence_sweep_service.run(date(2025, 11, 12))
    _work_day(container, clock, make_slot, date(2025, 12, 1), time_in=(8, 0), time_out=(17, 0))

    record = container.overtime_repo.list_for_employee(
        employee_id=EMPLOYEE_ID,
        start=date(2025, 11, 1),
        end=date(2025, 11, 30),
    )[0]
    container.overtime_review_service.approve(record_id=record.record_id, reviewer_id=ADMIN_ID)

    report = container.report_service.build_monthly_report(employee_id=EMPLOYEE_ID, month=11, year=2025)
    summary = report.summary

    assert len(report.rows) == 3
    assert summary["daysPresent"] == 1
    assert summary["daysLate"] == 1
    assert summary["daysAbsent"] == 1
    assert summary["daysWorked"] == 2
    assert summary["lateMinutes"] == 23
    assert summary["gracePeriodsUsed"] == 1
    assert summary["overtimeMinutes"] == 30
    assert summary["approvedOvertimeMinutes"] == 30
    assert summary["totalHours"] == round((9 * 60 + 27) / 60 + (8 * 60 + 40) / 60, 2)
    assert report.employee["gracePeriodsLeft"] == 2
    assert report.to_dict()["period"] == {"start": "2025-11-01", "end": "2025-11-30"}
    assert {b["category"] for b in report.leave_balances} == {"sickLeave", "vacationLeave"}


def test_monthly_report_validates_input(container):
    with pytest.raises(ValidationError):
        container.report_service.build_monthly_report(employee_id=EMPLOYEE_ID, month=0, year=2025)
    with pytest.raises(NotFoundError):
        container.report_service.build_monthly_report(employee_id=ADMIN_ID, month=11, year=2025)
