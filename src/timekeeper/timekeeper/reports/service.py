from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds
from ..core.enums import AttendanceStatus, ReviewStatus
from ..core.exceptions import ValidationError
from ..leaves.balance_service import LeaveBalanceService
from ..overtime.repository import OvertimeRepository
from ..users.service import AuthService


@dataclass(frozen=True)
class MonthlyReport:
    employee: dict[str, Any]
    period: dict[str, str]
    rows: list[dict]
    summary: dict[str, Any]
    leave_balances: list[dict]

    def to_dict(self) -> dict[str, Any]:
        return {
            "employee": self.employee,
            "period": self.period,
            "attendance": self.rows,
            "summary": self.summary,
            "leaveBalances": self.leave_balances,
        }


class MonthlyReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        overtime: OvertimeRepository,
        balances: LeaveBalanceService,
        auth: AuthService,
    ):
        self._attendance = attendance
        self._overtime = overtime
        self._balances = balances
        self._auth = auth

    def build_monthly_report(self, *, employee_id: int, month: int, year: int) -> MonthlyReport:
        employee = self._auth.require_employee(employee_id)
        try:
            start, end = month_bounds(int(month), int(year))
        except (TypeError, ValueError):
            raise ValidationError("Invalid month or year")

        entries = self._attendance.list_range(employee.user_id, start=start, end=end)
        records = self._overtime.list_for_employee(employee_id=employee.user_id, start=start, end=end)

        summary = {
            "daysPresent": 0,
            "daysLate": 0,
            "daysAbsent": 0,
            "daysOnLeave": 0,
            "totalHours": 0.0,
            "lateMinutes": 0,
            "overtimeMinutes": 0,
            "undertimeMinutes": 0,
            "gracePeriodsUsed": 0,
            "approvedOvertimeMinutes": 0,
            "approvedUndertimeMinutes": 0,
        }
        rows = []
        for e in entries:
            rows.append(e.to_dict())
            if e.status == AttendanceStatus.PRESENT:
                summary["daysPresent"] += 1
            elif e.status == AttendanceStatus.LATE:
                summary["daysLate"] += 1
            elif e.status == AttendanceStatus.ABSENT:
                summary["daysAbsent"] += 1
            elif e.status == AttendanceStatus.ON_LEAVE:
                summary["daysOnLeave"] += 1
            summary["totalHours"] += e.total_hours
            summary["lateMinutes"] += e.late_minutes
            summary["overtimeMinutes"] += e.overtime_minutes
            summary["undertimeMinutes"] += e.undertime_minutes
            summary["gracePeriodsUsed"] += 1 if e.grace_period_used else 0

        for r in records:
            if r.status == ReviewStatus.APPROVED:
                summary[f"approved{r.type.value}Minutes"] += int(r.minutes)

        summary["totalHours"] = round(summary["totalHours"], 2)
        summary["daysWorked"] = summary["daysPresent"] + summary["daysLate"]

        return MonthlyReport(
            employee={
                "employeeId": employee.user_id,
                "fullName": employee.full_name,
                "email": employee.email,
                "gracePeriodsLeft": employee.late_grace_period_count,
            },
            period={"start": start.isoformat(), "end": end.isoformat()},
            rows=rows,
            summary=summary,
            leave_balances=[b.to_dict() for b in self._balances.balances(employee.user_id).values()],
        )
