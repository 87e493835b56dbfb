from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.clock import Clock, SystemClock
from .core.constants import (
    ABSENCE_SWEEP_HOUR,
    ABSENCE_SWEEP_MINUTE,
    DEFAULT_BUSINESS_TIMEZONE,
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_LATE_GRACE_PERIOD_COUNT,
    OVERTIME_THRESHOLD_MINUTES,
    UNDERTIME_THRESHOLD_MINUTES,
)
from .database.connection import DBConfig, DatabaseConnection
from .leaves.balance_service import LeaveBalanceService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.request_service import LeaveRequestService
from .notifications.notifier import Notifier, SmtpNotifier, SmtpSettings
from .overtime.mysql_overtime_repository import MySQLOvertimeRepository
from .overtime.repository import OvertimeRepository
from .overtime.service import OvertimeReviewService
from .reports.service import MonthlyReportService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .sweep.scheduler import AbsenceSweepScheduler
from .sweep.service import AbsenceSweepService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, EmployeeService


@dataclass(frozen=True)
class Container:
    clock: Clock
    notifier: Notifier

    users_repo: UserRepository
    schedules_repo: ScheduleRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository
    overtime_repo: OvertimeRepository

    auth_service: AuthService
    employee_service: EmployeeService
    schedule_service: ScheduleService
    attendance_service: AttendanceService
    leave_request_service: LeaveRequestService
    leave_balance_service: LeaveBalanceService
    overtime_review_service: OvertimeReviewService
    absence_sweep_service: AbsenceSweepService
    report_service: MonthlyReportService

    conn: Optional[DatabaseConnection] = None
    sweep_scheduler: Optional[AbsenceSweepScheduler] = None


def assemble(
    *,
    users_repo: UserRepository,
    schedules_repo: ScheduleRepository,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    overtime_repo: OvertimeRepository,
    clock: Clock,
    notifier: Notifier,
    strategy_factory: Optional[AttendanceStrategyFactory] = None,
    conn: Optional[DatabaseConnection] = None,
    sweep_hour: Optional[int] = None,
    sweep_minute: int = ABSENCE_SWEEP_MINUTE,
    default_grace_periods: int = DEFAULT_LATE_GRACE_PERIOD_COUNT,
) -> Container:
    """Wire services on top of the given repositories.

    The absence sweep scheduler is only created when `sweep_hour` is given;
    it is not started here.
    """

    auth_service = AuthService(users_repo)
    employee_service = EmployeeService(users_repo, auth_service, default_grace_periods=default_grace_periods)
    schedule_service = ScheduleService(schedules_repo, auth_service, clock, notifier)
    attendance_service = AttendanceService(
        attendance_repo,
        schedule_service,
        auth_service,
        clock,
        overtime=overtime_repo,
        notifier=notifier,
        strategy_factory=strategy_factory or AttendanceStrategyFactory(),
    )
    leave_request_service = LeaveRequestService(leaves_repo, auth_service, clock, notifier)
    leave_balance_service = LeaveBalanceService(leaves_repo, auth_service, clock, notifier)
    overtime_review_service = OvertimeReviewService(overtime_repo, auth_service, clock)
    absence_sweep_service = AbsenceSweepService(schedules_repo, attendance_repo, leaves_repo, clock)
    report_service = MonthlyReportService(attendance_repo, overtime_repo, leave_balance_service, auth_service)

    sweep_scheduler = None
    if sweep_hour is not None:
        sweep_scheduler = AbsenceSweepScheduler(
            absence_sweep_service,
            timezone_name=clock.timezone_name,
            hour=sweep_hour,
            minute=sweep_minute,
        )

    return Container(
        clock=clock,
        notifier=notifier,
        users_repo=users_repo,
        schedules_repo=schedules_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        overtime_repo=overtime_repo,
        auth_service=auth_service,
        employee_service=employee_service,
        schedule_service=schedule_service,
        attendance_service=attendance_service,
        leave_request_service=leave_request_service,
        leave_balance_service=leave_balance_service,
        overtime_review_service=overtime_review_service,
        absence_sweep_service=absence_sweep_service,
        report_service=report_service,
        conn=conn,
        sweep_scheduler=sweep_scheduler,
    )


def build_container(
    *,
    db_config: dict,
    smtp: Optional[SmtpSettings] = None,
    timezone_name: str = DEFAULT_BUSINESS_TIMEZONE,
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
    grace_period_count: int = DEFAULT_LATE_GRACE_PERIOD_COUNT,
    overtime_threshold_minutes: int = OVERTIME_THRESHOLD_MINUTES,
    undertime_threshold_minutes: int = UNDERTIME_THRESHOLD_MINUTES,
    enable_absence_sweep: bool = False,
    sweep_hour: int = ABSENCE_SWEEP_HOUR,
    sweep_minute: int = ABSENCE_SWEEP_MINUTE,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return assemble(
        users_repo=MySQLUserRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        overtime_repo=MySQLOvertimeRepository(conn),
        clock=SystemClock(timezone_name),
        notifier=SmtpNotifier(smtp or SmtpSettings(host=None, port=465, user=None, password=None)),
        strategy_factory=AttendanceStrategyFactory(
            grace_minutes=grace_minutes,
            overtime_threshold_minutes=overtime_threshold_minutes,
            undertime_threshold_minutes=undertime_threshold_minutes,
        ),
        conn=conn,
        sweep_hour=sweep_hour if enable_absence_sweep else None,
        sweep_minute=sweep_minute,
        default_grace_periods=grace_period_count,
    )
