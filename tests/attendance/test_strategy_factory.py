from src.timekeeper.timekeeper.attendance.factory import AttendanceStrategyFactory
from src.timekeeper.timekeeper.attendance.strategies.grace_strategy import GraceStrategy
from src.timekeeper.timekeeper.attendance.strategies.late_strategy import LateStrategy
from src.timekeeper.timekeeper.attendance.strategies.normal_strategy import NormalStrategy
from src.timekeeper.timekeeper.attendance.strategies.overtime_strategy import OvertimeStrategy
from src.timekeeper.timekeeper.attendance.strategies.undertime_strategy import UndertimeStrategy
from src.timekeeper.timekeeper.core.enums import AttendanceStatus


def test_factory_checkin_on_time():
    strategy = AttendanceStrategyFactory().for_checkin(late_minutes=0, grace_periods_left=3)

    assert isinstance(strategy, NormalStrategy)
    assert strategy.decide_checkin(late_minutes=0).status == AttendanceStatus.PRESENT


def test_factory_checkin_within_grace_consumes_a_period():
    strategy = AttendanceStrategyFactory().for_checkin(late_minutes=5, grace_periods_left=1)
    decision = strategy.decide_checkin(late_minutes=5)

    assert isinstance(strategy, GraceStrategy)
    assert decision.status == AttendanceStatus.PRESENT
    assert decision.grace_period_used is True
    assert decision.is_late is False


def test_factory_checkin_late_after_grace_window():
    strategy = AttendanceStrategyFactory().for_checkin(late_minutes=6, grace_periods_left=3)

    assert isinstance(strategy, LateStrategy)
    assert strategy.decide_checkin(late_minutes=6).is_late is True


def test_factory_checkin_late_when_no_grace_periods_left():
    strategy = AttendanceStrategyFactory().for_checkin(late_minutes=2, grace_periods_left=0)

    assert isinstance(strategy, LateStrategy)


def test_factory_checkout_thresholds():
    factory = AttendanceStrategyFactory()

    assert isinstance(factory.for_checkout(minutes_diff=20), NormalStrategy)
    assert isinstance(factory.for_checkout(minutes_diff=20.5), OvertimeStrategy)
    assert isinstance(factory.for_checkout(minutes_diff=-5), NormalStrategy)
    assert isinstance(factory.for_checkout(minutes_diff=-6), UndertimeStrategy)


def test_checkout_decisions_carry_minutes():
    factory = AttendanceStrategyFactory()

    overtime = factory.for_checkout(minutes_diff=25).decide_checkout(minutes_diff=25)
    undertime = factory.for_checkout(minutes_diff=-30).decide_checkout(minutes_diff=-30)

    assert (overtime.is_overtime, overtime.overtime_minutes) == (True, 25)
    assert (undertime.is_undertime, undertime.undertime_minutes) == (True, 30)


def test_factory_thresholds_are_configurable():
    factory = AttendanceStrategyFactory(grace_minutes=10, overtime_threshold_minutes=0)

    assert isinstance(factory.for_checkin(late_minutes=9, grace_periods_left=1), GraceStrategy)
    assert isinstance(factory.for_checkout(minutes_diff=1), OvertimeStrategy)


def test_checkout_minutes_round_half_up():
    factory = AttendanceStrategyFactory()

    overtime = factory.for_checkout(minutes_diff=24.5).decide_checkout(minutes_diff=24.5)
    undertime = factory.for_checkout(minutes_diff=-30.5).decide_checkout(minutes_diff=-30.5)

    assert overtime.overtime_minutes == 25
    assert undertime.undertime_minutes == 31
