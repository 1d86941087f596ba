from datetime import datetime, timedelta

from src.event_attendance.event_attendance.attendance.factory import VerdictStrategyFactory
from src.event_attendance.event_attendance.attendance.model import AttendanceRecord, LocationPing, append_reason
from src.event_attendance.event_attendance.attendance.presence import inside_duration, inside_ratio
from src.event_attendance.event_attendance.attendance.strategies.check_in_strategy import CheckInStrategy
from src.event_attendance.event_attendance.attendance.strategies.partial_registration_strategy import (
    PartialRegistrationStrategy,
)
from src.event_attendance.event_attendance.attendance.strategies.ping_ratio_strategy import PingRatioStrategy
from src.event_attendance.event_attendance.core.enums import AttendanceStatus

START = datetime(2025, 1, 1, 8, 0, 0)
END = START + timedelta(hours=1)


def _ping(minute: int, inside: bool) -> LocationPing:
    return LocationPing(timestamp=START + timedelta(minutes=minute), latitude=0.0, longitude=0.0, inside=inside)


def _record(status=AttendanceStatus.REGISTERED) -> AttendanceRecord:
    return AttendanceRecord(student_id=1, event_id=1, location_id=1, status=status, time_in=START)


def test_factory_picks_partial_registration_first(make_event):
    factory = VerdictStrategyFactory()
    event = make_event(location_monitoring_enabled=False)

    strategy = factory.for_record(event=event, record=_record(AttendanceStatus.PARTIALLY_REGISTERED))

    assert isinstance(strategy, PartialRegistrationStrategy)


def test_factory_uses_check_in_time_without_monitoring(make_event):
    strategy = VerdictStrategyFactory().for_record(event=make_event(location_monitoring_enabled=False), record=_record())

    assert isinstance(strategy, CheckInStrategy)


def test_factory_uses_ping_ratio_with_monitoring(make_event):
    strategy = VerdictStrategyFactory().for_record(event=make_event(), record=_record())

    assert isinstance(strategy, PingRatioStrategy)


def test_inside_duration_attributes_each_gap_to_its_opening_ping():
    pings = [_ping(0, True), _ping(20, False), _ping(30, True), _ping(60, True)]

    assert inside_duration(pings, START, END) == timedelta(minutes=50)


def test_inside_duration_clamps_to_the_event_window():
    pings = [_ping(-30, True), _ping(10, False), _ping(50, True), _ping(90, False)]

    assert inside_duration(pings, START, END) == timedelta(minutes=20)


def test_inside_duration_sorts_out_of_order_pings():
    pings = [_ping(30, False), _ping(0, True)]

    assert inside_duration(pings, START, END) == timedelta(minutes=30)


def test_single_ping_or_empty_window_gives_zero():
    assert inside_duration([_ping(0, True)], START, END) == timedelta(0)
    assert inside_ratio([_ping(0, True), _ping(10, True)], START, START) == 0.0


def test_append_reason_skips_repeats_of_the_latest_note():
    assert append_reason(None, "a") == "a"
    assert append_reason("a", "b") == "a | b"
    assert append_reason("a | b", "b") == "a | b"
    assert append_reason("a", None) == "a"
