from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.event_attendance.event_attendance.attendance.model import AttendanceRecord
from src.event_attendance.event_attendance.core.enums import AttendanceStatus, EventStatus
from src.event_attendance.event_attendance.events.model import EventSession
from src.event_attendance.event_attendance.geofence.model import Circle, GeoPoint
from src.event_attendance.event_attendance.locations.model import Location

from tests.fakes import (
    REGISTRATION_ID,
    REGISTRATION_LAT,
    REGISTRATION_LON,
    VENUE_ID,
    VENUE_LAT,
    VENUE_LON,
    InMemoryAttendance,
    InMemoryDirectory,
    InMemoryEvents,
    InMemoryLocations,
)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 10, 9, 0, 0)


@pytest.fixture
def locations() -> InMemoryLocations:
    return InMemoryLocations(
        {
            VENUE_ID: Location(VENUE_ID, "Main Quad", Circle(GeoPoint(VENUE_LAT, VENUE_LON), 50)),
            REGISTRATION_ID: Location(
                REGISTRATION_ID, "Gate 1", Circle(GeoPoint(REGISTRATION_LAT, REGISTRATION_LON), 30)
            ),
        }
    )


@pytest.fixture
def events() -> InMemoryEvents:
    return InMemoryEvents()


@pytest.fixture
def attendance() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def directory() -> InMemoryDirectory:
    d = InMemoryDirectory(
        course_clusters={100: 1000, 200: 1000, 300: 2000},
        section_courses={1: 100, 2: 100, 3: 200, 4: 300},
    )
    for student_id, section_id in [(1, 1), (2, 1), (3, 2), (4, 3), (5, 4)]:
        d.add_student(student_id, section_id)
    d.add_student(6, 1, is_active=False)
    return d


@pytest.fixture
def make_event(fixed_now):
    """Event running 09:00-10:00 on the fixed day, registration from 08:30."""

    def _make(event_id: int = 1, **overrides) -> EventSession:
        values = dict(
            event_id=event_id,
            name=f"Event {event_id}",
            registration_location_id=REGISTRATION_ID,
            venue_location_id=VENUE_ID,
            registration_open_at=fixed_now - timedelta(minutes=30),
            start_at=fixed_now,
            end_at=fixed_now + timedelta(hours=1),
            status=EventStatus.ONGOING,
        )
        values.update(overrides)
        return EventSession(**values)

    return _make


@pytest.fixture
def registered(attendance, fixed_now):
    """Put a checked-in record in the attendance store."""

    def _add(student_id: int, event_id: int = 1, **overrides) -> AttendanceRecord:
        values = dict(
            student_id=student_id,
            event_id=event_id,
            location_id=VENUE_ID,
            status=AttendanceStatus.REGISTERED,
            time_in=fixed_now - timedelta(minutes=5),
        )
        values.update(overrides)
        record = AttendanceRecord(**values)
        attendance.create(record)
        return record

    return _add
