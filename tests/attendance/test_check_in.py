from __future__ import annotations

from datetime import timedelta

import pytest

from src.event_attendance.event_attendance.attendance.check_in import CheckInService
from src.event_attendance.event_attendance.core.enums import AttendanceStatus, EventStatus
from src.event_attendance.event_attendance.core.exceptions import (
    DuplicateRecordError,
    EventStateError,
    FaceVerificationError,
    IneligibleStudentError,
    LocationMismatchError,
    OutsideGeofenceError,
    ValidationError,
)
from src.event_attendance.event_attendance.eligibility.resolver import EligibilityResolver
from src.event_attendance.event_attendance.events.model import EligibilityCriteria

from tests.fakes import (
    REGISTRATION_ID,
    REGISTRATION_LAT,
    REGISTRATION_LON,
    VENUE_ID,
    VENUE_LAT,
    VENUE_LON,
    FakeFaceVerifier,
    InMemoryBiometrics,
)


@pytest.fixture
def early(fixed_now):
    return fixed_now - timedelta(minutes=10)


@pytest.fixture
def face_verifier():
    return FakeFaceVerifier()


@pytest.fixture
def service(events, locations, attendance, directory, face_verifier):
    return CheckInService(
        events,
        locations,
        attendance,
        EligibilityResolver(directory),
        biometrics=InMemoryBiometrics({1: [0.1, 0.2, 0.3]}),
        face_verifier=face_verifier,
    )


def test_check_in_at_venue_before_start(service, events, attendance, make_event, early):
    events.add(make_event(status=EventStatus.REGISTRATION))

    record = service.register(1, 1, VENUE_ID, VENUE_LAT, VENUE_LON, now=early)

    assert record.status == AttendanceStatus.REGISTERED
    assert record.time_in == early
    assert record.location_id == VENUE_ID
    assert attendance.get(student_id=1, event_id=1) == record


def test_check_in_at_registration_area(service, events, make_event, early):
    events.add(make_event(status=EventStatus.REGISTRATION))

    record = service.register(1, 1, REGISTRATION_ID, REGISTRATION_LAT, REGISTRATION_LON, now=early)

    assert record.status == AttendanceStatus.REGISTERED
    assert record.location_id == REGISTRATION_ID


def test_check_in_after_start_is_late(service, events, make_event, fixed_now):
    events.add(make_event(status=EventStatus.ONGOING))

    record = service.register(1, 1, VENUE_ID, VENUE_LAT, VENUE_LON, now=fixed_now + timedelta(minutes=10))

    assert record.status == AttendanceStatus.LATE
    assert record.reason == "Late registration"


@pytest.mark.parametrize(
    "status",
    [EventStatus.UPCOMING, EventStatus.CONCLUDED, EventStatus.FINALIZED, EventStatus.CANCELLED],
)
def test_check_in_rejected_outside_registration_window(service, events, attendance, make_event, early, status):
    events.add(make_event(status=status))

    with pytest.raises(EventStateError):
        service.register(1, 1, VENUE_ID, VENUE_LAT, VENUE_LON, now=early)
    assert attendance.get(student_id=1, event_id=1) is None


def test_check_in_rejected_for_ineligible_student(service, events, make_event, early):
    events.add(make_event(status=EventStatus.REGISTRATION, eligibility=EligibilityCriteria(cluster_ids={2000})))

    with pytest.raises(IneligibleStudentError):
        service.register(1, 1, VENUE_ID, VENUE_LAT, VENUE_LON, now=early)


def test_check_in_rejected_at_foreign_location(service, events, make_event, early):
    events.add(make_event(status=EventStatus.REGISTRATION))

    with pytest.raises(LocationMismatchError):
        service.register(1, 1, 99, VENUE_LAT, VENUE_LON, now=early)


def test_check_in_rejected_outside_geofence(service, events, make_event, early):
    events.add(make_event(status=EventStatus.REGISTRATION))

    with pytest.raises(OutsideGeofenceError):
        service.register(1, 1, VENUE_ID, REGISTRATION_LAT, REGISTRATION_LON, now=early)


def test_second_check_in_is_rejected(service, events, make_event, early):
    events.add(make_event(status=EventStatus.REGISTRATION))
    service.register(1, 1, VENUE_ID, VENUE_LAT, VENUE_LON, now=early)

    with pytest.raises(DuplicateRecordError):
        service.register(1, 1, VENUE_ID, VENUE_LAT, VENUE_LON, now=early)


def test_strict_event_registration_area_is_partial_until_venue(service, events, attendance, make_event, early):
    events.add(make_event(status=EventStatus.REGISTRATION, strict_location_validation=True))

    record = service.register(1, 1, REGISTRATION_ID, REGISTRATION_LAT, REGISTRATION_LON, now=early)
    assert record.status == AttendanceStatus.PARTIALLY_REGISTERED

    assert service.arrive_at_venue(1, 1, REGISTRATION_LAT, REGISTRATION_LON, now=early) is False
    assert service.arrive_at_venue(1, 1, VENUE_LAT, VENUE_LON, now=early) is True

    upgraded = attendance.get(student_id=1, event_id=1)
    assert upgraded.status == AttendanceStatus.REGISTERED
    assert upgraded.location_id == VENUE_ID
    assert upgraded.reason == "Completed registration at venue"

    # Already complete: nothing more to upgrade.
    assert service.arrive_at_venue(1, 1, VENUE_LAT, VENUE_LON, now=early) is False


def test_strict_event_late_venue_arrival(service, events, attendance, make_event, early, fixed_now):
    events.add(make_event(status=EventStatus.REGISTRATION, strict_location_validation=True))
    service.register(1, 1, REGISTRATION_ID, REGISTRATION_LAT, REGISTRATION_LON, now=early)
    events.add(make_event(status=EventStatus.ONGOING, strict_location_validation=True))

    record = service.register(1, 1, VENUE_ID, VENUE_LAT, VENUE_LON, now=fixed_now + timedelta(minutes=3))

    assert record.status == AttendanceStatus.LATE
    assert record.reason == "Late arrival at venue"
    assert attendance.get(student_id=1, event_id=1).time_in == fixed_now + timedelta(minutes=3)


def test_face_match_required_when_enabled(service, events, attendance, make_event, face_verifier, early):
    events.add(make_event(status=EventStatus.REGISTRATION, facial_verification_enabled=True))

    with pytest.raises(ValidationError):
        service.register(1, 1, VENUE_ID, VENUE_LAT, VENUE_LON, now=early)

    record = service.register(1, 1, VENUE_ID, VENUE_LAT, VENUE_LON, face_image="aGVsbG8=", now=early)

    assert record.status == AttendanceStatus.REGISTERED
    assert face_verifier.calls == [("aGVsbG8=", [0.1, 0.2, 0.3])]


def test_face_mismatch_or_missing_reference_rejects(service, events, attendance, make_event, face_verifier, early):
    events.add(make_event(status=EventStatus.REGISTRATION, facial_verification_enabled=True))
    face_verifier.matched = False

    with pytest.raises(FaceVerificationError):
        service.register(1, 1, VENUE_ID, VENUE_LAT, VENUE_LON, face_image="aGVsbG8=", now=early)
    with pytest.raises(FaceVerificationError):
        service.register(2, 1, VENUE_ID, VENUE_LAT, VENUE_LON, face_image="aGVsbG8=", now=early)

    assert attendance.list_for_event(1) == []


def test_face_check_skipped_when_disabled(service, events, make_event, face_verifier, early):
    events.add(make_event(status=EventStatus.REGISTRATION))

    service.register(1, 1, VENUE_ID, VENUE_LAT, VENUE_LON, face_image="aGVsbG8=", now=early)

    assert face_verifier.calls == []
