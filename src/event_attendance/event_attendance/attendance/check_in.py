from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from ..biometrics.client import FaceVerifier
from ..biometrics.repository import BiometricRepository
from ..common.datetime_utils import now_local
from ..common.validators import require_coordinates
from ..core.constants import (
    REASON_LATE_REGISTRATION,
    REASON_LATE_VENUE_UPGRADE,
    REASON_VENUE_UPGRADE,
)
from ..core.enums import AttendanceStatus, EventStatus
from ..core.exceptions import (
    DuplicateRecordError,
    EventStateError,
    FaceVerificationError,
    IneligibleStudentError,
    LocationMismatchError,
    NotFoundError,
    OutsideGeofenceError,
    ValidationError,
)
from ..eligibility.resolver import EligibilityResolver
from ..events.model import EventSession
from ..events.repository import EventRepository
from ..geofence.evaluator import contains
from ..locations.repository import LocationRepository
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_CLOSED_MESSAGES = {
    EventStatus.CONCLUDED: "This event has already ended and its records are being finalized. You can no longer register.",
    EventStatus.FINALIZED: "The event has already ended and records were finalized.",
    EventStatus.CANCELLED: "This event was cancelled.",
}


class CheckInService:
    """Creates attendance records when students check in at an event's geofence."""

    def __init__(
        self,
        events: EventRepository,
        locations: LocationRepository,
        attendance: AttendanceRepository,
        resolver: EligibilityResolver,
        *,
        biometrics: Optional[BiometricRepository] = None,
        face_verifier: Optional[FaceVerifier] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._events = events
        self._locations = locations
        self._attendance = attendance
        self._resolver = resolver
        self._biometrics = biometrics
        self._face_verifier = face_verifier
        self._clock = clock

    @staticmethod
    def _ensure_open(event: EventSession) -> None:
        if event.status == EventStatus.UPCOMING:
            raise EventStateError(f"Registration not yet open. It starts at {event.registration_open_at:%Y-%m-%d %H:%M}.")
        if event.status in _CLOSED_MESSAGES:
            raise EventStateError(_CLOSED_MESSAGES[event.status])

    def _verify_face(self, student_id: int, face_image: Optional[str]) -> None:
        if not face_image:
            raise ValidationError("Face image is required for check-in")
        if self._biometrics is None or self._face_verifier is None:
            raise FaceVerificationError("Facial verification is not configured")

        reference = self._biometrics.get_reference_encoding(student_id)
        if not reference:
            raise FaceVerificationError("No biometric data found for student. Please register your face first.")

        match = self._face_verifier.verify(face_image, reference)
        if not match.matched:
            logger.info("Face verification rejected student %s (confidence %.3f)", student_id, match.confidence)
            raise FaceVerificationError("Facial verification failed. Please try again with better lighting.")

    def register(
        self,
        student_id: int,
        event_id: int,
        location_id: int,
        latitude: float,
        longitude: float,
        *,
        face_image: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        lat, lon = require_coordinates(latitude, longitude)
        now = now or self._clock()

        event = self._events.get_by_id(event_id)
        if not event:
            raise NotFoundError(f"Event {event_id} not found")
        self._ensure_open(event)

        if not self._resolver.is_eligible(int(student_id), event.eligibility):
            raise IneligibleStudentError("Student is not eligible to check in for this event.")

        location_id = int(location_id)
        if location_id not in (event.registration_location_id, event.venue_location_id):
            raise LocationMismatchError("Check-in location does not belong to this event.")
        location = self._locations.get_by_id(location_id)
        if not location:
            raise NotFoundError(f"Location {location_id} not found")
        if not contains(location.boundary, lat, lon):
            raise OutsideGeofenceError(f"Student is outside the {location.name} boundary.")

        at_venue = location_id == event.venue_location_id
        existing = self._attendance.get(student_id=int(student_id), event_id=event.event_id)
        if existing is not None and not (existing.status == AttendanceStatus.PARTIALLY_REGISTERED and at_venue):
            raise DuplicateRecordError("Student is already checked in for this event.")

        if event.facial_verification_enabled:
            self._verify_face(int(student_id), face_image)

        if existing is not None:
            upgraded = self._upgrade_to_venue(existing, event, location_id, now)
            if upgraded is None:
                raise DuplicateRecordError("Student is already checked in for this event.")
            return upgraded

        late = now > event.start_at
        if event.strict_location_validation and not at_venue:
            status, reason = AttendanceStatus.PARTIALLY_REGISTERED, None
        elif late:
            status, reason = AttendanceStatus.LATE, REASON_LATE_REGISTRATION
        else:
            status, reason = AttendanceStatus.REGISTERED, None

        record = AttendanceRecord(
            student_id=int(student_id),
            event_id=event.event_id,
            location_id=location_id,
            status=status,
            time_in=now,
            reason=reason,
        )
        self._attendance.create(record)
        logger.info("Student %s checked in to event %s at %s as %s", student_id, event.event_id, location.name, status.value)
        return record

    def arrive_at_venue(
        self,
        student_id: int,
        event_id: int,
        latitude: float,
        longitude: float,
        *,
        now: Optional[datetime] = None,
    ) -> bool:
        """Complete a partial registration once the student is inside the venue.

        Returns True when the record was upgraded.
        """
        lat, lon = require_coordinates(latitude, longitude)
        now = now or self._clock()

        event = self._events.get_by_id(event_id)
        if not event:
            raise NotFoundError(f"Event {event_id} not found")
        self._ensure_open(event)

        venue = self._locations.get_by_id(event.venue_location_id)
        if not venue:
            raise NotFoundError(f"Location {event.venue_location_id} not found")
        if not contains(venue.boundary, lat, lon):
            return False

        existing = self._attendance.get(student_id=int(student_id), event_id=event.event_id)
        if existing is None or existing.status != AttendanceStatus.PARTIALLY_REGISTERED:
            return False
        return self._upgrade_to_venue(existing, event, venue.location_id, now) is not None

    def _upgrade_to_venue(
        self,
        record: AttendanceRecord,
        event: EventSession,
        venue_id: int,
        now: datetime,
    ) -> Optional[AttendanceRecord]:
        late = now > event.start_at
        upgraded = False

        def mutate(current: AttendanceRecord) -> AttendanceRecord:
            nonlocal upgraded
            if current.status != AttendanceStatus.PARTIALLY_REGISTERED:
                return current
            upgraded = True
            return replace(
                current,
                status=AttendanceStatus.LATE if late else AttendanceStatus.REGISTERED,
                location_id=venue_id,
                time_in=now,
            ).with_reason(REASON_LATE_VENUE_UPGRADE if late else REASON_VENUE_UPGRADE)

        result = self._attendance.update(student_id=record.student_id, event_id=record.event_id, mutate=mutate)
        if result is None or not upgraded:
            return None
        logger.info("Student %s upgraded to %s at venue of event %s", record.student_id, result.status.value, event.event_id)
        return result
