from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_coordinates
from ..core.constants import OUTSIDE_STREAK_LENGTH, REASON_OUTSIDE_STREAK
from ..core.enums import AttendanceStatus, CheckArea, EventStatus
from ..core.exceptions import (
    EventNotOngoingError,
    IneligibleRecordError,
    LocationMismatchError,
    MonitoringDisabledError,
    NotFoundError,
    NotRegisteredError,
)
from ..events.model import EventSession
from ..events.repository import EventRepository
from ..geofence.evaluator import contains
from ..locations.model import Location
from ..locations.repository import LocationRepository
from .model import AttendanceRecord, LocationPing
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

PINGABLE_STATUSES = frozenset({AttendanceStatus.REGISTERED, AttendanceStatus.LATE, AttendanceStatus.PRESENT})


@dataclass(frozen=True)
class LocationCheck:
    inside: bool
    location_name: str
    message: str


class PresenceTracker:
    """Ingests location pings from checked-in students while an event runs."""

    def __init__(
        self,
        events: EventRepository,
        locations: LocationRepository,
        attendance: AttendanceRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._events = events
        self._locations = locations
        self._attendance = attendance
        self._clock = clock

    def _get_event(self, event_id: int) -> EventSession:
        event = self._events.get_by_id(event_id)
        if not event:
            raise NotFoundError(f"Event {event_id} not found")
        return event

    def _get_location(self, location_id: int) -> Location:
        location = self._locations.get_by_id(location_id)
        if not location:
            raise NotFoundError(f"Location {location_id} not found")
        return location

    def ingest_ping(
        self,
        student_id: int,
        event_id: int,
        claimed_location_id: int,
        latitude: float,
        longitude: float,
        client_timestamp: Optional[datetime] = None,
        *,
        now: Optional[datetime] = None,
    ) -> bool:
        """Record one location sample and return whether it was inside the venue."""
        lat, lon = require_coordinates(latitude, longitude)

        event = self._get_event(event_id)
        if event.status != EventStatus.ONGOING:
            raise EventNotOngoingError(
                f"Event is not ongoing (status {event.status.value}). Cannot record attendance ping."
            )
        if not event.location_monitoring_enabled:
            raise MonitoringDisabledError("Location monitoring is disabled for this event.")
        if int(claimed_location_id) != event.venue_location_id:
            raise LocationMismatchError("Location pings must target the event venue.")

        venue = self._get_location(event.venue_location_id)
        inside = contains(venue.boundary, lat, lon)
        received_at = now or self._clock()

        def mutate(record: AttendanceRecord) -> AttendanceRecord:
            if record.status not in PINGABLE_STATUSES:
                raise IneligibleRecordError(
                    f"Attendance status {record.status.value} does not accept location pings."
                )
            # Server time, kept non-decreasing within the record.
            last = record.last_ping
            timestamp = max(received_at, last.timestamp) if last else received_at
            updated = record.with_ping(
                LocationPing(
                    timestamp=timestamp,
                    latitude=lat,
                    longitude=lon,
                    inside=inside,
                    client_timestamp=client_timestamp,
                )
            )
            streak = updated.outside_streak()
            if streak >= OUTSIDE_STREAK_LENGTH:
                since = updated.ping_log[-streak].timestamp
                updated = updated.with_reason(REASON_OUTSIDE_STREAK.format(count=streak, since=since))
                logger.warning(
                    "Student %s outside venue of event %s for %d consecutive pings - flagged for review",
                    student_id,
                    event_id,
                    streak,
                )
            return updated

        record = self._attendance.update(student_id=int(student_id), event_id=event.event_id, mutate=mutate)
        if record is None:
            raise NotRegisteredError("Student must register before sending location pings.")

        logger.debug("Ping for student %s in event %s: %s", student_id, event_id, "INSIDE" if inside else "OUTSIDE")
        return inside

    def check_location(
        self,
        event_id: int,
        latitude: float,
        longitude: float,
        *,
        area: CheckArea = CheckArea.VENUE,
    ) -> LocationCheck:
        """Tell a student whether they stand inside one of the event's geofences; stores nothing."""
        lat, lon = require_coordinates(latitude, longitude)
        event = self._get_event(event_id)

        if area == CheckArea.REGISTRATION:
            location = self._get_location(event.registration_location_id)
            inside = contains(location.boundary, lat, lon)
            message = (
                f"You are at the registration location ({location.name}). You may proceed with check-in."
                if inside
                else f"You must be at the registration location ({location.name}) to check in for this event."
            )
        else:
            location = self._get_location(event.venue_location_id)
            inside = contains(location.boundary, lat, lon)
            message = (
                f"You are inside the event venue ({location.name})."
                if inside
                else f"Warning: You are outside the event venue ({location.name}). Please return to the venue area."
            )

        logger.info(
            "Location check for event %s: %s %s area %s",
            event_id,
            "INSIDE" if inside else "OUTSIDE",
            area.value,
            location.name,
        )
        return LocationCheck(inside=inside, location_name=location.name, message=message)
