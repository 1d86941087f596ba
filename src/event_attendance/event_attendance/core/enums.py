from __future__ import annotations

from enum import Enum


class EventStatus(str, Enum):
    """Lifecycle phase of an event session."""

    UPCOMING = "UPCOMING"
    REGISTRATION = "REGISTRATION"
    ONGOING = "ONGOING"
    CONCLUDED = "CONCLUDED"
    FINALIZED = "FINALIZED"
    CANCELLED = "CANCELLED"


class AttendanceStatus(str, Enum):
    """Status stored on an attendance record."""

    PARTIALLY_REGISTERED = "PARTIALLY_REGISTERED"
    REGISTERED = "REGISTERED"
    LATE = "LATE"
    PRESENT = "PRESENT"
    IDLE = "IDLE"
    ABSENT = "ABSENT"


class CheckArea(str, Enum):
    """Which of an event's two geofences a location check targets."""

    REGISTRATION = "registration"
    VENUE = "venue"
