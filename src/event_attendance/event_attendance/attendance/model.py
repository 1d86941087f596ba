from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from ..core.constants import REASON_SEPARATOR
from ..core.enums import AttendanceStatus


def append_reason(existing: Optional[str], note: Optional[str]) -> Optional[str]:
    """Reasons are append-only; repeating the latest note is a no-op."""
    if not note:
        return existing
    if not existing:
        return note
    if existing.split(REASON_SEPARATOR)[-1] == note:
        return existing
    return f"{existing}{REASON_SEPARATOR}{note}"


@dataclass(frozen=True)
class LocationPing:
    timestamp: datetime
    latitude: float
    longitude: float
    inside: bool
    client_timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's attendance at one event."""

    student_id: int
    event_id: int
    location_id: Optional[int]
    status: AttendanceStatus
    time_in: Optional[datetime] = None
    time_out: Optional[datetime] = None
    reason: Optional[str] = None
    ping_log: tuple[LocationPing, ...] = ()

    @property
    def key(self) -> tuple[int, int]:
        return self.student_id, self.event_id

    @property
    def last_ping(self) -> Optional[LocationPing]:
        return self.ping_log[-1] if self.ping_log else None

    def with_ping(self, ping: LocationPing) -> "AttendanceRecord":
        return replace(self, ping_log=self.ping_log + (ping,))

    def with_reason(self, note: Optional[str]) -> "AttendanceRecord":
        return replace(self, reason=append_reason(self.reason, note))

    def outside_streak(self) -> int:
        """Number of trailing pings that were outside the venue."""
        count = 0
        for ping in reversed(self.ping_log):
            if ping.inside:
                break
            count += 1
        return count
