from __future__ import annotations

from ...core.constants import REASON_LATE_ARRIVAL, REASON_NO_CHECK_IN
from ...core.enums import AttendanceStatus
from ...events.model import EventSession
from ..model import AttendanceRecord
from .base import StatusDecision, VerdictStrategy


class CheckInStrategy(VerdictStrategy):
    """Unmonitored events: checking in is attending; arriving after the start is late."""

    def decide(self, *, event: EventSession, record: AttendanceRecord) -> StatusDecision:
        if record.time_in is None:
            return StatusDecision(status=AttendanceStatus.ABSENT, note=REASON_NO_CHECK_IN)
        if record.time_in > event.start_at:
            return StatusDecision(status=AttendanceStatus.LATE, note=REASON_LATE_ARRIVAL.format(time_in=record.time_in))
        return StatusDecision(status=AttendanceStatus.PRESENT)
