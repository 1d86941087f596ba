from __future__ import annotations

from ...core.constants import (
    DEFAULT_IDLE_RATIO,
    DEFAULT_PRESENT_RATIO,
    REASON_LATE_ARRIVAL,
    REASON_MINIMAL,
    REASON_NO_PINGS,
    REASON_PARTIAL,
)
from ...core.enums import AttendanceStatus
from ...core.exceptions import ValidationError
from ...events.model import EventSession
from ..model import AttendanceRecord
from ..presence import inside_ratio
from .base import StatusDecision, VerdictStrategy


class PingRatioStrategy(VerdictStrategy):
    """Monitored events: verdict from the share of the event spent inside the venue."""

    def __init__(self, *, present_ratio: float = DEFAULT_PRESENT_RATIO, idle_ratio: float = DEFAULT_IDLE_RATIO):
        if not 0.0 <= idle_ratio <= present_ratio <= 1.0:
            raise ValidationError(f"Invalid presence thresholds: idle={idle_ratio}, present={present_ratio}")
        self.present_ratio = float(present_ratio)
        self.idle_ratio = float(idle_ratio)

    def decide(self, *, event: EventSession, record: AttendanceRecord) -> StatusDecision:
        if not record.ping_log:
            return StatusDecision(status=AttendanceStatus.ABSENT, note=REASON_NO_PINGS)

        ratio = inside_ratio(record.ping_log, event.start_at, event.end_at)
        percentage = ratio * 100

        if ratio >= self.present_ratio:
            if record.time_in is not None and record.time_in > event.start_at:
                return StatusDecision(status=AttendanceStatus.LATE, note=REASON_LATE_ARRIVAL.format(time_in=record.time_in))
            return StatusDecision(status=AttendanceStatus.PRESENT)
        if ratio >= self.idle_ratio:
            return StatusDecision(status=AttendanceStatus.IDLE, note=REASON_PARTIAL.format(percentage=percentage))
        return StatusDecision(status=AttendanceStatus.ABSENT, note=REASON_MINIMAL.format(percentage=percentage))
