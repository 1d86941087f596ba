from __future__ import annotations

from ...core.constants import REASON_NEVER_ENTERED_VENUE
from ...core.enums import AttendanceStatus
from ...events.model import EventSession
from ..model import AttendanceRecord
from .base import StatusDecision, VerdictStrategy


class PartialRegistrationStrategy(VerdictStrategy):
    """Checked in at the registration area but never reached the venue."""

    def decide(self, *, event: EventSession, record: AttendanceRecord) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ABSENT, note=REASON_NEVER_ENTERED_VENUE)
