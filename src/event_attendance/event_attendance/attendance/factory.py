from __future__ import annotations

from dataclasses import dataclass, field

from ..core.constants import DEFAULT_IDLE_RATIO, DEFAULT_PRESENT_RATIO
from ..core.enums import AttendanceStatus
from ..events.model import EventSession
from .model import AttendanceRecord
from .strategies.base import VerdictStrategy
from .strategies.check_in_strategy import CheckInStrategy
from .strategies.partial_registration_strategy import PartialRegistrationStrategy
from .strategies.ping_ratio_strategy import PingRatioStrategy


@dataclass
class VerdictStrategyFactory:
    """Factory Pattern: choose the verdict strategy for a record."""

    present_ratio: float = DEFAULT_PRESENT_RATIO
    idle_ratio: float = DEFAULT_IDLE_RATIO
    _ratio: PingRatioStrategy = field(init=False, repr=False)

    def __post_init__(self):
        self._ratio = PingRatioStrategy(present_ratio=self.present_ratio, idle_ratio=self.idle_ratio)

    def for_record(self, *, event: EventSession, record: AttendanceRecord) -> VerdictStrategy:
        if record.status == AttendanceStatus.PARTIALLY_REGISTERED:
            return PartialRegistrationStrategy()
        if not event.location_monitoring_enabled:
            return CheckInStrategy()
        return self._ratio
