from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import AttendanceStatus
from ...events.model import EventSession
from ..model import AttendanceRecord


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class VerdictStrategy(ABC):
    """Strategy Pattern: decide the final status of one attendance record."""

    @abstractmethod
    def decide(self, *, event: EventSession, record: AttendanceRecord) -> StatusDecision:
        raise NotImplementedError
