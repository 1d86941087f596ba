from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Storage for attendance records, keyed by (student_id, event_id)."""

    def get(self, *, student_id: int, event_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_event(self, event_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create(self, record: AttendanceRecord) -> None:
        """Insert a new record; raises DuplicateRecordError if the pair exists."""

        raise NotImplementedError

    def update(
        self,
        *,
        student_id: int,
        event_id: int,
        mutate: Callable[[AttendanceRecord], AttendanceRecord],
    ) -> Optional[AttendanceRecord]:
        """Atomic read-modify-write of one record.

        `mutate` receives the current record and returns the new one (it may
        only append to the ping log). Calls for the same record are serialized;
        calls for different records never wait on each other. Exceptions raised
        by `mutate` abort the write. Returns None when the record is missing.
        """

        raise NotImplementedError

    def save_verdict(
        self,
        *,
        student_id: int,
        event_id: int,
        status: AttendanceStatus,
        time_out: Optional[datetime],
        reason: Optional[str],
    ) -> bool:
        raise NotImplementedError
