from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import REASON_NO_RECORD
from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateRecordError, PersistenceError
from ..eligibility.resolver import EligibilityResolver
from ..events.model import EventSession
from .factory import VerdictStrategyFactory
from .model import AttendanceRecord, append_reason
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass
class FinalizationResult:
    event_id: int
    updated: int = 0
    created: int = 0
    unchanged: int = 0
    failed: int = 0

    @property
    def writes(self) -> int:
        return self.updated + self.created


class AttendanceFinalizer:
    """Turns a concluded event's records into final verdicts and back-fills no-shows.

    Re-running on an unchanged event writes nothing: records are only saved
    when their status changes, and no-show records are only created for
    audience members that still have no record.

    Failures are isolated per record. A record whose write fails is logged,
    counted in the result and left as it was; its siblings are still processed.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        resolver: EligibilityResolver,
        *,
        strategy_factory: Optional[VerdictStrategyFactory] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._resolver = resolver
        self._factory = strategy_factory or VerdictStrategyFactory()
        self._clock = clock

    def finalize(self, event: EventSession, *, now: Optional[datetime] = None) -> FinalizationResult:
        now = now or self._clock()
        result = FinalizationResult(event_id=event.event_id)

        records = list(self._attendance.list_for_event(event.event_id))
        for record in records:
            try:
                if self._finalize_record(event, record, now):
                    result.updated += 1
                else:
                    result.unchanged += 1
            except Exception:
                result.failed += 1
                logger.exception("Failed to finalize attendance for student %s in event %s", record.student_id, event.event_id)

        audience = self._resolver.resolve_audience(event.eligibility)
        recorded = {r.student_id for r in records}
        missing = sorted(audience - recorded)
        logger.info("Event %s: %d expected students, %d without a record", event.event_id, len(audience), len(missing))

        for student_id in missing:
            try:
                self._attendance.create(
                    AttendanceRecord(
                        student_id=student_id,
                        event_id=event.event_id,
                        location_id=None,
                        status=AttendanceStatus.ABSENT,
                        reason=REASON_NO_RECORD,
                    )
                )
                result.created += 1
                logger.info("Recorded student %s as absent in event %s (%s)", student_id, event.event_id, event.name)
            except DuplicateRecordError:
                # Created concurrently; the next run judges it like any other record.
                result.unchanged += 1
                logger.info("Student %s already has a record in event %s", student_id, event.event_id)
            except Exception:
                result.failed += 1
                logger.exception("Failed to record absence for student %s in event %s", student_id, event.event_id)

        if result.failed:
            logger.warning(
                "Attendance finalization for event %s finished with %d failed record(s): %s",
                event.event_id,
                result.failed,
                result,
            )
        else:
            logger.info("Attendance finalization completed for event %s, %s: %s", event.event_id, event.name, result)
        return result

    def _finalize_record(self, event: EventSession, record: AttendanceRecord, now: datetime) -> bool:
        strategy = self._factory.for_record(event=event, record=record)
        decision = strategy.decide(event=event, record=record)
        if decision.status == record.status:
            return False

        saved = self._attendance.save_verdict(
            student_id=record.student_id,
            event_id=record.event_id,
            status=decision.status,
            time_out=now,
            reason=append_reason(record.reason, decision.note),
        )
        if not saved:
            raise PersistenceError(f"Attendance record for student {record.student_id} disappeared during finalization")

        logger.info(
            "Finalized attendance for student %s as %s (was %s) in event %s",
            record.student_id,
            decision.status.value,
            record.status.value,
            event.event_id,
        )
        return True
