from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..attendance.finalizer import AttendanceFinalizer, FinalizationResult
from ..common.datetime_utils import now_local
from ..common.locks import KeyedLocks
from ..core.enums import EventStatus
from ..core.exceptions import EventStateError, NotFoundError
from .model import EventSession
from .repository import EventRepository

logger = logging.getLogger(__name__)

# Forward order of the time-driven states; CANCELLED sits outside it.
LIFECYCLE_ORDER = (
    EventStatus.UPCOMING,
    EventStatus.REGISTRATION,
    EventStatus.ONGOING,
    EventStatus.CONCLUDED,
    EventStatus.FINALIZED,
)
SWEEPABLE_STATUSES = (EventStatus.UPCOMING, EventStatus.REGISTRATION, EventStatus.ONGOING)
CANCELLABLE_STATUSES = frozenset(SWEEPABLE_STATUSES)


def resolve_status(event: EventSession, now: datetime) -> EventStatus:
    """The status the clock alone assigns to an event at `now`."""
    if now < event.registration_open_at:
        return EventStatus.UPCOMING
    if now < event.start_at:
        return EventStatus.REGISTRATION
    if now < event.end_at:
        return EventStatus.ONGOING
    return EventStatus.CONCLUDED


def next_status(event: EventSession, now: datetime) -> Optional[EventStatus]:
    """Forward-only transition for the status sweep, or None to leave the event alone."""
    if event.status not in SWEEPABLE_STATUSES:
        return None
    target = resolve_status(event, now)
    if LIFECYCLE_ORDER.index(target) > LIFECYCLE_ORDER.index(event.status):
        return target
    return None


class EventLifecycleService:
    """Advances events through their lifecycle and triggers finalization.

    Both sweeps treat events independently: a failure on one event is logged
    and the sweep moves on to the next.
    """

    def __init__(
        self,
        events: EventRepository,
        finalizer: AttendanceFinalizer,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._events = events
        self._finalizer = finalizer
        self._clock = clock
        self._finalizing = KeyedLocks()

    def sweep_statuses(self, *, now: Optional[datetime] = None) -> int:
        """Apply due transitions; returns how many events changed status."""
        now = now or self._clock()
        events = self._events.list_by_status(SWEEPABLE_STATUSES)

        changed = 0
        for event in events:
            try:
                target = next_status(event, now)
                if target is None:
                    continue
                if self._events.update_status(event_id=event.event_id, expected=event.status, new=target):
                    changed += 1
                    logger.info("Event %s status updated from %s to %s", event.event_id, event.status.value, target.value)
                else:
                    logger.info("Event %s changed concurrently; skipping transition to %s", event.event_id, target.value)
            except Exception:
                logger.exception("Failed to update status of event %s", event.event_id)

        logger.debug("Checked %d events for status updates", len(events))
        return changed

    def sweep_finalization(self, *, now: Optional[datetime] = None) -> int:
        """Finalize every CONCLUDED event; returns how many reached FINALIZED."""
        now = now or self._clock()
        events = self._events.list_by_status((EventStatus.CONCLUDED,))

        finalized = 0
        for event in events:
            try:
                if self._run_finalization(event, now) is not None:
                    finalized += 1
            except Exception:
                logger.exception("Failed to finalize event %s", event.event_id)
        return finalized

    def finalize_event(self, event_id: int, *, now: Optional[datetime] = None) -> FinalizationResult:
        """Finalize one event on demand (admin trigger)."""
        event = self._events.get_by_id(event_id)
        if not event:
            raise NotFoundError(f"Event {event_id} not found")
        if event.status != EventStatus.CONCLUDED:
            raise EventStateError(f"Only concluded events can be finalized (status {event.status.value}).")

        result = self._run_finalization(event, now or self._clock())
        if result is None:
            raise EventStateError("Finalization is already running for this event.")
        return result

    def _run_finalization(self, event: EventSession, now: datetime) -> Optional[FinalizationResult]:
        with self._finalizing.try_hold(event.event_id) as acquired:
            if not acquired:
                logger.warning("Finalization of event %s already in progress; skipping", event.event_id)
                return None

            result = self._finalizer.finalize(event, now=now)
            if self._events.update_status(event_id=event.event_id, expected=EventStatus.CONCLUDED, new=EventStatus.FINALIZED):
                logger.info("Event %s finalized (%d writes)", event.event_id, result.writes)
            else:
                logger.info("Event %s left CONCLUDED state during finalization", event.event_id)
            return result

    def cancel_event(self, event_id: int) -> EventSession:
        event = self._events.get_by_id(event_id)
        if not event:
            raise NotFoundError(f"Event {event_id} not found")
        if event.status not in CANCELLABLE_STATUSES:
            raise EventStateError(f"Event in status {event.status.value} can no longer be cancelled.")

        if not self._events.update_status(event_id=event.event_id, expected=event.status, new=EventStatus.CANCELLED):
            raise EventStateError("Event status changed while cancelling; please retry.")

        logger.info("Event %s cancelled (was %s)", event.event_id, event.status.value)
        return self._events.get_by_id(event_id) or event
