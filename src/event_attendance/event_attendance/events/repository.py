from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EventStatus
from .model import EventSession


class EventRepository(Protocol):
    def get_by_id(self, event_id: int) -> Optional[EventSession]:
        raise NotImplementedError

    def list_by_status(self, statuses: Sequence[EventStatus]) -> Sequence[EventSession]:
        raise NotImplementedError

    def update_status(self, *, event_id: int, expected: EventStatus, new: EventStatus) -> bool:
        """Compare-and-set the status.

        Returns False when the stored status is no longer `expected`, so a
        concurrent change (e.g. a cancellation) is never overwritten.
        """

        raise NotImplementedError
