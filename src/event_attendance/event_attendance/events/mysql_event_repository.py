from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.enums import EventStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, load_json
from .model import EligibilityCriteria, EventSession
from .repository import EventRepository

logger = logging.getLogger(__name__)

_COLUMNS = """
    event_id, event_name, registration_location_id, venue_location_id,
    registration_open_at, start_at, end_at, status, eligibility,
    facial_verification_enabled, location_monitoring_enabled, strict_location_validation
"""


def _to_event(r: dict) -> EventSession:
    return EventSession(
        event_id=int(r["event_id"]),
        name=r["event_name"],
        registration_location_id=int(r["registration_location_id"]),
        venue_location_id=int(r["venue_location_id"]),
        registration_open_at=r["registration_open_at"],
        start_at=r["start_at"],
        end_at=r["end_at"],
        status=EventStatus(r["status"]),
        eligibility=EligibilityCriteria.from_dict(load_json(r.get("eligibility"))),
        facial_verification_enabled=bool(r["facial_verification_enabled"]),
        location_monitoring_enabled=bool(r["location_monitoring_enabled"]),
        strict_location_validation=bool(r["strict_location_validation"]),
    )


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, event_id: int) -> Optional[EventSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM events WHERE event_id=%s", (int(event_id),))
            r = fetchone(cur)
            return _to_event(r) if r else None

    def list_by_status(self, statuses: Sequence[EventStatus]) -> Sequence[EventSession]:
        if not statuses:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM events WHERE status IN ({in_clause(statuses)}) ORDER BY end_at ASC, event_id ASC",
                tuple(s.value for s in statuses),
            )
            rows = fetchall(cur)

        events = []
        for r in rows:
            # One malformed row must not hide the others from the sweeps.
            try:
                events.append(_to_event(r))
            except Exception:
                logger.exception("Skipping unreadable event row %s", r.get("event_id"))
        return events

    def update_status(self, *, event_id: int, expected: EventStatus, new: EventStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE events SET status=%s WHERE event_id=%s AND status=%s",
                (new.value, int(event_id), expected.value),
            )
            return cur.rowcount > 0

