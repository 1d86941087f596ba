from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateRecordError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import AttendanceRecord, LocationPing
from .repository import AttendanceRepository

_DUPLICATE_ENTRY = 1062

_RECORD_COLUMNS = "record_id, student_id, event_id, location_id, status, time_in, time_out, reason"


def _to_ping(r: dict) -> LocationPing:
    return LocationPing(
        timestamp=r["pinged_at"],
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        inside=bool(r["is_inside"]),
        client_timestamp=r.get("client_timestamp"),
    )


def _to_record(r: dict, pings: Sequence[LocationPing]) -> AttendanceRecord:
    return AttendanceRecord(
        student_id=int(r["student_id"]),
        event_id=int(r["event_id"]),
        location_id=int(r["location_id"]) if r.get("location_id") is not None else None,
        status=AttendanceStatus(r["status"]),
        time_in=r.get("time_in"),
        time_out=r.get("time_out"),
        reason=r.get("reason"),
        ping_log=tuple(pings),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _pings_for(cur, record_ids: Sequence[int]) -> dict[int, list[LocationPing]]:
        out: dict[int, list[LocationPing]] = {rid: [] for rid in record_ids}
        if not record_ids:
            return out
        cur.execute(
            f"""
            SELECT record_id, pinged_at, latitude, longitude, is_inside, client_timestamp
            FROM attendance_pings
            WHERE record_id IN ({in_clause(record_ids)})
            ORDER BY record_id ASC, seq ASC
            """,
            tuple(record_ids),
        )
        for r in fetchall(cur):
            out[int(r["record_id"])].append(_to_ping(r))
        return out

    @staticmethod
    def _insert_pings(cur, record_id: int, start_seq: int, pings: Sequence[LocationPing]) -> None:
        for offset, ping in enumerate(pings):
            cur.execute(
                """
                INSERT INTO attendance_pings(record_id, seq, pinged_at, latitude, longitude, is_inside, client_timestamp)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record_id,
                    start_seq + offset,
                    ping.timestamp,
                    ping.latitude,
                    ping.longitude,
                    int(ping.inside),
                    ping.client_timestamp,
                ),
            )

    def get(self, *, student_id: int, event_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE student_id=%s AND event_id=%s",
                (int(student_id), int(event_id)),
            )
            r = fetchone(cur)
            if not r:
                return None
            record_id = int(r["record_id"])
            return _to_record(r, self._pings_for(cur, [record_id])[record_id])

    def list_for_event(self, event_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE event_id=%s ORDER BY record_id ASC",
                (int(event_id),),
            )
            rows = fetchall(cur)
            pings = self._pings_for(cur, [int(r["record_id"]) for r in rows])
            return [_to_record(r, pings[int(r["record_id"])]) for r in rows]

    def create(self, record: AttendanceRecord) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO attendance_records(student_id, event_id, location_id, status, time_in, time_out, reason)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.student_id,
                        record.event_id,
                        record.location_id,
                        record.status.value,
                        record.time_in,
                        record.time_out,
                        record.reason,
                    ),
                )
            except mysql.connector.IntegrityError as exc:
                if exc.errno == _DUPLICATE_ENTRY:
                    raise DuplicateRecordError(
                        f"Attendance record already exists for student {record.student_id} in event {record.event_id}"
                    ) from exc
                raise
            self._insert_pings(cur, int(cur.lastrowid), 0, record.ping_log)

    def update(
        self,
        *,
        student_id: int,
        event_id: int,
        mutate: Callable[[AttendanceRecord], AttendanceRecord],
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            # Row lock held until commit: serializes writers of this record only.
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE student_id=%s AND event_id=%s FOR UPDATE",
                (int(student_id), int(event_id)),
            )
            r = fetchone(cur)
            if not r:
                return None
            record_id = int(r["record_id"])
            current = _to_record(r, self._pings_for(cur, [record_id])[record_id])

            updated = mutate(current)
            known = len(current.ping_log)
            if updated.ping_log[:known] != current.ping_log:
                raise ValueError("Ping log is append-only")

            self._insert_pings(cur, record_id, known, updated.ping_log[known:])
            cur.execute(
                """
                UPDATE attendance_records
                SET location_id=%s, status=%s, time_in=%s, time_out=%s, reason=%s
                WHERE record_id=%s
                """,
                (
                    updated.location_id,
                    updated.status.value,
                    updated.time_in,
                    updated.time_out,
                    updated.reason,
                    record_id,
                ),
            )
            return updated

    def save_verdict(
        self,
        *,
        student_id: int,
        event_id: int,
        status: AttendanceStatus,
        time_out: Optional[datetime],
        reason: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, time_out=%s, reason=%s
                WHERE student_id=%s AND event_id=%s
                """,
                (status.value, time_out, reason, int(student_id), int(event_id)),
            )
            return cur.rowcount > 0
