from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, load_json
from .repository import BiometricRepository


class MySQLBiometricRepository(BiometricRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_reference_encoding(self, student_id: int) -> Optional[Sequence[float]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT facial_encoding FROM student_biometrics WHERE student_id=%s", (int(student_id),))
            r = fetchone(cur)
            if not r:
                return None
            encoding = load_json(r["facial_encoding"])
            return [float(v) for v in encoding] if encoding else None
