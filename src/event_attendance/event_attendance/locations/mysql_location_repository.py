from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, load_json
from ..geofence.model import boundary_from_geojson
from .model import Location
from .repository import LocationRepository


class MySQLLocationRepository(LocationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, location_id: int) -> Optional[Location]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT location_id, location_name, boundary FROM locations WHERE location_id=%s",
                (int(location_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Location(
                location_id=int(r["location_id"]),
                name=r["location_name"],
                boundary=boundary_from_geojson(load_json(r["boundary"])),
            )
