from __future__ import annotations

from typing import Optional

from ..common.datetime_utils import as_utc, to_db
from ..core.constants import PRIMARY_LOCATION_KEY
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, retrying
from .model import FacilityLocation
from .repository import FacilityRepository


class MySQLFacilityRepository(FacilityRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, location_key: str = PRIMARY_LOCATION_KEY):
        self._conn_factory = conn_factory
        self._location_key = location_key

    @retrying
    def get_active(self) -> Optional[FacilityLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT name, latitude, longitude, radius_meters, updated_at
                FROM facility_locations
                WHERE location_key=%s
                """,
                (self._location_key,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return FacilityLocation(
                name=r["name"],
                latitude=float(r["latitude"]),
                longitude=float(r["longitude"]),
                radius_meters=float(r["radius_meters"]),
                updated_at=as_utc(r["updated_at"]) if r.get("updated_at") else None,
            )

    @retrying
    def upsert(self, location: FacilityLocation) -> FacilityLocation:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO facility_locations(location_key, name, latitude, longitude, radius_meters, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    name=VALUES(name),
                    latitude=VALUES(latitude),
                    longitude=VALUES(longitude),
                    radius_meters=VALUES(radius_meters),
                    updated_at=VALUES(updated_at)
                """,
                (
                    self._location_key,
                    location.name,
                    location.latitude,
                    location.longitude,
                    location.radius_meters,
                    to_db(location.updated_at) if location.updated_at else None,
                ),
            )
            return location
