"""
Business logic for trips.

A ``TripService`` is bound to a database connection and to the
verified id of the calling user.  Every statement it issues carries
``user_id = ?`` in its ``WHERE`` clause, including the ``UPDATE`` and
``DELETE`` statements themselves, so a trip owned by someone else
behaves exactly like a trip that does not exist.
"""

import logging
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Union

from ..core.db import transaction
from ..core.errors import BadRequestError, NotFoundError, parse_model
from ..schemas.trip import TripCreate, TripRead, TripUpdate

logger = logging.getLogger(__name__)

_COLUMNS = "id, user_id, title, location, price, description, created_at, updated_at"

# SQLite INTEGER is a signed 64-bit value; sqlite3 refuses to bind anything wider.
MAX_TRIP_ID = 2**63 - 1


def utcnow() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _require_storable_id(trip_id: int) -> None:
    # Such an id can never have been assigned, so it is just a missing trip.
    if not -MAX_TRIP_ID - 1 <= trip_id <= MAX_TRIP_ID:
        raise NotFoundError("Trip not found")


class TripService:
    """Ownership‑scoped access to the ``trips`` table."""

    def __init__(self, conn: sqlite3.Connection, owner_id: int) -> None:
        self.conn = conn
        self.owner_id = owner_id

    def _fetch(self, trip_id: int) -> sqlite3.Row | None:
        _require_storable_id(trip_id)
        return self.conn.execute(
            f"SELECT {_COLUMNS} FROM trips WHERE id = ? AND user_id = ?",
            (trip_id, self.owner_id),
        ).fetchone()

    async def list_trips(self) -> List[TripRead]:
        """Return the caller's trips, newest first."""
        rows = self.conn.execute(
            f"SELECT {_COLUMNS} FROM trips WHERE user_id = ? ORDER BY created_at DESC, id DESC",
            (self.owner_id,),
        ).fetchall()
        return [TripRead(**dict(row)) for row in rows]

    async def get_trip(self, trip_id: int) -> TripRead:
        row = self._fetch(trip_id)
        if not row:
            raise NotFoundError("Trip not found")
        return TripRead(**dict(row))

    async def create_trip(self, data: Union[TripCreate, Mapping[str, Any]]) -> TripRead:
        """Validate and store a new trip.

        Raises ``ValidationError`` listing every invalid field.  Both
        timestamps are set to the same instant.
        """
        trip = parse_model(TripCreate, data)
        now = utcnow()
        with transaction(self.conn) as cursor:
            cursor.execute(
                """
                INSERT INTO trips (user_id, title, location, price, description, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (self.owner_id, trip.title, trip.location, trip.price, trip.description or "", now, now),
            )
            trip_id = cursor.lastrowid
        logger.info("User %s created trip %s", self.owner_id, trip_id)
        return await self.get_trip(trip_id)

    async def update_trip(self, trip_id: int, updates: Union[TripUpdate, Mapping[str, Any]]) -> TripRead:
        """Apply a partial update and return the reloaded trip.

        Only the supplied fields are validated and written, in a single
        ``UPDATE`` that also refreshes ``updated_at``.  Raises
        ``ValidationError`` before anything is written if a supplied
        field is invalid, ``NotFoundError`` if the caller owns no such
        trip and ``BadRequestError`` if no updatable field was supplied.
        """
        _require_storable_id(trip_id)
        patch = parse_model(TripUpdate, updates)
        assignments = patch.assignments()
        if not assignments:
            # A missing trip still reports 404 rather than 400.
            await self.get_trip(trip_id)
            raise BadRequestError("No fields to update")

        set_clause = ", ".join(f"{column} = ?" for column, _ in assignments)
        values = [value for _, value in assignments]
        with transaction(self.conn) as cursor:
            cursor.execute(
                f"UPDATE trips SET {set_clause}, updated_at = ? WHERE id = ? AND user_id = ?",
                (*values, utcnow(), trip_id, self.owner_id),
            )
            changed = cursor.rowcount
        if not changed:
            raise NotFoundError("Trip not found")
        logger.info("User %s updated trip %s (%s)", self.owner_id, trip_id, ", ".join(c for c, _ in assignments))
        return await self.get_trip(trip_id)

    async def delete_trip(self, trip_id: int) -> Dict[str, str]:
        _require_storable_id(trip_id)
        with transaction(self.conn) as cursor:
            cursor.execute("DELETE FROM trips WHERE id = ? AND user_id = ?", (trip_id, self.owner_id))
            deleted = cursor.rowcount
        if not deleted:
            raise NotFoundError("Trip not found")
        logger.info("User %s deleted trip %s", self.owner_id, trip_id)
        return {"message": "Trip deleted successfully"}
