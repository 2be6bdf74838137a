"""
Trip endpoints for API v1.

CRUD operations on the caller's own trips.  Every route requires a
bearer token; the trip service is bound to the verified user id, so a
trip belonging to another user is reported as not found.
"""

import sqlite3
from typing import Dict, List

from fastapi import APIRouter, Depends, status

from trip_planner_api.app.core.db import get_connection
from trip_planner_api.app.core.security import CurrentUser, get_current_user
from trip_planner_api.app.schemas.trip import TripCreate, TripRead, TripUpdate
from trip_planner_api.app.services.trip_service import TripService


router = APIRouter()


async def get_trip_service(
    current_user: CurrentUser = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_connection),
) -> TripService:
    return TripService(conn, owner_id=current_user.user_id)


@router.get("/trips", response_model=List[TripRead])
async def list_trips(service: TripService = Depends(get_trip_service)) -> List[TripRead]:
    """List the caller's trips, newest first."""
    return await service.list_trips()


@router.get("/trip/{trip_id}", response_model=TripRead)
async def get_trip(trip_id: int, service: TripService = Depends(get_trip_service)) -> TripRead:
    return await service.get_trip(trip_id)


@router.post("/trip", response_model=TripRead, status_code=status.HTTP_201_CREATED)
async def create_trip(trip: TripCreate, service: TripService = Depends(get_trip_service)) -> TripRead:
    """Create a trip owned by the caller."""
    return await service.create_trip(trip)


@router.put("/trip/{trip_id}", response_model=TripRead)
async def update_trip(
    trip_id: int,
    updates: TripUpdate,
    service: TripService = Depends(get_trip_service),
) -> TripRead:
    """Update any subset of ``title``, ``location``, ``price`` and ``description``.

    Fields left out of the payload keep their values.  An empty payload
    is rejected with 400.
    """
    return await service.update_trip(trip_id, updates)


@router.delete("/trip/{trip_id}", response_model=Dict[str, str])
async def delete_trip(trip_id: int, service: TripService = Depends(get_trip_service)) -> Dict[str, str]:
    return await service.delete_trip(trip_id)
