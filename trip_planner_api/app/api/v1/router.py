"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers (users, trips, rates).  The
endpoints define their own paths (``/register``, ``/trips``,
``/trip/{id}``, ``/latest`` ...) because those URLs are relied upon by
existing clients, so no per‑domain prefix is added here.  Every route
counts against the global per‑client request budget.
"""

from fastapi import APIRouter, Depends

from trip_planner_api.app.core.rate_limit import enforce_global_limit

from .endpoints import rates, trips, users

router = APIRouter(dependencies=[Depends(enforce_global_limit)])

router.include_router(users.router, tags=["users"])
router.include_router(trips.router, tags=["trips"])
router.include_router(rates.router, tags=["rates"])
