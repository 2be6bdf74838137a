"""
Exchange‑rate endpoints for API v1.

These routes are public.  ``/latest`` and ``/timeseries`` always answer
200 once their parameters are valid: when every external provider
fails, the response is built from the static rate table.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request

from trip_planner_api.app.services.rate_service import RateAggregator


router = APIRouter()


async def get_rate_aggregator(request: Request) -> RateAggregator:
    return request.app.state.rates


@router.get("/rates", response_model=Dict[str, float])
async def static_rates(aggregator: RateAggregator = Depends(get_rate_aggregator)) -> Dict[str, float]:
    """Return the static rate table (multipliers relative to USD)."""
    return aggregator.static_rates()


@router.get("/latest", response_model=Dict[str, Any])
async def latest_rates(
    base: str = Query("USD", max_length=10),
    aggregator: RateAggregator = Depends(get_rate_aggregator),
) -> Dict[str, Any]:
    """Return ``{base, rates}`` from the first provider that answers."""
    return await aggregator.latest(base)


@router.get("/timeseries", response_model=Dict[str, Any])
async def rate_timeseries(
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    base: str = Query("USD", max_length=10),
    symbols: str = Query("", max_length=100),
    aggregator: RateAggregator = Depends(get_rate_aggregator),
) -> Dict[str, Any]:
    """Return ``{base, rates: {date: {symbol: rate}}}`` for a date range.

    Both dates are required.  Without a live provider the series is
    flat, derived from the static table.
    """
    return await aggregator.timeseries(start_date, end_date, base, symbols)
