"""
Pydantic models for exchange‑rate responses.

Live provider payloads are passed through unchanged, so these models
describe only the shape the API guarantees: a ``base`` currency and a
``rates`` mapping.
"""

from typing import Dict

from pydantic import BaseModel, Field


class RateSnapshot(BaseModel):
    base: str = Field(..., examples=["USD"])
    rates: Dict[str, float] = Field(..., examples=[{"USD": 1.0, "EUR": 0.92, "CNY": 7.3}])


class RateSeries(BaseModel):
    """Rates per day (``YYYY-MM-DD``) and per target currency."""

    base: str = Field(..., examples=["USD"])
    rates: Dict[str, Dict[str, float]] = Field(..., examples=[{"2024-01-01": {"EUR": 0.92}}])
