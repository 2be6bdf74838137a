"""
Exchange rates from third‑party feeds with a static fallback.

``RateAggregator`` asks a fixed, ordered list of public exchange‑rate
APIs and returns the first response that is JSON and contains a
``rates`` mapping.  Providers are tried one at a time, each with its
own timeout; nothing is retried within a call.  When all of them fail
the caller still gets an answer built from the static rate table, so
the rate endpoints never report provider errors.

The time‑series fallback is flat: every day in the range gets the same
ratio derived from the static table.  It is an approximation, not
historical data.
"""

import logging
from datetime import date, timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence
from urllib.parse import quote

import httpx

from ..core.errors import UpstreamError, ValidationError
from ..core.fallback import first_success
from ..schemas.rates import RateSeries, RateSnapshot

logger = logging.getLogger(__name__)

# URL templates, tried in order.  Placeholders are URL‑quoted before use.
LATEST_PROVIDERS: Sequence[str] = (
    "https://api.exchangerate.host/latest?base={base}",
    "https://open.er-api.com/v6/latest/{base}",
    "https://api.exchangerate-api.com/v4/latest/{base}",
)

TIMESERIES_PROVIDERS: Sequence[str] = (
    "https://api.exchangerate.host/timeseries?start_date={start}&end_date={end}&base={base}&symbols={symbols}",
    "https://api.frankfurter.app/{start}..{end}?from={base}&to={symbols}",
)


def has_rates(payload: Any) -> bool:
    return isinstance(payload, dict) and isinstance(payload.get("rates"), dict)


def _parse_date(value: Optional[str], name: str) -> date:
    if not value:
        raise ValidationError([{"field": name, "message": f"{name} is required"}])
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError([{"field": name, "message": "Expected a date in YYYY-MM-DD format"}]) from None


class RateAggregator:
    """Ordered exchange‑rate providers with a static fallback table.

    Parameters
    ----------
    client : httpx.AsyncClient
        Shared HTTP client; its lifetime is managed by the application.
    fallback_rates : Mapping[str, float]
        Static multipliers relative to USD.
    timeout : float
        Seconds allowed for each provider call.
    max_days : int
        Longest accepted time‑series range, both ends included.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        fallback_rates: Mapping[str, float],
        timeout: float = 15.0,
        max_days: int = 366,
        latest_providers: Sequence[str] = LATEST_PROVIDERS,
        timeseries_providers: Sequence[str] = TIMESERIES_PROVIDERS,
    ) -> None:
        self.client = client
        self.fallback_rates = fallback_rates
        self.timeout = timeout
        self.max_days = max_days
        self.latest_providers = tuple(latest_providers)
        self.timeseries_providers = tuple(timeseries_providers)

    def static_rates(self) -> Dict[str, float]:
        return dict(self.fallback_rates)

    async def fetch_json(self, url: str) -> Any:
        """GET ``url`` and decode the body as JSON.

        Raises ``UpstreamError`` on transport errors or a body that is
        not JSON.  The status code is not checked; the payload shape
        decides whether a response is usable.
        """
        try:
            response = await self.client.get(url)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"{type(exc).__name__}: {exc}") from exc
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(f"Invalid JSON (HTTP {response.status_code})") from exc

    def _operations(self, templates: Sequence[str], **params: str) -> List[tuple]:
        quoted = {key: quote(value, safe="") for key, value in params.items()}
        urls = [template.format(**quoted) for template in templates]
        return [(url, self._fetcher(url)) for url in urls]

    def _fetcher(self, url: str) -> Callable[[], Any]:
        return lambda: self.fetch_json(url)

    async def latest(self, base: str = "USD") -> Dict[str, Any]:
        """Return the latest rates for ``base``.

        The first provider payload with a ``rates`` mapping is returned
        as is.  Otherwise the static table is returned under the
        requested ``base``.
        """
        base = (base or "USD").upper()
        return await first_success(
            self._operations(self.latest_providers, base=base),
            timeout=self.timeout,
            accept=has_rates,
            fallback=lambda: RateSnapshot(base=base, rates=self.static_rates()).model_dump(),
        )

    async def timeseries(
        self,
        start_date: Optional[str],
        end_date: Optional[str],
        base: str = "USD",
        symbols: str = "",
    ) -> Dict[str, Any]:
        """Return daily rates between two dates (inclusive).

        Raises ``ValidationError`` if either date is missing or not in
        ``YYYY-MM-DD`` format, or if the range spans more than
        ``max_days`` days.  ``symbols`` is a comma‑separated list of
        target currencies; when empty, the fallback covers every
        currency of the static table.
        """
        start = _parse_date(start_date, "start_date")
        end = _parse_date(end_date, "end_date")
        if (end - start).days + 1 > self.max_days:
            raise ValidationError(
                [{"field": "end_date", "message": f"Date range must not exceed {self.max_days} days"}]
            )
        base = (base or "USD").upper()
        symbols = (symbols or "").upper()
        return await first_success(
            self._operations(
                self.timeseries_providers,
                start=start.isoformat(),
                end=end.isoformat(),
                base=base,
                symbols=symbols,
            ),
            timeout=self.timeout,
            accept=has_rates,
            fallback=lambda: self.flat_series(start, end, base, symbols),
        )

    def flat_series(self, start: date, end: date, base: str, symbols: str) -> Dict[str, Any]:
        """Build a constant series from the static table.

        ``ratio = fallback[target] / fallback[base]``; an unknown base
        counts as 1 and an unknown target as the base rate.  The series
        is empty when ``end`` precedes ``start``.
        """
        base_rate = self.fallback_rates.get(base) or 1
        targets = [s.strip() for s in symbols.split(",") if s.strip()] or list(self.fallback_rates)
        ratios = {target: (self.fallback_rates.get(target) or base_rate) / base_rate for target in targets}
        series: Dict[str, Dict[str, float]] = {}
        for offset in range((end - start).days + 1):
            day = start + timedelta(days=offset)
            series[day.isoformat()] = dict(ratios)
        return RateSeries(base=base, rates=series).model_dump()
