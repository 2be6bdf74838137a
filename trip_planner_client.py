"""Trip Planner API client.

A thin wrapper around the Trip Planner HTTP API built on ``requests``.
It covers the operations the web front end performs:

* :meth:`register` and :meth:`login` – create an account and obtain a
  bearer token (stored on the client for later calls).
* :meth:`list_trips`, :meth:`get_trip`, :meth:`create_trip`,
  :meth:`update_trip`, :meth:`delete_trip` – manage the user's trips.
* :meth:`static_rates`, :meth:`latest_rates`, :meth:`timeseries` –
  currency data for the converter.

Every method returns a tuple ``(data, error)``: on success ``error`` is
``None``; on failure ``data`` is ``None`` (or an empty list) and
``error`` is a dictionary with ``status_code`` and ``message``.

:func:`convert` reproduces the front end's currency conversion.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


def convert(amount: float, from_code: str, to_code: str, rates: Mapping[str, float]) -> float:
    """Convert ``amount`` between currencies using a ``rates`` table.

    Rates are multipliers relative to a common base, so the amount is
    divided by the source rate and multiplied by the target rate.
    Unknown codes count as 1.  The result is rounded to 4 decimals.
    """
    from_rate = rates.get(from_code) or 1
    to_rate = rates.get(to_code) or 1
    return round(amount / from_rate * to_rate, 4)


class TripPlannerAPI:
    """Client for the Trip Planner API."""

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Root of the API including its prefix, e.g.
                ``http://localhost:3000/api``.
            token: Optional bearer token from an earlier login.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Seconds to wait for each request.
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Result:
        """Perform an HTTP request to the API.

        Returns:
            A tuple ``(data, error)``.  ``data`` holds the decoded JSON
            body on success.  ``error`` holds ``status_code`` and
            ``message`` (taken from the API's ``error`` field) on failure.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("error") or err_json.get("detail") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Account operations
    # ------------------------------------------------------------------
    def register(self, email: str, password: str) -> Result:
        """Create an account.  ``data`` is ``{"message", "userId"}``."""
        return self._request("POST", "/register", json_body={"email": email, "password": password})

    def login(self, email: str, password: str) -> Result:
        """Log in and remember the returned token for later calls."""
        data, error = self._request("POST", "/login", json_body={"email": email, "password": password})
        if error:
            return None, error
        self.token = data.get("token")
        return data, None

    def logout(self) -> None:
        """Forget the token.  The server keeps no session state."""
        self.token = None

    # ------------------------------------------------------------------
    # Trip operations
    # ------------------------------------------------------------------
    def list_trips(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", "/trips")
        if error:
            return [], error
        return data or [], None

    def get_trip(self, trip_id: int) -> Result:
        return self._request("GET", f"/trip/{trip_id}")

    def create_trip(
        self,
        title: str,
        location: str,
        price: float,
        description: Optional[str] = None,
    ) -> Result:
        payload: Dict[str, Any] = {"title": title, "location": location, "price": price}
        if description is not None:
            payload["description"] = description
        return self._request("POST", "/trip", json_body=payload)

    def update_trip(self, trip_id: int, **fields: Any) -> Result:
        """Update a trip.  Pass only the fields that should change."""
        return self._request("PUT", f"/trip/{trip_id}", json_body=fields)

    def delete_trip(self, trip_id: int) -> Tuple[bool, Optional[Dict[str, Any]]]:
        _, error = self._request("DELETE", f"/trip/{trip_id}")
        if error:
            return False, error
        return True, None

    # ------------------------------------------------------------------
    # Exchange rates
    # ------------------------------------------------------------------
    def static_rates(self) -> Result:
        return self._request("GET", "/rates")

    def latest_rates(self, base: str = "USD") -> Result:
        return self._request("GET", "/latest", params={"base": base})

    def timeseries(self, start_date: str, end_date: str, base: str = "USD", symbols: str = "") -> Result:
        return self._request(
            "GET",
            "/timeseries",
            params={"start_date": start_date, "end_date": end_date, "base": base, "symbols": symbols},
        )
