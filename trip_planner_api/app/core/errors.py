"""
Application exceptions.

Services raise these instead of ``HTTPException`` so that business
logic stays independent of the web layer.  Each exception carries the
HTTP status code it maps to; the handlers registered in ``main.py``
turn them into JSON bodies of the form ``{"error": ..., "details": ...}``.

Usage::

    from trip_planner_api.app.core.errors import NotFoundError

    raise NotFoundError("Trip not found")
"""

from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

M = TypeVar("M", bound=BaseModel)


class TripPlannerError(Exception):
    """Base exception for all Trip Planner errors."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, *, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(TripPlannerError):
    """Input failed validation.  ``details`` lists every offending field."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, details: List[Dict[str, str]], message: Optional[str] = None):
        super().__init__(message)
        self.details = details

    @classmethod
    def from_pydantic(cls, exc) -> "ValidationError":
        """Build from a ``pydantic.ValidationError`` or ``RequestValidationError``."""
        details = []
        for err in exc.errors():
            # Request errors are prefixed with their location ("body", "path", ...)
            loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
            details.append({"field": ".".join(loc) or "body", "message": err.get("msg", "Invalid value")})
        return cls(details)

    @property
    def fields(self) -> List[str]:
        return [d["field"] for d in self.details]

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "details": self.details}


class BadRequestError(TripPlannerError):
    status_code = 400
    default_message = "Bad request"


class AuthError(TripPlannerError):
    """Missing or invalid credentials.

    Messages are deliberately generic.  401 is used when no credential
    was presented, 403 when a presented token fails verification.
    """

    status_code = 401
    default_message = "Invalid credentials"


class ConflictError(TripPlannerError):
    status_code = 400
    default_message = "Resource already exists"


class NotFoundError(TripPlannerError):
    status_code = 404
    default_message = "Not found"


class RateLimitError(TripPlannerError):
    status_code = 429
    default_message = "Too many requests, please try again later."

    def __init__(self, message: Optional[str] = None, *, retry_after: int = 0):
        super().__init__(message)
        self.retry_after = retry_after


class UpstreamError(TripPlannerError):
    """An external provider failed.  Absorbed by the rate aggregator."""

    status_code = 502
    default_message = "Upstream provider unavailable"


def parse_model(model: Type[M], data: Union[M, Mapping[str, Any]]) -> M:
    """Validate ``data`` against a pydantic ``model``.

    Instances of ``model`` are returned unchanged; anything else is
    validated and pydantic failures are re‑raised as ``ValidationError``.
    """
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc
