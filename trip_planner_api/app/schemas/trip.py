"""
Pydantic models for trip data.

``TripCreate`` validates a new trip, ``TripUpdate`` validates a partial
update and ``TripRead`` is the stored record returned by the API.
String fields are trimmed before their length is checked.
"""

from typing import Annotated, Any, List, Optional, Tuple

from pydantic import BaseModel, BeforeValidator, Field, StringConstraints, field_validator

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 2000

# Columns a client may change, in the order they appear in UPDATE statements.
UPDATABLE_FIELDS: Tuple[str, ...] = ("title", "location", "price", "description")


def _reject_bool(value: Any) -> Any:
    # float() happily accepts True/False
    if isinstance(value, bool):
        raise ValueError("Input should be a valid number")
    return value


ShortText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=TITLE_MAX_LENGTH)]
LongText = Annotated[str, StringConstraints(strip_whitespace=True, max_length=DESCRIPTION_MAX_LENGTH)]
Price = Annotated[float, Field(ge=0, allow_inf_nan=False), BeforeValidator(_reject_bool)]


class TripCreate(BaseModel):
    """Schema for creating a trip."""

    title: ShortText = Field(..., examples=["Paris Trip"])
    location: ShortText = Field(..., examples=["Paris"])
    price: Price = Field(..., description="Price in USD", examples=[1200.5])
    description: Optional[LongText] = Field(None, examples=["Louvre and a river cruise"])


class TripUpdate(BaseModel):
    """Schema for updating a trip.

    All fields are optional; only fields present in the payload are
    written.  ``title``, ``location`` and ``price`` cannot be cleared
    with ``null``.  A ``null`` description is stored as an empty string.
    """

    title: Optional[ShortText] = None
    location: Optional[ShortText] = None
    price: Optional[Price] = None
    description: Optional[LongText] = None

    @field_validator("title", "location", "price", mode="before")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    def assignments(self) -> List[Tuple[str, Any]]:
        """Return ``(column, value)`` pairs for the supplied fields.

        Column names come from ``UPDATABLE_FIELDS``, never from the
        payload, so the result can safely be turned into SQL.
        """
        pairs = []
        for name in UPDATABLE_FIELDS:
            if name in self.model_fields_set:
                value = getattr(self, name)
                if name == "description" and value is None:
                    value = ""
                pairs.append((name, value))
        return pairs


class TripRead(BaseModel):
    """Schema for reading a trip from the API."""

    id: int
    user_id: int
    title: str
    location: str
    price: float
    description: str
    created_at: str
    updated_at: str

    model_config = {
        "from_attributes": True,
    }
