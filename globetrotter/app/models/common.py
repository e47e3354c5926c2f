"""Common types and enums shared across all models."""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

T = TypeVar("T")

# Decimal in Python, plain JSON number on the wire
Amount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

# Client-supplied money; fits the Numeric(12, 2) columns exactly
Money = Annotated[Amount, Field(max_digits=12, decimal_places=2)]


class ItineraryStatus(str, Enum):
    """Itinerary lifecycle status."""

    planning = "planning"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


class GeoCode(BaseModel):
    """Geographic coordinates (WGS84); either side may be unknown."""

    latitude: float | None = None
    longitude: float | None = None


class RecordModel(BaseModel):
    """Base for response models built from store records."""

    model_config = ConfigDict(from_attributes=True)


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope: ``{"success": true, "data": ...}``."""

    success: bool = True
    count: int | None = Field(None, description="Number of items when data is a list")
    data: T


class MessageResponse(BaseModel):
    """Success envelope for operations without a payload."""

    success: bool = True
    message: str
