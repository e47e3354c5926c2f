"""Itinerary request and response models.

Request models parse every optional numeric explicitly: a malformed price,
rating or coordinate is rejected as an invalid field instead of being
stored as NaN.
"""

from datetime import UTC, date, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from globetrotter.app.models.common import Amount, ItineraryStatus, Money, RecordModel

Latitude = Field(None, ge=-90, le=90)
Longitude = Field(None, ge=-180, le=180)


def _reject_null(value: Any) -> Any:
    if value is None:
        raise ValueError("may not be null")
    return value


def _as_utc(value: datetime | None) -> datetime | None:
    # Naive timestamps are taken as UTC
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


# --- requests ---


class ItineraryCreate(BaseModel):
    """Request body for POST /itineraries."""

    user_id: UUID
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    total_budget: Money | None = Field(None, ge=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    start_date: date | None = None
    end_date: date | None = None


class ItineraryUpdate(BaseModel):
    """Request body for PUT /itineraries/{id}; absent fields are left untouched."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    total_budget: Money | None = Field(None, ge=0)
    currency: str | None = Field(None, min_length=3, max_length=3)
    start_date: date | None = None
    end_date: date | None = None
    status: ItineraryStatus | None = None

    _non_nullable = field_validator("name", "currency", "status", mode="before")(_reject_null)


class StopCreate(BaseModel):
    """Request body for POST /itineraries/{id}/stops."""

    city_code: str = Field(..., min_length=1, max_length=10)
    city_name: str = Field(..., min_length=1)
    country_code: str | None = None
    latitude: float | None = Latitude
    longitude: float | None = Longitude
    sequence: int | None = Field(None, ge=1, description="Defaults to the end of the itinerary")
    check_in_date: date | None = None
    check_out_date: date | None = None
    nights: int | None = Field(None, ge=0)
    notes: str | None = None


class StopUpdate(BaseModel):
    """Request body for PUT /itineraries/{id}/stops/{stop_id}."""

    city_code: str | None = Field(None, min_length=1, max_length=10)
    city_name: str | None = Field(None, min_length=1)
    country_code: str | None = None
    latitude: float | None = Latitude
    longitude: float | None = Longitude
    sequence: int | None = Field(None, ge=1)
    check_in_date: date | None = None
    check_out_date: date | None = None
    nights: int | None = Field(None, ge=0)
    notes: str | None = None

    _non_nullable = field_validator("city_code", "city_name", "sequence", mode="before")(
        _reject_null
    )


class ActivityCreate(BaseModel):
    """Request body for POST /itineraries/{id}/stops/{stop_id}/activities."""

    provider_activity_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    short_description: str | None = None
    description: str | None = None
    rating: float | None = Field(None, ge=0)
    price: Money | None = Field(None, ge=0)
    currency: str | None = None
    booking_link: str | None = None
    minimum_duration: str | None = None
    pictures: list[str] = Field(default_factory=list)
    latitude: float | None = Latitude
    longitude: float | None = Longitude


class HotelCreate(BaseModel):
    """Request body for POST /itineraries/{id}/stops/{stop_id}/hotels."""

    provider_hotel_id: str = Field(..., min_length=1)
    hotel_name: str = Field(..., min_length=1)
    chain_code: str | None = None
    offer_id: str | None = None
    room_type: str | None = None
    check_in_date: date
    check_out_date: date
    nights: int = Field(1, ge=1)
    price_base: Money | None = Field(None, ge=0)
    price_total: Money = Field(..., ge=0)
    currency: str = Field(..., min_length=3, max_length=3)
    payment_type: str | None = None
    cancellation: dict[str, Any] | None = None
    latitude: float | None = Latitude
    longitude: float | None = Longitude


class FlightCreate(BaseModel):
    """Request body for POST /itineraries/{id}/flights."""

    flight_offer_id: str | None = None
    from_city_code: str = Field(..., min_length=1, max_length=10)
    to_city_code: str = Field(..., min_length=1, max_length=10)
    departure_at: datetime | None = None
    arrival_at: datetime | None = None
    carrier_code: str | None = None
    flight_number: str | None = None
    duration: str | None = None
    passengers: int = Field(1, ge=1)
    price_base: Money | None = Field(None, ge=0)
    price_total: Money = Field(..., ge=0)
    currency: str = Field(..., min_length=3, max_length=3)
    cabin_class: str | None = None

    _utc = field_validator("departure_at", "arrival_at")(_as_utc)


# --- responses ---


class OwnerOut(RecordModel):
    """Public profile of an itinerary owner."""

    user_id: UUID
    name: str | None
    email: str


class ActivityOut(RecordModel):
    activity_id: UUID
    stop_id: UUID
    provider_activity_id: str
    name: str
    short_description: str | None
    description: str | None
    rating: float | None
    price: Amount | None
    currency: str | None
    booking_link: str | None
    minimum_duration: str | None
    pictures: list[str]
    latitude: float | None
    longitude: float | None
    created_at: datetime


class HotelOut(RecordModel):
    hotel_id: UUID
    stop_id: UUID
    provider_hotel_id: str
    hotel_name: str
    chain_code: str | None
    offer_id: str | None
    room_type: str | None
    check_in_date: date
    check_out_date: date
    nights: int
    price_base: Amount | None
    price_total: Amount
    currency: str
    payment_type: str | None
    cancellation: dict[str, Any] | None
    latitude: float | None
    longitude: float | None
    created_at: datetime


class StopOut(RecordModel):
    stop_id: UUID
    itinerary_id: UUID
    city_code: str
    city_name: str
    country_code: str | None
    latitude: float | None
    longitude: float | None
    sequence: int
    check_in_date: date | None
    check_out_date: date | None
    nights: int | None
    notes: str | None
    created_at: datetime
    activities: list[ActivityOut]
    hotels: list[HotelOut]


class FlightOut(RecordModel):
    flight_id: UUID
    itinerary_id: UUID
    flight_offer_id: str | None
    from_city_code: str
    to_city_code: str
    departure_at: datetime | None
    arrival_at: datetime | None
    carrier_code: str | None
    flight_number: str | None
    duration: str | None
    passengers: int
    price_base: Amount | None
    price_total: Amount
    currency: str
    cabin_class: str | None
    created_at: datetime


class BudgetSummaryOut(RecordModel):
    summary_id: UUID
    itinerary_id: UUID
    flights_cost: Amount
    hotels_cost: Amount
    activities_cost: Amount
    total_cost: Amount
    currency: str
    last_calculated: datetime


class ItineraryOut(RecordModel):
    """Itinerary with its nested stops, flights and budget summary."""

    itinerary_id: UUID
    user_id: UUID
    name: str
    description: str | None
    total_budget: Amount | None
    currency: str
    start_date: date | None
    end_date: date | None
    status: str
    created_at: datetime
    updated_at: datetime
    stops: list[StopOut]
    flights: list[FlightOut]
    budget_summary: BudgetSummaryOut | None
    owner: OwnerOut | None = None
