"""Normalized travel inventory returned by the provider adapters."""

from datetime import date
from typing import Any

from pydantic import BaseModel, Field, model_validator

from globetrotter.app.models.common import Amount, GeoCode


class Airport(BaseModel):
    name: str | None = None
    iata_code: str | None = None
    sub_type: str | None = None


class City(BaseModel):
    """City search result."""

    type: str | None = None
    sub_type: str | None = None
    name: str
    iata_code: str | None = None
    country_code: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    airports: list[Airport] = Field(default_factory=list)


class Price(BaseModel):
    amount: Amount | None = None
    currency: str | None = None


class ActivityListing(BaseModel):
    """Tour or activity offered near a location."""

    id: str
    type: str | None = None
    name: str
    short_description: str | None = None
    description: str | None = None
    rating: float | None = None
    price: Price = Field(default_factory=Price)
    booking_link: str | None = None
    minimum_duration: str | None = None
    pictures: list[str] = Field(default_factory=list)
    geo_code: GeoCode = Field(default_factory=GeoCode)


class Distance(BaseModel):
    value: float | None = None
    unit: str | None = None


class HotelListing(BaseModel):
    """Hotel from the hotel list endpoints (no pricing)."""

    hotel_id: str
    name: str | None = None
    chain_code: str | None = None
    iata_code: str | None = None
    dupe_id: int | None = None
    geo_code: GeoCode = Field(default_factory=GeoCode)
    country_code: str | None = None
    address: dict[str, Any] | None = None
    distance: Distance | None = None


class OfferHotel(BaseModel):
    hotel_id: str | None = None
    chain_code: str | None = None
    name: str | None = None
    city_code: str | None = None


class OfferPrice(BaseModel):
    currency: str | None = None
    base: Amount | None = None
    total: Amount | None = None
    taxes: list[dict[str, Any]] = Field(default_factory=list)
    variations: dict[str, Any] | None = None


class OfferPolicies(BaseModel):
    payment_type: str | None = None
    cancellation: dict[str, Any] | None = None


class HotelOffer(BaseModel):
    """Single priced room offer."""

    id: str
    check_in_date: date | None = None
    check_out_date: date | None = None
    room_type: str | None = None
    room_description: str | None = None
    beds: int | None = None
    bed_type: str | None = None
    price: OfferPrice = Field(default_factory=OfferPrice)
    policies: OfferPolicies = Field(default_factory=OfferPolicies)
    adults: int | None = None


class HotelAvailability(BaseModel):
    """Best-rate offers of one hotel."""

    hotel: OfferHotel
    available: bool = False
    offers: list[HotelOffer] = Field(default_factory=list)


class OfferRoom(BaseModel):
    type: str | None = None
    description: dict[str, Any] | None = None
    type_estimated: dict[str, Any] | None = None


class HotelOfferDetail(BaseModel):
    """Full detail of a hotel offer, re-priced by the provider."""

    id: str
    hotel: OfferHotel
    check_in_date: date | None = None
    check_out_date: date | None = None
    room: OfferRoom = Field(default_factory=OfferRoom)
    price: OfferPrice = Field(default_factory=OfferPrice)
    policies: dict[str, Any] | None = None
    guests: dict[str, Any] | None = None


class FlightEndpoint(BaseModel):
    iata_code: str | None = None
    terminal: str | None = None
    at: str | None = None


class FlightSegmentDetail(BaseModel):
    id: str | None = None
    departure: FlightEndpoint
    arrival: FlightEndpoint
    carrier_code: str | None = None
    flight_number: str | None = None
    aircraft: dict[str, Any] | None = None
    operating: dict[str, Any] | None = None
    duration: str | None = None
    number_of_stops: int | None = None
    blacklisted_in_eu: bool | None = None


class FlightItinerary(BaseModel):
    duration: str | None = None
    segments: list[FlightSegmentDetail] = Field(default_factory=list)


class Fee(BaseModel):
    amount: Amount
    type: str | None = None


class Tax(BaseModel):
    amount: Amount
    code: str | None = None


class FlightPrice(BaseModel):
    """Itemized price of a flight offer."""

    currency: str | None = None
    base: Amount | None = None
    total: Amount | None = None
    grand_total: Amount | None = None
    fees: list[Fee] = Field(default_factory=list)
    taxes: list[Tax] = Field(default_factory=list)


class TravelerPricing(BaseModel):
    traveler_id: str | None = None
    fare_option: str | None = None
    traveler_type: str | None = None
    price: Price = Field(default_factory=Price)
    fare_details_by_segment: list[dict[str, Any]] = Field(default_factory=list)


class PricedFlightOffer(BaseModel):
    """Flight offer with provider-confirmed pricing."""

    id: str | None = None
    type: str | None = None
    source: str | None = None
    instant_ticketing_required: bool | None = None
    non_homogeneous: bool | None = None
    one_way: bool | None = None
    last_ticketing_date: str | None = None
    last_ticketing_date_time: str | None = None
    number_of_bookable_seats: int | None = None
    itineraries: list[FlightItinerary] = Field(default_factory=list)
    price: FlightPrice = Field(default_factory=FlightPrice)
    pricing_options: dict[str, Any] | None = None
    validating_airline_codes: list[str] = Field(default_factory=list)
    traveler_pricings: list[TravelerPricing] = Field(default_factory=list)


class FlightPricingResult(BaseModel):
    flight_offers: list[PricedFlightOffer] = Field(default_factory=list)
    booking_requirements: dict[str, Any] | None = None


# --- requests ---


class HotelOffersRequest(BaseModel):
    """Request body for POST /destinations/hotels/offers."""

    hotel_ids: list[str] = Field(..., min_length=1)
    check_in_date: date
    check_out_date: date
    adults: int = Field(1, ge=1, le=9)
    room_quantity: int = Field(1, ge=1, le=9)
    currency: str = Field("USD", min_length=3, max_length=3)
    price_range: str | None = Field(None, description="min-max, e.g. 100-300")

    @model_validator(mode="after")
    def check_dates(self) -> "HotelOffersRequest":
        if self.check_out_date <= self.check_in_date:
            raise ValueError("check_out_date must be after check_in_date")
        return self


class FlightPriceRequest(BaseModel):
    """Request body for POST /flights/price.

    ``flight_offers`` are passed to the provider untouched, exactly as
    returned by its flight offers search.
    """

    flight_offers: list[dict[str, Any]] = Field(..., min_length=1)
    include: list[str] | None = Field(
        None,
        description="credit-card-fees, bags, other-services, detailed-fare-rules",
    )
