"""Flight price confirmation via the Amadeus Flight Offers Price API."""

import logging
from typing import Any

from globetrotter.app.adapters.amadeus import DOCUMENT_ERRORS, AmadeusClient, invalid_document
from globetrotter.app.models.inventory import (
    Fee,
    FlightEndpoint,
    FlightItinerary,
    FlightPrice,
    FlightPricingResult,
    FlightSegmentDetail,
    Price,
    PricedFlightOffer,
    Tax,
    TravelerPricing,
)

logger = logging.getLogger(__name__)

FLIGHT_PRICING_PATH = "/v1/shopping/flight-offers/pricing"


def _endpoint(raw: dict[str, Any]) -> FlightEndpoint:
    return FlightEndpoint(iata_code=raw.get("iataCode"), terminal=raw.get("terminal"), at=raw.get("at"))


def _segment(raw: dict[str, Any]) -> FlightSegmentDetail:
    return FlightSegmentDetail(
        id=raw.get("id"),
        departure=_endpoint(raw.get("departure") or {}),
        arrival=_endpoint(raw.get("arrival") or {}),
        carrier_code=raw.get("carrierCode"),
        flight_number=raw.get("number"),
        aircraft=raw.get("aircraft"),
        operating=raw.get("operating"),
        duration=raw.get("duration"),
        number_of_stops=raw.get("numberOfStops"),
        blacklisted_in_eu=raw.get("blacklistedInEU"),
    )


def _price(raw: dict[str, Any]) -> FlightPrice:
    return FlightPrice(
        currency=raw.get("currency"),
        base=raw.get("base") or None,
        total=raw.get("total") or None,
        grand_total=raw.get("grandTotal") or None,
        fees=[Fee(amount=fee.get("amount"), type=fee.get("type")) for fee in raw.get("fees") or []],
        taxes=[Tax(amount=tax.get("amount"), code=tax.get("code")) for tax in raw.get("taxes") or []],
    )


def _traveler_pricing(raw: dict[str, Any]) -> TravelerPricing:
    price = raw.get("price") or {}
    return TravelerPricing(
        traveler_id=raw.get("travelerId"),
        fare_option=raw.get("fareOption"),
        traveler_type=raw.get("travelerType"),
        price=Price(amount=price.get("total") or None, currency=price.get("currency")),
        fare_details_by_segment=raw.get("fareDetailsBySegment") or [],
    )


def _priced_offer(raw: dict[str, Any]) -> PricedFlightOffer:
    return PricedFlightOffer(
        id=raw.get("id"),
        type=raw.get("type"),
        source=raw.get("source"),
        instant_ticketing_required=raw.get("instantTicketingRequired"),
        non_homogeneous=raw.get("nonHomogeneous"),
        one_way=raw.get("oneWay"),
        last_ticketing_date=raw.get("lastTicketingDate"),
        last_ticketing_date_time=raw.get("lastTicketingDateTime"),
        number_of_bookable_seats=raw.get("numberOfBookableSeats"),
        itineraries=[
            FlightItinerary(
                duration=itinerary.get("duration"),
                segments=[_segment(segment) for segment in itinerary.get("segments") or []],
            )
            for itinerary in raw.get("itineraries") or []
        ],
        price=_price(raw.get("price") or {}),
        pricing_options=raw.get("pricingOptions"),
        validating_airline_codes=raw.get("validatingAirlineCodes") or [],
        traveler_pricings=[_traveler_pricing(tp) for tp in raw.get("travelerPricings") or []],
    )


async def confirm_flight_price(
    client: AmadeusClient,
    flight_offers: list[dict[str, Any]],
    include: list[str] | None = None,
) -> FlightPricingResult:
    """Confirm the price of flight offers before booking.

    Args:
        client: Provider client
        flight_offers: Offers exactly as returned by the provider's flight offers search
        include: Optional extras: credit-card-fees, bags, other-services, detailed-fare-rules

    Returns:
        Priced offers with itemized fees and taxes, plus booking requirements
    """
    body = {"data": {"type": "flight-offers-pricing", "flightOffers": flight_offers}}
    params = {"include": ",".join(include)} if include else None

    logger.info(f"Confirming pricing for {len(flight_offers)} flight offer(s)")
    document = await client.post(
        FLIGHT_PRICING_PATH, json=body, params=params, endpoint="flight_offers_pricing"
    )

    data = document.get("data") or {}
    try:
        result = FlightPricingResult(
            flight_offers=[_priced_offer(raw) for raw in data.get("flightOffers") or []],
            booking_requirements=data.get("bookingRequirements"),
        )
    except DOCUMENT_ERRORS as e:
        raise invalid_document(e) from e

    logger.info(f"Price confirmed for {len(result.flight_offers)} flight offer(s)")
    return result
