"""Hotel lists and offers via the Amadeus Hotel List and Hotel Search APIs."""

import logging
from datetime import date
from typing import Any

from globetrotter.app.adapters.amadeus import DOCUMENT_ERRORS, AmadeusClient, invalid_document
from globetrotter.app.config import get_settings
from globetrotter.app.errors import TooManyHotels
from globetrotter.app.models.common import GeoCode
from globetrotter.app.models.inventory import (
    Distance,
    HotelAvailability,
    HotelListing,
    HotelOffer,
    HotelOfferDetail,
    OfferHotel,
    OfferPolicies,
    OfferPrice,
    OfferRoom,
)

logger = logging.getLogger(__name__)

HOTELS_BY_CITY_PATH = "/v1/reference-data/locations/hotels/by-city"
HOTELS_BY_IDS_PATH = "/v1/reference-data/locations/hotels/by-hotels"
HOTEL_OFFERS_PATH = "/v3/shopping/hotel-offers"


def _geo(raw: dict[str, Any]) -> GeoCode:
    geo = raw.get("geoCode") or {}
    return GeoCode(latitude=geo.get("latitude"), longitude=geo.get("longitude"))


def _listing(raw: dict[str, Any]) -> HotelListing:
    address = raw.get("address") or {}
    distance = raw.get("distance")
    return HotelListing(
        hotel_id=raw.get("hotelId") or "",
        name=raw.get("name"),
        chain_code=raw.get("chainCode"),
        iata_code=raw.get("iataCode"),
        dupe_id=raw.get("dupeId"),
        geo_code=_geo(raw),
        country_code=address.get("countryCode"),
        address=address or None,
        distance=(
            Distance(value=distance.get("value"), unit=distance.get("unit")) if distance else None
        ),
    )


def _offer_hotel(raw: dict[str, Any]) -> OfferHotel:
    return OfferHotel(
        hotel_id=raw.get("hotelId"),
        chain_code=raw.get("chainCode"),
        name=raw.get("name"),
        city_code=raw.get("cityCode"),
    )


def _offer_price(raw: dict[str, Any]) -> OfferPrice:
    return OfferPrice(
        currency=raw.get("currency"),
        base=raw.get("base") or None,
        total=raw.get("total") or None,
        taxes=raw.get("taxes") or [],
        variations=raw.get("variations"),
    )


def _offer(raw: dict[str, Any]) -> HotelOffer:
    room = raw.get("room") or {}
    estimated = room.get("typeEstimated") or {}
    policies = raw.get("policies") or {}
    return HotelOffer(
        id=str(raw.get("id")),
        check_in_date=raw.get("checkInDate"),
        check_out_date=raw.get("checkOutDate"),
        room_type=room.get("type"),
        room_description=estimated.get("category"),
        beds=estimated.get("beds"),
        bed_type=estimated.get("bedType"),
        price=_offer_price(raw.get("price") or {}),
        policies=OfferPolicies(
            payment_type=policies.get("paymentType"),
            cancellation=policies.get("cancellation"),
        ),
        adults=(raw.get("guests") or {}).get("adults"),
    )


def _availability(raw: dict[str, Any]) -> HotelAvailability:
    return HotelAvailability(
        hotel=_offer_hotel(raw.get("hotel") or {}),
        available=bool(raw.get("available")),
        offers=[_offer(offer) for offer in raw.get("offers") or []],
    )


async def search_hotels_by_city(
    client: AmadeusClient,
    city_code: str,
    radius: int = 5,
    chain_codes: list[str] | None = None,
    amenities: list[str] | None = None,
) -> list[HotelListing]:
    """List hotels in a city.

    Args:
        client: Provider client
        city_code: City IATA code (e.g. PAR)
        radius: Search radius in km
        chain_codes: Optional hotel chain filter (e.g. ["MC", "RT"])
        amenities: Optional amenity filter (e.g. ["SWIMMING_POOL", "SPA"])
    """
    params: dict[str, Any] = {"cityCode": city_code, "radius": radius, "radiusUnit": "KM"}
    if chain_codes:
        params["chainCodes"] = ",".join(chain_codes)
    if amenities:
        params["amenities"] = ",".join(amenities)

    logger.info(f"Searching hotels in city={city_code} within {radius}km")
    document = await client.get(HOTELS_BY_CITY_PATH, params=params, endpoint="hotels_by_city")
    try:
        hotels = [_listing(raw) for raw in document.get("data") or []]
    except DOCUMENT_ERRORS as e:
        raise invalid_document(e) from e

    logger.info(f"Found {len(hotels)} hotels in {city_code}")
    return hotels


async def get_hotels_by_ids(client: AmadeusClient, hotel_ids: list[str]) -> list[HotelListing]:
    """Fetch hotel details for provider hotel ids."""
    document = await client.get(
        HOTELS_BY_IDS_PATH, params={"hotelIds": ",".join(hotel_ids)}, endpoint="hotels_by_ids"
    )
    try:
        return [_listing(raw) for raw in document.get("data") or []]
    except DOCUMENT_ERRORS as e:
        raise invalid_document(e) from e


async def get_hotel_offers(
    client: AmadeusClient,
    hotel_ids: list[str],
    check_in: date,
    check_out: date,
    adults: int = 1,
    room_quantity: int = 1,
    currency: str = "USD",
    price_range: str | None = None,
) -> list[HotelAvailability]:
    """Best-rate offers for up to 20 hotels.

    Raises:
        TooManyHotels: more ids than the provider accepts; nothing is sent
    """
    limit = get_settings().hotel_offers_max_ids
    if len(hotel_ids) > limit:
        raise TooManyHotels(limit)

    params: dict[str, Any] = {
        "hotelIds": ",".join(hotel_ids),
        "checkInDate": check_in.isoformat(),
        "checkOutDate": check_out.isoformat(),
        "adults": adults,
        "roomQuantity": room_quantity,
        "currency": currency,
        "bestRateOnly": "true",
    }
    if price_range:
        params["priceRange"] = price_range

    logger.info(f"Getting hotel offers for {len(hotel_ids)} hotels ({check_in} to {check_out})")
    document = await client.get(HOTEL_OFFERS_PATH, params=params, endpoint="hotel_offers")
    try:
        offers = [_availability(raw) for raw in document.get("data") or []]
    except DOCUMENT_ERRORS as e:
        raise invalid_document(e) from e

    logger.info(f"Retrieved offers for {len(offers)} hotels")
    return offers


async def get_offer_details(client: AmadeusClient, offer_id: str) -> HotelOfferDetail:
    """Re-price a single hotel offer and return its full detail."""
    document = await client.get(f"{HOTEL_OFFERS_PATH}/{offer_id}", endpoint="hotel_offer")
    try:
        data = document.get("data") or {}
        # v3 nests the offer under the hotel; older payloads return the offer itself
        raw = (data.get("offers") or [data])[0]
        room = raw.get("room") or {}
        return HotelOfferDetail(
            id=str(raw.get("id") or offer_id),
            hotel=_offer_hotel(data.get("hotel") or raw.get("hotel") or {}),
            check_in_date=raw.get("checkInDate"),
            check_out_date=raw.get("checkOutDate"),
            room=OfferRoom(
                type=room.get("type"),
                description=room.get("description"),
                type_estimated=room.get("typeEstimated"),
            ),
            price=_offer_price(raw.get("price") or {}),
            policies=raw.get("policies"),
            guests=raw.get("guests"),
        )
    except DOCUMENT_ERRORS as e:
        raise invalid_document(e) from e
