"""Tests for the inventory adapters against canned provider documents."""

import json
from datetime import date
from decimal import Decimal

import pytest

from globetrotter.app.adapters.activities import (
    ACTIVITIES_BY_SQUARE_PATH,
    ACTIVITIES_PATH,
    get_activity,
    search_activities,
    search_activities_by_square,
)
from globetrotter.app.adapters.cities import CITIES_PATH, get_city_by_code, search_cities
from globetrotter.app.adapters.flights import FLIGHT_PRICING_PATH, confirm_flight_price
from globetrotter.app.adapters.hotels import (
    HOTEL_OFFERS_PATH,
    HOTELS_BY_CITY_PATH,
    HOTELS_BY_IDS_PATH,
    get_hotel_offers,
    get_hotels_by_ids,
    get_offer_details,
    search_hotels_by_city,
)
from globetrotter.app.errors import NotFound, ProviderError, TooManyHotels
from tests.fakes import FakeAmadeus

PARIS = {
    "type": "location",
    "subType": "city",
    "name": "Paris",
    "iataCode": "PAR",
    "address": {"countryCode": "FR"},
    "geoCode": {"latitude": 48.85341, "longitude": 2.3488},
    "relationships": [
        {"id": "ACDG", "type": "Airport"},
        {"id": "AORY", "type": "Airport"},
        {"id": "AXXX", "type": "Airport"},
    ],
}

INCLUDED_AIRPORTS = {
    "ACDG": {"name": "CHARLES DE GAULLE", "iataCode": "CDG", "subType": "AIRPORT"},
    "AORY": {"name": "ORLY", "iataCode": "ORY", "subType": "AIRPORT"},
}

EIFFEL_TOUR = {
    "id": "4615",
    "type": "activity",
    "name": "Skip-the-line Eiffel Tower tour",
    "shortDescription": "Summit access",
    "rating": "4.5",
    "price": {"amount": "59.00", "currencyCode": "EUR"},
    "bookingLink": "https://example.com/book/4615",
    "minimumDuration": "2 hours",
    "pictures": ["https://example.com/4615.jpg"],
    "geoCode": {"latitude": "48.858", "longitude": "2.294"},
}

HOTEL_OFFERS = {
    "data": [
        {
            "type": "hotel-offers",
            "hotel": {"hotelId": "MCLONGHM", "chainCode": "MC", "name": "JW Marriott", "cityCode": "LON"},
            "available": True,
            "offers": [
                {
                    "id": "TSXOJ6LFQ2",
                    "checkInDate": "2025-06-10",
                    "checkOutDate": "2025-06-12",
                    "room": {
                        "type": "A2K",
                        "typeEstimated": {"category": "SUPERIOR_ROOM", "beds": 1, "bedType": "KING"},
                    },
                    "guests": {"adults": 2},
                    "price": {"currency": "GBP", "base": "420.00", "total": "504.00"},
                    "policies": {"paymentType": "deposit", "cancellation": {"deadline": "2025-06-08"}},
                }
            ],
        }
    ]
}


def _query(fake: FakeAmadeus) -> dict[str, str]:
    return dict(fake.requests[-1].url.params)


# --- cities ---


@pytest.mark.asyncio
async def test_search_cities_resolves_included_airports(fake_amadeus: FakeAmadeus) -> None:
    """Airports come from the included map; dangling relationships are dropped."""
    fake_amadeus.add(
        "GET", CITIES_PATH, {"data": [PARIS], "included": {"airports": INCLUDED_AIRPORTS}}
    )

    cities = await search_cities(fake_amadeus.client(), "Paris", country_code="FR", max_results=5)

    assert len(cities) == 1
    paris = cities[0]
    assert paris.name == "Paris"
    assert paris.iata_code == "PAR"
    assert paris.country_code == "FR"
    assert paris.latitude == pytest.approx(48.85341)
    assert [airport.iata_code for airport in paris.airports] == ["CDG", "ORY"]

    assert _query(fake_amadeus) == {
        "keyword": "Paris",
        "max": "5",
        "include": "AIRPORTS",
        "countryCode": "FR",
    }


@pytest.mark.asyncio
async def test_search_cities_without_country_omits_filter(fake_amadeus: FakeAmadeus) -> None:
    fake_amadeus.add("GET", CITIES_PATH, {"data": []})

    cities = await search_cities(fake_amadeus.client(), "Zz")

    assert cities == []
    assert "countryCode" not in _query(fake_amadeus)


@pytest.mark.asyncio
async def test_get_city_by_code_returns_first_match(fake_amadeus: FakeAmadeus) -> None:
    fake_amadeus.add("GET", CITIES_PATH, {"data": [PARIS, {**PARIS, "name": "Paris-Nord"}]})

    city = await get_city_by_code(fake_amadeus.client(), "PAR")

    assert city.name == "Paris"
    assert city.airports == []


@pytest.mark.asyncio
async def test_get_city_by_code_not_found(fake_amadeus: FakeAmadeus) -> None:
    fake_amadeus.add("GET", CITIES_PATH, {"data": []})

    with pytest.raises(NotFound) as exc_info:
        await get_city_by_code(fake_amadeus.client(), "QQQ")

    assert exc_info.value.error == "CITY_NOT_FOUND"
    assert exc_info.value.message == "City with code QQQ not found"


# --- activities ---


@pytest.mark.asyncio
async def test_search_activities_normalizes_listing(fake_amadeus: FakeAmadeus) -> None:
    fake_amadeus.add("GET", ACTIVITIES_PATH, {"data": [EIFFEL_TOUR]})

    activities = await search_activities(fake_amadeus.client(), 48.8566, 2.3522, radius=3)

    assert len(activities) == 1
    tour = activities[0]
    assert tour.id == "4615"
    assert tour.short_description == "Summit access"
    assert tour.rating == 4.5
    assert tour.price.amount == Decimal("59.00")
    assert tour.price.currency == "EUR"
    assert tour.geo_code.latitude == pytest.approx(48.858)
    assert _query(fake_amadeus) == {"latitude": "48.8566", "longitude": "2.3522", "radius": "3"}


@pytest.mark.asyncio
async def test_activity_without_price_has_empty_price(fake_amadeus: FakeAmadeus) -> None:
    raw = {key: value for key, value in EIFFEL_TOUR.items() if key != "price"}
    fake_amadeus.add("GET", ACTIVITIES_PATH, {"data": [raw]})

    activities = await search_activities(fake_amadeus.client(), 48.8566, 2.3522)

    assert activities[0].price.amount is None
    assert activities[0].price.currency is None


@pytest.mark.asyncio
async def test_search_activities_by_square(fake_amadeus: FakeAmadeus) -> None:
    fake_amadeus.add("GET", ACTIVITIES_BY_SQUARE_PATH, {"data": [EIFFEL_TOUR]})

    activities = await search_activities_by_square(
        fake_amadeus.client(), north=48.9, west=2.2, south=48.8, east=2.4
    )

    assert [activity.id for activity in activities] == ["4615"]
    assert _query(fake_amadeus) == {"north": "48.9", "west": "2.2", "south": "48.8", "east": "2.4"}


@pytest.mark.asyncio
async def test_get_activity(fake_amadeus: FakeAmadeus) -> None:
    fake_amadeus.add("GET", f"{ACTIVITIES_PATH}/4615", {"data": EIFFEL_TOUR})

    activity = await get_activity(fake_amadeus.client(), "4615")

    assert activity.name == "Skip-the-line Eiffel Tower tour"


@pytest.mark.asyncio
async def test_unparseable_activity_is_invalid_provider_response(
    fake_amadeus: FakeAmadeus,
) -> None:
    fake_amadeus.add("GET", ACTIVITIES_PATH, {"data": [{**EIFFEL_TOUR, "rating": "great"}]})

    with pytest.raises(ProviderError) as exc_info:
        await search_activities(fake_amadeus.client(), 48.8566, 2.3522)

    assert exc_info.value.status_code == 502
    assert exc_info.value.code == "INVALID_PROVIDER_RESPONSE"


# --- hotels ---


@pytest.mark.asyncio
async def test_search_hotels_by_city_sends_filters(fake_amadeus: FakeAmadeus) -> None:
    fake_amadeus.add(
        "GET",
        HOTELS_BY_CITY_PATH,
        {
            "data": [
                {
                    "hotelId": "RTPARNOV",
                    "name": "NOVOTEL PARIS",
                    "chainCode": "RT",
                    "iataCode": "PAR",
                    "dupeId": 700000001,
                    "geoCode": {"latitude": 48.86, "longitude": 2.34},
                    "address": {"countryCode": "FR"},
                    "distance": {"value": 0.8, "unit": "KM"},
                }
            ]
        },
    )

    hotels = await search_hotels_by_city(
        fake_amadeus.client(), "PAR", radius=10, chain_codes=["RT", "MC"], amenities=["SPA"]
    )

    assert len(hotels) == 1
    assert hotels[0].hotel_id == "RTPARNOV"
    assert hotels[0].country_code == "FR"
    assert hotels[0].distance is not None
    assert hotels[0].distance.value == 0.8
    assert _query(fake_amadeus) == {
        "cityCode": "PAR",
        "radius": "10",
        "radiusUnit": "KM",
        "chainCodes": "RT,MC",
        "amenities": "SPA",
    }


@pytest.mark.asyncio
async def test_get_hotels_by_ids_joins_ids(fake_amadeus: FakeAmadeus) -> None:
    fake_amadeus.add("GET", HOTELS_BY_IDS_PATH, {"data": [{"hotelId": "A"}, {"hotelId": "B"}]})

    hotels = await get_hotels_by_ids(fake_amadeus.client(), ["A", "B"])

    assert [hotel.hotel_id for hotel in hotels] == ["A", "B"]
    assert hotels[0].distance is None
    assert _query(fake_amadeus) == {"hotelIds": "A,B"}


@pytest.mark.asyncio
async def test_get_hotel_offers(fake_amadeus: FakeAmadeus) -> None:
    fake_amadeus.add("GET", HOTEL_OFFERS_PATH, HOTEL_OFFERS)

    availability = await get_hotel_offers(
        fake_amadeus.client(),
        ["MCLONGHM"],
        date(2025, 6, 10),
        date(2025, 6, 12),
        adults=2,
        currency="GBP",
        price_range="100-600",
    )

    assert len(availability) == 1
    hotel = availability[0]
    assert hotel.available is True
    assert hotel.hotel.hotel_id == "MCLONGHM"
    offer = hotel.offers[0]
    assert offer.id == "TSXOJ6LFQ2"
    assert offer.check_in_date == date(2025, 6, 10)
    assert offer.room_description == "SUPERIOR_ROOM"
    assert offer.bed_type == "KING"
    assert offer.adults == 2
    assert offer.price.total == Decimal("504.00")
    assert offer.policies.payment_type == "deposit"

    assert _query(fake_amadeus) == {
        "hotelIds": "MCLONGHM",
        "checkInDate": "2025-06-10",
        "checkOutDate": "2025-06-12",
        "adults": "2",
        "roomQuantity": "1",
        "currency": "GBP",
        "bestRateOnly": "true",
        "priceRange": "100-600",
    }


@pytest.mark.asyncio
async def test_get_hotel_offers_rejects_too_many_ids_before_calling(
    fake_amadeus: FakeAmadeus,
) -> None:
    hotel_ids = [f"HOTEL{i:03d}" for i in range(21)]

    with pytest.raises(TooManyHotels) as exc_info:
        await get_hotel_offers(
            fake_amadeus.client(), hotel_ids, date(2025, 6, 10), date(2025, 6, 12)
        )

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Maximum 20 hotel IDs allowed per request"
    assert fake_amadeus.requests == []
    assert fake_amadeus.token_calls == 0


@pytest.mark.asyncio
async def test_get_offer_details_unwraps_nested_offer(fake_amadeus: FakeAmadeus) -> None:
    fake_amadeus.add(
        "GET",
        f"{HOTEL_OFFERS_PATH}/TSXOJ6LFQ2",
        {
            "data": {
                "hotel": {"hotelId": "MCLONGHM", "name": "JW Marriott"},
                "offers": [
                    {
                        "id": "TSXOJ6LFQ2",
                        "checkInDate": "2025-06-10",
                        "checkOutDate": "2025-06-12",
                        "room": {"type": "A2K", "description": {"text": "King room"}},
                        "price": {"currency": "GBP", "total": "510.00"},
                        "guests": {"adults": 2},
                    }
                ],
            }
        },
    )

    detail = await get_offer_details(fake_amadeus.client(), "TSXOJ6LFQ2")

    assert detail.id == "TSXOJ6LFQ2"
    assert detail.hotel.name == "JW Marriott"
    assert detail.room.description == {"text": "King room"}
    assert detail.price.total == Decimal("510.00")
    assert detail.guests == {"adults": 2}


@pytest.mark.asyncio
async def test_expired_offer_surfaces_provider_error(fake_amadeus: FakeAmadeus) -> None:
    fake_amadeus.add(
        "GET",
        f"{HOTEL_OFFERS_PATH}/GONE",
        {"errors": [{"status": 400, "code": 3664, "title": "NO ROOMS AVAILABLE AT REQUESTED PROPERTY"}]},
        status=400,
    )

    with pytest.raises(ProviderError) as exc_info:
        await get_offer_details(fake_amadeus.client(), "GONE")

    assert exc_info.value.status_code == 400
    assert exc_info.value.code == "3664"


# --- flights ---


@pytest.mark.asyncio
async def test_confirm_flight_price(fake_amadeus: FakeAmadeus) -> None:
    offer = {"type": "flight-offer", "id": "1", "source": "GDS"}
    fake_amadeus.add(
        "POST",
        FLIGHT_PRICING_PATH,
        {
            "data": {
                "type": "flight-offers-pricing",
                "flightOffers": [
                    {
                        "type": "flight-offer",
                        "id": "1",
                        "source": "GDS",
                        "oneWay": False,
                        "itineraries": [
                            {
                                "duration": "PT7H10M",
                                "segments": [
                                    {
                                        "id": "1",
                                        "departure": {"iataCode": "JFK", "terminal": "1", "at": "2025-06-10T18:00:00"},
                                        "arrival": {"iataCode": "CDG", "terminal": "2E", "at": "2025-06-11T07:10:00"},
                                        "carrierCode": "AF",
                                        "number": "7",
                                        "numberOfStops": 0,
                                        "blacklistedInEU": False,
                                    }
                                ],
                            }
                        ],
                        "price": {
                            "currency": "USD",
                            "base": "410.00",
                            "total": "512.30",
                            "grandTotal": "512.30",
                            "fees": [{"amount": "0.00", "type": "SUPPLIER"}],
                            "taxes": [{"amount": "102.30", "code": "YQ"}],
                        },
                        "validatingAirlineCodes": ["AF"],
                        "travelerPricings": [
                            {
                                "travelerId": "1",
                                "fareOption": "STANDARD",
                                "travelerType": "ADULT",
                                "price": {"currency": "USD", "total": "512.30"},
                            }
                        ],
                    }
                ],
                "bookingRequirements": {"emailAddressRequired": True},
            }
        },
    )

    result = await confirm_flight_price(fake_amadeus.client(), [offer], include=["bags", "credit-card-fees"])

    priced = result.flight_offers[0]
    assert priced.one_way is False
    segment = priced.itineraries[0].segments[0]
    assert segment.departure.iata_code == "JFK"
    assert segment.arrival.terminal == "2E"
    assert segment.flight_number == "7"
    assert priced.price.grand_total == Decimal("512.30")
    assert priced.price.taxes[0].code == "YQ"
    assert priced.traveler_pricings[0].price.amount == Decimal("512.30")
    assert result.booking_requirements == {"emailAddressRequired": True}

    request = fake_amadeus.requests[-1]
    assert request.url.params["include"] == "bags,credit-card-fees"
    assert json.loads(request.content) == {
        "data": {"type": "flight-offers-pricing", "flightOffers": [offer]}
    }


# --- malformed documents ---

MALFORMED_DOCUMENTS = [
    pytest.param(
        "GET", CITIES_PATH, {"data": {"name": "Paris"}},
        lambda client: search_cities(client, "Paris"), id="cities-data-object",
    ),
    pytest.param(
        "GET", CITIES_PATH, {"data": [PARIS], "included": ["ACDG"]},
        lambda client: search_cities(client, "Paris"), id="cities-included-list",
    ),
    pytest.param(
        "GET", ACTIVITIES_PATH, {"data": {"id": "4615"}},
        lambda client: search_activities(client, 48.8566, 2.3522), id="activities-data-object",
    ),
    pytest.param(
        "GET", f"{ACTIVITIES_PATH}/4615", {"data": [EIFFEL_TOUR]},
        lambda client: get_activity(client, "4615"), id="activity-data-list",
    ),
    pytest.param(
        "GET", HOTELS_BY_CITY_PATH, {"data": "HLPAR001"},
        lambda client: search_hotels_by_city(client, "PAR"), id="hotels-data-string",
    ),
    pytest.param(
        "GET", HOTELS_BY_IDS_PATH, {"data": [["HLPAR001"]]},
        lambda client: get_hotels_by_ids(client, ["HLPAR001"]), id="hotels-by-ids-nested-list",
    ),
    pytest.param(
        "GET", HOTEL_OFFERS_PATH, {"data": [{"hotel": "HLPAR001", "offers": []}]},
        lambda client: get_hotel_offers(client, ["HLPAR001"], date(2026, 5, 1), date(2026, 5, 3)),
        id="hotel-offers-hotel-string",
    ),
    pytest.param(
        "GET", f"{HOTEL_OFFERS_PATH}/X1", {"data": [{"id": "X1"}]},
        lambda client: get_offer_details(client, "X1"), id="offer-detail-data-list",
    ),
    pytest.param(
        "POST", FLIGHT_PRICING_PATH, {"data": ["flight-offers-pricing"]},
        lambda client: confirm_flight_price(client, [{"id": "1"}]), id="flight-price-data-list",
    ),
]


@pytest.mark.asyncio
@pytest.mark.parametrize(("method", "path", "document", "call"), MALFORMED_DOCUMENTS)
async def test_wrongly_shaped_document_is_invalid_provider_response(
    fake_amadeus: FakeAmadeus, method: str, path: str, document: dict, call
) -> None:
    fake_amadeus.add(method, path, document)

    with pytest.raises(ProviderError) as exc_info:
        await call(fake_amadeus.client())

    assert exc_info.value.status_code == 502
    assert exc_info.value.code == "INVALID_PROVIDER_RESPONSE"
