"""City search via the Amadeus City Search API."""

import logging
from typing import Any

from globetrotter.app.adapters.amadeus import DOCUMENT_ERRORS, AmadeusClient, invalid_document
from globetrotter.app.errors import NotFound
from globetrotter.app.models.inventory import Airport, City

logger = logging.getLogger(__name__)

CITIES_PATH = "/v1/reference-data/locations/cities"


def _airport(raw: dict[str, Any]) -> Airport:
    return Airport(
        name=raw.get("name"),
        iata_code=raw.get("iataCode"),
        sub_type=raw.get("subType"),
    )


def _city(raw: dict[str, Any], included_airports: dict[str, Any]) -> City:
    geo = raw.get("geoCode") or {}
    address = raw.get("address") or {}

    # Airports arrive as relationships referencing the top-level "included" map
    airport_ids = [rel.get("id") for rel in raw.get("relationships") or []]
    airports = [
        _airport(included_airports[airport_id])
        for airport_id in airport_ids
        if airport_id in included_airports
    ]

    return City(
        type=raw.get("type"),
        sub_type=raw.get("subType"),
        name=raw.get("name") or "",
        iata_code=raw.get("iataCode"),
        country_code=address.get("countryCode"),
        latitude=geo.get("latitude"),
        longitude=geo.get("longitude"),
        airports=airports,
    )


async def search_cities(
    client: AmadeusClient,
    keyword: str,
    country_code: str | None = None,
    max_results: int = 10,
) -> list[City]:
    """Search cities by keyword.

    Args:
        client: Provider client
        keyword: Search term (the provider accepts 2 to 10 characters)
        country_code: Optional ISO 3166 alpha-2 filter
        max_results: Maximum number of results

    Returns:
        Cities with IATA codes, coordinates and their airports
    """
    params: dict[str, Any] = {"keyword": keyword, "max": max_results, "include": "AIRPORTS"}
    if country_code:
        params["countryCode"] = country_code

    logger.info(f"Searching cities keyword={keyword!r} country={country_code}")
    document = await client.get(CITIES_PATH, params=params, endpoint="cities")

    try:
        included_airports = (document.get("included") or {}).get("airports") or {}
        cities = [_city(raw, included_airports) for raw in document.get("data") or []]
    except DOCUMENT_ERRORS as e:
        raise invalid_document(e) from e

    logger.info(f"Found {len(cities)} cities for {keyword!r}")
    return cities


async def get_city_by_code(client: AmadeusClient, iata_code: str) -> City:
    """Resolve a city IATA code to its first match.

    Raises:
        NotFound: no city matches (provider-style code CITY_NOT_FOUND)
    """
    cities = await search_cities(client, iata_code)
    if not cities:
        raise NotFound("City", f"City with code {iata_code} not found", error="CITY_NOT_FOUND")
    return cities[0]
