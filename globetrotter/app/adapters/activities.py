"""Tours and activities via the Amadeus Tours & Activities API."""

import logging
from typing import Any

from globetrotter.app.adapters.amadeus import DOCUMENT_ERRORS, AmadeusClient, invalid_document
from globetrotter.app.models.common import GeoCode
from globetrotter.app.models.inventory import ActivityListing, Price

logger = logging.getLogger(__name__)

ACTIVITIES_PATH = "/v1/shopping/activities"
ACTIVITIES_BY_SQUARE_PATH = "/v1/shopping/activities/by-square"

MAX_RADIUS_KM = 20


def _listing(raw: dict[str, Any]) -> ActivityListing:
    price = raw.get("price") or {}
    geo = raw.get("geoCode") or {}
    return ActivityListing(
        id=str(raw.get("id")),
        type=raw.get("type"),
        name=raw.get("name") or "",
        short_description=raw.get("shortDescription"),
        description=raw.get("description"),
        rating=raw.get("rating") or None,
        price=Price(amount=price.get("amount") or None, currency=price.get("currencyCode")),
        booking_link=raw.get("bookingLink"),
        minimum_duration=raw.get("minimumDuration"),
        pictures=raw.get("pictures") or [],
        geo_code=GeoCode(latitude=geo.get("latitude"), longitude=geo.get("longitude")),
    )


def _listings(document: dict[str, Any]) -> list[ActivityListing]:
    try:
        return [_listing(raw) for raw in document.get("data") or []]
    except DOCUMENT_ERRORS as e:
        raise invalid_document(e) from e


async def search_activities(
    client: AmadeusClient,
    latitude: float,
    longitude: float,
    radius: int = 5,
) -> list[ActivityListing]:
    """Search activities around a point.

    Args:
        client: Provider client
        latitude: Latitude of the search center
        longitude: Longitude of the search center
        radius: Search radius in km (0-20)
    """
    logger.info(f"Searching activities at ({latitude}, {longitude}) within {radius}km")
    document = await client.get(
        ACTIVITIES_PATH,
        params={"latitude": latitude, "longitude": longitude, "radius": radius},
        endpoint="activities",
    )
    activities = _listings(document)
    logger.info(f"Found {len(activities)} activities")
    return activities


async def search_activities_by_square(
    client: AmadeusClient,
    north: float,
    west: float,
    south: float,
    east: float,
) -> list[ActivityListing]:
    """Search activities inside a bounding box."""
    logger.info(f"Searching activities in box N:{north} W:{west} S:{south} E:{east}")
    document = await client.get(
        ACTIVITIES_BY_SQUARE_PATH,
        params={"north": north, "west": west, "south": south, "east": east},
        endpoint="activities_by_square",
    )
    return _listings(document)


async def get_activity(client: AmadeusClient, activity_id: str) -> ActivityListing:
    """Fetch a single activity by provider id."""
    document = await client.get(f"{ACTIVITIES_PATH}/{activity_id}", endpoint="activity")
    try:
        return _listing(document.get("data") or {})
    except DOCUMENT_ERRORS as e:
        raise invalid_document(e) from e
