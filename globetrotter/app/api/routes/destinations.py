"""Destination discovery endpoints backed by the travel-data provider."""

import logging
from typing import Annotated

from fastapi import APIRouter, Query

from globetrotter.app.adapters import activities, cities, hotels
from globetrotter.app.api.deps import ProviderDep
from globetrotter.app.models.common import ApiResponse
from globetrotter.app.models.inventory import (
    ActivityListing,
    City,
    HotelAvailability,
    HotelListing,
    HotelOfferDetail,
    HotelOffersRequest,
)

router = APIRouter(prefix="/destinations", tags=["destinations"])
logger = logging.getLogger(__name__)


def _split(csv: str | None) -> list[str] | None:
    if not csv:
        return None
    return [item.strip() for item in csv.split(",") if item.strip()]


# Fixed paths are registered before "/{city_code}" so they are not captured by it


@router.get("/search", response_model=ApiResponse[list[City]])
async def search_cities(
    keyword: Annotated[str, Query(min_length=2, max_length=10)],
    client: ProviderDep,
    country_code: Annotated[str | None, Query(min_length=2, max_length=2)] = None,
    max_results: Annotated[int, Query(alias="max", ge=1, le=100)] = 10,
) -> ApiResponse[list[City]]:
    """Search cities by keyword, optionally within one country."""
    results = await cities.search_cities(client, keyword, country_code, max_results)
    logger.info(f"[GET /api/destinations/search] keyword={keyword!r} count={len(results)}")
    return ApiResponse(data=results, count=len(results))


@router.get("/activities/by-square", response_model=ApiResponse[list[ActivityListing]])
async def search_activities_by_square(
    north: Annotated[float, Query(ge=-90, le=90)],
    west: Annotated[float, Query(ge=-180, le=180)],
    south: Annotated[float, Query(ge=-90, le=90)],
    east: Annotated[float, Query(ge=-180, le=180)],
    client: ProviderDep,
) -> ApiResponse[list[ActivityListing]]:
    """Search activities inside a bounding box."""
    results = await activities.search_activities_by_square(client, north, west, south, east)
    return ApiResponse(data=results, count=len(results))


@router.get("/activities/{activity_id}", response_model=ApiResponse[ActivityListing])
async def get_activity(activity_id: str, client: ProviderDep) -> ApiResponse[ActivityListing]:
    return ApiResponse(data=await activities.get_activity(client, activity_id))


@router.get("/hotels/by-ids", response_model=ApiResponse[list[HotelListing]])
async def get_hotels_by_ids(
    hotel_ids: Annotated[str, Query(min_length=1, description="Comma-separated hotel ids")],
    client: ProviderDep,
) -> ApiResponse[list[HotelListing]]:
    results = await hotels.get_hotels_by_ids(client, _split(hotel_ids) or [])
    return ApiResponse(data=results, count=len(results))


@router.post("/hotels/offers", response_model=ApiResponse[list[HotelAvailability]])
async def get_hotel_offers(
    request: HotelOffersRequest, client: ProviderDep
) -> ApiResponse[list[HotelAvailability]]:
    """Best-rate offers for up to 20 hotels."""
    results = await hotels.get_hotel_offers(
        client,
        request.hotel_ids,
        request.check_in_date,
        request.check_out_date,
        adults=request.adults,
        room_quantity=request.room_quantity,
        currency=request.currency,
        price_range=request.price_range,
    )
    logger.info(
        f"[POST /api/destinations/hotels/offers] hotels={len(request.hotel_ids)} "
        f"available={len(results)}"
    )
    return ApiResponse(data=results, count=len(results))


@router.get("/hotels/offers/{offer_id}", response_model=ApiResponse[HotelOfferDetail])
async def get_offer_details(offer_id: str, client: ProviderDep) -> ApiResponse[HotelOfferDetail]:
    return ApiResponse(data=await hotels.get_offer_details(client, offer_id))


@router.get("/{city_code}", response_model=ApiResponse[City])
async def get_city(city_code: str, client: ProviderDep) -> ApiResponse[City]:
    """Resolve a city IATA code."""
    return ApiResponse(data=await cities.get_city_by_code(client, city_code.upper()))


@router.get("/{city_code}/activities", response_model=ApiResponse[list[ActivityListing]])
async def search_activities(
    city_code: str,
    latitude: Annotated[float, Query(ge=-90, le=90)],
    longitude: Annotated[float, Query(ge=-180, le=180)],
    client: ProviderDep,
    radius: Annotated[int, Query(ge=0, le=activities.MAX_RADIUS_KM)] = 5,
) -> ApiResponse[list[ActivityListing]]:
    """Search activities around a point of the city."""
    results = await activities.search_activities(client, latitude, longitude, radius)
    logger.info(f"[GET /api/destinations/{city_code}/activities] count={len(results)}")
    return ApiResponse(data=results, count=len(results))


@router.get("/{city_code}/hotels", response_model=ApiResponse[list[HotelListing]])
async def search_hotels(
    city_code: str,
    client: ProviderDep,
    radius: Annotated[int, Query(ge=1, le=300)] = 5,
    chain_codes: Annotated[str | None, Query(description="Comma-separated chain codes")] = None,
    amenities: Annotated[str | None, Query(description="Comma-separated amenities")] = None,
) -> ApiResponse[list[HotelListing]]:
    """List hotels in a city."""
    results = await hotels.search_hotels_by_city(
        client,
        city_code.upper(),
        radius=radius,
        chain_codes=_split(chain_codes),
        amenities=_split(amenities),
    )
    logger.info(f"[GET /api/destinations/{city_code}/hotels] count={len(results)}")
    return ApiResponse(data=results, count=len(results))
