"""Itinerary endpoints: itineraries, stops, bookings and budget."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from globetrotter.app.api.deps import ProviderDep, StoreDep
from globetrotter.app.models.budget import BudgetResult
from globetrotter.app.models.common import ApiResponse, MessageResponse
from globetrotter.app.models.itinerary import (
    ActivityCreate,
    ActivityOut,
    FlightCreate,
    FlightOut,
    HotelCreate,
    HotelOut,
    ItineraryCreate,
    ItineraryOut,
    ItineraryUpdate,
    StopCreate,
    StopOut,
    StopUpdate,
)
from globetrotter.app.services import budget as budget_service
from globetrotter.app.services import itineraries as itinerary_service
from globetrotter.app.services.pricing import refresh_stop_hotel_pricing

router = APIRouter(prefix="/itineraries", tags=["itineraries"])
logger = logging.getLogger(__name__)


# --- itineraries ---


@router.post("", response_model=ApiResponse[ItineraryOut], status_code=status.HTTP_201_CREATED)
async def create_itinerary(request: ItineraryCreate, store: StoreDep) -> ApiResponse[ItineraryOut]:
    """Create an itinerary for an existing user."""
    itinerary = await itinerary_service.create_itinerary(store, request)
    logger.info(
        f"[POST /api/itineraries] itinerary_id={itinerary.itinerary_id} user_id={request.user_id}"
    )
    return ApiResponse(data=itinerary)


@router.get("", response_model=ApiResponse[list[ItineraryOut]])
async def list_itineraries(
    user_id: Annotated[UUID, Query(description="Owner of the itineraries")],
    store: StoreDep,
) -> ApiResponse[list[ItineraryOut]]:
    """List a user's itineraries, newest first."""
    itineraries = await itinerary_service.list_itineraries(store, user_id)
    return ApiResponse(data=itineraries, count=len(itineraries))


@router.get("/{itinerary_id}", response_model=ApiResponse[ItineraryOut])
async def get_itinerary(itinerary_id: UUID, store: StoreDep) -> ApiResponse[ItineraryOut]:
    """Fetch an itinerary with stops, flights, budget summary and owner."""
    return ApiResponse(data=await itinerary_service.get_itinerary(store, itinerary_id))


@router.put("/{itinerary_id}", response_model=ApiResponse[ItineraryOut])
async def update_itinerary(
    itinerary_id: UUID, request: ItineraryUpdate, store: StoreDep
) -> ApiResponse[ItineraryOut]:
    """Partially update an itinerary; fields absent from the body are kept."""
    itinerary = await itinerary_service.update_itinerary(store, itinerary_id, request)
    logger.info(
        f"[PUT /api/itineraries/{itinerary_id}] "
        f"fields={sorted(request.model_dump(exclude_unset=True))}"
    )
    return ApiResponse(data=itinerary)


@router.delete("/{itinerary_id}", response_model=MessageResponse)
async def delete_itinerary(itinerary_id: UUID, store: StoreDep) -> MessageResponse:
    await itinerary_service.delete_itinerary(store, itinerary_id)
    return MessageResponse(message="Itinerary deleted successfully")


# --- stops ---


@router.get("/{itinerary_id}/stops", response_model=ApiResponse[list[StopOut]])
async def list_stops(itinerary_id: UUID, store: StoreDep) -> ApiResponse[list[StopOut]]:
    stops = await itinerary_service.list_stops(store, itinerary_id)
    return ApiResponse(data=stops, count=len(stops))


@router.post(
    "/{itinerary_id}/stops",
    response_model=ApiResponse[StopOut],
    status_code=status.HTTP_201_CREATED,
)
async def add_stop(
    itinerary_id: UUID, request: StopCreate, store: StoreDep
) -> ApiResponse[StopOut]:
    """Add a stop; without an explicit sequence it is appended after the last stop."""
    stop = await itinerary_service.add_stop(store, itinerary_id, request)
    logger.info(
        f"[POST /api/itineraries/{itinerary_id}/stops] stop_id={stop.stop_id} "
        f"sequence={stop.sequence}"
    )
    return ApiResponse(data=stop)


@router.put("/{itinerary_id}/stops/{stop_id}", response_model=ApiResponse[StopOut])
async def update_stop(
    itinerary_id: UUID, stop_id: UUID, request: StopUpdate, store: StoreDep
) -> ApiResponse[StopOut]:
    return ApiResponse(data=await itinerary_service.update_stop(store, itinerary_id, stop_id, request))


@router.delete("/{itinerary_id}/stops/{stop_id}", response_model=MessageResponse)
async def delete_stop(itinerary_id: UUID, stop_id: UUID, store: StoreDep) -> MessageResponse:
    await itinerary_service.delete_stop(store, itinerary_id, stop_id)
    return MessageResponse(message="Stop deleted successfully")


# --- bookings ---


@router.post(
    "/{itinerary_id}/stops/{stop_id}/activities",
    response_model=ApiResponse[ActivityOut],
    status_code=status.HTTP_201_CREATED,
)
async def add_activity(
    itinerary_id: UUID, stop_id: UUID, request: ActivityCreate, store: StoreDep
) -> ApiResponse[ActivityOut]:
    activity = await itinerary_service.add_activity(store, itinerary_id, stop_id, request)
    return ApiResponse(data=activity)


@router.post(
    "/{itinerary_id}/stops/{stop_id}/hotels",
    response_model=ApiResponse[HotelOut],
    status_code=status.HTTP_201_CREATED,
)
async def add_hotel(
    itinerary_id: UUID, stop_id: UUID, request: HotelCreate, store: StoreDep
) -> ApiResponse[HotelOut]:
    hotel = await itinerary_service.add_hotel(store, itinerary_id, stop_id, request)
    return ApiResponse(data=hotel)


@router.post(
    "/{itinerary_id}/stops/{stop_id}/hotels/refresh",
    response_model=ApiResponse[list[HotelOut]],
)
async def refresh_hotel_pricing(
    itinerary_id: UUID, stop_id: UUID, store: StoreDep, client: ProviderDep
) -> ApiResponse[list[HotelOut]]:
    """Re-price the stop's hotels with the provider's current best offers."""
    hotels = await refresh_stop_hotel_pricing(store, client, itinerary_id, stop_id)
    logger.info(
        f"[POST /api/itineraries/{itinerary_id}/stops/{stop_id}/hotels/refresh] "
        f"updated={len(hotels)}"
    )
    return ApiResponse(data=hotels, count=len(hotels))


@router.post(
    "/{itinerary_id}/flights",
    response_model=ApiResponse[FlightOut],
    status_code=status.HTTP_201_CREATED,
)
async def add_flight(
    itinerary_id: UUID, request: FlightCreate, store: StoreDep
) -> ApiResponse[FlightOut]:
    flight = await itinerary_service.add_flight(store, itinerary_id, request)
    return ApiResponse(data=flight)


# --- budget ---


@router.get("/{itinerary_id}/budget", response_model=ApiResponse[BudgetResult])
async def get_budget(
    itinerary_id: UUID,
    store: StoreDep,
    refresh: Annotated[bool, Query(description="Accepted for compatibility; always fresh")] = False,
) -> ApiResponse[BudgetResult]:
    """Recalculate the itinerary budget and persist its summary."""
    result = await budget_service.calculate_budget(store, itinerary_id)
    logger.info(
        f"[GET /api/itineraries/{itinerary_id}/budget] total={result.breakdown.total} "
        f"over_budget={result.breakdown.over_budget}"
    )
    return ApiResponse(data=result)
