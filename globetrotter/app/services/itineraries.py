"""Itinerary composition: itineraries, stops and the bookings attached to them."""

import logging
from uuid import UUID

from globetrotter.app.db.repositories import ItineraryStore, StopRecord
from globetrotter.app.errors import NotFound
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

logger = logging.getLogger(__name__)


async def _require_itinerary(store: ItineraryStore, itinerary_id: UUID) -> None:
    if await store.get_itinerary(itinerary_id) is None:
        raise NotFound("Itinerary")


async def _require_stop(store: ItineraryStore, itinerary_id: UUID, stop_id: UUID) -> StopRecord:
    """Load a stop, treating a stop of another itinerary as missing."""
    stop = await store.get_stop(stop_id)
    if stop is None or stop.itinerary_id != itinerary_id:
        raise NotFound("Stop")
    return stop


# --- itineraries ---


async def create_itinerary(store: ItineraryStore, payload: ItineraryCreate) -> ItineraryOut:
    """Create an itinerary in the planning state.

    Raises:
        NotFound: owner does not exist
    """
    if await store.get_user(payload.user_id) is None:
        raise NotFound("User")

    fields = payload.model_dump(exclude={"user_id"})
    record = await store.create_itinerary(payload.user_id, fields)
    logger.info(f"Itinerary created itinerary_id={record.itinerary_id} user_id={payload.user_id}")
    return ItineraryOut.model_validate(record)


async def list_itineraries(store: ItineraryStore, user_id: UUID) -> list[ItineraryOut]:
    """List an owner's itineraries, newest first."""
    records = await store.list_itineraries(user_id)
    return [ItineraryOut.model_validate(record) for record in records]


async def get_itinerary(store: ItineraryStore, itinerary_id: UUID) -> ItineraryOut:
    record = await store.get_itinerary(itinerary_id)
    if record is None:
        raise NotFound("Itinerary")
    return ItineraryOut.model_validate(record)


async def update_itinerary(
    store: ItineraryStore, itinerary_id: UUID, payload: ItineraryUpdate
) -> ItineraryOut:
    """Apply the fields present in ``payload``; absent fields stay untouched."""
    changes = payload.model_dump(exclude_unset=True)
    if "status" in changes:
        changes["status"] = payload.status.value if payload.status else None

    record = await store.update_itinerary(itinerary_id, changes)
    if record is None:
        raise NotFound("Itinerary")
    return ItineraryOut.model_validate(record)


async def delete_itinerary(store: ItineraryStore, itinerary_id: UUID) -> None:
    """Delete an itinerary with its stops, flights and budget summary."""
    if not await store.delete_itinerary(itinerary_id):
        raise NotFound("Itinerary")
    logger.info(f"Itinerary deleted itinerary_id={itinerary_id}")


# --- stops ---


async def list_stops(store: ItineraryStore, itinerary_id: UUID) -> list[StopOut]:
    await _require_itinerary(store, itinerary_id)
    return [StopOut.model_validate(stop) for stop in await store.list_stops(itinerary_id)]


async def add_stop(store: ItineraryStore, itinerary_id: UUID, payload: StopCreate) -> StopOut:
    """Add a stop, appending it after the last stop when no sequence is given.

    Raises:
        NotFound: itinerary does not exist
        Conflict: the sequence is already used in this itinerary
    """
    await _require_itinerary(store, itinerary_id)

    fields = payload.model_dump()
    if payload.sequence is None:
        current_max = await store.max_stop_sequence(itinerary_id)
        fields["sequence"] = (current_max or 0) + 1

    record = await store.create_stop(itinerary_id, fields)
    logger.info(
        f"Stop added itinerary_id={itinerary_id} stop_id={record.stop_id} "
        f"sequence={record.sequence}"
    )
    return StopOut.model_validate(record)


async def update_stop(
    store: ItineraryStore, itinerary_id: UUID, stop_id: UUID, payload: StopUpdate
) -> StopOut:
    await _require_stop(store, itinerary_id, stop_id)

    record = await store.update_stop(stop_id, payload.model_dump(exclude_unset=True))
    if record is None:
        raise NotFound("Stop")
    return StopOut.model_validate(record)


async def delete_stop(store: ItineraryStore, itinerary_id: UUID, stop_id: UUID) -> None:
    """Delete a stop with its activities and hotels."""
    await _require_stop(store, itinerary_id, stop_id)

    if not await store.delete_stop(stop_id):
        raise NotFound("Stop")
    logger.info(f"Stop deleted itinerary_id={itinerary_id} stop_id={stop_id}")


# --- bookings ---


async def add_activity(
    store: ItineraryStore, itinerary_id: UUID, stop_id: UUID, payload: ActivityCreate
) -> ActivityOut:
    await _require_stop(store, itinerary_id, stop_id)
    record = await store.create_activity(stop_id, payload.model_dump())
    return ActivityOut.model_validate(record)


async def add_hotel(
    store: ItineraryStore, itinerary_id: UUID, stop_id: UUID, payload: HotelCreate
) -> HotelOut:
    await _require_stop(store, itinerary_id, stop_id)
    record = await store.create_hotel(stop_id, payload.model_dump())
    return HotelOut.model_validate(record)


async def add_flight(store: ItineraryStore, itinerary_id: UUID, payload: FlightCreate) -> FlightOut:
    """Attach a flight segment to an itinerary.

    Raises:
        NotFound: itinerary does not exist
    """
    await _require_itinerary(store, itinerary_id)
    record = await store.create_flight(itinerary_id, payload.model_dump())
    return FlightOut.model_validate(record)
