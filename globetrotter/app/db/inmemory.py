"""In-memory implementation of the ItineraryStore protocol."""

import uuid
from dataclasses import replace
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from globetrotter.app.db.repositories import (
    ActivityRecord,
    BudgetSummaryRecord,
    FlightRecord,
    HotelRecord,
    ItineraryRecord,
    StopRecord,
    UserRecord,
)
from globetrotter.app.db.sql_repositories import EMAIL_CONFLICT, SEQUENCE_CONFLICT
from globetrotter.app.errors import Conflict

_ITINERARY_DEFAULTS: dict[str, Any] = {
    "description": None,
    "total_budget": None,
    "currency": "USD",
    "start_date": None,
    "end_date": None,
    "status": "planning",
}

_STOP_DEFAULTS: dict[str, Any] = {
    "country_code": None,
    "latitude": None,
    "longitude": None,
    "check_in_date": None,
    "check_out_date": None,
    "nights": None,
    "notes": None,
}

_ACTIVITY_DEFAULTS: dict[str, Any] = {
    "short_description": None,
    "description": None,
    "rating": None,
    "price": None,
    "currency": None,
    "booking_link": None,
    "minimum_duration": None,
    "latitude": None,
    "longitude": None,
}

_HOTEL_DEFAULTS: dict[str, Any] = {
    "chain_code": None,
    "offer_id": None,
    "room_type": None,
    "nights": 1,
    "price_base": None,
    "payment_type": None,
    "cancellation": None,
    "latitude": None,
    "longitude": None,
}

_FLIGHT_DEFAULTS: dict[str, Any] = {
    "flight_offer_id": None,
    "departure_at": None,
    "arrival_at": None,
    "carrier_code": None,
    "flight_number": None,
    "duration": None,
    "passengers": 1,
    "price_base": None,
    "cabin_class": None,
}


def _now() -> datetime:
    return datetime.now(UTC)


class InMemoryItineraryStore:
    """In-memory implementation of ItineraryStore.

    Rows are stored flat and the nested graph is assembled on every read,
    so callers never hold references into the store.
    """

    def __init__(self) -> None:
        self._users: dict[uuid.UUID, UserRecord] = {}
        self._itineraries: dict[uuid.UUID, ItineraryRecord] = {}
        self._stops: dict[uuid.UUID, StopRecord] = {}
        self._activities: dict[uuid.UUID, ActivityRecord] = {}
        self._hotels: dict[uuid.UUID, HotelRecord] = {}
        self._flights: dict[uuid.UUID, FlightRecord] = {}
        self._summaries: dict[uuid.UUID, BudgetSummaryRecord] = {}

    # --- assembly ---

    def _assemble_stop(self, stop: StopRecord) -> StopRecord:
        return replace(
            stop,
            activities=[
                replace(a) for a in self._activities.values() if a.stop_id == stop.stop_id
            ],
            hotels=[replace(h) for h in self._hotels.values() if h.stop_id == stop.stop_id],
        )

    def _stops_of(self, itinerary_id: uuid.UUID) -> list[StopRecord]:
        stops = [s for s in self._stops.values() if s.itinerary_id == itinerary_id]
        return [self._assemble_stop(s) for s in sorted(stops, key=lambda s: s.sequence)]

    def _assemble_itinerary(
        self, itin: ItineraryRecord, with_owner: bool = False
    ) -> ItineraryRecord:
        flights = [f for f in self._flights.values() if f.itinerary_id == itin.itinerary_id]
        flights.sort(
            key=lambda f: (f.departure_at is None, f.departure_at or f.created_at, f.created_at)
        )
        summary = self._summaries.get(itin.itinerary_id)
        return replace(
            itin,
            stops=self._stops_of(itin.itinerary_id),
            flights=[replace(f) for f in flights],
            budget_summary=replace(summary) if summary else None,
            owner=replace(self._users[itin.user_id]) if with_owner else None,
        )

    def _sequence_taken(
        self, itinerary_id: uuid.UUID, sequence: int, exclude: uuid.UUID | None = None
    ) -> bool:
        return any(
            s.itinerary_id == itinerary_id and s.sequence == sequence and s.stop_id != exclude
            for s in self._stops.values()
        )

    # --- users ---

    async def create_user(self, email: str, name: str | None) -> UserRecord:
        """Create a user."""
        if any(u.email == email for u in self._users.values()):
            raise Conflict(EMAIL_CONFLICT)

        record = UserRecord(user_id=uuid.uuid4(), email=email, name=name, created_at=_now())
        self._users[record.user_id] = record
        return replace(record)

    async def get_user(self, user_id: uuid.UUID) -> UserRecord | None:
        """Get user by ID."""
        record = self._users.get(user_id)
        return replace(record) if record else None

    async def get_user_by_email(self, email: str) -> UserRecord | None:
        """Get user by email."""
        for record in self._users.values():
            if record.email == email:
                return replace(record)
        return None

    # --- itineraries ---

    async def create_itinerary(
        self, user_id: uuid.UUID, fields: dict[str, Any]
    ) -> ItineraryRecord:
        """Create an itinerary."""
        now = _now()
        record = ItineraryRecord(
            itinerary_id=uuid.uuid4(),
            user_id=user_id,
            created_at=now,
            updated_at=now,
            **{**_ITINERARY_DEFAULTS, **fields},
        )
        self._itineraries[record.itinerary_id] = record
        return self._assemble_itinerary(record)

    async def list_itineraries(self, user_id: uuid.UUID) -> list[ItineraryRecord]:
        """List a user's itineraries, newest first."""
        owned = [i for i in self._itineraries.values() if i.user_id == user_id]
        owned.sort(key=lambda i: i.created_at, reverse=True)
        return [self._assemble_itinerary(i) for i in owned]

    async def get_itinerary(self, itinerary_id: uuid.UUID) -> ItineraryRecord | None:
        """Get itinerary by ID with owner."""
        record = self._itineraries.get(itinerary_id)
        return self._assemble_itinerary(record, with_owner=True) if record else None

    async def update_itinerary(
        self, itinerary_id: uuid.UUID, changes: dict[str, Any]
    ) -> ItineraryRecord | None:
        """Update only the provided itinerary fields."""
        record = self._itineraries.get(itinerary_id)
        if record is None:
            return None

        updated = replace(record, **changes, updated_at=_now())
        self._itineraries[itinerary_id] = updated
        return self._assemble_itinerary(updated)

    async def delete_itinerary(self, itinerary_id: uuid.UUID) -> bool:
        """Delete an itinerary with its stops, flights and summary."""
        if self._itineraries.pop(itinerary_id, None) is None:
            return False

        for stop in [s for s in self._stops.values() if s.itinerary_id == itinerary_id]:
            await self.delete_stop(stop.stop_id)
        for flight_id in [f.flight_id for f in self._flights.values() if f.itinerary_id == itinerary_id]:
            del self._flights[flight_id]
        self._summaries.pop(itinerary_id, None)
        return True

    # --- stops ---

    async def max_stop_sequence(self, itinerary_id: uuid.UUID) -> int | None:
        """Highest stop sequence in the itinerary."""
        sequences = [s.sequence for s in self._stops.values() if s.itinerary_id == itinerary_id]
        return max(sequences) if sequences else None

    async def create_stop(self, itinerary_id: uuid.UUID, fields: dict[str, Any]) -> StopRecord:
        """Create a stop."""
        if self._sequence_taken(itinerary_id, fields["sequence"]):
            raise Conflict(SEQUENCE_CONFLICT)

        record = StopRecord(
            stop_id=uuid.uuid4(),
            itinerary_id=itinerary_id,
            created_at=_now(),
            **{**_STOP_DEFAULTS, **fields},
        )
        self._stops[record.stop_id] = record
        return self._assemble_stop(record)

    async def list_stops(self, itinerary_id: uuid.UUID) -> list[StopRecord]:
        """List stops ordered by sequence."""
        return self._stops_of(itinerary_id)

    async def get_stop(self, stop_id: uuid.UUID) -> StopRecord | None:
        """Get stop by ID."""
        record = self._stops.get(stop_id)
        return self._assemble_stop(record) if record else None

    async def update_stop(
        self, stop_id: uuid.UUID, changes: dict[str, Any]
    ) -> StopRecord | None:
        """Update only the provided stop fields."""
        record = self._stops.get(stop_id)
        if record is None:
            return None

        sequence = changes.get("sequence")
        if sequence is not None and self._sequence_taken(
            record.itinerary_id, sequence, exclude=stop_id
        ):
            raise Conflict(SEQUENCE_CONFLICT)

        updated = replace(record, **changes)
        self._stops[stop_id] = updated
        return self._assemble_stop(updated)

    async def delete_stop(self, stop_id: uuid.UUID) -> bool:
        """Delete a stop with its activities and hotels."""
        if self._stops.pop(stop_id, None) is None:
            return False

        for activity_id in [a.activity_id for a in self._activities.values() if a.stop_id == stop_id]:
            del self._activities[activity_id]
        for hotel_id in [h.hotel_id for h in self._hotels.values() if h.stop_id == stop_id]:
            del self._hotels[hotel_id]
        return True

    # --- bookings ---

    async def create_activity(
        self, stop_id: uuid.UUID, fields: dict[str, Any]
    ) -> ActivityRecord:
        """Create an activity under a stop."""
        record = ActivityRecord(
            activity_id=uuid.uuid4(),
            stop_id=stop_id,
            created_at=_now(),
            **{**_ACTIVITY_DEFAULTS, "pictures": [], **fields},
        )
        self._activities[record.activity_id] = record
        return replace(record)

    async def create_hotel(self, stop_id: uuid.UUID, fields: dict[str, Any]) -> HotelRecord:
        """Create a hotel stay under a stop."""
        record = HotelRecord(
            hotel_id=uuid.uuid4(),
            stop_id=stop_id,
            created_at=_now(),
            **{**_HOTEL_DEFAULTS, **fields},
        )
        self._hotels[record.hotel_id] = record
        return replace(record)

    async def update_hotel(
        self, hotel_id: uuid.UUID, changes: dict[str, Any]
    ) -> HotelRecord | None:
        """Update only the provided hotel fields."""
        record = self._hotels.get(hotel_id)
        if record is None:
            return None

        updated = replace(record, **changes)
        self._hotels[hotel_id] = updated
        return replace(updated)

    async def create_flight(
        self, itinerary_id: uuid.UUID, fields: dict[str, Any]
    ) -> FlightRecord:
        """Create a flight segment under an itinerary."""
        record = FlightRecord(
            flight_id=uuid.uuid4(),
            itinerary_id=itinerary_id,
            created_at=_now(),
            **{**_FLIGHT_DEFAULTS, **fields},
        )
        self._flights[record.flight_id] = record
        return replace(record)

    # --- budget ---

    async def upsert_budget_summary(
        self,
        itinerary_id: uuid.UUID,
        *,
        flights_cost: Decimal,
        hotels_cost: Decimal,
        activities_cost: Decimal,
        total_cost: Decimal,
        currency: str,
    ) -> BudgetSummaryRecord:
        """Create or overwrite the itinerary's budget summary."""
        existing = self._summaries.get(itinerary_id)
        record = BudgetSummaryRecord(
            summary_id=existing.summary_id if existing else uuid.uuid4(),
            itinerary_id=itinerary_id,
            flights_cost=flights_cost,
            hotels_cost=hotels_cost,
            activities_cost=activities_cost,
            total_cost=total_cost,
            currency=currency,
            last_calculated=_now(),
        )
        self._summaries[itinerary_id] = record
        return replace(record)

    def summary_count(self) -> int:
        """Number of stored budget summaries."""
        return len(self._summaries)
