"""Repository protocol and records for itinerary data access."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Protocol
from uuid import UUID


@dataclass
class UserRecord:
    """User data record."""

    user_id: UUID
    email: str
    name: str | None
    created_at: datetime


@dataclass
class ActivityRecord:
    """Activity booked at a stop."""

    activity_id: UUID
    stop_id: UUID
    provider_activity_id: str
    name: str
    short_description: str | None
    description: str | None
    rating: float | None
    price: Decimal | None
    currency: str | None
    booking_link: str | None
    minimum_duration: str | None
    pictures: list[str]
    latitude: float | None
    longitude: float | None
    created_at: datetime


@dataclass
class HotelRecord:
    """Hotel stay booked at a stop."""

    hotel_id: UUID
    stop_id: UUID
    provider_hotel_id: str
    hotel_name: str
    chain_code: str | None
    offer_id: str | None
    room_type: str | None
    check_in_date: date
    check_out_date: date
    nights: int
    price_base: Decimal | None
    price_total: Decimal
    currency: str
    payment_type: str | None
    cancellation: dict[str, Any] | None
    latitude: float | None
    longitude: float | None
    created_at: datetime


@dataclass
class StopRecord:
    """City stop with its activities and hotels."""

    stop_id: UUID
    itinerary_id: UUID
    city_code: str
    city_name: str
    country_code: str | None
    latitude: float | None
    longitude: float | None
    sequence: int
    check_in_date: date | None
    check_out_date: date | None
    nights: int | None
    notes: str | None
    created_at: datetime
    activities: list[ActivityRecord] = field(default_factory=list)
    hotels: list[HotelRecord] = field(default_factory=list)


@dataclass
class FlightRecord:
    """Flight segment attached to an itinerary."""

    flight_id: UUID
    itinerary_id: UUID
    flight_offer_id: str | None
    from_city_code: str
    to_city_code: str
    departure_at: datetime | None
    arrival_at: datetime | None
    carrier_code: str | None
    flight_number: str | None
    duration: str | None
    passengers: int
    price_base: Decimal | None
    price_total: Decimal
    currency: str
    cabin_class: str | None
    created_at: datetime


@dataclass
class BudgetSummaryRecord:
    """Persisted snapshot of the last budget calculation."""

    summary_id: UUID
    itinerary_id: UUID
    flights_cost: Decimal
    hotels_cost: Decimal
    activities_cost: Decimal
    total_cost: Decimal
    currency: str
    last_calculated: datetime


@dataclass
class ItineraryRecord:
    """Itinerary with its nested collections.

    Stops are ordered by sequence; flights by departure time. ``owner`` is
    only populated by ``ItineraryStore.get_itinerary``.
    """

    itinerary_id: UUID
    user_id: UUID
    name: str
    description: str | None
    total_budget: Decimal | None
    currency: str
    start_date: date | None
    end_date: date | None
    status: str
    created_at: datetime
    updated_at: datetime
    stops: list[StopRecord] = field(default_factory=list)
    flights: list[FlightRecord] = field(default_factory=list)
    budget_summary: BudgetSummaryRecord | None = None
    owner: UserRecord | None = None


class ItineraryStore(Protocol):
    """Record-oriented persistence boundary.

    Lookups return ``None`` when the target does not exist. Uniqueness
    violations raise ``Conflict``; any other storage failure raises
    ``InternalError``.
    """

    async def create_user(self, email: str, name: str | None) -> UserRecord:
        """Create a user. Raises Conflict on duplicate email."""
        ...

    async def get_user(self, user_id: UUID) -> UserRecord | None:
        """Get user by ID."""
        ...

    async def get_user_by_email(self, email: str) -> UserRecord | None:
        """Get user by email."""
        ...

    async def create_itinerary(self, user_id: UUID, fields: dict[str, Any]) -> ItineraryRecord:
        """Create an itinerary with empty nested collections."""
        ...

    async def list_itineraries(self, user_id: UUID) -> list[ItineraryRecord]:
        """List a user's itineraries, newest first, with stops, flights and summary."""
        ...

    async def get_itinerary(self, itinerary_id: UUID) -> ItineraryRecord | None:
        """Get the full itinerary graph including the owner."""
        ...

    async def update_itinerary(
        self, itinerary_id: UUID, changes: dict[str, Any]
    ) -> ItineraryRecord | None:
        """Apply only the given field changes."""
        ...

    async def delete_itinerary(self, itinerary_id: UUID) -> bool:
        """Delete an itinerary and everything it owns. Returns False if absent."""
        ...

    async def max_stop_sequence(self, itinerary_id: UUID) -> int | None:
        """Highest stop sequence in the itinerary, or None when it has no stops."""
        ...

    async def create_stop(self, itinerary_id: UUID, fields: dict[str, Any]) -> StopRecord:
        """Create a stop. Raises Conflict on sequence collision."""
        ...

    async def list_stops(self, itinerary_id: UUID) -> list[StopRecord]:
        """List stops ordered by sequence with activities and hotels."""
        ...

    async def get_stop(self, stop_id: UUID) -> StopRecord | None:
        """Get a stop with activities and hotels."""
        ...

    async def update_stop(self, stop_id: UUID, changes: dict[str, Any]) -> StopRecord | None:
        """Apply only the given field changes. Raises Conflict on sequence collision."""
        ...

    async def delete_stop(self, stop_id: UUID) -> bool:
        """Delete a stop and its activities and hotels. Returns False if absent."""
        ...

    async def create_activity(self, stop_id: UUID, fields: dict[str, Any]) -> ActivityRecord:
        """Create an activity under a stop."""
        ...

    async def create_hotel(self, stop_id: UUID, fields: dict[str, Any]) -> HotelRecord:
        """Create a hotel stay under a stop."""
        ...

    async def update_hotel(self, hotel_id: UUID, changes: dict[str, Any]) -> HotelRecord | None:
        """Apply only the given field changes to a hotel."""
        ...

    async def create_flight(self, itinerary_id: UUID, fields: dict[str, Any]) -> FlightRecord:
        """Create a flight segment under an itinerary."""
        ...

    async def upsert_budget_summary(
        self,
        itinerary_id: UUID,
        *,
        flights_cost: Decimal,
        hotels_cost: Decimal,
        activities_cost: Decimal,
        total_cost: Decimal,
        currency: str,
    ) -> BudgetSummaryRecord:
        """Create or overwrite the itinerary's single budget summary."""
        ...
