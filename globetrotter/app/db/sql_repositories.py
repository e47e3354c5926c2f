"""SQL implementation of the ItineraryStore protocol."""

import functools
import logging
import uuid
from collections.abc import Awaitable, Callable
from decimal import Decimal
from typing import Any, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from globetrotter.app.db.models import (
    BudgetSummary,
    FlightSegment,
    Itinerary,
    ItineraryActivity,
    ItineraryHotel,
    ItineraryStop,
    User,
    utcnow,
)
from globetrotter.app.db.repositories import (
    ActivityRecord,
    BudgetSummaryRecord,
    FlightRecord,
    HotelRecord,
    ItineraryRecord,
    StopRecord,
    UserRecord,
)
from globetrotter.app.errors import Conflict, InternalError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SEQUENCE_CONFLICT = "A stop with this sequence already exists in this itinerary"
EMAIL_CONFLICT = "User with this email already exists"

# Full nested graph loaded for every itinerary read
_ITINERARY_GRAPH = (
    selectinload(Itinerary.stops).selectinload(ItineraryStop.activities),
    selectinload(Itinerary.stops).selectinload(ItineraryStop.hotels),
    selectinload(Itinerary.flights),
    selectinload(Itinerary.budget_summary),
)

_STOP_GRAPH = (
    selectinload(ItineraryStop.activities),
    selectinload(ItineraryStop.hotels),
)


def _translate_errors(
    conflict_message: str | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Map SQLAlchemy failures onto the domain error taxonomy.

    IntegrityError becomes Conflict when the operation has a uniqueness
    rule, any other SQLAlchemyError becomes InternalError. The session is
    rolled back in both cases so no partial write survives.
    """

    def decorator(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(fn)
        async def wrapper(self: "SqlItineraryStore", *args: Any, **kwargs: Any) -> T:
            try:
                return await fn(self, *args, **kwargs)
            except IntegrityError as e:
                await self._session.rollback()
                if conflict_message is None:
                    logger.error(f"[store] {fn.__name__} integrity error: {e.orig}")
                    raise InternalError(f"Integrity error: {e.orig}") from e
                raise Conflict(conflict_message) from e
            except SQLAlchemyError as e:
                await self._session.rollback()
                logger.error(f"[store] {fn.__name__} failed: {e}", exc_info=True)
                raise InternalError(f"Database error: {e}") from e

        return wrapper

    return decorator


def _user_record(user: User) -> UserRecord:
    return UserRecord(
        user_id=user.user_id,
        email=user.email,
        name=user.name,
        created_at=user.created_at,
    )


def _activity_record(activity: ItineraryActivity) -> ActivityRecord:
    return ActivityRecord(
        activity_id=activity.activity_id,
        stop_id=activity.stop_id,
        provider_activity_id=activity.provider_activity_id,
        name=activity.name,
        short_description=activity.short_description,
        description=activity.description,
        rating=activity.rating,
        price=activity.price,
        currency=activity.currency,
        booking_link=activity.booking_link,
        minimum_duration=activity.minimum_duration,
        pictures=list(activity.pictures or []),
        latitude=activity.latitude,
        longitude=activity.longitude,
        created_at=activity.created_at,
    )


def _hotel_record(hotel: ItineraryHotel) -> HotelRecord:
    return HotelRecord(
        hotel_id=hotel.hotel_id,
        stop_id=hotel.stop_id,
        provider_hotel_id=hotel.provider_hotel_id,
        hotel_name=hotel.hotel_name,
        chain_code=hotel.chain_code,
        offer_id=hotel.offer_id,
        room_type=hotel.room_type,
        check_in_date=hotel.check_in_date,
        check_out_date=hotel.check_out_date,
        nights=hotel.nights,
        price_base=hotel.price_base,
        price_total=hotel.price_total,
        currency=hotel.currency,
        payment_type=hotel.payment_type,
        cancellation=hotel.cancellation,
        latitude=hotel.latitude,
        longitude=hotel.longitude,
        created_at=hotel.created_at,
    )


def _stop_record(stop: ItineraryStop) -> StopRecord:
    return StopRecord(
        stop_id=stop.stop_id,
        itinerary_id=stop.itinerary_id,
        city_code=stop.city_code,
        city_name=stop.city_name,
        country_code=stop.country_code,
        latitude=stop.latitude,
        longitude=stop.longitude,
        sequence=stop.sequence,
        check_in_date=stop.check_in_date,
        check_out_date=stop.check_out_date,
        nights=stop.nights,
        notes=stop.notes,
        created_at=stop.created_at,
        activities=[_activity_record(a) for a in stop.activities],
        hotels=[_hotel_record(h) for h in stop.hotels],
    )


def _flight_record(flight: FlightSegment) -> FlightRecord:
    return FlightRecord(
        flight_id=flight.flight_id,
        itinerary_id=flight.itinerary_id,
        flight_offer_id=flight.flight_offer_id,
        from_city_code=flight.from_city_code,
        to_city_code=flight.to_city_code,
        departure_at=flight.departure_at,
        arrival_at=flight.arrival_at,
        carrier_code=flight.carrier_code,
        flight_number=flight.flight_number,
        duration=flight.duration,
        passengers=flight.passengers,
        price_base=flight.price_base,
        price_total=flight.price_total,
        currency=flight.currency,
        cabin_class=flight.cabin_class,
        created_at=flight.created_at,
    )


def _summary_record(summary: BudgetSummary) -> BudgetSummaryRecord:
    return BudgetSummaryRecord(
        summary_id=summary.summary_id,
        itinerary_id=summary.itinerary_id,
        flights_cost=summary.flights_cost,
        hotels_cost=summary.hotels_cost,
        activities_cost=summary.activities_cost,
        total_cost=summary.total_cost,
        currency=summary.currency,
        last_calculated=summary.last_calculated,
    )


def _itinerary_record(itin: Itinerary, with_owner: bool = False) -> ItineraryRecord:
    return ItineraryRecord(
        itinerary_id=itin.itinerary_id,
        user_id=itin.user_id,
        name=itin.name,
        description=itin.description,
        total_budget=itin.total_budget,
        currency=itin.currency,
        start_date=itin.start_date,
        end_date=itin.end_date,
        status=itin.status,
        created_at=itin.created_at,
        updated_at=itin.updated_at,
        stops=[_stop_record(s) for s in itin.stops],
        flights=[_flight_record(f) for f in itin.flights],
        budget_summary=_summary_record(itin.budget_summary) if itin.budget_summary else None,
        owner=_user_record(itin.user) if with_owner else None,
    )


class SqlItineraryStore:
    """SQL implementation of ItineraryStore over an AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # --- loaders ---

    async def _load_itinerary(
        self, itinerary_id: uuid.UUID, with_owner: bool = False
    ) -> Itinerary | None:
        query = select(Itinerary).where(Itinerary.itinerary_id == itinerary_id).options(
            *_ITINERARY_GRAPH
        )
        if with_owner:
            query = query.options(selectinload(Itinerary.user))
        result = await self._session.execute(query.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def _load_stop(self, stop_id: uuid.UUID) -> ItineraryStop | None:
        result = await self._session.execute(
            select(ItineraryStop)
            .where(ItineraryStop.stop_id == stop_id)
            .options(*_STOP_GRAPH)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    # --- users ---

    @_translate_errors(EMAIL_CONFLICT)
    async def create_user(self, email: str, name: str | None) -> UserRecord:
        """Create a user."""
        user = User(user_id=uuid.uuid4(), email=email, name=name)
        self._session.add(user)
        await self._session.commit()
        await self._session.refresh(user)
        return _user_record(user)

    @_translate_errors()
    async def get_user(self, user_id: uuid.UUID) -> UserRecord | None:
        """Get user by ID."""
        user = await self._session.get(User, user_id)
        return _user_record(user) if user else None

    @_translate_errors()
    async def get_user_by_email(self, email: str) -> UserRecord | None:
        """Get user by email."""
        result = await self._session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        return _user_record(user) if user else None

    # --- itineraries ---

    @_translate_errors()
    async def create_itinerary(
        self, user_id: uuid.UUID, fields: dict[str, Any]
    ) -> ItineraryRecord:
        """Create an itinerary."""
        itinerary_id = uuid.uuid4()
        self._session.add(Itinerary(itinerary_id=itinerary_id, user_id=user_id, **fields))
        await self._session.commit()

        itin = await self._load_itinerary(itinerary_id)
        assert itin is not None
        return _itinerary_record(itin)

    @_translate_errors()
    async def list_itineraries(self, user_id: uuid.UUID) -> list[ItineraryRecord]:
        """List a user's itineraries, newest first."""
        result = await self._session.execute(
            select(Itinerary)
            .where(Itinerary.user_id == user_id)
            .options(*_ITINERARY_GRAPH)
            .order_by(Itinerary.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return [_itinerary_record(itin) for itin in result.scalars().all()]

    @_translate_errors()
    async def get_itinerary(self, itinerary_id: uuid.UUID) -> ItineraryRecord | None:
        """Get itinerary by ID with owner."""
        itin = await self._load_itinerary(itinerary_id, with_owner=True)
        return _itinerary_record(itin, with_owner=True) if itin else None

    @_translate_errors()
    async def update_itinerary(
        self, itinerary_id: uuid.UUID, changes: dict[str, Any]
    ) -> ItineraryRecord | None:
        """Update only the provided itinerary fields."""
        itin = await self._session.get(Itinerary, itinerary_id)
        if itin is None:
            return None

        for key, value in changes.items():
            setattr(itin, key, value)
        itin.updated_at = utcnow()
        await self._session.commit()

        reloaded = await self._load_itinerary(itinerary_id)
        return _itinerary_record(reloaded) if reloaded else None

    @_translate_errors()
    async def delete_itinerary(self, itinerary_id: uuid.UUID) -> bool:
        """Delete an itinerary with its stops, flights and summary."""
        itin = await self._load_itinerary(itinerary_id)
        if itin is None:
            return False

        await self._session.delete(itin)
        await self._session.commit()
        return True

    # --- stops ---

    @_translate_errors()
    async def max_stop_sequence(self, itinerary_id: uuid.UUID) -> int | None:
        """Highest stop sequence in the itinerary."""
        result = await self._session.execute(
            select(func.max(ItineraryStop.sequence)).where(
                ItineraryStop.itinerary_id == itinerary_id
            )
        )
        return result.scalar_one_or_none()

    @_translate_errors(SEQUENCE_CONFLICT)
    async def create_stop(self, itinerary_id: uuid.UUID, fields: dict[str, Any]) -> StopRecord:
        """Create a stop."""
        stop_id = uuid.uuid4()
        self._session.add(ItineraryStop(stop_id=stop_id, itinerary_id=itinerary_id, **fields))
        await self._session.commit()

        stop = await self._load_stop(stop_id)
        assert stop is not None
        return _stop_record(stop)

    @_translate_errors()
    async def list_stops(self, itinerary_id: uuid.UUID) -> list[StopRecord]:
        """List stops ordered by sequence."""
        result = await self._session.execute(
            select(ItineraryStop)
            .where(ItineraryStop.itinerary_id == itinerary_id)
            .options(*_STOP_GRAPH)
            .order_by(ItineraryStop.sequence.asc())
            .execution_options(populate_existing=True)
        )
        return [_stop_record(stop) for stop in result.scalars().all()]

    @_translate_errors()
    async def get_stop(self, stop_id: uuid.UUID) -> StopRecord | None:
        """Get stop by ID."""
        stop = await self._load_stop(stop_id)
        return _stop_record(stop) if stop else None

    @_translate_errors(SEQUENCE_CONFLICT)
    async def update_stop(
        self, stop_id: uuid.UUID, changes: dict[str, Any]
    ) -> StopRecord | None:
        """Update only the provided stop fields."""
        stop = await self._session.get(ItineraryStop, stop_id)
        if stop is None:
            return None

        for key, value in changes.items():
            setattr(stop, key, value)
        await self._session.commit()

        reloaded = await self._load_stop(stop_id)
        return _stop_record(reloaded) if reloaded else None

    @_translate_errors()
    async def delete_stop(self, stop_id: uuid.UUID) -> bool:
        """Delete a stop with its activities and hotels."""
        stop = await self._load_stop(stop_id)
        if stop is None:
            return False

        await self._session.delete(stop)
        await self._session.commit()
        return True

    # --- bookings ---

    @_translate_errors()
    async def create_activity(
        self, stop_id: uuid.UUID, fields: dict[str, Any]
    ) -> ActivityRecord:
        """Create an activity under a stop."""
        activity = ItineraryActivity(activity_id=uuid.uuid4(), stop_id=stop_id, **fields)
        self._session.add(activity)
        await self._session.commit()
        await self._session.refresh(activity)
        return _activity_record(activity)

    @_translate_errors()
    async def create_hotel(self, stop_id: uuid.UUID, fields: dict[str, Any]) -> HotelRecord:
        """Create a hotel stay under a stop."""
        hotel = ItineraryHotel(hotel_id=uuid.uuid4(), stop_id=stop_id, **fields)
        self._session.add(hotel)
        await self._session.commit()
        await self._session.refresh(hotel)
        return _hotel_record(hotel)

    @_translate_errors()
    async def update_hotel(
        self, hotel_id: uuid.UUID, changes: dict[str, Any]
    ) -> HotelRecord | None:
        """Update only the provided hotel fields."""
        hotel = await self._session.get(ItineraryHotel, hotel_id)
        if hotel is None:
            return None

        for key, value in changes.items():
            setattr(hotel, key, value)
        await self._session.commit()
        await self._session.refresh(hotel)
        return _hotel_record(hotel)

    @_translate_errors()
    async def create_flight(
        self, itinerary_id: uuid.UUID, fields: dict[str, Any]
    ) -> FlightRecord:
        """Create a flight segment under an itinerary."""
        flight = FlightSegment(flight_id=uuid.uuid4(), itinerary_id=itinerary_id, **fields)
        self._session.add(flight)
        await self._session.commit()
        await self._session.refresh(flight)
        return _flight_record(flight)

    # --- budget ---

    @_translate_errors()
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
        """Create or overwrite the itinerary's budget summary (last writer wins)."""
        values = {
            "flights_cost": flights_cost,
            "hotels_cost": hotels_cost,
            "activities_cost": activities_cost,
            "total_cost": total_cost,
            "currency": currency,
            "last_calculated": utcnow(),
        }

        summary = await self._find_summary(itinerary_id)
        if summary is None:
            summary = BudgetSummary(summary_id=uuid.uuid4(), itinerary_id=itinerary_id, **values)
            self._session.add(summary)
            try:
                await self._session.commit()
            except IntegrityError:
                # A concurrent calculation created the row first; overwrite it
                await self._session.rollback()
                summary = await self._find_summary(itinerary_id)
                if summary is None:
                    raise
                self._apply(summary, values)
                await self._session.commit()
        else:
            self._apply(summary, values)
            await self._session.commit()

        await self._session.refresh(summary)
        return _summary_record(summary)

    async def _find_summary(self, itinerary_id: uuid.UUID) -> BudgetSummary | None:
        result = await self._session.execute(
            select(BudgetSummary)
            .where(BudgetSummary.itinerary_id == itinerary_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _apply(target: Any, values: dict[str, Any]) -> None:
        for key, value in values.items():
            setattr(target, key, value)
