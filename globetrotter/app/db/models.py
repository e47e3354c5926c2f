"""SQLAlchemy ORM models for users, itineraries and their bookings."""

import uuid
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class User(Base):
    """User table - owners of itineraries."""

    __tablename__ = "user"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # Relationships
    itineraries: Mapped[list["Itinerary"]] = relationship(
        "Itinerary", back_populates="user", cascade="all, delete-orphan"
    )


class Itinerary(Base):
    """Itinerary table - a named trip owned by a user."""

    __tablename__ = "itinerary"
    __table_args__ = (Index("idx_itinerary_user", "user_id", "created_at"),)

    itinerary_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("user.user_id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_budget: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    currency: Mapped[str] = mapped_column(Text, nullable=False, default="USD")
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="planning")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="itineraries")
    stops: Mapped[list["ItineraryStop"]] = relationship(
        "ItineraryStop",
        back_populates="itinerary",
        cascade="all, delete-orphan",
        order_by="ItineraryStop.sequence",
    )
    flights: Mapped[list["FlightSegment"]] = relationship(
        "FlightSegment",
        back_populates="itinerary",
        cascade="all, delete-orphan",
        order_by=lambda: [
            FlightSegment.departure_at.asc().nulls_last(),
            FlightSegment.created_at.asc(),
        ],
    )
    budget_summary: Mapped["BudgetSummary | None"] = relationship(
        "BudgetSummary",
        back_populates="itinerary",
        cascade="all, delete-orphan",
        uselist=False,
    )


class ItineraryStop(Base):
    """Stop table - a city visited within an itinerary."""

    __tablename__ = "itinerary_stop"
    __table_args__ = (
        UniqueConstraint("itinerary_id", "sequence", name="uq_stop_itinerary_sequence"),
    )

    stop_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    itinerary_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("itinerary.itinerary_id", ondelete="CASCADE"), nullable=False
    )
    city_code: Mapped[str] = mapped_column(Text, nullable=False)
    city_name: Mapped[str] = mapped_column(Text, nullable=False)
    country_code: Mapped[str | None] = mapped_column(Text, nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    check_in_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    check_out_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    nights: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # Relationships
    itinerary: Mapped["Itinerary"] = relationship("Itinerary", back_populates="stops")
    activities: Mapped[list["ItineraryActivity"]] = relationship(
        "ItineraryActivity", back_populates="stop", cascade="all, delete-orphan"
    )
    hotels: Mapped[list["ItineraryHotel"]] = relationship(
        "ItineraryHotel", back_populates="stop", cascade="all, delete-orphan"
    )


class ItineraryActivity(Base):
    """Activity table - a booked tour or attraction at a stop."""

    __tablename__ = "itinerary_activity"

    activity_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    stop_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("itinerary_stop.stop_id", ondelete="CASCADE"), nullable=False
    )
    provider_activity_id: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    short_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    currency: Mapped[str | None] = mapped_column(Text, nullable=True)
    booking_link: Mapped[str | None] = mapped_column(Text, nullable=True)
    minimum_duration: Mapped[str | None] = mapped_column(Text, nullable=True)
    pictures: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # Relationships
    stop: Mapped["ItineraryStop"] = relationship("ItineraryStop", back_populates="activities")


class ItineraryHotel(Base):
    """Hotel table - a priced hotel stay at a stop."""

    __tablename__ = "itinerary_hotel"

    hotel_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    stop_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("itinerary_stop.stop_id", ondelete="CASCADE"), nullable=False
    )
    provider_hotel_id: Mapped[str] = mapped_column(Text, nullable=False)
    hotel_name: Mapped[str] = mapped_column(Text, nullable=False)
    chain_code: Mapped[str | None] = mapped_column(Text, nullable=True)
    offer_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    room_type: Mapped[str | None] = mapped_column(Text, nullable=True)
    check_in_date: Mapped[date] = mapped_column(Date, nullable=False)
    check_out_date: Mapped[date] = mapped_column(Date, nullable=False)
    nights: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    price_base: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    price_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(Text, nullable=False)
    payment_type: Mapped[str | None] = mapped_column(Text, nullable=True)
    cancellation: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # Relationships
    stop: Mapped["ItineraryStop"] = relationship("ItineraryStop", back_populates="hotels")


class FlightSegment(Base):
    """Flight segment table - a priced flight attached to an itinerary."""

    __tablename__ = "flight_segment"

    flight_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    itinerary_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("itinerary.itinerary_id", ondelete="CASCADE"), nullable=False
    )
    flight_offer_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    from_city_code: Mapped[str] = mapped_column(Text, nullable=False)
    to_city_code: Mapped[str] = mapped_column(Text, nullable=False)
    departure_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    arrival_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    carrier_code: Mapped[str | None] = mapped_column(Text, nullable=True)
    flight_number: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration: Mapped[str | None] = mapped_column(Text, nullable=True)
    passengers: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    price_base: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    price_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(Text, nullable=False)
    cabin_class: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # Relationships
    itinerary: Mapped["Itinerary"] = relationship("Itinerary", back_populates="flights")


class BudgetSummary(Base):
    """Budget summary table - last computed cost snapshot, one per itinerary."""

    __tablename__ = "budget_summary"

    summary_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    itinerary_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("itinerary.itinerary_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    flights_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    hotels_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    activities_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(Text, nullable=False)
    last_calculated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # Relationships
    itinerary: Mapped["Itinerary"] = relationship("Itinerary", back_populates="budget_summary")
