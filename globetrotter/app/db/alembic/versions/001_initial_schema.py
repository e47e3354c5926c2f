"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates user, itinerary, itinerary_stop, itinerary_activity,
itinerary_hotel, flight_segment and budget_summary.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
    )


def upgrade() -> None:
    """Create all tables."""
    # user table
    op.create_table(
        "user",
        sa.Column("user_id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=True),
        _created_at(),
        sa.UniqueConstraint("email", name="uq_user_email"),
    )

    # itinerary table
    op.create_table(
        "itinerary",
        sa.Column("itinerary_id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("total_budget", sa.Numeric(12, 2), nullable=True),
        sa.Column("currency", sa.Text(), server_default="USD", nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("status", sa.Text(), server_default="planning", nullable=False),
        _created_at(),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.ForeignKeyConstraint(["user_id"], ["user.user_id"], ondelete="CASCADE"),
    )
    op.create_index("idx_itinerary_user", "itinerary", ["user_id", "created_at"])

    # itinerary_stop table
    op.create_table(
        "itinerary_stop",
        sa.Column("stop_id", sa.Uuid(), primary_key=True),
        sa.Column("itinerary_id", sa.Uuid(), nullable=False),
        sa.Column("city_code", sa.Text(), nullable=False),
        sa.Column("city_name", sa.Text(), nullable=False),
        sa.Column("country_code", sa.Text(), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("check_in_date", sa.Date(), nullable=True),
        sa.Column("check_out_date", sa.Date(), nullable=True),
        sa.Column("nights", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["itinerary_id"], ["itinerary.itinerary_id"], ondelete="CASCADE"),
        sa.UniqueConstraint("itinerary_id", "sequence", name="uq_stop_itinerary_sequence"),
    )

    # itinerary_activity table
    op.create_table(
        "itinerary_activity",
        sa.Column("activity_id", sa.Uuid(), primary_key=True),
        sa.Column("stop_id", sa.Uuid(), nullable=False),
        sa.Column("provider_activity_id", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("short_description", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=True),
        sa.Column("currency", sa.Text(), nullable=True),
        sa.Column("booking_link", sa.Text(), nullable=True),
        sa.Column("minimum_duration", sa.Text(), nullable=True),
        sa.Column("pictures", sa.JSON(), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["stop_id"], ["itinerary_stop.stop_id"], ondelete="CASCADE"),
    )
    op.create_index("idx_activity_stop", "itinerary_activity", ["stop_id"])

    # itinerary_hotel table
    op.create_table(
        "itinerary_hotel",
        sa.Column("hotel_id", sa.Uuid(), primary_key=True),
        sa.Column("stop_id", sa.Uuid(), nullable=False),
        sa.Column("provider_hotel_id", sa.Text(), nullable=False),
        sa.Column("hotel_name", sa.Text(), nullable=False),
        sa.Column("chain_code", sa.Text(), nullable=True),
        sa.Column("offer_id", sa.Text(), nullable=True),
        sa.Column("room_type", sa.Text(), nullable=True),
        sa.Column("check_in_date", sa.Date(), nullable=False),
        sa.Column("check_out_date", sa.Date(), nullable=False),
        sa.Column("nights", sa.Integer(), server_default="1", nullable=False),
        sa.Column("price_base", sa.Numeric(12, 2), nullable=True),
        sa.Column("price_total", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.Text(), nullable=False),
        sa.Column("payment_type", sa.Text(), nullable=True),
        sa.Column("cancellation", sa.JSON(), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["stop_id"], ["itinerary_stop.stop_id"], ondelete="CASCADE"),
    )
    op.create_index("idx_hotel_stop", "itinerary_hotel", ["stop_id"])

    # flight_segment table
    op.create_table(
        "flight_segment",
        sa.Column("flight_id", sa.Uuid(), primary_key=True),
        sa.Column("itinerary_id", sa.Uuid(), nullable=False),
        sa.Column("flight_offer_id", sa.Text(), nullable=True),
        sa.Column("from_city_code", sa.Text(), nullable=False),
        sa.Column("to_city_code", sa.Text(), nullable=False),
        sa.Column("departure_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("arrival_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("carrier_code", sa.Text(), nullable=True),
        sa.Column("flight_number", sa.Text(), nullable=True),
        sa.Column("duration", sa.Text(), nullable=True),
        sa.Column("passengers", sa.Integer(), server_default="1", nullable=False),
        sa.Column("price_base", sa.Numeric(12, 2), nullable=True),
        sa.Column("price_total", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.Text(), nullable=False),
        sa.Column("cabin_class", sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["itinerary_id"], ["itinerary.itinerary_id"], ondelete="CASCADE"),
    )
    op.create_index("idx_flight_itinerary", "flight_segment", ["itinerary_id", "departure_at"])

    # budget_summary table
    op.create_table(
        "budget_summary",
        sa.Column("summary_id", sa.Uuid(), primary_key=True),
        sa.Column("itinerary_id", sa.Uuid(), nullable=False),
        sa.Column("flights_cost", sa.Numeric(12, 2), nullable=False),
        sa.Column("hotels_cost", sa.Numeric(12, 2), nullable=False),
        sa.Column("activities_cost", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_cost", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.Text(), nullable=False),
        sa.Column(
            "last_calculated",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["itinerary_id"], ["itinerary.itinerary_id"], ondelete="CASCADE"),
        sa.UniqueConstraint("itinerary_id", name="uq_budget_summary_itinerary"),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("budget_summary")
    op.drop_index("idx_flight_itinerary", table_name="flight_segment")
    op.drop_table("flight_segment")
    op.drop_index("idx_hotel_stop", table_name="itinerary_hotel")
    op.drop_table("itinerary_hotel")
    op.drop_index("idx_activity_stop", table_name="itinerary_activity")
    op.drop_table("itinerary_activity")
    op.drop_table("itinerary_stop")
    op.drop_index("idx_itinerary_user", table_name="itinerary")
    op.drop_table("itinerary")
    op.drop_table("user")
