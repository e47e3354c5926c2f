"""Integration tests for SqlItineraryStore over SQLite."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from globetrotter.app.db.models import BudgetSummary, ItineraryHotel, ItineraryStop
from globetrotter.app.db.seed_dev import DEV_ITINERARY_ID, DEV_USER_ID, seed_dev_user_and_itinerary
from globetrotter.app.db.sql_repositories import SqlItineraryStore
from globetrotter.app.errors import Conflict
from globetrotter.app.services import budget as budget_service


def _hotel_fields(**overrides: object) -> dict[str, object]:
    fields: dict[str, object] = {
        "provider_hotel_id": "HLPAR123",
        "hotel_name": "Hotel du Louvre",
        "check_in_date": date(2025, 6, 10),
        "check_out_date": date(2025, 6, 13),
        "nights": 3,
        "price_total": Decimal("300.00"),
        "currency": "USD",
    }
    fields.update(overrides)
    return fields


async def _count(engine: AsyncEngine, model: type) -> int:
    async with engine.connect() as conn:
        result = await conn.execute(select(func.count()).select_from(model))
        return result.scalar_one()


@pytest.mark.asyncio
async def test_duplicate_email_is_conflict(sql_store: SqlItineraryStore) -> None:
    await sql_store.create_user("ada@example.com", "Ada")

    with pytest.raises(Conflict):
        await sql_store.create_user("ada@example.com", "Other Ada")

    # Session is usable again after the rollback
    user = await sql_store.get_user_by_email("ada@example.com")
    assert user is not None
    assert user.name == "Ada"


@pytest.mark.asyncio
async def test_itinerary_defaults_and_owner(sql_store: SqlItineraryStore) -> None:
    user = await sql_store.create_user("ada@example.com", "Ada")

    created = await sql_store.create_itinerary(user.user_id, {"name": "Europe Summer"})
    fetched = await sql_store.get_itinerary(created.itinerary_id)

    assert created.status == "planning"
    assert created.currency == "USD"
    assert created.stops == []
    assert created.owner is None
    assert fetched is not None
    assert fetched.owner is not None
    assert fetched.owner.email == "ada@example.com"


@pytest.mark.asyncio
async def test_stops_ordered_by_sequence(sql_store: SqlItineraryStore) -> None:
    user = await sql_store.create_user("ada@example.com", None)
    itin = await sql_store.create_itinerary(user.user_id, {"name": "Trip"})

    await sql_store.create_stop(itin.itinerary_id, {"city_code": "ROM", "city_name": "Rome", "sequence": 2})
    await sql_store.create_stop(itin.itinerary_id, {"city_code": "PAR", "city_name": "Paris", "sequence": 1})

    stops = await sql_store.list_stops(itin.itinerary_id)
    assert [stop.city_code for stop in stops] == ["PAR", "ROM"]
    assert await sql_store.max_stop_sequence(itin.itinerary_id) == 2


@pytest.mark.asyncio
async def test_sequence_collision_is_conflict_without_partial_write(
    sql_store: SqlItineraryStore, sqlite_engine: AsyncEngine
) -> None:
    user = await sql_store.create_user("ada@example.com", None)
    itin = await sql_store.create_itinerary(user.user_id, {"name": "Trip"})
    await sql_store.create_stop(itin.itinerary_id, {"city_code": "PAR", "city_name": "Paris", "sequence": 1})

    with pytest.raises(Conflict):
        await sql_store.create_stop(
            itin.itinerary_id, {"city_code": "ROM", "city_name": "Rome", "sequence": 1}
        )

    assert await _count(sqlite_engine, ItineraryStop) == 1


@pytest.mark.asyncio
async def test_update_stop_into_taken_sequence_is_conflict(sql_store: SqlItineraryStore) -> None:
    user = await sql_store.create_user("ada@example.com", None)
    itin = await sql_store.create_itinerary(user.user_id, {"name": "Trip"})
    await sql_store.create_stop(itin.itinerary_id, {"city_code": "PAR", "city_name": "Paris", "sequence": 1})
    rome = await sql_store.create_stop(
        itin.itinerary_id, {"city_code": "ROM", "city_name": "Rome", "sequence": 2}
    )

    with pytest.raises(Conflict):
        await sql_store.update_stop(rome.stop_id, {"sequence": 1})

    reloaded = await sql_store.get_stop(rome.stop_id)
    assert reloaded is not None
    assert reloaded.sequence == 2


@pytest.mark.asyncio
async def test_update_hotel_changes_only_given_fields(sql_store: SqlItineraryStore) -> None:
    user = await sql_store.create_user("ada@example.com", None)
    itin = await sql_store.create_itinerary(user.user_id, {"name": "Trip"})
    stop = await sql_store.create_stop(itin.itinerary_id, {"city_code": "PAR", "city_name": "Paris", "sequence": 1})
    hotel = await sql_store.create_hotel(stop.stop_id, _hotel_fields())

    updated = await sql_store.update_hotel(
        hotel.hotel_id, {"offer_id": "OFFER1", "price_total": Decimal("320.00")}
    )

    assert updated is not None
    assert updated.offer_id == "OFFER1"
    assert updated.price_total == Decimal("320.00")
    assert updated.hotel_name == "Hotel du Louvre"


@pytest.mark.asyncio
async def test_budget_summary_is_upserted(
    sql_store: SqlItineraryStore, sqlite_engine: AsyncEngine
) -> None:
    user = await sql_store.create_user("ada@example.com", None)
    itin = await sql_store.create_itinerary(
        user.user_id, {"name": "Trip", "total_budget": Decimal("1000.00")}
    )
    stop = await sql_store.create_stop(itin.itinerary_id, {"city_code": "PAR", "city_name": "Paris", "sequence": 1})
    await sql_store.create_hotel(stop.stop_id, _hotel_fields())

    first = await budget_service.calculate_budget(sql_store, itin.itinerary_id)
    await sql_store.create_flight(
        itin.itinerary_id,
        {
            "from_city_code": "NYC",
            "to_city_code": "PAR",
            "price_total": Decimal("500.00"),
            "currency": "USD",
        },
    )
    second = await budget_service.calculate_budget(sql_store, itin.itinerary_id)

    assert first.summary.total_cost == Decimal("300.00")
    assert second.summary.total_cost == Decimal("800.00")
    assert second.summary.summary_id == first.summary.summary_id
    assert second.breakdown.remaining == Decimal("200.00")
    assert await _count(sqlite_engine, BudgetSummary) == 1


@pytest.mark.asyncio
async def test_delete_itinerary_cascades(
    sql_store: SqlItineraryStore, sqlite_engine: AsyncEngine
) -> None:
    user = await sql_store.create_user("ada@example.com", None)
    itin = await sql_store.create_itinerary(user.user_id, {"name": "Trip"})
    stop = await sql_store.create_stop(itin.itinerary_id, {"city_code": "PAR", "city_name": "Paris", "sequence": 1})
    await sql_store.create_hotel(stop.stop_id, _hotel_fields())
    await budget_service.calculate_budget(sql_store, itin.itinerary_id)

    assert await sql_store.delete_itinerary(itin.itinerary_id) is True

    assert await sql_store.get_itinerary(itin.itinerary_id) is None
    assert await sql_store.get_stop(stop.stop_id) is None
    assert await _count(sqlite_engine, ItineraryHotel) == 0
    assert await _count(sqlite_engine, BudgetSummary) == 0
    assert await sql_store.delete_itinerary(itin.itinerary_id) is False


@pytest.mark.asyncio
async def test_seed_dev_is_idempotent(
    sqlite_engine: AsyncEngine, sql_store: SqlItineraryStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("globetrotter.app.db.seed_dev.get_async_engine", lambda: sqlite_engine)

    await seed_dev_user_and_itinerary()
    await seed_dev_user_and_itinerary()

    itinerary = await sql_store.get_itinerary(DEV_ITINERARY_ID)
    assert itinerary is not None
    assert itinerary.user_id == DEV_USER_ID
    assert itinerary.currency == "EUR"
    assert [stop.city_code for stop in itinerary.stops] == ["PAR"]


@pytest.mark.postgres
@pytest.mark.asyncio
async def test_postgres_sequence_conflict(postgres_engine: AsyncEngine) -> None:
    """Same uniqueness rules hold on PostgreSQL."""
    async with AsyncSession(postgres_engine, expire_on_commit=False) as session:
        store = SqlItineraryStore(session)
        user = await store.create_user("pg@example.com", None)
        itin = await store.create_itinerary(user.user_id, {"name": "Trip"})
        await store.create_stop(itin.itinerary_id, {"city_code": "PAR", "city_name": "Paris", "sequence": 1})

        with pytest.raises(Conflict):
            await store.create_stop(
                itin.itinerary_id, {"city_code": "ROM", "city_name": "Rome", "sequence": 1}
            )

        assert len(await store.list_stops(itin.itinerary_id)) == 1
