"""Dev seeding helper: a known user with a sample itinerary."""

import asyncio
import uuid
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from globetrotter.app.db.engine import get_async_engine
from globetrotter.app.db.models import Itinerary, ItineraryStop, User

# Fixed IDs so local clients can hard-code them
DEV_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")
DEV_ITINERARY_ID = uuid.UUID("00000000-0000-0000-0000-000000000003")


async def seed_dev_user_and_itinerary() -> None:
    """Seed the dev user and a sample Paris itinerary.

    Idempotent - safe to run multiple times.
    """
    async with AsyncSession(get_async_engine()) as session:
        user = (
            await session.execute(select(User).where(User.user_id == DEV_USER_ID))
        ).scalar_one_or_none()

        if not user:
            print(f"Creating dev user with id {DEV_USER_ID}...")
            session.add(User(user_id=DEV_USER_ID, email="dev@example.com", name="Dev Traveler"))
        else:
            print(f"Dev user already exists: {user.email}")

        itinerary = (
            await session.execute(
                select(Itinerary).where(Itinerary.itinerary_id == DEV_ITINERARY_ID)
            )
        ).scalar_one_or_none()

        if not itinerary:
            print(f"Creating dev itinerary with id {DEV_ITINERARY_ID}...")
            session.add(
                Itinerary(
                    itinerary_id=DEV_ITINERARY_ID,
                    user_id=DEV_USER_ID,
                    name="Weekend in Paris",
                    total_budget=Decimal("1500.00"),
                    currency="EUR",
                    stops=[
                        ItineraryStop(
                            city_code="PAR",
                            city_name="Paris",
                            country_code="FR",
                            latitude=48.85341,
                            longitude=2.3488,
                            sequence=1,
                        )
                    ],
                )
            )
        else:
            print(f"Dev itinerary already exists: {itinerary.name}")

        await session.commit()
        print("Dev seeding complete")


if __name__ == "__main__":
    asyncio.run(seed_dev_user_and_itinerary())
