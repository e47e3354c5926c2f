"""User management."""

import logging
from uuid import UUID

from globetrotter.app.db.repositories import ItineraryStore, UserRecord
from globetrotter.app.errors import NotFound
from globetrotter.app.models.itinerary import ItineraryOut
from globetrotter.app.models.user import UserCreate, UserOut, UserWithItineraries

logger = logging.getLogger(__name__)


async def create_user(store: ItineraryStore, payload: UserCreate) -> UserOut:
    """Create a user. Raises Conflict when the email is taken."""
    record = await store.create_user(payload.email, payload.name)
    logger.info(f"User created user_id={record.user_id}")
    return UserOut.model_validate(record)


async def _with_itineraries(store: ItineraryStore, user: UserRecord) -> UserWithItineraries:
    itineraries = await store.list_itineraries(user.user_id)
    return UserWithItineraries(
        **UserOut.model_validate(user).model_dump(),
        itineraries=[ItineraryOut.model_validate(record) for record in itineraries],
    )


async def get_user(store: ItineraryStore, user_id: UUID) -> UserWithItineraries:
    user = await store.get_user(user_id)
    if user is None:
        raise NotFound("User")
    return await _with_itineraries(store, user)


async def get_user_by_email(store: ItineraryStore, email: str) -> UserWithItineraries:
    user = await store.get_user_by_email(email)
    if user is None:
        raise NotFound("User")
    return await _with_itineraries(store, user)
