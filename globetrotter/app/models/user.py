"""User request and response models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from globetrotter.app.models.common import RecordModel
from globetrotter.app.models.itinerary import ItineraryOut


class UserCreate(BaseModel):
    """Request body for POST /users."""

    email: EmailStr
    name: str | None = Field(None, max_length=200)


class UserOut(RecordModel):
    user_id: UUID
    email: str
    name: str | None
    created_at: datetime


class UserWithItineraries(UserOut):
    """User profile together with the itineraries they own."""

    itineraries: list[ItineraryOut]
