"""Shared FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from globetrotter.app.adapters.amadeus import AmadeusClient, get_amadeus_client
from globetrotter.app.db.engine import get_session
from globetrotter.app.db.repositories import ItineraryStore
from globetrotter.app.db.sql_repositories import SqlItineraryStore


def get_store(session: Annotated[AsyncSession, Depends(get_session)]) -> ItineraryStore:
    """Request-scoped itinerary store over the request's session."""
    return SqlItineraryStore(session)


StoreDep = Annotated[ItineraryStore, Depends(get_store)]
ProviderDep = Annotated[AmadeusClient, Depends(get_amadeus_client)]
