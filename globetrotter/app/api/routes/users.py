"""User endpoints - POST /users, GET /users/{user_id}, GET /users/email/{email}."""

import logging
from uuid import UUID

from fastapi import APIRouter, status

from globetrotter.app.api.deps import StoreDep
from globetrotter.app.models.common import ApiResponse
from globetrotter.app.models.user import UserCreate, UserOut, UserWithItineraries
from globetrotter.app.services import users as user_service

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)


@router.post("", response_model=ApiResponse[UserOut], status_code=status.HTTP_201_CREATED)
async def create_user(request: UserCreate, store: StoreDep) -> ApiResponse[UserOut]:
    """Create a user.

    Returns:
        The created user

    Raises:
        Conflict: a user with this email already exists
    """
    user = await user_service.create_user(store, request)
    logger.info(f"[POST /api/users] user_id={user.user_id}")
    return ApiResponse(data=user)


@router.get("/email/{email}", response_model=ApiResponse[UserWithItineraries])
async def get_user_by_email(email: str, store: StoreDep) -> ApiResponse[UserWithItineraries]:
    """Look up a user by email, with their itineraries."""
    return ApiResponse(data=await user_service.get_user_by_email(store, email))


@router.get("/{user_id}", response_model=ApiResponse[UserWithItineraries])
async def get_user(user_id: UUID, store: StoreDep) -> ApiResponse[UserWithItineraries]:
    """Fetch a user by id, with their itineraries."""
    return ApiResponse(data=await user_service.get_user(store, user_id))
