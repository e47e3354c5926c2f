"""Health check endpoints.

- /health: liveness, always 200 while the process runs
- /healthz: database connectivity plus provider configuration
"""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from globetrotter.app.config import Settings, get_settings
from globetrotter.app.db.engine import get_async_engine

router = APIRouter()


async def check_db() -> tuple[bool, str]:
    """Check database connectivity.

    Returns:
        (is_ok, status_message)
    """
    try:
        async with get_async_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        return (True, "ok")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


async def check_provider(settings: Settings) -> tuple[bool, str]:
    """Report whether provider credentials are configured.

    Inventory endpoints answer 503 without them, but the itinerary API
    still works, so this never fails the health check.
    """
    if not settings.amadeus_configured:
        return (True, "not_configured")
    return (True, f"configured ({settings.amadeus_hostname})")


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s."""
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz() -> dict[str, Any] | JSONResponse:
    """Component health check.

    Returns:
        200 with component status if the database is reachable
        503 otherwise
    """
    settings = get_settings()

    db_ok, db_status = await check_db()
    _, provider_status = await check_provider(settings)

    response_body = {
        "status": "ok" if db_ok else "degraded",
        "components": {
            "db": db_status,
            "provider": provider_status,
        },
    }

    if not db_ok:
        return JSONResponse(content=response_body, status_code=503)

    return response_body
