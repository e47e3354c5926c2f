"""FastAPI application."""

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from globetrotter.app.adapters.amadeus import close_amadeus_client
from globetrotter.app.api.routes.destinations import router as destinations_router
from globetrotter.app.api.routes.flights import router as flights_router
from globetrotter.app.api.routes.health import router as health_router
from globetrotter.app.api.routes.itineraries import router as itineraries_router
from globetrotter.app.api.routes.metrics import router as metrics_router
from globetrotter.app.api.routes.users import router as users_router
from globetrotter.app.config import get_settings
from globetrotter.app.db.engine import dispose_async_engine
from globetrotter.app.errors import (
    GlobeTrotterError,
    InvalidField,
    MissingRequiredField,
    ValidationFailed,
)
from globetrotter.app.utils.logging import configure_logging

logger = logging.getLogger(__name__)

API_PREFIX = "/api"
_LOCATIONS = {"body", "query", "path", "header", "cookie"}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging(get_settings().log_level)
    yield
    await close_amadeus_client()
    await dispose_async_engine()


app = FastAPI(title="GlobeTrotter API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origin_list,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(users_router, prefix=API_PREFIX)
app.include_router(itineraries_router, prefix=API_PREFIX)
app.include_router(destinations_router, prefix=API_PREFIX)
app.include_router(flights_router, prefix=API_PREFIX)


def _field_name(loc: Sequence[Any]) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in _LOCATIONS:
        parts = parts[1:]
    return ".".join(parts) or "body"


def validation_error_from(exc: RequestValidationError) -> ValidationFailed:
    """Map pydantic validation errors onto the domain taxonomy.

    Any missing field wins over malformed ones so clients see the full list
    of required fields at once.
    """
    errors = exc.errors()
    missing = [_field_name(error["loc"]) for error in errors if error["type"] == "missing"]
    if missing:
        return MissingRequiredField(missing)
    if not errors:
        return ValidationFailed("Request validation failed")
    first = errors[0]
    return InvalidField(_field_name(first["loc"]), first["msg"])


@app.exception_handler(GlobeTrotterError)
async def handle_domain_error(request: Request, exc: GlobeTrotterError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            f"[{request.method} {request.url.path}] {type(exc).__name__}: {exc.message}",
            exc_info=exc,
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = validation_error_from(exc)
    return JSONResponse(status_code=error.status_code, content=error.to_body())


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "GlobeTrotter API", "version": "0.1.0"}
