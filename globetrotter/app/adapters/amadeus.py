"""Amadeus Self-Service API client (OAuth2 client credentials over httpx).

All failures leave this module as ``ProviderError``; httpx exceptions never
escape. Requests are not retried.
"""

import asyncio
import logging
import time
from functools import lru_cache
from typing import Any

import httpx
from pydantic import ValidationError

from globetrotter.app.config import Settings, get_settings
from globetrotter.app.errors import ProviderError
from globetrotter.app.utils.logging import StructuredProviderLogger
from globetrotter.app.utils.metrics import PrometheusProviderMetrics

logger = logging.getLogger(__name__)

TOKEN_PATH = "/v1/security/oauth2/token"

# Refresh this many seconds before the provider-reported expiry
TOKEN_EXPIRY_MARGIN_S = 60


class AmadeusClient:
    """Thin authenticated JSON client for the Amadeus REST API.

    A single instance is shared per process (see ``get_amadeus_client``).
    Tests inject an ``httpx.AsyncClient`` built on ``httpx.MockTransport``.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._http = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._token: str | None = None
        self._token_expires_at = 0.0
        self._token_lock = asyncio.Lock()
        self._metrics = PrometheusProviderMetrics()
        self._structured = StructuredProviderLogger()

    @classmethod
    def from_settings(cls, settings: Settings) -> "AmadeusClient":
        return cls(
            client_id=settings.amadeus_client_id,
            client_secret=settings.amadeus_client_secret,
            base_url=settings.amadeus_base_url,
            timeout=settings.amadeus_timeout_seconds,
        )

    @property
    def configured(self) -> bool:
        return bool(self._client_id and self._client_secret)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def get(
        self, path: str, params: dict[str, Any] | None = None, endpoint: str | None = None
    ) -> dict[str, Any]:
        """GET a provider resource and return the decoded JSON document."""
        return await self._request("GET", path, params=params, endpoint=endpoint)

    async def post(
        self,
        path: str,
        json: dict[str, Any],
        params: dict[str, Any] | None = None,
        endpoint: str | None = None,
    ) -> dict[str, Any]:
        """POST a JSON body to a provider resource and return the decoded JSON document."""
        return await self._request("POST", path, params=params, json=json, endpoint=endpoint)

    # --- internals ---

    async def _ensure_token(self) -> str:
        """Return a valid access token, fetching a new one when expired."""
        if not self.configured:
            raise ProviderError(
                503,
                "PROVIDER_NOT_CONFIGURED",
                "Amadeus credentials not found. Set AMADEUS_CLIENT_ID and AMADEUS_CLIENT_SECRET",
            )

        async with self._token_lock:
            if self._token and time.monotonic() < self._token_expires_at:
                return self._token

            try:
                response = await self._http.post(
                    TOKEN_PATH,
                    data={
                        "grant_type": "client_credentials",
                        "client_id": self._client_id,
                        "client_secret": self._client_secret,
                    },
                )
            except httpx.HTTPError as e:
                raise _unavailable(e) from e

            if response.status_code >= 400:
                raise _error_from_response(response)

            data = _decode(response)
            if not data.get("access_token"):
                raise ProviderError(
                    502, "INVALID_PROVIDER_RESPONSE", "Amadeus token response has no access_token"
                )
            self._token = data["access_token"]
            expires_in = int(data.get("expires_in", 1799))
            self._token_expires_at = time.monotonic() + expires_in - TOKEN_EXPIRY_MARGIN_S
            logger.info("Amadeus token refreshed")
            return self._token

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        endpoint: str | None = None,
    ) -> dict[str, Any]:
        endpoint = endpoint or path
        start = time.perf_counter()
        status_code: int | None = None

        try:
            token = await self._ensure_token()
            try:
                response = await self._http.request(
                    method,
                    path,
                    params=params,
                    json=json,
                    headers={"Authorization": f"Bearer {token}"},
                )
            except httpx.HTTPError as e:
                raise _unavailable(e) from e

            status_code = response.status_code
            if status_code == 401:
                # Token revoked or expired early; fetch a fresh one next call
                self._token = None
            if status_code >= 400:
                raise _error_from_response(response)

            data = _decode(response)
        except ProviderError as e:
            latency_ms = (time.perf_counter() - start) * 1000
            self._metrics.record_latency(endpoint, "error", latency_ms)
            self._metrics.inc_error(endpoint, e.code)
            self._structured.log_call(
                endpoint, method, "error", latency_ms, status_code=e.status_code, error_code=e.code
            )
            raise

        latency_ms = (time.perf_counter() - start) * 1000
        self._metrics.record_latency(endpoint, "success", latency_ms)
        self._structured.log_call(endpoint, method, "success", latency_ms, status_code=status_code)
        return data


def _unavailable(exc: httpx.HTTPError) -> ProviderError:
    return ProviderError(
        503,
        "PROVIDER_UNAVAILABLE",
        f"Amadeus API unreachable: {type(exc).__name__}",
    )


def _decode(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError as e:
        raise ProviderError(
            502, "INVALID_PROVIDER_RESPONSE", "Amadeus API returned a non-JSON response"
        ) from e
    if not isinstance(data, dict):
        raise ProviderError(
            502, "INVALID_PROVIDER_RESPONSE", "Amadeus API returned an unexpected document"
        )
    return data


def _error_from_response(response: httpx.Response) -> ProviderError:
    """Normalize a provider error document.

    API errors look like ``{"errors": [{"code": 477, "title": ..., "detail": ...}]}``;
    the token endpoint answers ``{"error": "invalid_client", "error_description": ...}``.
    """
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    errors = body.get("errors")
    if isinstance(errors, list) and errors:
        first = errors[0] if isinstance(errors[0], dict) else {}
        code = str(first.get("code") or "PROVIDER_ERROR")
        message = first.get("title") or first.get("detail") or "Amadeus API error"
        return ProviderError(response.status_code, code, message, errors)

    if "error" in body:
        return ProviderError(
            response.status_code,
            str(body["error"]).upper(),
            body.get("error_description") or str(body["error"]),
            [body],
        )

    return ProviderError(
        response.status_code,
        "PROVIDER_ERROR",
        response.reason_phrase or "Amadeus API error",
    )


@lru_cache
def get_amadeus_client() -> AmadeusClient:
    """Process-wide provider client, built lazily on first use.

    Used as a FastAPI dependency; tests replace it through
    ``app.dependency_overrides``.
    """
    settings = get_settings()
    logger.info(f"Amadeus client initialized ({settings.amadeus_hostname} environment)")
    return AmadeusClient.from_settings(settings)


async def close_amadeus_client() -> None:
    """Close the shared client if it was ever created."""
    if get_amadeus_client.cache_info().currsize:
        await get_amadeus_client().aclose()
        get_amadeus_client.cache_clear()


# Raised while normalizing a provider document of the wrong shape
DOCUMENT_ERRORS = (ValidationError, AttributeError, TypeError, KeyError)


def invalid_document(exc: Exception) -> ProviderError:
    """Provider JSON that cannot be normalized into domain records."""
    if isinstance(exc, ValidationError):
        detail = f"{exc.error_count()} errors"
    else:
        detail = type(exc).__name__
    return ProviderError(
        502,
        "INVALID_PROVIDER_RESPONSE",
        f"Amadeus API returned an unexpected document ({detail})",
    )
