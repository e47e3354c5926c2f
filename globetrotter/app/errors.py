"""Error taxonomy shared by services, adapters and routes.

Every error carries the HTTP status it maps to and a short error label;
the FastAPI exception handlers in ``main`` render them as
``{"error": ..., "message": ...}``.
"""

from typing import Any


class GlobeTrotterError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict[str, Any]:
        """Render the JSON error body."""
        return {"error": self.error, "message": self.message}


class ValidationFailed(GlobeTrotterError):
    """Request rejected before any write."""

    status_code = 400
    error = "Validation failed"


class MissingRequiredField(ValidationFailed):
    """A required field was absent from a create payload."""

    error = "Missing required fields"

    def __init__(self, fields: list[str]) -> None:
        super().__init__(f"Missing required fields: {', '.join(fields)}")
        self.fields = fields

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        body["required"] = self.fields
        return body


class InvalidField(ValidationFailed):
    """A field was present but could not be parsed."""

    error = "Invalid field"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        body["field"] = self.field
        return body


class TooManyHotels(ValidationFailed):
    """Hotel offer search was given more ids than the provider accepts."""

    error = "TOO_MANY_HOTELS"

    def __init__(self, limit: int) -> None:
        super().__init__(f"Maximum {limit} hotel IDs allowed per request")
        self.limit = limit


class NotFound(GlobeTrotterError):
    """Addressed entity (or its parent) does not exist."""

    status_code = 404
    error = "Not Found"

    def __init__(self, entity: str, message: str | None = None, error: str | None = None) -> None:
        super().__init__(message or f"{entity} not found")
        self.entity = entity
        self.error = error or f"{entity} not found"


class Conflict(GlobeTrotterError):
    """Uniqueness or sequence collision."""

    status_code = 409
    error = "Conflict"


class ProviderError(GlobeTrotterError):
    """Normalized failure from the travel-data provider."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.errors = errors or []
        self.error = message

    def to_body(self) -> dict[str, Any]:
        return {
            "error": self.error,
            "message": self.message,
            "code": self.code,
            "details": self.errors,
        }


class InternalError(GlobeTrotterError):
    """Unexpected persistence failure; the cause is chained via ``raise from``."""

    status_code = 500
    error = "Internal Server Error"
