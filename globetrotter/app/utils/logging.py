"""Logging setup and structured logging for provider calls."""

import logging
from typing import Any

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once at application start."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # httpx logs every request at INFO, including token calls
    logging.getLogger("httpx").setLevel(logging.WARNING)


class StructuredProviderLogger:
    """Structured logger for travel-data provider calls."""

    def log_call(
        self,
        endpoint: str,
        method: str,
        outcome: str,
        latency_ms: float,
        status_code: int | None = None,
        error_code: str | None = None,
    ) -> None:
        """Log one provider call with structured data."""
        log_data: dict[str, Any] = {
            "endpoint": endpoint,
            "method": method,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if status_code is not None:
            log_data["status_code"] = status_code
        if error_code:
            log_data["error_code"] = error_code

        log_msg = f"Provider call: {method} {endpoint} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
