"""Prometheus metrics for provider calls and budget calculations."""

from prometheus_client import Counter, Histogram

# Provider call metrics
provider_latency_ms = Histogram(
    "provider_latency_ms",
    "Travel-data provider call latency in milliseconds",
    ["endpoint", "outcome"],
    buckets=[50, 100, 200, 500, 1000, 2000, 4000, 8000, 16000, 32000],
)

provider_errors_total = Counter(
    "provider_errors_total",
    "Total travel-data provider errors",
    ["endpoint", "code"],
)

# Budget metrics
budget_calculations_total = Counter(
    "budget_calculations_total",
    "Total budget calculations",
    ["outcome"],
)


class PrometheusProviderMetrics:
    """Prometheus-based provider metrics implementation."""

    def record_latency(self, endpoint: str, outcome: str, latency_ms: float) -> None:
        """Record provider call latency."""
        provider_latency_ms.labels(endpoint=endpoint, outcome=outcome).observe(latency_ms)

    def inc_error(self, endpoint: str, code: str) -> None:
        """Increment error counter."""
        provider_errors_total.labels(endpoint=endpoint, code=code).inc()
