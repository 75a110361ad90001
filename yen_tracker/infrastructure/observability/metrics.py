"""Prometheus metrics for band decisions, circuit breaker trips and rate fetching"""

from prometheus_client import Counter, Histogram

# Decision metrics
band_evaluation_counter = Counter(
    "yen_tracker_band_evaluations_total",
    "Band classifications made against the live rate",
    ["band"],  # AGGRESSIVE_BUY | NORMAL_BUY | HOLD | REVERSE
)

circuit_breaker_trip_counter = Counter(
    "yen_tracker_circuit_breaker_trips_total",
    "Circuit breaker evaluations that came back triggered",
)

alert_counter = Counter(
    "yen_tracker_alerts_created_total",
    "Alerts created by type",
    ["type"],
)

conversion_counter = Counter(
    "yen_tracker_conversions_recorded_total",
    "Conversions logged",
    ["direction"],
)

# Rate API metrics
rate_fetch_failures_counter = Counter(
    "rate_fetch_failures_total",
    "Failed rate API calls",
)

rate_fallback_counter = Counter(
    "rate_fallback_total",
    "Requests served from the cached rate after a fetch failure",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_band(band: str) -> None:
    band_evaluation_counter.labels(band=band).inc()


def record_circuit_breaker(triggered: bool) -> None:
    if triggered:
        circuit_breaker_trip_counter.inc()
