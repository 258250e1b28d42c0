"""Prometheus metrics for monitoring forecasts, accuracy and collaborator health"""

from prometheus_client import Counter, Histogram

# Forecast metrics
forecast_counter = Counter(
    "forecast_total",
    "Total forecasts generated",
    ["period", "outcome"],  # weekly | monthly ; success | input_error | ledger_error | oracle_error | error
)

forecast_accuracy_histogram = Histogram(
    "forecast_accuracy_score",
    "Confidence score of generated forecasts",
    buckets=[50, 60, 70, 80, 90, 95, 100],
)

# Oracle metrics
oracle_latency_histogram = Histogram(
    "oracle_latency_seconds",
    "Forecast Oracle response time",
    buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0],
)

oracle_failure_counter = Counter(
    "oracle_failures_total",
    "Failed or unusable Forecast Oracle calls",
)

# Ledger metrics
ledger_fetch_failures_counter = Counter(
    "ledger_fetch_failures_total",
    "Failed Ledger Store reads",
    ["resource"],  # transactions | balance | bills
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_forecast(period: str, accuracy: int) -> None:
    """Record a successful forecast and its confidence score"""
    forecast_counter.labels(period=period, outcome="success").inc()
    forecast_accuracy_histogram.observe(accuracy)


def record_forecast_failure(period: str, outcome: str) -> None:
    forecast_counter.labels(period=period, outcome=outcome).inc()
