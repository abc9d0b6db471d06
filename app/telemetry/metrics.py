"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from prometheus_client import Counter, Gauge, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(
        0.005,
        0.01,
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
    ),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

PIPELINE_RUNS = Counter(
    "answer_pipeline_runs_total",
    "Answer pipeline runs by terminal state",
    ("state",),
)

PIPELINE_STAGE_LATENCY = Histogram(
    "answer_pipeline_stage_duration_seconds",
    "Duration of each answer pipeline stage in seconds",
    ("stage",),
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
)

CLASSIFICATION_FAILURES = Counter(
    "emotion_classification_failures_total",
    "Sentences skipped after exhausting emotion classification retries",
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"
    status_label = str(status_code)
    observed_duration = duration_seconds if duration_seconds >= 0 else 0

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        status=status_label,
    ).inc()
    REQUEST_LATENCY.labels(
        method=safe_method,
        route=safe_route,
    ).observe(observed_duration)

    if status_code >= 500:
        ERROR_COUNTER.labels(
            method=safe_method,
            route=safe_route,
        ).inc()


def observe_stage(stage: str, duration_seconds: float) -> None:
    """Record how long one pipeline stage took."""

    PIPELINE_STAGE_LATENCY.labels(stage=stage).observe(max(duration_seconds, 0))


def record_pipeline_outcome(state: str) -> None:
    """Count a pipeline run that reached ``state``."""

    PIPELINE_RUNS.labels(state=state).inc()


def increment_classification_failure() -> None:
    CLASSIFICATION_FAILURES.inc()


IN_FLIGHT = Gauge(
    "http_requests_in_flight",
    "HTTP requests currently being processed",
    ("method",),
)

UPLOAD_SIZE = Histogram(
    "http_request_upload_bytes",
    "Size of POST request bodies in bytes",
    ("route",),
    buckets=(1_000, 10_000, 100_000, 500_000, 1_000_000, 5_000_000, 20_000_000),
)


@contextmanager
def track_in_flight(method: str) -> Iterator[None]:
    """Count a request as in flight for the duration of the block."""

    gauge = IN_FLIGHT.labels(method=method or "UNKNOWN")
    gauge.inc()
    try:
        yield
    finally:
        gauge.dec()


def observe_upload_size(route: str, size_bytes: int) -> None:
    UPLOAD_SIZE.labels(route=route or "unknown").observe(max(size_bytes, 0))
