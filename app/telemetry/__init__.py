"""Telemetry helpers and metrics."""

from .metrics import (
    CLASSIFICATION_FAILURES,
    ERROR_COUNTER,
    IN_FLIGHT,
    PIPELINE_RUNS,
    PIPELINE_STAGE_LATENCY,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    UPLOAD_SIZE,
    increment_classification_failure,
    observe_request,
    observe_stage,
    observe_upload_size,
    record_pipeline_outcome,
    track_in_flight,
)

__all__ = [
    "CLASSIFICATION_FAILURES",
    "ERROR_COUNTER",
    "IN_FLIGHT",
    "PIPELINE_RUNS",
    "PIPELINE_STAGE_LATENCY",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "UPLOAD_SIZE",
    "increment_classification_failure",
    "observe_request",
    "observe_stage",
    "observe_upload_size",
    "record_pipeline_outcome",
    "track_in_flight",
]
