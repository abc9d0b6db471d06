"""Application middleware package."""

from .logging import StructuredLoggingMiddleware, annotate_pipeline
from .telemetry import TelemetryMiddleware

__all__ = ["StructuredLoggingMiddleware", "TelemetryMiddleware", "annotate_pipeline"]
