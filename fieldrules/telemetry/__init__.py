"""Telemetry package - OpenTelemetry metrics and tracing for validation calls."""

from .metrics import (
    record_validation,
    unknown_constraint_total,
    validation_latency_ms,
    validation_total,
    violation_total,
)
from .runtime import get_tracer, meter

__all__ = [
    "get_tracer",
    "meter",
    "record_validation",
    "unknown_constraint_total",
    "validation_latency_ms",
    "validation_total",
    "violation_total",
]
