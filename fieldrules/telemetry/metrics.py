# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Metric instrument definitions for fieldrules."""

from __future__ import annotations

import time

from .runtime import meter

validation_total = meter.create_counter(
    name="fieldrules.validation.total",
    description="Counts validation calls, partitioned by outcome (valid, invalid, error).",
    unit="1",
)

violation_total = meter.create_counter(
    name="fieldrules.violation.total",
    description="Counts failed constraints, partitioned by constraint kind.",
    unit="1",
)

unknown_constraint_total = meter.create_counter(
    name="fieldrules.constraint.unknown.total",
    description="Counts constraints skipped because their kind is not in the catalog (lenient mode).",
    unit="1",
)

validation_latency_ms = meter.create_histogram(
    name="fieldrules.validation.latency.ms",
    description="Time spent walking one object's metadata and evaluating its constraints.",
    unit="ms",
)


def record_validation(target_type: str, outcome: str, start: float) -> None:
    """Record the outcome and latency of one validation call started at *start*."""

    attributes = {"fieldrules.type": target_type, "outcome": outcome}
    validation_total.add(1, attributes)
    validation_latency_ms.record((time.perf_counter() - start) * 1000.0, attributes)


__all__ = [
    "record_validation",
    "unknown_constraint_total",
    "validation_latency_ms",
    "validation_total",
    "violation_total",
]
