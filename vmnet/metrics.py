"""Prometheus metrics for network interface provisioning.

Tracks how long interfaces take to become ready per backend and how
often provisioning fails, by error type.
"""
from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Histogram,
    generate_latest,
)

interface_wait_duration = Histogram(
    "vmnet_interface_wait_seconds",
    "Time spent waiting for a network interface to become ready",
    ["backend", "status"],
    buckets=(0.1, 0.25, 0.5, 1, 2, 5, 10, 15, 30, 60, float("inf")),
)

interface_errors = Counter(
    "vmnet_interface_errors_total",
    "Total network interface provisioning errors",
    ["backend", "error"],
)


def get_metrics() -> tuple[bytes, str]:
    """Generate Prometheus metrics output."""
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
