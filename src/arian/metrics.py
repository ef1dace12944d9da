"""Prometheus metrics definitions for Arian."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "arian_http_requests_total",
    "Total number of HTTP requests processed by the Arian API",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "arian_http_request_duration_seconds",
    "Latency of HTTP requests processed by the Arian API",
    ["method", "path"],
)

RECEIPT_PARSES = Counter(
    "arian_receipt_parses_total",
    "Number of receipt parse attempts by outcome code",
    ["code"],
)

MODEL_CALL_LATENCY = Histogram(
    "arian_model_call_duration_seconds",
    "Latency of model backend generation calls",
    ["provider"],
    buckets=(0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0),
)

__all__ = [
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "RECEIPT_PARSES",
    "MODEL_CALL_LATENCY",
]
