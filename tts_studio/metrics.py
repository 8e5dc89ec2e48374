"""Prometheus metrics helpers."""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

SYNC_REQUEST_COUNTER = Counter(
    "tts_studio_sync_requests_total",
    "Requests issued to the studio API",
    labelnames=("endpoint", "status"),
)

SYNC_REQUEST_LATENCY = Histogram(
    "tts_studio_sync_request_seconds",
    "Studio API request latency",
    labelnames=("endpoint",),
)

RECONCILE_COUNTER = Counter(
    "tts_studio_store_reconciliations_total",
    "Server responses written back into the dataset store",
    labelnames=("kind",),
)


def render_metrics() -> tuple[bytes, str]:
    """Exposition payload and its content type."""
    return generate_latest(), CONTENT_TYPE_LATEST
