"""Prometheus metrics for policy routing and overload shedding."""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Info, generate_latest

from policy_router.core.config import settings

if TYPE_CHECKING:
    from policy_router.routing.gauge import ConcurrencyGauge

# --- Metrics ---

APP_INFO = Info("policy_router", "Policy router build info")
APP_INFO.info({"version": "0.1.0", "name": "policy_router"})

ACTIVE_REQUESTS = Gauge(
    "policy_router_active_requests",
    "In-flight requests counted by the process-wide concurrency gauge",
)

RESOLUTIONS = Counter(
    "policy_router_resolutions_total",
    "Virtual policy resolutions by policy and chosen upstream model",
    ["policy", "model"],
)

CLAMPS = Counter(
    "policy_router_clamps_total",
    "Outbound requests whose sampling parameters were clamped under overload",
)

OVERLOAD_SNAPSHOTS = Counter(
    "policy_router_overload_snapshots_total",
    "Per-request overload snapshots taken by the gateway",
    ["overloaded"],
)


# --- Recording helpers ---


def bind_active_requests(gauge: ConcurrencyGauge) -> None:
    """Export ``gauge`` as the active requests metric (read lazily at scrape time)."""
    ACTIVE_REQUESTS.set_function(gauge.read)


def record_resolution(policy: str, model: str) -> None:
    if settings.metrics_enabled:
        RESOLUTIONS.labels(policy=policy, model=model).inc()


def record_clamp() -> None:
    if settings.metrics_enabled:
        CLAMPS.inc()


def record_overload_snapshot(overloaded: bool) -> None:
    if settings.metrics_enabled:
        OVERLOAD_SNAPSHOTS.labels(overloaded=str(overloaded).lower()).inc()


def metrics_payload() -> tuple[bytes, str]:
    """Body and content type for a /metrics scrape."""
    return generate_latest(), CONTENT_TYPE_LATEST
