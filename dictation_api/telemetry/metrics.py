"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

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

LOGIN_COUNTER = Counter(
    "app_logins_total",
    "Number of successful user login events",
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

AUDIO_RESOLUTION_COUNTER = Counter(
    "dictation_audio_resolutions_total",
    "Word audio resolutions by outcome",
    ("outcome",),
)

AUDIO_SYNTHESIS_LATENCY = Histogram(
    "dictation_audio_synthesis_seconds",
    "Time spent synthesizing and storing one word's audio",
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

AUTHORING_COUNTER = Counter(
    "dictation_authoring_operations_total",
    "Authoring pipeline operations by kind and result",
    ("operation", "result"),
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


def increment_login() -> None:
    """Increment the successful login counter."""

    LOGIN_COUNTER.inc()


def observe_audio_resolution(outcome: str, duration_seconds: float | None = None) -> None:
    """Count one resolved word; ``outcome`` is supplied, synthesized or failed."""

    AUDIO_RESOLUTION_COUNTER.labels(outcome=outcome).inc()
    if duration_seconds is not None and duration_seconds >= 0:
        AUDIO_SYNTHESIS_LATENCY.observe(duration_seconds)


def observe_authoring(operation: str, result: str) -> None:
    """Count a pipeline operation outcome."""

    AUTHORING_COUNTER.labels(operation=operation, result=result).inc()
