"""Telemetry helpers and metrics."""

from .metrics import (
    AUDIO_RESOLUTION_COUNTER,
    AUDIO_SYNTHESIS_LATENCY,
    AUTHORING_COUNTER,
    ERROR_COUNTER,
    LOGIN_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    increment_login,
    observe_audio_resolution,
    observe_authoring,
    observe_request,
)

__all__ = [
    "AUDIO_RESOLUTION_COUNTER",
    "AUDIO_SYNTHESIS_LATENCY",
    "AUTHORING_COUNTER",
    "ERROR_COUNTER",
    "LOGIN_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "increment_login",
    "observe_audio_resolution",
    "observe_authoring",
    "observe_request",
]
