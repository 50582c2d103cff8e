"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from whiteboard.shared.telemetry.logging import setup_logging
from whiteboard.shared.telemetry.telemetry import TelemetryConfig
from whiteboard.shared.telemetry.tracing import (
    add_span_attributes,
    add_span_event,
    traced,
)

__all__ = [
    "setup_logging",
    "TelemetryConfig",
    "traced",
    "add_span_attributes",
    "add_span_event",
]
