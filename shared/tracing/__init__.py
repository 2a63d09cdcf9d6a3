"""Distributed tracing module using OpenTelemetry."""

from .otel_config import configure_tracing, shutdown_tracing

__all__ = ["configure_tracing", "shutdown_tracing"]
