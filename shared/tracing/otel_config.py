"""OpenTelemetry configuration for distributed tracing.

Provides tracer provider setup with OTLP/HTTP export (Jaeger and the
OpenTelemetry collector both accept it) and FastAPI instrumentation.
"""

from typing import Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased


def configure_tracing(
    service_name: str,
    otlp_endpoint: str = "http://localhost:4318/v1/traces",
    sampling_rate: float = 0.1,
    service_version: str = "2.0.0",
    app: Optional[object] = None,
) -> TracerProvider:
    """Configure OpenTelemetry tracing for the service.

    Args:
        service_name: Name of the service
        otlp_endpoint: OTLP/HTTP traces endpoint
        sampling_rate: Sampling rate (0.0 to 1.0)
        service_version: Reported service version
        app: FastAPI application to instrument (optional)

    Returns:
        Configured TracerProvider
    """
    resource = Resource(
        attributes={
            "service.name": service_name,
            "service.namespace": "brewery",
            "service.version": service_version,
        }
    )

    provider = TracerProvider(
        resource=resource,
        sampler=ParentBased(TraceIdRatioBased(sampling_rate)),
    )
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))

    trace.set_tracer_provider(provider)

    if app is not None:
        FastAPIInstrumentor.instrument_app(app, tracer_provider=provider)

    return provider


def shutdown_tracing(provider: Optional[TracerProvider]) -> None:
    """Flush pending spans and stop the exporter."""
    if provider is not None:
        provider.shutdown()

