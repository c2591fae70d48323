"""
Distributed tracing with OpenTelemetry.

Graph builds, runs and individual transactions are wrapped in spans so a
wiring run can be followed across the networks it touches. Components take a
tracer argument; without one they use the process tracer installed by
setup_tracing(), or the no-op API tracer when nothing was installed.
"""

import logging
from typing import Dict, Any, Optional, ContextManager
from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.resources import Resource, SERVICE_NAME
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.trace import Status, StatusCode, Span

logger = logging.getLogger(__name__)

INSTRUMENTATION_NAME = "omnigraph"

_tracer: Optional[trace.Tracer] = None
_tracer_provider: Optional[TracerProvider] = None


def build_tracer_provider(
    service_name: str, otlp_endpoint: Optional[str] = None, console_export: bool = False
) -> TracerProvider:
    """
    Create a tracer provider exporting to OTLP and/or the console.

    The provider is returned to the caller and not registered anywhere.
    """
    provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: service_name}))

    if otlp_endpoint:
        try:
            exporter = OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True)
        except Exception as e:
            logger.warning(f"OTLP export to {otlp_endpoint} disabled: {e}")
        else:
            provider.add_span_processor(BatchSpanProcessor(exporter))
            logger.info(f"Exporting spans to {otlp_endpoint}")

    if console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        logger.info("Exporting spans to console")

    return provider


def setup_tracing(
    service_name: str, otlp_endpoint: Optional[str] = None, console_export: bool = False
) -> trace.Tracer:
    """
    Install the process tracer used by components created without one.

    Args:
        service_name: Reported service name (e.g. "omnigraph-wiring")
        otlp_endpoint: OTLP collector endpoint (e.g. "http://localhost:4317")
        console_export: Also print finished spans

    Returns:
        The installed tracer, suitable for passing to components explicitly
    """
    global _tracer, _tracer_provider

    if _tracer_provider is not None:
        _tracer_provider.shutdown()

    _tracer_provider = build_tracer_provider(service_name, otlp_endpoint, console_export)
    _tracer = _tracer_provider.get_tracer(INSTRUMENTATION_NAME)

    logger.info(f"Tracing enabled for {service_name}")
    return _tracer


def get_tracer() -> trace.Tracer:
    """
    Return the tracer installed by setup_tracing().

    Raises:
        RuntimeError: If tracing not initialized
    """
    if _tracer is None:
        raise RuntimeError("Tracing not initialized. Call setup_tracing() first.")
    return _tracer


def default_tracer() -> trace.Tracer:
    """The installed tracer, or the no-op API tracer."""
    if _tracer is not None:
        return _tracer
    return trace.get_tracer(INSTRUMENTATION_NAME)


@contextmanager
def create_span(
    name: str,
    attributes: Optional[Dict[str, Any]] = None,
    tracer: Optional[trace.Tracer] = None,
    kind: trace.SpanKind = trace.SpanKind.INTERNAL,
) -> ContextManager[Span]:
    """
    Open a span; None attribute values are skipped, others stringified.

    An exception leaving the block is recorded on the span, which is marked
    as failed, and then re-raised.

    Usage:
        with create_span("omnigraph.transaction", {"point": "[EndpointV2 @ 1]"}, tracer):
            ...
    """
    tracer = tracer or default_tracer()

    with tracer.start_as_current_span(
        name, kind=kind, record_exception=False, set_status_on_exception=False
    ) as span:
        for key, value in (attributes or {}).items():
            if value is not None:
                span.set_attribute(key, str(value))

        try:
            yield span
        except Exception as e:
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            raise


def get_current_span() -> Span:
    """Get the currently active span (INVALID_SPAN if none)."""
    return trace.get_current_span()


def shutdown_tracing():
    """Flush pending spans and uninstall the process tracer."""
    global _tracer, _tracer_provider

    if _tracer_provider is not None:
        _tracer_provider.shutdown()
        logger.info("Tracing shutdown complete")

    _tracer = None
    _tracer_provider = None
