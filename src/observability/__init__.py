"""
Observability for wiring runs: logging setup, transaction diagnostics,
OpenTelemetry tracing and Prometheus metrics.
"""

from .logs import create_logger
from .diagnostics import (
    DiagnosticRecord,
    DiagnosticsSink,
    LoggingDiagnosticsSink,
    CollectingDiagnosticsSink,
    Phase,
)
from .tracing import (
    build_tracer_provider,
    setup_tracing,
    default_tracer,
    create_span,
    get_current_span,
    get_tracer,
    shutdown_tracing,
)
from .metrics import MetricsCollector, metrics_collector

__all__ = [
    'create_logger',
    'DiagnosticRecord',
    'DiagnosticsSink',
    'LoggingDiagnosticsSink',
    'CollectingDiagnosticsSink',
    'Phase',
    'build_tracer_provider',
    'setup_tracing',
    'default_tracer',
    'create_span',
    'get_current_span',
    'get_tracer',
    'shutdown_tracing',
    'MetricsCollector',
    'metrics_collector',
]
