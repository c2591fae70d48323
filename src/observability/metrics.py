"""Prometheus metrics for wiring runs.

Counts contract resolutions and transaction lifecycle outcomes per network,
and records how long confirmations take.
"""

from prometheus_client import (
    Counter,
    Histogram,
    Gauge,
    Info,
    generate_latest,
    REGISTRY,
)
import time
from functools import wraps


# ============================================================================
# CORE METRICS
# ============================================================================

contract_resolutions_total = Counter(
    "omnigraph_contract_resolutions_total",
    "Total number of contract resolutions performed during graph builds",
    ["network_id", "result"],  # result: 'ok' or 'error'
)

graph_builds_total = Counter(
    "omnigraph_graph_builds_total",
    "Total number of topology graph builds",
    ["result"],  # 'ok', 'invalid' or 'unresolved'
)

transactions_submitted_total = Counter(
    "omnigraph_transactions_submitted_total",
    "Total number of transactions accepted by a network",
    ["network_id"],
)

transactions_confirmed_total = Counter(
    "omnigraph_transactions_confirmed_total",
    "Total number of transactions confirmed by a network",
    ["network_id"],
)

transactions_failed_total = Counter(
    "omnigraph_transactions_failed_total",
    "Total number of transactions that failed",
    ["network_id", "error_type"],
)

confirmation_latency = Histogram(
    "omnigraph_confirmation_latency_seconds",
    "Time from submission to confirmation of a transaction",
    buckets=[0.01, 0.1, 0.5, 1.0, 2.0, 5.0, 15.0, 30.0, 60.0, 120.0],
)

graph_build_latency = Histogram(
    "omnigraph_graph_build_latency_seconds",
    "Time to validate and resolve a topology graph",
    buckets=[0.001, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
)

runs_total = Counter(
    "omnigraph_runs_total",
    "Total number of executor runs by final state",
    ["state"],  # 'completed' or 'aborted'
)

active_runs = Gauge("omnigraph_active_runs", "Number of executor runs in progress")

system_info = Info("omnigraph_system", "System information")


# ============================================================================
# HELPER FUNCTIONS & DECORATORS
# ============================================================================


def track_time_async(histogram):
    """
    Decorator to track async function execution time.

    Args:
        histogram: Prometheus Histogram to record time
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                return await func(*args, **kwargs)
            finally:
                duration = time.time() - start_time
                histogram.observe(duration)

        return wrapper

    return decorator


# ============================================================================
# METRICS COLLECTOR
# ============================================================================


class MetricsCollector:
    """
    Centralized metrics collection and export.

    GraphBuilder and TransactionExecutor take a collector as a parameter and
    default to the module-level instance.
    """

    def __init__(self):
        self.start_time = time.time()
        self._update_system_info()

    def _update_system_info(self):
        """Update system information metric."""
        import platform

        system_info.info(
            {
                "version": "0.1.0",
                "platform": platform.system(),
                "python_version": platform.python_version(),
            }
        )

    def record_resolution(self, network_id: int, ok: bool):
        """Record a contract resolution."""
        contract_resolutions_total.labels(
            network_id=str(network_id), result="ok" if ok else "error"
        ).inc()

    def record_graph_build(self, result: str):
        """Record a graph build outcome ('ok', 'invalid', 'unresolved')."""
        graph_builds_total.labels(result=result).inc()

    def record_submitted(self, network_id: int):
        """Record a transaction accepted by its network."""
        transactions_submitted_total.labels(network_id=str(network_id)).inc()

    def record_confirmed(self, network_id: int, latency_seconds: float):
        """Record a confirmed transaction and its confirmation latency."""
        transactions_confirmed_total.labels(network_id=str(network_id)).inc()
        confirmation_latency.observe(latency_seconds)

    def record_failed(self, network_id: int, error_type: str):
        """Record a failed transaction."""
        transactions_failed_total.labels(
            network_id=str(network_id), error_type=error_type
        ).inc()

    def record_run_started(self):
        active_runs.inc()

    def record_run_finished(self, state: str):
        active_runs.dec()
        runs_total.labels(state=state).inc()

    def get_metrics(self) -> bytes:
        """
        Get metrics in Prometheus format.

        Returns:
            Metrics as bytes in Prometheus exposition format
        """
        return generate_latest(REGISTRY)


# Global metrics collector instance
metrics_collector = MetricsCollector()
