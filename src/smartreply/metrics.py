"""Prometheus metrics collection for SmartReply.

Tracks pipeline throughput, latency, memory operations and persistence
failures. Exported via HTTP for Prometheus scraping.
"""

import time
from contextlib import contextmanager
from enum import Enum
from threading import Lock
from typing import Any, Dict, Iterator, Optional

from prometheus_client import (
    REGISTRY,
    Counter,
    Histogram,
    Info,
    start_http_server,
)

from smartreply.logging import get_logger

logger = get_logger(__name__, component="metrics")


class MetricLabels(str, Enum):
    """Standard metric label names."""

    INTENT = "intent"
    RESPONSE_TYPE = "response_type"
    OPERATION = "operation"


class MetricsCollector:
    """Centralized metrics collector for SmartReply.

    Singleton: prometheus collectors can only be registered once per
    registry, so every caller shares one instance.

    Example:
        >>> metrics = MetricsCollector()
        >>> metrics.increment_request_count(intent="ui_creation", response_type="success")
        >>> with metrics.track_request_latency():
        ...     pass
    """

    _instance: Optional["MetricsCollector"] = None
    _lock = Lock()

    def __new__(cls) -> "MetricsCollector":
        """Ensure singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if self._initialized:
            return

        logger.info("initializing_metrics_collector")

        self.system_info = Info("smartreply_system", "SmartReply system information")
        self.system_info.info({"version": "0.1.0", "app": "smartreply"})

        self.request_total = Counter(
            "smartreply_requests_total",
            "Total number of utterances handled",
            [MetricLabels.INTENT.value, MetricLabels.RESPONSE_TYPE.value],
        )

        self.request_latency = Histogram(
            "smartreply_request_latency_seconds",
            "Time to handle one utterance end to end",
            buckets=(0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 1.0),
        )

        self.memory_operations = Counter(
            "smartreply_memory_operations_total",
            "Memory store operations",
            [MetricLabels.OPERATION.value],
        )

        self.persistence_errors = Counter(
            "smartreply_persistence_errors_total",
            "Storage failures absorbed by the memory store",
            [MetricLabels.OPERATION.value],
        )

        self._initialized = True

    def increment_request_count(self, intent: str, response_type: str) -> None:
        """Count one handled utterance.

        Args:
            intent: Classified intent value.
            response_type: Response type returned to the caller.
        """
        self.request_total.labels(intent=intent, response_type=response_type).inc()

    @contextmanager
    def track_request_latency(self) -> Iterator[None]:
        """Context manager observing request latency."""
        start_time = time.monotonic()
        try:
            yield
        finally:
            self.request_latency.observe(time.monotonic() - start_time)

    def increment_memory_operation(self, operation: str) -> None:
        """Count a memory store operation (record, query, clear)."""
        self.memory_operations.labels(operation=operation).inc()

    def increment_persistence_error(self, operation: str) -> None:
        """Count a swallowed persistence failure (load, save, delete)."""
        self.persistence_errors.labels(operation=operation).inc()

    def get_metrics_summary(self) -> Dict[str, Any]:
        """Get a summary of current metrics."""
        return {
            "collector": "prometheus",
            "registry": "default",
            "metrics_count": len(list(REGISTRY.collect())),
        }


def start_metrics_server(port: int = 9090, addr: str = "0.0.0.0") -> None:
    """Start the Prometheus metrics HTTP server in a background thread.

    Args:
        port: Port to listen on.
        addr: Address to bind to.
    """
    logger.info("starting_metrics_server", port=port, addr=addr)
    try:
        start_http_server(port=port, addr=addr)
    except OSError as e:
        if "Address already in use" in str(e):
            logger.warning("metrics_server_already_running", port=port, addr=addr)
        else:
            logger.error("metrics_server_start_failed", port=port, addr=addr, error=str(e))
            raise


_global_metrics: Optional[MetricsCollector] = None


def get_metrics_collector() -> MetricsCollector:
    """Get the global metrics collector instance."""
    global _global_metrics
    if _global_metrics is None:
        _global_metrics = MetricsCollector()
    return _global_metrics
