"""Prometheus metrics definitions and helpers.

Provides the HTTP, connection pool and resource operation metrics exposed by
the Brewery API.
"""

from functools import lru_cache
from typing import Callable

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    generate_latest,
    REGISTRY,
    CollectorRegistry,
)


class ApiMetrics:
    """Brewery API metrics."""

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        """Initialize API metrics.

        Args:
            registry: Prometheus registry to use
        """
        # Requests served, labelled by route template rather than raw path
        self.http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status"],
            registry=registry,
        )

        self.http_request_duration_seconds = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
            registry=registry,
        )

        self.http_requests_in_progress = Gauge(
            "http_requests_in_progress",
            "HTTP requests currently in progress",
            ["method"],
            registry=registry,
        )

        # Connection pool
        self.database_connections_active = Gauge(
            "database_connections_active",
            "Open database connections",
            registry=registry,
        )

        self.database_connections_idle = Gauge(
            "database_connections_idle",
            "Idle database connections in pool",
            registry=registry,
        )

        # Service outcomes
        self.resource_operations = Counter(
            "brewery_resource_operations_total",
            "Service operations by resource and outcome",
            ["resource", "operation", "outcome"],
            registry=registry,
        )

    def record_operation(self, resource: str, operation: str, outcome: str) -> None:
        """Count one service operation.

        Args:
            resource: "beer" or "customer"
            operation: create|get|list|update|patch|delete
            outcome: success|not_found
        """
        self.resource_operations.labels(
            resource=resource, operation=operation, outcome=outcome
        ).inc()

    def observe_pool(self, pool) -> None:
        """Update pool gauges from an asyncpg pool."""
        if pool is None:
            return
        self.database_connections_active.set(pool.get_size())
        self.database_connections_idle.set(pool.get_idle_size())


@lru_cache()
def get_api_metrics() -> ApiMetrics:
    """Return the process-wide metrics instance.

    Collectors can only be registered once per registry, so every app
    instance created in the same process shares this object.
    """
    return ApiMetrics()


def get_metrics_handler() -> Callable[[], bytes]:
    """Get metrics handler for HTTP endpoint.

    Returns:
        Function that generates Prometheus metrics output
    """

    def metrics_handler() -> bytes:
        return generate_latest(REGISTRY)

    return metrics_handler
