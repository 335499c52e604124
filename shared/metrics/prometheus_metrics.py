"""Prometheus metrics definitions and helpers.

Provides the metric definitions for the CEP weather service.
"""

from typing import Callable

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)


class ServiceMetrics:
    """HTTP and upstream metrics for the weather service."""

    def __init__(self, registry: CollectorRegistry) -> None:
        """Initialize service metrics.

        Args:
            registry: Prometheus registry to use
        """
        self.registry = registry

        self.http_requests = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status"],
            registry=registry,
        )

        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
            registry=registry,
        )

        # outcome: success | not_found | unreachable | read_error | decode_error
        self.upstream_requests = Counter(
            "upstream_requests_total",
            "Outbound calls to CEP and weather collaborators",
            ["upstream", "outcome"],
            registry=registry,
        )


def setup_metrics() -> ServiceMetrics:
    """Create metrics bound to a fresh registry.

    Each application instance owns its registry so that building several
    apps in one process (tests, reloads) never registers a collector twice.

    Returns:
        ServiceMetrics instance
    """
    return ServiceMetrics(CollectorRegistry())


def get_metrics_handler(metrics: ServiceMetrics) -> Callable[[], bytes]:
    """Get metrics handler for HTTP endpoint.

    Args:
        metrics: Metrics whose registry should be exposed

    Returns:
        Function that generates Prometheus metrics output
    """

    def metrics_handler() -> bytes:
        return generate_latest(metrics.registry)

    return metrics_handler
