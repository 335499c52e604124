"""Metrics module using Prometheus."""

from .prometheus_metrics import (
    ServiceMetrics,
    setup_metrics,
    get_metrics_handler,
)

__all__ = [
    "ServiceMetrics",
    "setup_metrics",
    "get_metrics_handler",
]
