"""
Performance Monitoring
Prometheus metrics and span tracing for the service
"""

from core.tracing import trace_operation_async, get_trace_id, set_trace_context
from .metrics import MetricsCollector, metrics_collector

__all__ = [
    "MetricsCollector",
    "metrics_collector",
    "trace_operation_async",
    "get_trace_id",
    "set_trace_context",
]
