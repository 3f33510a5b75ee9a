"""
Metrics Collection
Prometheus metrics for generation, preview and deploy traffic
"""

import time

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the service.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()

        # Generation metrics
        self.generate_requests_total = Counter(
            "forge_generate_requests_total",
            "Total number of component generation requests",
            ["status"],
            registry=self.registry,
        )
        self.generate_duration = Histogram(
            "forge_generate_duration_seconds",
            "Component generation duration in seconds",
            buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0],
            registry=self.registry,
        )

        # LLM metrics
        self.llm_calls_total = Counter(
            "forge_llm_calls_total",
            "Total number of model API calls",
            ["provider", "status"],
            registry=self.registry,
        )
        self.llm_duration = Histogram(
            "forge_llm_duration_seconds",
            "Model API call duration in seconds",
            ["provider"],
            buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0],
            registry=self.registry,
        )

        # Preview metrics
        self.preview_requests_total = Counter(
            "forge_preview_requests_total",
            "Total number of preview read/update/reset requests",
            ["operation", "status"],
            registry=self.registry,
        )

        # Deploy metrics
        self.deploy_requests_total = Counter(
            "forge_deploy_requests_total",
            "Total number of deploy requests",
            ["status"],
            registry=self.registry,
        )
        self.deploy_duration = Histogram(
            "forge_deploy_duration_seconds",
            "Deploy duration from submission to terminal state",
            buckets=[5.0, 10.0, 30.0, 60.0, 120.0, 300.0, 600.0],
            registry=self.registry,
        )

        # Error metrics
        self.errors_total = Counter(
            "forge_errors_total",
            "Total number of errors",
            ["error_type", "component"],
            registry=self.registry,
        )

        # System metrics
        self.uptime = Gauge(
            "forge_uptime_seconds",
            "Service uptime in seconds",
            registry=self.registry,
        )
        self.start_time = time.time()

    def record_generate_request(self, status: str, duration: float) -> None:
        """Record a generation request."""
        self.generate_requests_total.labels(status=status).inc()
        self.generate_duration.observe(duration)

    def record_llm_call(self, provider: str, status: str, duration: float) -> None:
        """Record a model API call."""
        self.llm_calls_total.labels(provider=provider, status=status).inc()
        self.llm_duration.labels(provider=provider).observe(duration)

    def record_preview_request(self, operation: str, status: str) -> None:
        self.preview_requests_total.labels(operation=operation, status=status).inc()

    def record_deploy_request(self, status: str, duration: float | None = None) -> None:
        """Record a deploy request; duration only when a job was submitted."""
        self.deploy_requests_total.labels(status=status).inc()
        if duration is not None:
            self.deploy_duration.observe(duration)

    def record_error(self, error_type: str, component: str) -> None:
        """Record an error."""
        self.errors_total.labels(error_type=error_type, component=component).inc()

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format."""
        self.uptime.set(time.time() - self.start_time)
        return generate_latest(self.registry)


# Global metrics collector instance
metrics_collector = MetricsCollector()
