"""Prometheus counters owned by an explicit collector instance.

Each application builds one :class:`MetricsCollector` and hands it to the
components that report into it. Counters are registered on the collector's
private registry, so several collectors (one per test app, for example) never
clash on metric names.
"""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, generate_latest


class MetricsCollector:
    """Request and engine counters for one application instance."""

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self.http_requests = Counter(
            "http_requests_total",
            "Total number of HTTP requests",
            ["method", "endpoint"],
            registry=self.registry,
        )
        self.schedule_requests = Counter(
            "schedule_requests_total",
            "Total number of schedule reads per group",
            ["group"],
            registry=self.registry,
        )
        self.engine_operations = Counter(
            "group_engine_operations_total",
            "Group engine operations by outcome",
            ["operation", "outcome"],
            registry=self.registry,
        )

    def record_http_request(self, method: str, endpoint: str) -> None:
        self.http_requests.labels(method=method, endpoint=endpoint).inc()

    def record_schedule_request(self, group_short_name: str) -> None:
        self.schedule_requests.labels(group=group_short_name).inc()

    def record_operation(self, operation: str, outcome: str) -> None:
        self.engine_operations.labels(operation=operation, outcome=outcome).inc()

    def value(self, name: str, labels: dict[str, str]) -> float:
        """Return the current sample value, 0.0 when nothing was recorded."""
        sample = self.registry.get_sample_value(name, labels)
        return sample or 0.0

    def render(self) -> bytes:
        """Return the registry in Prometheus text exposition format."""
        return generate_latest(self.registry)
