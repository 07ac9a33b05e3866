"""Prometheus metrics for dialogue flows and search."""

from prometheus_client import Counter, Histogram

dialogue_transitions_total = Counter(
    "dialogue_transitions_total",
    "Dialogue messages handled, by flow and outcome",
    ["flow", "outcome"],
)

dialogue_rejections_total = Counter(
    "dialogue_rejections_total",
    "Inputs rejected without advancing the step",
    ["flow", "step", "reason"],
)

record_store_failures_total = Counter(
    "record_store_failures_total",
    "Record store calls that failed or timed out",
    ["operation", "kind"],
)

notification_failures_total = Counter(
    "notification_failures_total",
    "Administrator notifications that failed",
    ["flow"],
)

search_requests_total = Counter(
    "search_requests_total",
    "Search requests, by kind and outcome",
    ["kind", "outcome"],
)

search_latency_ms = Histogram(
    "search_latency_ms",
    "Search latency in milliseconds (scoring only, corpus load excluded)",
    ["kind"],
    buckets=[1, 2, 5, 10, 25, 50, 100, 250, 500],
)


class PrometheusDialogueMetrics:
    """Prometheus-based dialogue and search metrics."""

    def record_transition(self, flow: str, outcome: str) -> None:
        dialogue_transitions_total.labels(flow=flow, outcome=outcome).inc()

    def record_rejection(self, flow: str, step: str, reason: str) -> None:
        dialogue_rejections_total.labels(flow=flow, step=step, reason=reason).inc()

    def inc_store_failure(self, operation: str, kind: str) -> None:
        record_store_failures_total.labels(operation=operation, kind=kind).inc()

    def inc_notification_failure(self, flow: str) -> None:
        notification_failures_total.labels(flow=flow).inc()

    def record_search(self, kind: str, outcome: str, latency_ms: float) -> None:
        search_requests_total.labels(kind=kind, outcome=outcome).inc()
        search_latency_ms.labels(kind=kind).observe(latency_ms)
