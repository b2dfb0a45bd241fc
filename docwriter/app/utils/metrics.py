"""Prometheus metrics for generation and persistence."""

from prometheus_client import Counter

generation_requests_total = Counter(
    "generation_requests_total",
    "Total section generation requests",
    ["outcome"],
)

persistence_failures_total = Counter(
    "persistence_failures_total",
    "Total persistence failures that degraded the session",
    ["backend", "operation"],
)

session_mode_transitions_total = Counter(
    "session_mode_transitions_total",
    "Total session mode transitions",
    ["mode"],
)
