"""Prometheus metrics for the Platform Provider.

Providers are short-lived processes, so these are mostly useful when the
core is embedded in a long-running reconciler that exposes a registry.
Alert rules worth configuring:
- platform_http_requests_total{outcome="transport_error"} (platform unreachable)
- poll_sessions_total{outcome="timeout"} (resources stuck in a non-terminal state)
- rate_limit_retries_total (client concurrency too high)
"""

from prometheus_client import Counter, Histogram

# === HTTP Executor Metrics ===

platform_http_requests_total = Counter(
    "platform_http_requests_total",
    "Total platform API requests by method and classified outcome",
    ["method", "outcome"],
)
"""
Labels:
- method: GET, POST, PUT, PATCH, DELETE
- outcome: success, allowed_404, http_error, transport_error, decode_error, encode_error
"""

platform_http_request_latency_seconds = Histogram(
    "platform_http_request_latency_seconds",
    "Platform API request latency in seconds",
    ["method"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

rate_limit_retries_total = Counter(
    "rate_limit_retries_total",
    "Requests re-sent after an HTTP 429 response",
)

# === Polling Metrics ===

poll_attempts_total = Counter(
    "poll_attempts_total",
    "Total probe invocations by polling protocol",
    ["protocol"],
)
"""
Labels:
- protocol: ready, removal, build, action, registration
"""

poll_sessions_total = Counter(
    "poll_sessions_total",
    "Completed polling sessions by protocol and terminal outcome",
    ["protocol", "outcome"],
)
"""
Labels:
- outcome: success, failed, timeout, cancelled

A rising timeout rate usually means the platform is slow to reconcile,
not that the provider is misbehaving.
"""
