"""Monitoring and metrics instrumentation for the Platform Provider."""

from platform_provider.monitoring.metrics import (
    platform_http_request_latency_seconds,
    platform_http_requests_total,
    poll_attempts_total,
    poll_sessions_total,
    rate_limit_retries_total,
)

__all__ = [
    "platform_http_requests_total",
    "platform_http_request_latency_seconds",
    "rate_limit_retries_total",
    "poll_attempts_total",
    "poll_sessions_total",
]
