"""
Platform HTTP layer.

Components:
- create_platform_client: Shared httpx AsyncClient factory
- ApiExecutor: Single-request executor with outcome classification
- exceptions: Executor-internal failure types
"""

from platform_provider.http.client import create_platform_client
from platform_provider.http.executor import ApiExecutor
from platform_provider.http.exceptions import (
    BodyEncodingError,
    PlatformRequestError,
    RequestCancelled,
)

__all__ = [
    "create_platform_client",
    "ApiExecutor",
    "BodyEncodingError",
    "PlatformRequestError",
    "RequestCancelled",
]
