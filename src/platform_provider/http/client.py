"""
Factory for the shared platform HTTP client.

One httpx AsyncClient is created per provider and shared by every resource
operation. Connection limits are deliberately low: the platform throttles
clients that open many concurrent connections, and 429s are retried by the
executor rather than by the transport.
"""

from typing import Optional

import httpx
import structlog

from platform_provider import __version__
from platform_provider.config import Settings


logger = structlog.get_logger(__name__)


async def _log_request(request: httpx.Request) -> None:
    logger.info(f"--> {request.method} {request.url}")


async def _log_response(response: httpx.Response) -> None:
    request = response.request
    logger.info(f"<-- {request.method} {request.url} [{response.status_code}]")


def create_platform_client(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Build the AsyncClient used for all platform API calls.

    Args:
        settings: Provider settings (base URL, credentials, limits, timeouts)
        transport: Optional transport override (httpx.MockTransport in tests)

    Returns:
        Configured httpx.AsyncClient; the caller owns closing it
    """
    auth: Optional[httpx.BasicAuth] = None
    if settings.PLATFORM_USERNAME and settings.PLATFORM_PASSWORD:
        auth = httpx.BasicAuth(settings.PLATFORM_USERNAME, settings.PLATFORM_PASSWORD)

    limits = httpx.Limits(
        max_connections=settings.HTTP_MAX_CONNECTIONS,
        max_keepalive_connections=settings.HTTP_MAX_CONNECTIONS,
        keepalive_expiry=settings.HTTP_KEEPALIVE_EXPIRY,
    )
    timeout = httpx.Timeout(settings.HTTP_TIMEOUT, connect=settings.HTTP_CONNECT_TIMEOUT)

    if settings.PLATFORM_INSECURE:
        logger.warning("TLS verification disabled for platform API", base_url=settings.PLATFORM_API)

    client = httpx.AsyncClient(
        base_url=settings.PLATFORM_API,
        auth=auth,
        headers={"User-Agent": f"{settings.APP_NAME} / {__version__} (Platform)"},
        limits=limits,
        timeout=timeout,
        verify=not settings.PLATFORM_INSECURE,
        transport=transport,
        event_hooks={"request": [_log_request], "response": [_log_response]},
    )

    logger.info(
        "Platform client initialized",
        base_url=settings.PLATFORM_API,
        authenticated=auth is not None,
        max_connections=settings.HTTP_MAX_CONNECTIONS,
        timeout=settings.HTTP_TIMEOUT,
    )
    return client
