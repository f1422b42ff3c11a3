"""
Provider data and the base class for platform resources.

ProviderData is created once per provider configuration and shared by all
resources. PlatformResource gives each resource kind the request and
polling helpers its Create/Read/Update/Delete implementations are built
from; the schema mapping itself lives in the resource kinds.
"""

from typing import Any, Optional, TypeVar

import httpx
import structlog

from platform_provider.config import Settings
from platform_provider.context import OperationContext
from platform_provider.diagnostics import Diagnostics
from platform_provider.http.client import create_platform_client
from platform_provider.http.executor import ApiExecutor
from platform_provider.models.enums import HttpOption
from platform_provider.models.http_models import Outcome
from platform_provider.models.status_models import (
    ActionStatus,
    BuildStatus,
    RegistrationPaths,
    RegistrationResult,
)
from platform_provider.polling.poller import StatusPoller
from platform_provider.retry.engine import RetryEngine


logger = structlog.get_logger(__name__)

T = TypeVar("T")


class ProviderData:
    """
    Shared client stack for one configured provider.

    Attributes:
        settings: Provider settings
        client: Shared httpx AsyncClient
        executor: ApiExecutor bound to the client
        engine: RetryEngine for status polling
        poller: StatusPoller bound to executor and engine
    """

    def __init__(self, settings: Settings, client: httpx.AsyncClient, engine: Optional[RetryEngine] = None):
        self.settings = settings
        self.client = client
        self.executor = ApiExecutor(client, settings)
        self.engine = engine or RetryEngine.from_settings(settings)
        self.poller = StatusPoller(self.executor, self.engine)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ProviderData":
        return cls(settings, create_platform_client(settings, transport=transport))

    async def aclose(self) -> None:
        await self.client.aclose()
        logger.debug("Closed platform client")

    async def __aenter__(self) -> "ProviderData":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def configure_provider_data(provider_data: Any, diagnostics: Diagnostics) -> Optional[ProviderData]:
    """
    Validate the provider data handed to a resource.

    Resources can be configured before the provider itself; in that case
    there is nothing to bind yet and None is returned without a diagnostic.
    """
    if provider_data is None:
        return None
    if not isinstance(provider_data, ProviderData):
        diagnostics.add_error(
            "Unexpected Resource Configure Type",
            f"Expected {ProviderData.__name__}, got: {type(provider_data).__name__}. "
            "Please report this issue to the provider developers.",
        )
        return None
    return provider_data


class PlatformResource:
    """
    Base class for platform resource kinds.

    Subclasses supply api_path() and the model mapping; the lifecycle
    helpers here cover the request/poll sequences every kind repeats.
    """

    def __init__(self) -> None:
        self.provider: Optional[ProviderData] = None

    def configure(self, provider_data: Any, diagnostics: Diagnostics) -> None:
        self.provider = configure_provider_data(provider_data, diagnostics)

    @property
    def executor(self) -> ApiExecutor:
        if self.provider is None:
            raise RuntimeError(f"{type(self).__name__} used before the provider was configured")
        return self.provider.executor

    @property
    def poller(self) -> StatusPoller:
        if self.provider is None:
            raise RuntimeError(f"{type(self).__name__} used before the provider was configured")
        return self.provider.poller

    async def api_request(
        self,
        ctx: OperationContext,
        method: str,
        path: str,
        body: Any = None,
        result_type: Optional[type[T]] = None,
        *,
        diagnostics: Diagnostics,
        options: HttpOption = HttpOption.NONE,
    ) -> Outcome[T]:
        return await self.executor.request(
            ctx, method, path, body, result_type, diagnostics=diagnostics, options=options
        )

    async def read_or_absent(
        self,
        ctx: OperationContext,
        path: str,
        result_type: type[T],
        diagnostics: Diagnostics,
    ) -> tuple[bool, Optional[T]]:
        """
        GET a resource, treating 404 as "gone" rather than an error.

        Returns:
            (ok, result): ok is False only on a real failure; result is
            None when the resource no longer exists
        """
        outcome = await self.api_request(
            ctx, "GET", path, result_type=result_type, diagnostics=diagnostics, options=HttpOption.ALLOW_404
        )
        if not outcome.ok or outcome.not_found:
            return outcome.ok, None
        return True, outcome.result

    async def create_and_wait_ready(
        self,
        ctx: OperationContext,
        method: str,
        path: str,
        body: Any,
        result_type: type[T],
        diagnostics: Diagnostics,
        ready_path: Optional[str] = None,
    ) -> Optional[T]:
        """
        Issue a create/update and wait for the resource to become ready.

        Args:
            ready_path: Path to poll; defaults to `path`. Pass the item path
                when the create POSTs to a collection.

        Returns:
            The mutation's decoded response if the resource became ready
        """
        outcome = await self.api_request(ctx, method, path, body, result_type, diagnostics=diagnostics)
        if not outcome.ok:
            return None
        if not await self.poller.wait_for_ready(ctx, ready_path or path, diagnostics):
            return None
        return outcome.result

    async def delete_and_wait(self, ctx: OperationContext, path: str, diagnostics: Diagnostics) -> bool:
        """DELETE (already gone is fine) and wait until GET returns 404."""
        outcome = await self.api_request(
            ctx, "DELETE", path, diagnostics=diagnostics, options=HttpOption.ALLOW_404
        )
        if not outcome.ok:
            return False
        return await self.poller.wait_for_removal(ctx, path, diagnostics)

    async def wait_for_ready(self, ctx: OperationContext, path: str, diagnostics: Diagnostics) -> bool:
        return await self.poller.wait_for_ready(ctx, path, diagnostics)

    async def wait_for_removal(self, ctx: OperationContext, path: str, diagnostics: Diagnostics) -> bool:
        return await self.poller.wait_for_removal(ctx, path, diagnostics)

    async def wait_for_build(
        self, ctx: OperationContext, path: str, diagnostics: Diagnostics
    ) -> Optional[BuildStatus]:
        return await self.poller.wait_for_build(ctx, path, diagnostics)

    async def wait_for_action(
        self, ctx: OperationContext, path: str, diagnostics: Diagnostics
    ) -> Optional[ActionStatus]:
        return await self.poller.wait_for_action(ctx, path, diagnostics)

    async def wait_for_registration(
        self, ctx: OperationContext, paths: RegistrationPaths, diagnostics: Diagnostics
    ) -> Optional[RegistrationResult]:
        return await self.poller.wait_for_registration(ctx, paths, diagnostics)
