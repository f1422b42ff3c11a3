"""
Status-polling protocols.

StatusPoller is the entry point the resource layer calls after a
mutation whose effect is asynchronous. Every wait_* method runs one probe
through the retry engine and reports failure through the diagnostics sink
rather than raising:

- probe failures were already recorded by the executor or the probe
- engine timeouts become "timed out waiting for ..." diagnostics
- cancellation becomes a "... cancelled" diagnostic

Usage:
    poller = StatusPoller(executor, engine)
    if await poller.wait_for_ready(ctx, "/api/v1/runtimes/r1", diagnostics):
        ...
"""

from typing import Optional, TypeVar

import structlog

from platform_provider.context import OperationContext
from platform_provider.diagnostics import Diagnostics
from platform_provider.http.executor import ApiExecutor
from platform_provider.models.status_models import (
    ActionStatus,
    BuildStatus,
    CompletionStatus,
    RegistrationPaths,
    RegistrationResult,
)
from platform_provider.polling.probes import (
    CompletionProbe,
    ReadyProbe,
    RegistrationProbe,
    RemovalProbe,
)
from platform_provider.retry.engine import RetryEngine
from platform_provider.retry.exceptions import ProbeFailed, RetryCancelled, RetryTimeout
from platform_provider.retry.probe import Probe


logger = structlog.get_logger(__name__)

C = TypeVar("C", bound=CompletionStatus)


class StatusPoller:
    """
    Ready, removal, completion and registration polling.

    Attributes:
        executor: Executor used for every GET/POST
        engine: Retry engine that schedules attempts
    """

    def __init__(self, executor: ApiExecutor, engine: RetryEngine):
        self.executor = executor
        self.engine = engine

    async def wait_for_ready(self, ctx: OperationContext, path: str, diagnostics: Diagnostics) -> bool:
        """Poll `path` until its status is "ready"."""
        probe = ReadyProbe(self.executor, ctx, path, diagnostics)
        return await self._poll(ctx, f"ready-check {path}", probe, "ready", diagnostics)

    async def wait_for_removal(self, ctx: OperationContext, path: str, diagnostics: Diagnostics) -> bool:
        """Poll `path` until GET returns 404."""
        probe = RemovalProbe(self.executor, ctx, path, diagnostics)
        return await self._poll(ctx, f"removal-check {path}", probe, "removal", diagnostics)

    async def wait_for_build(
        self, ctx: OperationContext, path: str, diagnostics: Diagnostics
    ) -> Optional[BuildStatus]:
        """Poll a build until it succeeds; compile errors are reported on failure."""
        return await self.wait_for_completion(ctx, path, diagnostics, BuildStatus, "build")

    async def wait_for_action(
        self, ctx: OperationContext, path: str, diagnostics: Diagnostics
    ) -> Optional[ActionStatus]:
        """Poll an action until it succeeds; the action error is reported on failure."""
        return await self.wait_for_completion(ctx, path, diagnostics, ActionStatus, "action")

    async def wait_for_completion(
        self,
        ctx: OperationContext,
        path: str,
        diagnostics: Diagnostics,
        result_type: type[C],
        label: str,
    ) -> Optional[C]:
        """
        Poll a long-running job until it reports succeeded or failed.

        Returns:
            The final status on success, None otherwise
        """
        probe = CompletionProbe(self.executor, ctx, path, diagnostics, result_type, label)
        if await self._poll(ctx, f"{label}-check {path}", probe, label, diagnostics):
            return probe.last
        return None

    async def wait_for_registration(
        self, ctx: OperationContext, paths: RegistrationPaths, diagnostics: Diagnostics
    ) -> Optional[RegistrationResult]:
        """
        Register the organization and then the node, polling until both
        report registered.

        Returns:
            Registration outputs on success, None otherwise
        """
        probe = RegistrationProbe(self.executor, ctx, paths, diagnostics)
        if await self._poll(ctx, f"registration-check {paths.status}", probe, "registration", diagnostics):
            return probe.result
        return None

    async def _poll(
        self,
        ctx: OperationContext,
        name: str,
        probe: Probe,
        protocol: str,
        diagnostics: Diagnostics,
    ) -> bool:
        try:
            session = await self.engine.run(ctx, name, probe, protocol=protocol)
        except ProbeFailed:
            return False
        except RetryTimeout as e:
            diagnostics.add_error(f"timed out waiting for {protocol}", e.message)
            return False
        except RetryCancelled as e:
            diagnostics.add_error(f"{protocol} cancelled", e.message)
            return False
        logger.debug(f"{name} complete", attempts=session.attempt, elapsed=round(session.elapsed, 3))
        return True
