"""
Status-polling probes.

Each probe GETs a platform resource through the executor and turns what it
sees into a Decision. Failed GETs end the session: the executor has
already recorded the diagnostic, so the probe's own error is only used for
logging and never added to the sink again.
"""

from typing import Generic, Optional, TypeVar

import structlog

from platform_provider.context import OperationContext
from platform_provider.diagnostics import Diagnostics
from platform_provider.http.executor import ApiExecutor
from platform_provider.models.enums import CompletionState, HttpOption
from platform_provider.models.status_models import (
    CompletionStatus,
    ReadyStatus,
    RegistrationPaths,
    RegistrationResult,
    RegistrationStatus,
)
from platform_provider.retry.probe import Decision
from platform_provider.retry.session import RetrySession


logger = structlog.get_logger(__name__)

C = TypeVar("C", bound=CompletionStatus)


class ReadyProbe:
    """Polls until `status` equals "ready" (case-insensitive)."""

    def __init__(self, executor: ApiExecutor, ctx: OperationContext, path: str, diagnostics: Diagnostics):
        self.executor = executor
        self.ctx = ctx
        self.path = path
        self.diagnostics = diagnostics

    async def attempt(self, session: RetrySession) -> Decision:
        outcome = await self.executor.request(
            self.ctx, "GET", self.path, result_type=ReadyStatus, diagnostics=self.diagnostics
        )
        if not outcome.ok:
            return Decision.fail("ready-check failed")
        status = outcome.result
        if not status.is_ready:
            session.progress = f"(waiting for ready - status: {status.status})"
            return Decision.retry(f"not ready yet (status: {status.status})")
        return Decision.succeed()


class RemovalProbe:
    """Polls until GET returns 404."""

    def __init__(self, executor: ApiExecutor, ctx: OperationContext, path: str, diagnostics: Diagnostics):
        self.executor = executor
        self.ctx = ctx
        self.path = path
        self.diagnostics = diagnostics

    async def attempt(self, session: RetrySession) -> Decision:
        outcome = await self.executor.request(
            self.ctx, "GET", self.path, diagnostics=self.diagnostics, options=HttpOption.ALLOW_404
        )
        if not outcome.ok:
            return Decision.fail("removal-check failed")
        if outcome.not_found:
            return Decision.succeed()
        session.progress = "(waiting for removal)"
        return Decision.retry(f"still exists (status: {outcome.status})")


class CompletionProbe(Generic[C]):
    """
    Polls a build or action until it reports succeeded or failed.

    Every status string maps to exactly one of succeed, fail or retry.
    On "failed" the job's own error text is recorded as a diagnostic.

    Attributes:
        last: Most recently decoded status (the final one once terminal)
    """

    def __init__(
        self,
        executor: ApiExecutor,
        ctx: OperationContext,
        path: str,
        diagnostics: Diagnostics,
        result_type: type[C],
        label: str,
    ):
        self.executor = executor
        self.ctx = ctx
        self.path = path
        self.diagnostics = diagnostics
        self.result_type = result_type
        self.label = label
        self.last: Optional[C] = None

    async def attempt(self, session: RetrySession) -> Decision:
        outcome = await self.executor.request(
            self.ctx, "GET", self.path, result_type=self.result_type, diagnostics=self.diagnostics
        )
        if not outcome.ok:
            return Decision.fail(f"{self.label}-check failed")
        self.last = outcome.result
        status = self.last.status
        session.progress = f"(waiting for completion - status: {status})"
        if status == CompletionState.SUCCEEDED.value:
            return Decision.succeed()
        if status == CompletionState.FAILED.value:
            self.diagnostics.add_error(f"{self.label} failed", self.last.failure_detail())
            return Decision.fail(f"{self.label} failed")
        return Decision.retry(f"not ready yet (status: {status})")


class RegistrationProbe:
    """
    Drives two-phase self-registration: organization first, then node.

    Each attempt re-reads the combined status; registration POSTs are
    submitted at most once per sub-resource per session, and only ever
    when the latest GET shows they are still needed. Nothing is assumed
    from a POST having been accepted.

    Attributes:
        org_submitted: Organization registration already POSTed
        node_submitted: Node registration already POSTed
        result: Registration outputs once both are registered
    """

    def __init__(
        self,
        executor: ApiExecutor,
        ctx: OperationContext,
        paths: RegistrationPaths,
        diagnostics: Diagnostics,
    ):
        self.executor = executor
        self.ctx = ctx
        self.paths = paths
        self.diagnostics = diagnostics
        self.org_submitted = False
        self.node_submitted = False
        self.result: Optional[RegistrationResult] = None

    async def attempt(self, session: RetrySession) -> Decision:
        outcome = await self.executor.request(
            self.ctx, "GET", self.paths.status, result_type=RegistrationStatus, diagnostics=self.diagnostics
        )
        if not outcome.ok:
            return Decision.fail("status-check failed")
        status = outcome.result

        if status.registered:
            self.result = status.to_result()
            return Decision.succeed()

        if not status.org.registered:
            if not self.org_submitted:
                if not await self._register(self.paths.org, "org"):
                    return Decision.fail("org-register failed")
                self.org_submitted = True
        elif not status.node.registered:
            if not self.node_submitted:
                if not await self._register(self.paths.node, "node"):
                    return Decision.fail("node-register failed")
                self.node_submitted = True

        session.progress = (
            f"(waiting for registration - org: {_registered(status.org.registered)}, "
            f"node: {_registered(status.node.registered)})"
        )
        return Decision.retry("waiting for registration to complete")

    async def _register(self, path: str, which: str) -> bool:
        logger.info(f"Submitting {which} registration", path=path)
        outcome = await self.executor.request(self.ctx, "POST", path, body={}, diagnostics=self.diagnostics)
        return outcome.ok


def _registered(flag: bool) -> str:
    return "registered" if flag else "pending"
