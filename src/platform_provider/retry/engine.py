"""
Retry/poll engine.

Runs a probe repeatedly until it decides to succeed or fail, sleeping
between attempts according to a backoff strategy. The engine enforces two
boundaries and nothing else:

- the operation context (cancellation or deadline) -> RetryCancelled
- its own maximum duration / attempt count         -> RetryTimeout

Whether a given failure is worth retrying is always the probe's decision.

Usage:
    engine = RetryEngine.from_settings(settings)
    session = await engine.run(ctx, "ready-check /api/v1/runtimes/r1", probe)
"""

from typing import Optional

import structlog
from structlog.contextvars import bound_contextvars

from platform_provider.config import Settings
from platform_provider.context import OperationContext
from platform_provider.models.enums import DecisionKind
from platform_provider.monitoring.metrics import poll_attempts_total, poll_sessions_total
from platform_provider.retry.exceptions import ProbeFailed, RetryCancelled, RetryTimeout
from platform_provider.retry.probe import Probe
from platform_provider.retry.session import RetrySession
from platform_provider.retry.strategies import BackoffStrategy, ExponentialBackoff


logger = structlog.get_logger(__name__)


class RetryEngine:
    """
    Sequential poll loop with bounded backoff.

    Attempts within one session are strictly sequential. Sessions share no
    state, so one engine instance can serve any number of concurrent
    resource operations.

    Attributes:
        backoff: Delay policy between attempts
        max_duration: Upper bound on session wall time in seconds (None = unbounded)
        max_attempts: Upper bound on probe invocations (None = unbounded)
    """

    def __init__(
        self,
        backoff: BackoffStrategy,
        max_duration: Optional[float] = None,
        max_attempts: Optional[int] = None,
    ):
        if max_attempts is not None and max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.backoff = backoff
        self.max_duration = max_duration
        self.max_attempts = max_attempts

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryEngine":
        return cls(
            backoff=ExponentialBackoff.from_settings(settings),
            max_duration=settings.RETRY_MAX_DURATION or None,
            max_attempts=settings.RETRY_MAX_ATTEMPTS or None,
        )

    async def run(
        self,
        ctx: OperationContext,
        name: str,
        probe: Probe,
        protocol: str = "custom",
    ) -> RetrySession:
        """
        Invoke `probe` until it succeeds, fails, or a boundary is hit.

        Args:
            ctx: Operation context; checked before every attempt and
                observed during every sleep
            name: Session name for logs and error messages
            probe: Probe to invoke
            protocol: Metrics label for the polling protocol

        Returns:
            The finished session (attempt holds the number of attempts)

        Raises:
            ProbeFailed: The probe returned a Fail decision
            RetryTimeout: max_duration or max_attempts exceeded
            RetryCancelled: ctx was cancelled or hit its deadline
        """
        session = RetrySession(name=name)
        with bound_contextvars(retry_session=name):
            return await self._loop(ctx, session, probe, protocol)

    async def _loop(
        self,
        ctx: OperationContext,
        session: RetrySession,
        probe: Probe,
        protocol: str,
    ) -> RetrySession:
        name = session.name
        last_reason = ""

        while True:
            if ctx.done:
                # Only reachable before the first attempt; sleeps report cancellation below
                poll_sessions_total.labels(protocol=protocol, outcome="cancelled").inc()
                raise RetryCancelled(name, session.attempt - 1, ctx.reason or "context cancelled", session.progress)

            poll_attempts_total.labels(protocol=protocol).inc()
            with bound_contextvars(attempt=session.attempt):
                decision = await probe.attempt(session)

            if decision.kind is DecisionKind.SUCCEED:
                logger.debug(f"{name} attempt {session.attempt}: done", attempt=session.attempt)
                poll_sessions_total.labels(protocol=protocol, outcome="success").inc()
                return session

            if decision.kind is DecisionKind.FAIL:
                logger.error(
                    f"{name} attempt {session.attempt}: {decision.error}",
                    attempt=session.attempt,
                    progress=session.progress,
                )
                poll_sessions_total.labels(protocol=protocol, outcome="failed").inc()
                raise ProbeFailed(name, session.attempt, decision.error, session.progress)

            last_reason = decision.reason
            logger.debug(
                f"{name} attempt {session.attempt}: {decision.reason}",
                attempt=session.attempt,
                progress=session.progress,
            )

            if self.max_attempts is not None and session.attempt >= self.max_attempts:
                raise self._timeout(session, last_reason, protocol)

            delay = self.backoff.delay(session.attempt)
            if self.max_duration is not None:
                remaining = self.max_duration - session.elapsed
                if remaining <= 0:
                    raise self._timeout(session, last_reason, protocol)
                delay = min(delay, remaining)

            if not await ctx.sleep(delay):
                reason = ctx.reason or "context cancelled"
                logger.warning(
                    f"{name} cancelled after attempt {session.attempt}",
                    attempt=session.attempt,
                    reason=reason,
                    progress=session.progress,
                )
                poll_sessions_total.labels(protocol=protocol, outcome="cancelled").inc()
                raise RetryCancelled(name, session.attempt, reason, session.progress)

            session.attempt += 1

    def _timeout(self, session: RetrySession, last_reason: str, protocol: str) -> RetryTimeout:
        logger.warning(
            f"{session.name} gave up waiting",
            attempts=session.attempt,
            elapsed=round(session.elapsed, 3),
            last_reason=last_reason,
            progress=session.progress,
        )
        poll_sessions_total.labels(protocol=protocol, outcome="timeout").inc()
        return RetryTimeout(session.name, session.attempt, session.elapsed, last_reason, session.progress)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"backoff={self.backoff!r}, "
            f"max_duration={self.max_duration}, "
            f"max_attempts={self.max_attempts})"
        )
