"""
Probe protocol and attempt decisions.

A probe is one unit of repeatable work. Each invocation returns a
Decision; the engine never inspects why, it only follows the decision.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Protocol

from platform_provider.models.enums import DecisionKind

if TYPE_CHECKING:
    from platform_provider.retry.session import RetrySession


@dataclass(frozen=True)
class Decision:
    """
    Result of one probe attempt.

    Attributes:
        kind: RETRY, SUCCEED or FAIL
        reason: Why another attempt is needed (RETRY only, for logs)
        error: Terminal failure (FAIL only)
    """

    kind: DecisionKind
    reason: str = ""
    error: Optional[Exception] = None

    @classmethod
    def retry(cls, reason: str = "not ready yet") -> "Decision":
        return cls(DecisionKind.RETRY, reason=reason)

    @classmethod
    def succeed(cls) -> "Decision":
        return cls(DecisionKind.SUCCEED)

    @classmethod
    def fail(cls, error: Exception | str) -> "Decision":
        if isinstance(error, str):
            error = RuntimeError(error)
        return cls(DecisionKind.FAIL, error=error)

    @property
    def should_retry(self) -> bool:
        return self.kind is DecisionKind.RETRY


class Probe(Protocol):
    """
    Protocol for polling probes.

    `attempt` is invoked with the live session; session.attempt is the
    1-indexed attempt number and session.progress may be updated to
    annotate logs and cancellation messages.
    """

    async def attempt(self, session: "RetrySession") -> Decision:
        ...


class FunctionProbe:
    """Adapts a plain coroutine function `fn(session) -> Decision` to Probe."""

    def __init__(self, fn: Callable[["RetrySession"], Awaitable[Decision]]):
        self.fn = fn

    async def attempt(self, session: "RetrySession") -> Decision:
        return await self.fn(session)
