"""
Unit tests for RetryEngine.

Probes are scripted sequences of decisions, so these tests pin down the
loop's contract independently of any HTTP traffic.
"""

import asyncio

import pytest
import structlog

from platform_provider.config import Settings
from platform_provider.context import OperationContext
from platform_provider.retry.engine import RetryEngine
from platform_provider.retry.exceptions import (
    ProbeFailed,
    RetryCancelled,
    RetryError,
    RetryTimeout,
)
from platform_provider.retry.probe import Decision, FunctionProbe
from platform_provider.retry.session import RetrySession
from platform_provider.retry.strategies import FixedBackoff


class ScriptedProbe:
    """Probe returning pre-scripted decisions; the last one repeats."""

    def __init__(self, *decisions: Decision, progress: str = ""):
        self.decisions = list(decisions)
        self.progress = progress
        self.calls: list[int] = []

    async def attempt(self, session: RetrySession) -> Decision:
        self.calls.append(session.attempt)
        if self.progress:
            session.progress = self.progress
        index = min(len(self.calls), len(self.decisions)) - 1
        return self.decisions[index]


def fast_engine(**kwargs) -> RetryEngine:
    return RetryEngine(backoff=FixedBackoff(0.001), **kwargs)


# ============================================================================
# Termination
# ============================================================================


@pytest.mark.asyncio
async def test_success_first_attempt(ctx):
    probe = ScriptedProbe(Decision.succeed())

    session = await fast_engine().run(ctx, "test", probe)

    assert probe.calls == [1]
    assert session.attempt == 1


@pytest.mark.asyncio
async def test_retries_until_success(ctx):
    probe = ScriptedProbe(Decision.retry(), Decision.retry(), Decision.succeed())

    session = await fast_engine().run(ctx, "test", probe)

    assert probe.calls == [1, 2, 3]
    assert session.attempt == 3


@pytest.mark.asyncio
async def test_fail_is_terminal(ctx):
    """Test no further attempts after a Fail decision."""
    error = ValueError("build failed")
    probe = ScriptedProbe(Decision.retry(), Decision.fail(error), Decision.succeed())

    with pytest.raises(ProbeFailed) as exc_info:
        await fast_engine().run(ctx, "build-check /b1", probe)

    assert probe.calls == [1, 2]
    assert exc_info.value.error is error
    assert exc_info.value.attempts == 2
    assert exc_info.value.session_name == "build-check /b1"


def test_fail_with_message_wraps_error():
    decision = Decision.fail("status-check failed")

    assert isinstance(decision.error, RuntimeError)
    assert str(decision.error) == "status-check failed"
    assert decision.should_retry is False
    assert Decision.retry().should_retry is True


@pytest.mark.asyncio
async def test_probe_exception_propagates(ctx):
    async def broken(session):
        raise KeyError("unexpected")

    with pytest.raises(KeyError):
        await fast_engine().run(ctx, "test", FunctionProbe(broken))


# ============================================================================
# Cancellation
# ============================================================================


@pytest.mark.asyncio
async def test_cancel_between_attempts_stops_loop():
    """Test context cancelled during attempt 2 prevents attempt 3."""
    ctx = OperationContext()

    async def always_retry(session):
        if session.attempt == 2:
            ctx.cancel()
        return Decision.retry()

    calls = []

    async def recording(session):
        calls.append(session.attempt)
        return await always_retry(session)

    with pytest.raises(RetryCancelled) as exc_info:
        await fast_engine().run(ctx, "ready-check /r1", FunctionProbe(recording))

    assert calls == [1, 2]
    assert exc_info.value.attempts == 2
    assert exc_info.value.reason == "context cancelled"


@pytest.mark.asyncio
async def test_cancel_during_sleep_is_prompt():
    """Test a long backoff sleep is interrupted by cancellation."""
    ctx = OperationContext()
    engine = RetryEngine(backoff=FixedBackoff(30.0))
    probe = ScriptedProbe(Decision.retry())

    task = asyncio.ensure_future(engine.run(ctx, "test", probe))
    await asyncio.sleep(0.01)
    ctx.cancel("shutdown")

    with pytest.raises(RetryCancelled) as exc_info:
        await asyncio.wait_for(task, timeout=1.0)

    assert probe.calls == [1]
    assert exc_info.value.reason == "shutdown"


@pytest.mark.asyncio
async def test_already_cancelled_context_never_probes():
    ctx = OperationContext()
    ctx.cancel()
    probe = ScriptedProbe(Decision.succeed())

    with pytest.raises(RetryCancelled) as exc_info:
        await fast_engine().run(ctx, "test", probe)

    assert probe.calls == []
    assert exc_info.value.attempts == 0


@pytest.mark.asyncio
async def test_context_deadline_is_cancellation():
    ctx = OperationContext.with_timeout(0.05)
    probe = ScriptedProbe(Decision.retry())

    with pytest.raises(RetryCancelled) as exc_info:
        await RetryEngine(backoff=FixedBackoff(0.01)).run(ctx, "test", probe)

    assert exc_info.value.reason == "context deadline exceeded"
    assert len(probe.calls) >= 1


@pytest.mark.asyncio
async def test_cancellation_message_includes_progress():
    ctx = OperationContext()
    probe = ScriptedProbe(Decision.retry(), progress="(waiting for completion - status: pending)")

    async def cancel_soon():
        await asyncio.sleep(0.01)
        ctx.cancel()

    canceller = asyncio.ensure_future(cancel_soon())
    with pytest.raises(RetryCancelled) as exc_info:
        await RetryEngine(backoff=FixedBackoff(0.005)).run(ctx, "build-check /b1", probe)
    await canceller

    assert "(waiting for completion - status: pending)" in str(exc_info.value)
    assert exc_info.value.progress == "(waiting for completion - status: pending)"


# ============================================================================
# Bounds
# ============================================================================


@pytest.mark.asyncio
async def test_max_attempts_is_timeout_not_failure(ctx):
    probe = ScriptedProbe(Decision.retry("not ready yet (status: pending)"))

    with pytest.raises(RetryTimeout) as exc_info:
        await fast_engine(max_attempts=3).run(ctx, "ready-check /r1", probe)

    assert probe.calls == [1, 2, 3]
    assert not isinstance(exc_info.value, ProbeFailed)
    assert exc_info.value.last_reason == "not ready yet (status: pending)"
    assert str(exc_info.value).startswith("timed out waiting for ready-check /r1")


@pytest.mark.asyncio
async def test_max_duration_is_timeout(ctx):
    probe = ScriptedProbe(Decision.retry())

    with pytest.raises(RetryTimeout):
        await RetryEngine(backoff=FixedBackoff(0.01), max_duration=0.05).run(ctx, "test", probe)

    assert len(probe.calls) >= 2


def test_all_terminal_errors_share_base():
    assert issubclass(ProbeFailed, RetryError)
    assert issubclass(RetryTimeout, RetryError)
    assert issubclass(RetryCancelled, RetryError)


def test_engine_from_settings():
    settings = Settings(RETRY_MAX_DURATION=60.0, RETRY_MAX_ATTEMPTS=0)

    engine = RetryEngine.from_settings(settings)

    assert engine.max_duration == 60.0
    assert engine.max_attempts is None
    assert engine.backoff.delay(1) == settings.RETRY_INITIAL_DELAY


def test_engine_rejects_zero_max_attempts():
    with pytest.raises(ValueError):
        RetryEngine(backoff=FixedBackoff(0.1), max_attempts=0)


# ============================================================================
# Log context
# ============================================================================


@pytest.mark.asyncio
async def test_session_and_attempt_bound_for_probe_logs(ctx):
    seen: list[dict] = []

    async def record(session: RetrySession) -> Decision:
        seen.append(structlog.contextvars.get_contextvars())
        return Decision.succeed() if session.attempt == 2 else Decision.retry()

    await fast_engine().run(ctx, "ready-check /api/v1/runtimes/r1", FunctionProbe(record))

    assert seen == [
        {"retry_session": "ready-check /api/v1/runtimes/r1", "attempt": 1},
        {"retry_session": "ready-check /api/v1/runtimes/r1", "attempt": 2},
    ]
    assert structlog.contextvars.get_contextvars() == {}


@pytest.mark.asyncio
async def test_log_context_cleared_after_failure(ctx):
    probe = ScriptedProbe(Decision.fail("boom"))

    with pytest.raises(ProbeFailed):
        await fast_engine().run(ctx, "test", probe)

    assert structlog.contextvars.get_contextvars() == {}
