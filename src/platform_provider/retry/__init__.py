"""
Retry/poll engine.

Runs caller-supplied probes until they reach a terminal decision, with
capped backoff between attempts and cooperative cancellation.

Main Components:
    - RetryEngine: The poll loop
    - Probe / Decision: What a probe is and what it can decide
    - BackoffStrategy: Delay policies (ExponentialBackoff, FixedBackoff)
    - RetrySession: Per-run state (attempt counter, progress annotation)
    - RetryError: ProbeFailed, RetryTimeout, RetryCancelled

Usage:
    >>> from platform_provider.retry import RetryEngine, Decision, FunctionProbe
    >>> engine = RetryEngine.from_settings(settings)
    >>> await engine.run(ctx, "eth_chainId", FunctionProbe(check_chain_id))
"""

from platform_provider.retry.engine import RetryEngine
from platform_provider.retry.exceptions import (
    ProbeFailed,
    RetryCancelled,
    RetryError,
    RetryTimeout,
)
from platform_provider.retry.probe import Decision, FunctionProbe, Probe
from platform_provider.retry.session import RetrySession
from platform_provider.retry.strategies import (
    BackoffStrategy,
    ExponentialBackoff,
    FixedBackoff,
)

__all__ = [
    "RetryEngine",
    "RetryError",
    "ProbeFailed",
    "RetryCancelled",
    "RetryTimeout",
    "Decision",
    "FunctionProbe",
    "Probe",
    "RetrySession",
    "BackoffStrategy",
    "ExponentialBackoff",
    "FixedBackoff",
]
