"""
Backoff strategies for the retry engine.

Each strategy maps an attempt number to the delay before the next attempt.
Delays must be monotonically non-decreasing; the engine additionally clips
every delay to the session's remaining duration and to the context deadline.
"""

from typing import Protocol

from platform_provider.config import Settings


class BackoffStrategy(Protocol):
    """Protocol for delay policies between probe attempts."""

    def delay(self, attempt: int) -> float:
        """
        Delay in seconds after `attempt` (1-indexed) asked to retry.
        """
        ...


class ExponentialBackoff:
    """
    Capped exponential backoff: initial * factor^(attempt-1), at most maximum.

    With the defaults (0.5s, x2, 5s cap) the delays are
    0.5, 1, 2, 4, 5, 5, ...
    """

    def __init__(self, initial: float, maximum: float, factor: float = 2.0):
        if initial < 0 or maximum < initial:
            raise ValueError("require 0 <= initial <= maximum")
        if factor < 1.0:
            raise ValueError("factor must be >= 1.0")
        self.initial = initial
        self.maximum = maximum
        self.factor = factor
        self.name = "exponential"

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExponentialBackoff":
        return cls(
            initial=settings.RETRY_INITIAL_DELAY,
            maximum=settings.RETRY_MAX_DELAY,
            factor=settings.RETRY_BACKOFF_FACTOR,
        )

    def delay(self, attempt: int) -> float:
        delay = self.initial
        for _ in range(attempt - 1):
            if delay >= self.maximum:
                break
            delay *= self.factor
        return min(self.maximum, delay)

    def __repr__(self) -> str:
        return f"ExponentialBackoff(initial={self.initial}, maximum={self.maximum}, factor={self.factor})"


class FixedBackoff:
    """Constant delay between attempts."""

    def __init__(self, interval: float):
        if interval < 0:
            raise ValueError("interval must be >= 0")
        self.interval = interval
        self.name = "fixed"

    def delay(self, attempt: int) -> float:
        return self.interval

    def __repr__(self) -> str:
        return f"FixedBackoff(interval={self.interval})"
