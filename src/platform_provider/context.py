"""
Operation context for cooperative cancellation.

Every resource operation owns one OperationContext. It carries a
cancellation flag and an optional deadline, and is threaded through the
executor and the retry engine so that an external timeout or shutdown
unblocks in-flight sleeps and HTTP calls promptly.
"""

import asyncio
import time
from typing import Optional


class OperationContext:
    """
    Cancellation flag plus optional monotonic deadline.

    The context is cancelled either explicitly via cancel() or implicitly
    once its deadline elapses. Both are reported as cancellation by the
    retry engine; the engine's own duration bound is a separate condition.

    Attributes:
        deadline: time.monotonic() value after which the context is done
        reason: Why the context was cancelled (None while active)
    """

    def __init__(self, deadline: Optional[float] = None):
        self.deadline = deadline
        self.reason: Optional[str] = None
        self._cancelled = asyncio.Event()

    @classmethod
    def with_timeout(cls, seconds: float) -> "OperationContext":
        """Create a context whose deadline is `seconds` from now."""
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self, reason: str = "context cancelled") -> None:
        if self.reason is None:
            self.reason = reason
        self._cancelled.set()

    @property
    def done(self) -> bool:
        """True once cancelled or past the deadline."""
        if self._cancelled.is_set():
            return True
        if self.deadline is not None and time.monotonic() >= self.deadline:
            self.cancel("context deadline exceeded")
            return True
        return False

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, None when there is no deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def clip(self, delay: float) -> float:
        """Limit a delay so it never runs past the deadline."""
        remaining = self.remaining()
        if remaining is not None and remaining < delay:
            return remaining
        return delay

    async def wait(self) -> None:
        """Block until the context is cancelled or the deadline passes."""
        timeout = self.remaining()
        if timeout is None:
            await self._cancelled.wait()
            return
        try:
            await asyncio.wait_for(self._cancelled.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            self.cancel("context deadline exceeded")

    async def sleep(self, delay: float) -> bool:
        """
        Sleep for `delay` seconds unless the context finishes first.

        Returns:
            True if the full delay elapsed, False if the context was
            cancelled (or hit its deadline) during the sleep.
        """
        if self.done:
            return False
        try:
            await asyncio.wait_for(self._cancelled.wait(), timeout=self.clip(delay))
        except asyncio.TimeoutError:
            return not self.done
        return False

    def __repr__(self) -> str:
        return f"OperationContext(deadline={self.deadline}, reason={self.reason!r})"
